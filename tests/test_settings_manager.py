# tests/test_settings_manager.py
import unittest
import os
import shutil
import sys
import tempfile

# 프로젝트 루트 경로를 sys.path에 추가
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from settings_manager import save_settings, load_settings, CalendarSettings
from config import MONDAY, SUNDAY, DEFAULT_HOTKEYS
from error_messages import SettingsError

class TestSettingsFile(unittest.TestCase):

    def setUp(self):
        """임시 폴더에 설정 파일 경로를 만듭니다."""
        self.temp_dir = tempfile.mkdtemp()
        self.settings_file = os.path.join(self.temp_dir, "settings.json")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_load_settings(self):
        """설정을 저장하고 다시 불러오는 기능이 정상 동작하는지 테스트합니다."""
        test_settings = {
            "start_day_of_week": 6,
            "locale": "en_US.UTF-8",
            "slot_granularity_minutes": 30
        }
        save_settings(test_settings, self.settings_file)
        self.assertTrue(os.path.exists(self.settings_file))
        self.assertEqual(load_settings(self.settings_file), test_settings)

    def test_load_settings_no_file(self):
        """설정 파일이 없을 때, 빈 딕셔너리를 반환하는지 테스트합니다."""
        self.assertEqual(load_settings(self.settings_file), {})

    def test_load_settings_corrupted_file(self):
        """설정 파일이 손상되었을 때(JSON 형식이 아닐 때), 빈 딕셔너리를 반환하는지 테스트합니다."""
        with open(self.settings_file, 'w') as f:
            f.write("this is not a valid json")
        with self.assertLogs('settings_manager', level='WARNING'):
            self.assertEqual(load_settings(self.settings_file), {})

    def test_record_round_trip_through_file(self):
        settings = CalendarSettings(first_day_of_week=MONDAY, locale="de_DE.UTF-8", time_grid_start_hour=7)
        save_settings(settings.to_dict(), self.settings_file)
        self.assertEqual(CalendarSettings.load(self.settings_file), settings)


class TestCalendarSettings(unittest.TestCase):

    def test_defaults_derive_first_day_from_locale(self):
        self.assertEqual(CalendarSettings.from_dict({}).first_day_of_week, SUNDAY)
        self.assertEqual(CalendarSettings.from_dict({"locale": "de_DE.UTF-8"}).first_day_of_week, MONDAY)
        self.assertEqual(
            CalendarSettings.from_dict({"locale": "de_DE.UTF-8", "start_day_of_week": 6}).first_day_of_week,
            SUNDAY)

    def test_from_dict_reads_every_key(self):
        settings = CalendarSettings.from_dict({
            "start_day_of_week": 0,
            "show_week_numbers": False,
            "time_grid_start_hour": 6,
            "time_grid_end_hour": 22,
            "slot_granularity_minutes": 30,
            "max_visible_lanes": 5,
        })
        self.assertFalse(settings.week_numbers_enabled)
        self.assertEqual(settings.time_grid_start_hour, 6)
        self.assertEqual(settings.time_grid_end_hour, 22)
        self.assertEqual(settings.slot_granularity_minutes, 30)
        self.assertEqual(settings.max_visible_lanes_per_cell, 5)

    def test_invalid_values_raise(self):
        with self.assertRaises(SettingsError):
            CalendarSettings(first_day_of_week=2)
        with self.assertRaises(SettingsError):
            CalendarSettings(time_grid_start_hour=10, time_grid_end_hour=9)
        with self.assertRaises(SettingsError):
            CalendarSettings(slot_granularity_minutes=0)
        with self.assertRaises(SettingsError) as ctx:
            CalendarSettings(slot_granularity_minutes=7)
        self.assertEqual(ctx.exception.error_code, 'CONFIG_002')
        self.assertTrue(ctx.exception.suggestions)

    def test_hotkeys_merge_over_defaults(self):
        settings = CalendarSettings.from_dict({"hotkeys": {"Ctrl+T": "view_week"}})
        self.assertEqual(settings.hotkeys["Ctrl+T"], "view_week")
        self.assertEqual(settings.hotkeys["Ctrl+N"], DEFAULT_HOTKEYS["Ctrl+N"])
        settings.hotkeys["Ctrl+N"] = "changed"
        self.assertEqual(settings.hotkeys["Ctrl+N"], DEFAULT_HOTKEYS["Ctrl+N"])

    def test_with_changes(self):
        settings = CalendarSettings(first_day_of_week=MONDAY)
        changed = settings.with_changes(first_day_of_week=SUNDAY)
        self.assertEqual(settings.first_day_of_week, MONDAY)
        self.assertEqual(changed.first_day_of_week, SUNDAY)
        self.assertNotEqual(settings, changed)
        self.assertNotEqual(settings.cache_key(), changed.cache_key())
        with self.assertRaises(SettingsError) as ctx:
            settings.with_changes(window_opacity=0.5)
        self.assertEqual(ctx.exception.error_code, 'CONFIG_001')
        self.assertIn('window_opacity', str(ctx.exception))

    def test_read_only(self):
        settings = CalendarSettings()
        with self.assertRaises(AttributeError):
            settings.first_day_of_week = SUNDAY

    def test_equality_and_hash(self):
        self.assertEqual(CalendarSettings(), CalendarSettings())
        self.assertEqual(hash(CalendarSettings()), hash(CalendarSettings()))

if __name__ == '__main__':
    unittest.main()
