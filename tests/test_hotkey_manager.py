# tests/test_hotkey_manager.py
import unittest
import os
import sys

# 프로젝트 루트 경로를 sys.path에 추가
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from hotkey_manager import HotkeyManager, normalize_hotkey
from settings_manager import CalendarSettings


class TestHotkeyManager(unittest.TestCase):

    def test_normalize_hotkey(self):
        self.assertEqual(normalize_hotkey("Ctrl + T"), "ctrl+t")
        self.assertEqual(normalize_hotkey("T+Ctrl"), "ctrl+t")
        self.assertEqual(normalize_hotkey("shift+control+f1"), "ctrl+shift+f1")
        self.assertEqual(normalize_hotkey("Esc"), "escape")
        self.assertIsNone(normalize_hotkey(""))
        self.assertIsNone(normalize_hotkey(None))

    def test_default_bindings(self):
        manager = HotkeyManager()
        self.assertEqual(manager.resolve("ctrl + t"), "today")
        self.assertEqual(manager.resolve("Ctrl+N"), "new_event")
        self.assertEqual(manager.resolve("ctrl+3"), "view_day")
        self.assertEqual(manager.resolve("Escape"), "cancel_selection")
        self.assertIsNone(manager.resolve("ctrl+q"))

    def test_bindings_from_settings(self):
        manager = HotkeyManager(CalendarSettings.from_dict({"hotkeys": {"Ctrl+T": "view_week"}}))
        self.assertEqual(manager.resolve("ctrl+t"), "view_week")
        self.assertEqual(manager.resolve("ctrl+n"), "new_event")

        manager.load_bindings({"hotkeys": {"Alt+N": "new_event"}})
        self.assertEqual(manager.resolve("alt+n"), "new_event")
        self.assertEqual(manager.resolve("ctrl+t"), "today")

    def test_handle_key_emits_action(self):
        manager = HotkeyManager()
        triggered = []
        manager.hotkey_triggered.connect(triggered.append)
        self.assertTrue(manager.handle_key("Ctrl+1"))
        self.assertFalse(manager.handle_key("Ctrl+9"))
        self.assertEqual(triggered, ["view_month"])


if __name__ == '__main__':
    unittest.main()
