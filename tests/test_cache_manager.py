# tests/test_cache_manager.py
import unittest
import datetime
import os
import sys

# 프로젝트 루트 경로를 sys.path에 추가
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from cache_manager import PeriodCache
from config import MONDAY, SUNDAY
from grid_model import Granularity
from settings_manager import CalendarSettings

D = datetime.date
MONTH = Granularity.MONTH


class TestPeriodCache(unittest.TestCase):

    def setUp(self):
        self.settings = CalendarSettings(first_day_of_week=MONDAY)
        self.cache = PeriodCache(today=D(2024, 2, 14))

    def test_second_request_is_a_hit(self):
        first = self.cache.get_or_build(MONTH, D(2024, 2, 3), self.settings)
        second = self.cache.get_or_build(MONTH, D(2024, 2, 20), self.settings)
        self.assertIs(first, second)
        self.assertEqual(self.cache.build_count, 1)
        self.assertEqual(self.cache.hits, 1)
        self.assertEqual(self.cache.misses, 1)

    def test_flipping_between_months_does_not_rebuild(self):
        for anchor in (D(2024, 2, 1), D(2024, 3, 1), D(2024, 2, 1), D(2024, 3, 1)):
            self.cache.get_or_build(MONTH, anchor, self.settings)
        self.assertEqual(self.cache.build_count, 2)
        self.assertEqual(len(self.cache), 2)

    def test_equal_settings_record_keeps_entries(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.cache.get_or_build(MONTH, D(2024, 2, 1), CalendarSettings(first_day_of_week=MONDAY))
        self.assertEqual(self.cache.build_count, 1)

    def test_first_day_change_rebuilds(self):
        grid = self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.assertEqual(grid.first_day_of_week, MONDAY)

        sunday = self.settings.with_changes(first_day_of_week=SUNDAY)
        rebuilt = self.cache.get_or_build(MONTH, D(2024, 2, 1), sunday)
        self.assertEqual(self.cache.build_count, 2)
        self.assertEqual(rebuilt.first_day_of_week, SUNDAY)
        self.assertEqual(rebuilt.row_dates(0)[0], D(2024, 1, 28))

    def test_locale_change_clears_everything(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.cache.get_or_build(MONTH, D(2024, 3, 1), self.settings)
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings.with_changes(locale="de_DE.UTF-8"))
        self.assertEqual(len(self.cache), 1)
        self.assertEqual(self.cache.build_count, 3)

    def test_any_record_difference_clears_entries(self):
        """그리드와 무관한 값(슬롯 크기)이 달라도 레코드가 다르면 캐시를 비웁니다."""
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        changed = self.settings.with_changes(slot_granularity_minutes=30)
        self.cache.get_or_build(MONTH, D(2024, 2, 1), changed)
        self.assertEqual(self.cache.build_count, 2)
        self.assertEqual(self.cache.stats()['settings'], changed.cache_key())

    def test_invalidate(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.cache.invalidate()
        self.assertEqual(len(self.cache), 0)
        self.assertIsNone(self.cache.settings)
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.assertEqual(self.cache.build_count, 2)

    def test_week_buckets_follow_first_day(self):
        self.cache.get_or_build(Granularity.WEEK, D(2024, 2, 15), self.settings)
        self.cache.get_or_build(Granularity.WEEK, D(2024, 2, 18), self.settings)
        self.assertEqual(self.cache.build_count, 1)
        self.assertIn((Granularity.WEEK, D(2024, 2, 12)), self.cache)

    def test_refresh_today_rebuilds_only_affected_grids(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.cache.get_or_build(MONTH, D(2024, 4, 1), self.settings)

        rebuilt = self.cache.refresh_today(D(2024, 2, 15))
        self.assertEqual(rebuilt, [(MONTH, D(2024, 2, 1))])
        grid = self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        today_cells = [cell.date for cell in grid.cells() if cell.is_today]
        self.assertEqual(today_cells, [D(2024, 2, 15)])

        self.assertEqual(self.cache.refresh_today(D(2024, 2, 15)), [])

    def test_refresh_today_across_month_boundary(self):
        cache = PeriodCache(today=D(2024, 2, 29))
        cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        cache.get_or_build(MONTH, D(2024, 3, 1), self.settings)
        rebuilt = cache.refresh_today(D(2024, 3, 1))
        self.assertEqual(sorted(rebuilt), [(MONTH, D(2024, 2, 1)), (MONTH, D(2024, 3, 1))])

    def test_precache_surrounding(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 10), self.settings)
        self.cache.precache_surrounding(MONTH, D(2024, 2, 10), self.settings)
        self.assertEqual(len(self.cache), 3)
        self.assertIn((MONTH, D(2024, 1, 1)), self.cache)
        self.assertIn((MONTH, D(2024, 3, 1)), self.cache)

    def test_cleanup_keeps_radius(self):
        for month in range(1, 13):
            self.cache.get_or_build(MONTH, D(2024, month, 1), self.settings)
        removed = self.cache.cleanup(MONTH, D(2024, 6, 15), 2)
        self.assertEqual(removed, 7)
        self.assertEqual(len(self.cache), 5)
        self.assertIn((MONTH, D(2024, 4, 1)), self.cache)
        self.assertNotIn((MONTH, D(2024, 3, 1)), self.cache)

    def test_stats(self):
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        self.cache.get_or_build(MONTH, D(2024, 2, 1), self.settings)
        stats = self.cache.stats()
        self.assertEqual(stats['entries'], 1)
        self.assertEqual(stats['builds'], 1)
        self.assertEqual(stats['hits'], 1)
        self.assertEqual(stats['misses'], 1)
        self.assertEqual(stats['settings'], self.settings.cache_key())


if __name__ == '__main__':
    unittest.main()
