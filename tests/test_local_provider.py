# tests/test_local_provider.py
import unittest
import datetime
import os
import sys

# 테스트 대상 모듈을 import하기 위해 경로를 추가합니다.
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from providers.local_provider import LocalCalendarProvider
from config import LOCAL_CALENDAR_ID, LOCAL_CALENDAR_PROVIDER_NAME
from event_interval import EventInterval
from selection import SelectionCommitted, DateRange, TimeRange

D = datetime.date
DT = datetime.datetime


class TestEventInterval(unittest.TestCase):

    def test_all_day_event_dict(self):
        """Google 종일 일정: end.date는 배타적"""
        event = {'id': 'trip', 'summary': '출장',
                 'start': {'date': '2024-02-05'}, 'end': {'date': '2024-02-08'}}
        interval = EventInterval.from_event_dict(event)
        self.assertTrue(interval.all_day)
        self.assertTrue(interval.spans_days)
        self.assertEqual(interval.first_day, D(2024, 2, 5))
        self.assertEqual(interval.last_day, D(2024, 2, 7))
        self.assertEqual(interval.days(), [D(2024, 2, 5), D(2024, 2, 6), D(2024, 2, 7)])

    def test_all_day_without_end(self):
        interval = EventInterval.from_event_dict({'id': 'x', 'start': {'date': '2024-02-05'}})
        self.assertEqual(interval.last_day, D(2024, 2, 5))
        self.assertFalse(interval.spans_days)

    def test_timed_event_dict(self):
        event = {'id': 'm', 'start': {'dateTime': '2024-02-05T09:00:00'},
                 'end': {'dateTime': '2024-02-05T10:30:00'}}
        interval = EventInterval.from_event_dict(event)
        self.assertFalse(interval.all_day)
        self.assertFalse(interval.spans_days)
        self.assertEqual(interval.duration, datetime.timedelta(minutes=90))

    def test_timed_event_ending_at_midnight_stays_on_one_day(self):
        interval = EventInterval('late', DT(2024, 2, 5, 22, 0), DT(2024, 2, 6, 0, 0))
        self.assertEqual(interval.last_day, D(2024, 2, 5))
        self.assertFalse(interval.spans_days)

    def test_aware_times_convert_to_local(self):
        seoul = datetime.timezone(datetime.timedelta(hours=9))
        event = {'id': 'utc', 'start': {'dateTime': '2024-02-05T09:00:00Z'},
                 'end': {'dateTime': '2024-02-05T10:00:00Z'}}
        interval = EventInterval.from_event_dict(event, tz=seoul)
        self.assertEqual(interval.start, DT(2024, 2, 5, 18, 0))
        self.assertIsNone(interval.start.tzinfo)

    def test_reversed_times_are_swapped(self):
        interval = EventInterval('r', DT(2024, 2, 5, 10, 0), DT(2024, 2, 5, 9, 0))
        self.assertEqual(interval.start, DT(2024, 2, 5, 9, 0))

    def test_missing_start_raises(self):
        with self.assertRaises(ValueError):
            EventInterval.from_event_dict({'id': 'bad', 'start': {}, 'end': {}})


class TestLocalCalendarProvider(unittest.TestCase):

    def setUp(self):
        """각 테스트 메소드 실행 전에 호출됩니다."""
        self.provider = LocalCalendarProvider({})
        self.sample_event = {
            'id': 'test-event-123',
            'summary': '테스트 이벤트',
            'start': {'date': '2025-08-15'},
            'end': {'date': '2025-08-16'}
        }

    def test_add_and_fetch_event(self):
        """이벤트 추가 및 조회 기능을 테스트합니다."""
        event_id = self.provider.add_event(self.sample_event)
        self.assertEqual(event_id, 'test-event-123')

        events = self.provider.fetch_events(D(2025, 8, 1), D(2025, 8, 31))
        self.assertEqual(len(events), 1, "이벤트가 정확히 1개 조회되어야 합니다.")
        self.assertEqual(events[0].summary, '테스트 이벤트')
        self.assertEqual(events[0].calendar_id, LOCAL_CALENDAR_ID)

        self.assertEqual(self.provider.fetch_events(D(2025, 9, 1), D(2025, 9, 30)), [])

    def test_generated_id_and_provider(self):
        body = {'summary': 'no id', 'start': {'date': '2025-08-15'}}
        event_id = self.provider.add_event(body)
        self.assertTrue(event_id)
        self.assertEqual(self.provider.name, LOCAL_CALENDAR_PROVIDER_NAME)

    def test_fetch_is_sorted(self):
        self.provider.add_event({'id': 'b', 'start': {'dateTime': '2025-08-15T10:00:00'},
                                 'end': {'dateTime': '2025-08-15T11:00:00'}})
        self.provider.add_event({'id': 'a', 'start': {'dateTime': '2025-08-15T09:00:00'},
                                 'end': {'dateTime': '2025-08-15T11:00:00'}})
        self.provider.add_event(self.sample_event)
        ids = [e.id for e in self.provider.fetch_events(D(2025, 8, 15), D(2025, 8, 15))]
        self.assertEqual(ids, ['test-event-123', 'a', 'b'])

    def test_bad_event_is_skipped(self):
        self.provider.add_event(self.sample_event)
        self.provider.add_event({'id': 'broken', 'start': {'dateTime': 'not a date'}})
        with self.assertLogs('providers.local_provider', level='WARNING'):
            events = self.provider.fetch_events(D(2025, 8, 1), D(2025, 8, 31))
        self.assertEqual([e.id for e in events], ['test-event-123'])

    def test_delete_event(self):
        self.provider.add_event(self.sample_event)
        self.assertTrue(self.provider.delete_event('test-event-123'))
        self.assertFalse(self.provider.delete_event('test-event-123'))
        self.assertEqual(self.provider.fetch_events(D(2025, 8, 1), D(2025, 8, 31)), [])

    def test_search_events(self):
        self.provider.add_event(self.sample_event)
        self.assertEqual(len(self.provider.search_events('테스트')), 1)
        self.assertEqual(self.provider.search_events('없음'), [])
        self.assertEqual(self.provider.search_events('  '), [])

    def test_committed_selection_becomes_event(self):
        all_day_id = self.provider.add_committed_selection(
            SelectionCommitted(DateRange(D(2025, 8, 3), D(2025, 8, 1))), summary="휴가")
        timed_id = self.provider.add_committed_selection(
            SelectionCommitted(TimeRange(D(2025, 8, 2), 9 * 60, 10 * 60)))

        events = {e.id: e for e in self.provider.fetch_events(D(2025, 8, 1), D(2025, 8, 31))}
        vacation = events[all_day_id]
        self.assertTrue(vacation.all_day)
        self.assertEqual((vacation.first_day, vacation.last_day), (D(2025, 8, 1), D(2025, 8, 3)))
        self.assertEqual(vacation.summary, "휴가")
        self.assertEqual(events[timed_id].start, DT(2025, 8, 2, 9, 0))


if __name__ == '__main__':
    unittest.main()
