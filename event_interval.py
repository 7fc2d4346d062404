# event_interval.py
"""
Read-only projection of an event record that the layout engine consumes.

Event sources hand out dicts in the Google Calendar shape
(``{'id', 'summary', 'start': {'date' | 'dateTime'}, 'end': {...}}``);
``EventInterval.from_event_dict`` turns one into timezone-naive local times.
"""
import datetime
from collections import namedtuple

from dateutil import parser as dateutil_parser

ONE_DAY = datetime.timedelta(days=1)

_EventIntervalBase = namedtuple(
    "EventIntervalBase",
    ["id", "start", "end", "all_day", "spans_days", "summary", "calendar_id"],
)


class EventInterval(_EventIntervalBase):
    """
    start/end are naive datetimes, end exclusive. All-day events run from
    midnight of their first day to midnight after their last day.
    """
    __slots__ = ()

    def __new__(cls, id, start, end, all_day=False, spans_days=None, summary="", calendar_id=None):
        if isinstance(start, datetime.date) and not isinstance(start, datetime.datetime):
            start = datetime.datetime.combine(start, datetime.time.min)
        if isinstance(end, datetime.date) and not isinstance(end, datetime.datetime):
            end = datetime.datetime.combine(end, datetime.time.min)
        if end < start:
            start, end = end, start
        if spans_days is None:
            spans_days = _last_day(start, end) > start.date()
        return super().__new__(cls, id, start, end, bool(all_day), bool(spans_days), summary, calendar_id)

    @classmethod
    def all_day_event(cls, id, first_day, last_day=None, summary="", calendar_id=None):
        """종일 일정: last_day는 포함(inclusive)"""
        last_day = last_day or first_day
        return cls(id, first_day, last_day + ONE_DAY, all_day=True,
                   spans_days=last_day > first_day, summary=summary, calendar_id=calendar_id)

    @property
    def first_day(self):
        return self.start.date()

    @property
    def last_day(self):
        """Last calendar day the event touches (inclusive)."""
        return _last_day(self.start, self.end)

    @property
    def duration(self):
        return self.end - self.start

    def days(self):
        day, result = self.first_day, []
        while day <= self.last_day:
            result.append(day)
            day += ONE_DAY
        return result

    def overlaps_days(self, first_day, last_day):
        return self.first_day <= last_day and self.last_day >= first_day

    @classmethod
    def from_event_dict(cls, event, tz=None):
        """
        Google 형식 이벤트 딕셔너리를 EventInterval로 변환합니다.

        Args:
            event (dict): {'id', 'summary', 'start': {...}, 'end': {...}}
            tz (tzinfo): aware 시간을 변환할 로컬 시간대 (None이면 원래 벽시계 시간 유지)

        Raises:
            ValueError: start가 없거나 날짜를 해석할 수 없을 때
        """
        start_info = event.get('start') or {}
        end_info = event.get('end') or {}
        is_all_day = 'date' in start_info

        if is_all_day:
            start = datetime.date.fromisoformat(start_info['date'][:10])
            end_str = end_info.get('date')
            # Google 종일 일정의 end.date는 다음날(배타적)
            end = datetime.date.fromisoformat(end_str[:10]) if end_str else start + ONE_DAY
            if end <= start:
                end = start + ONE_DAY
        else:
            start_str = start_info.get('dateTime')
            if not start_str:
                raise ValueError(f"event {event.get('id')!r} has no start")
            start = _to_local_naive(dateutil_parser.isoparse(start_str), tz)
            end_str = end_info.get('dateTime')
            end = _to_local_naive(dateutil_parser.isoparse(end_str), tz) if end_str else start

        return cls(
            event.get('id', ''),
            start, end,
            all_day=is_all_day,
            summary=event.get('summary', ''),
            calendar_id=event.get('calendarId'),
        )


def _last_day(start, end):
    if end > start and end.time() == datetime.time.min:
        return (end - ONE_DAY).date()
    return end.date()


def _to_local_naive(dt, tz):
    if dt.tzinfo is None:
        return dt
    if tz is not None:
        dt = dt.astimezone(tz)
    return dt.replace(tzinfo=None)
