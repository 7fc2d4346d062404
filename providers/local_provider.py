import logging
import uuid

from .base_provider import BaseCalendarProvider
from config import LOCAL_CALENDAR_ID, LOCAL_CALENDAR_PROVIDER_NAME
from event_interval import EventInterval

logger = logging.getLogger(__name__)


class LocalCalendarProvider(BaseCalendarProvider):
    """
    메모리에 이벤트 딕셔너리를 보관하는 로컬 제공자.

    이벤트 생성 협력자(SelectionCommitted 소비자)가 add_event로 일정을 넣고,
    뷰는 fetch_events로 기간별 스냅샷을 읽어갑니다.
    """

    def __init__(self, settings=None, events=None, tz=None):
        self.settings = settings or {}
        self.name = LOCAL_CALENDAR_PROVIDER_NAME
        self.tz = tz
        self._events = {}
        for event in events or []:
            self.add_event(event)

    def add_event(self, event_data):
        event = dict(event_data)
        event.setdefault('id', uuid.uuid4().hex)
        event.setdefault('calendarId', LOCAL_CALENDAR_ID)
        event.setdefault('provider', LOCAL_CALENDAR_PROVIDER_NAME)
        self._events[event['id']] = event
        return event['id']

    def add_committed_selection(self, committed, summary=""):
        """선택 엔진의 커밋 결과를 새 일정으로 저장합니다."""
        return self.add_event(committed.to_event_dict(summary=summary))

    def delete_event(self, event_id):
        return self._events.pop(event_id, None) is not None

    def _intervals(self):
        intervals = []
        for event in self._events.values():
            try:
                intervals.append(EventInterval.from_event_dict(event, tz=self.tz))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"이벤트 변환 실패, 건너뜀: {e}, 이벤트: {event.get('summary', '')}")
        return intervals

    def fetch_events(self, start_date, end_date):
        found = [iv for iv in self._intervals() if iv.overlaps_days(start_date, end_date)]
        found.sort(key=lambda iv: (iv.start, iv.end, str(iv.id)))
        return found

    def search_events(self, query):
        query = (query or "").strip().lower()
        if not query:
            return []
        return [iv for iv in self._intervals() if query in (iv.summary or "").lower()]
