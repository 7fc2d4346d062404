from abc import ABC, abstractmethod

class BaseCalendarProvider(ABC):
    """
    모든 캘린더 제공자(Provider)가 따라야 하는 기본 클래스(설계도).

    그리드/레이아웃 코어는 이 인터페이스의 fetch_events만 사용하며,
    구체적인 백엔드(로컬, 원격 동기화 등)에는 의존하지 않습니다.
    """

    @abstractmethod
    def fetch_events(self, start_date, end_date):
        """
        start_date ~ end_date(포함) 기간과 겹치는 이벤트를 반환해야 합니다.
        반환값: [EventInterval, ...] (시작 시각 순)
        """
        pass

    def search_events(self, query):
        """
        주어진 쿼리(검색어)와 일치하는 모든 이벤트를 반환합니다.
        반환값: [EventInterval, ...]
        """
        return []
