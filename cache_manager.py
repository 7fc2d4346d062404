import logging

from grid_model import (anchor_bucket, build_grid_for_settings, shift_period,
                        period_distance, Granularity)

logger = logging.getLogger(__name__)


class CacheEntry:
    """캐시 항목: (granularity, anchor_bucket) 하나에 대한 그리드"""

    def __init__(self, grid, today):
        self.grid = grid
        self.today = today

    def is_stale_for(self, today):
        if self.today == today:
            return False
        # 오늘 표시가 바뀌는 그리드만 다시 만든다
        return any(d is not None and self.grid.contains(d) for d in (self.today, today))


class PeriodCache:
    """
    build_grid 결과를 (granularity, anchor_bucket) 단위로 저장하는 캐시.

    설정(CalendarSettings)이 바뀌면 전체를 비우고, 탐색(이전/다음/오늘)은
    캐시를 비우지 않는다. 같은 설정에서 같은 기간은 한 번만 빌드한다.
    """

    def __init__(self, today=None, builder=build_grid_for_settings):
        self._entries = {}
        self._settings = None
        self._builder = builder
        self.today = today
        self.build_count = 0
        self.hits = 0
        self.misses = 0

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    @property
    def settings(self):
        return self._settings

    def _key(self, granularity, anchor, settings):
        return (granularity, anchor_bucket(granularity, anchor, settings.first_day_of_week))

    def _build(self, key, settings):
        granularity, bucket = key
        self.build_count += 1
        grid = self._builder(granularity, bucket, settings, today=self.today)
        self._entries[key] = CacheEntry(grid, self.today)
        logger.debug(f"캐시 빌드 #{self.build_count}: {granularity} {bucket.isoformat()}")
        return grid

    def get_or_build(self, granularity, anchor, settings):
        """캐시된 그리드를 반환하거나, 없으면 만들어서 저장 후 반환합니다."""
        Granularity.validate(granularity)
        if settings != self._settings:
            if self._entries:
                logger.info("설정 변경으로 그리드 캐시 전체 무효화")
            self._entries.clear()
            self._settings = settings

        key = self._key(granularity, anchor, settings)
        entry = self._entries.get(key)
        if entry is not None:
            self.hits += 1
            return entry.grid

        self.misses += 1
        return self._build(key, settings)

    def invalidate(self):
        """설정 변경 메시지에서 호출: 모든 항목을 버린다."""
        count = len(self._entries)
        self._entries.clear()
        self._settings = None
        logger.info(f"그리드 캐시 무효화: {count}개 항목 제거")

    clear = invalidate

    def refresh_today(self, today):
        """시계 틱: '오늘' 표시가 달라지는 항목만 다시 빌드합니다."""
        if today == self.today:
            return []
        self.today = today
        rebuilt = []
        for key, entry in list(self._entries.items()):
            if entry.is_stale_for(today):
                self._build(key, self._settings)
                rebuilt.append(key)
        if rebuilt:
            logger.info(f"오늘 날짜 변경({today}): {len(rebuilt)}개 그리드 재빌드")
        return rebuilt

    def precache_surrounding(self, granularity, anchor, settings, before=1, after=1):
        """현재 기간 앞뒤의 기간을 미리 빌드합니다."""
        grids = []
        for step in list(range(-before, 0)) + list(range(1, after + 1)):
            grids.append(self.get_or_build(granularity, shift_period(granularity, anchor, step), settings))
        return grids

    def cleanup(self, granularity, anchor, keep_radius):
        """anchor에서 keep_radius 기간보다 먼 같은 granularity 항목을 제거합니다."""
        if self._settings is None:
            return 0
        current = anchor_bucket(granularity, anchor, self._settings.first_day_of_week)
        doomed = [
            key for key in self._entries
            if key[0] == granularity and period_distance(granularity, key[1], current) > keep_radius
        ]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug(f"캐시 정리: {len(doomed)}개 항목 제거")
        return len(doomed)

    def stats(self):
        return {
            'entries': len(self._entries),
            'builds': self.build_count,
            'hits': self.hits,
            'misses': self.misses,
            'settings': self._settings.cache_key() if self._settings else None,
        }
