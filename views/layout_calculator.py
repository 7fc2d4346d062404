# views/layout_calculator.py
"""
이벤트 배치 계산기 (월간/주간/일간 뷰 공용)

MonthLayoutCalculator: 날짜 셀 위에 여러 날짜에 걸친 일정을 레인(lane)에 배치
WeekLayoutCalculator:  시간 그리드 위에 겹치는 일정을 나란히 배치 (+ 상단 종일 행)

두 계산기 모두 같은 입력이면 항상 같은 결과를 돌려준다 (정렬 키에 id 포함).
"""
import datetime
import logging
from collections import defaultdict, namedtuple

from config import DEFAULT_MAX_VISIBLE_LANES, MIN_TIMED_EVENT_WIDTH_MINUTES

logger = logging.getLogger(__name__)


class SpanKind:
    SINGLE = "single"
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


# row_or_day: 월간 그리드의 행 번호 (주간/일간 종일 행은 0)
# column: 그 날짜의 열 번호
LayoutSlot = namedtuple(
    "LayoutSlot",
    ["event_id", "row_or_day", "column", "date", "lane", "span_kind", "hidden"],
)

# 한 행 안에서 이어지는 구간 (그리기용)
RowSegment = namedtuple(
    "RowSegment",
    ["event_id", "row", "start_col", "end_col", "lane", "span_kind", "hidden"],
)

# 시간 그리드 배치: width/offset은 0~1 비율
TimedPlacement = namedtuple(
    "TimedPlacement",
    ["event_id", "date", "start", "end", "lane", "lane_count", "cluster", "width", "offset"],
)


def _span_kind(starts_here, ends_here):
    if starts_here and ends_here:
        return SpanKind.SINGLE
    if starts_here:
        return SpanKind.FIRST
    if ends_here:
        return SpanKind.LAST
    return SpanKind.MIDDLE


def _event_sort_key(event):
    # 종일 일정 먼저, 그 다음 시작 시각, 긴 일정 먼저, 마지막으로 id
    return (not event.all_day, event.start, -(event.end - event.start).total_seconds(), str(event.id))


class MonthLayoutCalculator:
    """
    날짜 구간 배치 (월간 그리드, 주간/일간의 종일 행).

    각 일정을 행(주)마다 [start_col, end_col] 구간으로 잘라 낸 뒤,
    (start_col, -길이) 순으로 정렬해 겹치지 않는 가장 낮은 레인에 넣는다.
    max_visible_lanes를 넘는 레인은 hidden=True로 표시하고 날짜별 "+N" 개수를 센다.
    """

    def __init__(self, events, rows, max_visible_lanes=DEFAULT_MAX_VISIBLE_LANES):
        """
        Args:
            events: EventInterval 목록
            rows: 날짜 행 목록 [[date, ...], ...] 또는 GridModel
            max_visible_lanes: 셀 하나에 그릴 수 있는 최대 레인 수
        """
        if hasattr(rows, 'rows'):
            rows = [[cell.date for cell in row if cell is not None] for row in rows.rows]
        self.rows = [list(row) for row in rows if row]
        self.events = sorted(events, key=_event_sort_key)
        self.max_visible_lanes = max_visible_lanes

        self.segments = []
        self.slots = []
        self.overflow_by_date = {}
        self.lanes_by_row = {}

    def calculate(self):
        """LayoutSlot 목록과 날짜별 숨김 개수(overflow)를 반환합니다."""
        self.segments, self.slots = [], []
        self.overflow_by_date, self.lanes_by_row = {}, {}

        if not self.events or not self.rows:
            return [], {}

        for row_index, row_dates in enumerate(self.rows):
            self._layout_row(row_index, row_dates)

        self.slots.sort(key=lambda s: (s.row_or_day, s.column, s.lane, str(s.event_id)))
        return self.slots, self.overflow_by_date

    def _row_segments(self, row_dates):
        col_of = {d: i for i, d in enumerate(row_dates)}
        row_start, row_end = row_dates[0], row_dates[-1]
        found = []
        for event in self.events:
            first, last = event.first_day, event.last_day
            if first > row_end or last < row_start:
                continue
            start_col = col_of.get(max(first, row_start))
            end_col = col_of.get(min(last, row_end))
            if start_col is None or end_col is None:
                # 행이 연속된 날짜가 아닐 때 (연간 미니 달력 등): 보이는 날짜만 사용
                visible = [col_of[d] for d in row_dates if first <= d <= last]
                if not visible:
                    continue
                start_col, end_col = min(visible), max(visible)
            found.append((start_col, end_col, event))
        # (start_col, -길이), 그 다음 이벤트 정렬 순서
        order = {id(e): i for i, e in enumerate(self.events)}
        found.sort(key=lambda seg: (seg[0], -(seg[1] - seg[0]), order[id(seg[2])]))
        return found

    def _layout_row(self, row_index, row_dates):
        occupied = defaultdict(set)  # col -> {lane}
        max_lane = -1
        events_per_col = defaultdict(int)

        for start_col, end_col, event in self._row_segments(row_dates):
            cols = range(start_col, end_col + 1)
            lane = 0
            while any(lane in occupied[c] for c in cols):
                lane += 1
            for c in cols:
                occupied[c].add(lane)
                events_per_col[c] += 1
            max_lane = max(max_lane, lane)

            hidden = lane >= self.max_visible_lanes
            kind = _span_kind(event.first_day == row_dates[start_col],
                              event.last_day == row_dates[end_col])
            self.segments.append(RowSegment(
                event.id, row_index, start_col, end_col, lane, kind, hidden))

            # 날짜마다 슬롯 하나, 종류는 이 행 구간의 종류를 따른다
            for c in cols:
                self.slots.append(LayoutSlot(
                    event.id, row_index, c, row_dates[c], lane, kind, hidden))

        self.lanes_by_row[row_index] = max_lane + 1
        for c, total in events_per_col.items():
            visible = sum(1 for lane in occupied[c] if lane < self.max_visible_lanes)
            hidden_count = total - visible
            if hidden_count > 0:
                self.overflow_by_date[row_dates[c]] = hidden_count

    def visible_segments(self):
        return [seg for seg in self.segments if not seg.hidden]


class WeekLayoutCalculator:
    """
    시간 구간 배치 (주간/일간 시간 그리드).

    하루의 시간 일정들을 겹침 묶음(cluster)으로 나누고, 각 묶음 안에서
    구간 분할(interval partitioning)로 레인을 배정한다. 묶음의 레인 수가
    폭(1/lane_count)과 가로 위치(lane/lane_count)를 결정한다.
    종일/여러 날 일정은 MonthLayoutCalculator로 상단 한 줄에 배치한다.
    """

    def __init__(self, time_events, all_day_events, days, max_visible_lanes=DEFAULT_MAX_VISIBLE_LANES):
        """
        Args:
            time_events: 하루 안의 시간 일정 (EventInterval)
            all_day_events: 종일 또는 여러 날에 걸친 일정
            days: 화면에 보이는 날짜 목록 또는 GridModel
        """
        if hasattr(days, 'rows'):
            days = [cell.date for cell in days.cells()]
        self.days = list(days)
        self.time_events = list(time_events)
        self.all_day_events = list(all_day_events)
        self.max_visible_lanes = max_visible_lanes

    @classmethod
    def from_events(cls, events, days, max_visible_lanes=DEFAULT_MAX_VISIBLE_LANES):
        """종일/여러 날 일정과 시간 일정을 나눠서 계산기를 만듭니다."""
        time_events, all_day_events = [], []
        for event in events:
            if event.all_day or event.spans_days:
                all_day_events.append(event)
            else:
                time_events.append(event)
        return cls(time_events, all_day_events, days, max_visible_lanes)

    @staticmethod
    def _effective_end(event):
        minimum = event.start + datetime.timedelta(minutes=MIN_TIMED_EVENT_WIDTH_MINUTES)
        return max(event.end, minimum)

    def _sort_key(self, event):
        # 시작 시각, 긴 일정 먼저, id
        return (event.start, -(self._effective_end(event) - event.start).total_seconds(), str(event.id))

    def calculate_time_events(self):
        """TimedPlacement 목록 (날짜, 레인 순)"""
        visible = set(self.days)
        events_by_day = defaultdict(list)
        for event in self.time_events:
            day = event.start.date()
            if day in visible:
                events_by_day[day].append(event)

        placements = []
        for day in sorted(events_by_day):
            placements.extend(self.layout_day(day, events_by_day[day]))
        return placements

    def layout_day(self, day, day_events):
        ordered = sorted(day_events, key=self._sort_key)
        placements = []
        for cluster_index, cluster in enumerate(self._group_overlapping_events(ordered)):
            lanes = self._partition_lanes(cluster)
            lane_count = max(lanes.values()) + 1
            for event in cluster:
                lane = lanes[id(event)]
                placements.append(TimedPlacement(
                    event.id, day, event.start, self._effective_end(event),
                    lane, lane_count, cluster_index,
                    1.0 / lane_count, lane / lane_count))
        return placements

    def _group_overlapping_events(self, ordered):
        if not ordered:
            return []

        groups = []
        current_group = [ordered[0]]
        group_end = self._effective_end(ordered[0])

        for event in ordered[1:]:
            if event.start < group_end:
                current_group.append(event)
                group_end = max(group_end, self._effective_end(event))
            else:
                groups.append(current_group)
                current_group = [event]
                group_end = self._effective_end(event)

        groups.append(current_group)
        return groups

    def _partition_lanes(self, cluster):
        """가장 낮은 번호의 비어 있는 레인을 재사용, 없으면 새 레인을 연다."""
        lane_ends = []  # lane -> 현재 점유 일정의 끝 시각
        assignment = {}
        for event in cluster:
            for lane, lane_end in enumerate(lane_ends):
                if lane_end <= event.start:
                    lane_ends[lane] = self._effective_end(event)
                    assignment[id(event)] = lane
                    break
            else:
                lane_ends.append(self._effective_end(event))
                assignment[id(event)] = len(lane_ends) - 1
        return assignment

    def calculate_all_day_events(self):
        """종일 행 배치: (LayoutSlot 목록, 날짜별 overflow, 레인 수)"""
        calculator = MonthLayoutCalculator(self.all_day_events, [self.days], self.max_visible_lanes)
        slots, overflow = calculator.calculate()
        return slots, overflow, calculator.lanes_by_row.get(0, 0)
