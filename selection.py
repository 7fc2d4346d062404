# selection.py
"""
Drag-to-select state machine for the calendar grids.

``SelectionEngine`` consumes pointer and keyboard input resolved against the
active ``GridModel`` and keeps exactly one ``SelectionState``. Releasing the
pointer returns a ``SelectionCommitted`` value and puts the engine back to
idle; the engine never creates events itself.
"""
import datetime
import logging
from collections import namedtuple

from config import (DEFAULT_SLOT_GRANULARITY_MINUTES, DEFAULT_TIME_GRID_START_HOUR,
                    DEFAULT_TIME_GRID_END_HOUR, MIN_EVENT_DURATION_MINUTES)
from date_math import date_range

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


class DateRange(namedtuple("DateRange", ["start", "end"])):
    """Inclusive range of whole days, always start <= end."""
    __slots__ = ()

    def __new__(cls, start, end):
        if end < start:
            start, end = end, start
        return super().__new__(cls, start, end)

    def contains(self, date_obj):
        return self.start <= date_obj <= self.end

    def is_multi_day(self):
        return self.end > self.start

    def day_count(self):
        return (self.end - self.start).days + 1

    def dates(self):
        return date_range(self.start, self.end)


class TimeRange(namedtuple("TimeRange", ["day", "start_minute", "end_minute"])):
    """
    A span of minutes inside one day. ``end_minute`` may be 1440 (midnight
    at the end of ``day``).
    """
    __slots__ = ()

    def __new__(cls, day, start_minute, end_minute):
        if end_minute < start_minute:
            start_minute, end_minute = end_minute, start_minute
        return super().__new__(cls, day, start_minute, end_minute)

    @property
    def start(self):
        return _at_minute(self.day, self.start_minute)

    @property
    def end(self):
        return _at_minute(self.day, self.end_minute)

    def duration_minutes(self):
        return self.end_minute - self.start_minute

    def contains(self, moment):
        """moment: datetime, end exclusive"""
        return self.start <= moment < self.end


class SelectionCommitted(namedtuple("SelectionCommitted", ["range"])):
    """Finished selection handed to the event-creation collaborator."""
    __slots__ = ()

    @property
    def is_time_range(self):
        return isinstance(self.range, TimeRange)

    def to_event_dict(self, summary=""):
        """Google 형식 이벤트 딕셔너리 (종일 일정의 end.date는 배타적)"""
        if self.is_time_range:
            return {
                'summary': summary,
                'start': {'dateTime': self.range.start.isoformat()},
                'end': {'dateTime': self.range.end.isoformat()},
            }
        return {
            'summary': summary,
            'start': {'date': self.range.start.isoformat()},
            'end': {'date': (self.range.end + datetime.timedelta(days=1)).isoformat()},
        }


class SelectionState:
    """
    Tagged state value. ``kind`` is one of IDLE, DRAGGING_DATE_RANGE,
    DRAGGING_TIME_RANGE. ``anchor``/``current`` are dates for date drags and
    slot start minutes of ``day`` for time drags.
    """
    IDLE = "idle"
    DRAGGING_DATE_RANGE = "dragging_date_range"
    DRAGGING_TIME_RANGE = "dragging_time_range"

    def __init__(self, kind=IDLE, anchor=None, current=None, day=None):
        self.kind = kind
        self.anchor = anchor
        self.current = current
        self.day = day

    @classmethod
    def idle(cls):
        return cls()

    @classmethod
    def dragging_dates(cls, anchor, current):
        return cls(cls.DRAGGING_DATE_RANGE, anchor, current)

    @classmethod
    def dragging_times(cls, day, anchor_slot, current_slot):
        return cls(cls.DRAGGING_TIME_RANGE, anchor_slot, current_slot, day)

    @property
    def is_idle(self):
        return self.kind == self.IDLE

    def __eq__(self, other):
        if not isinstance(other, SelectionState):
            return NotImplemented
        return (self.kind, self.anchor, self.current, self.day) == \
               (other.kind, other.anchor, other.current, other.day)

    __hash__ = None

    def __repr__(self):
        if self.is_idle:
            return "SelectionState(idle)"
        if self.kind == self.DRAGGING_DATE_RANGE:
            return f"SelectionState(dates {self.anchor} -> {self.current})"
        return f"SelectionState(times {self.day} {self.anchor} -> {self.current})"


def _at_minute(day, minute):
    return datetime.datetime.combine(day, datetime.time.min) + datetime.timedelta(minutes=minute)


def _to_minutes(time_of_day):
    if isinstance(time_of_day, datetime.datetime):
        time_of_day = time_of_day.time()
    if isinstance(time_of_day, datetime.time):
        return time_of_day.hour * 60 + time_of_day.minute + time_of_day.second / 60.0
    return time_of_day


class SelectionEngine:
    """
    State machine behind date and time-range drags.

    Every pointer method returns ``SelectionCommitted`` when the input
    finishes a selection and ``None`` otherwise; ``state`` and
    ``preview()`` describe what is being dragged right now.
    """

    def __init__(self, grid=None, settings=None):
        self.grid = grid
        self.state = SelectionState.idle()
        if settings is not None:
            self.slot_minutes = settings.slot_granularity_minutes
            self.start_hour = settings.time_grid_start_hour
            self.end_hour = settings.time_grid_end_hour
        else:
            self.slot_minutes = DEFAULT_SLOT_GRANULARITY_MINUTES
            self.start_hour = DEFAULT_TIME_GRID_START_HOUR
            self.end_hour = DEFAULT_TIME_GRID_END_HOUR

    def apply_settings(self, settings):
        self.slot_minutes = settings.slot_granularity_minutes
        self.start_hour = settings.time_grid_start_hour
        self.end_hour = settings.time_grid_end_hour
        if not self.state.is_idle:
            self.cancel("settings changed")

    def _set_state(self, state):
        if state != self.state:
            logger.debug(f"selection: {self.state!r} -> {state!r}")
        self.state = state

    # --- normalization ---
    def _clamp_date(self, date_obj):
        if self.grid is None:
            return date_obj
        clamped = self.grid.clamp(date_obj)
        if clamped != date_obj:
            logger.debug(f"selection date {date_obj} clamped to {clamped}")
        return clamped

    def _slot_start(self, time_of_day):
        """Start minute of the visible slot containing ``time_of_day``."""
        slot = self.slot_minutes
        first = self.start_hour * 60
        last = max(first, self.end_hour * 60 - slot)
        snapped = int(_to_minutes(time_of_day) // slot) * slot
        return max(first, min(snapped, last))

    def _slot_span(self, day, anchor, current):
        return TimeRange(day, min(anchor, current), max(anchor, current) + self.slot_minutes)

    def _time_range(self, day, anchor, current):
        span = self._slot_span(day, anchor, current)
        start, end = span.start_minute, span.end_minute
        if end - start < MIN_EVENT_DURATION_MINUTES:
            logger.debug(f"time selection {start}-{end} raised to {MIN_EVENT_DURATION_MINUTES} minutes")
            end = start + MIN_EVENT_DURATION_MINUTES
            limit = min(self.end_hour * 60, MINUTES_PER_DAY)
            if end > limit:
                end = limit
                start = max(limit - MIN_EVENT_DURATION_MINUTES, 0)
        return TimeRange(day, start, end)

    # --- date-range drags ---
    def pointer_down_date(self, date_obj):
        if not self.state.is_idle:
            self.cancel("pointer down during drag")
        date_obj = self._clamp_date(date_obj)
        self._set_state(SelectionState.dragging_dates(date_obj, date_obj))
        return None

    def pointer_move_date(self, date_obj):
        if self.state.kind != SelectionState.DRAGGING_DATE_RANGE:
            return None
        self._set_state(SelectionState.dragging_dates(self.state.anchor, self._clamp_date(date_obj)))
        return None

    # --- time-range drags ---
    def pointer_down_slot(self, day, time_of_day):
        if not self.state.is_idle:
            self.cancel("pointer down during drag")
        day = self._clamp_date(day)
        minute = self._slot_start(time_of_day)
        self._set_state(SelectionState.dragging_times(day, minute, minute))
        return None

    def pointer_move_slot(self, day, time_of_day):
        """Only the time of day moves; the drag stays in the day it started on."""
        if self.state.kind != SelectionState.DRAGGING_TIME_RANGE:
            return None
        minute = self._slot_start(time_of_day)
        self._set_state(SelectionState.dragging_times(self.state.day, self.state.anchor, minute))
        return None

    # --- common ---
    def pointer_up(self):
        state = self.state
        if state.kind == SelectionState.DRAGGING_DATE_RANGE:
            committed = SelectionCommitted(DateRange(state.anchor, state.current))
        elif state.kind == SelectionState.DRAGGING_TIME_RANGE:
            committed = SelectionCommitted(self._time_range(state.day, state.anchor, state.current))
        else:
            return None
        self._set_state(SelectionState.idle())
        logger.info(f"selection committed: {committed.range}")
        return committed

    def cancel(self, reason="escape"):
        if self.state.is_idle:
            return False
        logger.debug(f"selection cancelled ({reason})")
        self._set_state(SelectionState.idle())
        return True

    def key_press(self, key):
        if key == "Escape":
            self.cancel("escape")
        return None

    def focus_lost(self):
        self.cancel("focus lost")
        return None

    def switch_view(self, grid):
        """A new grid geometry cancels any drag in progress."""
        self.cancel("view switched")
        self.grid = grid
        return None

    def new_event_on(self, date_obj):
        """Keyboard quick-create: commits a one-day selection on ``date_obj``."""
        self.cancel("quick create")
        date_obj = self._clamp_date(date_obj)
        committed = SelectionCommitted(DateRange(date_obj, date_obj))
        logger.info(f"selection committed: {committed.range}")
        return committed

    # --- preview ---
    def preview(self):
        """Range highlighted by the drag in progress, or None when idle."""
        state = self.state
        if state.kind == SelectionState.DRAGGING_DATE_RANGE:
            return DateRange(state.anchor, state.current)
        if state.kind == SelectionState.DRAGGING_TIME_RANGE:
            return self._slot_span(state.day, state.anchor, state.current)
        return None

    def is_date_selected(self, date_obj):
        selected = self.preview()
        return isinstance(selected, DateRange) and selected.contains(date_obj)

    def is_slot_selected(self, day, time_of_day):
        """True when the slot starting at ``time_of_day`` lies inside the preview."""
        selected = self.preview()
        if not isinstance(selected, TimeRange) or selected.day != day:
            return False
        return selected.start_minute <= _to_minutes(time_of_day) < selected.end_minute
