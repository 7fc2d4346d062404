# grid_model.py
"""
Calendar grid geometry: which dates a view shows and how they are arranged.

``build_grid`` turns a granularity and an anchor date into an immutable
``GridModel``. Month and week grids are rows of seven ``GridCell`` values
aligned to the configured first day of the week; day grids hold a single
cell plus the hour axis; year grids hold twelve compact month grids.
"""
import datetime
import logging
from collections import namedtuple

from config import (MONDAY, DAYS_IN_WEEK, DEFAULT_TIME_GRID_START_HOUR,
                    DEFAULT_TIME_GRID_END_HOUR)
from date_math import (iso_week_number, month_grid_bounds, normalize_year_month, add_months,
                       start_of_week, is_weekend, clamp_date, ordered_weekdays)
from error_messages import GridError

logger = logging.getLogger(__name__)

THURSDAY = 3


class Granularity:
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    YEAR = "year"

    ALL = (MONTH, WEEK, DAY, YEAR)

    @staticmethod
    def validate(granularity):
        if granularity not in Granularity.ALL:
            raise GridError.from_error_type('UNKNOWN_GRANULARITY', repr(granularity))
        return granularity


GridCell = namedtuple(
    "GridCell",
    ["date", "in_current_period", "is_today", "is_weekend", "week_number", "is_selected"],
)


def row_week_number(row_start):
    """Week number of a 7-day row: the ISO week of the row's Thursday."""
    offset = (THURSDAY - row_start.weekday()) % DAYS_IN_WEEK
    return iso_week_number(row_start + datetime.timedelta(days=offset))


def anchor_bucket(granularity, anchor, first_dow=MONDAY):
    """Normalize an anchor to the coarsest date that identifies its period."""
    Granularity.validate(granularity)
    anchor = clamp_date(anchor)
    if granularity == Granularity.MONTH:
        return anchor.replace(day=1)
    if granularity == Granularity.WEEK:
        return start_of_week(anchor, first_dow)
    if granularity == Granularity.YEAR:
        return anchor.replace(month=1, day=1)
    return anchor


def month_anchor(year, month):
    """First of the month, carrying out-of-range months into the year."""
    year, month = normalize_year_month(year, month)
    return datetime.date(year, month, 1)


class GridModel:
    """Immutable grid descriptor produced by ``build_grid``.

    ``rows`` is a tuple of row tuples. ``week_numbers`` carries one ISO week
    number per row (Thursday-of-row rule). ``hour_rows`` is the hour axis of
    week and day grids and empty otherwise. ``months`` is only populated for
    year grids.
    """

    def __init__(self, granularity, anchor, rows, week_numbers, first_day_of_week,
                 today=None, hour_rows=(), months=()):
        self.granularity = granularity
        self.anchor = anchor
        self.rows = tuple(tuple(row) for row in rows)
        self.week_numbers = tuple(week_numbers)
        self.first_day_of_week = first_day_of_week
        self.today = today
        self.hour_rows = tuple(hour_rows)
        self.months = tuple(months)

        self._positions = {}
        for r, row in enumerate(self.rows):
            for c, cell in enumerate(row):
                if cell is not None:
                    self._positions[cell.date] = (r, c)

    def __repr__(self):
        return (f"GridModel({self.granularity!r}, anchor={self.anchor.isoformat()}, "
                f"rows={len(self.rows)})")

    def __eq__(self, other):
        if not isinstance(other, GridModel):
            return NotImplemented
        return (self.granularity, self.anchor, self.rows, self.week_numbers,
                self.first_day_of_week, self.today, self.hour_rows, self.months) == \
               (other.granularity, other.anchor, other.rows, other.week_numbers,
                other.first_day_of_week, other.today, other.hour_rows, other.months)

    __hash__ = None

    @property
    def row_count(self):
        return len(self.rows)

    @property
    def column_count(self):
        return len(self.rows[0]) if self.rows else 0

    def cells(self):
        for row in self.rows:
            for cell in row:
                if cell is not None:
                    yield cell

    def dates(self):
        return [cell.date for cell in self.cells()]

    @property
    def first_date(self):
        if self.months:
            return self.months[0].period_start
        return min(self._positions)

    @property
    def last_date(self):
        if self.months:
            return self.months[-1].period_end
        return max(self._positions)

    @property
    def period_start(self):
        """First date that belongs to the grid's own period."""
        if self.months:
            return self.months[0].period_start
        return min(cell.date for cell in self.cells() if cell.in_current_period)

    @property
    def period_end(self):
        if self.months:
            return self.months[-1].period_end
        return max(cell.date for cell in self.cells() if cell.in_current_period)

    def contains(self, date_obj):
        if self.months:
            return any(month.contains(date_obj) for month in self.months)
        return date_obj in self._positions

    def position_of(self, date_obj):
        """(row, column) of a date, or None when the grid does not show it."""
        return self._positions.get(date_obj)

    def cell_at(self, row, column):
        return self.rows[row][column]

    def clamp(self, date_obj):
        """Nearest date the grid shows; dates outside snap to the first/last cell."""
        if self.contains(date_obj):
            return date_obj
        if date_obj < self.first_date:
            return self.first_date
        if date_obj > self.last_date:
            return self.last_date
        if self.months:
            return self.months[date_obj.month - 1].clamp(date_obj)
        # inside the span but not shown (padding of a compact month): nearest shown date
        return min(self._positions, key=lambda d: (abs((d - date_obj).days), d))

    def row_dates(self, row):
        return [cell.date for cell in self.rows[row] if cell is not None]

    def weekday_order(self):
        return ordered_weekdays(self.first_day_of_week)


def _make_cell(date_obj, in_period, today, week_number, selected):
    return GridCell(
        date=date_obj,
        in_current_period=in_period,
        is_today=(today is not None and date_obj == today),
        is_weekend=is_weekend(date_obj),
        week_number=week_number,
        is_selected=date_obj in selected,
    )


def _build_month(anchor, first_dow, today, selected, week_numbers_enabled, compact=False):
    first_cell, cell_count = month_grid_bounds(anchor.year, anchor.month, first_dow)
    rows, week_numbers = [], []
    for row_index in range(cell_count // DAYS_IN_WEEK):
        row_start = first_cell + datetime.timedelta(days=row_index * DAYS_IN_WEEK)
        week_number = row_week_number(row_start)
        shown = week_number if week_numbers_enabled else None
        row = []
        for col in range(DAYS_IN_WEEK):
            date_obj = row_start + datetime.timedelta(days=col)
            in_period = (date_obj.year, date_obj.month) == (anchor.year, anchor.month)
            if compact and not in_period:
                row.append(None)
            else:
                row.append(_make_cell(date_obj, in_period, today, shown, selected))
        rows.append(row)
        week_numbers.append(week_number)
    return GridModel(Granularity.MONTH, anchor.replace(day=1), rows, week_numbers,
                     first_dow, today=today)


def build_grid(granularity, anchor, first_dow=MONDAY, today=None, selected_dates=None,
               week_numbers_enabled=True, hour_range=None):
    """Build the grid for one period.

    Args:
        granularity: one of ``Granularity.ALL``
        anchor: any date inside the wanted period
        first_dow: MONDAY or SUNDAY, aligns the rows
        today: reference date for ``is_today``; None stamps no cell
        selected_dates: dates flagged ``is_selected``
        week_numbers_enabled: whether cells carry their row's week number
        hour_range: (start_hour, end_hour) axis of week/day grids

    Returns:
        GridModel
    """
    Granularity.validate(granularity)
    anchor = clamp_date(anchor)
    selected = frozenset(selected_dates or ())
    start_hour, end_hour = hour_range or (DEFAULT_TIME_GRID_START_HOUR, DEFAULT_TIME_GRID_END_HOUR)
    hours = range(start_hour, end_hour)

    if granularity == Granularity.MONTH:
        grid = _build_month(anchor, first_dow, today, selected, week_numbers_enabled)

    elif granularity == Granularity.WEEK:
        row_start = start_of_week(anchor, first_dow)
        week_number = row_week_number(row_start)
        shown = week_number if week_numbers_enabled else None
        row = [_make_cell(row_start + datetime.timedelta(days=i), True, today, shown, selected)
               for i in range(DAYS_IN_WEEK)]
        grid = GridModel(Granularity.WEEK, row_start, [row], [week_number], first_dow,
                         today=today, hour_rows=hours)

    elif granularity == Granularity.DAY:
        week_number = iso_week_number(anchor)
        shown = week_number if week_numbers_enabled else None
        cell = _make_cell(anchor, True, today, shown, selected)
        grid = GridModel(Granularity.DAY, anchor, [[cell]], [week_number], first_dow,
                         today=today, hour_rows=hours)

    else:
        months = [
            _build_month(datetime.date(anchor.year, m, 1), first_dow, today, selected,
                         week_numbers_enabled, compact=True)
            for m in range(1, 13)
        ]
        grid = GridModel(Granularity.YEAR, anchor.replace(month=1, day=1), [], [],
                         first_dow, today=today, months=months)

    logger.debug(f"grid built: {grid!r}")
    return grid


def build_grid_for_settings(granularity, anchor, settings, today=None, selected_dates=None):
    return build_grid(
        granularity, anchor,
        first_dow=settings.first_day_of_week,
        today=today,
        selected_dates=selected_dates,
        week_numbers_enabled=settings.week_numbers_enabled,
        hour_range=(settings.time_grid_start_hour, settings.time_grid_end_hour),
    )


def shift_period(granularity, anchor, steps):
    """Move an anchor by whole periods (prev/next navigation)."""
    Granularity.validate(granularity)
    if granularity == Granularity.MONTH:
        return add_months(anchor.replace(day=1), steps)
    if granularity == Granularity.YEAR:
        return add_months(anchor.replace(month=1, day=1), 12 * steps)
    days = DAYS_IN_WEEK * steps if granularity == Granularity.WEEK else steps
    anchor = clamp_date(anchor)
    lower = clamp_date(datetime.date.min) - anchor
    upper = clamp_date(datetime.date.max) - anchor
    return anchor + min(max(datetime.timedelta(days=days), lower), upper)


def period_distance(granularity, bucket_a, bucket_b):
    """Number of whole periods between two anchor buckets."""
    if granularity == Granularity.MONTH:
        return abs((bucket_a.year * 12 + bucket_a.month) - (bucket_b.year * 12 + bucket_b.month))
    if granularity == Granularity.YEAR:
        return abs(bucket_a.year - bucket_b.year)
    days = abs((bucket_a - bucket_b).days)
    return days // DAYS_IN_WEEK if granularity == Granularity.WEEK else days
