# date_math.py
"""
Pure calendar arithmetic used by the grid builder.

Nothing here keeps state or reads the clock. Weekdays use the
``datetime.date.weekday()`` numbering (Monday=0 ... Sunday=6).
"""
import calendar
import datetime
import logging

from dateutil.relativedelta import relativedelta

from config import MONDAY, SUNDAY, DAYS_IN_WEEK

logger = logging.getLogger(__name__)

# Grids reach up to two weeks past either end of a month, so the usable range
# stays one year inside datetime's own limits.
MIN_SUPPORTED_YEAR = datetime.MINYEAR + 1
MAX_SUPPORTED_YEAR = datetime.MAXYEAR - 1

# 일요일 시작 로케일 (그 외는 월요일, ISO 8601)
SUNDAY_FIRST_LOCALES = (
    "en_us", "en_ca", "en_au", "en_nz", "en_ph",
    "ja_jp", "ko_kr", "zh_cn", "zh_tw", "zh_hk",
    "he_il", "ar_sa", "ar_ae", "ar_eg",
    "fil_ph", "tl_ph", "pt_br",
)


def first_day_of_week(locale):
    """Return MONDAY or SUNDAY for a locale string such as ``"en_US.UTF-8"``.

    Unknown or empty locales fall back to Monday.
    """
    locale_lower = (locale or "").lower().replace("-", "_")
    for prefix in SUNDAY_FIRST_LOCALES:
        if locale_lower.startswith(prefix):
            return SUNDAY
    return MONDAY


def iso_week_number(date_obj):
    """ISO-8601 week number (1-53): week 1 holds the year's first Thursday."""
    return date_obj.isocalendar()[1]


def normalize_year_month(year, month):
    """Carry an out-of-range month into the year, e.g. (2024, 13) -> (2025, 1)."""
    carry, month_index = divmod(month - 1, 12)
    year, month = year + carry, month_index + 1
    if year < MIN_SUPPORTED_YEAR:
        logger.debug(f"year {year} clamped to {MIN_SUPPORTED_YEAR}")
        return MIN_SUPPORTED_YEAR, 1
    if year > MAX_SUPPORTED_YEAR:
        logger.debug(f"year {year} clamped to {MAX_SUPPORTED_YEAR}")
        return MAX_SUPPORTED_YEAR, 12
    return year, month


def clamp_date(date_obj):
    lower = datetime.date(MIN_SUPPORTED_YEAR, 1, 1)
    upper = datetime.date(MAX_SUPPORTED_YEAR, 12, 31)
    return min(max(date_obj, lower), upper)


def add_months(date_obj, months):
    """Shift by whole months; the day is clamped to the target month's length."""
    year, month = normalize_year_month(date_obj.year, date_obj.month + months)
    target = datetime.date(year, month, 1)
    return target + relativedelta(day=date_obj.day)


def days_in_month(year, month):
    year, month = normalize_year_month(year, month)
    return calendar.monthrange(year, month)[1]


def start_of_week(date_obj, first_dow):
    """The first_dow-aligned date on or before date_obj."""
    offset = (date_obj.weekday() - first_dow) % DAYS_IN_WEEK
    return date_obj - datetime.timedelta(days=offset)


def ordered_weekdays(first_dow):
    """Weekday numbers in display order, e.g. SUNDAY -> [6, 0, 1, 2, 3, 4, 5]."""
    return [(first_dow + i) % DAYS_IN_WEEK for i in range(DAYS_IN_WEEK)]


def is_weekend(date_obj):
    return date_obj.weekday() >= 5


def month_grid_bounds(year, month, first_dow):
    """Return ``(first_cell_date, cell_count)`` for a month grid.

    first_cell_date is the first_dow-aligned date on or before the 1st;
    cell_count is a multiple of 7 reaching through the month's last day.
    """
    year, month = normalize_year_month(year, month)
    first_day = datetime.date(year, month, 1)
    first_cell = start_of_week(first_day, first_dow)
    leading = (first_day - first_cell).days
    used = leading + calendar.monthrange(year, month)[1]
    rows = -(-used // DAYS_IN_WEEK)
    return first_cell, rows * DAYS_IN_WEEK


def date_range(start, end):
    """Inclusive list of dates from start to end."""
    return [start + datetime.timedelta(days=d) for d in range((end - start).days + 1)]
