import json
import logging
import os

from config import (SETTINGS_FILE, DEFAULT_LOCALE, DEFAULT_FIRST_DAY_OF_WEEK,
                    DEFAULT_WEEK_NUMBERS_ENABLED, DEFAULT_TIME_GRID_START_HOUR,
                    DEFAULT_TIME_GRID_END_HOUR, DEFAULT_SLOT_GRANULARITY_MINUTES,
                    DEFAULT_MAX_VISIBLE_LANES, DEFAULT_HOTKEYS, MONDAY, SUNDAY)
from date_math import first_day_of_week
from error_messages import ErrorMessages, SettingsError

logger = logging.getLogger(__name__)

def load_settings(path=SETTINGS_FILE):
    """설정 파일(settings.json)을 읽어와서 딕셔너리로 반환합니다."""
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError:
                logger.warning(f"설정 파일이 손상되어 기본값을 사용합니다: {path} ({ErrorMessages.SETTINGS_CORRUPTED['code']})")
                return {}  # 파일이 손상되었을 경우 빈 딕셔너리 반환
    return {}  # 파일이 없을 경우 빈 딕셔너리 반환

def save_settings(data, path=SETTINGS_FILE):
    """설정 데이터(딕셔너리)를 settings.json 파일에 저장합니다."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)


class CalendarSettings:
    """
    Read-only settings record consumed by the grid, layout and selection engines.

    Built from the raw settings dict with ``from_dict``. Changing a value means
    building a new record (``with_changes``). Records compare by value; the
    period cache drops every entry when the record it is given differs from
    the one it built with. ``cache_key()`` is the hashable form shown in the
    cache stats.
    """

    def __init__(self, first_day_of_week=MONDAY, locale=DEFAULT_LOCALE,
                 week_numbers_enabled=DEFAULT_WEEK_NUMBERS_ENABLED,
                 time_grid_start_hour=DEFAULT_TIME_GRID_START_HOUR,
                 time_grid_end_hour=DEFAULT_TIME_GRID_END_HOUR,
                 slot_granularity_minutes=DEFAULT_SLOT_GRANULARITY_MINUTES,
                 max_visible_lanes_per_cell=DEFAULT_MAX_VISIBLE_LANES,
                 hotkeys=None):
        if first_day_of_week not in (MONDAY, SUNDAY):
            raise SettingsError.from_error_type(
                'INVALID_CONFIGURATION', f"start_day_of_week={first_day_of_week!r}")
        if not (0 <= time_grid_start_hour < time_grid_end_hour <= 24):
            raise SettingsError.from_error_type(
                'INVALID_CONFIGURATION',
                f"time grid {time_grid_start_hour}-{time_grid_end_hour}")
        if slot_granularity_minutes <= 0 or 60 * 24 % slot_granularity_minutes:
            raise SettingsError.from_error_type(
                'INVALID_CONFIGURATION', f"slot_granularity_minutes={slot_granularity_minutes!r}")
        if max_visible_lanes_per_cell < 0:
            raise SettingsError.from_error_type(
                'INVALID_CONFIGURATION', f"max_visible_lanes={max_visible_lanes_per_cell!r}")

        self._first_day_of_week = first_day_of_week
        self._locale = locale
        self._week_numbers_enabled = bool(week_numbers_enabled)
        self._time_grid_start_hour = time_grid_start_hour
        self._time_grid_end_hour = time_grid_end_hour
        self._slot_granularity_minutes = slot_granularity_minutes
        self._max_visible_lanes_per_cell = max_visible_lanes_per_cell
        self._hotkeys = dict(DEFAULT_HOTKEYS if hotkeys is None else hotkeys)

    first_day_of_week = property(lambda self: self._first_day_of_week)
    locale = property(lambda self: self._locale)
    week_numbers_enabled = property(lambda self: self._week_numbers_enabled)
    time_grid_start_hour = property(lambda self: self._time_grid_start_hour)
    time_grid_end_hour = property(lambda self: self._time_grid_end_hour)
    slot_granularity_minutes = property(lambda self: self._slot_granularity_minutes)
    max_visible_lanes_per_cell = property(lambda self: self._max_visible_lanes_per_cell)

    @property
    def hotkeys(self):
        return dict(self._hotkeys)

    @classmethod
    def from_dict(cls, data):
        """설정 딕셔너리에서 레코드를 만듭니다. 없는 키는 기본값을 사용합니다."""
        data = data or {}
        locale = data.get("locale") or DEFAULT_LOCALE
        start_day = data.get("start_day_of_week", DEFAULT_FIRST_DAY_OF_WEEK)
        if start_day is None:
            start_day = first_day_of_week(locale)

        hotkeys = dict(DEFAULT_HOTKEYS)
        hotkeys.update(data.get("hotkeys") or {})

        return cls(
            first_day_of_week=start_day,
            locale=locale,
            week_numbers_enabled=data.get("show_week_numbers", DEFAULT_WEEK_NUMBERS_ENABLED),
            time_grid_start_hour=data.get("time_grid_start_hour", DEFAULT_TIME_GRID_START_HOUR),
            time_grid_end_hour=data.get("time_grid_end_hour", DEFAULT_TIME_GRID_END_HOUR),
            slot_granularity_minutes=data.get("slot_granularity_minutes", DEFAULT_SLOT_GRANULARITY_MINUTES),
            max_visible_lanes_per_cell=data.get("max_visible_lanes", DEFAULT_MAX_VISIBLE_LANES),
            hotkeys=hotkeys,
        )

    @classmethod
    def load(cls, path=SETTINGS_FILE):
        return cls.from_dict(load_settings(path))

    def to_dict(self):
        return {
            "start_day_of_week": self._first_day_of_week,
            "locale": self._locale,
            "show_week_numbers": self._week_numbers_enabled,
            "time_grid_start_hour": self._time_grid_start_hour,
            "time_grid_end_hour": self._time_grid_end_hour,
            "slot_granularity_minutes": self._slot_granularity_minutes,
            "max_visible_lanes": self._max_visible_lanes_per_cell,
            "hotkeys": dict(self._hotkeys),
        }

    def with_changes(self, **changes):
        values = {
            "first_day_of_week": self._first_day_of_week,
            "locale": self._locale,
            "week_numbers_enabled": self._week_numbers_enabled,
            "time_grid_start_hour": self._time_grid_start_hour,
            "time_grid_end_hour": self._time_grid_end_hour,
            "slot_granularity_minutes": self._slot_granularity_minutes,
            "max_visible_lanes_per_cell": self._max_visible_lanes_per_cell,
            "hotkeys": self._hotkeys,
        }
        unknown = set(changes) - set(values)
        if unknown:
            raise SettingsError.from_error_type('SETTINGS_ERROR', ', '.join(sorted(unknown)))
        values.update(changes)
        return CalendarSettings(**values)

    def cache_key(self):
        """Every value that shapes a built grid."""
        return (
            self._first_day_of_week,
            self._locale,
            self._week_numbers_enabled,
            self._time_grid_start_hour,
            self._time_grid_end_hour,
        )

    def __eq__(self, other):
        if not isinstance(other, CalendarSettings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.cache_key())

    def __repr__(self):
        return f"CalendarSettings({self.to_dict()!r})"
