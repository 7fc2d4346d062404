# locale_prefs.py
"""
Locale-aware display preferences detected from the environment.

Only formatting lives here; the week alignment itself comes from
``date_math.first_day_of_week``.
"""
import os

from config import DEFAULT_LOCALE
from date_math import first_day_of_week

DATE_FORMAT_DMY = "DMY"
DATE_FORMAT_MDY = "MDY"
DATE_FORMAT_YMD = "YMD"

TWELVE_HOUR_LOCALES = ("en_us", "en_ca", "en_au", "en_nz", "en_ph", "fil_ph", "tl_ph")
MDY_LOCALES = ("en_us", "en_ca", "en_ph", "fil_ph", "tl_ph")
YMD_LOCALES = ("ja_jp", "ko_kr", "zh_cn", "zh_tw", "zh_hk", "zh_sg",
               "hu_hu", "lt_lt", "mn_mn", "ko_kp")

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTH_NAMES = ("January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December")
# date.weekday() 순서
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _matches(locale, prefixes):
    locale_lower = (locale or "").lower().replace("-", "_")
    return any(locale_lower.startswith(p) for p in prefixes)


def detect_locale_string(environ=None):
    environ = os.environ if environ is None else environ
    for key in ("LC_TIME", "LC_ALL", "LANG"):
        value = environ.get(key)
        if value:
            return value
    return DEFAULT_LOCALE


def detect_24_hour_format(locale):
    return not _matches(locale, TWELVE_HOUR_LOCALES)


def detect_date_format(locale):
    if _matches(locale, MDY_LOCALES):
        return DATE_FORMAT_MDY
    if _matches(locale, YMD_LOCALES):
        return DATE_FORMAT_YMD
    return DATE_FORMAT_DMY


class LocalePreferences:
    def __init__(self, locale_string=DEFAULT_LOCALE, use_24_hour=None, date_format=None,
                 first_dow=None):
        self.locale_string = locale_string
        self.use_24_hour = detect_24_hour_format(locale_string) if use_24_hour is None else use_24_hour
        self.date_format = detect_date_format(locale_string) if date_format is None else date_format
        self.first_day_of_week = first_day_of_week(locale_string) if first_dow is None else first_dow

    @classmethod
    def detect_from_system(cls, environ=None):
        return cls(detect_locale_string(environ))

    def format_hour(self, hour):
        """'13:00' in 24-hour locales, '1 PM' otherwise."""
        if self.use_24_hour:
            return f"{hour:02d}:00"
        if hour == 0:
            return "12 AM"
        if hour < 12:
            return f"{hour} AM"
        if hour == 12:
            return "12 PM"
        return f"{hour - 12} PM"

    def format_week_range(self, first_day, last_day, week_number):
        """Toolbar title for a week view, e.g. 'W48 - Nov 24 - 30, 2024'."""
        f_mon, l_mon = MONTH_ABBR[first_day.month - 1], MONTH_ABBR[last_day.month - 1]
        same_month = (first_day.year, first_day.month) == (last_day.year, last_day.month)
        same_year = first_day.year == last_day.year

        if self.date_format == DATE_FORMAT_YMD:
            if same_month:
                return (f"W{week_number} - {first_day.year}-{first_day.month:02d}-"
                        f"{first_day.day:02d} - {last_day.day:02d}")
            return f"W{week_number} - {first_day.isoformat()} - {last_day.isoformat()}"

        if self.date_format == DATE_FORMAT_MDY:
            if same_month:
                return f"W{week_number} - {f_mon} {first_day.day} - {last_day.day}, {first_day.year}"
            if same_year:
                return (f"W{week_number} - {f_mon} {first_day.day} - {l_mon} {last_day.day}, "
                        f"{first_day.year}")
            return (f"W{week_number} - {f_mon} {first_day.day}, {first_day.year} - "
                    f"{l_mon} {last_day.day}, {last_day.year}")

        # DMY
        if same_month:
            return f"W{week_number} - {first_day.day} - {last_day.day} {f_mon}, {first_day.year}"
        if same_year:
            return (f"W{week_number} - {first_day.day} {f_mon} - {last_day.day} {l_mon}, "
                    f"{first_day.year}")
        return (f"W{week_number} - {first_day.day} {f_mon}, {first_day.year} - "
                f"{last_day.day} {l_mon}, {last_day.year}")

    def format_day_header(self, date_obj, day_name=None):
        day_name = day_name or WEEKDAY_ABBR[date_obj.weekday()]
        mon = MONTH_ABBR[date_obj.month - 1]
        if self.date_format == DATE_FORMAT_MDY:
            return f"{day_name}, {mon} {date_obj.day}"
        if self.date_format == DATE_FORMAT_YMD:
            return f"{day_name}, {date_obj.isoformat()}"
        return f"{day_name}, {date_obj.day} {mon}"

    def format_month_title(self, year, month):
        return f"{MONTH_NAMES[month - 1]} {year}"

    def __repr__(self):
        return (f"LocalePreferences({self.locale_string!r}, use_24_hour={self.use_24_hour}, "
                f"date_format={self.date_format!r})")
