# config.py
import os
import sys

def get_app_dir():
    """Get the application directory (where executable and resources are located)."""
    if hasattr(sys, '_MEIPASS'):
        # Running as PyInstaller EXE
        return sys._MEIPASS
    else:
        return os.path.dirname(os.path.abspath(__file__))

def get_data_dir():
    """Get the appropriate data directory for user files."""
    if hasattr(sys, '_MEIPASS'):
        if sys.platform == "win32":
            data_dir = os.path.join(os.path.expanduser('~'), 'AppData', 'Local', 'DeskCalGrid')
        else:
            data_dir = os.path.join(os.path.expanduser('~'), '.deskcalgrid')
    else:
        # Running in development mode - use the source directory
        data_dir = get_app_dir()

    os.makedirs(data_dir, exist_ok=True)
    return data_dir

# --- File Paths ---
_DATA_DIR = get_data_dir()
SETTINGS_FILE = os.path.join(_DATA_DIR, "settings.json")

# --- Identifiers ---
LOCAL_CALENDAR_ID = "local_calendar"
LOCAL_CALENDAR_PROVIDER_NAME = "LocalCalendarProvider"

# --- Weekdays (datetime.date.weekday() numbering) ---
MONDAY = 0
SUNDAY = 6
DAYS_IN_WEEK = 7

# --- Calendar Defaults ---
DEFAULT_LOCALE = "en_US.UTF-8"
DEFAULT_FIRST_DAY_OF_WEEK = None  # None: derived from the locale
DEFAULT_WEEK_NUMBERS_ENABLED = True
DEFAULT_TIME_GRID_START_HOUR = 0
DEFAULT_TIME_GRID_END_HOUR = 24
DEFAULT_SLOT_GRANULARITY_MINUTES = 15
DEFAULT_MAX_VISIBLE_LANES = 3

# --- Layout / Selection ---
MIN_EVENT_DURATION_MINUTES = 15     # floor for committed time selections
MIN_TIMED_EVENT_WIDTH_MINUTES = 1   # zero-length events still occupy this much of the time grid

# --- Caching ---
PRECACHE_MONTHS_BEFORE = 1
PRECACHE_MONTHS_AFTER = 1
CACHE_KEEP_RADIUS = 6  # months kept around the current anchor by cleanup()

# --- Clock ---
CLOCK_TICK_INTERVAL_MS = 30 * 1000

# --- Shortcuts ---
DEFAULT_HOTKEYS = {
    "Ctrl+N": "new_event",
    "Ctrl+T": "today",
    "Ctrl+1": "view_month",
    "Ctrl+2": "view_week",
    "Ctrl+3": "view_day",
    "Ctrl+4": "view_year",
    "Escape": "cancel_selection",
}
