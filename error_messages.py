# error_messages.py
"""
Error message definitions and exception classes for the calendar core.

The grid, layout and selection engines normalize bad input instead of failing,
so only configuration problems and programming errors surface as exceptions.
"""

class ErrorMessages:
    """Centralized error message definitions with recovery suggestions."""

    INVALID_CONFIGURATION = {
        'title': 'Invalid Configuration',
        'message': 'The calendar settings contain a value that cannot be used.',
        'suggestions': [
            'start_day_of_week must be 0 (Monday) or 6 (Sunday)',
            'Time grid hours must satisfy 0 <= start < end <= 24',
            'Slot granularity must divide a day into whole slots'
        ],
        'code': 'CONFIG_002'
    }

    SETTINGS_ERROR = {
        'title': 'Settings Error',
        'message': 'The settings record has no such field.',
        'suggestions': [
            'Check the key names in settings.json',
            'Settings will use default values'
        ],
        'code': 'CONFIG_001'
    }

    SETTINGS_CORRUPTED = {
        'title': 'Settings File Unreadable',
        'message': 'settings.json is not valid JSON; built-in defaults are used instead.',
        'suggestions': [
            'Fix or delete settings.json',
            'Saving settings again rewrites the file'
        ],
        'code': 'CONFIG_003'
    }

    UNKNOWN_GRANULARITY = {
        'title': 'Unknown Calendar View',
        'message': 'The requested calendar view does not exist.',
        'suggestions': [
            'Use one of: month, week, day, year'
        ],
        'code': 'GRID_001'
    }

    UNEXPECTED_ERROR = {
        'title': 'Unexpected Error',
        'message': 'The calendar core hit an error it does not know how to recover from.',
        'suggestions': [
            'Run with --debug and attach the log output to a bug report'
        ],
        'code': 'APP_001'
    }

    @staticmethod
    def get_message(error_type):
        """
        Get error message details by error type.

        Args:
            error_type (str): The error type constant name

        Returns:
            dict: Error message details with title, message, suggestions, and code
        """
        return getattr(ErrorMessages, error_type, ErrorMessages.UNEXPECTED_ERROR)


class CalendarError(Exception):
    """Base exception class for calendar-specific errors."""

    def __init__(self, message, error_code=None, suggestions=None):
        super().__init__(message)
        self.error_code = error_code
        self.suggestions = suggestions or []

    @classmethod
    def from_error_type(cls, error_type, detail=None):
        info = ErrorMessages.get_message(error_type)
        message = info['message']
        if detail:
            message = f"{message} ({detail})"
        return cls(message, error_code=info['code'], suggestions=list(info['suggestions']))


class SettingsError(CalendarError):
    """Exception for settings and configuration errors."""
    pass


class GridError(CalendarError):
    """Exception for requests the grid builder cannot interpret."""
    pass
