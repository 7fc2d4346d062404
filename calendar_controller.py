# calendar_controller.py
"""
Single update loop of the calendar core.

Views hand plain message values to ``CalendarController.update``; the
controller resolves the current grid through the ``PeriodCache``, lays out
the provider's events on it, drives the ``SelectionEngine`` and reports the
results through Qt signals.
"""
import datetime
import logging
import sys
from collections import namedtuple

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from config import (CLOCK_TICK_INTERVAL_MS, PRECACHE_MONTHS_BEFORE, PRECACHE_MONTHS_AFTER,
                    CACHE_KEEP_RADIUS)
from cache_manager import PeriodCache
from date_math import clamp_date
from grid_model import Granularity, shift_period
from hotkey_manager import HotkeyManager
from locale_prefs import LocalePreferences
from selection import SelectionEngine
from settings_manager import CalendarSettings
from views.layout_calculator import MonthLayoutCalculator, WeekLayoutCalculator

logger = logging.getLogger(__name__)


# --- Messages ---
Navigate = namedtuple("Navigate", ["direction"])          # "prev" | "next" | "today"
ChangeView = namedtuple("ChangeView", ["granularity"])
SelectDay = namedtuple("SelectDay", ["date"])
SettingsChanged = namedtuple("SettingsChanged", ["settings"])
Tick = namedtuple("Tick", ["today"])
# time=None이면 날짜 셀, 아니면 시간 그리드 슬롯
PointerDown = namedtuple("PointerDown", ["date", "time"], defaults=(None,))
PointerMove = namedtuple("PointerMove", ["date", "time"], defaults=(None,))
PointerUp = namedtuple("PointerUp", [])
KeyPressed = namedtuple("KeyPressed", ["key_combo"])
FocusLost = namedtuple("FocusLost", [])

NAVIGATE_PREV = "prev"
NAVIGATE_NEXT = "next"
NAVIGATE_TODAY = "today"

VIEW_ACTIONS = {
    "view_month": Granularity.MONTH,
    "view_week": Granularity.WEEK,
    "view_day": Granularity.DAY,
    "view_year": Granularity.YEAR,
}


RenderModel = namedtuple("RenderModel", [
    "grid",             # GridModel
    "title",
    "slots",            # 날짜 구간 배치 (월간 그리드 또는 종일 행)
    "overflow",         # {date: 숨겨진 일정 수}
    "timed",            # TimedPlacement 목록 (주간/일간)
    "hour_labels",
])


class CalendarController(QObject):
    grid_changed = pyqtSignal(object)
    selection_changed = pyqtSignal(object)
    selection_committed = pyqtSignal(object)
    settings_changed = pyqtSignal(object)

    def __init__(self, settings=None, provider=None, clock=None,
                 granularity=Granularity.MONTH, anchor=None, precache=True):
        """
        Args:
            settings: CalendarSettings 또는 설정 딕셔너리
            provider: BaseCalendarProvider (None이면 일정 없이 그리드만)
            clock: 오늘 날짜를 돌려주는 호출 가능 객체
            precache: 월간 탐색 시 앞뒤 기간을 미리 빌드할지 여부
        """
        super().__init__()
        self.settings = self._coerce_settings(settings)
        self.provider = provider
        self.clock = clock or datetime.date.today
        self.precache = precache

        self.today = self.clock()
        self.granularity = Granularity.validate(granularity)
        self.anchor = clamp_date(anchor or self.today)

        self.cache = PeriodCache(today=self.today)
        self.selection = SelectionEngine(settings=self.settings)
        self.hotkeys = HotkeyManager(self.settings)
        self.hotkeys.hotkey_triggered.connect(self.run_action)
        self.locale = self._locale_for(self.settings)

        self.clock_timer = None
        self.render_model = None

        self._handlers = {
            Navigate: self._on_navigate,
            ChangeView: self._on_change_view,
            SelectDay: self._on_select_day,
            SettingsChanged: self._on_settings_changed,
            Tick: self._on_tick,
            PointerDown: self._on_pointer_down,
            PointerMove: self._on_pointer_move,
            PointerUp: self._on_pointer_up,
            KeyPressed: self._on_key_pressed,
            FocusLost: self._on_focus_lost,
        }

        self._show_current_period()

    @staticmethod
    def _coerce_settings(settings):
        if settings is None or isinstance(settings, dict):
            return CalendarSettings.from_dict(settings)
        return settings

    @staticmethod
    def _locale_for(settings):
        return LocalePreferences(settings.locale, first_dow=settings.first_day_of_week)

    # --- update loop ---
    def update(self, message):
        """메시지 하나를 처리하고 그 결과(렌더 모델, 커밋 값 또는 None)를 반환합니다."""
        handler = self._handlers.get(type(message))
        if handler is None:
            logger.warning(f"Unknown message ignored: {message!r}")
            return None
        logger.debug(f"update: {message!r}")
        return handler(message)

    def current_grid(self):
        return self.cache.get_or_build(self.granularity, self.anchor, self.settings)

    def _render(self):
        grid = self.current_grid()
        events = []
        if self.provider is not None:
            events = self.provider.fetch_events(grid.first_date, grid.last_date)

        max_lanes = self.settings.max_visible_lanes_per_cell
        slots, overflow, timed, hour_labels = [], {}, [], []

        if self.granularity == Granularity.MONTH:
            slots, overflow = MonthLayoutCalculator(events, grid, max_lanes).calculate()
        elif self.granularity in (Granularity.WEEK, Granularity.DAY):
            calculator = WeekLayoutCalculator.from_events(events, grid, max_lanes)
            timed = calculator.calculate_time_events()
            slots, overflow, _ = calculator.calculate_all_day_events()
            hour_labels = [self.locale.format_hour(hour) for hour in grid.hour_rows]

        self.render_model = RenderModel(grid, self._title_for(grid), slots, overflow, timed, hour_labels)
        return self.render_model

    def _title_for(self, grid):
        if self.granularity == Granularity.MONTH:
            return self.locale.format_month_title(grid.anchor.year, grid.anchor.month)
        if self.granularity == Granularity.WEEK:
            return self.locale.format_week_range(grid.first_date, grid.last_date, grid.week_numbers[0])
        if self.granularity == Granularity.DAY:
            return self.locale.format_day_header(grid.anchor)
        return str(grid.anchor.year)

    def _show_current_period(self):
        model = self._render()
        self.selection.switch_view(model.grid)
        if self.precache and self.granularity == Granularity.MONTH:
            self.cache.precache_surrounding(self.granularity, self.anchor, self.settings,
                                            PRECACHE_MONTHS_BEFORE, PRECACHE_MONTHS_AFTER)
            self.cache.cleanup(self.granularity, self.anchor, CACHE_KEEP_RADIUS)
        self.grid_changed.emit(model)
        return model

    # --- navigation ---
    def _on_navigate(self, message):
        if message.direction == NAVIGATE_PREV:
            self.anchor = shift_period(self.granularity, self.anchor, -1)
        elif message.direction == NAVIGATE_NEXT:
            self.anchor = shift_period(self.granularity, self.anchor, 1)
        elif message.direction == NAVIGATE_TODAY:
            self.anchor = self.today
        else:
            logger.warning(f"Unknown navigation direction: {message.direction!r}")
            return None
        return self._show_current_period()

    def _on_change_view(self, message):
        self.granularity = Granularity.validate(message.granularity)
        logger.info(f"View changed to {self.granularity}")
        return self._show_current_period()

    def _on_select_day(self, message):
        self.granularity = Granularity.DAY
        self.anchor = clamp_date(message.date)
        return self._show_current_period()

    # --- settings / clock ---
    def _on_settings_changed(self, message):
        self.settings = self._coerce_settings(message.settings)
        self.cache.invalidate()
        self.selection.apply_settings(self.settings)
        self.hotkeys.load_bindings(self.settings)
        self.locale = self._locale_for(self.settings)
        self.settings_changed.emit(self.settings)
        return self._show_current_period()

    def _on_tick(self, message):
        if message.today == self.today:
            return None
        self.today = message.today
        rebuilt = self.cache.refresh_today(message.today)
        if (self.granularity, self.current_grid().anchor) not in rebuilt:
            return None
        model = self._render()
        self.grid_changed.emit(model)
        return model

    def start_clock(self, interval_ms=CLOCK_TICK_INTERVAL_MS):
        if self.clock_timer is None:
            self.clock_timer = QTimer(self)
            self.clock_timer.timeout.connect(self.on_clock_tick)
        self.clock_timer.start(interval_ms)
        logger.info(f"Clock tick started: every {interval_ms // 1000}s")

    def stop_clock(self):
        if self.clock_timer is not None:
            self.clock_timer.stop()

    def on_clock_tick(self):
        return self.update(Tick(self.clock()))

    # --- selection ---
    def _emit_selection(self, before):
        preview = self.selection.preview()
        if preview != before:
            self.selection_changed.emit(preview)

    def _commit(self, committed):
        if committed is not None:
            self.selection_committed.emit(committed)
        return committed

    def _on_pointer_down(self, message):
        before = self.selection.preview()
        if message.time is None:
            self.selection.pointer_down_date(message.date)
        else:
            self.selection.pointer_down_slot(message.date, message.time)
        self._emit_selection(before)
        return None

    def _on_pointer_move(self, message):
        before = self.selection.preview()
        if message.time is None:
            self.selection.pointer_move_date(message.date)
        else:
            self.selection.pointer_move_slot(message.date, message.time)
        self._emit_selection(before)
        return None

    def _on_pointer_up(self, message):
        before = self.selection.preview()
        committed = self.selection.pointer_up()
        self._emit_selection(before)
        return self._commit(committed)

    def _on_focus_lost(self, message):
        before = self.selection.preview()
        self.selection.focus_lost()
        self._emit_selection(before)
        return None

    def _on_key_pressed(self, message):
        action = self.hotkeys.resolve(message.key_combo)
        if action is None:
            before = self.selection.preview()
            self.selection.key_press(message.key_combo)
            self._emit_selection(before)
            return None
        return self.run_action(action)

    def run_action(self, action):
        """단축키 액션 실행 (hotkey_triggered 시그널에도 연결됨)"""
        logger.debug(f"action: {action}")
        if action == "new_event":
            before = self.selection.preview()
            committed = self.selection.new_event_on(self.focused_date())
            self._emit_selection(before)
            return self._commit(committed)
        if action == "today":
            return self.update(Navigate(NAVIGATE_TODAY))
        if action in VIEW_ACTIONS:
            return self.update(ChangeView(VIEW_ACTIONS[action]))
        if action == "cancel_selection":
            before = self.selection.preview()
            self.selection.cancel("escape")
            self._emit_selection(before)
            return None
        logger.warning(f"Unknown action ignored: {action!r}")
        return None

    def focused_date(self):
        """보이는 기간 안이면 오늘, 아니면 현재 anchor"""
        grid = self.render_model.grid if self.render_model else self.current_grid()
        if grid.contains(self.today):
            return self.today
        return grid.clamp(self.anchor)


def main():
    from PyQt6.QtCore import QCoreApplication
    from logger_config import setup_logger
    from providers.local_provider import LocalCalendarProvider

    setup_logger(logging.DEBUG if "--debug" in sys.argv else logging.INFO)
    app = QCoreApplication(sys.argv)

    controller = CalendarController(CalendarSettings.load(), provider=LocalCalendarProvider())
    controller.grid_changed.connect(lambda model: logger.info(f"{model.title}: {model.grid!r}"))
    controller.grid_changed.emit(controller.render_model)
    controller.start_clock()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
