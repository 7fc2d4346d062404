# hotkey_manager.py
from PyQt6.QtCore import QObject, pyqtSignal
import logging

from config import DEFAULT_HOTKEYS

logger = logging.getLogger(__name__)

MODIFIER_ORDER = ("ctrl", "alt", "shift", "meta")
MODIFIER_ALIASES = {"control": "ctrl", "cmd": "meta", "win": "meta", "option": "alt"}
KEY_ALIASES = {"esc": "escape"}


def normalize_hotkey(hotkey_str):
    """
    "ctrl + t", "Ctrl+T", "T+Ctrl" 같은 문자열을 비교 가능한 "ctrl+t" 형식으로 변환합니다.
    빈 문자열이면 None.
    """
    if not hotkey_str:
        return None
    parts = [p for p in hotkey_str.lower().replace(" ", "").split('+') if p]
    if not parts:
        return None
    modifiers, keys = [], []
    for part in parts:
        part = MODIFIER_ALIASES.get(part, part)
        part = KEY_ALIASES.get(part, part)
        if part in MODIFIER_ORDER:
            if part not in modifiers:
                modifiers.append(part)
        else:
            keys.append(part)
    modifiers.sort(key=MODIFIER_ORDER.index)
    return '+'.join(modifiers + keys)


class HotkeyManager(QObject):
    """
    설정의 "hotkeys" 매핑으로 창 안의 단축키를 액션 이름으로 바꾸는 클래스.
    뷰는 눌린 키 조합을 handle_key로 넘기고, 액션은 hotkey_triggered 시그널로 받는다.
    """
    hotkey_triggered = pyqtSignal(str)

    def __init__(self, settings=None):
        super().__init__()
        self._bindings = {}
        self.load_bindings(settings)
        logger.info("HotkeyManager initialized successfully")

    def load_bindings(self, settings=None):
        """CalendarSettings, 설정 딕셔너리 또는 None(기본값)에서 단축키를 읽습니다."""
        if settings is None:
            hotkeys = DEFAULT_HOTKEYS
        elif isinstance(settings, dict):
            hotkeys = dict(DEFAULT_HOTKEYS)
            hotkeys.update(settings.get("hotkeys") or {})
        else:
            hotkeys = settings.hotkeys

        self._bindings = {}
        for combo, action in hotkeys.items():
            key = normalize_hotkey(combo)
            if key is None:
                logger.warning(f"Ignoring empty hotkey for action '{action}'")
                continue
            if key in self._bindings and self._bindings[key] != action:
                logger.warning(f"Hotkey '{combo}' rebound: {self._bindings[key]} -> {action}")
            self._bindings[key] = action
        logger.debug(f"Hotkeys loaded: {self._bindings}")

    def bindings(self):
        return dict(self._bindings)

    def resolve(self, key_combo):
        """키 조합에 묶인 액션 이름, 없으면 None"""
        return self._bindings.get(normalize_hotkey(key_combo))

    def handle_key(self, key_combo):
        action = self.resolve(key_combo)
        if action is None:
            return False
        logger.debug(f"Hotkey '{key_combo}' -> {action}")
        self.hotkey_triggered.emit(action)
        return True
