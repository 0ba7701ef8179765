"""PyQt5 host wiring.

``QtScheduler`` backs the deferrals with ``QTimer``; ``KeyEventFilter``
feeds Qt key events into the document bus (candidate box navigation) and
into ``PhysicalKeyboard`` (button highlighting).
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from PyQt5.QtCore import QEvent, QObject, Qt, QTimer

from vkbd.core.event_bus import EventBus
from vkbd.core.events import Event, EventType, KeyboardEvent
from vkbd.input.evdev_codes import evdev_to_code
from vkbd.input.physical_keyboard import PhysicalKeyboard

logger = logging.getLogger(__name__)

# X11 and Wayland native scan codes are evdev keycodes shifted by 8
XKB_KEYCODE_OFFSET = 8

_QT_NAMED_KEYS = {
    Qt.Key_Return: 'Enter',
    Qt.Key_Enter: 'Enter',
    Qt.Key_Backspace: 'Backspace',
    Qt.Key_Tab: 'Tab',
    Qt.Key_Backtab: 'Tab',
    Qt.Key_Escape: 'Escape',
    Qt.Key_Space: ' ',
    Qt.Key_Up: 'ArrowUp',
    Qt.Key_Down: 'ArrowDown',
    Qt.Key_Left: 'ArrowLeft',
    Qt.Key_Right: 'ArrowRight',
    Qt.Key_Shift: 'Shift',
    Qt.Key_Control: 'Control',
    Qt.Key_Alt: 'Alt',
    Qt.Key_Meta: 'Meta',
    Qt.Key_CapsLock: 'CapsLock',
    Qt.Key_Delete: 'Delete',
    Qt.Key_Home: 'Home',
    Qt.Key_End: 'End',
}


def _guarded(callback: Callable[[], None]) -> Callable[[], None]:
    def run() -> None:
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed: %r", callback)
    return run


class QtScheduler:
    """Scheduler running callbacks from the Qt event loop."""

    FRAME_INTERVAL_MS = 16

    def request_animation_frame(self, callback: Callable[[], None]) -> None:
        QTimer.singleShot(self.FRAME_INTERVAL_MS, _guarded(callback))

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        QTimer.singleShot(max(0, int(delay * 1000)), _guarded(callback))


def key_event_from_qt(qevent) -> KeyboardEvent:
    """Convert a ``QKeyEvent`` into a ``KeyboardEvent``."""
    scan = qevent.nativeScanCode()
    code = evdev_to_code(scan - XKB_KEYCODE_OFFSET) if scan >= XKB_KEYCODE_OFFSET else ''
    key = _QT_NAMED_KEYS.get(qevent.key()) or qevent.text()
    mods = qevent.modifiers()
    return KeyboardEvent(
        code=code,
        key=key,
        key_code=qevent.key(),
        shift_key=bool(mods & Qt.ShiftModifier),
        ctrl_key=bool(mods & Qt.ControlModifier),
        alt_key=bool(mods & Qt.AltModifier),
        meta_key=bool(mods & Qt.MetaModifier),
        repeat=qevent.isAutoRepeat(),
    )


class KeyEventFilter(QObject):
    """Event filter forwarding key press/release to the bus and translator.

    Keys a document listener already handled never reach the translator.
    A key event is consumed (not passed on to the watched widget) when a
    handler prevented its default action.
    """

    def __init__(
        self,
        physical_keyboard: PhysicalKeyboard,
        document: EventBus,
        get_options: Callable[[], Mapping],
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.physical_keyboard = physical_keyboard
        self.document = document
        self.get_options = get_options

    def eventFilter(self, obj, event) -> bool:  # noqa: N802 (Qt API)
        etype = event.type()
        if etype == QEvent.KeyPress:
            return self.handle_key(key_event_from_qt(event), pressed=True)
        if etype == QEvent.KeyRelease:
            return self.handle_key(key_event_from_qt(event), pressed=False)
        return False

    def handle_key(self, key_event: KeyboardEvent, pressed: bool) -> bool:
        event_type = EventType.KEY_DOWN if pressed else EventType.KEY_UP
        self.document.publish(Event(type=event_type, data=key_event))
        if key_event.propagation_stopped or key_event.default_prevented:
            return key_event.default_prevented

        options = self.get_options() or {}
        if options.get('physical_keyboard_highlight', True):
            if pressed:
                self.physical_keyboard.handle_highlight_key_down(key_event)
            else:
                self.physical_keyboard.handle_highlight_key_up(key_event)
        return key_event.default_prevented
