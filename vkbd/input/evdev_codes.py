"""evdev keycode → canonical key identifier translation.

Builds ``KeyboardEvent`` objects from raw Linux input key events so a
physical keyboard read through evdev can drive ``PhysicalKeyboard``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vkbd.core.events import KeyboardEvent

logger = logging.getLogger(__name__)

# Linux input-event-codes.h key numbers → KeyboardEvent.code
EVDEV_TO_CODE: dict[int, str] = {
    1: 'Escape',
    2: 'Digit1', 3: 'Digit2', 4: 'Digit3', 5: 'Digit4', 6: 'Digit5',
    7: 'Digit6', 8: 'Digit7', 9: 'Digit8', 10: 'Digit9', 11: 'Digit0',
    12: 'Minus', 13: 'Equal', 14: 'Backspace', 15: 'Tab',
    16: 'KeyQ', 17: 'KeyW', 18: 'KeyE', 19: 'KeyR', 20: 'KeyT', 21: 'KeyY',
    22: 'KeyU', 23: 'KeyI', 24: 'KeyO', 25: 'KeyP',
    26: 'BracketLeft', 27: 'BracketRight', 28: 'Enter', 29: 'ControlLeft',
    30: 'KeyA', 31: 'KeyS', 32: 'KeyD', 33: 'KeyF', 34: 'KeyG', 35: 'KeyH',
    36: 'KeyJ', 37: 'KeyK', 38: 'KeyL', 39: 'Semicolon', 40: 'Quote',
    41: 'Backquote', 42: 'ShiftLeft', 43: 'Backslash',
    44: 'KeyZ', 45: 'KeyX', 46: 'KeyC', 47: 'KeyV', 48: 'KeyB', 49: 'KeyN',
    50: 'KeyM', 51: 'Comma', 52: 'Period', 53: 'Slash', 54: 'ShiftRight',
    55: 'NumpadMultiply', 56: 'AltLeft', 57: 'Space', 58: 'CapsLock',
    59: 'F1', 60: 'F2', 61: 'F3', 62: 'F4', 63: 'F5', 64: 'F6',
    65: 'F7', 66: 'F8', 67: 'F9', 68: 'F10',
    69: 'NumLock', 70: 'ScrollLock',
    71: 'Numpad7', 72: 'Numpad8', 73: 'Numpad9', 74: 'NumpadSubtract',
    75: 'Numpad4', 76: 'Numpad5', 77: 'Numpad6', 78: 'NumpadAdd',
    79: 'Numpad1', 80: 'Numpad2', 81: 'Numpad3', 82: 'Numpad0', 83: 'NumpadDecimal',
    87: 'F11', 88: 'F12',
    96: 'NumpadEnter', 97: 'ControlRight', 98: 'NumpadDivide', 99: 'PrintScreen',
    100: 'AltRight', 102: 'Home', 103: 'ArrowUp', 104: 'PageUp',
    105: 'ArrowLeft', 106: 'ArrowRight', 107: 'End', 108: 'ArrowDown',
    109: 'PageDown', 110: 'Insert', 111: 'Delete', 119: 'Pause',
    125: 'MetaLeft', 126: 'MetaRight', 127: 'ContextMenu',
}

# KeyboardEvent.key for keys whose value is a name rather than a character
_NAMED_KEYS: dict[str, str] = {
    'Escape': 'Escape', 'Backspace': 'Backspace', 'Tab': 'Tab', 'Enter': 'Enter',
    'NumpadEnter': 'Enter', 'Space': ' ', 'CapsLock': 'CapsLock',
    'ShiftLeft': 'Shift', 'ShiftRight': 'Shift',
    'ControlLeft': 'Control', 'ControlRight': 'Control',
    'AltLeft': 'Alt', 'AltRight': 'Alt', 'MetaLeft': 'Meta', 'MetaRight': 'Meta',
    'ArrowUp': 'ArrowUp', 'ArrowDown': 'ArrowDown',
    'ArrowLeft': 'ArrowLeft', 'ArrowRight': 'ArrowRight',
    'Home': 'Home', 'End': 'End', 'PageUp': 'PageUp', 'PageDown': 'PageDown',
    'Insert': 'Insert', 'Delete': 'Delete',
}

_MODIFIERS = {
    'ShiftLeft': 'shift', 'ShiftRight': 'shift',
    'ControlLeft': 'ctrl', 'ControlRight': 'ctrl',
    'AltLeft': 'alt', 'AltRight': 'alt',
    'MetaLeft': 'meta', 'MetaRight': 'meta',
}

KEY_RELEASE = 0
KEY_PRESS = 1
KEY_REPEAT = 2


def evdev_to_code(keycode: int) -> str:
    """Return canonical identifier for an evdev keycode. Empty string if unknown."""
    return EVDEV_TO_CODE.get(keycode, '')


def key_for_code(code: str) -> str:
    """Best-effort ``KeyboardEvent.key`` for a canonical code."""
    if code in _NAMED_KEYS:
        return _NAMED_KEYS[code]
    if code.startswith('Key') and len(code) == 4:
        return code[3].lower()
    if code.startswith('Digit'):
        return code[5:]
    if code.startswith('F') and code[1:].isdigit():
        return code
    return ''


@dataclass
class EvdevKeyTranslator:
    """Builds KeyboardEvents from evdev (keycode, value) pairs.

    Tracks held modifiers so every event carries correct modifier flags.
    """

    held: set[str] = field(default_factory=set)

    def translate(self, keycode: int, value: int) -> tuple[KeyboardEvent, bool]:
        """Return ``(event, is_press)``. Repeats count as presses with ``repeat`` set."""
        code = evdev_to_code(keycode)
        if not code:
            logger.debug("Unknown evdev keycode %d", keycode)
        is_press = value != KEY_RELEASE

        modifier = _MODIFIERS.get(code)
        if modifier:
            if is_press:
                self.held.add(code)
            else:
                self.held.discard(code)

        held_kinds = {_MODIFIERS[c] for c in self.held}
        event = KeyboardEvent(
            code=code,
            key=key_for_code(code),
            shift_key='shift' in held_kinds,
            ctrl_key='ctrl' in held_kinds,
            alt_key='alt' in held_kinds,
            meta_key='meta' in held_kinds,
            repeat=value == KEY_REPEAT,
        )
        return event, is_press
