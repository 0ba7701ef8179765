"""Canonical physical-key identifiers and legacy keyCode helpers."""

from __future__ import annotations

# Canonical ``KeyboardEvent.code`` names understood by the translator.
STANDARD_CODES: frozenset[str] = frozenset([
    # Alphanumeric
    'Backquote',
    *(f'Digit{n}' for n in range(10)),
    *(f'Key{c}' for c in 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'),
    # Control & nav
    'Enter', 'Escape', 'Backspace', 'Tab', 'Space',
    'ArrowLeft', 'ArrowRight', 'ArrowUp', 'ArrowDown',
    'Delete', 'Insert', 'Home', 'End', 'PageUp', 'PageDown',
    # Modifier keys
    'ShiftLeft', 'ShiftRight', 'ControlLeft', 'ControlRight',
    'AltLeft', 'AltRight', 'MetaLeft', 'MetaRight', 'CapsLock',
    # Symbols & punctuation
    'Minus', 'Equal', 'BracketLeft', 'BracketRight', 'Backslash',
    'Semicolon', 'Quote', 'Comma', 'Period', 'Slash',
    # Function keys
    *(f'F{n}' for n in range(1, 13)),
    # Numpad
    'NumLock',
    *(f'Numpad{n}' for n in range(10)),
    'NumpadAdd', 'NumpadSubtract', 'NumpadMultiply', 'NumpadDivide',
    'NumpadDecimal', 'NumpadEnter',
    # Misc
    'ScrollLock', 'Pause', 'PrintScreen', 'ContextMenu',
])

# Lower-cased lookup for case-insensitive normalization
_CODES_BY_LOWER: dict[str, str] = {code.lower(): code for code in STANDARD_CODES}

# Keys per row of the canonical grid: number row, top letters, home row,
# bottom letters, modifier/space row.
ROW_LENGTHS: tuple[int, ...] = (14, 14, 13, 12, 3)

QWERTY_ROWS: tuple[tuple[str, ...], ...] = (
    ('Backquote', 'Digit1', 'Digit2', 'Digit3', 'Digit4', 'Digit5', 'Digit6',
     'Digit7', 'Digit8', 'Digit9', 'Digit0', 'Minus', 'Equal', 'Backspace'),
    ('Tab', 'KeyQ', 'KeyW', 'KeyE', 'KeyR', 'KeyT', 'KeyY', 'KeyU', 'KeyI',
     'KeyO', 'KeyP', 'BracketLeft', 'BracketRight', 'Backslash'),
    ('CapsLock', 'KeyA', 'KeyS', 'KeyD', 'KeyF', 'KeyG', 'KeyH', 'KeyJ',
     'KeyK', 'KeyL', 'Semicolon', 'Quote', 'Enter'),
    ('ShiftLeft', 'KeyZ', 'KeyX', 'KeyC', 'KeyV', 'KeyB', 'KeyN', 'KeyM',
     'Comma', 'Period', 'Slash', 'ShiftRight'),
    ('ControlLeft', 'AltLeft', 'Space'),
)

SHIFT_CODES = frozenset({'ShiftLeft', 'ShiftRight'})

# Legacy numeric ``KeyboardEvent.keyCode`` → key name
KEYCODE_TO_KEY: dict[int, str] = {
    8: 'Backspace', 9: 'Tab', 13: 'Enter', 16: 'Shift', 17: 'Ctrl', 18: 'Alt',
    19: 'Pause', 20: 'CapsLock', 27: 'Esc', 32: 'Space',
    33: 'PageUp', 34: 'PageDown', 35: 'End', 36: 'Home',
    37: 'ArrowLeft', 38: 'ArrowUp', 39: 'ArrowRight', 40: 'ArrowDown',
    45: 'Insert', 46: 'Delete',
    **{48 + n: str(n) for n in range(10)},
    **{65 + i: c for i, c in enumerate('ABCDEFGHIJKLMNOPQRSTUVWXYZ')},
    91: 'Meta',
    **{96 + n: f'Numpad{n}' for n in range(10)},
    106: 'NumpadMultiply', 107: 'NumpadAdd', 109: 'NumpadSubtract',
    110: 'NumpadDecimal', 111: 'NumpadDivide',
    **{111 + n: f'F{n}' for n in range(1, 13)},
    144: 'NumLock', 145: 'ScrollLock',
    186: ';', 187: '=', 188: ',', 189: '-', 190: '.', 191: '/', 192: '`',
    219: '[', 220: '\\', 221: ']', 222: "'",
}

_MODIFIER_LIKE = frozenset({
    'Tab', 'CapsLock', 'Esc', 'ArrowUp', 'ArrowDown', 'ArrowLeft', 'ArrowRight',
})


def normalize_code(value: object) -> str | None:
    """Return the canonical identifier for *value*, or None.

    Exact match first, then case-insensitive.
    """
    if not value or not isinstance(value, str):
        return None
    if value in STANDARD_CODES:
        return value
    return _CODES_BY_LOWER.get(value.strip().lower())


def key_code_to_key(key_code: int) -> str:
    """Return key name for a legacy numeric keyCode. Empty string if unknown."""
    return KEYCODE_TO_KEY.get(key_code, '')


def is_modifier_key(event) -> bool:
    """True when *event* carries a modifier flag or is a navigation-like key."""
    if event.alt_key or event.ctrl_key or event.shift_key:
        return True
    name = event.code or event.key or key_code_to_key(event.key_code)
    return name in _MODIFIER_LIKE
