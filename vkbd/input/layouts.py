"""Built-in keyboard layout used when the host configures none."""

from __future__ import annotations

import copy

DEFAULT_LAYOUT: dict[str, list[str]] = {
    'default': [
        '` 1 2 3 4 5 6 7 8 9 0 - = {bksp}',
        '{tab} q w e r t y u i o p [ ] \\',
        "{lock} a s d f g h j k l ; ' {enter}",
        '{shift} z x c v b n m , . / {shift}',
        '.com @ {space}',
    ],
    'shift': [
        '~ ! @ # $ % ^ & * ( ) _ + {bksp}',
        '{tab} Q W E R T Y U I O P { } |',
        '{lock} A S D F G H J K L : " {enter}',
        '{shift} Z X C V B N M < > ? {shift}',
        '.com @ {space}',
    ],
}


def get_default_layout() -> dict[str, list[str]]:
    """Return a fresh copy of the default layout."""
    return copy.deepcopy(DEFAULT_LAYOUT)


def layout_identity(layout: dict | None) -> str:
    """Cheap change-detection proxy: row 1 of the ``default`` case."""
    if not layout:
        return ''
    rows = layout.get('default') or []
    if len(rows) > 1 and isinstance(rows[1], str):
        return rows[1]
    return ''
