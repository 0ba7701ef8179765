"""PhysicalKeyboard — mirrors physical key presses onto virtual buttons.

Resolves each physical key event to the button name the active layout
puts at that key position, then highlights (and optionally presses) the
matching virtual button(s) through the host's ``dispatch`` callback.

Every lookup failure degrades to a no-op: physical keyboards emit keys the
layout cannot represent and dispatch must never crash the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

import vkbd.log  # registers TRACE level and logger.trace()
from vkbd.core.events import KeyboardEvent
from vkbd.core.scheduler import Scheduler
from vkbd.input.key_codes import SHIFT_CODES, normalize_code
from vkbd.input.layout_mapper import KeyMapping, build_mapping
from vkbd.input.layouts import get_default_layout, layout_identity

logger = logging.getLogger(__name__)

# Named keys resolved from ``event.key`` when the code is unusable
FALLBACK_KEYS = frozenset({'backspace', 'enter', 'tab', 'escape'})

_OUTPUT_ALIASES = {
    'shiftleft': 'shift',
    'shiftright': 'shift',
    'controlleft': 'ctrl',
    'controlright': 'ctrl',
    'altleft': 'alt',
    'altright': 'alt',
    'metaleft': 'meta',
    'metaright': 'meta',
    'backspace': 'bksp',
    'capslock': 'lock',
    'enter': 'enter',
    'tab': 'tab',
}

DEFAULT_HIGHLIGHT_BG = '#dadce4'
DEFAULT_HIGHLIGHT_TEXT = 'black'


@dataclass(frozen=True)
class ButtonMatch:
    """Zero, one or many host elements found for one button name."""

    name: str = ''
    elements: tuple = ()

    @classmethod
    def from_lookup(cls, name: str, found: Any) -> 'ButtonMatch':
        if not found:
            return cls(name, ())
        if isinstance(found, (list, tuple)):
            return cls(name, tuple(el for el in found if el is not None))
        return cls(name, (found,))

    def __bool__(self) -> bool:
        return bool(self.elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def first(self) -> Any:
        return self.elements[0] if self.elements else None


def normalize_output(raw_key: str) -> str:
    """Collapse modifier variants and named keys to button action names.

    Single characters pass through unchanged (case kept); other
    multi-character values are lower-cased.
    """
    key = raw_key.lower()
    alias = _OUTPUT_ALIASES.get(key)
    if alias:
        return alias
    return key if len(key) > 1 else raw_key


def find_button(instance: Any, name: str) -> ButtonMatch:
    """Look *name* up as a standard button, then as ``{name}``."""
    if not name:
        return ButtonMatch()
    match = ButtonMatch.from_lookup(name, instance.get_button_element(name))
    if match:
        return match
    function_name = f'{{{name}}}'
    return ButtonMatch.from_lookup(function_name, instance.get_button_element(function_name))


class PhysicalKeyboard:
    """Translates physical key events into virtual button highlights/presses."""

    def __init__(
        self,
        dispatch: Callable[[Callable[[Any], None]], None],
        get_options: Callable[[], Mapping],
        get_nav_engaged: Optional[Callable[[], bool]] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.dispatch = dispatch
        self.get_options = get_options
        self.get_nav_engaged = get_nav_engaged or (lambda: False)
        self.scheduler = scheduler

        self.shift_active = False
        self.capslock_active = False
        self.active_keys: set = set()

        self.layout_map: dict[str, KeyMapping] = {}
        self.last_layout = ''
        self._rebuild_layout(self._current_layout())

    # ------------------------------------------------------------------
    # Layout cache
    # ------------------------------------------------------------------

    def _options(self) -> Mapping:
        return self.get_options() or {}

    def _current_layout(self) -> dict:
        return self._options().get('layout') or get_default_layout()

    def _rebuild_layout(self, layout: dict) -> None:
        self.last_layout = layout_identity(layout)
        self.layout_map = build_mapping(layout)
        logger.debug("Layout map rebuilt (identity=%r)", self.last_layout)

    def _sync_layout(self) -> None:
        layout = self._current_layout()
        if layout_identity(layout) != self.last_layout:
            self._rebuild_layout(layout)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_to_standard_code(value: object) -> str | None:
        return normalize_code(value)

    @staticmethod
    def normalize_output(raw_key: str) -> str:
        return normalize_output(raw_key)

    def get_layout_key(self, event: KeyboardEvent) -> str:
        """Return the button name for *event*, or '' if unmapped."""
        self._sync_layout()

        code = normalize_code(event.code)
        entry = self.layout_map.get(code) if code else None
        if entry is not None:
            output = entry.shift if (self.shift_active or self.capslock_active) else entry.normal
            resolved = normalize_output(output) if output else ''
            logger.trace("Resolved %s -> %r", code, resolved)  # type: ignore[attr-defined]
            return resolved

        key = (event.key or '').lower()
        if key in FALLBACK_KEYS:
            return normalize_output(key)

        logger.debug("Unmapped key event: code=%r key=%r key_code=%r",
                     event.code, event.key, event.key_code)
        return ''

    # ------------------------------------------------------------------
    # Highlight / press
    # ------------------------------------------------------------------

    def _run_dispatch(self, action: Callable[[Any], None]) -> None:
        try:
            self.dispatch(action)
        except Exception:
            logger.exception("Host dispatch failed")

    @staticmethod
    def _clear_style(element: Any) -> None:
        if hasattr(element, 'remove_attribute'):
            element.remove_attribute('style')

    def handle_highlight_key_down(self, event: KeyboardEvent) -> str:
        """Process a physical key press. Returns the button name acted on."""
        options = self._options()

        if event.code in SHIFT_CODES and not self.shift_active:
            self.shift_active = True

        if event.code == 'CapsLock' and not event.repeat:
            self.capslock_active = not self.capslock_active

        if self.get_nav_engaged() and options.get('active_surface') == 'keyboard':
            # Navigation mode owns physical input
            event.prevent_default()
            event.stop_immediate_propagation()
            return ''

        button = self.get_layout_key(event)
        if not button:
            return ''

        pressed: list[str] = []

        def action(instance: Any) -> None:
            match = find_button(instance, button)
            if not match:
                return

            bg = options.get('physical_keyboard_highlight_bg_color') or DEFAULT_HIGHLIGHT_BG
            fg = options.get('physical_keyboard_highlight_text_color') or DEFAULT_HIGHLIGHT_TEXT
            for element in match:
                style = getattr(element, 'style', None)
                if style is not None:
                    style['background'] = bg
                    style['color'] = fg
                self.active_keys.add(element)
            pressed.append(match.name)

            # Several buttons may share a name; press only one of them
            if options.get('physical_keyboard_highlight_press'):
                self._press(instance, match, event, options)

        self._run_dispatch(action)
        return pressed[0] if pressed else ''

    @staticmethod
    def _press(instance: Any, match: ButtonMatch, event: KeyboardEvent, options: Mapping) -> None:
        target = match.first
        if options.get('physical_keyboard_highlight_press_use_pointer_events'):
            if hasattr(target, 'fire'):
                target.fire('pointerdown', event)
        elif options.get('physical_keyboard_highlight_press_use_click'):
            if hasattr(target, 'click'):
                target.click()
        else:
            instance.handle_button_clicked(match.name, event)

    def handle_highlight_key_up(self, event: KeyboardEvent) -> str:
        """Process a physical key release. Returns the button name released."""
        options = self._options()

        if event.code in SHIFT_CODES:
            self.shift_active = False

        button = self.get_layout_key(event)
        released: list[str] = []

        def action(instance: Any) -> None:
            match = find_button(instance, button)
            if not match:
                return
            for element in match:
                self._clear_style(element)
                self.active_keys.discard(element)
            released.append(match.name)
            if options.get('physical_keyboard_highlight_press_use_pointer_events'):
                target = match.first
                if hasattr(target, 'fire'):
                    target.fire('pointerup', event)

        if button:
            self._run_dispatch(action)

        if self.scheduler is not None:
            self.scheduler.request_animation_frame(self.sweep_active_keys)
        else:
            self.sweep_active_keys()
        return released[0] if released else ''

    def sweep_active_keys(self) -> None:
        """Clear highlight from buttons whose key-up never arrived."""
        if not self.active_keys:
            return
        stale, self.active_keys = self.active_keys, set()
        for element in stale:
            self._clear_style(element)
        logger.trace("Swept %d stale highlighted keys", len(stale))  # type: ignore[attr-defined]
