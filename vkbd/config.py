"""Configuration loader and validator for vkbd.

Provides ``load_config(path)`` which reads a JSON config (with
comment and trailing-comma tolerant sanitizer) and merges user
overrides from ``~/.config/vkbd/config.json``.

Also provides ``validate_config(conf)`` which normalizes and
validates config keys, raising ``ValueError`` on invalid values.
The resulting dict is the options snapshot handed to
``PhysicalKeyboard`` and ``CandidateBox`` through ``get_options``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import re
from types import MappingProxyType
from typing import Mapping

from vkbd.persistence import save_json

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = '~/.config/vkbd/config.json'

ACTIVE_SURFACES = ('editor', 'keyboard')

# Single source of truth for default configuration
DEFAULT_CONFIG: dict = {
    'layout': None,
    'active_surface': 'editor',
    'physical_keyboard_highlight': True,
    'physical_keyboard_highlight_press': False,
    'physical_keyboard_highlight_press_use_pointer_events': False,
    'physical_keyboard_highlight_press_use_click': False,
    'physical_keyboard_highlight_bg_color': '#dadce4',
    'physical_keyboard_highlight_text_color': 'black',
    'layout_candidates_page_size': 5,
    'candidate_box_close_delay': 0.15,
    'display': {},
    'use_touch_events': False,
    'debug': False,
}

_BOOL_KEYS = (
    'physical_keyboard_highlight',
    'physical_keyboard_highlight_press',
    'physical_keyboard_highlight_press_use_pointer_events',
    'physical_keyboard_highlight_press_use_click',
    'use_touch_events',
    'debug',
)

_COLOR_KEYS = (
    'physical_keyboard_highlight_bg_color',
    'physical_keyboard_highlight_text_color',
)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _sanitize_json_text(s: str) -> str:
    """Remove ``#``/``//`` comments and trailing commas from JSON-like text."""
    # Hash-style line comments
    s = re.sub(r"^[ \t]*#.*$", "", s, flags=re.MULTILINE)
    # C++-style line comments (not inside URLs like http://)
    s = re.sub(r"(?<!:)//.*$", "", s, flags=re.MULTILINE)
    # Trailing commas before } or ]
    s = re.sub(r",[ \t\r\n]*(\}|\])", r"\1", s)
    return s


def _validate_layout(layout) -> dict | None:
    if layout is None:
        return None
    if not isinstance(layout, dict):
        raise ValueError("Invalid 'layout': must be an object of case -> rows")
    out = {}
    for case, rows in layout.items():
        if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
            raise ValueError(f"Invalid 'layout' case {case!r}: must be a list of strings")
        out[str(case)] = list(rows)
    return out


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def validate_config(conf: Mapping | None) -> dict:
    """Validate and normalize configuration dictionary.

    Returns a normalized dict with all expected keys.
    Raises ``ValueError`` on invalid values.
    """
    if conf is None:
        conf = {}

    defaults = copy.deepcopy(DEFAULT_CONFIG)
    out = dict(defaults)

    for key in _BOOL_KEYS:
        val = conf.get(key, defaults[key])
        if not isinstance(val, bool):
            raise ValueError(f"Invalid '{key}': must be boolean")
        out[key] = val

    for key in _COLOR_KEYS:
        val = conf.get(key, defaults[key])
        if not isinstance(val, str) or not val:
            raise ValueError(f"Invalid '{key}': must be a non-empty string")
        out[key] = val

    # layout: None or {case: [row, ...]}
    out['layout'] = _validate_layout(conf.get('layout', defaults['layout']))

    # active_surface: one of ACTIVE_SURFACES
    surface = conf.get('active_surface', defaults['active_surface'])
    if surface not in ACTIVE_SURFACES:
        raise ValueError(f"Invalid 'active_surface': {surface!r} (expected one of {ACTIVE_SURFACES})")
    out['active_surface'] = surface

    # layout_candidates_page_size: int >= 1
    size_raw = conf.get('layout_candidates_page_size', defaults['layout_candidates_page_size'])
    if isinstance(size_raw, bool):
        raise ValueError(f"Invalid 'layout_candidates_page_size': {size_raw}")
    try:
        size = int(size_raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid 'layout_candidates_page_size': {size_raw}")
    if size < 1:
        raise ValueError("Invalid 'layout_candidates_page_size': must be >= 1")
    out['layout_candidates_page_size'] = size

    # candidate_box_close_delay: float in [0, 5]
    delay_raw = conf.get('candidate_box_close_delay', defaults['candidate_box_close_delay'])
    try:
        delay = float(delay_raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid 'candidate_box_close_delay': {delay_raw}")
    if not (0.0 <= delay <= 5.0):
        raise ValueError(f"Invalid 'candidate_box_close_delay': {delay_raw} (must be between 0 and 5)")
    out['candidate_box_close_delay'] = delay

    # display: {token: label}
    display = conf.get('display', defaults['display'])
    if display is None:
        display = {}
    if not isinstance(display, dict) or not all(isinstance(v, str) for v in display.values()):
        raise ValueError("Invalid 'display': must map tokens to strings")
    out['display'] = {str(k): v for k, v in display.items()}

    return out


def _read_and_merge(path: str, target_config: dict, debug: bool = False) -> bool:
    """Read a JSON file, validate, and merge into *target_config*.

    Returns True on success, False on any error.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError:
        return False

    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError:
        try:
            cfg = json.loads(_sanitize_json_text(raw))
        except json.JSONDecodeError as exc:
            if debug:
                logger.warning("JSON parse error in %s: %s", path, exc)
            return False

    if not isinstance(cfg, dict):
        if debug:
            logger.warning("Invalid config %s: top level must be an object", path)
        return False

    try:
        validated = validate_config(cfg)
    except ValueError as verr:
        if debug:
            logger.warning("Invalid config %s: %s", path, verr)
        return False

    # Only override keys explicitly present in source
    for k in cfg:
        if k in validated:
            target_config[k] = validated[k]
    return True


# ------------------------------------------------------------------
# Top-level loader
# ------------------------------------------------------------------

def load_config(config_path: str | None = None, debug: bool = False) -> dict:
    """Load and merge configuration.

    If *config_path* is given, uses only that file (returns defaults if
    the file does not exist). Otherwise falls back to
    ``~/.config/vkbd/config.json``.

    Returns the effective configuration dict (always has all default keys).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is not None:
        if os.path.exists(config_path):
            _read_and_merge(config_path, config, debug=debug)
        return config

    user_cfg = os.path.expanduser(USER_CONFIG_PATH)
    if os.path.exists(user_cfg):
        _read_and_merge(user_cfg, config, debug=debug)

    return config


# ------------------------------------------------------------------
# ConfigManager
# ------------------------------------------------------------------

class ConfigManager:
    """Centralized configuration management with load/save/validate."""

    def __init__(self, config_path: str | None = None, debug: bool = False):
        self._config_path = config_path or os.path.expanduser(USER_CONFIG_PATH)
        self._debug = debug
        self._config: dict = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config()

    # -- internal -------------------------------------------------------

    def _load_config(self) -> None:
        """Reset to defaults, then overlay from file (if exists)."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        if self._config_path and os.path.exists(self._config_path):
            _read_and_merge(self._config_path, self._config, debug=self._debug)

    # -- public ---------------------------------------------------------

    def reload(self) -> bool:
        """Reload configuration from file. Returns True on success."""
        try:
            self._load_config()
            return True
        except OSError:
            return False

    def save(self, target_path: str | None = None) -> bool:
        """Atomically save configuration to file. Returns True on success."""
        save_path = target_path or self._config_path
        try:
            save_json(save_path, self.get_all())
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Cannot save config to %s: %s", save_path, exc)
            return False

    def get(self, key: str, default=None):
        """Get a single configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value) -> None:
        """Set a single configuration value."""
        self._config[key] = value

    def update(self, updates: dict) -> None:
        """Update multiple configuration values."""
        self._config.update(updates)

    def get_all(self) -> dict:
        """Return all configuration (excluding internal keys)."""
        return {k: v for k, v in self._config.items() if not k.startswith('_')}

    def get_options(self) -> Mapping:
        """Read-only snapshot of the current options."""
        return MappingProxyType(self.get_all())

    def reset_to_defaults(self) -> None:
        """Reset configuration to DEFAULT_CONFIG."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)

    def validate(self) -> bool:
        """Validate current configuration. Returns True if valid."""
        try:
            validate_config(self._config)
            return True
        except ValueError:
            return False

    @property
    def config_path(self) -> str:
        """Current config file path."""
        return self._config_path
