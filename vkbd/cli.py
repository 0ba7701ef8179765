#!/usr/bin/env python3
"""
vkbd diagnostic CLI: inspect layout mappings and watch physical keys.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback

from vkbd import __version__
from vkbd.log import setup_logging


class _HeadlessKeyboard:
    """Button lookup that accepts every name, for resolving without a UI."""

    def __init__(self):
        self.pressed: list[str] = []

    def get_button_element(self, name: str):
        return name

    def handle_button_clicked(self, name: str, event=None) -> None:
        self.pressed.append(name)


def _load_layout(path: str | None) -> dict | None:
    if path is None:
        return None
    with open(path, 'r', encoding='utf-8') as f:
        layout = json.load(f)
    if not isinstance(layout, dict):
        raise ValueError(f"{path}: layout must be a JSON object")
    return layout


def _build_options(args) -> dict:
    from vkbd.config import load_config

    options = load_config(args.config, args.debug)
    layout = _load_layout(getattr(args, 'layout', None))
    if layout is not None:
        options['layout'] = layout
    return options


def _make_keyboard(options: dict):
    from vkbd.input.physical_keyboard import PhysicalKeyboard

    headless = _HeadlessKeyboard()
    keyboard = PhysicalKeyboard(
        dispatch=lambda fn: fn(headless),
        get_options=lambda: options,
    )
    return keyboard


def cmd_map(args) -> int:
    from vkbd.input.layout_mapper import build_mapping
    from vkbd.input.layouts import get_default_layout

    options = _build_options(args)
    mapping = build_mapping(options.get('layout') or get_default_layout())
    for code, entry in mapping.items():
        print(f"{code:<14} {entry.normal!r:<10} {entry.shift!r}")
    return 0


def cmd_resolve(args) -> int:
    from vkbd.core.events import KeyboardEvent

    keyboard = _make_keyboard(_build_options(args))
    keyboard.shift_active = args.shift
    keyboard.capslock_active = args.capslock
    print(keyboard.get_layout_key(KeyboardEvent(code=args.code, key=args.key or '')))
    return 0


def cmd_watch(args) -> int:
    import evdev
    from evdev import ecodes

    from vkbd.input.evdev_codes import EvdevKeyTranslator

    log = logging.getLogger('vkbd')
    keyboard = _make_keyboard(_build_options(args))
    translator = EvdevKeyTranslator()

    device = evdev.InputDevice(args.device)
    log.info("Watching %s (%s)", device.path, device.name)
    try:
        for event in device.read_loop():
            if event.type != ecodes.EV_KEY:
                continue
            key_event, is_press = translator.translate(event.code, event.value)
            if is_press:
                name = keyboard.handle_highlight_key_down(key_event)
                print(f"{key_event.code or event.code:<14} -> {name or '(unmapped)'}")
            else:
                keyboard.handle_highlight_key_up(key_event)
    finally:
        device.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='vkbd',
        description='Physical keyboard to virtual keyboard mapping diagnostics',
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug mode with verbose logging')
    parser.add_argument('--config', type=str, default=None, help='Path to config file')
    parser.add_argument('--logfile', type=str, default=None, help='Path to log file (default: ~/.vkbd.log)')
    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)

    sub = parser.add_subparsers(dest='command', required=True)

    p_map = sub.add_parser('map', help='Print the code -> button table for a layout')
    p_map.add_argument('--layout', type=str, default=None, help='Layout JSON file')
    p_map.set_defaults(func=cmd_map)

    p_resolve = sub.add_parser('resolve', help='Resolve one key code to a button name')
    p_resolve.add_argument('code', help='KeyboardEvent.code, e.g. KeyA')
    p_resolve.add_argument('--key', type=str, default=None, help='KeyboardEvent.key for the fallback path')
    p_resolve.add_argument('--shift', action='store_true')
    p_resolve.add_argument('--capslock', action='store_true')
    p_resolve.add_argument('--layout', type=str, default=None, help='Layout JSON file')
    p_resolve.set_defaults(func=cmd_resolve)

    p_watch = sub.add_parser('watch', help='Print resolved buttons for a live input device')
    p_watch.add_argument('device', help='Input device path, e.g. /dev/input/event3')
    p_watch.add_argument('--layout', type=str, default=None, help='Layout JSON file')
    p_watch.set_defaults(func=cmd_watch)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the vkbd CLI"""
    args = build_parser().parse_args(argv)
    log = setup_logging(debug=args.debug, log_file=args.logfile)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        return 0
    except PermissionError as e:
        log.error("Permission error: %s", e)
        log.error("Try running with: sudo usermod -a -G input $USER")
        return 1
    except (OSError, ValueError) as e:
        log.error("%s", e)
        log.debug(traceback.format_exc())
        return 1


if __name__ == '__main__':
    sys.exit(main())
