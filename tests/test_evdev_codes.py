"""Tests for evdev keycode translation."""

from __future__ import annotations

import pytest

from vkbd.input.evdev_codes import (
    EVDEV_TO_CODE,
    KEY_PRESS,
    KEY_RELEASE,
    KEY_REPEAT,
    EvdevKeyTranslator,
    evdev_to_code,
    key_for_code,
)
from vkbd.input.key_codes import QWERTY_ROWS, STANDARD_CODES


def test_every_mapped_code_is_standard():
    assert set(EVDEV_TO_CODE.values()) <= STANDARD_CODES


def test_every_grid_key_reachable():
    grid = {code for row in QWERTY_ROWS for code in row}
    assert grid <= set(EVDEV_TO_CODE.values())


@pytest.mark.parametrize('keycode, code', [
    (30, 'KeyA'), (2, 'Digit1'), (41, 'Backquote'), (42, 'ShiftLeft'),
    (54, 'ShiftRight'), (57, 'Space'), (28, 'Enter'), (58, 'CapsLock'),
])
def test_evdev_to_code(keycode, code):
    assert evdev_to_code(keycode) == code


def test_unknown_keycode():
    assert evdev_to_code(9999) == ''


@pytest.mark.parametrize('code, key', [
    ('KeyA', 'a'), ('Digit7', '7'), ('Enter', 'Enter'), ('Space', ' '),
    ('F5', 'F5'), ('Comma', ''),
])
def test_key_for_code(code, key):
    assert key_for_code(code) == key


class TestTranslator:
    def test_press_and_release(self):
        tr = EvdevKeyTranslator()
        event, is_press = tr.translate(30, KEY_PRESS)
        assert is_press and event.code == 'KeyA' and event.key == 'a'
        event, is_press = tr.translate(30, KEY_RELEASE)
        assert not is_press

    def test_repeat_counts_as_press(self):
        tr = EvdevKeyTranslator()
        event, is_press = tr.translate(30, KEY_REPEAT)
        assert is_press and event.repeat
        event, _ = tr.translate(30, KEY_PRESS)
        assert not event.repeat

    def test_modifier_flags_follow_held_keys(self):
        tr = EvdevKeyTranslator()
        tr.translate(42, KEY_PRESS)
        event, _ = tr.translate(30, KEY_PRESS)
        assert event.shift_key and not event.ctrl_key
        tr.translate(42, KEY_RELEASE)
        event, _ = tr.translate(30, KEY_PRESS)
        assert not event.shift_key

    def test_both_shifts(self):
        tr = EvdevKeyTranslator()
        tr.translate(42, KEY_PRESS)
        tr.translate(54, KEY_PRESS)
        tr.translate(42, KEY_RELEASE)
        event, _ = tr.translate(30, KEY_PRESS)
        assert event.shift_key

    def test_unknown_keycode_builds_empty_event(self):
        tr = EvdevKeyTranslator()
        event, is_press = tr.translate(9999, KEY_PRESS)
        assert event.code == '' and event.key == '' and is_press
