"""Tests for vkbd.input.key_codes — canonical identifiers and keyCode helpers."""

from __future__ import annotations

import pytest

from vkbd.core.events import KeyboardEvent
from vkbd.input.key_codes import (
    QWERTY_ROWS,
    ROW_LENGTHS,
    STANDARD_CODES,
    is_modifier_key,
    key_code_to_key,
    normalize_code,
)


class TestNormalizeCode:
    def test_exact_match(self):
        assert normalize_code('ShiftLeft') == 'ShiftLeft'

    def test_wrong_case(self):
        assert normalize_code('shiftleft') == 'ShiftLeft'
        assert normalize_code('KEYA') == 'KeyA'

    def test_surrounding_whitespace(self):
        assert normalize_code(' digit1 ') == 'Digit1'

    @pytest.mark.parametrize('value', ['', None, 'Fn', 'IntlBackslash', 42])
    def test_unknown_returns_none(self, value):
        assert normalize_code(value) is None


def test_grid_matches_row_lengths():
    assert [len(row) for row in QWERTY_ROWS] == list(ROW_LENGTHS)


def test_grid_codes_are_standard():
    for row in QWERTY_ROWS:
        for code in row:
            assert code in STANDARD_CODES


def test_standard_codes_cover_function_and_numpad_keys():
    assert {'F1', 'F12', 'Numpad0', 'NumpadEnter', 'ContextMenu'} <= STANDARD_CODES


class TestKeyCodeToKey:
    @pytest.mark.parametrize('key_code, key', [
        (8, 'Backspace'),
        (27, 'Esc'),
        (48, '0'),
        (65, 'A'),
        (90, 'Z'),
        (96, 'Numpad0'),
        (112, 'F1'),
        (123, 'F12'),
        (222, "'"),
    ])
    def test_known(self, key_code, key):
        assert key_code_to_key(key_code) == key

    def test_unknown(self):
        assert key_code_to_key(999) == ''


class TestIsModifierKey:
    def test_modifier_flags(self):
        assert is_modifier_key(KeyboardEvent(code='KeyA', shift_key=True))
        assert is_modifier_key(KeyboardEvent(code='KeyA', ctrl_key=True))
        assert is_modifier_key(KeyboardEvent(code='KeyA', alt_key=True))

    def test_navigation_codes(self):
        assert is_modifier_key(KeyboardEvent(code='ArrowLeft'))
        assert is_modifier_key(KeyboardEvent(code='Tab'))

    def test_legacy_key_code(self):
        assert is_modifier_key(KeyboardEvent(key_code=20))  # CapsLock

    def test_plain_key(self):
        assert not is_modifier_key(KeyboardEvent(code='KeyA', key='a'))
