"""Tests for vkbd.config — configuration loading, validation, ConfigManager."""

from __future__ import annotations

import json

import pytest

from vkbd.config import (
    DEFAULT_CONFIG,
    ConfigManager,
    _sanitize_json_text,
    load_config,
    validate_config,
)


# ------------------------------------------------------------------
# DEFAULT_CONFIG
# ------------------------------------------------------------------

class TestDefaultConfig:
    """DEFAULT_CONFIG contains all expected keys with correct types."""

    EXPECTED_KEYS = {
        'layout',
        'active_surface',
        'physical_keyboard_highlight',
        'physical_keyboard_highlight_press',
        'physical_keyboard_highlight_press_use_pointer_events',
        'physical_keyboard_highlight_press_use_click',
        'physical_keyboard_highlight_bg_color',
        'physical_keyboard_highlight_text_color',
        'layout_candidates_page_size',
        'candidate_box_close_delay',
        'display',
        'use_touch_events',
        'debug',
    }

    def test_contains_all_expected_keys(self):
        assert set(DEFAULT_CONFIG.keys()) == self.EXPECTED_KEYS

    def test_defaults_validate(self):
        assert validate_config(DEFAULT_CONFIG) == DEFAULT_CONFIG


# ------------------------------------------------------------------
# validate_config
# ------------------------------------------------------------------

class TestValidateConfig:
    """validate_config normalises input and rejects invalid values."""

    def test_valid_data_passes(self):
        result = validate_config({
            'layout': {'default': ['a b'], 'shift': ['A B']},
            'active_surface': 'keyboard',
            'physical_keyboard_highlight_press': True,
            'layout_candidates_page_size': '7',
            'candidate_box_close_delay': 0,
            'display': {'ni': '你'},
        })
        assert result['layout'] == {'default': ['a b'], 'shift': ['A B']}
        assert result['active_surface'] == 'keyboard'
        assert result['physical_keyboard_highlight_press'] is True
        assert result['layout_candidates_page_size'] == 7
        assert result['candidate_box_close_delay'] == 0.0
        assert result['display'] == {'ni': '你'}

    def test_none_gives_defaults(self):
        assert validate_config(None) == DEFAULT_CONFIG

    def test_defaults_are_not_shared(self):
        result = validate_config({})
        result['display']['x'] = 'y'
        assert DEFAULT_CONFIG['display'] == {}

    @pytest.mark.parametrize('conf', [
        {'physical_keyboard_highlight': 'yes'},
        {'use_touch_events': 1},
        {'active_surface': 'toolbar'},
        {'layout_candidates_page_size': 0},
        {'layout_candidates_page_size': 'many'},
        {'layout_candidates_page_size': True},
        {'candidate_box_close_delay': -1},
        {'candidate_box_close_delay': 'soon'},
        {'layout': ['a b']},
        {'layout': {'default': 'a b'}},
        {'layout': {'default': ['a', 2]}},
        {'display': ['x']},
        {'display': {'x': 1}},
        {'physical_keyboard_highlight_bg_color': ''},
    ])
    def test_invalid_values_raise(self, conf):
        with pytest.raises(ValueError):
            validate_config(conf)

    def test_short_layout_accepted(self):
        result = validate_config({'layout': {'default': ['1 2 3']}})
        assert result['layout'] == {'default': ['1 2 3']}


# ------------------------------------------------------------------
# _sanitize_json_text
# ------------------------------------------------------------------

class TestSanitize:
    def test_strips_comments_and_trailing_commas(self):
        raw = """
        # comment
        {
            "layout_candidates_page_size": 3, // inline
            "display": {"a": "b",},
        }
        """
        assert json.loads(_sanitize_json_text(raw)) == {
            'layout_candidates_page_size': 3,
            'display': {'a': 'b'},
        }

    def test_keeps_colors(self):
        raw = '{"physical_keyboard_highlight_bg_color": "#ff0000"}'
        assert json.loads(_sanitize_json_text(raw))['physical_keyboard_highlight_bg_color'] == '#ff0000'


# ------------------------------------------------------------------
# load_config
# ------------------------------------------------------------------

class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / 'missing.json')) == DEFAULT_CONFIG

    def test_merges_present_keys(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'layout_candidates_page_size': 9}), encoding='utf-8')
        cfg = load_config(str(path))
        assert cfg['layout_candidates_page_size'] == 9
        assert cfg['active_surface'] == 'editor'

    def test_commented_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{\n  // page size\n  "use_touch_events": true,\n}\n', encoding='utf-8')
        assert load_config(str(path))['use_touch_events'] is True

    def test_invalid_file_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{"layout_candidates_page_size": -4}', encoding='utf-8')
        assert load_config(str(path), debug=True) == DEFAULT_CONFIG

    def test_garbage_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('not json at all', encoding='utf-8')
        assert load_config(str(path), debug=True) == DEFAULT_CONFIG

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('[1, 2]', encoding='utf-8')
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_user_config_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv('HOME', str(tmp_path))
        user_dir = tmp_path / '.config' / 'vkbd'
        user_dir.mkdir(parents=True)
        (user_dir / 'config.json').write_text('{"debug": true}', encoding='utf-8')
        assert load_config()['debug'] is True


# ------------------------------------------------------------------
# ConfigManager
# ------------------------------------------------------------------

class TestConfigManager:
    def test_save_and_reload(self, tmp_path):
        path = str(tmp_path / 'sub' / 'config.json')
        mgr = ConfigManager(path)
        mgr.set('layout_candidates_page_size', 4)
        assert mgr.save() is True

        other = ConfigManager(path)
        assert other.get('layout_candidates_page_size') == 4

    def test_get_options_is_read_only(self, tmp_path):
        mgr = ConfigManager(str(tmp_path / 'config.json'))
        options = mgr.get_options()
        assert options['active_surface'] == 'editor'
        with pytest.raises(TypeError):
            options['active_surface'] = 'keyboard'

    def test_update_validate_reset(self, tmp_path):
        mgr = ConfigManager(str(tmp_path / 'config.json'))
        mgr.update({'active_surface': 'nowhere'})
        assert mgr.validate() is False
        mgr.reset_to_defaults()
        assert mgr.validate() is True
        assert mgr.get_all() == DEFAULT_CONFIG

    def test_reload_discards_unsaved(self, tmp_path):
        mgr = ConfigManager(str(tmp_path / 'config.json'))
        mgr.set('debug', True)
        assert mgr.reload() is True
        assert mgr.get('debug') is False

    def test_config_path(self, tmp_path):
        path = str(tmp_path / 'c.json')
        assert ConfigManager(path).config_path == path
