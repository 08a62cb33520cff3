#!/usr/bin/env python3
# tests/test_engine.py - Unit tests for engine.py (key handling only)

import pytest
import os
import sys
from unittest.mock import MagicMock, patch

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

gi = pytest.importorskip('gi')
try:
    gi.require_version('IBus', '1.0')
    from gi.repository import IBus
except (ValueError, ImportError):
    pytest.skip('IBus typelib is not available', allow_module_level=True)

import engine


@pytest.fixture
def config():
    return {
        "input_method": "telex",
        "accent_style": "new",
        "logging_level": "WARNING"
    }


@pytest.fixture
def vi_engine(config):
    with patch('util.get_config_data', return_value=(config, '')):
        eng = engine.EngineVi()
    eng.commit_text = MagicMock()
    eng.update_preedit_text = MagicMock()
    eng.update_property = MagicMock()
    eng.register_properties = MagicMock()
    yield eng


def press(eng, text):
    results = []
    for char in text:
        results.append(eng.process_key_event(ord(char), 0))
    return results


def last_preedit(eng):
    return eng.update_preedit_text.call_args[0][0].get_text()


def committed(eng):
    return [c[0][0].get_text() for c in eng.commit_text.call_args_list]


class TestVietnameseMode:
    """Keys typed in Vietnamese mode (V)"""

    def test_preedit_follows_each_key(self, vi_engine):
        previews = []
        for char in 'vieetj':
            assert vi_engine.process_key_event(ord(char), 0) is True
            previews.append(last_preedit(vi_engine))
        assert previews == ['v', 'vi', 'vie', 'viê', 'viêt', 'việt']
        vi_engine.commit_text.assert_not_called()

    def test_space_commits_word(self, vi_engine):
        press(vi_engine, 'vieetj ')
        assert committed(vi_engine) == ['việt ']
        assert last_preedit(vi_engine) == ''

    def test_key_release_is_ignored(self, vi_engine):
        assert vi_engine.process_key_event(ord('a'), IBus.ModifierType.RELEASE_MASK) is False

    def test_backspace_drops_last_key(self, vi_engine):
        press(vi_engine, 'tieengs')
        assert last_preedit(vi_engine) == 'tiếng'
        assert vi_engine.process_key_event(IBus.BackSpace, 0) is True
        assert last_preedit(vi_engine) == 'tiêng'

    def test_backspace_without_word_passes_through(self, vi_engine):
        assert vi_engine.process_key_event(IBus.BackSpace, 0) is False

    def test_return_commits_and_passes_through(self, vi_engine):
        press(vi_engine, 'dd')
        assert vi_engine.process_key_event(IBus.Return, 0) is False
        assert committed(vi_engine) == ['đ']

    def test_escape_commits_raw_keys(self, vi_engine):
        press(vi_engine, 'aa')
        assert vi_engine.process_key_event(IBus.Escape, 0) is True
        assert committed(vi_engine) == ['aa']

    def test_control_commits_preedit(self, vi_engine):
        press(vi_engine, 'as')
        assert vi_engine.process_key_event(ord('c'), IBus.ModifierType.CONTROL_MASK) is False
        assert committed(vi_engine) == ['á']

    def test_focus_out_commits_preedit(self, vi_engine):
        press(vi_engine, 'ow')
        vi_engine.do_focus_out()
        assert committed(vi_engine) == ['ơ']


class TestModes:
    """Switching input mode and input method"""

    def test_direct_mode(self, vi_engine):
        assert vi_engine.set_mode('A') is True
        assert press(vi_engine, 'as') == [False, False]
        vi_engine.commit_text.assert_not_called()

    def test_set_same_mode(self, vi_engine):
        assert vi_engine.set_mode('V') is False

    def test_switch_to_vni(self, vi_engine):
        from grammar import InputMethod
        with patch('util.save_config_data', return_value=True) as save:
            assert vi_engine.set_input_method(InputMethod.VNI) is True
        assert save.call_args[0][0]['input_method'] == 'vni'
        press(vi_engine, 'viet5 ')
        assert committed(vi_engine) == ['việt ']

    def test_switch_accent_style(self, vi_engine):
        from accent import AccentStyle
        with patch('util.save_config_data', return_value=True) as save:
            assert vi_engine.set_accent_style(AccentStyle.OLD) is True
            assert vi_engine.set_accent_style(AccentStyle.OLD) is False
        assert save.call_count == 1
        assert save.call_args[0][0]['accent_style'] == 'old'
        press(vi_engine, 'hoaf ')
        assert committed(vi_engine) == ['hòa ']

    def test_style_menu(self, vi_engine):
        with patch('util.save_config_data', return_value=True):
            vi_engine.do_property_activate('Style.old', IBus.PropState.CHECKED)
        press(vi_engine, 'thuyr ')
        assert committed(vi_engine) == ['thủy ']
        vi_engine.update_property.assert_called()

    def test_backspace_keeps_session(self, vi_engine):
        session = vi_engine._session
        press(vi_engine, 'vieetj')
        vi_engine.process_key_event(IBus.BackSpace, 0)
        assert vi_engine._session is session
        assert session.open_units == ('v', 'i', 'e', 'e', 't')
