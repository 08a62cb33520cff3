#!/usr/bin/env python3
# tests/test_grammar.py - Unit tests for grammar.py

import pytest
import os
import sys
from unittest.mock import patch

import orjson

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import grammar
from accent import AccentStyle
from grammar import (
    CLEAR_TONE, INSERT_U, MARK, RESET_INSERTED_U, TONE,
    Action, InputMethod, TriggerGrammar, get_grammar, modification_targets, parse_trigger_entry,
)
from syllable import Letter, Mark, Tone, parse


def targets_for(text, mark, family=None, style=AccentStyle.NEW):
    letters = [Letter(c) for c in text]
    return modification_targets(letters, parse(letters), mark, family, style)


class TestBuiltinLayouts:
    """Test suite for the shipped telex/vni layouts"""

    def test_telex_w_chain(self):
        kinds = [action.kind for action in get_grammar('telex').actions_for('w')]
        assert kinds == [RESET_INSERTED_U, MARK, MARK, INSERT_U]

    def test_telex_tones(self):
        telex = get_grammar(InputMethod.TELEX)
        assert telex.actions_for('s') == (Action(TONE, Tone.RISING),)
        assert telex.actions_for('f') == (Action(TONE, Tone.FALLING),)
        assert telex.actions_for('r') == (Action(TONE, Tone.QUESTIONING),)
        assert telex.actions_for('x') == (Action(TONE, Tone.BROKEN),)
        assert telex.actions_for('j') == (Action(TONE, Tone.HEAVY),)
        assert telex.actions_for('z') == (Action(CLEAR_TONE),)

    def test_trigger_keys_are_case_insensitive(self):
        telex = get_grammar('telex')
        assert telex.actions_for('S') == telex.actions_for('s')
        assert telex.actions_for('A') == (Action(MARK, Mark.CIRCUMFLEX, 'a'),)

    def test_vni_digits(self):
        vni = get_grammar('vni')
        assert vni.actions_for('5') == (Action(TONE, Tone.HEAVY),)
        assert vni.actions_for('6') == (Action(MARK, Mark.CIRCUMFLEX),)
        assert vni.actions_for('9') == (Action(MARK, Mark.STROKE),)
        assert vni.actions_for('0') == (Action(CLEAR_TONE),)
        assert vni.actions_for('s') == ()

    def test_word_characters(self):
        telex = get_grammar('telex')
        vni = get_grammar('vni')
        assert vni.is_word_char('5')
        assert not telex.is_word_char('5')
        assert telex.is_word_char('é')
        assert not telex.is_word_char(' ')
        assert not vni.is_word_char(',')

    def test_grammar_is_cached(self):
        assert get_grammar(InputMethod.VNI) is get_grammar('VNI')

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            get_grammar('viqr')


class TestParseTriggerEntry:
    """Test suite for parse_trigger_entry()"""

    def test_mark_with_family(self):
        assert parse_trigger_entry(['E', 'mark', 'circumflex', 'e']) == ('e', Action(MARK, Mark.CIRCUMFLEX, 'e'))

    @pytest.mark.parametrize('entry', [
        ['ss', 'tone', 'rising'],
        ['s', 'jump'],
        ['s', 'tone'],
        ['a', 'mark', 'breve', 'e'],
        ['z', 'clear_tone', 'now'],
        'z',
    ])
    def test_malformed_entries(self, entry):
        with pytest.raises(ValueError):
            parse_trigger_entry(entry)

    def test_fallback_chain_keeps_order(self):
        compiled = TriggerGrammar({'name': 'test', 'triggers': [
            ['q', 'mark', 'horn'],
            ['q', 'insert_u'],
        ]})
        assert compiled.actions_for('q') == (Action(MARK, Mark.HORN), Action(INSERT_U))
        assert compiled.is_trigger('Q')


class TestLoadLayoutData:
    """Test suite for load_layout_data()"""

    def test_missing_layout(self, tmp_path):
        with patch('grammar.get_layout_dir', return_value=str(tmp_path)):
            with pytest.raises(FileNotFoundError):
                grammar.load_layout_data(InputMethod.TELEX)

    def test_corrupt_layout(self, tmp_path):
        (tmp_path / 'telex.json').write_text('{"triggers": [', encoding='utf-8')
        with patch('grammar.get_layout_dir', return_value=str(tmp_path)):
            with pytest.raises(orjson.JSONDecodeError):
                grammar.load_layout_data(InputMethod.TELEX)


class TestModificationTargets:
    """Test suite for modification_targets()"""

    def test_horn_on_both_vowels_before_coda(self):
        assert targets_for('chuong', Mark.HORN) == [2, 3]

    def test_horn_on_o_of_open_uo(self):
        assert targets_for('thuo', Mark.HORN) == [3]

    def test_horn_on_u(self):
        assert targets_for('tu', Mark.HORN) == [1]

    def test_stroke(self):
        assert targets_for('dung', Mark.STROKE) == [0]
        assert targets_for('d', Mark.STROKE) == [0]
        assert targets_for('ad', Mark.STROKE) == []

    def test_circumflex_family(self):
        assert targets_for('vie', Mark.CIRCUMFLEX, 'e') == [2]
        assert targets_for('vie', Mark.CIRCUMFLEX, 'a') == []

    def test_circumflex_resolved_by_style(self):
        assert targets_for('oa', Mark.CIRCUMFLEX, style=AccentStyle.NEW) == [1]
        assert targets_for('oa', Mark.CIRCUMFLEX, style=AccentStyle.OLD) == [0]

    def test_no_nucleus(self):
        assert targets_for('ch', Mark.HORN) == []


class TestInstalledData:
    """The layouts ship inside the vi_data package"""

    def test_layout_dir_is_inside_data_package(self):
        import vi_data
        package_dir = os.path.dirname(os.path.abspath(vi_data.__file__))
        assert grammar.get_layout_dir() == os.path.join(package_dir, 'layouts')
        for method in InputMethod:
            assert os.path.isfile(grammar.get_layout_path(method))

    def test_data_files_are_declared_for_install(self):
        tomllib = pytest.importorskip('tomllib')
        pyproject = os.path.join(os.path.dirname(__file__), '..', 'pyproject.toml')
        with open(pyproject, 'rb') as f:
            setuptools_config = tomllib.load(f)['tool']['setuptools']
        assert 'vi_data' in setuptools_config['packages']
        patterns = setuptools_config['package-data']['vi_data']
        assert 'layouts/*.json' in patterns
        assert 'config.json' in patterns

    def test_grammar_loads_from_data_package(self):
        _compile_grammar = grammar._compile_grammar
        _compile_grammar.cache_clear()
        try:
            assert get_grammar('vni').actions_for('1') == (Action(TONE, Tone.RISING),)
        finally:
            _compile_grammar.cache_clear()
