#!/usr/bin/env python3
# tests/test_accent.py - Unit tests for accent.py

import pytest
import os
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from accent import PLACEMENT_TABLES, AccentStyle, nearest_candidate, tone_position
from syllable import NUCLEI, Mark

H = Mark.HORN
C = Mark.CIRCUMFLEX


class TestTonePosition:
    """Test suite for tone_position()"""

    def test_single_vowel(self):
        assert tone_position('a', [None], False, AccentStyle.OLD) == 0
        assert tone_position('a', [None], True, AccentStyle.NEW) == 0

    @pytest.mark.parametrize('nucleus', ['oa', 'oe', 'uy'])
    def test_styles_differ_on_open_syllables(self, nucleus):
        """hòa / hoà, khỏe / khoẻ, thùy / thuỳ"""
        marks = [None, None]
        assert tone_position(nucleus, marks, False, AccentStyle.OLD) == 0
        assert tone_position(nucleus, marks, False, AccentStyle.NEW) == 1

    @pytest.mark.parametrize('nucleus', ['oa', 'oe', 'uy'])
    def test_styles_agree_on_closed_syllables(self, nucleus):
        """hoàn, khoét, huýt"""
        marks = [None, None]
        assert tone_position(nucleus, marks, True, AccentStyle.OLD) == 1
        assert tone_position(nucleus, marks, True, AccentStyle.NEW) == 1

    @pytest.mark.parametrize('style', list(AccentStyle))
    def test_falling_diphthongs_take_first_vowel(self, style):
        """mùa, kìa, tài"""
        for nucleus in ('ua', 'ia', 'ai'):
            assert tone_position(nucleus, [None, None], False, style) == 0

    def test_marked_vowel_wins(self):
        assert tone_position('ie', [None, C], True, AccentStyle.OLD) == 1
        assert tone_position('ua', [H, None], False, AccentStyle.NEW) == 0
        assert tone_position('uye', [None, None, C], True, AccentStyle.NEW) == 2

    def test_last_marked_vowel_wins(self):
        """người: ư and ơ both marked, the tone goes on ơ"""
        assert tone_position('uoi', [H, H, None], False, AccentStyle.OLD) == 1

    def test_triphthong(self):
        assert tone_position('oai', [None, None, None], False, AccentStyle.OLD) == 1

    @pytest.mark.parametrize('style', list(AccentStyle))
    def test_every_nucleus_has_a_placement(self, style):
        for nucleus in NUCLEI:
            if len(nucleus) > 1:
                assert nucleus in PLACEMENT_TABLES[style]


class TestNearestCandidate:
    """Test suite for nearest_candidate()"""

    def test_single_candidate(self):
        assert nearest_candidate([2], 'ieu', False, AccentStyle.NEW) == 2

    def test_follows_style(self):
        assert nearest_candidate([0, 1], 'oa', False, AccentStyle.NEW) == 1
        assert nearest_candidate([0, 1], 'oa', False, AccentStyle.OLD) == 0


class TestAccentStyle:
    """Test suite for AccentStyle.from_name()"""

    def test_names(self):
        assert AccentStyle.from_name('OLD') is AccentStyle.OLD
        assert AccentStyle.from_name('new') is AccentStyle.NEW
        assert AccentStyle.from_name(AccentStyle.NEW) is AccentStyle.NEW

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            AccentStyle.from_name('modern')
