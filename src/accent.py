#!/usr/bin/env python3
"""
accent.py - Where the tone mark is drawn
Vị trí đặt dấu thanh

================================================================================
RULES
================================================================================

Given the nucleus of a VALID syllable, pick the vowel that carries the tone:

1. A single vowel carries it.                        má, bạn
2. A vowel with a quality mark (ă â ê ô ơ ư) wins;   tiếng, người, thuế
   with several, the last one wins (ươ → ơ).
3. Otherwise the placement table of the accent style decides, separately for
   open syllables (no coda) and closed syllables (with a coda).

The two styles only disagree on open syllables with the nuclei
oa oe oo uo uy ie:

    OLD ("kiểu cũ")   hòa  khỏe  thùy
    NEW ("kiểu mới")  hoà  khoẻ  thuỳ

================================================================================
"""

import enum
import logging

from syllable import QUALITY_MARKS

logger = logging.getLogger(__name__)


class AccentStyle(enum.Enum):
    OLD = 'old'
    NEW = 'new'

    @classmethod
    def from_name(cls, name):
        """Accept an AccentStyle or its name, case-insensitive."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f'Unknown accent style: {name!r}') from None


# nucleus -> (index in an open syllable, index in a closed syllable)
_COMMON_PLACEMENT = {
    'ai': (0, 1), 'ao': (0, 1), 'au': (0, 1), 'ay': (0, 1),
    'eo': (0, 1), 'eu': (0, 1), 'ia': (0, 1), 'io': (0, 1), 'iu': (0, 1),
    'oi': (0, 1), 'ua': (0, 1), 'ue': (0, 1), 'ui': (0, 1), 'uu': (0, 1),
    'ye': (0, 1),
    'ieu': (1, 1), 'oai': (1, 1), 'oao': (1, 1), 'oay': (1, 1), 'oeo': (1, 1),
    'uay': (1, 1), 'uoi': (1, 1), 'uou': (1, 1), 'uya': (1, 1), 'uye': (1, 1),
    'uyu': (1, 1), 'yeu': (1, 1),
}

_STYLE_PLACEMENT = {
    AccentStyle.OLD: {
        'ie': (0, 1), 'oa': (0, 1), 'oe': (0, 1), 'oo': (0, 1), 'uo': (0, 1), 'uy': (0, 1),
    },
    AccentStyle.NEW: {
        'ie': (1, 1), 'oa': (1, 1), 'oe': (1, 1), 'oo': (1, 1), 'uo': (1, 1), 'uy': (1, 1),
    },
}

PLACEMENT_TABLES = {
    style: dict(_COMMON_PLACEMENT, **table)
    for style, table in _STYLE_PLACEMENT.items()
}


def tone_position(nucleus, marks, has_coda, style):
    """
    Return the index inside `nucleus` that carries the tone.

    Args:
        nucleus: unmarked nucleus spelling, e.g. 'uo'
        marks: the Mark (or None) of each nucleus letter
        has_coda: whether a final consonant follows
        style: AccentStyle
    """
    if len(nucleus) == 1:
        return 0
    for index in range(len(nucleus) - 1, -1, -1):
        if marks[index] in QUALITY_MARKS:
            return index
    open_index, closed_index = PLACEMENT_TABLES[style][nucleus]
    return closed_index if has_coda else open_index


def nearest_candidate(candidates, nucleus, has_coda, style):
    """
    Choose one nucleus index out of several equally applicable ones.

    Used when a mark trigger could land on more than one vowel (VNI "6" on
    "oa"). The candidate closest to the tone position of the unmarked nucleus
    wins; a tie goes to the later vowel.
    """
    if len(candidates) == 1:
        return candidates[0]
    target = tone_position(nucleus, [None] * len(nucleus), has_coda, style)
    return min(candidates, key=lambda index: (abs(index - target), -index))
