#!/usr/bin/env python3
"""
grammar.py - Trigger grammar of the Telex and VNI input methods
Bảng phím Telex và VNI

================================================================================
OVERVIEW
================================================================================

A trigger is a key that, typed after some letters, edits those letters
instead of being inserted:

    Telex   "as"  → "á"     "aa" → "â"     "dd" → "đ"     "uw" → "ư"
    VNI     "a1"  → "á"     "a6" → "â"     "d9" → "đ"     "u7" → "ư"

The trigger tables live in layouts/<method>.json and are compiled once per
input method into a TriggerGrammar.

================================================================================
LAYOUT DATA FORMAT
================================================================================

    {"name": "telex", "triggers": [[key, kind, argument, family], ...]}

    ["s", "tone", "rising"]              tone trigger
    ["a", "mark", "circumflex", "a"]     mark, restricted to the letter "a"
    ["7", "mark", "horn"]                mark, any eligible letter
    ["z", "clear_tone"]                  remove the tone (or else the marks)
    ["w", "insert_u"]                    insert "ư" where no vowel exists yet
    ["w", "reset_inserted_u"]            turn a just inserted "ư" back to "w"

Several entries with the same key form an ordered fallback chain: the first
action that applies to the current word is taken, and a key none of whose
actions applies is inserted as a plain letter.

================================================================================
"""

import collections
import enum
import functools
import logging
import os

import orjson

import accent
from syllable import MARKED_LETTERS, Mark, Tone
import vi_data

logger = logging.getLogger(__name__)


TONE = 'tone'
MARK = 'mark'
CLEAR_TONE = 'clear_tone'
INSERT_U = 'insert_u'
RESET_INSERTED_U = 'reset_inserted_u'

ACTION_KINDS = (TONE, MARK, CLEAR_TONE, INSERT_U, RESET_INSERTED_U)

Action = collections.namedtuple('Action', ['kind', 'value', 'family'], defaults=(None, None))


class InputMethod(enum.Enum):
    TELEX = 'telex'
    VNI = 'vni'

    @classmethod
    def from_name(cls, name):
        """Accept an InputMethod or its name, case-insensitive."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f'Unknown input method: {name!r}') from None


def get_layout_dir():
    return os.path.join(vi_data.DATA_DIR, 'layouts')


def get_layout_path(method):
    return os.path.join(get_layout_dir(), f'{method.value}.json')


def load_layout_data(method):
    """Read layouts/<method>.json."""
    layout_path = get_layout_path(method)
    try:
        with open(layout_path, 'rb') as f:
            return orjson.loads(f.read())
    except FileNotFoundError:
        logger.error(f'Layout file is not found: {layout_path}')
        raise
    except orjson.JSONDecodeError as e:
        logger.error(f'Failed to parse layout JSON: {layout_path} - {e}')
        raise


def parse_trigger_entry(entry):
    """Turn one layout entry into (key, Action). Raises ValueError if malformed."""
    if not isinstance(entry, list) or len(entry) < 2:
        raise ValueError(f'Malformed trigger entry: {entry!r}')
    key, kind = entry[0], entry[1]
    if not isinstance(key, str) or len(key) != 1:
        raise ValueError(f'Trigger key must be a single character: {entry!r}')
    if kind not in ACTION_KINDS:
        raise ValueError(f'Unknown action "{kind}" in trigger entry: {entry!r}')

    if kind == TONE:
        if len(entry) != 3:
            raise ValueError(f'Tone trigger needs exactly one tone name: {entry!r}')
        return key.lower(), Action(TONE, Tone.from_name(entry[2]))
    if kind == MARK:
        if len(entry) not in (3, 4):
            raise ValueError(f'Mark trigger needs a mark name: {entry!r}')
        mark = Mark(entry[2])
        family = entry[3] if len(entry) == 4 else None
        if family is not None and family not in MARKED_LETTERS[mark]:
            raise ValueError(f'Letter "{family}" cannot carry {mark.value}: {entry!r}')
        return key.lower(), Action(MARK, mark, family)
    if len(entry) != 2:
        raise ValueError(f'Action "{kind}" takes no argument: {entry!r}')
    return key.lower(), Action(kind)


class TriggerGrammar:
    """
    Compiled trigger table of one input method.

    trigger_map maps a lowercase key to the tuple of actions it may perform,
    in the order they are tried.
    """

    def __init__(self, layout_data):
        self.name = layout_data.get('name', '')
        chains = {}
        for entry in layout_data.get('triggers', []):
            key, action = parse_trigger_entry(entry)
            chains.setdefault(key, []).append(action)
        self.trigger_map = {key: tuple(actions) for key, actions in chains.items()}
        logger.debug(f'Trigger grammar "{self.name}" compiled: {len(self.trigger_map)} trigger keys')

    def actions_for(self, char):
        return self.trigger_map.get(char.lower(), ())

    def is_trigger(self, char):
        return char.lower() in self.trigger_map

    def is_word_char(self, char):
        """Letters and trigger keys belong to words, everything else separates them."""
        return char.isalpha() or char.lower() in self.trigger_map


@functools.lru_cache(maxsize=None)
def _compile_grammar(method):
    logger.debug(f'Loading trigger grammar for {method.value}')
    return TriggerGrammar(load_layout_data(method))


def get_grammar(method):
    """Return the (shared, read-only) TriggerGrammar of `method`."""
    return _compile_grammar(InputMethod.from_name(method))


def modification_targets(letters, syllable, mark, family, style):
    """
    Return the letter indices that `mark` would be drawn on.

    An empty list means the mark does not apply to the current word.

        stroke      the leading "d"                      dd → đ
        breve       the "a" of the nucleus               aw → ă
        horn        "u" and "o" together in uo/uoi/uou   chuong → chương
                    only the "o" of an open "uo" after
                    an onset                             thuo → thuơ
                    else the first "u", else the "o"     tu → tư, to → tơ
        circumflex  the a/e/o of the nucleus (only `family` when given);
                    several candidates are resolved by accent priority
    """
    if mark is Mark.STROKE:
        if letters and letters[0].base == 'd':
            return [0]
        return []

    nucleus = syllable.nucleus
    if not nucleus:
        return []
    start = syllable.nucleus_start

    if mark is Mark.HORN:
        if nucleus in ('uo', 'uoi', 'uou'):
            u_index = start + nucleus.index('u')
            o_index = start + nucleus.index('o')
            if (nucleus == 'uo' and syllable.onset and not syllable.coda
                    and letters[u_index].mark is not Mark.HORN):
                return [o_index]
            return [u_index, o_index]
        for vowel in 'uo':
            if vowel in nucleus:
                return [start + nucleus.index(vowel)]
        return []

    candidates = [
        i for i, c in enumerate(nucleus)
        if c in MARKED_LETTERS[mark] and (family is None or c == family)
    ]
    if not candidates:
        return []
    index = accent.nearest_candidate(candidates, nucleus, bool(syllable.coda), style)
    return [start + index]
