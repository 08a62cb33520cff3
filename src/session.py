#!/usr/bin/env python3
"""
session.py - Keystroke-by-keystroke composition
Gõ từng phím

An IncrementalSession accepts one key at a time and can show the text typed so
far at any moment. A separator closes the open word: the word is rendered once
and appended to the committed text, which is never looked at again. Only the
open word is kept as a live WordState and rendered by view():

    with IncrementalSession(InputMethod.TELEX, AccentStyle.NEW) as session:
        for key in 'vieetj':
            session.push(key)
            session.view()      # v, vi, vie, viê, viêt, việt

push() reports what the key removed, e.g. the "z" of "asz" gives
KeyResult(tone_mark_removed=True, letter_modification_removed=False).
clear() empties the session without destroying it.

Pushing the keys of a text one by one always yields the same view() as
transformer.transform() over the whole text.
"""

import logging

from accent import AccentStyle
from grammar import InputMethod, get_grammar
from transformer import NOTHING_REMOVED, WordState

logger = logging.getLogger(__name__)


class SessionClosedError(RuntimeError):
    """The session was used after destroy()."""


def to_unit(unit):
    """Return `unit` (one-character str or code point) as a one-character str."""
    if isinstance(unit, int) and not isinstance(unit, bool):
        if not 0 <= unit <= 0x10FFFF:
            raise ValueError(f'Code point out of range: {unit:#x}')
        unit = chr(unit)
    if not isinstance(unit, str) or len(unit) != 1:
        raise ValueError(f'Expected a single character, got {unit!r}')
    if 0xD800 <= ord(unit) <= 0xDFFF:
        raise ValueError(f'Surrogate code point is not a Unicode scalar value: {ord(unit):#x}')
    return unit


class IncrementalSession:
    """
    Incremental composition state for one input method and accent style.

    The method and style are fixed for the lifetime of the session.
    len(session) is the number of keys pushed since it was created or last
    cleared; result() folds together what every one of those keys removed.
    """

    def __init__(self, method, style):
        self._method = InputMethod.from_name(method)
        self._style = AccentStyle.from_name(style)
        self._grammar = get_grammar(self._method)
        self._committed = []
        self._word = WordState(self._grammar, self._style)
        self._result = NOTHING_REMOVED
        self._length = 0
        self._destroyed = False
        logger.debug(f'IncrementalSession created: {self._method.value}/{self._style.value}')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.destroy()
        return False

    def __len__(self):
        return self._length

    @property
    def method(self):
        return self._method

    @property
    def style(self):
        return self._style

    @property
    def is_destroyed(self):
        return self._destroyed

    @property
    def is_empty(self):
        return self._length == 0

    @property
    def open_units(self):
        """Raw keys of the word being typed."""
        return tuple(self._word.units)

    def _check_alive(self):
        if self._destroyed:
            raise SessionClosedError('IncrementalSession was already destroyed')

    def push(self, unit):
        """
        Append one key (str of length 1 or an int code point).

        Returns:
            KeyResult telling whether this key removed a tone or a letter mark
        """
        self._check_alive()
        unit = to_unit(unit)
        self._length += 1
        if self._grammar.is_word_char(unit):
            key_result = self._word.feed(unit)
            self._result |= key_result
            return key_result
        self._close_word()
        self._committed.append(unit)
        return NOTHING_REMOVED

    def _close_word(self):
        if self._word.units:
            word = self._word.render()
            logger.debug(f'Word committed: {"".join(self._word.units)!r} -> {word!r}')
            self._committed.append(word)
            self._word = WordState(self._grammar, self._style)

    def result(self):
        """KeyResult combined over every key since creation or the last clear()."""
        self._check_alive()
        return self._result

    def preedit(self):
        """Rendering of the open word only."""
        self._check_alive()
        return self._word.render()

    def view(self):
        """Committed text followed by the rendering of the open word."""
        self._check_alive()
        return ''.join(self._committed) + self.preedit()

    def clear(self):
        """Drop all text and keys; the session stays usable."""
        self._check_alive()
        self._committed = []
        self._word = WordState(self._grammar, self._style)
        self._result = NOTHING_REMOVED
        self._length = 0

    def commit(self):
        """Return the whole text and start over with an empty session."""
        self._check_alive()
        self._close_word()
        text = ''.join(self._committed)
        self.clear()
        return text

    def destroy(self):
        """Release the session. Calling it again has no effect."""
        if not self._destroyed:
            self._committed = []
            self._word = None
            self._length = 0
            self._destroyed = True
            logger.debug('IncrementalSession destroyed')
