#!/usr/bin/env python3
"""
transformer.py - Restore Vietnamese diacritics from Telex/VNI keystrokes
Chuyển chuỗi phím Telex/VNI thành chữ Việt có dấu

================================================================================
OVERVIEW
================================================================================

transform() splits the input into words and separators. Separators (spaces,
punctuation, anything that is neither a letter nor a trigger key of the input
method) are copied verbatim. Each word is replayed one key at a time into a
fresh WordState, which is rendered once the word ends:

    transform("viet5 nam", InputMethod.VNI, AccentStyle.NEW)   → "việt nam"
    transform("chuwongw", InputMethod.TELEX, AccentStyle.NEW)  → "chương"

================================================================================
WORD STATE
================================================================================

    letters     list of syllable.Letter (typed character + mark)
    tone        syllable.Tone or None
    units       raw keys consumed so far

For every key the trigger grammar yields an ordered chain of actions; the
first one that applies edits the word, otherwise the key is appended as a
letter. A trigger that repeats the effect just applied undoes it instead and
the key is appended literally:

    "as" → "á"     "ass" → "as"     "aa" → "â"     "aaa" → "aa"

A word that stops being a Vietnamese syllable is left as typed; only its
longest valid prefix takes part in tone placement.

================================================================================
"""

import collections
import logging

import accent
from accent import AccentStyle
import grammar as grammar_module
from grammar import CLEAR_TONE, INSERT_U, MARK, RESET_INSERTED_U, TONE
from syllable import Letter, Mark, apply_tone, is_well_formed, longest_valid_prefix, parse

logger = logging.getLogger(__name__)

APPLIED = 'applied'
REVERTED = 'reverted'


class TransformError(ValueError):
    """The input text cannot be read as Unicode text."""


class KeyResult(collections.namedtuple(
        'KeyResult', ['tone_mark_removed', 'letter_modification_removed'])):
    """
    What one key took away from the word: the tone ("asz", "ass") and/or a
    letter mark ("aaa", "ddd", "ww"). Results combine with `|`.
    """
    __slots__ = ()

    def __or__(self, other):
        return KeyResult(self.tone_mark_removed or other.tone_mark_removed,
                         self.letter_modification_removed or other.letter_modification_removed)


NOTHING_REMOVED = KeyResult(False, False)


class WordState:
    """Transformation state of one word being typed."""

    def __init__(self, grammar, style):
        self.grammar = grammar
        self.style = style
        self.letters = []
        self.tone = None
        self.units = []
        # (key, action, snapshot) of the previous key when it applied an action
        self._last = None

    def feed(self, char):
        """Consume one key and return a KeyResult."""
        self.units.append(char)
        snapshot = self._take_snapshot()
        for action in self.grammar.actions_for(char):
            outcome = self._apply(action, char)
            if outcome is None:
                continue
            logger.debug(f'{char!r}: {action.kind} {outcome}')
            if outcome == APPLIED:
                self._last = (char.lower(), action, snapshot)
            else:
                self._last = None
            break
        else:
            self._append_literal(char)
            self._last = None
        return self._removed_since(snapshot)

    def render(self):
        chars = [letter.render() for letter in self.letters]
        if self.tone is not None:
            _, syllable = longest_valid_prefix(self.letters)
            if syllable is not None:
                marks = [self.letters[i].mark for i in syllable.nucleus_range]
                index = syllable.nucleus_start + accent.tone_position(
                    syllable.nucleus, marks, bool(syllable.coda), self.style)
                chars[index] = apply_tone(chars[index], self.tone)
        return ''.join(chars)

    # ─── Actions ──────────────────────────────────────────────────────

    def _apply(self, action, char):
        if action.kind == TONE:
            return self._apply_tone(action, char)
        if action.kind == MARK:
            return self._apply_mark(action, char)
        if action.kind == CLEAR_TONE:
            return self._apply_clear_tone()
        if action.kind == INSERT_U:
            return self._apply_insert_u(char)
        if action.kind == RESET_INSERTED_U:
            return self._apply_reset_inserted_u(char)
        raise ValueError(f'Unknown action: {action.kind}')

    def _apply_tone(self, action, char):
        syllable = parse(self.letters)
        if not syllable.is_valid:
            return None
        if self.tone is action.value:
            self._undo(action, char, self._clear_tone)
            return REVERTED
        self._complete_circumflex(syllable)
        self.tone = action.value
        return APPLIED

    def _apply_mark(self, action, char):
        syllable = parse(self.letters)
        if syllable.is_opaque:
            return None
        targets = grammar_module.modification_targets(
            self.letters, syllable, action.value, action.family, self.style)
        if not targets:
            return None
        if all(self.letters[i].mark is action.value for i in targets):
            def clear_targets():
                for i in targets:
                    self.letters[i].mark = None
            self._undo(action, char, clear_targets)
            return REVERTED
        trial = [letter.copy() for letter in self.letters]
        for i in targets:
            trial[i].mark = action.value
        if not is_well_formed(trial):
            return None
        self.letters = trial
        return APPLIED

    def _apply_clear_tone(self):
        if parse(self.letters).is_opaque:
            return None
        if self.tone is not None:
            self.tone = None
            return APPLIED
        if any(letter.mark is not None for letter in self.letters):
            for letter in self.letters:
                letter.mark = None
            return APPLIED
        return None

    def _apply_insert_u(self, char):
        # "w" alone, after an onset ("tw" → "tư") or after "gi" ("giw" → "giư")
        syllable = parse(self.letters)
        if syllable.is_opaque:
            return None
        if syllable.nucleus and ''.join(letter.base for letter in self.letters) != 'gi':
            return None
        self.letters.append(Letter('U' if char.isupper() else 'u', Mark.HORN))
        return APPLIED

    def _apply_reset_inserted_u(self, char):
        if self._last is None or self._last[1].kind != INSERT_U:
            return None
        self.letters[-1] = Letter(char)
        return REVERTED

    # ─── Helpers ──────────────────────────────────────────────────────

    def _append_literal(self, char):
        self.letters.append(Letter(char))
        self._complete_horn()

    def _clear_tone(self):
        self.tone = None

    def _undo(self, action, char, revert):
        """Revert the effect of `action` and insert its key as a letter."""
        if self._last is not None and self._last[:2] == (char.lower(), action):
            self._restore(self._last[2])
        else:
            revert()
        self._append_literal(char)

    def _take_snapshot(self):
        return [letter.mark for letter in self.letters], self.tone

    def _removed_since(self, snapshot):
        # letters are only ever appended or replaced in place
        marks, tone = snapshot
        return KeyResult(
            tone is not None and self.tone is None,
            any(mark is not None and letter.mark is None
                for mark, letter in zip(marks, self.letters)))

    def _restore(self, snapshot):
        marks, tone = snapshot
        for letter, mark in zip(self.letters, marks):
            letter.mark = mark
        self.tone = tone

    def _complete_circumflex(self, syllable):
        # iê/yê/uyê before a final consonant and iêu/yêu are the only spellings
        nucleus = syllable.nucleus
        if (nucleus in ('ie', 'ye', 'uye') and syllable.coda) or nucleus in ('ieu', 'yeu'):
            letter = self.letters[syllable.nucleus_start + nucleus.rindex('e')]
            if letter.mark is None:
                letter.mark = Mark.CIRCUMFLEX

    def _complete_horn(self):
        # "uơ" followed by more letters is always "ươ": huơng → hương
        syllable = parse(self.letters)
        nucleus = syllable.nucleus
        if not syllable.is_valid:
            return
        if not ((nucleus == 'uo' and syllable.coda) or nucleus in ('uoi', 'uou')):
            return
        u_letter = self.letters[syllable.nucleus_start + nucleus.index('u')]
        o_letter = self.letters[syllable.nucleus_start + nucleus.index('o')]
        if o_letter.mark is Mark.HORN and u_letter.mark is None:
            u_letter.mark = Mark.HORN


def transform_word(units, grammar, style):
    """Render one word (a sequence of keys containing no separator)."""
    state = WordState(grammar, style)
    for unit in units:
        state.feed(unit)
    return state.render()


def split_words(text, grammar):
    """
    Split `text` into runs of word characters and runs of separators.

    Returns:
        List of (is_word, run) tuples; joining the runs gives back `text`.
    """
    runs = []
    buffer = []
    buffer_is_word = None

    def flush_buffer():
        if buffer:
            runs.append((buffer_is_word, ''.join(buffer)))
            buffer.clear()

    for c in text:
        is_word = grammar.is_word_char(c)
        if is_word != buffer_is_word:
            flush_buffer()
            buffer_is_word = is_word
        buffer.append(c)
    flush_buffer()
    return runs


def ensure_text(text):
    """Return `text` as str, decoding bytes as strict UTF-8."""
    if text is None:
        raise TransformError('No input text was given')
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            return bytes(text).decode('utf-8')
        except UnicodeDecodeError as e:
            raise TransformError(f'Input is not valid UTF-8: {e}') from e
    if not isinstance(text, str):
        raise TransformError(f'Expected text, got {type(text).__name__}')
    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise TransformError(f'Input contains characters that are not Unicode scalar values: {e}') from e
    return text


def transform(text, method, style):
    """
    Restore diacritics in `text` typed with `method` (InputMethod or its name)
    and place tones following `style` (AccentStyle or its name).

    Raises:
        TransformError: `text` is None or not valid Unicode text
        ValueError: unknown input method or accent style
    """
    text = ensure_text(text)
    grammar = grammar_module.get_grammar(method)
    style = AccentStyle.from_name(style)
    return ''.join(
        transform_word(run, grammar, style) if is_word else run
        for is_word, run in split_words(text, grammar)
    )
