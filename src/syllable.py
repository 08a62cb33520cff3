#!/usr/bin/env python3
"""
syllable.py - Vietnamese syllable model
Mô hình âm tiết tiếng Việt

================================================================================
OVERVIEW
================================================================================

A Vietnamese written syllable is split into three parts:

    onset (phụ âm đầu)  +  nucleus (vần nguyên âm)  +  coda (phụ âm cuối)

    "nghiêng"  →  "ngh" + "iê" + "ng"
    "quốc"     →  "qu"  + "ô"  + "c"
    "gì"       →  "g"   + "i"  + ""

The diacritics a typist adds fall into two groups:

• Marks (dấu phụ) change the letter itself and are attached to one letter:
  circumflex (â ê ô), breve (ă), horn (ơ ư) and stroke (đ).
• Tones (dấu thanh) belong to the whole syllable. Where the tone is drawn is
  decided by accent.py.

================================================================================
CLASSIFICATION
================================================================================

parse() classifies a run of letters:

    VALID       onset + nucleus + coda are all known shapes
    INCOMPLETE  a known onset (or a prefix of one) with no vowel yet: "ch", "q"
    OPAQUE      anything else; rendered verbatim, never accented

Classification is always recomputed from the letters, so the result is valid
after every mutation of the word.

================================================================================
"""

import enum
import logging
import string

logger = logging.getLogger(__name__)


class Tone(enum.Enum):
    """The six Vietnamese tones. LEVEL (thanh ngang) carries no glyph."""
    LEVEL = 'level'
    FALLING = 'falling'          # huyền  à
    RISING = 'rising'            # sắc    á  (a.k.a. sharp)
    QUESTIONING = 'questioning'  # hỏi    ả
    BROKEN = 'broken'            # ngã    ã
    HEAVY = 'heavy'              # nặng   ạ

    @classmethod
    def from_name(cls, name):
        if name == 'sharp':
            return cls.RISING
        return cls(name)


class Mark(enum.Enum):
    CIRCUMFLEX = 'circumflex'
    BREVE = 'breve'
    HORN = 'horn'
    STROKE = 'stroke'


class SyllableKind(enum.Enum):
    VALID = 'valid'
    INCOMPLETE = 'incomplete'
    OPAQUE = 'opaque'


VOWELS = frozenset('aeiouy')

ONSETS = frozenset([
    '', 'b', 'c', 'd', 'g', 'h', 'k', 'l', 'm', 'n', 'p', 'q', 'r', 's', 't', 'v', 'x',
    'ch', 'gh', 'gi', 'kh', 'ng', 'nh', 'ph', 'qu', 'th', 'tr',
    'ngh',
])

# Unmarked spellings. Every prefix of a multi-vowel nucleus is itself listed,
# so a nucleus that is still being typed never looks invalid.
NUCLEI = frozenset([
    'a', 'e', 'i', 'o', 'u', 'y',
    'ai', 'ao', 'au', 'ay', 'eo', 'eu', 'ia', 'ie', 'io', 'iu', 'oa', 'oe',
    'oi', 'oo', 'ua', 'ue', 'ui', 'uo', 'uu', 'uy', 'ye',
    'ieu', 'oai', 'oao', 'oay', 'oeo', 'uay', 'uoi', 'uou', 'uya', 'uye',
    'uyu', 'yeu',
])

CODAS = frozenset(['', 'c', 'ch', 'm', 'n', 'ng', 'nh', 'p', 't'])

# Nuclei as they may appear once marks are drawn (tone not included)
MARKED_NUCLEI = frozenset([
    'a', 'ă', 'â', 'e', 'ê', 'i', 'o', 'ô', 'ơ', 'u', 'ư', 'y',
    'ai', 'ao', 'au', 'ay', 'âu', 'ây', 'eo', 'êu', 'ia', 'iê', 'io', 'iu',
    'oa', 'oă', 'oe', 'oi', 'ôi', 'ơi', 'oo', 'ua', 'uâ', 'uê', 'ui', 'uô',
    'uơ', 'uy', 'ưa', 'ưi', 'ươ', 'ưu', 'ye', 'yê',
    'iêu', 'yêu', 'oai', 'oay', 'oao', 'oeo', 'uây', 'uôi', 'ươi', 'ươu',
    'uya', 'uyê', 'uyu',
])

MARKED_LETTERS = {
    Mark.CIRCUMFLEX: {'a': 'â', 'e': 'ê', 'o': 'ô'},
    Mark.BREVE: {'a': 'ă'},
    Mark.HORN: {'o': 'ơ', 'u': 'ư'},
    Mark.STROKE: {'d': 'đ'},
}

# Vowels whose quality mark attracts the tone (see accent.py)
QUALITY_MARKS = frozenset([Mark.CIRCUMFLEX, Mark.BREVE, Mark.HORN])

_TONE_ORDER = (Tone.FALLING, Tone.QUESTIONING, Tone.BROKEN, Tone.RISING, Tone.HEAVY)
_TONE_ROWS = {
    'a': 'àảãáạ', 'ă': 'ằẳẵắặ', 'â': 'ầẩẫấậ',
    'e': 'èẻẽéẹ', 'ê': 'ềểễếệ',
    'i': 'ìỉĩíị',
    'o': 'òỏõóọ', 'ô': 'ồổỗốộ', 'ơ': 'ờởỡớợ',
    'u': 'ùủũúụ', 'ư': 'ừửữứự',
    'y': 'ỳỷỹýỵ',
}
TONED_LETTERS = {
    tone: {vowel: row[i] for vowel, row in _TONE_ROWS.items()}
    for i, tone in enumerate(_TONE_ORDER)
}


def apply_tone(char, tone):
    """Return `char` (an already marked vowel) carrying `tone`, keeping case."""
    if tone is None or tone is Tone.LEVEL:
        return char
    toned = TONED_LETTERS[tone].get(char.lower())
    if toned is None:
        return char
    return toned.upper() if char.isupper() else toned


class Letter:
    """One typed letter, case preserved, with at most one mark."""

    __slots__ = ('char', 'mark')

    def __init__(self, char, mark=None):
        self.char = char
        self.mark = mark

    @property
    def base(self):
        return self.char.lower()

    def render(self):
        if self.mark is None:
            return self.char
        drawn = MARKED_LETTERS[self.mark].get(self.base, self.base)
        return drawn.upper() if self.char.isupper() else drawn

    def copy(self):
        return Letter(self.char, self.mark)

    def __eq__(self, other):
        if not isinstance(other, Letter):
            return NotImplemented
        return self.char == other.char and self.mark == other.mark

    def __repr__(self):
        return f'Letter({self.char!r}, {self.mark})'


class Syllable:
    """
    Parsed view of a letter run.

    Attributes:
        kind: SyllableKind
        onset, nucleus, coda: unmarked lowercase spellings ('' when absent)
        nucleus_start: index of the first nucleus letter in the run
    """

    def __init__(self, kind, onset='', nucleus='', coda='', nucleus_start=0):
        self.kind = kind
        self.onset = onset
        self.nucleus = nucleus
        self.coda = coda
        self.nucleus_start = nucleus_start

    @property
    def is_valid(self):
        return self.kind is SyllableKind.VALID

    @property
    def is_opaque(self):
        return self.kind is SyllableKind.OPAQUE

    @property
    def nucleus_range(self):
        return range(self.nucleus_start, self.nucleus_start + len(self.nucleus))

    def __repr__(self):
        return (f'Syllable({self.kind.value}, onset={self.onset!r}, '
                f'nucleus={self.nucleus!r}, coda={self.coda!r})')


OPAQUE = Syllable(SyllableKind.OPAQUE)


def _is_onset_prefix(text):
    return any(onset.startswith(text) for onset in ONSETS)


def split_onset(text):
    """Return the onset of `text` (lowercase ASCII letters).

    "gi" only counts as an onset when another vowel follows ("gia" vs "gì");
    "qu" is always an onset.
    """
    if text.startswith('gi') and len(text) > 2 and text[2] in VOWELS:
        return 'gi'
    if text.startswith('qu'):
        return 'qu'
    i = 0
    while i < len(text) and text[i] not in VOWELS:
        i += 1
    return text[:i]


def parse(letters):
    """Classify a sequence of Letter objects (or a plain string)."""
    if isinstance(letters, str):
        text = letters.lower()
    else:
        text = ''.join(letter.base for letter in letters)
    if any(c not in string.ascii_lowercase for c in text):
        return OPAQUE

    onset = split_onset(text)
    i = len(onset)
    j = i
    while j < len(text) and text[j] in VOWELS:
        j += 1
    nucleus = text[i:j]
    coda = text[j:]

    if not nucleus:
        if coda:
            return OPAQUE
        if onset in ONSETS or _is_onset_prefix(onset):
            return Syllable(SyllableKind.INCOMPLETE, onset=onset, nucleus_start=i)
        return OPAQUE
    if onset not in ONSETS or nucleus not in NUCLEI or coda not in CODAS:
        return OPAQUE
    return Syllable(SyllableKind.VALID, onset, nucleus, coda, i)


def marked_nucleus(letters, syllable):
    """Render the nucleus of `syllable` with its marks, lowercase, no tone."""
    return ''.join(letters[i].render().lower() for i in syllable.nucleus_range)


def is_well_formed(letters):
    """True when the marked letters still spell a valid syllable."""
    syllable = parse(letters)
    if syllable.is_opaque:
        return False
    marked = any(letters[i].mark in QUALITY_MARKS for i in syllable.nucleus_range)
    return not marked or marked_nucleus(letters, syllable) in MARKED_NUCLEI


def longest_valid_prefix(letters):
    """Return (length, Syllable) for the longest VALID prefix, or (0, None)."""
    for end in range(len(letters), 0, -1):
        syllable = parse(letters[:end])
        if syllable.is_valid:
            return end, syllable
    return 0, None
