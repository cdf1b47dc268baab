"""Syllable structure of precomposed Hangul syllable blocks.

A block in U+AC00..U+D7A3 encodes an initial consonant, a vowel nucleus
and an optional final consonant:
``offset = (initial * 21 + vowel) * 28 + final``.
Characters outside the block range carry no syllable information.
"""

from enum import Enum
from typing import Optional

from .constants import (
    SYLLABLE_FIRST,
    SYLLABLE_LAST,
    FINAL_COUNT,
    VOWEL_COUNT,
    VOWELS,
    BRIGHT_VOWELS,
    DARK_VOWELS,
)


class Harmony(Enum):
    """Vowel harmony class of a vowel nucleus."""
    BRIGHT = "양성"
    DARK = "음성"
    NEITHER = "중성"


def is_hangul_syllable(char: str) -> bool:
    """Return True if char is a single precomposed Hangul syllable."""
    if not char or len(char) != 1:
        return False
    return SYLLABLE_FIRST <= ord(char) <= SYLLABLE_LAST


def _offset(char: str) -> int:
    return ord(char) - SYLLABLE_FIRST


def final_index(char: str) -> int:
    """Index of the final consonant slot, 0 if empty, -1 for non-syllables."""
    if not is_hangul_syllable(char):
        return -1
    return _offset(char) % FINAL_COUNT


def has_final_consonant(char: str) -> Optional[bool]:
    """Whether the syllable block has a final consonant.

    Returns None for anything that is not a syllable block,
    including the empty string used for "no character".
    """
    index = final_index(char)
    if index < 0:
        return None
    return index > 0


def vowel_nucleus(char: str) -> str:
    """The compatibility jamo of the vowel nucleus, or an empty string."""
    if not is_hangul_syllable(char):
        return ""
    return VOWELS[(_offset(char) // FINAL_COUNT) % VOWEL_COUNT]


def vowel_harmony(char: str) -> Harmony:
    vowel = vowel_nucleus(char)
    if vowel in BRIGHT_VOWELS:
        return Harmony.BRIGHT
    if vowel in DARK_VOWELS:
        return Harmony.DARK
    return Harmony.NEITHER
