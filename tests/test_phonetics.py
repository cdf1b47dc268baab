"""Test suite for the syllable structure functions in phonetics.py."""

import pytest

from yetgeul import phonetics
from yetgeul.phonetics import Harmony


@pytest.mark.parametrize(
    "char,expected",
    [("가", True), ("힣", True), ("ㄱ", False), ("ᄒ", False), ("a", False),
     ("", False), ("가나", False)],
    ids=["first", "last", "compat_jamo", "conjoining_jamo", "latin", "empty", "two_chars"]
)
def test_is_hangul_syllable(char, expected):
    assert phonetics.is_hangul_syllable(char) is expected


@pytest.mark.parametrize(
    "char,expected",
    [("각", True), ("힣", True), ("가", False), ("의", False), ("a", None), ("", None)]
)
def test_has_final_consonant(char, expected):
    assert phonetics.has_final_consonant(char) is expected


def test_final_index():
    assert phonetics.final_index("가") == 0
    assert phonetics.final_index("각") == 1
    assert phonetics.final_index("힣") == 27
    assert phonetics.final_index("!") == -1


@pytest.mark.parametrize(
    "char,expected",
    [("가", "ㅏ"), ("귀", "ㅟ"), ("의", "ㅢ"), ("힣", "ㅣ"), ("꽝", "ㅘ"),
     ("a", ""), ("", "")]
)
def test_vowel_nucleus(char, expected):
    assert phonetics.vowel_nucleus(char) == expected


@pytest.mark.parametrize(
    "char,expected",
    [
        ("가", Harmony.BRIGHT),
        ("와", Harmony.BRIGHT),
        ("뇨", Harmony.BRIGHT),
        ("서", Harmony.DARK),
        ("의", Harmony.DARK),
        ("뭘", Harmony.DARK),
        ("개", Harmony.NEITHER),
        ("기", Harmony.NEITHER),
        ("a", Harmony.NEITHER),
        ("", Harmony.NEITHER),
    ]
)
def test_vowel_harmony(char, expected):
    assert phonetics.vowel_harmony(char) is expected
