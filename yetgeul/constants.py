"""Constant values used by yetgeul.

* Column labels and token tables of the rule table format.
* Jamo tables for the syllable structure analysis.
* Validation schemas for rule records and configuration values.
"""

from pathlib import Path

from schema import Schema, And, Or, Optional, Use

# Column labels of the rule table header
COL_SOURCE = "현대어"
COL_TARGET = "중세어"
COL_MODE = "적용방식"
COL_CONDITION = "조건"
COL_PRIORITY = "우선순위"
COL_NOTE = "비고"

HEADER_MARKERS = (COL_SOURCE, COL_TARGET, COL_MODE)
"""A first row containing any of these labels is a header row."""

LEGACY_COLUMNS = [COL_SOURCE, COL_TARGET, COL_MODE, COL_PRIORITY, COL_NOTE]
"""Positional layout of a rule table without a header row."""

EXTENDED_COLUMNS = [
    COL_SOURCE, COL_TARGET, COL_MODE, COL_CONDITION, COL_PRIORITY, COL_NOTE
]

# Canonical mode tokens
MODE_LITERAL = "그대로"
MODE_PREFIX = "앞"
MODE_SUFFIX = "끝"
MODE_REGEX = "정규식"

MODE_SYNONYMS = {
    MODE_LITERAL: ["그대로", "일반", "치환", "replace"],
    MODE_PREFIX: ["앞", "전", "prefix", "시작"],
    MODE_SUFFIX: ["끝", "후", "suffix", "종결"],
    MODE_REGEX: ["정규식", "regex", "re", "re.sub"],
}

KNOWN_MODE_TOKENS = [
    token for synonyms in MODE_SYNONYMS.values() for token in synonyms
]

NOTE_CONDITION_PATTERN = r"조건\s*=\s*([^\n\r]+)"
"""A condition written into the note field, e.g. '조건=모음뒤'."""

CONDITION_FILLERS = r"에서쓰일때|에서쓸때|쓸때|일때"
CONDITION_STRIP_CHARS = r"[‘’'\" \t]"

OR_KEYWORD = r"or"
AND_KEYWORD = r"and"

# Predicate names accepted in condition expressions
PREDICATE_NAMES = {
    "consonant_final": ["자음뒤", "consonant-final"],
    "vowel_final": ["모음뒤", "vowel-final"],
    "bright_vowel_final": ["양성모음뒤", "bright-vowel-final"],
    "dark_vowel_final": ["음성모음뒤", "dark-vowel-final"],
    "i_vowel_final": ["ㅣ모음뒤", "중성모음ㅣ뒤", "i-vowel-final"],
    "non_i_vowel_final": ["ㅣ외의모음뒤", "ㅣ외모음뒤", "non-i-vowel-final"],
}

# Hangul syllable block arithmetic
SYLLABLE_FIRST = 0xAC00
SYLLABLE_LAST = 0xD7A3
FINAL_COUNT = 28
VOWEL_COUNT = 21

VOWELS = [
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ", "ㅗ", "ㅘ", "ㅙ",
    "ㅚ", "ㅛ", "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ", "ㅡ", "ㅢ", "ㅣ",
]
"""Vowel nuclei in syllable block order."""

BRIGHT_VOWELS = frozenset(["ㅏ", "ㅑ", "ㅗ", "ㅛ", "ㅘ", "ㅙ", "ㅚ"])
DARK_VOWELS = frozenset(["ㅓ", "ㅕ", "ㅜ", "ㅠ", "ㅡ", "ㅝ", "ㅞ", "ㅟ", "ㅢ"])
I_VOWEL = "ㅣ"

# Tokenization of words, punctuation and whitespace for prefix/suffix rules
TOKEN_PATTERN = r"(?P<word>\w+)|(?P<punct>[^\w\s]+)|(?P<space>\s+)"
WHITESPACE_SPLIT_PATTERN = r"(\s+)"

REPLACEMENT_REF_PATTERN = r"\$(\$|&|[1-9]\d?)"
"""Group references in the destination of a regex rule: $1, $&, $$."""

# Define validation Schemas
rule_schema = Schema({
    "source": str,
    "destination": str,
    "mode": And(str, lambda m: m in MODE_SYNONYMS),
    "priority": int,
    "condition": str,
    "note": str,
})

config_schema = Schema({
    Optional("rules_file"): Or(str, Path),
    Optional("output_dir"): Or(str, Path),
    Optional("encoding"): And(str, len),
    Optional("punctuation_aware"): Use(bool),
}, ignore_extra_keys=True)

APPLIED_COLUMNS = [
    "priority", "mode", "condition", "source", "destination", "before", "after"
]
RULE_TABLE_COLUMNS = [
    "source", "destination", "mode", "condition", "priority", "note"
]
RAW_ROW_COLUMNS = [
    "line", "source", "destination", "mode", "priority", "condition", "note"
]

RULES_EXPORT_NAME = "normalized_rules.csv"
