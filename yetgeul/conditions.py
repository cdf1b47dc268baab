"""Phonetic conditions that restrict where a rule may apply.

A condition is written as ``atom (and atom)* (or atom (and atom)*)*``,
e.g. ``모음뒤`` or ``양성모음뒤 or 자음뒤``. Each atom names a predicate on
the character right before the match position.
"""

import logging
import re
from enum import Enum
from typing import List, Tuple, Union

from .constants import (
    PREDICATE_NAMES,
    CONDITION_FILLERS,
    CONDITION_STRIP_CHARS,
    OR_KEYWORD,
    AND_KEYWORD,
    I_VOWEL,
)
from .phonetics import Harmony, has_final_consonant, vowel_harmony, vowel_nucleus


OR_SPLIT = re.compile(OR_KEYWORD, re.IGNORECASE)
AND_SPLIT = re.compile(AND_KEYWORD, re.IGNORECASE)


def cleanup_condition(text: str) -> str:
    """Strip filler phrases, quotes and blanks from a condition text."""
    cleaned = re.sub(CONDITION_FILLERS, "", text or "")
    cleaned = re.sub(CONDITION_STRIP_CHARS, "", cleaned)
    return cleaned.strip()


class Predicate(Enum):
    CONSONANT_FINAL = "consonant_final"
    VOWEL_FINAL = "vowel_final"
    BRIGHT_VOWEL_FINAL = "bright_vowel_final"
    DARK_VOWEL_FINAL = "dark_vowel_final"
    I_VOWEL_FINAL = "i_vowel_final"
    NON_I_VOWEL_FINAL = "non_i_vowel_final"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "Predicate":
        """Look up a predicate by any of its accepted names."""
        for value, names in PREDICATE_NAMES.items():
            if name in names:
                return cls(value)
        return cls.UNKNOWN

    def holds(self, previous: str) -> bool:
        """Evaluate the predicate on the character preceding a match."""
        final = has_final_consonant(previous)
        if self is Predicate.CONSONANT_FINAL:
            return final is True
        vowel_final = final is False
        if self is Predicate.VOWEL_FINAL:
            return vowel_final
        if self is Predicate.BRIGHT_VOWEL_FINAL:
            return vowel_final and vowel_harmony(previous) is Harmony.BRIGHT
        if self is Predicate.DARK_VOWEL_FINAL:
            return vowel_final and vowel_harmony(previous) is Harmony.DARK
        if self is Predicate.I_VOWEL_FINAL:
            return vowel_final and vowel_nucleus(previous) == I_VOWEL
        if self is Predicate.NON_I_VOWEL_FINAL:
            vowel = vowel_nucleus(previous)
            return vowel_final and bool(vowel) and vowel != I_VOWEL
        # Unknown predicates never hold
        return False


Atom = Tuple[str, Predicate]


class Condition:
    """A disjunction of conjunctions of predicates.

    The empty condition always holds.
    """

    def __init__(self, clauses: List[List[Atom]] = None, text: str = ""):
        self._clauses = tuple(tuple(clause) for clause in (clauses or []))
        self.text = text

    @classmethod
    def parse(cls, text: str) -> "Condition":
        """Parse a condition text into OR-ed groups of AND-ed predicates."""
        cleaned = cleanup_condition(text)
        clauses = []
        for part in OR_SPLIT.split(cleaned):
            names = [
                cleanup_condition(name) for name in AND_SPLIT.split(part.strip())
            ]
            names = [name for name in names if name]
            if names:
                clauses.append([(name, Predicate.from_name(name)) for name in names])
        condition = cls(clauses, text=cleaned)
        if condition.unknown_names:
            logging.debug(
                "Condition %r contains unknown predicates %s, which never hold",
                cleaned, condition.unknown_names)
        return condition

    @property
    def clauses(self):
        return self._clauses

    @property
    def unknown_names(self) -> List[str]:
        return [
            name for clause in self._clauses for name, predicate in clause
            if predicate is Predicate.UNKNOWN
        ]

    def __bool__(self):
        return bool(self._clauses)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, Condition):
            return NotImplemented
        return self._clauses == other._clauses

    def __hash__(self):
        return hash(self._clauses)

    def holds_after(self, previous: str) -> bool:
        """Evaluate the condition given the character preceding a match."""
        if not self._clauses:
            return True
        return any(
            all(predicate.holds(previous) for _, predicate in clause)
            for clause in self._clauses
        )

    def evaluate(self, text: str, index: int) -> bool:
        """Evaluate the condition at a zero-based position of text."""
        previous = text[index - 1] if 0 < index <= len(text) else ""
        return self.holds_after(previous)


def evaluate(expr: Union[str, Condition], text: str, index: int) -> bool:
    """Evaluate a condition expression, given as text or parsed, at index."""
    if not isinstance(expr, Condition):
        expr = Condition.parse(expr)
    return expr.evaluate(text, index)
