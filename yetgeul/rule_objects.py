"""Rule records and the sorted rule table built from rule table rows."""

import logging
import re
from enum import Enum
from typing import List, Iterable, Sequence, Tuple, Dict

import pandas as pd
import pandera.pandas as pa
from pandera.errors import SchemaErrors
from pandera.pandas import Column, DataFrameSchema, Check
from schema import SchemaError

from .conditions import Condition, cleanup_condition, OR_SPLIT
from .constants import (
    COL_SOURCE,
    COL_TARGET,
    COL_MODE,
    COL_CONDITION,
    COL_PRIORITY,
    COL_NOTE,
    HEADER_MARKERS,
    LEGACY_COLUMNS,
    MODE_LITERAL,
    MODE_PREFIX,
    MODE_SUFFIX,
    MODE_REGEX,
    MODE_SYNONYMS,
    KNOWN_MODE_TOKENS,
    NOTE_CONDITION_PATTERN,
    RULE_TABLE_COLUMNS,
    RAW_ROW_COLUMNS,
    rule_schema,
)


class Mode(Enum):
    """How a rule's source is matched in the text."""
    LITERAL = MODE_LITERAL
    PREFIX = MODE_PREFIX
    SUFFIX = MODE_SUFFIX
    REGEX = MODE_REGEX


_MODE_LOOKUP = {
    token: Mode(canonical)
    for canonical, synonyms in MODE_SYNONYMS.items() for token in synonyms
}


def normalize_mode(token: str) -> Mode:
    """Map a mode token to its canonical mode. Unknown tokens mean LITERAL."""
    token = (token or "").strip()
    mode = _MODE_LOOKUP.get(token)
    if mode is None:
        if token:
            logging.debug("Unknown mode %r, using %s", token, Mode.LITERAL.value)
        return Mode.LITERAL
    return mode


def parse_priority(text: str) -> int:
    """Parse the leading integer of a priority cell, 0 if there is none."""
    match = re.match(r"[+-]?\d+", (text or "").strip())
    if match is None:
        return 0
    return int(match.group())


def extract_condition_from_note(note: str) -> str:
    """Recover a condition written as '조건=...' in the note field."""
    match = re.search(NOTE_CONDITION_PATTERN, note or "")
    if not match:
        return ""
    return cleanup_condition(match.group(1))


def split_alternatives(source: str) -> List[str]:
    """Split a source field on the token 'or' into literal alternatives."""
    source = (source or "").strip()
    if not source:
        return []
    return [alt.strip() for alt in OR_SPLIT.split(source) if alt.strip()]


class Rule:
    """One rewriting instruction of the rule table.

    The source holds one or more literal patterns separated by 'or',
    or a regular expression when the mode is REGEX and there is no
    condition. Rules are not modified after construction.
    """
    def __init__(
            self,
            source: str,
            destination: str,
            mode: Mode = Mode.LITERAL,
            priority: int = 0,
            condition: str = "",
            note: str = "",
    ):
        self._source = source
        self._destination = destination
        self._mode = mode if isinstance(mode, Mode) else normalize_mode(mode)
        self._priority = priority
        self._condition = cleanup_condition(condition)
        self._note = note
        self._parsed_condition = Condition.parse(self._condition)
        self._alternatives = split_alternatives(source)

    @classmethod
    def from_dict(cls, rule_dict: dict):
        """Instantiate a Rule object from a rule dictionary.

        Parameters
        ----------
        rule_dict: dict
            Format is {"source": str, "destination": str, "mode": str,
            "priority": int, "condition": str, "note": str}
        """
        return cls(**rule_dict)

    def to_dict(self):
        """Create a well-formed rule dict."""
        rule_dict = {
            "source": self.source,
            "destination": self.destination,
            "mode": self.mode.value,
            "priority": self.priority,
            "condition": self.condition,
            "note": self.note,
        }
        return rule_schema.validate(rule_dict)

    def __repr__(self):
        instance_repr = (
            "{}(source={!r}, destination={!r}, mode={!r}, priority={!r}, "
            "condition={!r})"
        ).format(
            self.__class__.__name__,
            self.source,
            self.destination,
            self.mode.value,
            self.priority,
            self.condition,
        )
        return instance_repr

    def __eq__(self, other):
        if not isinstance(other, Rule):
            return NotImplemented
        return (
            (self.source, self.destination, self.mode, self.priority,
             self.condition, self.note)
            == (other.source, other.destination, other.mode, other.priority,
                other.condition, other.note)
        )

    def __hash__(self):
        return hash((self.source, self.destination, self.mode, self.priority,
                     self.condition))

    @property
    def is_valid(self):
        """Whether or not the rule conforms to the rule schema."""
        try:
            self.to_dict()
        except SchemaError:
            return False
        return True

    @property
    def source(self):
        return self._source

    @property
    def destination(self):
        return self._destination

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def condition(self) -> str:
        """Cleaned condition text. Empty means the rule always applies."""
        return self._condition

    @property
    def parsed_condition(self) -> Condition:
        return self._parsed_condition

    @property
    def note(self):
        return self._note

    @property
    def alternatives(self) -> List[str]:
        """Literal patterns of the source, in the order they are applied."""
        return list(self._alternatives)

    @property
    def is_regex(self) -> bool:
        """Whether the source is compiled as a regular expression.

        Only REGEX rules without a condition are. With a condition each
        alternative is matched literally.
        """
        return self._mode is Mode.REGEX and not self._condition


class ColumnLayout:
    """Cell positions of the rule fields in the rows of a rule table."""
    def __init__(self, header: Sequence[str]):
        self.header = [cell.strip() for cell in header]
        self.has_condition = COL_CONDITION in self.header
        fallback = {
            COL_SOURCE: 0,
            COL_TARGET: 1,
            COL_MODE: 2,
            COL_CONDITION: 3,
            COL_PRIORITY: 4 if self.has_condition else 3,
            COL_NOTE: 5 if self.has_condition else 4,
        }
        self.positions = {
            name: self.header.index(name) if name in self.header else index
            for name, index in fallback.items()
        }

    def __repr__(self):
        return f"{self.__class__.__name__}({self.header!r})"

    def cell(self, row: Sequence[str], name: str) -> str:
        """Trimmed cell value for a column name, empty if the row is short."""
        if name == COL_CONDITION and not self.has_condition:
            return ""
        index = self.positions[name]
        if index < len(row) and row[index] is not None:
            return row[index].strip()
        return ""


def resolve_layout(rows: Sequence[Sequence[str]]) -> Tuple[ColumnLayout, int]:
    """Detect a header row and return the column layout and first data row."""
    if rows:
        first = [(cell or "").strip() for cell in rows[0]]
        if any(marker in first for marker in HEADER_MARKERS):
            logging.debug("Rule table header: %s", first)
            return ColumnLayout(first), 1
    logging.debug("No header row, assuming columns %s", LEGACY_COLUMNS)
    return ColumnLayout(LEGACY_COLUMNS), 0


def read_row(row: Sequence[str], layout: ColumnLayout) -> Dict[str, str]:
    """Read the raw (trimmed, unconverted) rule fields of a row."""
    note = layout.cell(row, COL_NOTE)
    condition = layout.cell(row, COL_CONDITION)
    if not condition:
        condition = extract_condition_from_note(note)
    return {
        "source": layout.cell(row, COL_SOURCE),
        "destination": layout.cell(row, COL_TARGET),
        "mode": layout.cell(row, COL_MODE),
        "priority": layout.cell(row, COL_PRIORITY),
        "condition": cleanup_condition(condition),
        "note": note,
    }


def _data_rows(rows: Sequence[Sequence[str]]):
    """Yield (row number, raw fields) of the rows that describe a rule."""
    layout, start_row = resolve_layout(rows)
    for line, row in enumerate(rows[start_row:], start=start_row + 1):
        if not row or all(not (cell or "").strip() for cell in row):
            continue
        fields = read_row(row, layout)
        if not fields["source"] and not fields["destination"]:
            logging.debug("Skipping row %s without source and destination", line)
            continue
        yield line, fields


def normalize_rows(rows: Sequence[Sequence[str]]) -> List[Rule]:
    """Turn rule table rows into Rule objects, in table order."""
    rules = []
    for _, fields in _data_rows(rows):
        rules.append(Rule(
            source=fields["source"],
            destination=fields["destination"],
            mode=normalize_mode(fields["mode"]),
            priority=parse_priority(fields["priority"]),
            condition=fields["condition"],
            note=fields["note"],
        ))
    return rules


def sort_rules(rules: Iterable[Rule]) -> List[Rule]:
    """Order rules by priority, then by source length, both descending.

    The length is that of the whole source field, "or" alternatives included.
    """
    return sorted(rules, key=lambda rule: (-rule.priority, -len(rule.source)))


class RuleTable:
    """An ordered, immutable collection of rules.

    The order is the application order of the translator.
    A table is replaced as a whole, never modified.
    """
    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules = tuple(sort_rules(rules))

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]):
        return cls(rules)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]):
        """Normalize and sort the rows of a rule table."""
        return cls(normalize_rows(rows))

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    def __len__(self):
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __getitem__(self, index):
        return self._rules[index]

    def __bool__(self):
        return bool(self._rules)

    def __repr__(self):
        return f"{self.__class__.__name__}({len(self)} rules)"

    def to_df(self) -> pd.DataFrame:
        """The rules in application order as a dataframe."""
        return pd.DataFrame(
            [rule.to_dict() for rule in self._rules], columns=RULE_TABLE_COLUMNS)


def rows_to_df(rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Create a dataframe of the raw rule fields, one row per rule."""
    records = [
        {"line": line, **fields} for line, fields in _data_rows(rows)
    ]
    return pd.DataFrame(records, columns=RAW_ROW_COLUMNS).set_index("line")


def _known_predicates(condition: str) -> bool:
    return not Condition.parse(condition).unknown_names


rule_row_schema = DataFrameSchema({
    "source": Column(pa.String),
    "destination": Column(pa.String),
    "mode": Column(pa.String, Check.isin(KNOWN_MODE_TOKENS + [""])),
    "priority": Column(pa.String, Check.str_matches(r"^([+-]?\d+)?$")),
    "condition": Column(
        pa.String, Check(_known_predicates, element_wise=True)
    ),
    "note": Column(pa.String),
})
"""Raw rule fields that normalize without a fallback."""


def lint_rule_rows(rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Validate the raw rule fields and return the failure cases.

    Rows that fail are still usable: the normalizer falls back to
    LITERAL for unknown modes, to 0 for bad priorities, and unknown
    condition predicates never hold. The report lists where that happens.
    """
    df = rows_to_df(rows)
    try:
        rule_row_schema.validate(df, lazy=True)
    except SchemaErrors as error:
        return error.failure_cases
    return pd.DataFrame(columns=["column", "check", "failure_case", "index"])
