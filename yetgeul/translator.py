"""Apply a rule table to modern Korean text.

Rules are applied one after another in table order, and each rule
rewrites the output of the previous one.
"""

import logging
import re
import unicodedata
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional, Tuple, Union

from .conditions import Condition
from .constants import (
    TOKEN_PATTERN,
    WHITESPACE_SPLIT_PATTERN,
    REPLACEMENT_REF_PATTERN,
)
from .rule_objects import Mode, Rule, RuleTable
from .utils import split_table, read_source, decode_source


TOKEN_RE = re.compile(TOKEN_PATTERN)
WHITESPACE_SPLIT_RE = re.compile(WHITESPACE_SPLIT_PATTERN)
REPLACEMENT_REF_RE = re.compile(REPLACEMENT_REF_PATTERN)


class RuleSourceError(Exception):
    """Raised when the rule table source can't be read or decoded."""


class AppliedRule(NamedTuple):
    """A rule application that changed the text."""
    priority: int
    mode: str
    condition: str
    source: str
    destination: str
    before: str
    after: str

    def __str__(self):
        condition = f" cond={self.condition}" if self.condition else ""
        return (
            f"[APPLIED] ({self.priority}) {self.mode}{condition}: "
            f"'{self.source}' -> '{self.destination}'"
        )


def conditional_replace(
        text: str, source: str, destination: str, condition: Condition) -> str:
    """Replace literal occurrences of source where the condition holds.

    The text is scanned once from left to right. The condition looks at
    the last character written to the output so far, so it sees earlier
    substitutions of this scan rather than the original text.
    """
    if not source:
        return text
    out = []
    previous = ""
    i = 0
    while i < len(text):
        if text.startswith(source, i) and condition.holds_after(previous):
            out.append(destination)
            if destination:
                previous = destination[-1]
            i += len(source)
        else:
            out.append(text[i])
            previous = text[i]
            i += 1
    return "".join(out)


def tokenize(text: str, punctuation_aware: bool = True) -> List[Tuple[str, bool]]:
    """Split text into (token, is_word) pairs that join back to the text.

    Words are runs of word characters. With punctuation_aware=False,
    only whitespace separates tokens and punctuation stays in the words.
    """
    if punctuation_aware:
        return [
            (match.group(), match.lastgroup == "word")
            for match in TOKEN_RE.finditer(text)
        ]
    return [
        (token, not token.isspace())
        for token in WHITESPACE_SPLIT_RE.split(text) if token
    ]


def apply_prefix_suffix(
        text: str, source: str, destination: str, mode: Mode,
        punctuation_aware: bool = True) -> str:
    """Rewrite the start (PREFIX) or end (SUFFIX) of every word token."""
    if not source:
        return text
    out = []
    for token, is_word in tokenize(text, punctuation_aware):
        if is_word:
            if mode is Mode.PREFIX and token.startswith(source):
                token = destination + token[len(source):]
            elif mode is Mode.SUFFIX and token.endswith(source):
                token = token[:-len(source)] + destination
        out.append(token)
    return "".join(out)


def expand_replacement(match, template: str) -> str:
    """Fill $1..$99, $& and $$ references of template from a regex match."""
    groups = match.re.groups

    def _ref(ref):
        token = ref.group(1)
        if token == "$":
            return "$"
        if token == "&":
            return match.group(0)
        index = int(token)
        if index <= groups:
            return match.group(index) or ""
        if len(token) == 2 and int(token[0]) <= groups:
            return (match.group(int(token[0])) or "") + token[1]
        return ref.group(0)

    return REPLACEMENT_REF_RE.sub(_ref, template)


def regex_replace(text: str, pattern: str, destination: str) -> str:
    """Replace all matches of a regular expression.

    A pattern that doesn't compile, or is too large or too deeply nested
    to compile, is replaced literally instead.
    """
    try:
        compiled = re.compile(pattern)
        return compiled.sub(lambda m: expand_replacement(m, destination), text)
    except (re.error, OverflowError, RecursionError) as error:
        logging.debug(
            "Invalid regular expression %r (%s), replacing it literally",
            pattern, error)
        return text.replace(pattern, destination)


def apply_rule(text: str, rule: Rule, punctuation_aware: bool = True) -> str:
    """Apply a single rule to text and return the new text."""
    if rule.is_regex:
        return regex_replace(text, rule.source, rule.destination)
    condition = rule.parsed_condition
    for source in rule.alternatives:
        if rule.mode in (Mode.LITERAL, Mode.REGEX):
            if condition:
                text = conditional_replace(
                    text, source, rule.destination, condition)
            else:
                text = text.replace(source, rule.destination)
        elif rule.mode in (Mode.PREFIX, Mode.SUFFIX):
            # Conditions are not evaluated for prefix and suffix rules
            text = apply_prefix_suffix(
                text, source, rule.destination, rule.mode, punctuation_aware)
    return text


def translate(
        text: str,
        rule_table: RuleTable,
        diagnostics: bool = False,
        report: Optional[Callable[[AppliedRule], None]] = None,
        punctuation_aware: bool = True,
) -> str:
    """Rewrite text with every rule of the table, in table order.

    Parameters
    ----------
    text: str
        Input text. It is normalized to NFC before any rule applies.
    rule_table: RuleTable
        Rules in application order. The table is only read.
    diagnostics: bool
        If True, every rule that changed the text is logged and,
        if given, passed to ``report``. The output is not affected.
    report: callable
        Receives an AppliedRule for each rule that changed the text.
    punctuation_aware: bool
        Tokenization of PREFIX and SUFFIX rules, see ``tokenize``.
    """
    text = unicodedata.normalize("NFC", text or "")
    for rule in rule_table or ():
        if not rule.alternatives:
            continue
        before = text
        text = apply_rule(text, rule, punctuation_aware)
        if diagnostics and text != before:
            record = AppliedRule(
                priority=rule.priority,
                mode=rule.mode.value,
                condition=rule.condition,
                source=rule.source,
                destination=rule.destination,
                before=before,
                after=text,
            )
            logging.info("%s", record)
            if report is not None:
                report(record)
    return text


class RuleEngine:
    """Holds the current rule table and translates text with it.

    A new table is built completely before it replaces the current one,
    and a failed load leaves an empty table.
    """
    def __init__(
            self,
            rule_table: RuleTable = None,
            punctuation_aware: bool = True,
    ):
        self._table = RuleTable.empty() if rule_table is None else rule_table
        self.punctuation_aware = punctuation_aware

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(rule_count={self.rule_count}, "
            f"punctuation_aware={self.punctuation_aware})"
        )

    @property
    def table(self) -> RuleTable:
        return self._table

    @property
    def rule_count(self) -> int:
        return len(self._table)

    def replace(self, rule_table: RuleTable):
        """Swap in a pre-built rule table."""
        self._table = rule_table
        return {"rule_count": self.rule_count}

    def reset(self):
        self._table = RuleTable.empty()

    def load(self, raw: Union[str, bytes], encoding: str = "utf-8") -> dict:
        """Parse and normalize the text of a rule table, and use it.

        Raises
        ------
        RuleSourceError
            If bytes can't be decoded. The table is then empty.
        """
        try:
            text = decode_source(raw, encoding)
        except (UnicodeDecodeError, LookupError) as error:
            self.reset()
            logging.error("Couldn't decode rule table: %s", error)
            raise RuleSourceError(f"Couldn't decode rule table: {error}") from error
        table = RuleTable.from_rows(split_table(text))
        logging.info("Loaded %s rules", len(table))
        return self.replace(table)

    def load_file(self, file_path: Union[str, Path], encoding: str = "utf-8") -> dict:
        """Read a rule table file and use its rules.

        Raises
        ------
        RuleSourceError
            If the file can't be read or decoded. The table is then empty.
        """
        try:
            raw = read_source(file_path)
        except OSError as error:
            self.reset()
            logging.error("Couldn't read rule table %s: %s", file_path, error)
            raise RuleSourceError(
                f"Couldn't read rule table {file_path}: {error}") from error
        return self.load(raw, encoding)

    def translate(
            self,
            text: str,
            diagnostics: bool = False,
            report: Optional[Callable[[AppliedRule], None]] = None,
    ) -> str:
        return translate(
            text, self._table, diagnostics=diagnostics, report=report,
            punctuation_aware=self.punctuation_aware)

    def translate_with_trace(self, text: str) -> Tuple[str, List[AppliedRule]]:
        """Translate text and return the rules that changed it."""
        applied: List[AppliedRule] = []
        output = self.translate(text, diagnostics=True, report=applied.append)
        return output, applied
