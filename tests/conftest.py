"""Configuration values for the unit tests."""

from pathlib import Path

import pytest

from yetgeul.rule_objects import Mode, Rule, RuleTable
from yetgeul.translator import RuleEngine

TEST_DIR = Path(__file__).parent


@pytest.fixture
def rule_fixture():
    """Dummy conditional rule to be used in tests."""
    return Rule(
        source="다",
        destination="라",
        mode=Mode.LITERAL,
        priority=1,
        condition="모음뒤",
        note="조건 열의 값",
    )


@pytest.fixture
def legacy_rows():
    """Rule table rows without a header, in the 5 column layout."""
    return [
        ["가", "A", "앞", "3", "조건=자음뒤"],
        ["나", "B", "", "", ""],
        ["", "", "끝", "1", ""],
    ]


@pytest.fixture
def extended_rows():
    """Rule table rows with a header, in the 6 column layout."""
    return [
        ["현대어", "중세어", "적용방식", "조건", "우선순위", "비고"],
        ["을", "ᄅᆞᆯ", "그대로", "양성모음뒤", "4", "조건=자음뒤"],
        ["하", "ᄒᆞ", "prefix", "", "5", "조건=모음뒤 일때"],
        ["가나or나가", "X", "정규식", "", "", ""],
    ]


@pytest.fixture(scope="session")
def dummy_rules_path():
    """Path to a rule table file with a header and four rules."""
    return TEST_DIR / "dummy_rules.csv"


@pytest.fixture
def engine_fixture(dummy_rules_path):
    """RuleEngine loaded with the dummy rule table."""
    engine = RuleEngine()
    engine.load_file(dummy_rules_path)
    return engine


@pytest.fixture
def make_table():
    """Build a rule table from (source, destination, mode, priority, condition) tuples."""
    def _make_table(*specs):
        return RuleTable.from_rules(Rule(*spec) for spec in specs)
    return _make_table


@pytest.fixture
def config_file(tmp_path, dummy_rules_path):
    """A config.py that points to the dummy rules and a temporary output dir."""
    output_dir = tmp_path / "output"
    file_path = tmp_path / "dummy_config.py"
    file_path.write_text(
        f'RULES_FILE = r"{dummy_rules_path}"\n'
        f'OUTPUT_DIR = r"{output_dir}"\n'
        'ENCODING = "utf-8"\n',
        encoding="utf-8",
    )
    return file_path
