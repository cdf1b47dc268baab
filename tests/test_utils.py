"""Test suite for helper functions in utils.py."""
import logging
from pathlib import Path

import pandas as pd
import pytest

from yetgeul import utils
from yetgeul.translator import AppliedRule


def test_split_table():
    # given
    text = "\ufeff현대어,중세어\r\n가,A\r\n\r\n나,B\r다,C\n   \n"
    # when
    result = utils.split_table(text)
    # then
    assert result == [["현대어", "중세어"], ["가", "A"], ["나", "B"], ["다", "C"]]


def test_split_table_empty():
    assert utils.split_table("") == []
    assert utils.split_table(None) == []


@pytest.mark.parametrize(
    "line,expected",
    [
        ("가,A,앞", ["가", "A", "앞"]),
        ('"가,나",A', ["가,나", "A"]),
        ('"말하기를 ""가""",A', ['말하기를 "가"', "A"]),
        ("가,,", ["가", "", ""]),
        ('"가,A', ["가,A"]),
        ("", [""]),
    ],
    ids=["plain", "quoted_delimiter", "escaped_quote", "empty_cells",
         "unmatched_quote", "empty_line"]
)
def test_parse_table_line(line, expected):
    assert utils.parse_table_line(line) == expected


def test_parse_table_line_delimiter():
    assert utils.parse_table_line("가\tA,B", delimiter="\t") == ["가", "A,B"]


@pytest.mark.parametrize(
    "raw,encoding,expected",
    [
        ("가,A".encode("utf-8"), "utf-8", "가,A"),
        ("\ufeff가,A".encode("utf-8"), "utf-8", "가,A"),
        ("\ufeff가,A".encode("utf-8"), "UTF8", "가,A"),
        ("가,A".encode("cp949"), "cp949", "가,A"),
        ("가,A", "utf-8", "가,A"),
    ],
    ids=["utf8", "bom", "utf8_alias", "cp949", "text"]
)
def test_decode_source(raw, encoding, expected):
    assert utils.decode_source(raw, encoding) == expected


def test_decode_source_invalid_bytes():
    with pytest.raises(UnicodeDecodeError):
        utils.decode_source(b"\xff\xfe\xfa", "utf-8")


def test_read_source(tmp_path):
    # given
    file_path = tmp_path / "rules.csv"
    file_path.write_bytes("가,A\n".encode("utf-8"))
    # when
    result = utils.read_source(file_path)
    # then
    assert result == "가,A\n".encode("utf-8")


def test_ensure_path_exists(tmp_path):
    # given
    path = tmp_path / "some" / "dir"
    # when
    result = utils.ensure_path_exists(str(path))
    # then
    assert isinstance(result, Path)
    assert result.is_dir()


def test_write_applied_rules(tmp_path):
    # given
    output_file = tmp_path / "applied.csv"
    records = [
        AppliedRule(10, "그대로", "", "하다", "HADA", "하다 하나", "HADA 하나"),
        AppliedRule(5, "앞", "", "하", "H", "HADA 하나", "HADA H나"),
    ]
    # when
    utils.write_applied_rules(output_file, records)
    # then
    df = pd.read_csv(output_file, keep_default_na=False)
    assert len(df) == 2
    assert df.columns.tolist() == [
        "priority", "mode", "condition", "source", "arrow", "destination",
        "before", "after"]
    assert df["arrow"].unique().tolist() == ["===>"]
    assert df["after"].tolist() == ["HADA 하나", "HADA H나"]


def test_write_applied_rules_bad_path(tmp_path, caplog):
    # given
    output_file = tmp_path / "missing_dir" / "applied.csv"
    # when
    utils.write_applied_rules(output_file, [])
    # then
    assert not output_file.exists()
    assert "Couldn't write applied rules" in caplog.text


def test_applied_rules_to_df_empty():
    result = utils.applied_rules_to_df([])
    assert len(result) == 0
    assert "before" in result.columns


def test_load_config(tmp_path):
    # given
    file_path = tmp_path / "some_config.py"
    file_path.write_text(
        'RULES_FILE = "규칙.csv"\n'
        'ENCODING = "cp949"\n'
        'PUNCTUATION_AWARE = 0\n'
        'OTHER_VALUE = [1, 2]\n'
        '_PRIVATE = "x"\n',
        encoding="utf-8",
    )
    # when
    result = utils.load_config(file_path)
    # then
    assert result["rules_file"] == "규칙.csv"
    assert result["encoding"] == "cp949"
    assert result["punctuation_aware"] is False
    assert "other_value" not in result
    assert "_private" not in result


def test_load_config_invalid_values(tmp_path):
    # given
    file_path = tmp_path / "bad_config.py"
    file_path.write_text('ENCODING = ""\n', encoding="utf-8")
    # when
    result = utils.load_config(file_path)
    # then
    assert result == {}


def test_load_config_missing_file(tmp_path):
    assert utils.load_config(tmp_path / "no_config.py") == {}


def test_load_module_dict(config_file):
    # when
    result = utils.load_module_dict(config_file)
    # then
    assert set(result.keys()) == {"RULES_FILE", "OUTPUT_DIR", "ENCODING"}


@pytest.mark.parametrize(
    "verbosity,expected",
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)]
)
def test_log_level(verbosity, expected):
    assert utils.log_level(verbosity) == expected


def test_time_process(capsys):
    # given
    @utils.time_process
    def add(a, b):
        """Add two numbers."""
        return a + b
    # when
    result = add(1, 2)
    # then
    assert result == 3
    assert add.__doc__ == "Add two numbers."
    assert "Processing time" in capsys.readouterr().err
