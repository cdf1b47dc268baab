"""Utility functions for yetgeul"""

import functools
import importlib.util
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Union, Iterable, List, Dict

import click
import pandas as pd
from schema import SchemaError

from .constants import APPLIED_COLUMNS, config_schema


def ensure_path_exists(path):
    """Make sure a directory exists and is a Path object."""
    path_obj = Path(path)
    path_obj.mkdir(exist_ok=True, parents=True)
    return path_obj


def split_table(text: str, delimiter: str = ",") -> List[List[str]]:
    """Split the text of a rule table into rows of string cells.

    All newline conventions are normalized to a single one,
    and blank lines are dropped. Rows are not padded or truncated.
    """
    norm = (text or "").lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    return [
        parse_table_line(line, delimiter)
        for line in norm.split("\n") if line.strip()
    ]


def parse_table_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one line into cells, honoring double-quoted fields.

    Two consecutive quotes inside a quoted field decode to one quote.
    An unmatched quote keeps the rest of the line inside the field.
    A quote toggles quoting anywhere in a field, which the csv module and
    pandas.read_csv don't reproduce.
    """
    cells = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and line[i + 1:i + 2] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    cells.append("".join(current))
    return cells


def read_source(file_path: Union[str, Path]) -> bytes:
    """Read the raw bytes of a rule table."""
    logging.info("Read rule table from %s", file_path)
    return Path(file_path).read_bytes()


def decode_source(raw: Union[str, bytes], encoding: str = "utf-8") -> str:
    """Decode raw rule table bytes. A leading BOM is dropped."""
    if isinstance(raw, bytes):
        if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
            encoding = "utf-8-sig"
        return raw.decode(encoding)
    return raw or ""


def write_rule_table(output_file: Union[str, Path], data: pd.DataFrame):
    """Write a normalized rule table to a csv file."""
    logging.info("Write rule table to %s", output_file)
    data.to_csv(output_file, header=True, index=False)


def applied_rules_to_df(records: Iterable) -> pd.DataFrame:
    """Create a dataframe of AppliedRule records."""
    return pd.DataFrame(
        [record._asdict() for record in records], columns=APPLIED_COLUMNS)


def write_applied_rules(output_file: Union[str, Path], records: Iterable):
    """Write the rules that changed a text, in application order, to csv."""
    df = applied_rules_to_df(records)
    df["arrow"] = "===>"
    columns = ["priority", "mode", "condition", "source", "arrow", "destination",
               "before", "after"]
    try:
        write_rule_table(output_file, df[columns])
    except OSError as error:
        logging.error("Couldn't write applied rules to %s: %s", output_file, error)


def resolve_rel_path(file_rel_path: Union[str, Path]) -> Path:
    """Resolve the full path from a potential relative path to the local or parent directory."""

    full_path = Path(file_rel_path).resolve()
    if not full_path.exists():
        full_path = Path.cwd().parent / file_rel_path
    return full_path


def load_module_from_path(file_path):
    """Use importlib to load a module from a .py file path."""
    module_path = resolve_rel_path(file_path)
    assert module_path.suffix == ".py", (
            f"Inappropriate file type: {module_path.suffix} ({file_path})")
    module_name = module_path.stem

    spec = importlib.util.spec_from_file_location(module_name, module_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def load_module_dict(module_path) -> Dict:
    """Load a dict of the public variables defined in a python module, ``{var_name:value}``."""
    module = load_module_from_path(module_path)
    module_dict = module.__dict__
    return {
        key: value for key, value in module_dict.items()
        if not key.startswith("_") and not callable(value)
        and not isinstance(value, type(sys))
    }


def load_config(filename) -> Dict:
    """Load variable names (lower case) and their values as a dict from a .py file.

    Values that don't pass the config schema are skipped.
    """
    try:
        config = {k.lower(): v for k, v in load_module_dict(filename).items()}
    except FileNotFoundError:
        return {}
    try:
        return config_schema.validate(config)
    except SchemaError as error:
        logging.error("Ignoring invalid config values in %s: %s", filename, error)
        return {}


def time_process(f):
    """Take the time of the process from start to end"""
    def new_func(*args, **kwargs):

        start = datetime.now()
        result = f(*args, **kwargs)
        end = datetime.now()
        click.secho(f"Processing time: {str(end - start)}", fg="blue", err=True)
        return result

    functools.update_wrapper(new_func, f)
    return new_func


def log_level(verbosity: int):
    """Calculate the log level given by the number of -v flags.

    0 = logging.WARNING (30)
    1 = logging.INFO (20)
    2 = logging.DEBUG (10)
    """
    return (3 - verbosity) * 10 if verbosity in (0, 1, 2) else 10


def set_logging_config(verbose=0, logfile="log.txt"):
    """Configure logging level and destination based on user input."""
    logging.basicConfig(
        level=logging.DEBUG,
        format=(
            "%(asctime)s | %(levelname)s "
            "| %(module)s-%(funcName)s-%(lineno)04d | %(message)s"),
        datefmt='%Y-%m-%d %H:%M',
        filename=logfile,
        filemode='a',
        encoding="utf-8")

    if verbose:
        # define a Handler which writes log messages to stderr
        console = logging.StreamHandler()
        console.setLevel(log_level(verbose))
        # set a format which is simpler for console use
        formatter = logging.Formatter(
            '%(asctime)-10s | %(levelname)s | %(message)s')
        console.setFormatter(formatter)
        logging.getLogger('').addHandler(console)

    return verbose
