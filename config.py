#!/usr/bin/env python
# coding=utf-8

"""Configure input data to translate modern Korean text."""

RULES_FILE = "rules.csv"
"""Path to the rule table.

Rules are applied by priority, then by the length of their source,
and every rule sees the output of the rules before it.
"""

OUTPUT_DIR = "data/output"
"""Path to the output folder for log files and exported tables"""

ENCODING = "utf-8"
"""Text encoding of the rule table"""

PUNCTUATION_AWARE = True
"""Split words on punctuation as well as whitespace for 앞/끝 rules.

Set to False to only split on whitespace.
"""
