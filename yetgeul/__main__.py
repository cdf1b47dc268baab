#!/usr/bin/env python
# coding=utf-8

"""Run the yetgeul command line interface."""

from .yetgeul import main

main(prog_name="yetgeul")
