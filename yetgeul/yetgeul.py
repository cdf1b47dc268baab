"""Rewrite modern Korean text in Middle Korean orthography with a rule table."""

import logging
import pathlib
import pprint
import sys

import click

from .constants import RULES_EXPORT_NAME
from .rule_objects import RuleTable, lint_rule_rows
from .translator import RuleEngine, RuleSourceError
from .utils import (
    decode_source,
    ensure_path_exists,
    load_config,
    read_source,
    set_logging_config,
    split_table,
    time_process,
    write_applied_rules,
    write_rule_table,
)

CFG = {
    'rules_file': 'rules.csv',
    'output_dir': 'data/output',
    'encoding': 'utf-8',
    'punctuation_aware': True,
}
CONFIG_FILE = load_config("./config.py")
CFG.update(CONFIG_FILE)
CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
)


def output_dir(cfg):
    return ensure_path_exists(cfg.get("output_dir"))


def current_config(ctx):
    """The configuration of this invocation: defaults updated by a config file."""
    return ctx.meta.setdefault("config", dict(CFG))


def read_config_file(ctx, param, path):
    """Update the configuration with the values of a config.py file."""
    if path is not None:
        current_config(ctx).update(load_config(path))
    return path


def configure_logging(ctx, param, verbose):
    """Configure logging level and destination based on user input."""
    return set_logging_config(
        verbose, logfile=(output_dir(current_config(ctx)) / "log.txt"))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-c",
    "--config-file",
    type=click.Path(resolve_path=True, exists=True, dir_okay=False, path_type=pathlib.Path),
    callback=read_config_file,
    is_eager=True,
    help="Python file with upper case config variables, e.g. RULES_FILE.",
)
@click.option(
    "-r",
    "--rules-file",
    type=click.Path(resolve_path=True, dir_okay=False, path_type=pathlib.Path),
    help="The rule table (csv) to translate with.",
)
@click.option(
    "-e",
    "--encoding",
    type=str,
    help="Text encoding of the rule table.",
)
@click.option(
    "--legacy-affixes",
    is_flag=True,
    help="Only split words on whitespace for prefix and suffix rules, "
         "keeping punctuation attached to the words.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    callback=configure_logging,
    help="Print logging messages to the console in addition to the log file. "
         "-v is informative, -vv is detailed (for debugging)."
)
@click.pass_context
def main(ctx, config_file, rules_file, encoding, legacy_affixes, verbose):
    """Translate modern Korean text with the rules of a rule table.

    Default values for the rule table, its encoding and the output
    directory are specified in the config.py file.

    If provided, CLI arguments override the default values from the config.
    """
    logging.info("START LOG")
    cfg = current_config(ctx)
    if rules_file is not None:
        cfg["rules_file"] = rules_file
    if encoding is not None:
        cfg["encoding"] = encoding
    if legacy_affixes:
        cfg["punctuation_aware"] = False
    if verbose:
        click.secho("Configuration values:", fg="yellow", err=True)
        click.echo(pprint.pformat(cfg), err=True)
        click.echo(f"Invoked command: {ctx.invoked_subcommand}", err=True)

    ctx.obj = engine = RuleEngine(punctuation_aware=cfg.get("punctuation_aware"))
    try:
        result = engine.load_file(cfg.get("rules_file"), cfg.get("encoding"))
    except RuleSourceError as error:
        click.secho(f"Failed to load rules: {error}", fg="red", err=True)
        ctx.meta["load_failed"] = True
    else:
        click.secho(f"Loaded {result['rule_count']} rules", fg="cyan", err=True)


@main.command("translate")
@click.argument("text", required=False)
@click.option(
    "-i",
    "--input-file",
    type=click.Path(resolve_path=True, exists=True, dir_okay=False, path_type=pathlib.Path),
    help="Translate the contents of this file instead of TEXT.",
)
@click.option(
    "-o",
    "--outfile",
    type=click.Path(resolve_path=True, dir_okay=False, path_type=pathlib.Path),
    help="Write the translation to this file instead of stdout.",
)
@click.option(
    "-d",
    "--diagnostics",
    is_flag=True,
    help="Print every rule that changed the text to stderr.",
)
@click.option(
    "-t",
    "--track-file",
    type=click.Path(resolve_path=True, dir_okay=False, path_type=pathlib.Path),
    help="Write the rules that changed the text to this csv file.",
)
@click.pass_obj
@time_process
def translate_text(engine, text, input_file, outfile, diagnostics, track_file):
    """Translate TEXT, an input file, or stdin."""
    if input_file is not None:
        text = input_file.read_text(encoding="utf-8")
    elif text is None:
        text = click.get_text_stream("stdin").read()

    applied = []

    def report(record):
        applied.append(record)
        if diagnostics:
            click.secho(str(record), fg="yellow", err=True)

    output = engine.translate(
        text, diagnostics=(diagnostics or track_file is not None), report=report)

    if track_file is not None:
        click.secho(f"Track {len(applied)} applied rules in {track_file}", fg="cyan", err=True)
        write_applied_rules(track_file, applied)
    if outfile is not None:
        outfile.write_text(output, encoding="utf-8")
    else:
        click.echo(output)


@main.command("rules")
@click.option(
    "-o",
    "--outfile",
    type=click.Path(resolve_path=True, dir_okay=False, path_type=pathlib.Path),
    help="Write the normalized rule table to this csv file. "
         f"Use '-' for {RULES_EXPORT_NAME} in the output directory.",
)
@click.pass_context
def list_rules(ctx, outfile):
    """Show the normalized rules in the order they are applied."""
    df = ctx.obj.table.to_df()
    if outfile is None:
        click.echo(df.to_string() if len(df) else "No rules loaded.")
        return
    if outfile.name == "-":
        outfile = output_dir(current_config(ctx)) / RULES_EXPORT_NAME
    write_rule_table(outfile, df)
    click.secho(f"Wrote {len(df)} rules to {outfile}", fg="cyan", err=True)


@main.command("check")
@click.pass_context
def check_rules(ctx):
    """Report rule fields that only load through a fallback.

    Unknown mode tokens are read as 그대로, bad priorities as 0,
    and unknown condition predicates never hold.
    """
    if ctx.meta.get("load_failed"):
        ctx.exit(1)
    cfg = current_config(ctx)
    rules_file = cfg.get("rules_file")
    rows = split_table(decode_source(read_source(rules_file), cfg.get("encoding")))
    failures = lint_rule_rows(rows)
    if len(failures):
        click.secho(f"{len(failures)} problems in {rules_file}:", fg="red")
        click.echo(failures[["index", "column", "failure_case"]].to_string(index=False))
        ctx.exit(1)
    click.secho(f"All {len(RuleTable.from_rows(rows))} rules are well-formed.", fg="green")


if __name__ == "__main__":
    sys.exit(main())
