"""
lexgen - Rule-Driven Tokenizer Command-Line Interface
=====================================================

This module implements the command-line driver. It loads a JSON rule
set, scans a source file and prints one token per line.

Usage Examples
--------------
Tokenize a file:
    $ lexgen calc.json program.calc

Keep going after unrecognized characters:
    $ lexgen calc.json program.calc --keep-going

JSON Lines output, written to a file:
    $ lexgen calc.json program.calc --format json -o tokens.jsonl

Verbose mode (locations and debug logging):
    $ lexgen -v calc.json program.calc

Output Format
-------------
Text output prints each token as type(value), for example:

    number(123)
    add(+)
    number(456)
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lexgen import __version__
from lexgen.cli.errors import ExitCode, handle_cli_exception
from lexgen.config import ScannerConfig, get_default_config
from lexgen.errors import EndOfFile, UnrecognizedPattern
from lexgen.ruleset import load_rules
from lexgen.scanner import Scanner, Token

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def format_token(token: Token, output_format: str, verbose: bool) -> str:
    """Render a token for output."""
    if output_format == "json":
        return json.dumps({
            "type": token.token_type,
            "value": token.value,
            "line": token.line,
            "column": token.column,
        })
    if verbose:
        return f"{token.location}: {token}"
    return str(token)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rules_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-f", "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format: type(value) lines or JSON Lines. Default: text",
)
@click.option(
    "-k", "--keep-going",
    is_flag=True,
    help="Report unrecognized characters and continue scanning",
)
@click.option(
    "--first-line",
    type=int,
    default=None,
    help="Number of the first source line (default: 1, or LEXGEN_FIRST_LINE)",
)
@click.option(
    "-i", "--ignore-case",
    is_flag=True,
    help="Match all rules case-insensitively",
)
@click.option(
    "-m", "--multiline",
    is_flag=True,
    help="Let ^ and $ in patterns match at line boundaries",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lexgen")
def main(
    rules_file: Path,
    source_file: Path,
    output: Optional[Path],
    output_format: str,
    keep_going: bool,
    first_line: Optional[int],
    ignore_case: bool,
    multiline: bool,
    verbose: bool,
) -> None:
    """
    Tokenize SOURCE_FILE using the rule set in RULES_FILE.

    RULES_FILE is a JSON document with "whitespace" and any of "rules",
    "keywords", "operators" and "literal_regex".

    Examples:

        # Print tokens
        lexgen calc.json program.calc

        # Skip over characters no rule matches
        lexgen calc.json program.calc --keep-going
    """
    setup_logging(verbose)
    output_format = output_format.lower()

    defaults = get_default_config()
    config = ScannerConfig(
        first_line=first_line if first_line is not None else defaults.first_line,
        ignore_case=ignore_case or defaults.ignore_case,
        multiline=multiline or defaults.multiline,
        filename=str(source_file),
    )

    try:
        table = load_rules(rules_file).compile(flags=config.regex_flags)
        source = source_file.read_text(encoding="utf-8")
    except Exception as e:
        handle_cli_exception(e, verbose)

    logger.debug(f"Rules: {', '.join(table.names)}")
    logger.debug(f"Source: {source_file} ({len(source)} characters)")

    scanner = Scanner(source, table, config=config)
    output_lines = []
    error_count = 0
    fatal: Optional[UnrecognizedPattern] = None

    while True:
        result = scanner.next_result()

        if isinstance(result, EndOfFile):
            break

        if isinstance(result, UnrecognizedPattern):
            if not keep_going:
                fatal = result
                break
            click.echo(str(result), err=True)
            error_count += 1
            continue

        output_lines.append(format_token(result, output_format, verbose))

    # Tokens scanned before a fatal error are still written
    text = "".join(f"{line}\n" for line in output_lines)
    if output:
        try:
            output.write_text(text, encoding="utf-8")
        except IOError as e:
            handle_cli_exception(e, verbose)
    else:
        click.echo(text, nl=False)

    if fatal is not None:
        handle_cli_exception(fatal, verbose)

    if verbose:
        click.echo(f"Tokens: {len(output_lines)}, errors: {error_count}", err=True)
        if output:
            click.echo(f"Output written to: {output}", err=True)

    if error_count:
        sys.exit(ExitCode.LEX_ERROR)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
