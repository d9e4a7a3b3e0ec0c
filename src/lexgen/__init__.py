"""
lexgen - Configurable Rule-Driven Lexical Analyzer
==================================================

This package turns a declarative rule table (named patterns plus a
whitespace pattern) into a scanner that splits source text into
classified tokens. It is meant as the first stage of a hand-built
interpreter or compiler front end.

Main Components
---------------
- **rules**: Rule Table Compiler
    compile_rules() turns name -> pattern mappings into an immutable RuleTable

- **scanner**: Incremental scanner
    Scanner resolves the longest anchored match at each position and
    offers advance/peek/current/done to a parser

- **ruleset**: JSON rule-set loader
    Reads rule tables (including keyword and operator sections) from JSON

- **cli**: Command-line driver (lexgen)

Matching Policy
---------------
Every rule is tried at the current position; the longest match wins and
equal lengths go to the rule declared first. Keywords, operators and
literals are only a naming convention on top of this single policy.

Quick Start
-----------
>>> from lexgen import Scanner, compile_rules
>>> rules = compile_rules(
...     {"number": "[0-9]+", "add": r"\\+", "multiply": r"\\*"},
...     r"\\s+",
... )
>>> scanner = Scanner("123 + 456 * 789", rules)
>>> [str(token) for token in scanner]
['number(123)', 'add(+)', 'number(456)', 'multiply(*)', 'number(789)']

Parser-style use with one token of lookahead:
>>> scanner = Scanner("1 + 2", rules)
>>> scanner.advance().value
'1'
>>> scanner.peek().token_type
'add'
>>> scanner.current().token_type
'add'

Or use the command-line tool:
    $ lexgen calc.json program.calc
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lexgen.config import ScannerConfig, get_default_config, set_default_config
from lexgen.errors import (
    LexgenError,
    SourceLocation,
    RuleCompilationError,
    RuleSetFormatError,
    ParsingError,
    EndOfFile,
    UnrecognizedPattern,
)
from lexgen.rules import Rule, RuleTable, compile_rules
from lexgen.scanner import Scanner, ScanResult, Token, tokenize
from lexgen.ruleset import RuleSpec, load_rules, rules_from_dict, rules_from_json

__all__ = [
    "__version__",
    # Configuration
    "ScannerConfig",
    "get_default_config",
    "set_default_config",
    # Errors
    "LexgenError",
    "SourceLocation",
    "RuleCompilationError",
    "RuleSetFormatError",
    "ParsingError",
    "EndOfFile",
    "UnrecognizedPattern",
    # Rule table
    "Rule",
    "RuleTable",
    "compile_rules",
    # Scanning
    "Scanner",
    "ScanResult",
    "Token",
    "tokenize",
    # Rule-set loading
    "RuleSpec",
    "load_rules",
    "rules_from_dict",
    "rules_from_json",
]
