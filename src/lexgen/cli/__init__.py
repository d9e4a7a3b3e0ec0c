"""
lexgen Command-Line Interface
=============================

This package provides the command-line driver:

- **lexgen**: tokenize a source file with a JSON rule set

The tool is a Click-based CLI application with help text and the
shared exit codes from lexgen.cli.errors.
"""

__all__ = ["lex"]
