"""
lexgen Error Hierarchy
======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from LexgenError, so callers can catch every
lexer-related failure with a single except clause.

Exception Hierarchy
-------------------
LexgenError (base)
├── RuleCompilationError - a configured pattern does not compile
├── RuleSetFormatError - a rule-set document is malformed
└── ParsingError (per-token scan results)
    ├── EndOfFile - a token was requested past the end of input
    └── UnrecognizedPattern - no rule matched at the current position

Construction-time errors (RuleCompilationError, RuleSetFormatError) are
fatal: no partially built rule table is ever returned. ParsingError
instances are ordinary scan results. The scanner consumes the offending
character before producing UnrecognizedPattern, so a consumer can keep
going after one.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LexgenError(Exception):
    """
    Base exception for all lexgen errors.

        try:
            table = compile_rules(rules, r"\\s+")
        except LexgenError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text, used by tokens and scan errors.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed by default)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Rule Construction Errors
# =============================================================================

class RuleCompilationError(LexgenError):
    """
    A rule pattern failed to compile.

    Raised by compile_rules() while building a RuleTable. The whole table
    fails to build; there is no partial result.

    Attributes:
        rule_name: Name of the offending rule ("whitespace" for the
            whitespace pattern)
        pattern: The pattern source that failed, if any
        reason: The underlying regex engine message, if any
    """

    def __init__(
        self,
        rule_name: str,
        pattern: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.rule_name = rule_name
        self.pattern = pattern
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = f"error: rule '{self.rule_name}' does not compile"
        if self.pattern is not None:
            message += f": {self.pattern!r}"
        if self.reason:
            message += f" ({self.reason})"
        return message


class RuleSetFormatError(LexgenError):
    """
    A rule-set document has the wrong shape.

    Raised by the JSON loader for invalid JSON, missing or mistyped
    sections, and token-type names defined by more than one section.
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        if path is not None:
            super().__init__(f"{path}: error: {message}")
        else:
            super().__init__(f"error: {message}")


# =============================================================================
# Scan Results
# =============================================================================

class ParsingError(LexgenError):
    """
    Base class for unsuccessful scan results.

    The scanner produces these in place of a Token. advance() and peek()
    raise them; Scanner.next_result() returns them as values.

    Attributes:
        message: The error description
        location: Where in the source the condition occurred (optional)
        source_line: The source text of that line, for a caret display
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with location and source context.

        Example output:
            calc.txt:3:5: error: no rule matches '#'
                1 + # 2
                    ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        return "\n".join(parts)


class EndOfFile(ParsingError):
    """
    A token was requested after all input was consumed.

    This is the expected terminal condition of a scan, not a bug.
    Consumers stop iterating when they see it (or when done() is true).
    """

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__("end of file", location)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EndOfFile)

    def __hash__(self) -> int:
        return hash(EndOfFile)


class UnrecognizedPattern(ParsingError):
    """
    No rule matched at the current position.

    Carries exactly one character: the scanner consumes that single
    character so that the next call resumes right after it.

    Attributes:
        character: The offending character
    """

    def __init__(
        self,
        character: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.character = character
        super().__init__(f"no rule matches {character!r}", location, source_line)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnrecognizedPattern):
            return NotImplemented
        return self.character == other.character and self.location == other.location

    def __hash__(self) -> int:
        return hash((UnrecognizedPattern, self.character, self.location))
