"""
Scanner
=======

This module implements the incremental scanner. It walks a source
string with a cursor, skipping whitespace and producing one classified
token per call using the longest-match policy of a compiled RuleTable.

Scan Results
------------
Every scan step produces exactly one result:

- a Token, when some rule matched at the cursor;
- UnrecognizedPattern, when no rule matched. The single offending
  character is consumed, so the next step resumes right after it;
- EndOfFile, when only whitespace (or nothing) is left.

advance() and peek() raise the two error results; next_result() returns
them as values instead.

Lookahead
---------
The scanner caches at most one result. peek() fills the cache (or
reuses it), advance() drains it. The cursor moves when a result is
produced, not when it is drained, so remaining and done() reflect the
peeked token as already consumed.

    HAS_LOOKAHEAD --advance--> NO_LOOKAHEAD   emit and clear cached result
    NO_LOOKAHEAD  --advance--> NO_LOOKAHEAD   scan and emit
    NO_LOOKAHEAD  --peek-->    HAS_LOOKAHEAD  scan, cache and emit
    HAS_LOOKAHEAD --peek-->    HAS_LOOKAHEAD  emit cached result

Line Numbers
------------
Lines are 1-indexed by default (see ScannerConfig.first_line). A token
reports the line and column where its lexeme starts.

Example
-------
>>> from lexgen.rules import compile_rules
>>> rules = compile_rules({"number": "[0-9]+", "add": r"\\+"}, r"\\s+")
>>> scanner = Scanner("1 + 2", rules)
>>> for token in scanner:
...     print(token)
number(1)
add(+)
number(2)
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Union
import copy
import logging

from lexgen.config import ScannerConfig, get_default_config
from lexgen.errors import (
    EndOfFile,
    ParsingError,
    SourceLocation,
    UnrecognizedPattern,
)
from lexgen.rules import RuleTable

logger = logging.getLogger(__name__)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single classified lexeme.

    Tokens own a copy of their text and never refer back to the scanner,
    so they can be stored and shared freely.

    Attributes:
        token_type: Name of the rule that matched
        value: The exact substring consumed
        line: Line where the lexeme starts
        column: Column where the lexeme starts (1-indexed)
        offset: Character offset of the lexeme in the source (0-indexed)
        filename: Name of the source
    """
    token_type: str
    value: str
    line: int
    column: int
    offset: int
    filename: str = "<input>"

    def __str__(self) -> str:
        return f"{self.token_type}({self.value})"

    def __repr__(self) -> str:
        return f"Token({self.token_type}, {self.value!r}, {self.line}:{self.column})"

    def is_type(self, *types: str) -> bool:
        """True if this token's type is any of types."""
        return self.token_type in types

    @property
    def end(self) -> int:
        """Offset just past the lexeme."""
        return self.offset + len(self.value)

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


ScanResult = Union[Token, ParsingError]


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Incremental, single-consumer scanner over one source string.

    The source is never modified: the scanner keeps an offset into it.
    The compiled RuleTable is only read, so several scanners may share
    one table.

    Usage:
        scanner = Scanner(source, rules)
        while not scanner.done():
            token = scanner.advance()

    Attributes:
        filename: Name reported in token locations and errors
        errors: UnrecognizedPattern results skipped by tokenize(skip_errors=True)
    """

    def __init__(
        self,
        source: str,
        rules: RuleTable,
        filename: Optional[str] = None,
        config: Optional[ScannerConfig] = None,
    ):
        """
        Initialize the scanner.

        Args:
            source: The complete source text
            rules: Compiled rule table
            filename: Source name for locations (default: config.filename)
            config: Scanner configuration (default: the default config)
        """
        if config is None:
            config = get_default_config()

        self._source = source
        self._rules = rules
        self.filename = filename if filename is not None else config.filename

        # Cursor state
        self._pos = 0
        self._line = config.first_line
        self._column = 1
        self._line_start = 0

        # Cursor state before the cached lookahead was scanned
        self._lookahead: Optional[ScanResult] = None
        self._lookahead_mark: Optional[tuple[int, int, int, int]] = None

        self._last: Optional[ScanResult] = None
        self.errors: list[UnrecognizedPattern] = []

    def __repr__(self) -> str:
        return f"Scanner({self.filename!r}, {self._line}:{self._column}, remaining={len(self._source) - self._pos})"

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def source(self) -> str:
        return self._source

    @property
    def rules(self) -> RuleTable:
        return self._rules

    @property
    def position(self) -> int:
        """Offset of the first unconsumed character."""
        return self._pos

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def remaining(self) -> str:
        """The unconsumed suffix of the source."""
        return self._source[self._pos:]

    def done(self) -> bool:
        """
        True once every character of the source has been consumed.

        The lookahead cache is not consulted: a cached EndOfFile is still
        returned by the next advance().
        """
        return self._pos >= len(self._source)

    def current(self) -> Optional[ScanResult]:
        """The most recently produced result (by advance() or peek()), or None."""
        return self._last

    # =========================================================================
    # Consumer Interface
    # =========================================================================

    def next_result(self) -> ScanResult:
        """
        Produce the next result without raising.

        Drains the lookahead cache if it holds a result, otherwise scans.

        Returns:
            A Token, UnrecognizedPattern or EndOfFile
        """
        if self._lookahead is not None:
            result = self._lookahead
            self._lookahead = None
            self._lookahead_mark = None
        else:
            result = self._scan()

        self._last = result
        return result

    def advance(self) -> Token:
        """
        Advance to and return the next token.

        Raises:
            EndOfFile: If no input is left
            UnrecognizedPattern: If no rule matched (the offending
                character has been consumed)
        """
        result = self.next_result()
        if isinstance(result, ParsingError):
            # A cached error is raised again; drop the frames of earlier raises
            raise result.with_traceback(None)
        return result

    def peek_result(self) -> ScanResult:
        """Like peek(), but returns error results instead of raising them."""
        if self._lookahead is None:
            self._lookahead_mark = self._mark()
            self._lookahead = self._scan()
        self._last = self._lookahead
        return self._lookahead

    def peek(self) -> Token:
        """
        Return the next token without handing it over.

        Repeated calls return the same result until the next advance().
        The peeked result also becomes current().

        Raises:
            EndOfFile: If no input is left
            UnrecognizedPattern: If no rule matched
        """
        result = self.peek_result()
        if isinstance(result, ParsingError):
            # A cached error is raised again; drop the frames of earlier raises
            raise result.with_traceback(None)
        return result

    def tokenize(self, skip_errors: bool = False) -> Iterator[Token]:
        """
        Generate tokens until the end of the source.

        Args:
            skip_errors: Log and collect UnrecognizedPattern results in
                self.errors instead of raising them

        Yields:
            Token objects in source order

        Raises:
            UnrecognizedPattern: On unmatched input, unless skip_errors
        """
        while True:
            result = self.next_result()

            if isinstance(result, EndOfFile):
                return

            if isinstance(result, UnrecognizedPattern):
                if not skip_errors:
                    raise result
                logger.warning(str(result))
                self.errors.append(result)
                continue

            yield result

    def __iter__(self) -> Iterator[Token]:
        return self.tokenize()

    def fork(self) -> "Scanner":
        """
        Create an independent scanner at the consumer's current position.

        The fork shares the source and rule table. If a lookahead is
        cached, the fork starts before it, so it will scan that token
        again itself.
        """
        clone = copy.copy(self)
        if self._lookahead_mark is not None:
            clone._restore(self._lookahead_mark)
        clone._lookahead = None
        clone._lookahead_mark = None
        clone._last = None
        clone.errors = []
        return clone

    # =========================================================================
    # Cursor Movement
    # =========================================================================

    def _mark(self) -> tuple[int, int, int, int]:
        return (self._pos, self._line, self._column, self._line_start)

    def _restore(self, mark: tuple[int, int, int, int]) -> None:
        self._pos, self._line, self._column, self._line_start = mark

    def _consume(self, length: int) -> str:
        """Consume length characters, updating line and column tracking."""
        start = self._pos
        text = self._source[start:start + length]
        self._pos = start + len(text)

        newlines = text.count("\n")
        if newlines:
            last_newline = text.rfind("\n")
            self._line += newlines
            self._line_start = start + last_newline + 1
            self._column = len(text) - last_newline
        else:
            self._column += len(text)

        return text

    def _skip_whitespace(self) -> None:
        """Consume whitespace until the whitespace pattern stops matching."""
        while True:
            length = self._rules.whitespace_length(self._source, self._pos)
            if length == 0:
                return
            self._consume(length)

    # =========================================================================
    # Matching
    # =========================================================================

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column)

    def _current_line_text(self) -> str:
        line_end = self._source.find("\n", self._line_start)
        if line_end == -1:
            line_end = len(self._source)
        return self._source[self._line_start:line_end]

    def _scan(self) -> ScanResult:
        """
        Skip whitespace and resolve the longest match at the cursor.

        This is the only place the cursor moves forward.
        """
        self._skip_whitespace()

        if self.done():
            return EndOfFile(self._location())

        location = self._location()
        offset = self._pos
        found = self._rules.match_next(self._source, offset)

        if found is None:
            source_line = self._current_line_text()
            character = self._consume(1)
            logger.debug(f"{location}: unrecognized {character!r}")
            return UnrecognizedPattern(character, location, source_line)

        token_type, length = found
        value = self._consume(length)
        token = Token(
            token_type=token_type,
            value=value,
            line=location.line,
            column=location.column,
            offset=offset,
            filename=self.filename,
        )
        logger.debug(f"{location}: {token}")
        return token


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(
    source: str,
    rules: RuleTable,
    filename: Optional[str] = None,
    config: Optional[ScannerConfig] = None,
    skip_errors: bool = False,
) -> list[Token]:
    """
    Tokenize a whole source string.

    Args:
        source: The source text
        rules: Compiled rule table
        filename: Source name for locations
        config: Scanner configuration
        skip_errors: Skip unrecognized characters instead of raising

    Returns:
        All tokens in source order

    Raises:
        UnrecognizedPattern: On unmatched input, unless skip_errors
    """
    scanner = Scanner(source, rules, filename=filename, config=config)
    return list(scanner.tokenize(skip_errors=skip_errors))
