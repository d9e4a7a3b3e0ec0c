"""
Rule Table Compiler
===================

Turns a declarative rule specification into a compiled, immutable
RuleTable. A specification is an ordered mapping of token-type name to
pattern string plus one whitespace pattern.

Patterns use the dialect of Python's re module. Each rule is compiled
separately and matched with Pattern.match(text, pos), which anchors the
match at the scan position: a rule never skips ahead to find a match
later in the text.

Longest Match
-------------
RuleTable.match_next() tries every rule at the same position and picks
the one with the longest match. When two rules match the same length,
the one declared first wins. Declaration order is the order of the
mapping (or pair sequence) handed to compile_rules().

>>> table = compile_rules({"eq": "=", "eqeq": "=="}, r"\\s+")
>>> table.match_next("== 1")
('eqeq', 2)

Example
-------
>>> table = compile_rules(
...     {"keyword": "let", "identifier": "[a-z]+", "number": "[0-9]+"},
...     r"\\s+",
... )
>>> table.match_next("letter")
('identifier', 6)
>>> table.match_next("let x")
('keyword', 3)
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union
import logging
import re

from lexgen.config import get_default_config
from lexgen.errors import RuleCompilationError

logger = logging.getLogger(__name__)

RawRules = Union[Mapping[str, str], Iterable[tuple[str, str]]]

WHITESPACE_RULE = "whitespace"


# =============================================================================
# Compiled Rule
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """
    A named pattern associated with a token type.

    Attributes:
        name: The token type produced when this rule wins
        pattern: The pattern source string
        regex: The compiled pattern
    """
    name: str
    pattern: str
    regex: re.Pattern

    def match_length(self, text: str, pos: int = 0) -> Optional[int]:
        """
        Length of this rule's match anchored at pos.

        Returns None when the rule does not match at pos. An empty match
        counts as no match, so a pattern like "a*" cannot stall a scan.
        """
        match = self.regex.match(text, pos)
        if match is None or match.end() == pos:
            return None
        return match.end() - pos


# =============================================================================
# Rule Table
# =============================================================================

@dataclass(frozen=True)
class RuleTable:
    """
    The compiled, immutable collection of rules plus the whitespace pattern.

    A RuleTable is never mutated after compile_rules() returns it, so one
    table can serve any number of scanners, including scanners running
    in different threads.

    Attributes:
        rules: Rules in declaration order
        whitespace: Compiled whitespace pattern
    """
    rules: tuple[Rule, ...]
    whitespace: re.Pattern

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self.rules)

    @property
    def names(self) -> tuple[str, ...]:
        """Token-type names in declaration order."""
        return tuple(rule.name for rule in self.rules)

    def get(self, name: str) -> Optional[Rule]:
        """Look up a rule by token-type name."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def whitespace_length(self, text: str, pos: int = 0) -> int:
        """Number of whitespace characters starting at pos (0 if none)."""
        match = self.whitespace.match(text, pos)
        if match is None:
            return 0
        return match.end() - pos

    def match_next(self, text: str, pos: int = 0) -> Optional[tuple[str, int]]:
        """
        Find the longest anchored match among all rules.

        Args:
            text: The source text
            pos: Offset at which every match must start

        Returns:
            (rule_name, length) of the winning rule, or None if no rule
            matches at pos. Equal lengths go to the rule declared first.
        """
        best_name: Optional[str] = None
        best_length = 0

        for rule in self.rules:
            length = rule.match_length(text, pos)
            # Strictly greater: the first rule declared keeps a tie
            if length is not None and length > best_length:
                best_name = rule.name
                best_length = length

        if best_name is None:
            return None
        return best_name, best_length


# =============================================================================
# Compiler
# =============================================================================

def _compile_pattern(name: str, pattern: str, flags: int) -> re.Pattern:
    if not isinstance(pattern, str):
        raise RuleCompilationError(name, reason=f"pattern must be a string, got {type(pattern).__name__}")
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise RuleCompilationError(name, pattern, str(e)) from e


def _ordered_rules(raw_rules: RawRules) -> dict[str, str]:
    """Collect rules into an insertion-ordered dict (later duplicates overwrite)."""
    items = raw_rules.items() if isinstance(raw_rules, Mapping) else raw_rules

    ordered: dict[str, str] = {}
    for name, pattern in items:
        if not isinstance(name, str) or not name:
            raise RuleCompilationError(repr(name), reason="rule name must be a non-empty string")
        if name in ordered:
            logger.debug(f"Rule '{name}' redefined; {pattern!r} replaces {ordered[name]!r}")
        ordered[name] = pattern
    return ordered


def compile_rules(
    raw_rules: RawRules,
    whitespace: str,
    *,
    flags: Optional[int] = None,
) -> RuleTable:
    """
    Compile a rule specification into a RuleTable.

    Args:
        raw_rules: Mapping of token-type name to pattern, or an iterable
            of (name, pattern) pairs. Order is preserved and decides ties.
            A name given twice keeps its first position and its last
            pattern.
        whitespace: Pattern for the characters skipped between tokens
        flags: re flags applied to every pattern (default: taken from
            the default ScannerConfig)

    Returns:
        The compiled RuleTable

    Raises:
        RuleCompilationError: If any pattern (or the whitespace pattern)
            fails to compile, or a rule name is not a non-empty string
    """
    if flags is None:
        flags = get_default_config().regex_flags

    ordered = _ordered_rules(raw_rules)

    rules = tuple(
        Rule(name, pattern, _compile_pattern(name, pattern, flags))
        for name, pattern in ordered.items()
    )
    whitespace_regex = _compile_pattern(WHITESPACE_RULE, whitespace, flags)

    logger.debug(f"Compiled rule table with {len(rules)} rules: {', '.join(r.name for r in rules)}")
    return RuleTable(rules=rules, whitespace=whitespace_regex)
