"""
Rule-Set Loader
===============

Reads a rule specification from JSON and turns it into the ordered
name-to-pattern mapping that compile_rules() expects.

Document Format
---------------
::

    {
        "keywords": ["let", "if", "else"],
        "operators": {"+": "add", "-": "subtract", "==": "equals"},
        "rules": {
            "number": "[0-9]+",
            "identifier": "[A-Za-z_][A-Za-z0-9_]*"
        },
        "whitespace": "[ \\t\\r\\n]+"
    }

Only "whitespace" is required.

- "rules" maps token-type names to patterns. Order is kept.
- "keywords" is a list of words. They become one rule named "keyword"
  that matches any of them literally.
- "operators" maps an operator's literal text to its token-type name.
  Literals sharing a name become one rule matching any of them.
- "literal_regex" maps a token-type name to a [start, halt] pair. The
  literal begins with a match of start and runs until halt matches at
  the next character, e.g. {"number": ["[0-9]", "[^0-9]"]}. The pair
  becomes the pattern (?:start)(?:(?!halt)[\\s\\S])*. Nested classes
  such as [^[0-9]] are read as [^0-9].

Keyword, operator and literal_regex rules are declared, in that order,
ahead of "rules". Since equal match lengths go to the rule declared
first, "let" is a keyword while "letter" (a longer identifier match) is
still an identifier.

Example
-------
>>> spec = rules_from_json('{"rules": {"n": "[0-9]+"}, "whitespace": " +"}')
>>> spec.rules
{'n': '[0-9]+'}
>>> table = spec.compile()
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
import json
import logging
import re

from lexgen.errors import RuleSetFormatError
from lexgen.rules import RuleTable, compile_rules

logger = logging.getLogger(__name__)

KEYWORD_RULE = "keyword"

KNOWN_SECTIONS = ("keywords", "operators", "literal_regex", "rules", "whitespace")

# "[^[0-9]]" style nested classes, written for engines that nest them
_NESTED_CLASS = re.compile(r"\[(\^?)\[([^\[\]]*)\]\]")


# =============================================================================
# Rule Specification
# =============================================================================

@dataclass(frozen=True)
class RuleSpec:
    """
    An uncompiled rule specification.

    Attributes:
        rules: Token-type name to pattern, in declaration order
        whitespace: Pattern for skipped characters
    """
    rules: dict[str, str] = field(default_factory=dict)
    whitespace: str = r"\s+"

    def compile(self, flags: Optional[int] = None) -> RuleTable:
        """Compile into a RuleTable (see compile_rules)."""
        return compile_rules(self.rules, self.whitespace, flags=flags)


# =============================================================================
# Section Conversion
# =============================================================================

def _literal_alternation(literals: list[str]) -> str:
    """A pattern matching any of literals, longest alternative first."""
    ordered = sorted(set(literals), key=lambda s: (-len(s), s))
    if len(ordered) == 1:
        return re.escape(ordered[0])
    return "(?:" + "|".join(re.escape(s) for s in ordered) + ")"


def _keyword_rules(keywords: Any, path: Optional[Path]) -> dict[str, str]:
    if not isinstance(keywords, list) or not all(isinstance(k, str) and k for k in keywords):
        raise RuleSetFormatError("'keywords' must be a list of non-empty strings", path)
    if not keywords:
        return {}
    return {KEYWORD_RULE: _literal_alternation(keywords)}


def _operator_rules(operators: Any, path: Optional[Path]) -> dict[str, str]:
    if not isinstance(operators, dict):
        raise RuleSetFormatError("'operators' must be an object mapping operator text to a name", path)

    by_name: dict[str, list[str]] = {}
    for literal, name in operators.items():
        if not literal:
            raise RuleSetFormatError("operator text must not be empty", path)
        if not isinstance(name, str) or not name:
            raise RuleSetFormatError(f"operator {literal!r} must map to a non-empty name", path)
        by_name.setdefault(name, []).append(literal)

    return {name: _literal_alternation(literals) for name, literals in by_name.items()}


def _flatten_nested_classes(pattern: str) -> str:
    return _NESTED_CLASS.sub(r"[\1\2]", pattern)


def _literal_regex_rules(literals: Any, path: Optional[Path]) -> dict[str, str]:
    """
    Turn name -> [start, halt] pairs into single anchored patterns.

    A literal opens with a match of start and then extends one character
    at a time until halt would match at the next position (or the input
    ends).
    """
    if not isinstance(literals, dict):
        raise RuleSetFormatError("'literal_regex' must be an object mapping names to [start, halt]", path)

    rules = {}
    for name, pair in literals.items():
        if (not isinstance(pair, list) or len(pair) != 2
                or not all(isinstance(p, str) and p for p in pair)):
            raise RuleSetFormatError(
                f"literal_regex '{name}' must be a [start, halt] pair of non-empty patterns", path
            )
        start, halt = (_flatten_nested_classes(p) for p in pair)
        rules[name] = rf"(?:{start})(?:(?!{halt})[\s\S])*"
    return rules


def _pattern_rules(rules: Any, path: Optional[Path]) -> dict[str, str]:
    if not isinstance(rules, dict):
        raise RuleSetFormatError("'rules' must be an object mapping names to patterns", path)
    for name, pattern in rules.items():
        if not isinstance(pattern, str):
            raise RuleSetFormatError(f"pattern for rule '{name}' must be a string", path)
    return dict(rules)


def _merge(target: dict[str, str], section: str, rules: dict[str, str], path: Optional[Path]) -> None:
    for name, pattern in rules.items():
        if name in target:
            raise RuleSetFormatError(f"token type '{name}' in '{section}' is already defined", path)
        target[name] = pattern


# =============================================================================
# Loaders
# =============================================================================

def rules_from_dict(data: Any, path: Optional[Path] = None) -> RuleSpec:
    """
    Build a RuleSpec from an already-parsed document.

    Args:
        data: The parsed JSON document
        path: Originating file, used in error messages

    Raises:
        RuleSetFormatError: If the document has the wrong shape
    """
    if not isinstance(data, dict):
        raise RuleSetFormatError("rule set must be a JSON object", path)

    unknown = [key for key in data if key not in KNOWN_SECTIONS]
    if unknown:
        logger.warning(f"Ignoring unknown rule-set sections: {', '.join(sorted(unknown))}")

    if "whitespace" not in data:
        raise RuleSetFormatError("missing required 'whitespace' pattern", path)
    whitespace = data["whitespace"]
    if not isinstance(whitespace, str):
        raise RuleSetFormatError("'whitespace' must be a string", path)

    merged: dict[str, str] = {}
    _merge(merged, "keywords", _keyword_rules(data.get("keywords", []), path), path)
    _merge(merged, "operators", _operator_rules(data.get("operators", {}), path), path)
    _merge(merged, "literal_regex", _literal_regex_rules(data.get("literal_regex", {}), path), path)
    _merge(merged, "rules", _pattern_rules(data.get("rules", {}), path), path)

    if not merged:
        logger.warning("Rule set defines no token types; every character will be unrecognized")

    logger.debug(f"Loaded {len(merged)} rules{f' from {path}' if path else ''}")
    return RuleSpec(rules=merged, whitespace=whitespace)


def rules_from_json(text: str, path: Optional[Path] = None) -> RuleSpec:
    """
    Parse a JSON rule-set document.

    Raises:
        RuleSetFormatError: For invalid JSON or a malformed document
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RuleSetFormatError(f"invalid JSON: {e}", path) from e
    return rules_from_dict(data, path)


def load_rules(path: Union[str, Path]) -> RuleSpec:
    """
    Load a JSON rule-set file.

    Raises:
        FileNotFoundError: If the file does not exist
        RuleSetFormatError: For invalid JSON or a malformed document
    """
    path = Path(path)
    return rules_from_json(path.read_text(encoding="utf-8"), path)
