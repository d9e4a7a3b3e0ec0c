# =============================================================================
# conftest.py - Shared Fixtures
# =============================================================================
# Rule tables used across the scanner, loader and CLI tests, plus isolation
# of the process-wide default configuration from LEXGEN_* variables.
# =============================================================================

import json

import pytest

from lexgen.config import ScannerConfig, set_default_config
from lexgen.rules import compile_rules


CALCULATOR_RULES = {
    "number": "[0-9]+",
    "add": r"\+",
    "subtract": "-",
    "multiply": r"\*",
    "divide": "/",
}


@pytest.fixture(autouse=True)
def default_config():
    """Give every test a fresh default configuration."""
    config = ScannerConfig()
    set_default_config(config)
    yield config
    set_default_config(None)


@pytest.fixture
def calculator():
    """Arithmetic rule table with whitespace including newlines."""
    return compile_rules(CALCULATOR_RULES, r"[ \t\r\n]+")


@pytest.fixture
def language():
    """A small language: keyword, identifier, number, operators."""
    return compile_rules(
        {
            "keyword": "let|if|else",
            "identifier": "[A-Za-z_][A-Za-z0-9_]*",
            "number": "[0-9]+",
            "assign": "=",
            "equals": "==",
            "lparen": r"\(",
            "rparen": r"\)",
        },
        r"\s+",
    )


@pytest.fixture
def rules_file(tmp_path):
    """A JSON rule-set file for the calculator using operator and rule sections."""
    path = tmp_path / "calc.json"
    path.write_text(json.dumps({
        "keywords": [],
        "operators": {"+": "add", "-": "subtract", "/": "divide", "*": "multiply"},
        "rules": {"number": "[0-9]+"},
        "whitespace": "[ \\t\\r\\n]+",
    }), encoding="utf-8")
    return path
