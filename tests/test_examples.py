# =============================================================================
# test_examples.py - Example Script Tests
# =============================================================================
# Runs the calculator demo in examples/ against the bundled rule set.
# =============================================================================

import importlib.util
import sys
from pathlib import Path

import pytest

from lexgen.errors import UnrecognizedPattern
from lexgen.ruleset import load_rules
from lexgen.scanner import Scanner

EXAMPLES = Path(__file__).parent.parent / "examples"


@pytest.fixture(scope="module")
def calculator_module():
    spec = importlib.util.spec_from_file_location("calculator_demo", EXAMPLES / "calculator.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def evaluate(calculator_module):
    rules = load_rules(EXAMPLES / "calc.json").compile()

    def run(line: str):
        return calculator_module.Calculator(Scanner(line, rules)).evaluate()
    return run


class TestCalculator:
    """Test the recursive-descent calculator demo."""

    def test_precedence(self, evaluate):
        assert evaluate("1 + 2 * 3") == 7

    def test_parentheses(self, evaluate):
        assert evaluate("(10 - 4) / 2") == 3

    def test_trailing_token_rejected(self, evaluate):
        """A complete expression followed by more input is an error."""
        with pytest.raises(SyntaxError) as exc_info:
            evaluate("1 2")
        assert "unexpected number(2)" in str(exc_info.value)

    def test_trailing_paren_rejected(self, evaluate):
        with pytest.raises(SyntaxError):
            evaluate("1 + 2 )")

    def test_trailing_unrecognized_rejected(self, evaluate):
        with pytest.raises(UnrecognizedPattern):
            evaluate("1 #")

    def test_main_reports_trailing_input(self, calculator_module, tmp_path, monkeypatch, capsys):
        source = tmp_path / "program.calc"
        source.write_text("1 + 2\n3 4\n", encoding="utf-8")
        monkeypatch.setattr(sys, "argv", ["calculator.py", str(EXAMPLES / "calc.json"), str(source)])
        calculator_module.main()
        captured = capsys.readouterr()
        assert captured.out == "1 + 2 = 3\n"
        assert "program.calc:2:3: unexpected number(4)" in captured.err
