#!/usr/bin/env python3
"""
lexgen Calculator Demo
======================

This script demonstrates how a hand-written parser consumes lexgen:
1. Load a JSON rule set
2. Scan a source file one token at a time
3. Use peek() to decide, advance() to consume
4. Report unrecognized input with its location

Usage:
    python examples/calculator.py
    python examples/calculator.py examples/calc.json examples/program.calc
"""

import sys
from pathlib import Path

from lexgen import EndOfFile, ParsingError, Scanner, ScannerConfig, load_rules

HERE = Path(__file__).parent


class Calculator:
    """Recursive-descent evaluator for + - * / and parentheses."""

    def __init__(self, scanner: Scanner):
        self.scanner = scanner

    def _peek_type(self):
        try:
            return self.scanner.peek().token_type
        except EndOfFile:
            return None

    def expression(self):
        value = self.term()
        while self._peek_type() in ("add", "subtract"):
            operator = self.scanner.advance()
            operand = self.term()
            value = value + operand if operator.is_type("add") else value - operand
        return value

    def term(self):
        value = self.factor()
        while self._peek_type() in ("multiply", "divide"):
            operator = self.scanner.advance()
            operand = self.factor()
            value = value * operand if operator.is_type("multiply") else value / operand
        return value

    def factor(self):
        token = self.scanner.advance()
        if token.is_type("number"):
            return int(token.value)
        if token.is_type("lparen"):
            value = self.expression()
            closing = self.scanner.advance()
            if not closing.is_type("rparen"):
                raise SyntaxError(f"{closing.location}: expected ')', got {closing}")
            return value
        raise SyntaxError(f"{token.location}: unexpected {token}")

    def evaluate(self):
        """Evaluate one whole expression; trailing tokens are an error."""
        value = self.expression()
        trailing = self.scanner.peek_result()
        if not isinstance(trailing, EndOfFile):
            if isinstance(trailing, ParsingError):
                raise trailing
            raise SyntaxError(f"{trailing.location}: unexpected {trailing}")
        return value


def main():
    rules_path = Path(sys.argv[1]) if len(sys.argv) > 1 else HERE / "calc.json"
    source_path = Path(sys.argv[2]) if len(sys.argv) > 2 else HERE / "program.calc"

    rules = load_rules(rules_path).compile()

    # ==========================================================================
    # Evaluate one expression per line
    # ==========================================================================
    for number, line in enumerate(source_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        config = ScannerConfig(first_line=number, filename=source_path.name)
        scanner = Scanner(line, rules, config=config)
        try:
            print(f"{line} = {Calculator(scanner).evaluate()}")
        except (ParsingError, SyntaxError) as e:
            print(e, file=sys.stderr)


if __name__ == "__main__":
    main()
