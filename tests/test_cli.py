# =============================================================================
# test_cli.py - Command-Line Driver Tests
# =============================================================================
# Tests for the lexgen command: output formats, error reporting and exit
# codes.
# =============================================================================

import json

from click.testing import CliRunner

from lexgen.cli.errors import ExitCode
from lexgen.cli.lex import main


def write_source(tmp_path, text: str):
    path = tmp_path / "program.calc"
    path.write_text(text, encoding="utf-8")
    return path


class TestCli:
    """Test the lexgen command."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Tokenize SOURCE_FILE" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "lexgen" in result.output

    def test_cli_text_output(self, tmp_path, rules_file):
        source = write_source(tmp_path, "123 + 456 * 789")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source)])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "number(123)",
            "add(+)",
            "number(456)",
            "multiply(*)",
            "number(789)",
        ]

    def test_cli_json_output(self, tmp_path, rules_file):
        source = write_source(tmp_path, "1\n+ 2")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source), "--format", "json"])
        assert result.exit_code == 0
        records = [json.loads(line) for line in result.stdout.splitlines()]
        assert records == [
            {"type": "number", "value": "1", "line": 1, "column": 1},
            {"type": "add", "value": "+", "line": 2, "column": 1},
            {"type": "number", "value": "2", "line": 2, "column": 3},
        ]

    def test_cli_output_file(self, tmp_path, rules_file):
        source = write_source(tmp_path, "1 - 2")
        output = tmp_path / "tokens.txt"
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source), "-o", str(output)])
        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "number(1)\nsubtract(-)\nnumber(2)\n"

    def test_cli_first_line(self, tmp_path, rules_file):
        source = write_source(tmp_path, "1\n2")
        runner = CliRunner()
        result = runner.invoke(
            main, [str(rules_file), str(source), "--format", "json", "--first-line", "0"]
        )
        assert result.exit_code == 0
        lines = [json.loads(line)["line"] for line in result.stdout.splitlines()]
        assert lines == [0, 1]

    def test_cli_unrecognized_stops(self, tmp_path, rules_file):
        """Without --keep-going the first bad character ends the run."""
        source = write_source(tmp_path, "1 # 2")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert result.stdout == "number(1)\n"
        assert "no rule matches '#'" in result.stderr

    def test_cli_keep_going(self, tmp_path, rules_file):
        source = write_source(tmp_path, "1 # 2")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source), "--keep-going"])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert result.stdout.splitlines() == ["number(1)", "number(2)"]
        assert f"{source}:1:3: error: no rule matches '#'" in result.stderr

    def test_cli_bad_rule_set(self, tmp_path):
        rules = tmp_path / "bad.json"
        rules.write_text("{}", encoding="utf-8")
        source = write_source(tmp_path, "1")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules), str(source)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "whitespace" in result.stderr

    def test_cli_bad_pattern(self, tmp_path):
        rules = tmp_path / "bad.json"
        rules.write_text(json.dumps({"rules": {"broken": "["}, "whitespace": " "}), encoding="utf-8")
        source = write_source(tmp_path, "1")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules), str(source)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "broken" in result.stderr

    def test_cli_missing_file(self, tmp_path, rules_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(tmp_path / "missing.calc")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_undecodable_source(self, tmp_path, rules_file):
        """A source that is not UTF-8 is a usage error, not an internal one."""
        source = tmp_path / "binary.calc"
        source.write_bytes(b"\xff\xfe1")
        runner = CliRunner()
        result = runner.invoke(main, [str(rules_file), str(source)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Error:" in result.stderr
        assert "Internal error" not in result.stderr

    def test_cli_verbose(self, tmp_path, rules_file):
        source = write_source(tmp_path, "7")
        runner = CliRunner()
        result = runner.invoke(main, ["-v", str(rules_file), str(source)])
        assert result.exit_code == 0
        assert result.stdout == f"{source}:1:1: number(7)\n"
        assert "Tokens: 1, errors: 0" in result.stderr
