"""
Tests for the command line entry point.
"""
import io
import sys

import pytest

from sqlgutter.main import EXIT_CHECK_FAILED, EXIT_OK, EXIT_PARSE_ERROR, main


FORMATTED = "SELECT a\n  FROM t;\n"


@pytest.fixture
def config_args(preferences_file):
    """Point the command line at a temporary preferences file."""
    return ["--config", str(preferences_file)]


class TestPrint:
    """Test printing to standard output."""

    def test_formats_file(self, tmp_path, config_args, capsys):
        """Test that the formatted file is printed."""
        path = tmp_path / "q.sql"
        path.write_text("select a from t", encoding="utf-8")
        assert main([str(path)] + config_args) == EXIT_OK
        assert capsys.readouterr().out == FORMATTED

    def test_reads_stdin(self, monkeypatch, config_args, capsys):
        """Test '-' and the default input."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("select a from t"))
        assert main(config_args) == EXIT_OK
        assert capsys.readouterr().out == FORMATTED

    def test_keyword_case_option(self, tmp_path, config_args, capsys):
        """Test --keyword-case lower and --no-terminator."""
        path = tmp_path / "q.sql"
        path.write_text("select a from t", encoding="utf-8")
        assert main([str(path), "--keyword-case", "lower", "--no-terminator"] + config_args) == EXIT_OK
        assert capsys.readouterr().out == "select a\n  from t\n"


class TestCheckAndInPlace:
    """Test --check and --in-place."""

    def test_check_reports_unformatted(self, tmp_path, config_args, capsys):
        """Test exit code 1 and the file name on stderr."""
        path = tmp_path / "q.sql"
        path.write_text("select a from t", encoding="utf-8")
        assert main(["--check", str(path)] + config_args) == EXIT_CHECK_FAILED
        assert "would reformat" in capsys.readouterr().err
        assert path.read_text(encoding="utf-8") == "select a from t"

    def test_check_passes_on_formatted(self, tmp_path, config_args):
        """Test exit code 0 for formatted input."""
        path = tmp_path / "q.sql"
        path.write_text(FORMATTED, encoding="utf-8")
        assert main(["--check", str(path)] + config_args) == EXIT_OK

    def test_in_place_rewrites(self, tmp_path, config_args, capsys):
        """Test that --in-place writes the result and prints nothing."""
        path = tmp_path / "q.sql"
        path.write_text("select a from t", encoding="utf-8")
        assert main(["-i", str(path)] + config_args) == EXIT_OK
        assert path.read_text(encoding="utf-8") == FORMATTED
        assert capsys.readouterr().out == ""

    def test_in_place_rejects_stdin(self, config_args):
        """Test that --in-place needs file arguments."""
        with pytest.raises(SystemExit):
            main(["-i", "-"] + config_args)


class TestErrors:
    """Test error exit codes."""

    def test_parse_error(self, tmp_path, config_args, capsys):
        """Test exit code 2 and a readable message."""
        path = tmp_path / "bad.sql"
        path.write_text("select (1 from t", encoding="utf-8")
        assert main([str(path)] + config_args) == EXIT_PARSE_ERROR
        err = capsys.readouterr().err
        assert "bad.sql" in err
        assert "Unbalanced parentheses" in err

    def test_missing_file(self, tmp_path, config_args, capsys):
        """Test that unreadable files are reported and skipped."""
        missing = tmp_path / "missing.sql"
        good = tmp_path / "good.sql"
        good.write_text("select a from t", encoding="utf-8")
        assert main([str(missing), str(good)] + config_args) == EXIT_PARSE_ERROR
        captured = capsys.readouterr()
        assert "missing.sql" in captured.err
        assert captured.out == FORMATTED
