"""Tests for the logging_utils module."""
import pytest
from stream_captions.logging_utils import log, warn, die, trace, format_duration


class TestLog:
    """Tests for log function."""

    def test_log_output(self, capsys):
        """Test that log outputs to stdout."""
        log("test message", quiet=False)
        captured = capsys.readouterr()
        assert "test message" in captured.out

    def test_log_quiet_mode(self, capsys):
        """Test that log respects quiet mode."""
        log("test message", quiet=True)
        captured = capsys.readouterr()
        assert captured.out == ""


class TestWarn:
    """Tests for warn function."""

    def test_warn_output(self, capsys):
        """Test that warn outputs to stderr with WARNING prefix."""
        warn("test warning", quiet=False)
        captured = capsys.readouterr()
        assert "WARNING: test warning" in captured.err

    def test_warn_quiet_mode(self, capsys):
        """Test that warn respects quiet mode."""
        warn("test warning", quiet=True)
        captured = capsys.readouterr()
        assert captured.err == ""


class TestDie:
    """Tests for die function."""

    def test_die_output(self, capsys):
        """Test that die outputs to stderr with ERROR prefix."""
        code = die("test error", code=1)
        captured = capsys.readouterr()
        assert "ERROR: test error" in captured.err
        assert code == 1

    def test_die_default_code(self, capsys):
        """Test that die defaults to exit code 1."""
        assert die("test error") == 1

    def test_die_custom_code(self, capsys):
        """Test that die accepts custom exit code."""
        assert die("test error", code=42) == 42


class TestTrace:
    """Tests for trace function."""

    def test_trace_enabled(self, capsys):
        """Test that trace writes to stderr with TRACE prefix."""
        trace("suppressed cue", enabled=True)
        captured = capsys.readouterr()
        assert captured.err == "TRACE: suppressed cue\n"
        assert captured.out == ""

    def test_trace_disabled(self, capsys):
        """Test that trace is silent unless enabled."""
        trace("suppressed cue", enabled=False)
        captured = capsys.readouterr()
        assert captured.err == ""


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_format_duration_seconds(self):
        """Test formatting duration in seconds only."""
        assert format_duration(45) == "0:45"
        assert format_duration(5) == "0:05"

    def test_format_duration_minutes(self):
        """Test formatting duration with minutes."""
        assert format_duration(90) == "1:30"

    def test_format_duration_hours(self):
        """Test formatting duration with hours."""
        assert format_duration(3661) == "1:01:01"

    def test_format_duration_negative(self):
        """Test formatting negative duration (treated as 0)."""
        assert format_duration(-10) == "0:00"

    def test_format_duration_float(self):
        """Test formatting float duration (truncates to int)."""
        assert format_duration(90.9) == "1:30"
