#!/usr/bin/env python3
"""Logging utilities for Stream Captions.

This module provides logging functions and time formatting helpers used
throughout the application. Caption text itself never goes through these
helpers; it is written by the sinks in output_writers.
"""
from __future__ import annotations

import sys


# ============================================================
# Logging
# ============================================================

def log(msg: str, *, quiet: bool = False) -> None:
    """Print a log message to stdout unless quiet mode is enabled.

    Args:
        msg: Message to log
        quiet: If True, suppress output
    """
    if not quiet:
        print(msg, flush=True)


def warn(msg: str, *, quiet: bool = False) -> None:
    """Print a warning message to stderr unless quiet mode is enabled.

    Args:
        msg: Warning message to display
        quiet: If True, suppress output
    """
    if not quiet:
        print(f"WARNING: {msg}", file=sys.stderr, flush=True)


def die(msg: str, code: int = 1) -> int:
    """Print an error message to stderr and return an exit code.

    Args:
        msg: Error message to display
        code: Exit code to return (default: 1)

    Returns:
        The exit code provided
    """
    print(f"ERROR: {msg}", file=sys.stderr, flush=True)
    return code


def trace(msg: str, *, enabled: bool) -> None:
    """Print a low-level diagnostic message to stderr when tracing is enabled.

    Args:
        msg: Diagnostic message
        enabled: If False, suppress output
    """
    if enabled:
        print(f"TRACE: {msg}", file=sys.stderr, flush=True)


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "1:23:45" or "23:45")
    """
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h:d}:{m:02d}:{s:02d}"
    return f"{m:d}:{s:02d}"
