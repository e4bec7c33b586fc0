#!/usr/bin/env python3
"""Cue formatting and caption sinks.

This module handles:
- Timestamp formatting and parsing for SRT (SubRip) and VTT (WebVTT)
- Rendering a single cue as SRT or WebVTT text
- Writing caption text to the console and/or an output file
- Delaying caption output to simulate real-time caption latency
"""
from __future__ import annotations

import queue
import re
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Optional, TextIO, Tuple

from .models import TICKS_PER_MILLISECOND, Cue


WEBVTT_HEADER = "WEBVTT\n\n"

_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{2}):(\d{2})[,.](\d{3})$")


def ensure_parent_dir(path: Path) -> None:
    """Create the parent directory of an output file if it is missing."""
    parent = path.parent
    if parent and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


# ============================================================
# Time Formatters
# ============================================================

def _split_ticks(ticks: int) -> Tuple[int, int, int, int]:
    ms = (ticks + TICKS_PER_MILLISECOND // 2) // TICKS_PER_MILLISECOND
    h = ms // 3_600_000
    ms %= 3_600_000
    m = ms // 60_000
    ms %= 60_000
    s = ms // 1000
    ms %= 1000
    return h, m, s, ms


def format_srt_time(ticks: int) -> str:
    """Format time for SRT format (HH:MM:SS,mmm).

    Args:
        ticks: Time in ticks

    Returns:
        Formatted time string (e.g., "00:01:23,456")
    """
    h, m, s, ms = _split_ticks(ticks)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def format_vtt_time(ticks: int) -> str:
    """Format time for WebVTT format (HH:MM:SS.mmm).

    Args:
        ticks: Time in ticks

    Returns:
        Formatted time string (e.g., "00:01:23.456")
    """
    h, m, s, ms = _split_ticks(ticks)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def parse_timestamp(value: str) -> int:
    """Parse an SRT or WebVTT timestamp back into ticks.

    Args:
        value: Timestamp such as "00:01:23,456" or "00:01:23.456"

    Returns:
        Time in ticks

    Raises:
        ValueError: If the value is not a timestamp
    """
    m = _TIMESTAMP_RE.match(value.strip())
    if not m:
        raise ValueError(f"Not a caption timestamp: {value!r}")
    h, mi, s, ms = (int(g) for g in m.groups())
    return ((h * 3600 + mi * 60 + s) * 1000 + ms) * TICKS_PER_MILLISECOND


def format_time_range(begin_ticks: int, end_ticks: int, use_srt: bool) -> str:
    fmt = format_srt_time if use_srt else format_vtt_time
    return f"{fmt(begin_ticks)} --> {fmt(end_ticks)}"


# ============================================================
# Cue Formatter
# ============================================================

def format_cue(cue: Cue, use_srt: bool) -> str:
    """Render a cue as SRT or WebVTT text, including the trailing blank line.

    Args:
        cue: Cue to render
        use_srt: If True, render SubRip; otherwise WebVTT

    Returns:
        Cue text block

    Raises:
        ValueError: If SubRip output is requested for a cue without a sequence number
    """
    out = []
    if use_srt:
        if cue.sequence_number is None:
            raise ValueError("SubRip cues need a sequence number.")
        out.append(f"{cue.sequence_number}\n")
    out.append(format_time_range(cue.begin_ticks, cue.end_ticks, use_srt) + "\n")
    if cue.language is not None:
        out.append(f"[{cue.language}] ")
    out.append(f"{cue.text}\n\n")
    return "".join(out)


# ============================================================
# Sinks
# ============================================================

class CaptionWriter:
    """Writes caption text to the console and, optionally, to a file.

    An existing output file is replaced when the writer is opened. Every
    write is flushed so captions show up as soon as they are emitted.
    """

    def __init__(self, out_path: Optional[Path] = None, *, quiet: bool = False, stream: Optional[TextIO] = None):
        self.out_path = out_path
        self.quiet = quiet
        self.stream = stream
        self._fh: Optional[TextIO] = None

    def open(self) -> None:
        if self.out_path is not None:
            ensure_parent_dir(self.out_path)
            self._fh = open(self.out_path, "w", encoding="utf-8")

    def write(self, text: str) -> None:
        if not self.quiet:
            stream = self.stream or sys.stdout
            stream.write(text)
            stream.flush()
        if self._fh is not None:
            self._fh.write(text)
            self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "CaptionWriter":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class DelayedWriter:
    """Releases writes to an inner writer a fixed delay after they were queued.

    Writes keep their order. A single worker thread does all output, so the
    callers never block on the delay.
    """

    def __init__(
        self,
        inner,
        delay_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.inner = inner
        self.delay_seconds = delay_seconds
        self._clock = clock
        self._sleep = sleep
        self._queue: "queue.Queue[Optional[Tuple[float, str]]]" = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="caption-delay", daemon=True)

    def open(self) -> None:
        self.inner.open()
        self._thread.start()

    def write(self, text: str) -> None:
        self._queue.put((self._clock() + self.delay_seconds, text))

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            due, text = item
            wait = due - self._clock()
            if wait > 0:
                self._sleep(wait)
            self.inner.write(text)

    def close(self) -> None:
        """Flush every pending write, then close the inner writer."""
        if self._thread.is_alive():
            self._queue.put(None)
            self._thread.join()
        self.inner.close()

    def __enter__(self) -> "DelayedWriter":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
