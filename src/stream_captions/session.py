#!/usr/bin/env python3
"""Recognition session handling for Stream Captions.

A CaptionSession receives recognizer events (usually on a thread the
recognizer owns), feeds them through the timeline engine one at a time
and writes the resulting cues to a sink. Terminal events end the session;
the caller blocks in wait() until one arrives.
"""
from __future__ import annotations

import dataclasses
import threading
from typing import Optional

from .errors import UpstreamCancellation
from .logging_utils import log, trace
from .models import (
    CANCEL_BY_USER,
    CANCEL_END_OF_STREAM,
    CANCEL_ERROR,
    RecognitionResult,
    ResolvedConfig,
    TimelineState,
)
from .output_writers import WEBVTT_HEADER, format_cue, format_time_range
from .timeline import advance


# ============================================================
# Session
# ============================================================

class CaptionSession:
    """Drives the timeline engine for one recognition session.

    Each session owns its own TimelineState; concurrent sessions share
    nothing. Partial and final callbacks may race, so a single lock covers
    the whole processing of one event, including writing its cues.

    Args:
        cfg: Validated configuration settings
        writer: Sink with a write(text) method
        quiet: Suppress status messages
        debug: Report suppressed cues
    """

    def __init__(self, cfg: ResolvedConfig, writer, *, quiet: bool = False, debug: bool = False):
        self.cfg = cfg
        self.writer = writer
        self.quiet = quiet
        self.debug = debug
        self.cues_emitted = 0
        self.cues_suppressed = 0
        self._state = TimelineState()
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._error: Optional[UpstreamCancellation] = None

    @property
    def state(self) -> TimelineState:
        with self._lock:
            return dataclasses.replace(self._state)

    @property
    def finished(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        """Write the stream header; WebVTT needs one, SubRip does not."""
        if not self.cfg.use_srt:
            self.writer.write(WEBVTT_HEADER)

    # ------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------

    def on_recognizing(self, result: RecognitionResult) -> None:
        """Handle a partial (non-final) result."""
        if result.text:
            self._process(result)

    def on_recognized(self, result: RecognitionResult) -> None:
        """Handle a final result. The next result starts a new utterance."""
        self._process(result)

    def on_no_match(self) -> None:
        log("NOMATCH: Speech could not be recognized.", quiet=self.quiet)

    def on_canceled(
        self,
        reason: str,
        error_code: Optional[int] = None,
        error_details: Optional[str] = None,
    ) -> None:
        """Handle recognizer cancellation; every reason ends the session."""
        if reason == CANCEL_END_OF_STREAM:
            log("End of stream reached.", quiet=self.quiet)
            self._finish(None)
        elif reason == CANCEL_BY_USER:
            log("User canceled request.", quiet=self.quiet)
            self._finish(None)
        else:
            self._finish(UpstreamCancellation(reason, error_code, error_details))

    def on_session_stopped(self) -> None:
        log("Session stopped.", quiet=self.quiet)
        self._finish(None)

    # ------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the session ends.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            True if the session ended, False on timeout

        Raises:
            UpstreamCancellation: If the recognizer ended the session with an error
        """
        if not self._done.wait(timeout):
            return False
        if self._error is not None:
            raise self._error
        return True

    def _finish(self, error: Optional[UpstreamCancellation]) -> None:
        # first terminal event wins
        with self._lock:
            if self._done.is_set():
                return
            self._error = error
            self._done.set()

    def _process(self, result: RecognitionResult) -> None:
        with self._lock:
            update = advance(self._state, result, self.cfg)
            self._state = update.state
            for chunk in update.suppressed:
                self.cues_suppressed += 1
                trace(
                    f"suppressed cue {format_time_range(chunk.begin_ticks, chunk.end_ticks, self.cfg.use_srt)} "
                    f"(previous end {self._state.previous_end_ticks}): {chunk.lines[0]!r}",
                    enabled=self.debug,
                )
            for cue in update.cues:
                self.writer.write(format_cue(cue, self.cfg.use_srt))
                self.cues_emitted += 1
