#!/usr/bin/env python3
"""Data models for Stream Captions.

This module contains all data classes used throughout the application:
- TOOL_VERSION: Version constant
- Tick constants: the integer time unit used for all timing arithmetic
- ResolvedConfig: Configuration settings dataclass
- RecognitionResult: One partial or final result from the recognizer
- CaptionChunk: A bounded-size piece of an utterance, before timing
- Cue: A timed caption entry as emitted to the output stream
- TimelineState: Per-session state of the timeline engine
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


# ============================================================
# Versioning
# ============================================================

TOOL_VERSION = "0.1.0"


# ============================================================
# Time Units
# ============================================================

TICKS_PER_SECOND = 10_000_000
TICKS_PER_MILLISECOND = 10_000

# Added to a chunk's end time when it is emitted ahead of the recognizer settling.
HOLD_TICKS = TICKS_PER_SECOND


# ============================================================
# Configuration
# ============================================================

MODE_OFFLINE = "offline"
MODE_REAL_TIME = "realtime"
CAPTIONING_MODES = (MODE_OFFLINE, MODE_REAL_TIME)

MIN_CAPTION_LENGTH = 20
DEFAULT_CAPTION_LINES = 3


@dataclass
class ResolvedConfig:
    """Resolved configuration for caption generation.

    max_caption_length of None disables chunking: every result becomes
    exactly one cue.
    """
    # caption layout
    max_caption_length: Optional[int] = None
    max_caption_lines: int = DEFAULT_CAPTION_LINES

    # output
    use_srt: bool = False

    # emission policy
    captioning_mode: str = MODE_OFFLINE
    real_time_delay: int = 0

    # transcription options
    vad_filter: bool = True


# ============================================================
# Cancellation Reasons
# ============================================================

CANCEL_END_OF_STREAM = "end_of_stream"
CANCEL_BY_USER = "cancelled_by_user"
CANCEL_ERROR = "error"


# ============================================================
# Recognition Input
# ============================================================

@dataclass(frozen=True)
class RecognitionResult:
    """A single delivery from the speech recognizer.

    Non-final results describe an utterance that may still be revised; a
    later delivery for the same utterance supersedes them until one arrives
    with is_final set.

    Attributes:
        text: Recognized text
        offset_ticks: Start of the utterance in ticks
        duration_ticks: Length of the utterance in ticks
        is_final: True once the recognizer has settled the utterance
        language: Detected language tag, when language identification is on
    """
    text: str
    offset_ticks: int
    duration_ticks: int
    is_final: bool = False
    language: Optional[str] = None

    def __post_init__(self) -> None:
        if self.offset_ticks < 0:
            raise ValueError(f"offset_ticks must be >= 0, got {self.offset_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"duration_ticks must be >= 0, got {self.duration_ticks}")


# ============================================================
# Caption Data Structures
# ============================================================

@dataclass
class CaptionChunk:
    """A bounded-size piece of an utterance's text.

    Attributes:
        lines: Wrapped (and possibly padded) display lines
        char_offset: Index of the chunk's first character in the normalized utterance
        char_count: Length of the chunk's content, excluding padding
        begin_ticks: Provisional start time, None until timed
        end_ticks: Provisional end time, None until timed
    """
    lines: List[str]
    char_offset: int = 0
    char_count: int = 0
    begin_ticks: Optional[int] = None
    end_ticks: Optional[int] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Cue:
    """Represents a single emitted caption cue.

    Attributes:
        text: Caption text (may span several lines)
        begin_ticks: Start time in ticks
        end_ticks: End time in ticks
        language: Optional language tag rendered as a "[xx] " prefix
        sequence_number: SubRip index, None for WebVTT output
    """
    text: str
    begin_ticks: int
    end_ticks: int
    language: Optional[str] = None
    sequence_number: Optional[int] = None


@dataclass
class TimelineState:
    """Timeline position of one recognition session.

    Attributes:
        previous_end_ticks: End time of the last emitted cue, None before the first
        chunk_cursor: Index of the first chunk of the current utterance not yet emitted
        srt_sequence: Last SubRip sequence number handed out
    """
    previous_end_ticks: Optional[int] = None
    chunk_cursor: int = 0
    srt_sequence: int = 0


@dataclass
class TimelineUpdate:
    """Outcome of feeding one event through the timeline engine."""
    state: TimelineState
    cues: List[Cue] = field(default_factory=list)
    suppressed: List[CaptionChunk] = field(default_factory=list)
