#!/usr/bin/env python3
"""Timeline continuity engine for Stream Captions.

Turns a stream of (possibly revised) recognition results into a strictly
ordered, non-overlapping cue stream.

Every function here is a pure transformation of an explicit TimelineState:
callers pass the current state in and get a TimelineUpdate back holding
the new state, the cues to emit and the chunks that were suppressed.
Nothing in this module raises for validated settings.

Emission rules:
- Partial result (real-time mode only): chunks between the cursor and the
  open last chunk are emitted, each with its end held one second longer.
- Final result: the last chunk is held, then every chunk from the cursor
  onward is emitted and the cursor resets for the next utterance.
- A chunk's start is clamped to the previous cue's end. A chunk whose
  range collapses under the clamp is suppressed.
"""
from __future__ import annotations

import dataclasses
from typing import List, Optional, Tuple

from .models import (
    HOLD_TICKS,
    MODE_REAL_TIME,
    CaptionChunk,
    Cue,
    RecognitionResult,
    ResolvedConfig,
    TimelineState,
    TimelineUpdate,
)
from .text_processing import chunk_text, single_chunk
from .timing import assign_times


# ============================================================
# Chunk Preparation
# ============================================================

def build_chunks(result: RecognitionResult, cfg: ResolvedConfig) -> List[CaptionChunk]:
    """Chunk a result's text and give every chunk a provisional time range.

    Args:
        result: Recognition result to chunk
        cfg: Configuration settings

    Returns:
        List of timed chunks (empty for empty text)
    """
    if cfg.max_caption_length is None:
        chunks = single_chunk(result.text)
    else:
        chunks = chunk_text(result.text, cfg.max_caption_length, cfg.max_caption_lines)
    return assign_times(chunks, result.offset_ticks, result.duration_ticks)


def hold(chunk: CaptionChunk) -> CaptionChunk:
    """Return a copy of a chunk with its end extended by the hold interval."""
    return dataclasses.replace(chunk, lines=list(chunk.lines), end_ticks=chunk.end_ticks + HOLD_TICKS)


# ============================================================
# Cue Placement
# ============================================================

def place_chunk(
    state: TimelineState,
    chunk: CaptionChunk,
    language: Optional[str],
    use_srt: bool,
) -> Tuple[TimelineState, Optional[Cue]]:
    """Place one timed chunk on the timeline after the previously emitted cue.

    Args:
        state: Current timeline state
        chunk: Timed chunk to place
        language: Language tag for the cue
        use_srt: If True, number the cue for SubRip output

    Returns:
        Tuple of (new state, cue). The cue is None and the state unchanged
        when the clamped range is empty.
    """
    begin = chunk.begin_ticks
    if state.previous_end_ticks is not None:
        begin = max(begin, state.previous_end_ticks)
    if begin >= chunk.end_ticks:
        return state, None

    seq = state.srt_sequence
    number = None
    if use_srt:
        seq += 1
        number = seq
    cue = Cue(
        text=chunk.text,
        begin_ticks=begin,
        end_ticks=chunk.end_ticks,
        language=language,
        sequence_number=number,
    )
    return dataclasses.replace(state, previous_end_ticks=chunk.end_ticks, srt_sequence=seq), cue


def _place_all(
    state: TimelineState,
    chunks: List[CaptionChunk],
    language: Optional[str],
    use_srt: bool,
) -> TimelineUpdate:
    update = TimelineUpdate(state=state)
    for chunk in chunks:
        update.state, cue = place_chunk(update.state, chunk, language, use_srt)
        if cue is None:
            update.suppressed.append(chunk)
        else:
            update.cues.append(cue)
    return update


# ============================================================
# Event Handling
# ============================================================

def apply_partial(
    state: TimelineState,
    chunks: List[CaptionChunk],
    language: Optional[str],
    use_srt: bool,
) -> TimelineUpdate:
    """Emit the chunks of a non-final result that can no longer change.

    The last chunk stays open because later partial results may still add
    words to it.

    Args:
        state: Current timeline state
        chunks: Timed chunks of the partial result
        language: Language tag for emitted cues
        use_srt: If True, number cues for SubRip output

    Returns:
        TimelineUpdate with the cursor moved past every closed chunk
    """
    closed = len(chunks) - 1
    if closed <= state.chunk_cursor:
        return TimelineUpdate(state=state)
    eligible = [hold(c) for c in chunks[state.chunk_cursor:closed]]
    update = _place_all(state, eligible, language, use_srt)
    update.state = dataclasses.replace(update.state, chunk_cursor=closed)
    return update


def apply_final(
    state: TimelineState,
    chunks: List[CaptionChunk],
    language: Optional[str],
    use_srt: bool,
    *,
    hold_last: bool = True,
) -> TimelineUpdate:
    """Emit the remaining chunks of a final result and start a new utterance.

    The last chunk is always considered, even if a revision left the final
    result with fewer chunks than were already emitted from its partials.

    Args:
        state: Current timeline state
        chunks: Timed chunks of the final result
        language: Language tag for emitted cues
        use_srt: If True, number cues for SubRip output
        hold_last: If True, extend the last chunk by the hold interval

    Returns:
        TimelineUpdate with the cursor reset to 0
    """
    if not chunks:
        return TimelineUpdate(state=dataclasses.replace(state, chunk_cursor=0))
    pending = list(chunks[min(state.chunk_cursor, len(chunks) - 1):])
    if hold_last:
        pending[-1] = hold(pending[-1])
    update = _place_all(state, pending, language, use_srt)
    update.state = dataclasses.replace(update.state, chunk_cursor=0)
    return update


def advance(state: TimelineState, result: RecognitionResult, cfg: ResolvedConfig) -> TimelineUpdate:
    """Feed one recognition result through the timeline.

    Args:
        state: Current timeline state
        result: Partial or final recognition result
        cfg: Validated configuration settings

    Returns:
        TimelineUpdate holding the new state and the cues to emit
    """
    if not result.is_final and cfg.captioning_mode != MODE_REAL_TIME:
        return TimelineUpdate(state=state)

    chunks = build_chunks(result, cfg)
    if result.is_final:
        # Without a caption length every cue keeps the recognizer's exact range.
        hold_last = cfg.max_caption_length is not None
        return apply_final(state, chunks, result.language, cfg.use_srt, hold_last=hold_last)
    return apply_partial(state, chunks, result.language, cfg.use_srt)
