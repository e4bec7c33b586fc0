#!/usr/bin/env python3
"""Provisional chunk timing for Stream Captions.

Distributes a recognition result's time range across its caption chunks.
The ranges produced here are only a first guess; the timeline engine
decides the times that are actually emitted.
"""
from __future__ import annotations

import dataclasses
from typing import List

from .models import TICKS_PER_SECOND, CaptionChunk


def seconds_to_ticks(seconds: float) -> int:
    """Convert seconds to ticks, rounding to the nearest tick.

    Args:
        seconds: Time in seconds

    Returns:
        Time in ticks
    """
    return int(round(seconds * TICKS_PER_SECOND))


def assign_times(chunks: List[CaptionChunk], offset_ticks: int, duration_ticks: int) -> List[CaptionChunk]:
    """Distribute a time range across chunks proportionally to their length.

    Boundaries are computed from the cumulative character count, so the
    last chunk always ends exactly at offset + duration.

    Args:
        chunks: Untimed chunks of one utterance
        offset_ticks: Start of the utterance
        duration_ticks: Length of the utterance

    Returns:
        New list of chunks with begin_ticks/end_ticks set
    """
    total = max(1, sum(c.char_count for c in chunks))
    out: List[CaptionChunk] = []
    begin = offset_ticks
    seen = 0
    for i, c in enumerate(chunks):
        seen += c.char_count
        if i == len(chunks) - 1:
            end = offset_ticks + duration_ticks
        else:
            end = offset_ticks + duration_ticks * seen // total
        out.append(dataclasses.replace(c, lines=list(c.lines), begin_ticks=begin, end_ticks=end))
        begin = end
    return out
