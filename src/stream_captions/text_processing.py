#!/usr/bin/env python3
"""Text processing utilities for Stream Captions.

This module provides text normalization, line wrapping and the caption
chunker that splits recognized text into bounded-size caption chunks.

Wrapping works on character spans of the normalized text rather than on
re-joined words, so every line and chunk knows exactly where it sits in
the utterance. Greedy wrapping over spans is prefix-stable: appending
words to the text can only change the last line, so every chunk except
the last one stays identical between partial updates.
"""
from __future__ import annotations

import re
from typing import List, Tuple

from .models import CaptionChunk


# Filler for short chunks; a truly empty line would terminate the cue.
FILLER_LINE = "&nbsp;"

_WORD_RE = re.compile(r"\S+")


# ============================================================
# Text Normalization
# ============================================================

def normalize_spaces(text: str) -> str:
    """Normalize whitespace in text by replacing non-breaking spaces and collapsing multiple spaces.

    Args:
        text: Input text

    Returns:
        Normalized text with single spaces
    """
    text = text.replace("\u00a0", " ")
    text = re.sub(r"\s+", " ", text).strip()
    return text


# ============================================================
# Text Wrapping
# ============================================================

def word_spans(text: str, max_chars_per_line: int) -> List[Tuple[int, int]]:
    """Locate the words of a text, cutting words longer than a line into pieces.

    Args:
        text: Normalized input text
        max_chars_per_line: Maximum characters per line

    Returns:
        List of (start, end) character spans
    """
    spans: List[Tuple[int, int]] = []
    for m in _WORD_RE.finditer(text):
        start, end = m.start(), m.end()
        while end - start > max_chars_per_line:
            spans.append((start, start + max_chars_per_line))
            start += max_chars_per_line
        spans.append((start, end))
    return spans


def wrap_line_spans(text: str, max_chars_per_line: int) -> List[Tuple[int, int]]:
    """Greedily fill lines with words up to a maximum width.

    Args:
        text: Normalized input text
        max_chars_per_line: Maximum characters per line

    Returns:
        List of (start, end) character spans, one per line
    """
    lines: List[Tuple[int, int]] = []
    cur_start = -1
    cur_end = -1
    for start, end in word_spans(text, max_chars_per_line):
        if cur_start < 0:
            cur_start, cur_end = start, end
        elif end - cur_start <= max_chars_per_line:
            cur_end = end
        else:
            lines.append((cur_start, cur_end))
            cur_start, cur_end = start, end
    if cur_start >= 0:
        lines.append((cur_start, cur_end))
    return lines


def wrap_text_lines(text: str, max_chars_per_line: int) -> List[str]:
    """Wrap text into lines that fit within a maximum character width.

    Args:
        text: Input text to wrap
        max_chars_per_line: Maximum characters per line

    Returns:
        List of wrapped text lines
    """
    text = normalize_spaces(text)
    return [text[s:e] for s, e in wrap_line_spans(text, max_chars_per_line)]


def pad_lines(lines: List[str], max_lines: int) -> List[str]:
    """Pad a list of lines with filler lines up to max_lines.

    Args:
        lines: Caption lines
        max_lines: Number of lines every caption should occupy

    Returns:
        New list of lines, at least max_lines long
    """
    return list(lines) + [FILLER_LINE] * max(0, max_lines - len(lines))


# ============================================================
# Caption Chunking
# ============================================================

def chunk_text(text: str, max_chars_per_line: int, max_lines: int) -> List[CaptionChunk]:
    """Split recognized text into caption chunks of bounded width and height.

    Only the last chunk is "open": when the same utterance is chunked again
    with more words appended, all earlier chunks come out identical. The
    last chunk is padded to max_lines so every caption has the same height.

    Args:
        text: Recognized text of one utterance
        max_chars_per_line: Maximum characters per line
        max_lines: Maximum lines per chunk

    Returns:
        List of untimed CaptionChunk objects (empty for empty text)
    """
    text = normalize_spaces(text)
    spans = wrap_line_spans(text, max_chars_per_line)
    chunks: List[CaptionChunk] = []
    for i in range(0, len(spans), max_lines):
        group = spans[i:i + max_lines]
        start = group[0][0]
        chunks.append(
            CaptionChunk(
                lines=[text[s:e] for s, e in group],
                char_offset=start,
                char_count=group[-1][1] - start,
            )
        )
    if chunks:
        chunks[-1].lines = pad_lines(chunks[-1].lines, max_lines)
    return chunks


def single_chunk(text: str) -> List[CaptionChunk]:
    """Wrap a whole utterance into one unbounded chunk.

    Used when no maximum caption length is configured.

    Args:
        text: Recognized text of one utterance

    Returns:
        A one-element list, or an empty list for empty text
    """
    text = normalize_spaces(text)
    if not text:
        return []
    return [CaptionChunk(lines=[text], char_offset=0, char_count=len(text))]
