#!/usr/bin/env python3
"""Batch processing utilities for Stream Captions.

Every input file is captioned in its own recognition session. This module
handles:
- Media file discovery and expansion
- Output path calculation
- Preflight checks before processing
"""
from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, List, Optional, Tuple


# ============================================================
# Media File Discovery
# ============================================================

MEDIA_EXTS = {".mp3", ".wav", ".m4a", ".aac", ".flac", ".ogg", ".opus", ".mp4", ".mkv", ".mov", ".webm"}


def iter_media_files_in_dir(d: Path) -> Iterable[Path]:
    """Recursively iterate over all media files in a directory, in sorted order."""
    for p in sorted(d.rglob("*")):
        if p.is_file() and p.suffix.lower() in MEDIA_EXTS:
            yield p


def expand_inputs(inputs: List[str]) -> List[Path]:
    """Expand input specifications into a list of file paths.

    Handles individual files, directories (searched recursively for media
    files) and glob patterns (e.g., "*.mp3").

    Args:
        inputs: List of input file/directory/glob specifications

    Returns:
        Deduplicated list of Path objects, in input order
    """
    out: List[Path] = []
    for s in inputs:
        p = Path(s)
        if p.is_dir():
            out.extend(iter_media_files_in_dir(p))
        elif any(ch in s for ch in "*?[") and not p.exists():
            out.extend(Path(x) for x in sorted(glob.glob(s)))
        else:
            out.append(p)

    seen = set()
    uniq: List[Path] = []
    for p in out:
        key = str(p.resolve()) if p.exists() else str(p)
        if key in seen:
            continue
        seen.add(key)
        uniq.append(p)
    return uniq


# ============================================================
# Output Path Calculation
# ============================================================

def caption_suffix(use_srt: bool) -> str:
    return ".srt" if use_srt else ".vtt"


def default_output_for(input_file: Path, outdir: Optional[Path], use_srt: bool) -> Path:
    """Calculate the default caption path for an input file.

    Args:
        input_file: Input file path
        outdir: Optional output directory; defaults to the input's directory
        use_srt: If True, use the .srt suffix; otherwise .vtt

    Returns:
        Output file path
    """
    suffix = caption_suffix(use_srt)
    if outdir is None:
        return input_file.with_suffix(suffix)
    return (outdir / input_file.name).with_suffix(suffix)


# ============================================================
# Preflight Checks
# ============================================================

def preflight_one(input_path: Path, output_path: Path, overwrite: bool) -> Tuple[bool, str]:
    """Perform preflight checks before processing a file.

    Args:
        input_path: Input file path
        output_path: Output file path
        overwrite: If True, allow overwriting existing output

    Returns:
        Tuple of (success, error_message); error_message is empty on success
    """
    if not input_path.exists():
        return False, f"Input file not found: {input_path}"
    if input_path.is_dir():
        return False, f"Input path is a directory (expected media file): {input_path}"
    if output_path.exists() and output_path.is_dir():
        return False, f"Output path is a directory (expected file): {output_path}"
    if output_path.exists() and not overwrite:
        return False, f"Output already exists: {output_path} (use --overwrite)"
    return True, ""
