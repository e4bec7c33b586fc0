#!/usr/bin/env python3
"""Audio conversion for Stream Captions.

The recognizer reads 16 kHz mono WAV; everything else is converted with
ffmpeg first.
"""
from __future__ import annotations

import shutil
import subprocess


def ffmpeg_ok() -> bool:
    """Check if ffmpeg is available on the system PATH."""
    return shutil.which("ffmpeg") is not None


def to_wav_16k_mono(input_path: str, wav_path: str) -> None:
    """Convert an audio/video file to 16kHz mono WAV format.

    Args:
        input_path: Path to input audio/video file
        wav_path: Path where output WAV file should be written

    Raises:
        subprocess.CalledProcessError: If ffmpeg conversion fails
    """
    cmd = [
        "ffmpeg", "-y",
        "-loglevel", "error",
        "-i", input_path,
        "-ac", "1",
        "-ar", "16000",
        "-vn",
        wav_path,
    ]
    p = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE, text=True)
    if p.returncode != 0:
        # keep the tail; ffmpeg can print pages of stream info
        tail = "\n".join((p.stderr or "").splitlines()[-20:])
        raise subprocess.CalledProcessError(p.returncode, cmd, output=None, stderr=tail)
