"""Stream Captions - WebVTT/SRT captioning from partial and final recognition results.

This package turns a stream of speech recognition results into a strictly
ordered, non-overlapping caption cue stream, in real-time or offline mode,
using faster-whisper + ffmpeg as the recognizer.
"""
from .cli import main
from .models import TOOL_VERSION

__version__ = TOOL_VERSION
__all__ = ["main", "__version__"]
