#!/usr/bin/env python3
"""faster-whisper recognition source for Stream Captions.

Whisper transcribes a file segment by segment and does not revise its
output, so real-time behaviour is reproduced from word timestamps: every
segment is replayed as a series of growing partial results (one more word
each time) followed by the final result. Recognition runs on its own
thread and reports to a CaptionSession through its event handlers, the
same way a streaming recognizer would.
"""
from __future__ import annotations

import threading
from typing import Any, Iterable, Iterator, Optional, Tuple

from faster_whisper import WhisperModel

from .logging_utils import log
from .models import RecognitionResult
from .session import CANCEL_END_OF_STREAM, CANCEL_ERROR, CaptionSession
from .text_processing import normalize_spaces
from .timing import seconds_to_ticks


COMPUTE_TYPES = {
    "cpu": "int8",
    "cuda": "float16",
}


# ============================================================
# Device Initialization
# ============================================================

def _load(model_name: str, device: str) -> Tuple[WhisperModel, str, str]:
    compute_type = COMPUTE_TYPES[device]
    return WhisperModel(model_name, device=device, compute_type=compute_type), device, compute_type


def init_whisper_model(
    model_name: str,
    device: str,               # auto|cpu|cuda
    quiet: bool,
    strict_cuda: bool,
) -> Tuple[WhisperModel, str, str]:
    """Initialize a Whisper model with appropriate device and compute type.

    Args:
        model_name: Name of the Whisper model (e.g., "small", "medium")
        device: Device selection: "auto", "cpu", or "cuda"
        quiet: If True, suppress log messages
        strict_cuda: If True, fail if CUDA requested but unavailable

    Returns:
        Tuple of (model, device_used, compute_type_used)

    Raises:
        RuntimeError: If strict_cuda=True and CUDA initialization fails
    """
    if device == "cpu":
        return _load(model_name, "cpu")

    try:
        loaded = _load(model_name, "cuda")
    except Exception as e:
        if device == "cuda" and strict_cuda:
            raise RuntimeError(f"CUDA requested but init failed: {e}") from e
        log(f"   CUDA not available; using CPU. Reason: {e}", quiet=quiet)
        return _load(model_name, "cpu")
    log("   Using device=cuda compute_type=float16", quiet=quiet)
    return loaded


# ============================================================
# Segment Replay
# ============================================================

def segment_events(
    segments: Iterable[Any],
    *,
    partials: bool,
    language: Optional[str] = None,
) -> Iterator[RecognitionResult]:
    """Turn transcription segments into recognition results.

    Args:
        segments: Segment objects from faster-whisper
        partials: If True, precede each final result with word-by-word partial results
        language: Language tag to attach to every result

    Yields:
        RecognitionResult objects in delivery order
    """
    for seg in segments:
        offset = max(0, seconds_to_ticks(float(seg.start)))
        end = max(offset, seconds_to_ticks(float(seg.end)))
        if partials:
            words = [w for w in (getattr(seg, "words", None) or []) if normalize_spaces(w.word)]
            for n in range(1, len(words)):
                # whisper words carry their own leading space
                text = normalize_spaces("".join(w.word for w in words[:n]))
                word_end = max(offset, seconds_to_ticks(float(words[n - 1].end)))
                yield RecognitionResult(
                    text=text,
                    offset_ticks=offset,
                    duration_ticks=word_end - offset,
                    is_final=False,
                    language=language,
                )
        yield RecognitionResult(
            text=normalize_spaces(getattr(seg, "text", "")),
            offset_ticks=offset,
            duration_ticks=end - offset,
            is_final=True,
            language=language,
        )


# ============================================================
# Recognition
# ============================================================

def start_recognition(
    model: Any,
    wav_path: str,
    session: CaptionSession,
    *,
    partials: bool,
    language: Optional[str] = None,
    tag_language: bool = False,
    vad_filter: bool = True,
    initial_prompt: Optional[str] = None,
) -> threading.Thread:
    """Transcribe a WAV file on a background thread, reporting to a session.

    Args:
        model: Loaded WhisperModel
        wav_path: Path to 16 kHz mono WAV file
        session: Session that receives the recognition events
        partials: If True, deliver partial results (needs word timestamps)
        language: Force a transcription language, or None to auto-detect
        tag_language: If True, tag results with the detected language
        vad_filter: Enable faster-whisper's voice activity filter
        initial_prompt: Optional phrase hints for the model

    Returns:
        The started recognition thread
    """

    def _recognize() -> None:
        try:
            segments, info = model.transcribe(
                wav_path,
                language=language,
                vad_filter=vad_filter,
                word_timestamps=partials,
                initial_prompt=initial_prompt,
            )
            tag = getattr(info, "language", None) if tag_language else None
            for result in segment_events(segments, partials=partials, language=tag):
                if not result.is_final:
                    session.on_recognizing(result)
                    continue
                session.on_recognized(result)
                if not result.text:
                    session.on_no_match()
        except Exception as e:
            session.on_canceled(CANCEL_ERROR, error_details=str(e))
        else:
            session.on_canceled(CANCEL_END_OF_STREAM)
        finally:
            session.on_session_stopped()

    thread = threading.Thread(target=_recognize, name="recognizer", daemon=True)
    thread.start()
    return thread
