#!/usr/bin/env python3
"""Command-line interface for Stream Captions.

This is the main entry point for the stream-captions command-line tool.
"""
from __future__ import annotations

import argparse
import dataclasses
import json
import os
import tempfile
import time
import traceback
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .audio import ffmpeg_ok, to_wav_16k_mono
from .batch import default_output_for, expand_inputs, preflight_one
from .config import PRESET_ALIASES, PRESETS, apply_overrides, load_config_file, validate_config
from .errors import ConfigurationError, UpstreamCancellation
from .logging_utils import die, format_duration, log, warn
from .models import MODE_OFFLINE, MODE_REAL_TIME, TOOL_VERSION, ResolvedConfig
from .output_writers import CaptionWriter, DelayedWriter
from .session import CANCEL_BY_USER, CaptionSession


# ============================================================
# Run one file
# ============================================================

def run_one(
    *,
    input_path: Path,
    output_path: Path,
    model: Any,
    args: argparse.Namespace,
    cfg: ResolvedConfig,
    quiet: bool,
) -> int:
    """Caption a single media file in its own recognition session.

    Args:
        input_path: Path to input media file
        output_path: Path for the caption file
        model: Loaded WhisperModel
        args: Command-line arguments namespace
        cfg: Validated configuration
        quiet: Suppress non-error output

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    # imported here so --version and --dry-run work without the model stack
    from .whisper_source import start_recognition

    tmpdir = args.tmpdir if args.tmpdir else None
    fd, tmp_wav = tempfile.mkstemp(prefix="captions_", suffix=".wav", dir=tmpdir)
    os.close(fd)

    started = time.time()
    try:
        log("1/3 Converting audio with ffmpeg...", quiet=quiet)
        to_wav_16k_mono(str(input_path), tmp_wav)

        log("2/3 Recognizing...", quiet=quiet)
        writer: Any = CaptionWriter(output_path, quiet=quiet)
        if cfg.captioning_mode == MODE_REAL_TIME and cfg.real_time_delay > 0:
            writer = DelayedWriter(writer, cfg.real_time_delay)

        session = CaptionSession(cfg, writer, quiet=quiet, debug=args.debug)
        with writer:
            session.start()
            start_recognition(
                model,
                tmp_wav,
                session,
                partials=cfg.captioning_mode == MODE_REAL_TIME,
                language=args.language,
                tag_language=bool(args.languages),
                vad_filter=cfg.vad_filter,
                initial_prompt=phrases_prompt(args.phrases),
            )
            try:
                session.wait()
            except KeyboardInterrupt:
                session.on_canceled(CANCEL_BY_USER)
                raise
            except UpstreamCancellation as e:
                return die(f"{input_path}: {e}", 1)

        log(
            f"3/3 Done: {output_path} ({session.cues_emitted} cues, "
            f"{session.cues_suppressed} suppressed, total {format_duration(time.time() - started)})",
            quiet=quiet,
        )
        return 0

    finally:
        if not args.keep_wav and os.path.exists(tmp_wav):
            try:
                os.remove(tmp_wav)
            except OSError:
                pass


def phrases_prompt(phrases: Optional[str]) -> Optional[str]:
    """Turn a ;-separated phrase list into a prompt for the recognizer."""
    if not phrases:
        return None
    items = [p.strip() for p in phrases.split(";") if p.strip()]
    return ", ".join(items) or None


# ============================================================
# Configuration
# ============================================================

def resolve_config(args: argparse.Namespace) -> ResolvedConfig:
    """Build the configuration: defaults -> config file -> preset -> CLI flags.

    Raises:
        FileNotFoundError, ValueError: If the config file can't be loaded
        ConfigurationError: If the resulting settings are out of bounds
    """
    cfg = apply_overrides(ResolvedConfig(), load_config_file(args.config))

    if args.preset:
        key = args.preset.lower()
        if key not in PRESET_ALIASES:
            raise ConfigurationError(
                f"Invalid --preset '{args.preset}'. Valid presets: {', '.join(PRESETS)}"
            )
        cfg = apply_overrides(cfg, PRESETS[PRESET_ALIASES[key]])

    if args.max_caption_length is not None:
        cfg.max_caption_length = args.max_caption_length
    if args.max_caption_lines is not None:
        cfg.max_caption_lines = args.max_caption_lines
    if args.srt:
        cfg.use_srt = True
    # --offline wins over --real-time
    if args.offline:
        cfg.captioning_mode = MODE_OFFLINE
    elif args.real_time:
        cfg.captioning_mode = MODE_REAL_TIME
    if args.real_time_delay is not None:
        cfg.real_time_delay = args.real_time_delay
    if args.no_vad:
        cfg.vad_filter = False

    return validate_config(cfg)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Caption generator with real-time and offline cue timing (faster-whisper + ffmpeg)")
    ap.add_argument("inputs", nargs="*", help="Media file(s), directory, or glob pattern(s)")
    ap.add_argument("-o", "--output", default=None, help="Caption output path (only valid when one input expands to one file).")
    ap.add_argument("--outdir", default=None, help="Output directory. If omitted, writes next to input.")
    ap.add_argument("--srt", action="store_true", help="Output captions in SubRip format (default is WebVTT).")

    ap.add_argument("--real-time", action="store_true", help="Emit captions while utterances are still being recognized.")
    ap.add_argument("--offline", action="store_true", help="Emit captions only for settled utterances (default). Overrides --real-time.")
    ap.add_argument("--real-time-delay", type=int, default=None, help="Simulated caption delay in seconds (real-time mode only).")

    ap.add_argument("--max-caption-length", type=int, default=None, help="Maximum characters per caption line (minimum 20). Default: no limit.")
    ap.add_argument("--max-caption-lines", type=int, default=None, help="Maximum lines per caption (minimum 1). Default: 3.")
    ap.add_argument("--preset", default=None, help="Caption layout preset: shorts | broadcast | lecture.")
    ap.add_argument("--config", default=None, help="JSON config file. CLI args override config.")

    ap.add_argument("--model", default="small", help="tiny/base/small/medium/large-v3")
    ap.add_argument("--device", choices=["auto", "cpu", "cuda"], default="auto", help="auto/cpu/cuda")
    ap.add_argument("--strict-cuda", action="store_true", help="If set, fail instead of falling back when CUDA init fails.")
    ap.add_argument("--language", default=None, help="Optional language code (e.g., en). If omitted, auto-detect.")
    ap.add_argument("--languages", default=None, help="Tag captions with the detected language, e.g. 'en;ja'.")
    ap.add_argument("--phrases", default=None, help="Phrase hints, e.g. 'Contoso;Jessie;Rehaan'.")
    ap.add_argument("--no-vad", action="store_true", help="Disable the voice activity filter.")

    ap.add_argument("--overwrite", action="store_true", help="Overwrite output if it exists")
    ap.add_argument("--keep-wav", action="store_true", help="Do not delete temporary WAV file")
    ap.add_argument("--tmpdir", default=None, help="Directory for temporary WAV (defaults to system temp)")
    ap.add_argument("--dry-run", action="store_true", help="Validate inputs and show resolved settings, but do not recognize.")

    ap.add_argument("--quiet", action="store_true", help="Suppress console output, except errors.")
    ap.add_argument("--debug", action="store_true", help="Report suppressed cues and print tracebacks.")
    ap.add_argument("--continue-on-error", action="store_true", help="Continue processing other files on error.")
    ap.add_argument("--version", action="store_true")
    return ap


# ============================================================
# CLI
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the stream-captions command-line tool.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(TOOL_VERSION)
        return 0

    quiet = args.quiet

    try:
        cfg = resolve_config(args)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        return die(str(e), 2)

    if cfg.real_time_delay > 0 and cfg.captioning_mode != MODE_REAL_TIME:
        warn("--real-time-delay only applies in real-time mode; ignoring.", quiet=quiet)

    if not args.inputs:
        return die("No input files provided.", 2)
    files = [p for p in expand_inputs(args.inputs) if p.is_file()]
    if not files:
        return die("No input files found after expansion.", 2)
    if args.output is not None and len(files) != 1:
        return die("--output may only be used when exactly one input file is provided (after expansion).", 2)

    outdir = Path(args.outdir) if args.outdir else None
    if outdir:
        outdir.mkdir(parents=True, exist_ok=True)

    if args.dry_run:
        log("Resolved config:", quiet=quiet)
        log(json.dumps(dataclasses.asdict(cfg), indent=2), quiet=quiet)
        for f in files:
            out = Path(args.output) if args.output else default_output_for(f, outdir, cfg.use_srt)
            log(f"{f} -> {out}", quiet=quiet)
        return 0

    if not ffmpeg_ok():
        return die("ffmpeg not found on PATH. Install it or add it to PATH.", 2)

    from .whisper_source import init_whisper_model

    log("Loading model...", quiet=quiet)
    try:
        model, device_used, compute_type_used = init_whisper_model(
            model_name=args.model,
            device=args.device,
            quiet=quiet,
            strict_cuda=args.strict_cuda,
        )
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        return die(f"Failed to load model '{args.model}': {e}", 2)
    log(f"   Model {args.model} on {device_used} ({compute_type_used})", quiet=quiet)

    failures: List[Tuple[Path, str]] = []
    for f in files:
        primary_out = Path(args.output) if args.output else default_output_for(f, outdir, cfg.use_srt)

        ok, reason = preflight_one(f, primary_out, args.overwrite)
        if not ok:
            failures.append((f, reason))
            if not args.continue_on_error:
                return die(reason, 2)
            warn(f"{f}: {reason}", quiet=quiet)
            continue

        log(f"Input: {f}", quiet=quiet)
        log(f"Output: {primary_out}", quiet=quiet)
        try:
            rc = run_one(
                input_path=f,
                output_path=primary_out,
                model=model,
                args=args,
                cfg=cfg,
                quiet=quiet,
            )
            if rc != 0:
                failures.append((f, f"failed with exit code {rc}"))
                if not args.continue_on_error:
                    return rc
        except KeyboardInterrupt:
            return die("Interrupted by user.", 130)
        except Exception as e:
            if args.debug:
                traceback.print_exc()
            failures.append((f, str(e)))
            if not args.continue_on_error:
                return die(f"{f}: {e}", 1)
            warn(f"{f}: {e}", quiet=quiet)

    if failures:
        if not quiet:
            log("\nSummary: failures:", quiet=quiet)
            for f, msg in failures:
                log(f"  - {f}: {msg}", quiet=quiet)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
