#!/usr/bin/env python3
"""Configuration management for Stream Captions.

This module handles configuration loading, preset management,
configuration merging/overrides and bounds validation.
"""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .models import CAPTIONING_MODES, MIN_CAPTION_LENGTH, ResolvedConfig


# ============================================================
# Presets
# ============================================================

PRESETS: Dict[str, Dict[str, Any]] = {
    "shorts": {
        "max_caption_length": 20,
        "max_caption_lines": 1,
    },
    "broadcast": {
        "max_caption_length": 32,
        "max_caption_lines": 2,
    },
    "lecture": {
        "max_caption_length": 42,
        "max_caption_lines": 3,
    },
}

PRESET_ALIASES = {
    "short": "shorts",
    "shorts": "shorts",
    "tv": "broadcast",
    "broadcast": "broadcast",
    "lecture": "lecture",
    "talk": "lecture",
}


# ============================================================
# Configuration Loading
# ============================================================

def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path: Path to JSON config file, or None to skip loading

    Returns:
        Dictionary of configuration values, or empty dict if path is None

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file isn't a valid JSON object
    """
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a JSON object at top-level.")
    return data


def apply_overrides(base: ResolvedConfig, overrides: Dict[str, Any]) -> ResolvedConfig:
    """Apply configuration overrides to a base configuration.

    Args:
        base: Base ResolvedConfig instance
        overrides: Dictionary of configuration values to override

    Returns:
        New ResolvedConfig instance with overrides applied
    """
    d = dataclasses.asdict(base)
    for k, v in overrides.items():
        if k in d:
            d[k] = v
    return ResolvedConfig(**d)


# ============================================================
# Validation
# ============================================================

def _is_int(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(cfg: ResolvedConfig) -> ResolvedConfig:
    """Check caption settings against their bounds.

    The timeline engine assumes validated settings, so everything that could
    make it misbehave is rejected here, before a session starts.

    Args:
        cfg: Configuration to check

    Returns:
        The same configuration, unchanged

    Raises:
        ConfigurationError: If any setting has the wrong type or is out of bounds
    """
    if cfg.max_caption_length is not None and not _is_int(cfg.max_caption_length):
        raise ConfigurationError(
            f"max_caption_length must be a whole number or null (got {cfg.max_caption_length!r})."
        )
    for name in ("max_caption_lines", "real_time_delay"):
        value = getattr(cfg, name)
        if not _is_int(value):
            raise ConfigurationError(f"{name} must be a whole number (got {value!r}).")

    if cfg.max_caption_length is not None and cfg.max_caption_length < MIN_CAPTION_LENGTH:
        raise ConfigurationError(
            f"max_caption_length must be at least {MIN_CAPTION_LENGTH} (got {cfg.max_caption_length})."
        )
    if cfg.max_caption_lines < 1:
        raise ConfigurationError(f"max_caption_lines must be at least 1 (got {cfg.max_caption_lines}).")
    if cfg.real_time_delay < 0:
        raise ConfigurationError(f"real_time_delay must be 0 or more seconds (got {cfg.real_time_delay}).")
    if cfg.captioning_mode not in CAPTIONING_MODES:
        raise ConfigurationError(
            f"Unknown captioning_mode '{cfg.captioning_mode}'. Valid modes: {', '.join(CAPTIONING_MODES)}"
        )
    return cfg
