# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the config unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Configuration loading utilities for the self-review assistant.

Conventions:
- Machine-specific config: resources/config/machine.json
- Environment variables override JSON values.
- JSON values can reference environment variables using ${VAR_NAME} placeholders.

Only generic JSON dicts are returned to keep things simple.
"""

from __future__ import annotations

import copy
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
CONFIG_DIR = BASE_DIR / "resources" / "config"
DATA_DIR = BASE_DIR / "data"
LOGS_DIR = DATA_DIR / "logs"
STATIC_DIR = BASE_DIR / "static"

# Built-in provider settings; machine.json and the environment layer on top.
DEFAULT_PROVIDER_SETTINGS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "model": "gemini-1.5-flash",
        "timeout_s": 60,
    },
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o",
        "timeout_s": 60,
    },
    "claude": {
        "base_url": "https://api.anthropic.com/v1",
        "model": "claude-3-opus-20240229",
        "timeout_s": 60,
        "max_tokens": 4096,
    },
}

# provider id -> environment variable prefix
_ENV_PREFIXES = {
    "gemini": "GEMINI",
    "openai": "OPENAI",
    "claude": "ANTHROPIC",
}

_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _interpolate_env(value: Any) -> Any:
    """Interpolate ${VAR} placeholders within strings using environment variables.

    Non-string types are returned unchanged.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, match.group(0))  # leave placeholder if unset

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deeply merge mapping 'override' into dict 'base'. Returns new dict.

    - For dict values, merges recursively.
    - For lists and scalars, override replaces base.
    """
    result: Dict[str, Any] = dict(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(result.get(k), Mapping):
            result[k] = _deep_merge(dict(result[k]), v)  # type: ignore[index]
        else:
            result[k] = v
    return result


def load_json_file(path: os.PathLike[str] | str | None) -> Dict[str, Any]:
    """Load JSON from path if it exists; return empty dict if missing.

    Raises ValueError for malformed JSON.
    """
    if path is None:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON at {p}: {e}") from e


def _env_overrides_for_providers() -> Dict[str, Any]:
    """Collect <PREFIX>_BASE_URL / _MODEL / _TIMEOUT_S variables per provider.

    Prefixes: GEMINI -> providers.gemini, OPENAI -> providers.openai,
    ANTHROPIC -> providers.claude. Timeouts become ints when parseable.
    """
    providers: Dict[str, Any] = {}
    for provider_id, prefix in _ENV_PREFIXES.items():
        base_url = os.getenv(f"{prefix}_BASE_URL")
        model = os.getenv(f"{prefix}_MODEL")
        timeout_s = os.getenv(f"{prefix}_TIMEOUT_S")

        cfg: Dict[str, Any] = {}
        if base_url is not None:
            cfg["base_url"] = base_url
        if model is not None:
            cfg["model"] = model
        if timeout_s is not None:
            try:
                cfg["timeout_s"] = int(timeout_s)
            except ValueError:
                cfg["timeout_s"] = timeout_s
        if cfg:
            providers[provider_id] = cfg
    return {"providers": providers} if providers else {}


def load_machine_config(
    path: os.PathLike[str] | str | None = CONFIG_DIR / "machine.json",
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Load machine configuration applying precedence and interpolation.

    Precedence: env overrides > JSON file > defaults
    """
    if defaults is None:
        defaults = {"providers": DEFAULT_PROVIDER_SETTINGS}
    json_config = load_json_file(path)
    json_config = _interpolate_env(json_config)
    # Merge JSON over defaults, then env over that
    merged = _deep_merge(copy.deepcopy(dict(defaults)), json_config)
    merged = _deep_merge(merged, _env_overrides_for_providers())
    return merged
