# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm request helpers unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from typing import Any, Dict

import httpx

from selfreview.core.config import CONFIG_DIR, load_machine_config
from selfreview.services.exceptions import ConfigurationError

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_TIMEOUT_S = 60


def build_headers(provider_id: str, api_key: str | None) -> Dict[str, str]:
    """Return the JSON + auth headers each vendor expects."""
    headers: Dict[str, str] = {"Content-Type": "application/json"}
    if not api_key:
        return headers
    if provider_id == "gemini":
        headers["x-goog-api-key"] = api_key
    elif provider_id == "claude":
        headers["x-api-key"] = api_key
        headers["anthropic-version"] = ANTHROPIC_VERSION
    else:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def build_timeout(timeout_s: int) -> httpx.Timeout:
    try:
        return httpx.Timeout(float(timeout_s or DEFAULT_TIMEOUT_S))
    except (TypeError, ValueError):
        return httpx.Timeout(float(DEFAULT_TIMEOUT_S))


def resolve_provider_settings(provider_id: str) -> Dict[str, Any]:
    """Resolve base_url, model, timeout_s (and extras) for one provider.

    Precedence follows load_machine_config: env > machine.json > defaults.
    """
    machine = load_machine_config(CONFIG_DIR / "machine.json") or {}
    providers = machine.get("providers") or {}
    cfg = providers.get(provider_id) if isinstance(providers, dict) else None
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"No configuration for provider '{provider_id}'.")

    base_url = cfg.get("base_url")
    model = cfg.get("model")
    if not base_url or not model:
        raise ConfigurationError(
            f"Missing base_url or model for provider '{provider_id}'."
        )

    try:
        timeout_s = int(cfg.get("timeout_s") or DEFAULT_TIMEOUT_S)
    except (TypeError, ValueError):
        timeout_s = DEFAULT_TIMEOUT_S

    resolved = dict(cfg)
    resolved.update(
        base_url=str(base_url).rstrip("/"), model=str(model), timeout_s=timeout_s
    )
    return resolved


def vendor_error_message(response: httpx.Response) -> str:
    """Describe a failed vendor response as ``"<status> <message>"``.

    All three vendors report failures as ``{"error": {"message": ...}}``; the
    raw body (truncated) is used when that shape is absent.
    """
    message = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            message = err.get("message")
        elif isinstance(err, str):
            message = err
    if not message:
        message = response.text.strip()[:500] or response.reason_phrase
    return f"{response.status_code} {message}".strip()
