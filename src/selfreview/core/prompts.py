# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the prompts unit so this responsibility stays isolated, testable, and easy to evolve.

Centralized prompts configuration for LLM interactions.

This module contains the system message and the user prompt template used to
compose the initial self-review request. Both can be overridden globally
through resources/config/prompts.json.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from selfreview.core.config import CONFIG_DIR

DEFAULTS_JSON_PATH = Path(__file__).resolve().parent / "prompts_defaults.json"
USER_PROMPTS_JSON_PATH = CONFIG_DIR / "prompts.json"

SELF_REVIEW = "self_review"

# Form fields the user prompt template may reference.
PROMPT_FIELDS = (
    "instructions",
    "context",
    "accomplishments",
    "questions_answers",
    "goals",
)


def ensure_string(v: Any) -> str:
    if isinstance(v, list):
        return "\n".join(v)
    return str(v) if v is not None else ""


def _overlay_sections(prompts: Dict[str, Dict[str, str]], raw: Mapping[str, Any]):
    for section in ("system_messages", "user_prompts"):
        entries = raw.get(section)
        if isinstance(entries, dict):
            for k, v in entries.items():
                prompts[section][k] = ensure_string(v)


def load_prompts(
    defaults_path: Path = DEFAULTS_JSON_PATH,
    overrides_path: Path = USER_PROMPTS_JSON_PATH,
) -> Dict[str, Dict[str, str]]:
    """Load bundled defaults, then overlay user overrides from config/prompts.json."""
    prompts: Dict[str, Dict[str, str]] = {"system_messages": {}, "user_prompts": {}}
    with open(defaults_path, "r", encoding="utf-8") as f:
        _overlay_sections(prompts, json.load(f))

    if overrides_path.exists():
        try:
            with open(overrides_path, "r", encoding="utf-8") as f:
                _overlay_sections(prompts, json.load(f))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON at {overrides_path}: {e}") from e

    return prompts


_PROMPTS = load_prompts()
DEFAULT_SYSTEM_MESSAGES = _PROMPTS["system_messages"]
DEFAULT_USER_PROMPTS = _PROMPTS["user_prompts"]


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def get_system_message(message_type: str = SELF_REVIEW) -> str:
    return DEFAULT_SYSTEM_MESSAGES.get(message_type, "")


def build_user_prompt(
    values: Mapping[str, Any], prompt_type: str = SELF_REVIEW
) -> str:
    """Fill the user prompt template with the form's free-text fields.

    Missing fields render as empty strings; unknown placeholders in an
    overridden template are left as-is.
    """
    template = DEFAULT_USER_PROMPTS.get(prompt_type, "")
    fields = _KeepMissing(
        {name: ensure_string(values.get(name)) for name in PROMPT_FIELDS}
    )
    return template.format_map(fields)
