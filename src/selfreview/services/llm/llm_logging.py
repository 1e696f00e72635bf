# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm logging unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

import datetime
import uuid
import os
import json
from typing import Any, Dict, List

MAX_LOG_ENTRIES = 100
REDACTED_HEADERS = ("authorization", "x-api-key", "x-goog-api-key")

# Global list to store LLM communication logs for the current session
llm_logs: List[Dict[str, Any]] = []


def _dump_path() -> str:
    default_path = os.path.join("data", "logs", "llm_raw.log")
    return os.getenv("SELFREVIEW_LLM_DUMP_PATH") or default_path


def add_llm_log(log_entry: Dict[str, Any]):
    """Add a log entry to the global list, keeping only the last 100 entries.

    If SELFREVIEW_LLM_DUMP is set, completed entries are also appended to a file.
    """
    if log_entry not in llm_logs:
        llm_logs.append(log_entry)
        if len(llm_logs) > MAX_LOG_ENTRIES:
            llm_logs.pop(0)

    # Only completed entries are dumped, so each call appears once in the file.
    if os.getenv("SELFREVIEW_LLM_DUMP") == "1" and log_entry.get("timestamp_end"):
        log_path = _dump_path()
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            with open(log_path, "a", encoding="utf-8") as f:
                f.write("=" * 80 + "\n")
                f.write(f"TIMESTAMP: {datetime.datetime.now().isoformat()}\n")
                f.write("-" * 80 + "\n")
                f.write(json.dumps(log_entry, indent=2, default=str) + "\n")
                f.write("=" * 80 + "\n\n")
        except OSError:
            # The raw dump is a dev-only aid; the in-memory log is authoritative.
            pass


def finish_log_entry(
    log_entry: Dict[str, Any],
    *,
    status_code: int | None = None,
    body: Any = None,
    error: str | None = None,
) -> None:
    """Stamp the end time and outcome on an entry, then (re)publish it."""
    log_entry["timestamp_end"] = datetime.datetime.now().isoformat()
    if status_code is not None:
        log_entry["response"]["status_code"] = status_code
    if body is not None:
        log_entry["response"]["body"] = body
    if error is not None:
        log_entry["response"]["error_detail"] = error
    add_llm_log(log_entry)


def create_log_entry(
    url: str, method: str, headers: Dict[str, str], body: Any, provider: str = ""
) -> Dict[str, Any]:
    """Create a new log entry structure with credentials masked."""
    safe_body = body
    if isinstance(body, dict):
        safe_body = body.copy()
        for key in ["api_key", "secret", "password"]:
            if key in safe_body:
                safe_body[key] = "REDACTED"

    return {
        "id": str(uuid.uuid4()),
        "provider": provider,
        "timestamp_start": datetime.datetime.now().isoformat(),
        "timestamp_end": None,
        "request": {
            "url": url,
            "method": method,
            "headers": {
                k: ("***" if k.lower() in REDACTED_HEADERS else v)
                for k, v in headers.items()
            },
            "body": safe_body,
        },
        "response": {
            "status_code": None,
            "body": None,
            "error_detail": None,
        },
    }
