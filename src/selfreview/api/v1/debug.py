# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the debug unit so this responsibility stays isolated, testable, and easy to evolve.

Read-only views over the in-memory provider call log, plus a reset.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter

from selfreview.services.llm.llm import llm_logs
from selfreview.services.llm.llm_providers import Provider

router = APIRouter(prefix="/debug", tags=["debug"])


def _entries_for(provider: Optional[str]) -> List[Dict[str, Any]]:
    if not provider:
        return list(llm_logs)
    wanted = Provider.parse(provider).value
    return [entry for entry in llm_logs if entry.get("provider") == wanted]


@router.get("/llm_logs")
async def get_llm_logs(provider: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return logged provider calls, optionally only those for one provider."""
    return _entries_for(provider)


@router.get("/llm_logs/summary")
async def get_llm_logs_summary() -> Dict[str, Dict[str, int]]:
    """Count logged calls per provider, split into completed, failed and pending."""
    summary = {p.value: {"calls": 0, "failed": 0, "pending": 0} for p in Provider}
    for entry in llm_logs:
        counts = summary.get(entry.get("provider") or "")
        if counts is None:
            continue
        counts["calls"] += 1
        if entry.get("timestamp_end") is None:
            counts["pending"] += 1
        elif entry["response"].get("error_detail"):
            counts["failed"] += 1
    return summary


@router.delete("/llm_logs")
async def clear_llm_logs():
    """Clear the LLM communication logs."""
    llm_logs.clear()
    return {"status": "ok"}
