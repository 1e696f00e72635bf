# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the llm unit so this responsibility stays isolated, testable, and easy to evolve.

"""LLM adapter facade.

``get_ai_response`` is the single entry point used by the review session. It
dispatches to the per-vendor translators in ``llm_providers`` and never raises:
every failure comes back as a string starting with ``"Error: "``.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence

import httpx

from selfreview.services.exceptions import ServiceError, UpstreamError
from selfreview.services.llm import llm_logging as _llm_logging
from selfreview.services.llm.llm_providers import (
    PROVIDER_TRANSLATORS,
    Provider,
    VendorRequest,
)
from selfreview.services.llm.llm_request_helpers import (
    build_timeout,
    resolve_provider_settings,
    vendor_error_message,
)

ERROR_PREFIX = "Error: "

# Re-exported for the debug endpoint and tests.
llm_logs = _llm_logging.llm_logs
add_llm_log = _llm_logging.add_llm_log
create_log_entry = _llm_logging.create_log_entry


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, ServiceError):
        return exc.detail
    text = str(exc).strip()
    return text or type(exc).__name__


async def _execute_llm_request(
    request: VendorRequest, provider: Provider, timeout_s: int
) -> Dict[str, Any]:
    log_entry = create_log_entry(
        request.url, "POST", request.headers, request.body, provider=provider.value
    )
    add_llm_log(log_entry)

    async with httpx.AsyncClient(timeout=build_timeout(timeout_s)) as client:
        try:
            r = await client.post(request.url, headers=request.headers, json=request.body)
        except httpx.HTTPError as e:
            _llm_logging.finish_log_entry(log_entry, error=describe_error(e))
            raise

    if r.status_code >= 400:
        detail = vendor_error_message(r)
        _llm_logging.finish_log_entry(log_entry, status_code=r.status_code, error=detail)
        raise UpstreamError(detail)

    try:
        resp_json = r.json()
    except ValueError as e:
        _llm_logging.finish_log_entry(
            log_entry, status_code=r.status_code, error="Malformed JSON response"
        )
        raise UpstreamError(f"Malformed response from {provider.value}.") from e

    _llm_logging.finish_log_entry(log_entry, status_code=r.status_code, body=resp_json)
    if not isinstance(resp_json, dict):
        raise UpstreamError(f"Malformed response from {provider.value}.")
    return resp_json


async def get_ai_response(
    ai: str,
    api_key: str,
    temperature: float,
    messages: Sequence[Mapping[str, Any]],
) -> str:
    """Send ``messages`` to the selected provider and return the reply text.

    Returns ``"Error: <detail>"`` instead of raising, whatever went wrong:
    unknown provider id, missing configuration, network failure, vendor error
    status or an unexpected response shape.
    """
    try:
        provider = Provider.parse(ai)
        settings = resolve_provider_settings(provider.value)
        translator = PROVIDER_TRANSLATORS[provider]
        request = translator.build(settings, api_key, temperature, messages)
        data = await _execute_llm_request(request, provider, settings["timeout_s"])
        return translator.parse(data)
    except Exception as e:
        return f"{ERROR_PREFIX}{describe_error(e)}"
