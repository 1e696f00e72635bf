# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm providers unit so this responsibility stays isolated, testable, and easy to evolve.

Per-vendor translation between the provider-agnostic message list
(``[{"role": ..., "content": ...}]``) and each vendor's HTTP/JSON contract.

Every provider has one request builder and one response parser; both are pure
so they can be tested without a network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from selfreview.services.exceptions import (
    BadRequestError,
    InvalidProviderError,
    UpstreamError,
)
from selfreview.services.llm.llm_request_helpers import build_headers

CLAUDE_NO_TEXT_RESPONSE = "No text response from Claude."
CLAUDE_DEFAULT_MAX_TOKENS = 4096

# A candidate ending for one of these reasons carries no usable answer.
GEMINI_BLOCKING_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "LANGUAGE", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}
)


class Provider(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    CLAUDE = "claude"

    @classmethod
    def parse(cls, value: Any) -> "Provider":
        """Map a provider id onto the enum; anything else is an invalid selection."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidProviderError() from None


PROVIDER_LABELS = {
    Provider.GEMINI: "Gemini",
    Provider.OPENAI: "OpenAI",
    Provider.CLAUDE: "Claude",
}


@dataclass
class VendorRequest:
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any] = field(default_factory=dict)


def split_system_message(
    messages: Sequence[Mapping[str, Any]],
) -> Tuple[str, List[Dict[str, Any]]]:
    """Return (first system message text, copies of all non-system messages)."""
    system_prompt = next(
        (str(m.get("content") or "") for m in messages if m.get("role") == "system"),
        "",
    )
    conversation = [
        {"role": m.get("role"), "content": str(m.get("content") or "")}
        for m in messages
        if m.get("role") != "system"
    ]
    return system_prompt, conversation


# --------------------------------------------------------------------- gemini


def build_gemini_request(
    settings: Mapping[str, Any],
    api_key: str,
    temperature: float,
    messages: Sequence[Mapping[str, Any]],
) -> VendorRequest:
    """Build a generateContent call replaying the transcript as chat history.

    The chat pattern has no system slot, so the system text is prepended to
    the first user turn. Every message but the last becomes history
    (assistant -> model); the last one is sent as the new user turn.
    Temperature is not forwarded on this path.
    """
    system_prompt, conversation = split_system_message(messages)
    if not conversation:
        raise BadRequestError("No messages to send.")

    if system_prompt and conversation[0]["role"] == "user":
        conversation[0]["content"] = f"{system_prompt}\n\n{conversation[0]['content']}"

    history = [
        {
            "role": "model" if m["role"] == "assistant" else "user",
            "parts": [{"text": m["content"]}],
        }
        for m in conversation[:-1]
    ]
    last = conversation[-1]
    contents = history + [{"role": "user", "parts": [{"text": last["content"]}]}]

    return VendorRequest(
        url=f"{settings['base_url']}/models/{settings['model']}:generateContent",
        headers=build_headers(Provider.GEMINI.value, api_key),
        body={"contents": contents},
    )


def parse_gemini_response(data: Mapping[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise UpstreamError(f"Gemini blocked the prompt ({reason}).")
        raise UpstreamError("Gemini returned no candidates.")
    content = candidates[0].get("content") or {}
    finish_reason = candidates[0].get("finishReason")
    if finish_reason in GEMINI_BLOCKING_FINISH_REASONS:
        raise UpstreamError(f"Gemini stopped the response ({finish_reason}).")
    parts = content.get("parts") or []
    return "".join(str(p.get("text", "")) for p in parts if "text" in p)


# --------------------------------------------------------------------- openai


def build_openai_request(
    settings: Mapping[str, Any],
    api_key: str,
    temperature: float,
    messages: Sequence[Mapping[str, Any]],
) -> VendorRequest:
    """Pass the role/content list through unchanged."""
    return VendorRequest(
        url=f"{settings['base_url']}/chat/completions",
        headers=build_headers(Provider.OPENAI.value, api_key),
        body={
            "messages": [
                {"role": m.get("role"), "content": m.get("content")} for m in messages
            ],
            "model": settings["model"],
            "temperature": temperature,
        },
    )


def parse_openai_response(data: Mapping[str, Any]) -> str:
    choices = data.get("choices") or []
    if not choices:
        raise UpstreamError("OpenAI returned no choices.")
    message = choices[0].get("message") or {}
    return message.get("content") or ""


# --------------------------------------------------------------------- claude


def build_claude_request(
    settings: Mapping[str, Any],
    api_key: str,
    temperature: float,
    messages: Sequence[Mapping[str, Any]],
) -> VendorRequest:
    """Move the system message into its own field; roles other than assistant become user."""
    system_prompt, conversation = split_system_message(messages)
    body: Dict[str, Any] = {
        "model": settings["model"],
        "max_tokens": int(settings.get("max_tokens") or CLAUDE_DEFAULT_MAX_TOKENS),
        "temperature": temperature,
        "messages": [
            {
                "role": "assistant" if m["role"] == "assistant" else "user",
                "content": m["content"],
            }
            for m in conversation
        ],
    }
    if system_prompt:
        body["system"] = system_prompt

    return VendorRequest(
        url=f"{settings['base_url']}/messages",
        headers=build_headers(Provider.CLAUDE.value, api_key),
        body=body,
    )


def parse_claude_response(data: Mapping[str, Any]) -> str:
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            return str(block.get("text", ""))
    return CLAUDE_NO_TEXT_RESPONSE


@dataclass(frozen=True)
class ProviderTranslator:
    build: Callable[..., VendorRequest]
    parse: Callable[[Mapping[str, Any]], str]


PROVIDER_TRANSLATORS: Dict[Provider, ProviderTranslator] = {
    Provider.GEMINI: ProviderTranslator(build_gemini_request, parse_gemini_response),
    Provider.OPENAI: ProviderTranslator(build_openai_request, parse_openai_response),
    Provider.CLAUDE: ProviderTranslator(build_claude_request, parse_claude_response),
}
