# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the review export ops unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from selfreview.models.review import Message

EXPORT_FILENAME = "self-review-conversation.txt"
EXPORT_MEDIA_TYPE = "text/plain; charset=utf-8"
EXPORT_SEPARATOR = "\n\n---\n\n"


def _role_and_content(message: Union[Message, Mapping[str, Any]]) -> tuple[str, str]:
    if isinstance(message, Message):
        return message.role, message.content
    return str(message.get("role") or ""), str(message.get("content") or "")


def serialize_transcript(
    messages: Iterable[Union[Message, Mapping[str, Any]]],
) -> str:
    """Render each message as ``ROLE:\\n<content>``, joined by a rule line."""
    blocks = []
    for message in messages:
        role, content = _role_and_content(message)
        blocks.append(f"{role.upper()}:\n{content}")
    return EXPORT_SEPARATOR.join(blocks)
