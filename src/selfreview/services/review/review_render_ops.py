# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the review render ops unit so this responsibility stays isolated, testable, and easy to evolve.

Assistant replies are Markdown (GitHub flavour: tables, strikethrough).
They are turned into HTML here so the page can show them formatted.
Raw HTML inside a reply is escaped, never passed through.
"""

from __future__ import annotations

from typing import List

from markdown_it import MarkdownIt

from selfreview.models.review import Message, RenderedMessage

_markdown = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])


def render_markdown(text: str) -> str:
    return _markdown.render(text or "")


def render_messages(messages: List[Message]) -> List[RenderedMessage]:
    """Attach rendered HTML to assistant turns; user turns stay plain text."""
    rendered = []
    for m in messages:
        html = render_markdown(m.content) if m.role == "assistant" else None
        rendered.append(RenderedMessage(role=m.role, content=m.content, html=html))
    return rendered
