# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the review session unit so this responsibility stays isolated, testable, and easy to evolve.

The review session owns the form values and the transcript and drives the
idle -> loading -> conversing flow. The transcript lives only in memory; it is
reset by ``clear`` or by a new ``submit``.
"""

from __future__ import annotations

from typing import List, Optional

import selfreview.services.llm.llm as llm
from selfreview.core.prompts import build_user_prompt, get_system_message
from selfreview.models.review import (
    Message,
    PublicReviewForm,
    ReviewForm,
    ReviewStateResponse,
    SessionState,
)
from selfreview.services.exceptions import BadRequestError, ConflictError
from selfreview.services.review.review_export_ops import serialize_transcript
from selfreview.services.review.review_render_ops import render_messages

NO_RESPONSE_TEXT = "No response from AI."


class ReviewSession:
    def __init__(self, form: Optional[ReviewForm] = None):
        self.form = form or ReviewForm()
        self.messages: List[Message] = []
        self.loading = False

    @property
    def state(self) -> SessionState:
        if self.loading:
            return "loading"
        return "conversing" if self.messages else "idle"

    def _ensure_not_loading(self) -> None:
        if self.loading:
            raise ConflictError("A request is already in progress.")

    async def _ask(self, messages: List[Message]) -> str:
        result = await llm.get_ai_response(
            self.form.ai,
            self.form.api_key,
            self.form.temperature,
            [m.model_dump() for m in messages],
        )
        return result or NO_RESPONSE_TEXT

    async def submit(self, form: ReviewForm) -> List[Message]:
        """Generate the initial self-review, replacing any previous transcript.

        The system prompt is sent with the request but is not part of the
        stored transcript, so continuations go out without it.
        """
        self._ensure_not_loading()
        if not form.api_key.strip():
            raise BadRequestError("API key is required.")

        self.form = form
        self.messages = []
        user_prompt = build_user_prompt(form.model_dump())
        request = [
            Message(role="system", content=get_system_message()),
            Message(role="user", content=user_prompt),
        ]

        self.loading = True
        try:
            reply = await self._ask(request)
        finally:
            self.loading = False

        self.messages = [
            Message(role="user", content=user_prompt),
            Message(role="assistant", content=reply),
        ]
        return self.messages

    async def continue_conversation(
        self,
        user_input: str,
        *,
        ai: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> bool:
        """Send one follow-up turn. Returns False when there was nothing to send."""
        if not user_input or not user_input.strip():
            return False
        self._ensure_not_loading()
        if not self.messages:
            raise BadRequestError(
                "Generate a self-review before continuing the conversation."
            )

        updates = {
            k: v
            for k, v in (("ai", ai), ("api_key", api_key), ("temperature", temperature))
            if v is not None
        }
        self.form = self.form.model_copy(update={**updates, "user_input": ""})

        self.messages.append(Message(role="user", content=user_input))
        self.loading = True
        try:
            reply = await self._ask(list(self.messages))
        finally:
            self.loading = False
        self.messages.append(Message(role="assistant", content=reply))
        return True

    def clear(self) -> None:
        """Drop the transcript; form values stay as they are."""
        self._ensure_not_loading()
        self.messages = []

    def export_text(self) -> str:
        return serialize_transcript(self.messages)

    def public_form(self) -> PublicReviewForm:
        values = self.form.model_dump(exclude={"api_key"})
        return PublicReviewForm(has_api_key=bool(self.form.api_key.strip()), **values)

    def snapshot(self) -> ReviewStateResponse:
        return ReviewStateResponse(
            state=self.state,
            form=self.public_form(),
            messages=render_messages(self.messages),
        )


_active_session: Optional[ReviewSession] = None


def get_active_session() -> ReviewSession:
    global _active_session
    if _active_session is None:
        _active_session = ReviewSession()
    return _active_session


def reset_active_session() -> ReviewSession:
    """Start over with a fresh session (form values included)."""
    global _active_session
    _active_session = ReviewSession()
    return _active_session
