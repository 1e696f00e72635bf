# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the review unit so this responsibility stays isolated, testable, and easy to evolve.

Pydantic models for the self-review form, the transcript and the API bodies.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]
SessionState = Literal["idle", "loading", "conversing"]


class Message(BaseModel):
    role: Role
    content: str


class RenderedMessage(Message):
    """A transcript entry as sent to the browser; ``html`` is set for assistant turns."""

    html: Optional[str] = None


class ReviewForm(BaseModel):
    """Values of the self-review form.

    ``ai`` is deliberately a plain string: an unknown provider id must reach
    the adapter, which answers with an error message instead of a 422.
    """

    ai: str = "gemini"
    api_key: str = ""
    temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    instructions: str = ""
    context: str = ""
    accomplishments: str = ""
    goals: str = ""
    questions_answers: str = ""
    user_input: str = ""


class ContinueRequest(BaseModel):
    """Body for ``POST /api/v1/review/continue``.

    Provider, key and temperature are optional; when given they replace the
    stored form values before the turn is sent.
    """

    user_input: str = ""
    ai: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class PublicReviewForm(BaseModel):
    """Form values as returned to the browser; the credential is never echoed."""

    ai: str
    has_api_key: bool
    temperature: float
    instructions: str
    context: str
    accomplishments: str
    goals: str
    questions_answers: str
    user_input: str


class ReviewStateResponse(BaseModel):
    """Response body for the ``/api/v1/review`` endpoints."""

    state: SessionState
    form: PublicReviewForm
    messages: list[RenderedMessage]


class ProviderInfo(BaseModel):
    id: str
    label: str
    model: str


class ProvidersResponse(BaseModel):
    """Response body for ``GET /api/v1/providers``."""

    providers: list[ProviderInfo]
    default: str
