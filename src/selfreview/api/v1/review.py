# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the review unit so this responsibility stays isolated, testable, and easy to evolve.

API endpoints for generating the self-review and continuing the conversation.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from selfreview.models.review import (
    ContinueRequest,
    ReviewForm,
    ReviewStateResponse,
)
from selfreview.services.review.review_export_ops import (
    EXPORT_FILENAME,
    EXPORT_MEDIA_TYPE,
)
from selfreview.services.review.review_session import get_active_session

router = APIRouter(prefix="/review", tags=["Review"])


@router.get("", response_model=ReviewStateResponse)
async def api_get_review() -> ReviewStateResponse:
    """Return the session state, form values (credential masked) and transcript."""
    return get_active_session().snapshot()


@router.post("/generate", response_model=ReviewStateResponse)
async def api_generate_review(form: ReviewForm) -> ReviewStateResponse:
    """Compose the prompt from the form and ask the selected provider.

    Provider failures do not change the status code; they come back as an
    assistant message starting with "Error: ".
    """
    session = get_active_session()
    await session.submit(form)
    return session.snapshot()


@router.post("/continue", response_model=ReviewStateResponse)
async def api_continue_review(body: ContinueRequest) -> ReviewStateResponse:
    """Append a follow-up user message and the provider's reply.

    Blank input is accepted and changes nothing.
    """
    session = get_active_session()
    await session.continue_conversation(
        body.user_input,
        ai=body.ai,
        api_key=body.api_key,
        temperature=body.temperature,
    )
    return session.snapshot()


@router.post("/clear", response_model=ReviewStateResponse)
async def api_clear_review() -> ReviewStateResponse:
    session = get_active_session()
    session.clear()
    return session.snapshot()


@router.get("/download")
async def api_download_review() -> PlainTextResponse:
    """Export the transcript as a plain-text attachment."""
    return PlainTextResponse(
        get_active_session().export_text(),
        media_type=EXPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
