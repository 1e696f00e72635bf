# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the providers unit so this responsibility stays isolated, testable, and easy to evolve."""

from fastapi import APIRouter

from selfreview.core.config import CONFIG_DIR, load_machine_config
from selfreview.models.review import ProviderInfo, ProvidersResponse, ReviewForm
from selfreview.services.llm.llm_providers import PROVIDER_LABELS, Provider

router = APIRouter(tags=["Providers"])


@router.get("/providers", response_model=ProvidersResponse)
async def api_list_providers() -> ProvidersResponse:
    """List the selectable providers with the model each one is configured to use."""
    machine = load_machine_config(CONFIG_DIR / "machine.json") or {}
    configured = machine.get("providers") or {}

    providers = []
    for provider in Provider:
        cfg = configured.get(provider.value) if isinstance(configured, dict) else None
        model = cfg.get("model", "") if isinstance(cfg, dict) else ""
        providers.append(
            ProviderInfo(
                id=provider.value, label=PROVIDER_LABELS[provider], model=str(model)
            )
        )

    return ProvidersResponse(providers=providers, default=ReviewForm().ai)
