# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the conftest unit so this responsibility stays isolated, testable, and easy to evolve."""

import os
import tempfile
import pytest
from pathlib import Path

# Variables that would redirect provider calls or enable raw dumps on a
# developer machine; tests always start from the built-in defaults.
_ISOLATED_VARS = [
    f"{prefix}_{suffix}"
    for prefix in ("GEMINI", "OPENAI", "ANTHROPIC")
    for suffix in ("BASE_URL", "MODEL", "TIMEOUT_S")
] + ["SELFREVIEW_LLM_DUMP", "SELFREVIEW_LLM_DUMP_PATH"]


@pytest.fixture(scope="session", autouse=True)
def session_temp_env():
    temp_dir = tempfile.TemporaryDirectory(prefix="selfreview_test_session_")
    originals = {name: os.environ.pop(name, None) for name in _ISOLATED_VARS}

    # Safety net: if a test enables the dump without a path, keep it out of the repo.
    os.environ["SELFREVIEW_LLM_DUMP_PATH"] = str(Path(temp_dir.name) / "llm_raw.log")

    yield

    temp_dir.cleanup()
    for name, value in originals.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)
