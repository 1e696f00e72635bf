# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import os
import tempfile
import json
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from selfreview.core.config import DEFAULT_PROVIDER_SETTINGS, load_machine_config
from selfreview.services.exceptions import ConfigurationError
from selfreview.services.llm.llm_request_helpers import resolve_provider_settings


class ConfigLoaderTest(TestCase):
    def test_machine_config_env_overrides_file_and_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            cfg_path = Path(td) / "machine.json"
            cfg_path.write_text(
                json.dumps(
                    {
                        "providers": {
                            "openai": {
                                "base_url": "${PROXY_BASE}/v1",
                                "model": "gpt-old",
                                "timeout_s": 10,
                            }
                        }
                    }
                ),
                encoding="utf-8",
            )

            os.environ["PROXY_BASE"] = "https://proxy.example.com"
            os.environ["OPENAI_MODEL"] = "gpt-env"
            os.environ["ANTHROPIC_TIMEOUT_S"] = "20"

            try:
                cfg = load_machine_config(cfg_path)
            finally:
                # cleanup env vars to avoid cross-test pollution
                os.environ.pop("PROXY_BASE")
                os.environ.pop("OPENAI_MODEL")
                os.environ.pop("ANTHROPIC_TIMEOUT_S")

            providers = cfg["providers"]
            self.assertEqual(providers["openai"]["base_url"], "https://proxy.example.com/v1")
            self.assertEqual(providers["openai"]["model"], "gpt-env")
            self.assertEqual(providers["openai"]["timeout_s"], 10)
            self.assertEqual(providers["claude"]["timeout_s"], 20)
            self.assertEqual(providers["claude"]["max_tokens"], 4096)
            self.assertEqual(providers["gemini"]["model"], "gemini-1.5-flash")

    def test_missing_file_yields_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = load_machine_config(Path(td) / "absent.json")
        self.assertEqual(cfg["providers"], DEFAULT_PROVIDER_SETTINGS)

    def test_malformed_json_raises_value_error(self):
        with tempfile.TemporaryDirectory() as td:
            cfg_path = Path(td) / "machine.json"
            cfg_path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_machine_config(cfg_path)

    def test_defaults_are_not_mutated_by_callers(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = load_machine_config(Path(td) / "absent.json")
        cfg["providers"]["openai"]["model"] = "changed"
        self.assertEqual(DEFAULT_PROVIDER_SETTINGS["openai"]["model"], "gpt-4o")


class ProviderSettingsTest(TestCase):
    @patch("selfreview.services.llm.llm_request_helpers.load_machine_config")
    def test_resolves_and_normalizes(self, mock_config):
        mock_config.return_value = {
            "providers": {
                "openai": {
                    "base_url": "http://localhost:1234/v1/",
                    "model": "local",
                    "timeout_s": "not-a-number",
                }
            }
        }
        settings = resolve_provider_settings("openai")
        self.assertEqual(settings["base_url"], "http://localhost:1234/v1")
        self.assertEqual(settings["model"], "local")
        self.assertEqual(settings["timeout_s"], 60)

    @patch("selfreview.services.llm.llm_request_helpers.load_machine_config")
    def test_missing_model_is_a_configuration_error(self, mock_config):
        mock_config.return_value = {"providers": {"gemini": {"base_url": "http://x"}}}
        with self.assertRaises(ConfigurationError):
            resolve_provider_settings("gemini")
