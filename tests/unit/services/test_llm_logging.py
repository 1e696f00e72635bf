# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import os
import tempfile
from pathlib import Path
from unittest import TestCase

from selfreview.services.llm import llm_logging


class LlmLoggingTest(TestCase):
    def setUp(self):
        llm_logging.llm_logs.clear()
        self.addCleanup(llm_logging.llm_logs.clear)

    def test_ring_keeps_last_entries(self):
        for i in range(llm_logging.MAX_LOG_ENTRIES + 5):
            llm_logging.add_llm_log(
                llm_logging.create_log_entry(f"http://x/{i}", "POST", {}, {})
            )
        self.assertEqual(len(llm_logging.llm_logs), llm_logging.MAX_LOG_ENTRIES)
        self.assertEqual(llm_logging.llm_logs[0]["request"]["url"], "http://x/5")

    def test_headers_and_body_secrets_are_masked(self):
        entry = llm_logging.create_log_entry(
            "http://x",
            "POST",
            {"Authorization": "Bearer k", "x-goog-api-key": "g", "Content-Type": "application/json"},
            {"api_key": "k", "model": "m"},
        )
        headers = entry["request"]["headers"]
        self.assertEqual(headers["Authorization"], "***")
        self.assertEqual(headers["x-goog-api-key"], "***")
        self.assertEqual(headers["Content-Type"], "application/json")
        self.assertEqual(entry["request"]["body"], {"api_key": "REDACTED", "model": "m"})

    def test_completed_entries_are_dumped_once(self):
        with tempfile.TemporaryDirectory() as td:
            dump_path = Path(td) / "logs" / "raw.log"
            original_path = os.environ.get("SELFREVIEW_LLM_DUMP_PATH")
            os.environ["SELFREVIEW_LLM_DUMP"] = "1"
            os.environ["SELFREVIEW_LLM_DUMP_PATH"] = str(dump_path)
            try:
                entry = llm_logging.create_log_entry("http://x", "POST", {}, {"q": 1})
                llm_logging.add_llm_log(entry)
                self.assertFalse(dump_path.exists())
                llm_logging.finish_log_entry(entry, status_code=200, body={"a": 1})
            finally:
                os.environ.pop("SELFREVIEW_LLM_DUMP")
                if original_path is not None:
                    os.environ["SELFREVIEW_LLM_DUMP_PATH"] = original_path
                else:
                    os.environ.pop("SELFREVIEW_LLM_DUMP_PATH")

            text = dump_path.read_text(encoding="utf-8")
        self.assertEqual(text.count("TIMESTAMP:"), 1)
        self.assertIn('"status_code": 200', text)
        self.assertEqual(len(llm_logging.llm_logs), 1)
