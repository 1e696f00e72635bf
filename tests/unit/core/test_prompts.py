# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import json
import tempfile
from pathlib import Path
from unittest import TestCase

from selfreview.core import prompts
from selfreview.core.prompts import build_user_prompt, get_system_message, load_prompts


class PromptsTest(TestCase):
    def test_default_system_message_frames_sbi(self):
        system = get_system_message()
        self.assertIn("SBI (Situation - Behavior - Impact)", system)
        self.assertIn("Strictly no assumptions or exaggerations.", system)

    def test_default_system_message_is_a_single_line(self):
        system = get_system_message()
        self.assertNotIn("\n", system)
        self.assertTrue(
            system.startswith(
                "You are an AI assistant helping to build a self-review for an "
                "Engineering Leadership role. Use strict SBI"
            ),
            system,
        )
        self.assertIn(
            "Do not synthesize any content not present in the input. Avoid repetition",
            system,
        )

    def test_user_prompt_layout(self):
        prompt = build_user_prompt(
            {
                "instructions": "I1",
                "context": "C1",
                "accomplishments": "A1",
                "questions_answers": "Q1",
                "goals": "G1",
            }
        )
        self.assertEqual(
            prompt,
            "Instructions: I1\n\nContext: C1\n\nAccomplishments: A1\n\n"
            "Performance Ratings and Questions:\nQ1\n\nGoals: G1",
        )

    def test_braces_in_user_text_are_kept_verbatim(self):
        prompt = build_user_prompt({"accomplishments": "Cut p99 {latency} by 40%"})
        self.assertIn("Accomplishments: Cut p99 {latency} by 40%", prompt)
        self.assertIn("Context: \n", prompt)

    def test_overrides_replace_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            overrides = Path(td) / "prompts.json"
            overrides.write_text(
                json.dumps(
                    {
                        "system_messages": {"self_review": ["Line one", "Line two"]},
                        "user_prompts": {"self_review": "Only {goals} and {unknown}"},
                    }
                ),
                encoding="utf-8",
            )
            loaded = load_prompts(prompts.DEFAULTS_JSON_PATH, overrides)

        self.assertEqual(loaded["system_messages"]["self_review"], "Line one\nLine two")
        self.assertEqual(loaded["user_prompts"]["self_review"], "Only {goals} and {unknown}")

    def test_unknown_placeholders_survive_formatting(self):
        original = dict(prompts.DEFAULT_USER_PROMPTS)
        prompts.DEFAULT_USER_PROMPTS["self_review"] = "Only {goals} and {unknown}"
        try:
            self.assertEqual(
                build_user_prompt({"goals": "Grow Y"}), "Only Grow Y and {unknown}"
            )
        finally:
            prompts.DEFAULT_USER_PROMPTS.clear()
            prompts.DEFAULT_USER_PROMPTS.update(original)
