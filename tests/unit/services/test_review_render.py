# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from unittest import TestCase

from selfreview.models.review import Message
from selfreview.services.review.review_render_ops import render_markdown, render_messages


class RenderMarkdownTest(TestCase):
    def test_emphasis_and_lists(self):
        html = render_markdown("**Situation**: outage\n\n- cut p99\n- shipped X")
        self.assertIn("<strong>Situation</strong>", html)
        self.assertIn("<li>cut p99</li>", html)

    def test_tables_and_strikethrough(self):
        html = render_markdown("| Goal | Rating |\n| --- | --- |\n| Grow Y | 5 |\n\n~~draft~~")
        self.assertIn("<table>", html)
        self.assertIn("<td>Grow Y</td>", html)
        self.assertIn("<s>draft</s>", html)

    def test_raw_html_is_escaped(self):
        html = render_markdown("<script>alert(1)</script>")
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)

    def test_only_assistant_turns_get_html(self):
        rendered = render_messages(
            [
                Message(role="user", content="**not rendered**"),
                Message(role="assistant", content="**rendered**"),
            ]
        )
        self.assertIsNone(rendered[0].html)
        self.assertEqual(rendered[0].content, "**not rendered**")
        self.assertEqual(rendered[1].html, "<p><strong>rendered</strong></p>\n")
        self.assertEqual(rendered[1].content, "**rendered**")
