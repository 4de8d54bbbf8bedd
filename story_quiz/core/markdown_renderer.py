"""Markdown rendering for chat message text.

Message strings use a small markdown subset (emphasis, line breaks). The Qt
bubbles display rich text, so every message goes through the same renderer
before it reaches a label.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MessageRenderer:
    """Converts message markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html, "breaks": True})
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a message string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return ""
        return self._markdown.render(sanitized).strip()

    @staticmethod
    def render_plain(text: str) -> str:
        """Escape user-typed text, keeping its line breaks."""

        return html.escape(text.strip()).replace("\n", "<br />")


# Shared instance; rendering only happens on the Qt thread.
renderer = MessageRenderer()
