"""Markdown rendering for lesson questions and notification bodies.

Quiz questions produced by teachers or by the generation service may contain
markdown (code spans, emphasis, tables). The API returns rendered fragments so
every client displays them identically.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)


renderer = MarkdownRenderer()
# MarkdownIt is safe for concurrent read-only renders, so the API worker
# threads share this instance.
