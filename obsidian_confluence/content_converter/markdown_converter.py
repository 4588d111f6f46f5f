"""Markdown converter using Pandoc.

This module converts note markdown to the XHTML body Confluence stores.
Obsidian-only syntax still present after link and embed resolution is
rewritten first, outside fenced code, so Pandoc sees plain markdown.
"""

import re
import subprocess

from ..confluence_client.errors import ConversionError
from .code_fences import transform_unfenced

# Raw HTML in notes is rendered as text; bare URLs become links
PANDOC_INPUT_FORMAT = 'markdown-implicit_figures-raw_html+autolink_bare_uris'
PANDOC_TIMEOUT = 10

EMBED_TOKEN_PATTERN = re.compile(r'!\[\[([^\]]+)\]\]')
WIKI_TOKEN_PATTERN = re.compile(r'\[\[([^\]]+)\]\]')


def _embed_as_text(match) -> str:
    target = match.group(1).split('|')[0].strip()
    return f"Embedded content not synced: {target}"


def _wiki_link_as_markdown(match) -> str:
    parts = match.group(1).split('|')
    link = parts[0].strip()
    label = parts[1].strip() if len(parts) > 1 and parts[1].strip() else link
    return f"[{label}]({link})"


class MarkdownConverter:
    """Converts markdown to XHTML using Pandoc."""

    def __init__(self):
        """Initialize MarkdownConverter and verify Pandoc is available.

        Raises:
            ConversionError: If Pandoc is not found on system PATH
        """
        if not self._pandoc_installed():
            raise ConversionError(
                "Pandoc not found. Install: brew install pandoc (macOS) or "
                "apt-get install pandoc (Linux) or download from "
                "https://pandoc.org/installing.html"
            )

    def preprocess(
        self,
        markdown: str,
        convert_wiki_links: bool = True,
        handle_embeds_as_text: bool = True
    ) -> str:
        """Rewrite leftover Obsidian syntax outside fenced code.

        Args:
            markdown: Markdown string
            convert_wiki_links: Turn ``[[a|b]]`` into ``[b](a)``
            handle_embeds_as_text: Turn ``![[x|y]]`` into a plain-text notice

        Returns:
            Markdown with the selected rewrites applied
        """
        if handle_embeds_as_text:
            markdown = transform_unfenced(markdown, EMBED_TOKEN_PATTERN, _embed_as_text)
        if convert_wiki_links:
            markdown = transform_unfenced(markdown, WIKI_TOKEN_PATTERN, _wiki_link_as_markdown)
        return markdown

    def markdown_to_xhtml(
        self,
        markdown: str,
        convert_wiki_links: bool = True,
        handle_embeds_as_text: bool = True
    ) -> str:
        """Convert markdown to XHTML using Pandoc.

        Args:
            markdown: Markdown string
            convert_wiki_links: See preprocess()
            handle_embeds_as_text: See preprocess()

        Returns:
            XHTML string suitable for Confluence storage format

        Raises:
            ConversionError: If conversion fails or times out
        """
        if not markdown:
            return ""

        markdown = self.preprocess(
            markdown,
            convert_wiki_links=convert_wiki_links,
            handle_embeds_as_text=handle_embeds_as_text,
        )

        try:
            result = subprocess.run(
                ["pandoc", "-f", PANDOC_INPUT_FORMAT, "-t", "html"],
                input=markdown,
                text=True,
                capture_output=True,
                check=True,
                timeout=PANDOC_TIMEOUT
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise ConversionError(f"Pandoc conversion failed: {e.stderr}")
        except subprocess.TimeoutExpired:
            raise ConversionError(f"Pandoc conversion timed out (>{PANDOC_TIMEOUT}s)")

    def _pandoc_installed(self) -> bool:
        """Check if Pandoc is installed and available on PATH."""
        try:
            result = subprocess.run(
                ["which", "pandoc"],
                capture_output=True,
                timeout=5
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
