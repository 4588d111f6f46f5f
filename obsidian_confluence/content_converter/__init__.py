"""Content conversion for Confluence publishing.

Resolves Obsidian links and image embeds, converts markdown to XHTML with
Pandoc and rewrites attachment placeholders into storage format markup.
"""

from .embed_resolver import AttachmentRegistry, EmbedResolver
from .link_resolver import WikiLinkResolver, find_wiki_links
from .markdown_converter import MarkdownConverter
from .storage_format import replace_attachment_placeholders

__all__ = [
    'AttachmentRegistry',
    'EmbedResolver',
    'MarkdownConverter',
    'WikiLinkResolver',
    'find_wiki_links',
    'replace_attachment_placeholders',
]
