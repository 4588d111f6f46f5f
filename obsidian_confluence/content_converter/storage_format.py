"""Post-processing of converter output into Confluence storage format."""

import html
import logging
import re

from .embed_resolver import ATTACHMENT_SCHEME, filename_from_placeholder

logger = logging.getLogger(__name__)

IMG_TAG_PATTERN = re.compile(r'<img\b[^>]*?/?>', re.IGNORECASE)
SRC_ATTR_PATTERN = re.compile(r'\bsrc\s*=\s*"([^"]*)"', re.IGNORECASE)
ALT_ATTR_PATTERN = re.compile(r'\balt\s*=\s*"([^"]*)"', re.IGNORECASE)


def attachment_image_markup(filename: str, alt: str = '') -> str:
    """``<ac:image>`` referencing an attachment of the page.

    Args:
        filename: Attachment filename (unescaped)
        alt: Alt text, already escaped for an XML attribute
    """
    alt_attr = f' ac:alt="{alt}"' if alt else ''
    return (
        f'<ac:image{alt_attr}>'
        f'<ri:attachment ri:filename="{html.escape(filename, quote=True)}" />'
        f'</ac:image>'
    )


def replace_attachment_placeholders(xhtml: str) -> str:
    """Swap ``<img>`` tags pointing at attachment placeholders for ``<ac:image>``.

    Images with any other source are left untouched.
    """
    count = 0

    def replace(match):
        nonlocal count
        tag = match.group(0)
        src = SRC_ATTR_PATTERN.search(tag)
        if not src:
            return tag
        placeholder = html.unescape(src.group(1))
        if not placeholder.startswith(ATTACHMENT_SCHEME):
            return tag
        alt = ALT_ATTR_PATTERN.search(tag)
        count += 1
        return attachment_image_markup(
            filename_from_placeholder(placeholder),
            alt.group(1) if alt else '',
        )

    result = IMG_TAG_PATTERN.sub(replace, xhtml)
    if count:
        logger.debug(f"Replaced {count} attachment placeholder image(s)")
    return result
