"""Test fixtures for vault and Confluence tests.

This module provides:
- On-disk vault layouts built from {path: content} mappings
- Sample note texts and image bytes
"""

from .vault_fixtures import (
    NOTE_WITH_LINK_AND_EMBED,
    NOTE_WITH_PAGE_ID,
    PNG_BYTES,
    write_vault,
)

__all__ = [
    "NOTE_WITH_LINK_AND_EMBED",
    "NOTE_WITH_PAGE_ID",
    "PNG_BYTES",
    "write_vault",
]
