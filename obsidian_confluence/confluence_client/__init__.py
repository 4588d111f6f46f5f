"""Confluence client library for the Obsidian publisher.

This package provides Python abstractions over the Confluence REST content
API: page lookup, create and update, and attachment upload.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    ConfluenceAPIError,
    PageNotFoundError,
    AttachmentUploadError,
    APIUnreachableError,
    AuthHeaderError,
    InvalidPageIdError,
    ConversionError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "ConfluenceAPIError",
    "PageNotFoundError",
    "AttachmentUploadError",
    "APIUnreachableError",
    "AuthHeaderError",
    "InvalidPageIdError",
    "ConversionError",
]
