"""Typed exception hierarchy for Confluence-related errors.

This module defines all custom exceptions used by the Confluence client.
All exceptions inherit from ConfluenceError so callers can catch every
remote failure in one place, and every HTTP failure carries the status code
and response body returned by Confluence.
"""


class SyncError(Exception):
    """Base exception for all obsidian-confluence errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class ConfluenceAPIError(ConfluenceError):
    """Raised when Confluence answers a request with a non-2xx status."""

    def __init__(self, status: int, body: str, message: str = "Confluence API error"):
        detail = body or "Unknown error"
        super().__init__(f"{message} {status}: {detail}")
        self.status = status
        self.body = body


class PageNotFoundError(ConfluenceAPIError):
    """Raised when a page id does not exist or is not accessible."""

    def __init__(self, page_id: str, status: int = 404, body: str = ""):
        super().__init__(status, body, message=f"Page {page_id} not found")
        self.page_id = page_id


class AttachmentUploadError(ConfluenceAPIError):
    """Raised when an attachment upload is rejected."""

    def __init__(self, filename: str, status: int, body: str):
        super().__init__(
            status,
            body,
            message=f"Confluence attachment upload failed for {filename}",
        )
        self.filename = filename


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class AuthHeaderError(ConfluenceError):
    """Raised when the Basic authorization header cannot be built.

    This is a hard failure of the runtime environment, never retried.
    """

    def __init__(self, reason: str):
        super().__init__(f"Cannot build authorization header: {reason}")
        self.reason = reason


class InvalidPageIdError(ConfluenceError, ValueError):
    """Raised when a page id is not a numeric Confluence identifier."""

    def __init__(self, page_id: str):
        super().__init__(
            f"Invalid page_id format: '{page_id}'. "
            f"Page IDs must contain only numeric characters."
        )
        self.page_id = page_id


class ConversionError(ConfluenceError):
    """Raised when markdown to storage format conversion fails."""

    def __init__(self, message: str):
        super().__init__(message)
