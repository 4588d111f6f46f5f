"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the command can report them with a
single handler.
"""

from typing import List

from obsidian_confluence.confluence_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class MissingSettingsError(CLIError):
    """Raised when required Confluence settings are blank."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Configure Confluence settings: {', '.join(missing)}.")
        self.missing = list(missing)


class NotAMarkdownNoteError(CLIError):
    """Raised when the file to sync is not a Markdown note."""

    def __init__(self, file_path: str):
        super().__init__("Active file is not a Markdown note.")
        self.file_path = file_path
