"""Command-line interface for publishing notes to Confluence.

This package provides the `obsidian-confluence` CLI tool that publishes one
note of an Obsidian vault as a Confluence page, with progress indication and
error handling.
"""

from .sync_command import SyncCommand
from .models import ExitCode
from .errors import (
    CLIError,
    MissingSettingsError,
    NotAMarkdownNoteError,
)

__all__ = [
    'SyncCommand',
    'ExitCode',
    'CLIError',
    'MissingSettingsError',
    'NotAMarkdownNoteError',
]
