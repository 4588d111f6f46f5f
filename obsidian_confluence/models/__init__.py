"""Data models shared across the sync pipeline."""

from obsidian_confluence.models.attachment import Attachment
from obsidian_confluence.models.link_occurrence import LinkOccurrence
from obsidian_confluence.models.remote_page import RemotePage
from obsidian_confluence.models.settings import SyncSettings

__all__ = ['Attachment', 'LinkOccurrence', 'RemotePage', 'SyncSettings']
