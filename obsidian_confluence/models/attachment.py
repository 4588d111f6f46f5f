"""Attachment data model."""

from dataclasses import dataclass

from obsidian_confluence.vault.models import VaultFile


@dataclass(frozen=True)
class Attachment:
    """An image collected from a note during one sync run.

    Attachments are never persisted: they exist from the first embed that
    references a file until the end of the run.

    Attributes:
        file: Local vault file holding the image bytes
        filename: Attachment filename, unique within the run
        placeholder: Internal URI anchoring the later substitution into
                     storage-format image markup
    """
    file: VaultFile
    filename: str
    placeholder: str
