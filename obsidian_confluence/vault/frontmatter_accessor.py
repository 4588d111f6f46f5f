"""Read and write one configurable frontmatter key of vault notes.

The accessor combines the two read paths of FrontmatterHandler: the vault's
metadata cache is consulted first and the raw note text second, each with
legacy key fallback.
"""

import logging
from typing import Iterable, Optional

from .frontmatter_handler import FrontmatterHandler
from .local_vault import LocalVault
from .models import VaultFile

logger = logging.getLogger(__name__)


class FrontmatterAccessor:
    """Scalar frontmatter value under a configurable key.

    Example:
        >>> page_ids = FrontmatterAccessor(vault, "confluencePageId", ["confluence_page_id"])
        >>> page_ids.get(note)
        '555'
    """

    def __init__(self, vault: LocalVault, key: str, legacy_keys: Iterable[str] = ()):
        self.vault = vault
        self.key = key.strip()
        self.legacy_keys = tuple(k.strip() for k in legacy_keys if k and k.strip())

    def get_cached(self, file: VaultFile) -> Optional[str]:
        """Value from the vault's metadata cache only."""
        if not self.key:
            return None
        return FrontmatterHandler.get_value(
            self.vault.get_frontmatter(file), self.key, self.legacy_keys
        )

    def get(self, file: VaultFile) -> Optional[str]:
        """Value from the cache, falling back to scanning the raw note text.

        Raises:
            FilesystemError: If the cache misses and the note cannot be read
        """
        if not self.key:
            return None

        cached = self.get_cached(file)
        if cached:
            return cached

        return FrontmatterHandler.extract_value(
            self.vault.read(file), self.key, self.legacy_keys
        )

    def set(self, file: VaultFile, value: str) -> bool:
        """Store ``value`` under the primary key.

        Returns:
            True if the note was rewritten, False if the key is blank or the
            note already holds exactly this value

        Raises:
            FilesystemError: If the note cannot be read or written
            FrontmatterError: If the existing frontmatter does not parse
        """
        if not self.key:
            return False

        content = self.vault.read(file)
        frontmatter, _ = FrontmatterHandler.extract_frontmatter_and_content(content, file.path)
        if FrontmatterHandler.get_value(frontmatter, self.key) == value:
            logger.debug(f"{file.path} already has {self.key}={value}")
            return False

        self.vault.write(
            file, FrontmatterHandler.set_value(content, self.key, value, file.path)
        )
        logger.info(f"Wrote {self.key}={value} to {file.path}")
        return True
