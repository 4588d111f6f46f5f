"""Data models for the local vault."""

from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class VaultFile:
    """A file inside the vault, addressed by its vault-relative POSIX path.

    Two VaultFile objects are equal exactly when their paths are equal, which
    makes them usable as dedup keys.

    Attributes:
        path: Vault-relative path using forward slashes (e.g. "notes/Idea.md")
    """
    path: str

    @property
    def name(self) -> str:
        """Filename with extension."""
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        """Filename without extension; used as the note's display title."""
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot ('' when none)."""
        return PurePosixPath(self.path).suffix.lower().lstrip('.')

    @property
    def parent(self) -> str:
        """Vault-relative folder ('' for the vault root)."""
        parent = str(PurePosixPath(self.path).parent)
        return '' if parent == '.' else parent
