"""Filesystem-backed vault: file access, link resolution and metadata cache.

LocalVault plays the role of the note-taking host for the sync pipeline. It
reads note text and image bytes, resolves link text to files the way
Obsidian does, and keeps a small cache of parsed frontmatter keyed by file
modification time.
"""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Tuple

from .errors import FilesystemError, FrontmatterError
from .frontmatter_handler import FrontmatterHandler
from .models import VaultFile

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSION = '.md'


class LocalVault:
    """A vault rooted at a directory on disk.

    Files inside dot-directories (``.obsidian``, ``.git``, ...) are not
    indexed. The file index is built lazily on first use.

    Example:
        >>> vault = LocalVault("~/notes")
        >>> note = vault.get_file("Projects/Plan.md")
        >>> target = vault.get_first_linkpath_dest("Roadmap", note.path)
    """

    def __init__(self, root: str):
        """Initialize the vault.

        Args:
            root: Vault root directory

        Raises:
            FilesystemError: If root is not a directory
        """
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise FilesystemError(str(self.root), 'open_vault', 'Not a directory')
        self._files: Optional[List[VaultFile]] = None
        self._metadata_cache: Dict[str, Tuple[int, Optional[dict]]] = {}

    # Indexing ---------------------------------------------------------------

    def _index(self) -> List[VaultFile]:
        if self._files is None:
            files = []
            for dirpath, dirnames, filenames in os.walk(self.root):
                dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
                for filename in sorted(filenames):
                    absolute = Path(dirpath) / filename
                    files.append(VaultFile(absolute.relative_to(self.root).as_posix()))
            self._files = files
            logger.debug(f"Indexed {len(files)} file(s) under {self.root}")
        return self._files

    def _absolute(self, file: VaultFile) -> Path:
        return self.root / PurePosixPath(file.path)

    def file_for_path(self, path: str) -> VaultFile:
        """Turn an absolute or vault-relative filesystem path into a VaultFile.

        Raises:
            FilesystemError: If the path lies outside the vault
        """
        absolute = Path(path).expanduser()
        if not absolute.is_absolute():
            absolute = Path.cwd() / absolute
        absolute = absolute.resolve()
        try:
            relative = absolute.relative_to(self.root)
        except ValueError:
            raise FilesystemError(str(absolute), 'locate', f"Not inside vault {self.root}")
        return VaultFile(relative.as_posix())

    @staticmethod
    def _normalize(path: str) -> Optional[str]:
        """Collapse '.' and '..' segments; None when the path escapes the vault."""
        parts: List[str] = []
        for part in PurePosixPath(path.replace('\\', '/')).parts:
            if part in ('', '.', '/'):
                continue
            if part == '..':
                if not parts:
                    return None
                parts.pop()
                continue
            parts.append(part)
        return '/'.join(parts) if parts else None

    def get_file(self, path: str) -> Optional[VaultFile]:
        """Look up a file by exact vault-relative path."""
        normalized = self._normalize(path)
        if normalized is None:
            return None
        for file in self._index():
            if file.path == normalized:
                return file
        return None

    # Link resolution --------------------------------------------------------

    def get_first_linkpath_dest(self, linkpath: str, source_path: str) -> Optional[VaultFile]:
        """Resolve link text to a file, relative to the linking note.

        Resolution order, for each candidate path:
            1. the path as written, relative to the vault root
            2. the path relative to the source note's folder
            3. any file whose path ends with the link path (case-insensitive);
               a match in the source folder wins, otherwise the shortest path

        The candidates are the link path as written (only when it has a
        suffix) and the link path plus ``.md``. Dots inside note names
        (``v1.2 Release``) therefore still resolve to the note.

        Args:
            linkpath: Link text without heading or block suffix
            source_path: Vault-relative path of the linking note

        Returns:
            The resolved file, or None
        """
        linkpath = linkpath.strip()
        if not linkpath:
            return None

        candidates = [linkpath + MARKDOWN_EXTENSION]
        if PurePosixPath(linkpath).suffix:
            candidates.insert(0, linkpath)

        for candidate in candidates:
            found = self._resolve_linkpath(candidate, source_path)
            if found:
                return found
        return None

    def _resolve_linkpath(self, candidate: str, source_path: str) -> Optional[VaultFile]:
        direct = self.get_file(candidate)
        if direct:
            return direct

        source_folder = str(PurePosixPath(source_path).parent)
        if source_folder not in ('', '.'):
            relative = self.get_file(f"{source_folder}/{candidate}")
            if relative:
                return relative

        wanted = candidate.lower().lstrip('/')
        matches = [
            file for file in self._index()
            if file.path.lower() == wanted or file.path.lower().endswith('/' + wanted)
        ]
        if not matches:
            return None

        source_parent = VaultFile(source_path).parent
        same_folder = [file for file in matches if file.parent == source_parent]
        if same_folder:
            return same_folder[0]
        return min(matches, key=lambda file: (len(file.path), file.path))

    # File access ------------------------------------------------------------

    def read(self, file: VaultFile) -> str:
        """Read a file as UTF-8 text.

        Raises:
            FilesystemError: If the file cannot be read
        """
        try:
            return self._absolute(file).read_text(encoding='utf-8')
        except OSError as e:
            raise FilesystemError(file.path, 'read', str(e))
        except UnicodeDecodeError as e:
            raise FilesystemError(file.path, 'read', f"Not valid UTF-8: {e}")

    def read_binary(self, file: VaultFile) -> bytes:
        """Read a file's raw bytes.

        Raises:
            FilesystemError: If the file cannot be read
        """
        try:
            return self._absolute(file).read_bytes()
        except OSError as e:
            raise FilesystemError(file.path, 'read_binary', str(e))

    def write(self, file: VaultFile, content: str) -> None:
        """Write UTF-8 text to a file and invalidate its cached metadata.

        Raises:
            FilesystemError: If the file cannot be written
        """
        try:
            self._absolute(file).write_text(content, encoding='utf-8')
        except OSError as e:
            raise FilesystemError(file.path, 'write', str(e))
        self._metadata_cache.pop(file.path, None)

    def display_title(self, file: VaultFile) -> str:
        """Title shown for a note: its filename without extension."""
        return file.basename

    # Metadata cache ---------------------------------------------------------

    def get_frontmatter(self, file: VaultFile) -> Optional[dict]:
        """Return the note's parsed frontmatter from the metadata cache.

        Entries are keyed by modification time, so edits made outside the
        tool are picked up. Notes whose frontmatter does not parse are cached
        as None; callers fall back to scanning the raw text.

        Returns:
            The frontmatter mapping, or None if absent or unparseable
        """
        try:
            mtime = self._absolute(file).stat().st_mtime_ns
        except OSError:
            return None

        cached = self._metadata_cache.get(file.path)
        if cached and cached[0] == mtime:
            return cached[1]

        try:
            frontmatter, _ = FrontmatterHandler.extract_frontmatter_and_content(
                self.read(file), file.path
            )
        except (FrontmatterError, FilesystemError) as e:
            logger.debug(f"Frontmatter of {file.path} not indexed: {e}")
            frontmatter = None

        self._metadata_cache[file.path] = (mtime, frontmatter or None)
        return frontmatter or None
