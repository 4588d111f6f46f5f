"""Image embed resolution and attachment registration.

Image embeds (``![[pic.png]]`` and ``![alt](path/pic.png)``) are resolved to
vault files and rewritten as Markdown images pointing at an internal
placeholder URI. After conversion to storage format the placeholders are
swapped for ``<ac:image>`` markup referencing the uploaded attachment (see
storage_format.py). The placeholder scheme is never sent to Confluence.
"""

import logging
import re
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Set, Tuple
from urllib.parse import quote, unquote

from obsidian_confluence.models.attachment import Attachment
from obsidian_confluence.vault.local_vault import LocalVault
from obsidian_confluence.vault.models import VaultFile

from .code_fences import iter_unfenced_lines

logger = logging.getLogger(__name__)

ATTACHMENT_SCHEME = 'confluence-attachment://'

IMAGE_EXTENSIONS = frozenset({
    'png', 'jpg', 'jpeg', 'gif', 'svg', 'webp', 'bmp', 'tif', 'tiff',
})

# ![[target|alias]] or ![alt](path "title") / ![alt](<path with spaces>)
EMBED_PATTERN = re.compile(
    r'!\[\[(?P<wiki>[^\]]+)\]\]'
    r'|!\[(?P<alt>[^\]]*)\]\(\s*(?:<(?P<angle>[^>]+)>|(?P<path>[^)\s]+))'
    r'(?:\s+(?:"[^"]*"|\'[^\']*\'))?\s*\)'
)

# Obsidian image size hints: ![[pic.png|300]] or ![[pic.png|300x200]]
SIZE_HINT_PATTERN = re.compile(r'^\d+(?:x\d+)?$')

URI_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


def is_image_file(file: VaultFile) -> bool:
    """True if the file's extension is on the image allow-list."""
    return file.extension in IMAGE_EXTENSIONS


def placeholder_for(filename: str) -> str:
    """Placeholder URI for an attachment filename."""
    return f"{ATTACHMENT_SCHEME}{quote(filename, safe='')}"


def filename_from_placeholder(placeholder: str) -> str:
    """Inverse of placeholder_for."""
    return unquote(placeholder[len(ATTACHMENT_SCHEME):])


class AttachmentRegistry:
    """Attachments collected during one resolver invocation.

    The same vault file always maps to the same attachment; distinct files
    sharing a filename get ``-2``, ``-3``, ... inserted before the extension.
    A registry is never shared between sync runs.
    """

    def __init__(self):
        self._by_path: Dict[str, Attachment] = {}
        self._used_names: Set[str] = set()

    def _unique_filename(self, name: str) -> str:
        if name.lower() not in self._used_names:
            return name
        path = PurePosixPath(name)
        stem, suffix = path.stem, path.suffix
        counter = 2
        while f"{stem}-{counter}{suffix}".lower() in self._used_names:
            counter += 1
        return f"{stem}-{counter}{suffix}"

    def register(self, file: VaultFile) -> Attachment:
        """Return the attachment for ``file``, creating it on first use."""
        existing = self._by_path.get(file.path)
        if existing:
            return existing

        filename = self._unique_filename(file.name)
        self._used_names.add(filename.lower())
        attachment = Attachment(
            file=file,
            filename=filename,
            placeholder=placeholder_for(filename),
        )
        self._by_path[file.path] = attachment
        logger.debug(f"Registered attachment {filename} for {file.path}")
        return attachment

    @property
    def attachments(self) -> List[Attachment]:
        """Attachments in order of first reference."""
        return list(self._by_path.values())


class EmbedResolver:
    """Rewrites image embeds of a note to attachment placeholders.

    Example:
        >>> resolver = EmbedResolver(vault)
        >>> text, attachments = resolver.resolve_embeds("![[pic.png]]", note)
        >>> text
        '![](confluence-attachment://pic.png)'
    """

    def __init__(self, vault: LocalVault):
        self.vault = vault

    def _resolve_local_file(self, target: str, source_file: VaultFile) -> Optional[VaultFile]:
        """Direct vault path first, then Obsidian link resolution."""
        direct = self.vault.get_file(target)
        if direct:
            return direct
        return self.vault.get_first_linkpath_dest(target, source_file.path)

    def _resolve_image(self, target: str, source_file: VaultFile) -> Optional[VaultFile]:
        target = target.split('#')[0].strip()
        if not target:
            return None
        file = self._resolve_local_file(target, source_file)
        if file is None:
            logger.debug(f"Embed target '{target}' not found in vault")
            return None
        if not is_image_file(file):
            logger.debug(f"Embed target '{file.path}' is not an image, leaving as is")
            return None
        return file

    def _replacement(
        self,
        match: "re.Match[str]",
        source_file: VaultFile,
        registry: AttachmentRegistry
    ) -> Optional[str]:
        """Markdown for one embed token, or None to leave it unchanged."""
        if match.group('wiki') is not None:
            target, _, alias = match.group('wiki').partition('|')
            file = self._resolve_image(target, source_file)
            if file is None:
                return None
            alt = alias.strip()
            if SIZE_HINT_PATTERN.match(alt):
                alt = ''
            return f"![{alt}]({registry.register(file).placeholder})"

        path = (match.group('angle') or match.group('path') or '').strip()
        if (
            not path
            or path.startswith(ATTACHMENT_SCHEME)
            or path.lower().startswith('data:')
            or URI_SCHEME_PATTERN.match(path)
        ):
            return None
        file = self._resolve_image(unquote(path), source_file)
        if file is None:
            return None
        return f"![{match.group('alt')}]({registry.register(file).placeholder})"

    def resolve_embeds(self, text: str, source_file: VaultFile) -> Tuple[str, List[Attachment]]:
        """Replace image embeds outside fenced code with placeholder images.

        Args:
            text: Note body (frontmatter already stripped)
            source_file: The note being synced; relative embeds resolve from it

        Returns:
            Tuple of (rewritten text, attachments in order of first reference)
        """
        registry = AttachmentRegistry()
        spans: List[Tuple[int, int, str]] = []

        for offset, line in iter_unfenced_lines(text):
            for match in EMBED_PATTERN.finditer(line):
                replacement = self._replacement(match, source_file, registry)
                if replacement is not None:
                    spans.append((offset + match.start(), offset + match.end(), replacement))

        if not spans:
            return text, []

        output = []
        last_index = 0
        for start, end, replacement in spans:
            output.append(text[last_index:start])
            output.append(replacement)
            last_index = end
        output.append(text[last_index:])

        attachments = registry.attachments
        logger.info(f"Resolved {len(spans)} image embed(s) to {len(attachments)} attachment(s)")
        return ''.join(output), attachments
