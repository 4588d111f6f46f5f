"""YAML frontmatter parsing and generation for markdown notes.

This module handles reading and writing scalar values in the leading
frontmatter block of a note. Two independent read paths exist:

- ``get_value`` works on an already-parsed mapping (the vault's metadata
  cache), and
- ``extract_value`` scans the raw note text line by line, which still works
  when the cache is stale or the YAML does not parse.

Values written back are always scalar strings.
"""

import re
from typing import Any, Iterable, Mapping, Optional, Tuple

import yaml

from .errors import FrontmatterError


class FrontmatterHandler:
    """Handles YAML frontmatter operations for markdown notes.

    Frontmatter is a block at the very top of a note delimited by ``---``
    lines; the closing delimiter may also be ``...``. Notes without such a
    block have no frontmatter.
    """

    # Leading frontmatter block; group 1 is the YAML text (None when empty)
    FRONTMATTER_PATTERN = re.compile(
        r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)',
        re.DOTALL
    )

    CLOSING_DELIMITERS = ('---', '...')

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj, current_depth: int = 0, max_depth: int = MAX_YAML_DEPTH) -> None:
        """Validate that YAML structure depth doesn't exceed maximum.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > max_depth:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {max_depth}"
            )

        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1, max_depth)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1, max_depth)

    @classmethod
    def _parse_yaml(cls, frontmatter_str: Optional[str], file_path: str) -> dict:
        """Parse a frontmatter YAML block into a dictionary.

        Raises:
            FrontmatterError: If the YAML is invalid, too deep, or not a mapping
        """
        try:
            frontmatter = yaml.safe_load(frontmatter_str or '')
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML syntax: {str(e)}")

        if frontmatter is None:
            return {}

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message)

        return frontmatter

    @classmethod
    def extract_frontmatter_and_content(
        cls,
        content: str,
        file_path: str = "<unknown>"
    ) -> Tuple[dict, str]:
        """Extract frontmatter dict and body separately.

        Args:
            content: Full note text including frontmatter
            file_path: Path used in error messages

        Returns:
            Tuple of (frontmatter_dict, body). Returns ({}, content) if the
            note has no frontmatter.

        Raises:
            FrontmatterError: If frontmatter is present but malformed
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        return cls._parse_yaml(match.group(1), file_path), content[match.end():]

    @classmethod
    def strip_frontmatter(cls, content: str) -> str:
        """Return the note body without its frontmatter block.

        The YAML is not parsed, so notes with broken frontmatter still strip.
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return content
        return content[match.end():]

    @staticmethod
    def _scalar_to_str(raw: Any) -> Optional[str]:
        """Normalise a frontmatter scalar to a non-empty string, else None."""
        if isinstance(raw, bool):
            return None
        if isinstance(raw, str):
            return raw.strip() or None
        if isinstance(raw, (int, float)):
            return str(raw)
        return None

    @classmethod
    def get_value(
        cls,
        frontmatter: Optional[Mapping[str, Any]],
        key: str,
        legacy_keys: Iterable[str] = ()
    ) -> Optional[str]:
        """Read a scalar value from an already-parsed frontmatter mapping.

        The primary key wins; legacy keys are consulted in order only when the
        primary key yields nothing.

        Args:
            frontmatter: Parsed frontmatter (None when unavailable)
            key: Primary key name
            legacy_keys: Fallback key names

        Returns:
            The value as a string, or None if absent, blank, or not a scalar
        """
        if not frontmatter:
            return None

        for candidate in (key, *legacy_keys):
            if not candidate:
                continue
            value = cls._scalar_to_str(frontmatter.get(candidate))
            if value:
                return value
        return None

    @classmethod
    def _extract_single(cls, lines: list, key: str) -> Optional[str]:
        key_pattern = re.compile(rf'^\s*{re.escape(key)}\s*:\s*(.+?)\s*$')

        for line in lines[1:]:
            if line.strip() in cls.CLOSING_DELIMITERS:
                break

            match = key_pattern.match(line)
            if match:
                raw = match.group(1).strip()
                if not raw:
                    return None
                return re.sub(r'^[\'"]|[\'"]$', '', raw).strip() or None

        return None

    @classmethod
    def extract_value(
        cls,
        content: str,
        key: str,
        legacy_keys: Iterable[str] = ()
    ) -> Optional[str]:
        """Read a scalar value by scanning the raw frontmatter text.

        This is the fallback path for notes whose cached metadata is missing
        or stale. It does not parse YAML, so it tolerates frontmatter that
        would not load.

        Args:
            content: Full note text
            key: Primary key name
            legacy_keys: Fallback key names

        Returns:
            The unquoted value, or None if the note has no such key
        """
        if not content.startswith('---'):
            return None

        lines = re.split(r'\r?\n', content)
        if len(lines) < 2:
            return None

        for candidate in (key, *legacy_keys):
            if not candidate:
                continue
            value = cls._extract_single(lines, candidate)
            if value:
                return value
        return None

    @classmethod
    def set_value(
        cls,
        content: str,
        key: str,
        value: str,
        file_path: str = "<unknown>"
    ) -> str:
        """Return note text with ``key`` set to ``value`` in its frontmatter.

        Existing fields keep their order; a new key is appended. A note
        without frontmatter gains a block containing only the key.

        Raises:
            FrontmatterError: If existing frontmatter cannot be parsed (the
                              note is left for the user to fix rather than
                              overwritten)
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if match:
            frontmatter = cls._parse_yaml(match.group(1), file_path)
            body = content[match.end():]
        else:
            frontmatter = {}
            body = content

        frontmatter[key] = str(value)

        yaml_str = yaml.safe_dump(
            frontmatter,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        return f"---\n{yaml_str}---\n{body}"
