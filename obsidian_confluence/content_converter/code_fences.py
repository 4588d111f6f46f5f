"""Fenced code block tracking for line-based text transforms.

Every transform of note text skips fenced code: tokens between matching
``` or ~~~ markers must reach the converter byte for byte.
"""

import re
from typing import Iterator, Optional, Tuple

# Fence marker: any indent (fences nest in list items), then 3+ backticks or tildes
FENCE_PATTERN = re.compile(r'^[ \t]*(`{3,}|~{3,})')


class FenceTracker:
    """Tracks whether consecutive lines are inside a fenced code block.

    A fence closes on a line made of the opening character repeated at
    least as many times as it was opened with. An unclosed fence runs to
    the end of the text.
    """

    def __init__(self):
        self._open_marker: Optional[str] = None

    @property
    def in_fence(self) -> bool:
        return self._open_marker is not None

    def feed(self, line: str) -> bool:
        """Advance past one line.

        Returns:
            True if the line is code or a fence marker (must not be
            transformed), False if it is ordinary text
        """
        stripped = line.rstrip('\r\n')

        if self._open_marker is None:
            match = FENCE_PATTERN.match(stripped)
            if match:
                marker = match.group(1)
                # Backtick fences may not carry backticks in the info string
                if marker[0] == '`' and '`' in stripped[match.end():]:
                    return False
                self._open_marker = marker
                return True
            return False

        match = FENCE_PATTERN.match(stripped)
        if (
            match
            and match.group(1)[0] == self._open_marker[0]
            and len(match.group(1)) >= len(self._open_marker)
            and not stripped[match.end():].strip()
        ):
            self._open_marker = None
        return True


def split_lines(text: str) -> list:
    """Split on "\\n" only, keeping terminators; joining the parts gives back ``text``."""
    lines = text.split('\n')
    parts = [line + '\n' for line in lines[:-1]]
    if lines[-1]:
        parts.append(lines[-1])
    return parts


def iter_unfenced_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(offset, line)`` for each line outside fenced code.

    Lines keep their line terminators, and offsets index into ``text``, so
    callers can record absolute spans of matches found within a line.
    """
    tracker = FenceTracker()
    offset = 0
    for line in split_lines(text):
        if not tracker.feed(line):
            yield offset, line
        offset += len(line)


def transform_unfenced(text: str, pattern: "re.Pattern[str]", replace) -> str:
    """Apply ``pattern.sub(replace, line)`` to every line outside fenced code."""
    tracker = FenceTracker()
    parts = []
    for line in split_lines(text):
        if tracker.feed(line):
            parts.append(line)
        else:
            parts.append(pattern.sub(replace, line))
    return ''.join(parts)
