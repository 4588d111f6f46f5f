"""Wiki link occurrence data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LinkOccurrence:
    """A single ``[[...]]`` link found in note text.

    Attributes:
        start: Offset of the opening bracket in the source text
        end: Offset just past the closing bracket
        raw: The full token, e.g. ``[[Note#Heading|alias]]``
        target: Link target including any heading/block suffix
        label: Alias if present, else the target
        base_target: Target with heading and block suffixes removed
    """
    start: int
    end: int
    raw: str
    target: str
    label: str
    base_target: str
