"""Confluence page data model."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RemotePage:
    """Confluence page as returned by the content endpoints.

    Identity is the page id. Titles are not unique remotely: a title search
    returns the first match only.

    Attributes:
        page_id: Unique identifier for the page
        title: Page title
        version: Current version number (None when not expanded)
    """
    page_id: str
    title: str
    version: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemotePage":
        """Build a RemotePage from a REST API content object."""
        version = (data.get('version') or {}).get('number')
        return cls(
            page_id=str(data['id']),
            title=data.get('title', ''),
            version=int(version) if version is not None else None,
        )
