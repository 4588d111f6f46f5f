"""Sync settings data model."""

from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_PAGE_ID_KEY = 'confluencePageId'
DEFAULT_LEGACY_PAGE_ID_KEYS = ('confluence_page_id',)
DEFAULT_PARENT_ID_KEY = 'confluenceParentId'
DEFAULT_LEGACY_PARENT_ID_KEYS = ('confluence_parent_id',)


@dataclass(frozen=True)
class SyncSettings:
    """Settings for one sync run. Immutable for the duration of the run.

    Attributes:
        base_url: Confluence base URL (e.g., https://domain.atlassian.net/wiki)
        space_key: Space new pages are created in and titles are searched in
        auth_email: Atlassian account email
        api_token: Atlassian API token
        parent_page_id: Default parent for newly created pages ('' for none)
        page_id_frontmatter_key: Frontmatter key holding the page id
        legacy_page_id_frontmatter_keys: Older keys checked when the main key is absent
        parent_id_frontmatter_key: Frontmatter key overriding the parent page
        legacy_parent_id_frontmatter_keys: Older parent keys checked as fallback
        convert_wiki_links: Resolve [[wiki links]] into Confluence page links
    """
    base_url: str = ''
    space_key: str = ''
    auth_email: str = ''
    api_token: str = ''
    parent_page_id: str = ''
    page_id_frontmatter_key: str = DEFAULT_PAGE_ID_KEY
    legacy_page_id_frontmatter_keys: Tuple[str, ...] = DEFAULT_LEGACY_PAGE_ID_KEYS
    parent_id_frontmatter_key: str = DEFAULT_PARENT_ID_KEY
    legacy_parent_id_frontmatter_keys: Tuple[str, ...] = DEFAULT_LEGACY_PARENT_ID_KEYS
    convert_wiki_links: bool = True

    def missing_fields(self) -> List[str]:
        """Return display names of required settings that are blank."""
        missing = []
        if not self.base_url.strip():
            missing.append('base URL')
        if not self.space_key.strip():
            missing.append('space key')
        if not self.auth_email.strip():
            missing.append('auth email')
        if not self.api_token.strip():
            missing.append('API token')
        return missing
