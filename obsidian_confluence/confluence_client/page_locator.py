"""Locate remote pages by id or by title.

"Not found" on a title search is a normal empty result. A missing page id is
an error: an explicit but stale id is a configuration problem and is never
silently replaced by a title search.
"""

import logging
from typing import Optional

from obsidian_confluence.models.remote_page import RemotePage

from .api_wrapper import APIWrapper

logger = logging.getLogger(__name__)


class PageLocator:
    """Finds Confluence pages for notes and link targets.

    Example:
        >>> locator = PageLocator(api)
        >>> page = locator.find_by_title("DOCS", "Roadmap")
    """

    def __init__(self, api: APIWrapper):
        self.api = api

    def find_by_title(self, space_key: str, title: str) -> Optional[RemotePage]:
        """Return the first page titled ``title`` in ``space_key``, if any.

        When several pages share the title, whichever the search API lists
        first is returned.
        """
        data = self.api.find_page_by_title(space_key, title)
        if not data:
            logger.debug(f"No page titled '{title}' in space {space_key}")
            return None
        page = RemotePage.from_api(data)
        logger.debug(f"Title '{title}' in space {space_key} -> page {page.page_id}")
        return page

    def get_by_id(self, page_id: str) -> RemotePage:
        """Fetch a page by id.

        Raises:
            PageNotFoundError: If the page does not exist or is inaccessible
        """
        return RemotePage.from_api(self.api.get_page_by_id(page_id))
