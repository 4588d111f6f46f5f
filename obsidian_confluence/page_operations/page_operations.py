"""Page operations for Confluence publishing.

This module provides PageOperations, which creates pages and replaces the
content of existing pages using optimistic versioning: the current version is
fetched and the update submits exactly one more. A stale version surfaces as
a failed UpdateResult; it is never retried.
"""

import logging
from typing import Optional

from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.errors import ConfluenceError, PageNotFoundError
from ..confluence_client.page_locator import PageLocator
from .models import CreateResult, UpdateResult

logger = logging.getLogger(__name__)


class PageOperations:
    """Create and update operations for Confluence pages.

    Usage:
        ops = PageOperations(api)

        result = ops.create_page(
            space_key="TEAM",
            title="New Page",
            body="<p>Hello</p>",
            parent_id="12345"
        )

        result = ops.update_page_content("67890", "New Page", "<p>World</p>")
    """

    def __init__(self, api: APIWrapper, locator: Optional[PageLocator] = None):
        self.api = api
        self.locator = locator if locator is not None else PageLocator(api)

    def create_page(
        self,
        space_key: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> CreateResult:
        """Create a new page from storage format content.

        Args:
            space_key: Space to create page in
            title: Page title
            body: Page body (XHTML storage format)
            parent_id: Parent page ID. None for space root.

        Returns:
            CreateResult with success status and page ID
        """
        logger.debug(f"Creating page: {title} in space {space_key}")
        if parent_id:
            logger.debug(f"  Parent: {parent_id}")
        else:
            logger.debug("  Parent: (space root)")

        try:
            result = self.api.create_page(
                space_key=space_key,
                title=title,
                body=body,
                parent_id=parent_id,
            )
        except ConfluenceError as e:
            logger.error(f"  Failed to create page: {e}")
            return CreateResult(
                success=False,
                page_id=None,
                space_key=space_key,
                title=title,
                error=str(e),
                exception=e,
            )

        page_id = str(result.get("id", ""))
        version = (result.get("version") or {}).get("number", 1)
        logger.debug(f"  Created: {page_id}")

        return CreateResult(
            success=True,
            page_id=page_id,
            space_key=space_key,
            title=title,
            version=version,
        )

    def update_page_content(
        self,
        page_id: str,
        title: str,
        body: str,
    ) -> UpdateResult:
        """Replace the title and content of an existing page.

        The page is fetched for its current version (1 when the response
        carries none) and version + 1 is submitted. A missing page fails the
        update; it is never created instead.

        Args:
            page_id: Confluence page ID
            title: New page title
            body: New page body (XHTML storage format)

        Returns:
            UpdateResult with success status and new version
        """
        logger.debug(f"Updating page content: {page_id}")

        try:
            page = self.locator.get_by_id(page_id)
        except PageNotFoundError as e:
            logger.error(f"  Page not found: {page_id}")
            return UpdateResult(
                success=False,
                page_id=page_id,
                old_version=0,
                new_version=0,
                error=f"Page {page_id} not found",
                exception=e,
            )
        except ConfluenceError as e:
            logger.error(f"  Failed to fetch page {page_id}: {e}")
            return UpdateResult(
                success=False,
                page_id=page_id,
                old_version=0,
                new_version=0,
                error=str(e),
                exception=e,
            )

        current_version = page.version or 1
        canonical_id = page.page_id or page_id

        try:
            result = self.api.update_page(
                page_id=canonical_id,
                title=title,
                body=body,
                version=current_version,
            )
        except ConfluenceError as e:
            if getattr(e, "status", None) == 409:
                logger.error(f"  Version conflict during update: {e}")
            else:
                logger.error(f"  API error during update: {e}")
            return UpdateResult(
                success=False,
                page_id=canonical_id,
                old_version=current_version,
                new_version=current_version,
                error=str(e),
                exception=e,
            )

        new_version = (result.get("version") or {}).get("number", current_version + 1)
        logger.debug(f"  Updated: v{current_version} → v{new_version}")

        return UpdateResult(
            success=True,
            page_id=str(result.get("id") or canonical_id),
            old_version=current_version,
            new_version=new_version,
        )
