"""Sync orchestration for a single note.

A sync runs through these stages, stopping at the first failure:

    PREPARE_CONTENT        strip frontmatter, resolve embeds and wiki links,
                           convert to storage format
    RESOLVE_PAGE_IDENTITY  stored page id, else title search, else new page
    CREATE | UPDATE        write the page (optimistic version bump on update)
    WRITE_BACK_IDENTIFIER  store the page id in the note (best effort)
    UPLOAD_ATTACHMENTS     upload images one at a time
    DONE

Nothing is rolled back: a failed upload leaves the already written page body
in place.
"""

import logging
from typing import List, Optional, Tuple

from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.errors import SyncError
from ..confluence_client.page_locator import PageLocator
from ..content_converter.embed_resolver import EmbedResolver
from ..content_converter.link_resolver import WikiLinkResolver
from ..content_converter.markdown_converter import MarkdownConverter
from ..content_converter.storage_format import replace_attachment_placeholders
from ..models.attachment import Attachment
from ..models.settings import SyncSettings
from ..vault.frontmatter_accessor import FrontmatterAccessor
from ..vault.frontmatter_handler import FrontmatterHandler
from ..vault.local_vault import LocalVault
from ..vault.models import VaultFile
from .models import SyncAction, SyncOutcome, SyncStage
from .page_operations import PageOperations

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Publishes vault notes to Confluence pages.

    Collaborators not passed in are built from the settings. The settings
    are treated as immutable for the lifetime of the orchestrator.

    Example:
        >>> orchestrator = SyncOrchestrator(settings, LocalVault("~/notes"))
        >>> outcome = orchestrator.sync_file(vault.get_file("Plan.md"))
        >>> outcome.success, outcome.action
        (True, <SyncAction.CREATED: 'created'>)
    """

    def __init__(
        self,
        settings: SyncSettings,
        vault: LocalVault,
        api: Optional[APIWrapper] = None,
        converter: Optional[MarkdownConverter] = None,
        page_operations: Optional[PageOperations] = None,
        locator: Optional[PageLocator] = None,
    ):
        """Initialize the orchestrator.

        Raises:
            AuthHeaderError: If no api is given and credentials cannot be encoded
            ConversionError: If no converter is given and Pandoc is missing
        """
        self.settings = settings
        self.vault = vault
        self.api = api if api is not None else APIWrapper(settings)
        self.converter = converter if converter is not None else MarkdownConverter()
        self.locator = locator if locator is not None else PageLocator(self.api)
        self.page_operations = (
            page_operations if page_operations is not None
            else PageOperations(self.api, self.locator)
        )

        self.embed_resolver = EmbedResolver(vault)
        self.link_resolver = WikiLinkResolver(vault, self.api, self.locator, settings)
        self.page_ids = FrontmatterAccessor(
            vault,
            settings.page_id_frontmatter_key,
            settings.legacy_page_id_frontmatter_keys,
        )
        self.parent_ids = FrontmatterAccessor(
            vault,
            settings.parent_id_frontmatter_key,
            settings.legacy_parent_id_frontmatter_keys,
        )

    # Stages -----------------------------------------------------------------

    def prepare_content(self, file: VaultFile) -> Tuple[str, List[Attachment]]:
        """Turn a note into a storage format body plus the images it embeds.

        Raises:
            FilesystemError: If the note cannot be read
            ConfluenceError: If a link lookup fails remotely
            ConversionError: If Pandoc fails
        """
        text = FrontmatterHandler.strip_frontmatter(self.vault.read(file))
        text, attachments = self.embed_resolver.resolve_embeds(text, file)
        if self.settings.convert_wiki_links:
            text = self.link_resolver.resolve_links(text, file)

        # Wiki links are already resolved; leftover [[...]] stays literal
        xhtml = self.converter.markdown_to_xhtml(
            text,
            convert_wiki_links=False,
            handle_embeds_as_text=True,
        )
        return replace_attachment_placeholders(xhtml), attachments

    def resolve_page_id(self, file: VaultFile, title: str) -> Optional[str]:
        """Existing page id for a note, or None when a page must be created.

        A stored page id is trusted without checking that the page exists.
        """
        stored = self.page_ids.get(file)
        if stored:
            logger.debug(f"{file.path} has stored page id {stored}")
            return stored

        page = self.locator.find_by_title(self.settings.space_key, title)
        if page is not None:
            logger.info(f"Found existing page '{title}' ({page.page_id}) by title")
            return page.page_id
        return None

    def parent_id_for(self, file: VaultFile) -> Optional[str]:
        """Parent for a new page: note frontmatter, then settings, then none."""
        return self.parent_ids.get(file) or self.settings.parent_page_id.strip() or None

    def write_back_page_id(self, file: VaultFile, page_id: str) -> Optional[str]:
        """Store the page id in the note; return a warning on failure."""
        try:
            self.page_ids.set(file, page_id)
        except SyncError as e:
            warning = f"Could not store page id {page_id} in {file.path}: {e}"
            logger.warning(warning)
            return warning
        return None

    def upload_attachments(self, page_id: str, attachments: List[Attachment], uploaded: List[str]) -> None:
        """Upload attachments in order, recording each success in ``uploaded``.

        Raises:
            AttachmentUploadError: On the first failed upload
            FilesystemError: If an image cannot be read
        """
        for attachment in attachments:
            data = self.vault.read_binary(attachment.file)
            self.api.upload_attachment(page_id, attachment.filename, data)
            uploaded.append(attachment.filename)
            logger.info(f"Uploaded attachment {attachment.filename}")

    # Entry point ------------------------------------------------------------

    def sync_file(self, file: VaultFile) -> SyncOutcome:
        """Publish one note and report how far the sync got.

        Never raises for sync failures; the outcome carries the failing
        stage and the exception instead.
        """
        title = self.vault.display_title(file)
        logger.info(f"Syncing {file.path} as '{title}'")

        stage = SyncStage.PREPARE_CONTENT
        try:
            body, attachments = self.prepare_content(file)

            stage = SyncStage.RESOLVE_PAGE_IDENTITY
            page_id = self.resolve_page_id(file, title)
        except SyncError as e:
            return self._failed(stage, e)

        if page_id:
            result = self.page_operations.update_page_content(page_id, title, body)
            if not result.success:
                return self._failed(SyncStage.UPDATE, result.exception, result.error)
            action = SyncAction.UPDATED
            page_id = result.page_id
        else:
            result = self.page_operations.create_page(
                self.settings.space_key,
                title,
                body,
                parent_id=self.parent_id_for(file),
            )
            if not result.success:
                return self._failed(SyncStage.CREATE, result.exception, result.error)
            action = SyncAction.CREATED
            page_id = result.page_id

        outcome = SyncOutcome(
            success=True,
            stage=SyncStage.DONE,
            action=action,
            page_id=page_id,
            page_url=self.api.get_page_url(page_id),
        )

        warning = self.write_back_page_id(file, page_id)
        if warning:
            outcome.warnings.append(warning)

        if attachments:
            try:
                self.upload_attachments(page_id, attachments, outcome.uploaded)
            except SyncError as e:
                logger.error(f"Attachment upload failed for page {page_id}: {e}")
                outcome.success = False
                outcome.stage = SyncStage.UPLOAD_ATTACHMENTS
                outcome.error = str(e)
                outcome.exception = e
                return outcome

        logger.info(f"Synced {file.path} -> page {page_id} ({action.value})")
        return outcome

    def _failed(
        self,
        stage: SyncStage,
        exception: Optional[Exception],
        error: Optional[str] = None
    ) -> SyncOutcome:
        message = error or str(exception)
        logger.error(f"Sync failed during {stage.value}: {message}")
        return SyncOutcome(
            success=False,
            stage=stage,
            error=message,
            exception=exception,
        )
