"""Data models for page operations module.

This module defines the result types returned by page create/update calls
and by a whole note sync.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SyncStage(Enum):
    """Steps of a single note sync, in execution order."""

    PREPARE_CONTENT = "prepare_content"
    RESOLVE_PAGE_IDENTITY = "resolve_page_identity"
    CREATE = "create"
    UPDATE = "update"
    WRITE_BACK_IDENTIFIER = "write_back_identifier"
    UPLOAD_ATTACHMENTS = "upload_attachments"
    DONE = "done"


class SyncAction(Enum):
    """What happened to the remote page."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass
class CreateResult:
    """Result of creating a new page.

    Attributes:
        success: Whether creation succeeded
        page_id: ID of created page (None if failed)
        space_key: Space where page was created
        title: Page title
        version: Initial version (usually 1)
        error: Error message if success is False
        exception: The exception behind a failure, if any
    """

    success: bool
    page_id: Optional[str]
    space_key: str
    title: str
    version: int = 1
    error: Optional[str] = None
    exception: Optional[Exception] = None


@dataclass
class UpdateResult:
    """Result of replacing the content of a page.

    Attributes:
        success: Whether the update succeeded
        page_id: Page that was updated (canonical id on success)
        old_version: Version before update
        new_version: Version after update
        error: Error message if success is False
        exception: The exception behind a failure, if any
    """

    success: bool
    page_id: str
    old_version: int
    new_version: int
    error: Optional[str] = None
    exception: Optional[Exception] = None


@dataclass
class SyncOutcome:
    """Result of syncing one note.

    A write-back failure does not fail the sync; it is reported through
    ``warnings`` instead.

    Attributes:
        success: Whether the sync reached DONE
        stage: DONE on success, otherwise the stage that failed
        action: Whether the page was created or updated (None if neither)
        page_id: Remote page id, once known
        page_url: Browser URL of the page, once known
        uploaded: Attachment filenames uploaded, in order
        warnings: Non-fatal problems
        error: Error message if success is False
        exception: The exception behind a failure, if any
    """

    success: bool
    stage: SyncStage
    action: Optional[SyncAction] = None
    page_id: Optional[str] = None
    page_url: Optional[str] = None
    uploaded: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    exception: Optional[Exception] = None
