"""Page operations: create/update Confluence pages and sync whole notes."""

from .models import CreateResult, SyncAction, SyncOutcome, SyncStage, UpdateResult
from .page_operations import PageOperations
from .sync_orchestrator import SyncOrchestrator

__all__ = [
    'CreateResult',
    'PageOperations',
    'SyncAction',
    'SyncOrchestrator',
    'SyncOutcome',
    'SyncStage',
    'UpdateResult',
]
