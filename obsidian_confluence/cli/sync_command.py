"""Sync command orchestration for CLI.

This module provides the SyncCommand class that publishes one note: it
validates the note and the settings before anything touches the network,
runs the SyncOrchestrator and turns its outcome into a single notification
and an exit code.
"""

import logging
from typing import Callable, Optional

from obsidian_confluence.cli.config import SettingsLoader
from obsidian_confluence.cli.errors import (
    CLIError,
    MissingSettingsError,
    NotAMarkdownNoteError,
)
from obsidian_confluence.cli.models import ExitCode
from obsidian_confluence.cli.output import OutputHandler
from obsidian_confluence.confluence_client.errors import (
    APIUnreachableError,
    ConfluenceAPIError,
    SyncError,
)
from obsidian_confluence.models.settings import SyncSettings
from obsidian_confluence.page_operations.models import SyncOutcome
from obsidian_confluence.page_operations.sync_orchestrator import SyncOrchestrator
from obsidian_confluence.vault.errors import FilesystemError
from obsidian_confluence.vault.local_vault import LocalVault

logger = logging.getLogger(__name__)

SUCCESS_NOTICE = "Synced to Confluence."
FAILURE_NOTICE = "Confluence sync failed. Check the log for details."

AUTH_FAILURE_STATUSES = (401, 403)


def exit_code_for(error: Optional[BaseException]) -> ExitCode:
    """Map a sync failure to an exit code."""
    if isinstance(error, ConfluenceAPIError) and error.status in AUTH_FAILURE_STATUSES:
        return ExitCode.AUTH_ERROR
    if isinstance(error, APIUnreachableError):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


class SyncCommand:
    """Publishes a single note for the CLI.

    The sync workflow:
        1. Open the vault and check the note is a Markdown file inside it
        2. Load settings (config file, then environment) and check that
           every required value is present
        3. Run the SyncOrchestrator
        4. Report one notification and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(vault_root="~/notes", output_handler=output)
        >>> exit_code = sync_cmd.run("~/notes/Plan.md")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        vault_root: str = ".",
        config_path: Optional[str] = None,
        output_handler: Optional[OutputHandler] = None,
        orchestrator_factory: Optional[Callable[[SyncSettings, LocalVault], SyncOrchestrator]] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            vault_root: Vault root directory
            config_path: Settings file (defaults to the one inside the vault)
            output_handler: OutputHandler for terminal output (optional)
            orchestrator_factory: Builds the orchestrator from settings and
                                  vault (optional, for tests)
        """
        self.vault_root = vault_root
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.orchestrator_factory = orchestrator_factory or SyncOrchestrator

    def _load_settings(self, vault: LocalVault) -> SyncSettings:
        config_path = self.config_path or SettingsLoader.default_config_path(str(vault.root))
        logger.info(f"Loading settings from {config_path}")
        settings = SettingsLoader.load(config_path)

        missing = settings.missing_fields()
        if missing:
            raise MissingSettingsError(missing)
        return settings

    def _report(self, outcome: SyncOutcome) -> ExitCode:
        for warning in outcome.warnings:
            self.output_handler.warning(warning)

        if outcome.success:
            self.output_handler.success(SUCCESS_NOTICE)
            if outcome.page_url:
                self.output_handler.info(f"  {outcome.page_url}")
            for filename in outcome.uploaded:
                self.output_handler.debug(f"  Uploaded {filename}")
            return ExitCode.SUCCESS

        logger.error(f"Sync failed at {outcome.stage.value}: {outcome.error}")
        self.output_handler.error(FAILURE_NOTICE)
        return exit_code_for(outcome.exception)

    def run(self, note_path: str) -> ExitCode:
        """Publish the note at ``note_path``.

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            vault = LocalVault(self.vault_root)
            file = vault.file_for_path(note_path)
            if file.extension != 'md':
                raise NotAMarkdownNoteError(file.path)
            if vault.get_file(file.path) is None:
                raise FilesystemError(note_path, 'read', 'File not found')

            settings = self._load_settings(vault)
            orchestrator = self.orchestrator_factory(settings, vault)

            with self.output_handler.spinner(f"Syncing {file.path}..."):
                outcome = orchestrator.sync_file(file)
            return self._report(outcome)

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except SyncError as e:
            logger.error(f"Sync failed: {e}")
            self.output_handler.error(FAILURE_NOTICE)
            return exit_code_for(e)

        except Exception:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(FAILURE_NOTICE)
            return ExitCode.GENERAL_ERROR
