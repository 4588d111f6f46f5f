"""Unit tests for cli.sync_command module."""

import pytest
from unittest.mock import MagicMock, Mock, patch

from obsidian_confluence.cli.models import ExitCode
from obsidian_confluence.cli.sync_command import (
    FAILURE_NOTICE,
    SUCCESS_NOTICE,
    SyncCommand,
    exit_code_for,
)
from obsidian_confluence.confluence_client.errors import (
    APIUnreachableError,
    AttachmentUploadError,
    AuthHeaderError,
    ConfluenceAPIError,
    ConversionError,
    PageNotFoundError,
)
from obsidian_confluence.page_operations.models import SyncAction, SyncOutcome, SyncStage

COMPLETE_CONFIG = """
base_url: https://example.atlassian.net/wiki
space_key: DOCS
auth_email: me@example.com
api_token: token123
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ('CONFLUENCE_URL', 'CONFLUENCE_USER', 'CONFLUENCE_API_TOKEN',
                 'CONFLUENCE_SPACE_KEY', 'CONFLUENCE_PARENT_PAGE_ID'):
        monkeypatch.delenv(name, raising=False)
    with patch('obsidian_confluence.confluence_client.auth.load_dotenv'):
        yield


@pytest.fixture
def vault_dir(tmp_path):
    (tmp_path / 'Note.md').write_text('Hello', encoding='utf-8')
    (tmp_path / 'pic.png').write_bytes(b'png')
    config_dir = tmp_path / '.obsidian-confluence'
    config_dir.mkdir()
    (config_dir / 'config.yaml').write_text(COMPLETE_CONFIG, encoding='utf-8')
    return tmp_path


def create_command(vault_dir, outcome=None, config_path=None):
    """SyncCommand with a mocked output handler and orchestrator."""
    output = MagicMock()
    orchestrator = Mock()
    orchestrator.sync_file.return_value = outcome or SyncOutcome(
        success=True,
        stage=SyncStage.DONE,
        action=SyncAction.CREATED,
        page_id='1001',
        page_url='https://example.atlassian.net/wiki/pages/viewpage.action?pageId=1001',
    )
    factory = Mock(return_value=orchestrator)
    command = SyncCommand(
        vault_root=str(vault_dir),
        config_path=config_path,
        output_handler=output,
        orchestrator_factory=factory,
    )
    return command, output, factory, orchestrator


class TestExitCodeFor:
    """Test cases for exit_code_for."""

    @pytest.mark.parametrize('error,expected', [
        (ConfluenceAPIError(401, 'Unauthorized'), ExitCode.AUTH_ERROR),
        (ConfluenceAPIError(403, 'Forbidden'), ExitCode.AUTH_ERROR),
        (AttachmentUploadError('a.png', 403, 'XSRF check failed'), ExitCode.AUTH_ERROR),
        (APIUnreachableError('https://example.atlassian.net'), ExitCode.NETWORK_ERROR),
        (PageNotFoundError('5'), ExitCode.GENERAL_ERROR),
        (ConfluenceAPIError(409, 'conflict'), ExitCode.GENERAL_ERROR),
        (ConversionError('pandoc'), ExitCode.GENERAL_ERROR),
        (AuthHeaderError('bad'), ExitCode.GENERAL_ERROR),
        (None, ExitCode.GENERAL_ERROR),
    ])
    def test_mapping(self, error, expected):
        assert exit_code_for(error) == expected


class TestSyncCommandRun:
    """Test cases for SyncCommand.run."""

    def test_success_reports_single_notice(self, vault_dir):
        command, output, factory, orchestrator = create_command(vault_dir)

        exit_code = command.run(str(vault_dir / 'Note.md'))

        assert exit_code == ExitCode.SUCCESS
        output.success.assert_called_once_with(SUCCESS_NOTICE)
        output.error.assert_not_called()
        settings, vault = factory.call_args.args
        assert settings.space_key == 'DOCS'
        assert orchestrator.sync_file.call_args.args[0].path == 'Note.md'

    def test_warnings_are_shown(self, vault_dir):
        outcome = SyncOutcome(
            success=True, stage=SyncStage.DONE, action=SyncAction.UPDATED,
            page_id='1', warnings=['Could not store page id'],
        )
        command, output, _, _ = create_command(vault_dir, outcome)

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.SUCCESS
        output.warning.assert_called_once_with('Could not store page id')

    def test_failed_outcome_maps_exit_code(self, vault_dir):
        error = ConfluenceAPIError(401, 'Unauthorized')
        outcome = SyncOutcome(
            success=False, stage=SyncStage.CREATE, error=str(error), exception=error
        )
        command, output, _, _ = create_command(vault_dir, outcome)

        exit_code = command.run(str(vault_dir / 'Note.md'))

        assert exit_code == ExitCode.AUTH_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)
        output.success.assert_not_called()

    def test_upload_failure_is_failure(self, vault_dir):
        error = AttachmentUploadError('pic.png', 500, 'boom')
        outcome = SyncOutcome(
            success=False, stage=SyncStage.UPLOAD_ATTACHMENTS, action=SyncAction.CREATED,
            page_id='1001', error=str(error), exception=error,
        )
        command, output, _, _ = create_command(vault_dir, outcome)

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)

    def test_non_markdown_file_rejected_before_settings(self, vault_dir):
        command, output, factory, _ = create_command(vault_dir)

        exit_code = command.run(str(vault_dir / 'pic.png'))

        assert exit_code == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with('Active file is not a Markdown note.')
        factory.assert_not_called()

    def test_missing_settings_listed_without_network(self, vault_dir):
        (vault_dir / '.obsidian-confluence' / 'config.yaml').write_text(
            'space_key: DOCS\n', encoding='utf-8'
        )
        command, output, factory, _ = create_command(vault_dir)

        exit_code = command.run(str(vault_dir / 'Note.md'))

        assert exit_code == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(
            'Configure Confluence settings: base URL, auth email, API token.'
        )
        factory.assert_not_called()

    def test_explicit_config_path(self, vault_dir, tmp_path_factory):
        other = tmp_path_factory.mktemp('conf') / 'settings.yaml'
        other.write_text(COMPLETE_CONFIG.replace('DOCS', 'OTHER'), encoding='utf-8')
        command, _, factory, _ = create_command(vault_dir, config_path=str(other))

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.SUCCESS
        assert factory.call_args.args[0].space_key == 'OTHER'

    def test_missing_note(self, vault_dir):
        command, output, factory, _ = create_command(vault_dir)

        exit_code = command.run(str(vault_dir / 'Ghost.md'))

        assert exit_code == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)
        factory.assert_not_called()

    def test_note_outside_vault(self, vault_dir, tmp_path_factory):
        outside = tmp_path_factory.mktemp('elsewhere') / 'Note.md'
        outside.write_text('x', encoding='utf-8')
        command, _, factory, _ = create_command(vault_dir)

        assert command.run(str(outside)) == ExitCode.GENERAL_ERROR
        factory.assert_not_called()

    def test_invalid_config_reports_failure(self, vault_dir):
        (vault_dir / '.obsidian-confluence' / 'config.yaml').write_text(
            'space_key: [unclosed\n', encoding='utf-8'
        )
        command, output, _, _ = create_command(vault_dir)

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)

    def test_orchestrator_construction_error(self, vault_dir):
        command, output, factory, _ = create_command(vault_dir)
        factory.side_effect = ConversionError('Pandoc is not installed')

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)

    def test_unexpected_exception_is_contained(self, vault_dir):
        command, output, _, orchestrator = create_command(vault_dir)
        orchestrator.sync_file.side_effect = RuntimeError('bug')

        assert command.run(str(vault_dir / 'Note.md')) == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with(FAILURE_NOTICE)
