"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from obsidian_confluence import __version__
from obsidian_confluence.cli.main import APP_LOGGER_NAME, _configure_logging, app
from obsidian_confluence.cli.models import ExitCode

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_app_logger():
    yield
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize('verbosity,level', [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
        (5, logging.DEBUG),
    ])
    def test_verbosity_sets_package_level(self, verbosity, level):
        _configure_logging(verbosity)

        assert logging.getLogger(APP_LOGGER_NAME).level == level

    def test_root_logger_untouched(self):
        root_level = logging.getLogger().level

        _configure_logging(2)

        assert logging.getLogger().level == root_level

    def test_repeated_calls_do_not_stack_handlers(self):
        _configure_logging(1)
        _configure_logging(1)

        assert len(logging.getLogger(APP_LOGGER_NAME).handlers) == 1

    def test_logdir_adds_timestamped_file(self, tmp_path):
        _configure_logging(1, str(tmp_path / 'logs'))

        handlers = logging.getLogger(APP_LOGGER_NAME).handlers
        assert len(handlers) == 2
        log_files = list((tmp_path / 'logs').glob('obsidian-confluence_*.log'))
        assert len(log_files) == 1


class TestMainCommand:
    """Test cases for the CLI command."""

    def test_version(self):
        result = runner.invoke(app, ['--version'])

        assert result.exit_code == 0
        assert f"obsidian-confluence version {__version__}" in result.stdout

    @patch('obsidian_confluence.cli.main.SyncCommand')
    def test_missing_note_is_error(self, mock_sync_cmd):
        result = runner.invoke(app, [])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        mock_sync_cmd.assert_not_called()

    @patch('obsidian_confluence.cli.main.SyncCommand')
    def test_runs_sync_and_propagates_exit_code(self, mock_sync_cmd):
        instance = Mock()
        instance.run.return_value = ExitCode.AUTH_ERROR
        mock_sync_cmd.return_value = instance

        result = runner.invoke(app, ['Plan.md', '--vault', '/notes', '--config', '/c.yaml'])

        assert result.exit_code == ExitCode.AUTH_ERROR
        kwargs = mock_sync_cmd.call_args.kwargs
        assert kwargs['vault_root'] == '/notes'
        assert kwargs['config_path'] == '/c.yaml'
        instance.run.assert_called_once_with('Plan.md')

    @patch('obsidian_confluence.cli.main.OutputHandler')
    @patch('obsidian_confluence.cli.main.SyncCommand')
    def test_verbosity_and_color_reach_output_handler(self, mock_sync_cmd, mock_output):
        mock_sync_cmd.return_value.run.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ['Plan.md', '-v', '2', '--no-color'])

        assert result.exit_code == ExitCode.SUCCESS
        mock_output.assert_called_once_with(verbosity=2, no_color=True)
        assert mock_sync_cmd.call_args.kwargs['vault_root'] == '.'
