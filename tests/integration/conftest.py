"""Pytest configuration and fixtures for integration tests.

Integration tests run the real pipeline (vault, resolvers, converter,
APIWrapper, CLI) against an in-memory Confluence and a stand-in pandoc
binary, so no network or external tools are needed.
"""

import logging
from unittest.mock import patch

import pytest

from obsidian_confluence.cli.main import APP_LOGGER_NAME
from tests.helpers.fake_confluence import FakeConfluence
from tests.helpers.fake_pandoc import fake_pandoc_run

CONFLUENCE_ENV_VARS = (
    'CONFLUENCE_URL',
    'CONFLUENCE_USER',
    'CONFLUENCE_API_TOKEN',
    'CONFLUENCE_SPACE_KEY',
    'CONFLUENCE_PARENT_PAGE_ID',
)

VAULT_CONFIG = """
base_url: https://example.atlassian.net/wiki
space_key: DOCS
auth_email: me@example.com
api_token: token123
"""


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """No Confluence variables from the shell or a .env file."""
    for name in CONFLUENCE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch('obsidian_confluence.confluence_client.auth.load_dotenv'):
        yield


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers the CLI attached to streams CliRunner has since closed."""
    yield
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def confluence():
    """In-memory Confluence wired in place of the atlassian client."""
    fake = FakeConfluence()
    with patch(
        'obsidian_confluence.confluence_client.api_wrapper.Confluence',
        return_value=fake,
    ), patch(
        'obsidian_confluence.confluence_client.api_wrapper.Session',
        return_value=fake.session,
    ):
        yield fake


@pytest.fixture
def pandoc():
    """Stand-in pandoc binary."""
    with patch(
        'obsidian_confluence.content_converter.markdown_converter.subprocess.run',
        side_effect=fake_pandoc_run,
    ) as run:
        yield run


@pytest.fixture
def configured_vault(tmp_path):
    """Vault directory with a complete settings file."""
    config_dir = tmp_path / '.obsidian-confluence'
    config_dir.mkdir()
    (config_dir / 'config.yaml').write_text(VAULT_CONFIG, encoding='utf-8')
    return tmp_path
