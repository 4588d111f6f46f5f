"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

import pytest

from obsidian_confluence.models.settings import SyncSettings
from obsidian_confluence.vault.local_vault import LocalVault
from tests.fixtures.vault_fixtures import write_vault

# Suppress noisy ERROR logs from atlassian-python-api for expected failures
logging.getLogger("atlassian").setLevel(logging.WARNING)


@pytest.fixture
def settings():
    """Complete settings for a Cloud site."""
    return SyncSettings(
        base_url="https://example.atlassian.net/wiki",
        space_key="DOCS",
        auth_email="me@example.com",
        api_token="token123",
    )


@pytest.fixture
def make_vault(tmp_path):
    """Build a LocalVault from a {relative path: text or bytes} mapping."""
    def _make(files):
        write_vault(tmp_path, files)
        return LocalVault(str(tmp_path))
    return _make
