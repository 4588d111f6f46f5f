"""Unit tests for cli.config module."""

import pytest
from unittest.mock import patch

from obsidian_confluence.cli.config import SettingsLoader
from obsidian_confluence.models.settings import SyncSettings
from obsidian_confluence.vault.errors import ConfigError

ENV_VARS = (
    'CONFLUENCE_URL',
    'CONFLUENCE_USER',
    'CONFLUENCE_API_TOKEN',
    'CONFLUENCE_SPACE_KEY',
    'CONFLUENCE_PARENT_PAGE_ID',
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """No Confluence variables and no .env file loading."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch('obsidian_confluence.confluence_client.auth.load_dotenv'):
        yield


def write_config(tmp_path, text):
    path = tmp_path / 'config.yaml'
    path.write_text(text, encoding='utf-8')
    return str(path)


class TestLoadFile:
    """Test cases for SettingsLoader.load_file."""

    def test_missing_file_yields_defaults(self, tmp_path):
        settings = SettingsLoader.load_file(str(tmp_path / 'nope.yaml'))

        assert settings == SyncSettings()

    def test_empty_file_yields_defaults(self, tmp_path):
        assert SettingsLoader.load_file(write_config(tmp_path, '\n')) == SyncSettings()

    def test_full_config(self, tmp_path):
        path = write_config(tmp_path, """
base_url: "https://acme.atlassian.net/wiki"
space_key: DOCS
auth_email: me@acme.com
api_token: secret
parent_page_id: 123456
page_id_frontmatter_key: pageId
legacy_page_id_frontmatter_keys: oldPageId
legacy_parent_id_frontmatter_keys: [a, " b "]
convert_wiki_links: false
something_else: ignored
""")

        settings = SettingsLoader.load_file(path)

        assert settings.base_url == 'https://acme.atlassian.net/wiki'
        assert settings.space_key == 'DOCS'
        assert settings.parent_page_id == '123456'
        assert settings.page_id_frontmatter_key == 'pageId'
        assert settings.legacy_page_id_frontmatter_keys == ('oldPageId',)
        assert settings.legacy_parent_id_frontmatter_keys == ('a', 'b')
        assert settings.parent_id_frontmatter_key == 'confluenceParentId'
        assert settings.convert_wiki_links is False

    def test_invalid_yaml_raises_config_error(self, tmp_path):
        path = write_config(tmp_path, 'base_url: [unclosed\n')

        with pytest.raises(ConfigError, match='Invalid YAML syntax'):
            SettingsLoader.load_file(path)

    def test_non_mapping_raises_config_error(self, tmp_path):
        path = write_config(tmp_path, '- a\n- b\n')

        with pytest.raises(ConfigError, match='got list'):
            SettingsLoader.load_file(path)

    def test_wrong_string_type_names_field(self, tmp_path):
        path = write_config(tmp_path, 'space_key: [DOCS]\n')

        with pytest.raises(ConfigError) as exc_info:
            SettingsLoader.load_file(path)

        assert exc_info.value.config_field == 'space_key'

    def test_wrong_bool_type_names_field(self, tmp_path):
        path = write_config(tmp_path, 'convert_wiki_links: "yes please"\n')

        with pytest.raises(ConfigError) as exc_info:
            SettingsLoader.load_file(path)

        assert exc_info.value.config_field == 'convert_wiki_links'


class TestApplyEnvironment:
    """Test cases for environment overrides."""

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, 'space_key: FILE\nauth_email: file@acme.com\n')
        monkeypatch.setenv('CONFLUENCE_SPACE_KEY', ' ENV ')
        monkeypatch.setenv('CONFLUENCE_API_TOKEN', 'env-token')

        settings = SettingsLoader.load(path)

        assert settings.space_key == 'ENV'
        assert settings.api_token == 'env-token'
        assert settings.auth_email == 'file@acme.com'

    def test_blank_environment_values_ignored(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, 'space_key: FILE\n')
        monkeypatch.setenv('CONFLUENCE_SPACE_KEY', '   ')

        assert SettingsLoader.load(path).space_key == 'FILE'

    def test_environment_only(self, monkeypatch):
        monkeypatch.setenv('CONFLUENCE_URL', 'https://acme.atlassian.net/wiki')
        monkeypatch.setenv('CONFLUENCE_USER', 'me@acme.com')
        monkeypatch.setenv('CONFLUENCE_API_TOKEN', 't')
        monkeypatch.setenv('CONFLUENCE_SPACE_KEY', 'DOCS')
        monkeypatch.setenv('CONFLUENCE_PARENT_PAGE_ID', '42')

        settings = SettingsLoader.load()

        assert settings.missing_fields() == []
        assert settings.parent_page_id == '42'


def test_default_config_path():
    path = SettingsLoader.default_config_path('/vault')

    assert path.replace('\\', '/') == '/vault/.obsidian-confluence/config.yaml'
