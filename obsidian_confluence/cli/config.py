"""Settings loading and validation.

Settings come from a YAML file inside the vault, overridden by environment
variables (optionally populated from a .env file).

Configuration file structure (every key optional):
    base_url: "https://example.atlassian.net/wiki"
    space_key: "DOCS"
    auth_email: "me@example.com"
    api_token: "..."
    parent_page_id: "123456"
    page_id_frontmatter_key: "confluencePageId"
    legacy_page_id_frontmatter_keys: ["confluence_page_id"]
    parent_id_frontmatter_key: "confluenceParentId"
    legacy_parent_id_frontmatter_keys: ["confluence_parent_id"]
    convert_wiki_links: true
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from obsidian_confluence.confluence_client.auth import Authenticator
from obsidian_confluence.models.settings import SyncSettings
from obsidian_confluence.vault.errors import ConfigError, FilesystemError

logger = logging.getLogger(__name__)

STRING_FIELDS = (
    'base_url',
    'space_key',
    'auth_email',
    'api_token',
    'parent_page_id',
    'page_id_frontmatter_key',
    'parent_id_frontmatter_key',
)
LIST_FIELDS = (
    'legacy_page_id_frontmatter_keys',
    'legacy_parent_id_frontmatter_keys',
)
BOOL_FIELDS = ('convert_wiki_links',)


class SettingsLoader:
    """Builds SyncSettings from the config file and the environment.

    Precedence (highest first): environment variables, config file,
    built-in defaults. Missing required values are not an error here; the
    sync command reports them all at once.
    """

    DEFAULT_CONFIG_DIR = '.obsidian-confluence'
    DEFAULT_CONFIG_FILE = 'config.yaml'

    # Environment variable -> settings field
    ENV_OVERRIDES = {
        'CONFLUENCE_URL': 'base_url',
        'CONFLUENCE_USER': 'auth_email',
        'CONFLUENCE_API_TOKEN': 'api_token',
        'CONFLUENCE_SPACE_KEY': 'space_key',
        'CONFLUENCE_PARENT_PAGE_ID': 'parent_page_id',
    }

    @classmethod
    def default_config_path(cls, vault_root: str) -> str:
        return str(Path(vault_root) / cls.DEFAULT_CONFIG_DIR / cls.DEFAULT_CONFIG_FILE)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> SyncSettings:
        """Load settings from ``config_path`` (if given) and the environment.

        Raises:
            FilesystemError: If the config file exists but cannot be read
            ConfigError: If the config file is invalid or malformed
        """
        settings = cls.load_file(config_path) if config_path else SyncSettings()
        return cls.apply_environment(settings)

    @classmethod
    def load_file(cls, config_path: str) -> SyncSettings:
        """Parse a YAML config file; a missing or empty file yields defaults.

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"No config file at {config_path}, using defaults")
            return SyncSettings()
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        if not content.strip():
            return SyncSettings()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return SyncSettings()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Config must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        logger.debug(f"Loaded config from {config_path}")
        return SyncSettings(**cls._parse_config(config_dict))

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Validate known fields; unknown keys are ignored."""
        fields: Dict[str, Any] = {}

        for name in STRING_FIELDS:
            if config_dict.get(name) is None:
                continue
            value = config_dict[name]
            # Page ids are often written unquoted
            if isinstance(value, int) and not isinstance(value, bool):
                value = str(value)
            if not isinstance(value, str):
                raise ConfigError(
                    f"Must be a string, got {type(value).__name__}", config_field=name
                )
            fields[name] = value.strip()

        for name in LIST_FIELDS:
            if config_dict.get(name) is None:
                continue
            value = config_dict[name]
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError("Must be a list of strings", config_field=name)
            fields[name] = tuple(v.strip() for v in value if v.strip())

        for name in BOOL_FIELDS:
            if config_dict.get(name) is None:
                continue
            value = config_dict[name]
            if not isinstance(value, bool):
                raise ConfigError(
                    f"Must be true or false, got {type(value).__name__}", config_field=name
                )
            fields[name] = value

        return fields

    @classmethod
    def apply_environment(cls, settings: SyncSettings) -> SyncSettings:
        """Override settings with non-empty environment variables."""
        credentials = Authenticator().get_credentials()
        env_values = {
            'CONFLUENCE_URL': credentials.url,
            'CONFLUENCE_USER': credentials.user,
            'CONFLUENCE_API_TOKEN': credentials.api_token,
            'CONFLUENCE_SPACE_KEY': (os.getenv('CONFLUENCE_SPACE_KEY') or '').strip(),
            'CONFLUENCE_PARENT_PAGE_ID': (os.getenv('CONFLUENCE_PARENT_PAGE_ID') or '').strip(),
        }

        overrides = {
            cls.ENV_OVERRIDES[name]: value
            for name, value in env_values.items()
            if value
        }
        if overrides:
            logger.debug(f"Environment overrides: {', '.join(sorted(overrides))}")
            settings = replace(settings, **overrides)
        return settings
