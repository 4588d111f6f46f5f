"""Local vault access for the Confluence publisher.

This package provides file access over an Obsidian-style vault directory,
Obsidian link resolution, and reading/writing of frontmatter values.
"""

from .errors import (
    VaultError,
    FilesystemError,
    ConfigError,
    FrontmatterError,
)
from .frontmatter_accessor import FrontmatterAccessor
from .frontmatter_handler import FrontmatterHandler
from .local_vault import LocalVault
from .models import VaultFile

__all__ = [
    'VaultError',
    'FilesystemError',
    'ConfigError',
    'FrontmatterError',
    'FrontmatterAccessor',
    'FrontmatterHandler',
    'LocalVault',
    'VaultFile',
]
