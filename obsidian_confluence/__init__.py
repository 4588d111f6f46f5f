"""Publish Obsidian notes to Confluence pages."""

__version__ = "0.1.0"
