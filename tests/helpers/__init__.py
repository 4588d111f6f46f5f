"""Test helper modules.

This package provides utilities for unit and integration testing:
- fake_confluence: In-memory stand-in for the Confluence REST API
- fake_pandoc: Minimal markdown to HTML stand-in for the pandoc binary
"""

from .fake_confluence import FakeConfluence, make_response
from .fake_pandoc import fake_pandoc_run

__all__ = [
    'FakeConfluence',
    'fake_pandoc_run',
    'make_response',
]
