"""Integration tests for publishing notes.

These tests run the whole pipeline (vault, resolvers, converter, API wrapper
and CLI) against an in-memory Confluence and a stand-in pandoc binary.
"""
