"""Unit tests for the translation relay.

This package contains test modules for all components of the relay.
Tests use pytest with asyncio support and replace the chat platform and translation services with in-memory doubles.
"""
