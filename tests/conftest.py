"""Shared test fixtures for the getpronto test suite."""

from __future__ import annotations

import pytest

from getpronto.config import GetProntoConfig
from getpronto.mime import MimeRegistry


@pytest.fixture
def config() -> GetProntoConfig:
    """Default test configuration with a dummy API key."""
    return GetProntoConfig(api_key="test_key_1234")


@pytest.fixture
def registry() -> MimeRegistry:
    """MIME registry built from the default file-type table."""
    return MimeRegistry()
