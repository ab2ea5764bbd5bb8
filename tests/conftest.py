"""Root conftest — shared test configuration."""

import os

import pytest

from skillcheck.config import get_settings

# Ensure tests never pick up a developer's real engine settings
for _key in list(os.environ):
    if _key.upper().startswith("SKILLCHECK_"):
        del os.environ[_key]


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
