"""
Pytest configuration and shared fixtures for the field scrubber tests.

Every test starts from the built-in scrub configuration: SCRUB_* environment
variables are cleared and the process-wide default config is reset.
"""

import os
import sys

import pytest

# Add parent directory to path for package and server imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scrub import ScrubConfig, set_default_config  # noqa: E402

SCRUB_ENV_VARS = ("SCRUB_DEFAULT_FIELDS", "SCRUB_MASK_SYMBOL", "SCRUB_MASK_LEN", "SCRUB_MASK_LEN_VARY")


@pytest.fixture(autouse=True)
def reset_scrub_config(monkeypatch):
    """
    Reset the scrub configuration around each test.
    This runs automatically before each test.
    """
    for name in SCRUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def fixed_config():
    """Full masks have the fixed default length (8)."""
    return ScrubConfig(mask_len_vary=False)


@pytest.fixture
def vary_config():
    """Full masks are as long as the original value."""
    return ScrubConfig(mask_len_vary=True)
