"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop cached settings and any SEARCH_ANALYSIS_* variables around each test."""

    from search_analysis.config import get_settings

    for key in list(os.environ):
        if key.startswith("SEARCH_ANALYSIS_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
