"""Shared fixtures for ocirelease tests."""

from __future__ import annotations

import pytest

from ocirelease import log


@pytest.fixture(autouse=True)
def _reset_log_state():
    """Keep registered secrets and color overrides from leaking between tests."""
    original = log._use_color
    log.set_color(False)
    log.clear_secrets()
    yield
    log.clear_secrets()
    log._use_color = original
