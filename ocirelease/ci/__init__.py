"""CI backend abstraction and auto-detection.

The ``detect()`` function inspects environment variables and returns the
appropriate CI backend instance.  All other code should interact with CI
through the :class:`CIBase` interface -- never import a backend directly.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any


class CIBase(ABC):
    """Abstract base class for CI backends."""

    @staticmethod
    @abstractmethod
    def detect() -> bool:
        """Return True if running inside this CI environment."""

    @abstractmethod
    def get_token(self) -> str | None:
        """Return auth token for registry operations."""

    @abstractmethod
    def get_actor(self) -> str | None:
        """Return username/actor for registry login."""

    @abstractmethod
    def get_ref(self) -> str | None:
        """Return the full git ref being built (e.g. ``refs/heads/main``)."""

    @abstractmethod
    def get_sha(self) -> str | None:
        """Return the commit SHA being built."""

    @abstractmethod
    def get_repository(self) -> str | None:
        """Return the ``owner/repo`` slug, when known."""

    @abstractmethod
    def event_name(self) -> str:
        """Return the event that triggered this run (``push``, ``pull_request``...)."""

    @abstractmethod
    def set_output(self, key: str, value: str) -> None:
        """Set a CI output variable."""

    @abstractmethod
    def event_metadata(self) -> dict[str, Any]:
        """Return event metadata (commit SHA, ref, repo URL, etc.)."""

    def server_url(self) -> str:
        """Return the base URL of the git forge."""
        return os.environ.get("GITHUB_SERVER_URL", "https://github.com")


def detect() -> CIBase:
    """Auto-detect the current CI environment and return a backend instance.

    Falls back to :class:`~ocirelease.ci.local.LocalCI` when no CI system
    is detected.
    """
    from ocirelease.ci.github import GitHubCI
    if GitHubCI.detect():
        return GitHubCI()

    from ocirelease.ci.local import LocalCI
    return LocalCI()
