"""Local (no-CI) backend.

Used as the fallback when ocirelease is running outside any CI system,
e.g. when cutting a release from a developer workstation.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from typing import Any

from ocirelease.ci import CIBase


def _git(*args: str) -> str | None:
    """Run a read-only git command and return stripped stdout, or None."""
    try:
        result = subprocess.run(
            ["git", *args], capture_output=True, text=True, check=False
        )
    except FileNotFoundError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


class LocalCI(CIBase):
    """Fallback CI backend for local runs."""

    @staticmethod
    def detect() -> bool:
        # LocalCI is the fallback; it always "matches".
        return True

    def get_token(self) -> str | None:
        """Read GITHUB_TOKEN from the environment (if set)."""
        return os.environ.get("GITHUB_TOKEN")

    def get_actor(self) -> str | None:
        """Try to determine a username for registry login.

        Checks GITHUB_ACTOR, then falls back to the OS username.
        """
        actor = os.environ.get("GITHUB_ACTOR")
        if actor:
            return actor
        try:
            result = subprocess.run(
                ["whoami"], capture_output=True, text=True, check=False
            )
            if result.returncode == 0:
                return result.stdout.strip()
        except FileNotFoundError:
            pass
        return None

    def get_ref(self) -> str | None:
        """Return the symbolic ref of HEAD (None on a detached HEAD)."""
        return _git("symbolic-ref", "HEAD")

    def get_sha(self) -> str | None:
        return _git("rev-parse", "HEAD")

    def get_repository(self) -> str | None:
        """Derive ``owner/repo`` from the origin remote URL."""
        url = _git("remote", "get-url", "origin")
        if not url:
            return None
        # git@github.com:org/repo.git or https://github.com/org/repo(.git)
        m = re.match(r"(?:git@[^:]+:|https?://[^/]+/)([^/]+/[^/]+?)(?:\.git)?/?$", url)
        return m.group(1) if m else None

    def event_name(self) -> str:
        return "push"

    def set_output(self, key: str, value: str) -> None:
        """Print the output to stdout (no CI system to receive it)."""
        sys.stdout.write(f"{key}={value}\n")
        sys.stdout.flush()

    def event_metadata(self) -> dict[str, Any]:
        """Gather what we can from the local git repo."""
        meta: dict[str, Any] = {"event": self.event_name()}
        for key, value in (
            ("sha", self.get_sha()),
            ("ref", self.get_ref()),
            ("repo", self.get_repository()),
        ):
            if value:
                meta[key] = value
        return meta
