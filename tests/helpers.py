"""Test doubles and factories shared by the ocirelease tests."""

from __future__ import annotations

import argparse
from typing import Any

from ocirelease.ci import CIBase


def make_args(**kwargs) -> argparse.Namespace:
    """Factory for argparse.Namespace with common defaults."""
    defaults = {
        "verbose": False,
        "no_color": True,
        "ref": None,
        "registry": None,
        "image": None,
        "engine": None,
        "dry_run": False,
        "command": "run",
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class StubCI(CIBase):
    """Concrete CI backend with fixed answers; records outputs."""

    def __init__(
        self,
        *,
        token: str | None = "ghs_secret",
        actor: str | None = "octocat",
        ref: str | None = "refs/heads/main",
        sha: str | None = "0123456789abcdef0123456789abcdef01234567",
        repository: str | None = "blockfrost/blockfrost-platform",
        event: str = "push",
    ) -> None:
        self.token = token
        self.actor = actor
        self.ref = ref
        self.sha = sha
        self.repository = repository
        self.event = event
        self.outputs: dict[str, str] = {}

    @staticmethod
    def detect() -> bool:
        return True

    def get_token(self):
        return self.token

    def get_actor(self):
        return self.actor

    def get_ref(self):
        return self.ref

    def get_sha(self):
        return self.sha

    def get_repository(self):
        return self.repository

    def event_name(self):
        return self.event

    def set_output(self, key, value):
        self.outputs[key] = value

    def event_metadata(self) -> dict[str, Any]:
        return {"event": self.event, "ref": self.ref}
