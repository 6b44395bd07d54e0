"""GitHub Actions CI backend.

Reads configuration from the GITHUB_* environment variables that GitHub
Actions injects into every workflow run.  Outputs are written to the
``$GITHUB_OUTPUT`` file using the ``key=value`` or multi-line delimiter
protocol.
"""

from __future__ import annotations

import os
from typing import Any

from ocirelease import log
from ocirelease.ci import CIBase


class GitHubCI(CIBase):
    """CI backend for GitHub Actions."""

    @staticmethod
    def detect() -> bool:
        """Return True when running inside a GitHub Actions workflow."""
        return os.environ.get("GITHUB_ACTIONS") == "true"

    def get_token(self) -> str | None:
        """Return the GITHUB_TOKEN from the environment."""
        return os.environ.get("GITHUB_TOKEN")

    def get_actor(self) -> str | None:
        """Return the GITHUB_ACTOR (the user or app that triggered the workflow)."""
        return os.environ.get("GITHUB_ACTOR")

    def get_ref(self) -> str | None:
        return os.environ.get("GITHUB_REF")

    def get_sha(self) -> str | None:
        return os.environ.get("GITHUB_SHA")

    def get_repository(self) -> str | None:
        return os.environ.get("GITHUB_REPOSITORY")

    def event_name(self) -> str:
        return os.environ.get("GITHUB_EVENT_NAME", "push")

    def set_output(self, key: str, value: str) -> None:
        """Append a ``key=value`` pair to the ``$GITHUB_OUTPUT`` file.

        For multi-line values, uses the heredoc delimiter protocol::

            key<<OCIRELEASE_EOF
            value
            OCIRELEASE_EOF
        """
        output_file = os.environ.get("GITHUB_OUTPUT")
        if not output_file:
            log.warn(
                "GITHUB_OUTPUT is not set; cannot write output "
                f"(key={key!r})"
            )
            return

        try:
            with open(output_file, "a") as fh:
                if "\n" in value:
                    fh.write(f"{key}<<OCIRELEASE_EOF\n")
                    fh.write(value)
                    if not value.endswith("\n"):
                        fh.write("\n")
                    fh.write("OCIRELEASE_EOF\n")
                else:
                    fh.write(f"{key}={value}\n")
        except OSError as exc:
            log.error(f"failed to write to GITHUB_OUTPUT ({output_file}): {exc}")

    def event_metadata(self) -> dict[str, Any]:
        """Return metadata about the current workflow event.

        Keys returned (when the corresponding env vars are set):
        - ``sha``: The commit SHA that triggered the workflow.
        - ``ref``: The full git ref.
        - ``repo``: The owner/repo string (e.g. ``blockfrost/blockfrost-platform``).
        - ``run_url``: Full URL to this workflow run in the GitHub UI.
        - ``event``: The event name (push, pull_request, etc.).
        """
        meta: dict[str, Any] = {}

        sha = self.get_sha()
        if sha:
            meta["sha"] = sha

        ref = self.get_ref()
        if ref:
            meta["ref"] = ref

        repo = self.get_repository()
        if repo:
            meta["repo"] = repo

        run_id = os.environ.get("GITHUB_RUN_ID")
        if repo and run_id:
            meta["run_url"] = f"{self.server_url()}/{repo}/actions/runs/{run_id}"

        meta["event"] = self.event_name()
        return meta
