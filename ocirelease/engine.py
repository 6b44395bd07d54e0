"""Thin wrapper around the docker and podman command-line tools.

This module has ZERO business logic.  It does not know about config,
refs, CI, or registries.  It runs commands and returns output.
"""

from __future__ import annotations

import shutil
import subprocess

from ocirelease import log


class EngineError(Exception):
    """Raised when a container engine command fails."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            log.redact(f"Command failed (rc={returncode}): {' '.join(cmd)}\n{stderr}")
        )


# ── Internal helpers ──────────────────────────────────────────────────

def _run(
    cmd: list[str],
    *,
    capture: bool = True,
    check: bool = True,
    quiet: bool = False,
    stdin: str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, log it, capture output, optionally raise on failure."""
    if not quiet:
        log.info(f"$ {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            input=stdin,
            capture_output=capture,
            text=True,
        )
    except FileNotFoundError as exc:
        raise EngineError(cmd, 127, f"{cmd[0]}: command not found") from exc
    if check and result.returncode != 0:
        stderr = result.stderr.strip() if result.stderr else ""
        raise EngineError(cmd, result.returncode, stderr)
    return result


# ── Engine commands ───────────────────────────────────────────────────

def available(engine: str) -> bool:
    """Return True if the *engine* executable is on ``PATH``."""
    return shutil.which(engine) is not None


def require(engine: str) -> None:
    """Raise :class:`EngineError` unless *engine* is installed."""
    if not available(engine):
        raise EngineError([engine], 127, f"{engine}: not found on PATH")


def login(engine: str, host: str, username: str, password: str) -> None:
    """Login to a container registry.

    The password is fed through ``--password-stdin`` so it never appears
    in the process table or in the logged command line.
    """
    _run(
        [engine, "login", host, "-u", username, "--password-stdin"],
        stdin=password,
    )


def compose_build(engine: str, compose_file: str | None = None) -> None:
    """Run ``<engine> compose build``.

    Build output is streamed to the terminal so the user can follow progress.
    """
    cmd = [engine, "compose"]
    if compose_file:
        cmd += ["-f", compose_file]
    cmd.append("build")
    _run(cmd, capture=False)


def push(engine: str, image_ref: str) -> None:
    """Push an image to a registry."""
    _run([engine, "push", image_ref], capture=False)


def image_exists(engine: str, ref: str) -> bool:
    """Return True if *ref* exists in local storage."""
    result = _run(
        [engine, "image", "inspect", ref],
        check=False,
        quiet=True,
    )
    return result.returncode == 0
