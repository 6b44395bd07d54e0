"""Logging module for ocirelease.

Provides colored output, step headers, timing support, and secret
redaction.  Every line written through this module passes through
:func:`redact`, so a registered token never reaches the terminal or the
CI log, even when it is embedded in a command line.
"""

from __future__ import annotations

import contextlib
import sys
import time
from collections.abc import Iterator

# ANSI color codes -- only used when stdout is a terminal.
_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}

_MASK = "***"

_use_color: bool | None = None
_secrets: set[str] = set()


def _color_enabled() -> bool:
    global _use_color
    if _use_color is None:
        _use_color = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
    return _use_color


def set_color(enabled: bool) -> None:
    """Override automatic color detection."""
    global _use_color
    _use_color = enabled


def _c(name: str) -> str:
    """Return the ANSI escape for *name* if color is enabled, else empty string."""
    if _color_enabled():
        return _COLORS.get(name, "")
    return ""


def _on_github() -> bool:
    # Imported here: ocirelease.ci.github itself logs through this module.
    from ocirelease.ci.github import GitHubCI
    return GitHubCI.detect()


# ── Secrets ───────────────────────────────────────────────────────────

def add_secret(value: str | None) -> None:
    """Register *value* so that it is masked in all subsequent output.

    On GitHub Actions the runner is told about it as well, which masks
    the value in output written by child processes.
    """
    if not value or value in _secrets:
        return
    _secrets.add(value)
    if _on_github():
        sys.stdout.write(f"::add-mask::{value}\n")
        sys.stdout.flush()


def clear_secrets() -> None:
    _secrets.clear()


def redact(text: str) -> str:
    """Replace every registered secret in *text* with ``***``."""
    # Longest first so a secret containing another is masked whole.
    for secret in sorted(_secrets, key=len, reverse=True):
        text = text.replace(secret, _MASK)
    return text


# ── Public API ────────────────────────────────────────────────────────

def step(message: str) -> None:
    """Print a bold step header.  e.g. ``=== Build the image ===``"""
    sys.stdout.write(
        f"{_c('bold')}{_c('cyan')}=== {redact(message)} ==={_c('reset')}\n"
    )
    sys.stdout.flush()


def info(message: str) -> None:
    sys.stdout.write(f"{_c('blue')}[info]{_c('reset')} {redact(message)}\n")
    sys.stdout.flush()


def warn(message: str) -> None:
    sys.stderr.write(f"{_c('yellow')}[warn]{_c('reset')} {redact(message)}\n")
    sys.stderr.flush()


def error(message: str) -> None:
    sys.stderr.write(f"{_c('red')}[error]{_c('reset')} {redact(message)}\n")
    sys.stderr.flush()


def success(message: str) -> None:
    sys.stdout.write(f"{_c('green')}[ok]{_c('reset')} {redact(message)}\n")
    sys.stdout.flush()


@contextlib.contextmanager
def group(title: str) -> Iterator[None]:
    """Fold the enclosed output under *title*.

    Emits ``::group::`` / ``::endgroup::`` on GitHub Actions; elsewhere
    this is a plain :func:`step` header.
    """
    if _on_github():
        sys.stdout.write(f"::group::{redact(title)}\n")
        sys.stdout.flush()
        try:
            yield
        finally:
            sys.stdout.write("::endgroup::\n")
            sys.stdout.flush()
    else:
        step(title)
        yield


# ── Timing helpers ────────────────────────────────────────────────────

_timers: dict[str, float] = {}


def timer_start(name: str) -> None:
    """Start a named timer."""
    _timers[name] = time.monotonic()


def timer_stop(name: str) -> str:
    """Stop a named timer and return a human-readable elapsed string.

    Also prints the elapsed time.  Returns the formatted string for
    callers that want to embed it elsewhere.
    """
    start = _timers.pop(name, None)
    if start is None:
        warn(f"timer_stop called for unknown timer: {name}")
        return "??s"
    elapsed = time.monotonic() - start
    formatted = _format_elapsed(elapsed)
    info(f"{name} completed in {formatted}")
    return formatted


def _format_elapsed(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m{secs:.1f}s"
