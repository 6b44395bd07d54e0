"""Repository checkout.

Makes sure the working directory holds the commit being released:

* Inside a git work tree, HEAD is verified and, when CI names a
  different commit, that commit is fetched (depth 1) and checked out
  detached.
* Outside a work tree, a fresh repository is initialised, the commit is
  fetched from ``<server>/<owner>/<repo>`` and checked out.

The token, when present, is handed to git through an HTTP extra header
on the command line and is registered with :mod:`ocirelease.log` so it
is masked wherever the command is echoed.
"""

from __future__ import annotations

import base64
import subprocess
from pathlib import Path

from ocirelease import log
from ocirelease.ci import CIBase


class CheckoutError(Exception):
    """Raised when the repository cannot be checked out."""


def _auth_args(token: str | None) -> list[str]:
    if not token:
        return []
    basic = base64.b64encode(f"x-access-token:{token}".encode()).decode()
    log.add_secret(basic)
    return ["-c", f"http.extraheader=AUTHORIZATION: basic {basic}"]


def _git(
    args: list[str],
    cwd: Path,
    *,
    check: bool = True,
    quiet: bool = False,
) -> subprocess.CompletedProcess[str]:
    cmd = ["git", *args]
    if not quiet:
        log.info(f"$ {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd, cwd=cwd, capture_output=True, text=True, check=False,
        )
    except FileNotFoundError as exc:
        raise CheckoutError("git is not installed") from exc
    if check and result.returncode != 0:
        stderr = result.stderr.strip() if result.stderr else ""
        raise CheckoutError(
            log.redact(f"{' '.join(cmd)} failed (rc={result.returncode}): {stderr}")
        )
    return result


def _in_work_tree(base: Path) -> bool:
    result = _git(["rev-parse", "--is-inside-work-tree"], base, check=False, quiet=True)
    return result.returncode == 0 and result.stdout.strip() == "true"


def _head(base: Path) -> str | None:
    result = _git(["rev-parse", "HEAD"], base, check=False, quiet=True)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _fetch_and_checkout(base: Path, sha: str, token: str | None) -> None:
    _git([*_auth_args(token), "fetch", "--no-tags", "--depth=1", "origin", sha], base)
    _git(["checkout", "--force", "--detach", sha], base)


def run(ci: CIBase, base: Path | None = None) -> str:
    """Check out the commit under release.  Returns the resulting HEAD SHA."""
    if base is None:
        base = Path.cwd()
    base = Path(base)

    sha = ci.get_sha()
    token = ci.get_token()

    if _in_work_tree(base):
        head = _head(base)
        if sha and head != sha:
            log.info(f"HEAD is {head or '(none)'}; checking out {sha}")
            _fetch_and_checkout(base, sha, token)
            head = _head(base)
        if not head:
            raise CheckoutError(f"{base} has no commits")
        log.success(f"Repository at {head}")
        return head

    repo = ci.get_repository()
    if not repo or not sha:
        raise CheckoutError(
            f"{base} is not a git work tree and no repository/commit is known to clone"
        )

    url = f"{ci.server_url()}/{repo}"
    log.info(f"Cloning {url} at {sha}")
    base.mkdir(parents=True, exist_ok=True)
    _git(["init", "--quiet"], base)
    _git(["remote", "add", "origin", url], base)
    _fetch_and_checkout(base, sha, token)

    head = _head(base)
    if head != sha:
        raise CheckoutError(f"expected {sha} after checkout, got {head}")
    log.success(f"Repository at {head}")
    return head
