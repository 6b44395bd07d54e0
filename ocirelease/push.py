"""Conditional push of the release image.

The image is pushed only when the ref being built equals the configured
push ref (``refs/heads/main`` by default).  The pushed reference is
always ``cfg.image``; no tags are derived from the ref or the commit.

This module does NOT build or log in.
"""

from __future__ import annotations

from ocirelease import log
from ocirelease import registry as registry_mod
from ocirelease.ci import CIBase
from ocirelease.config import Config


def should_push(ref: str | None, push_ref: str) -> bool:
    """Return True if *ref* is exactly *push_ref*."""
    return ref == push_ref


def run(cfg: Config, ci: CIBase, ref: str | None) -> bool:
    """Push ``cfg.image`` if *ref* is the push ref.  Returns True if pushed."""
    if not should_push(ref, cfg.push_ref):
        log.info(f"Ref {ref or '(unknown)'} is not {cfg.push_ref} -- not pushing")
        ci.set_output("pushed", "false")
        return False

    reg = registry_mod.for_url(cfg.registry, cfg.engine)
    reg.push(cfg.image)
    ci.set_output("image", cfg.image)
    ci.set_output("pushed", "true")
    return True
