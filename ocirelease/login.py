"""Registry login.

Authenticates the container engine against the configured registry
using the actor and token supplied by the CI environment.  Missing
credentials fail the step; there is no anonymous fallback.
"""

from __future__ import annotations

from ocirelease import engine, log
from ocirelease import registry as registry_mod
from ocirelease.ci import CIBase
from ocirelease.config import Config


class LoginError(Exception):
    """Raised when registry credentials are missing."""


def run(cfg: Config, ci: CIBase) -> None:
    token = ci.get_token()
    actor = ci.get_actor()
    if not token:
        raise LoginError("no registry token available (set GITHUB_TOKEN)")
    if not actor:
        raise LoginError("no registry actor available (set GITHUB_ACTOR)")
    engine.require(cfg.engine)

    log.add_secret(token)
    reg = registry_mod.for_url(cfg.registry, cfg.engine)
    reg.login(token, actor)
