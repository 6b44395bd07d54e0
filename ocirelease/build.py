"""Image build via the container engine's compose front end.

This module does NOT log in, push, or know about CI systems.
"""

from __future__ import annotations

from ocirelease import engine, log
from ocirelease.config import Config


def run(cfg: Config) -> None:
    """Run ``<engine> compose build`` for the project."""
    engine.require(cfg.engine)
    log.info(f"Engine: {cfg.engine}")
    if cfg.compose_file:
        log.info(f"Compose file: {cfg.compose_file}")

    log.timer_start("build")
    engine.compose_build(cfg.engine, cfg.compose_file)
    log.timer_stop("build")

    if engine.image_exists(cfg.engine, cfg.image):
        log.success(f"Built {cfg.image}")
    else:
        log.warn(
            f"{cfg.image} not found in local storage after build "
            "-- does the compose file tag it?"
        )
