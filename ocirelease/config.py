"""Workflow configuration loading and validation.

This module has ZERO side effects.  It reads YAML and the environment
and returns dataclasses.  It does not run the container engine, know
about CI, or touch the network.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_REGISTRY = "ghcr.io"
DEFAULT_IMAGE = "ghcr.io/blockfrost/blockfrost-platform:latest"
DEFAULT_PUSH_REF = "refs/heads/main"

SUPPORTED_ENGINES: tuple[str, ...] = ("docker", "podman")

# Searched in order; the first match wins.
_CONFIG_PATHS = [
    ".ocirelease.yaml",
    ".github/ocirelease.yaml",
]

# Environment variable -> Config attribute.
_ENV_OVERRIDES: dict[str, str] = {
    "OCIRELEASE_REGISTRY": "registry",
    "OCIRELEASE_IMAGE": "image",
    "OCIRELEASE_PUSH_REF": "push_ref",
    "OCIRELEASE_ENGINE": "engine",
    "OCIRELEASE_COMPOSE_FILE": "compose_file",
}

# name[:tag][@digest]; the tag separator is the last ':' after the last '/'.
_TAG_RE = re.compile(r":([\w][\w.-]{0,127})$")


class ConfigError(ValueError):
    """Raised when the configuration file or its values are invalid."""


# ── Dataclasses ──────────────────────────────────────────────────────

@dataclass
class Trigger:
    """The repository event that starts the workflow."""

    event: str = "push"


@dataclass
class Config:
    """Top-level release workflow configuration."""

    name: str = "OCI"
    runner: str = "ubuntu-latest"
    registry: str = DEFAULT_REGISTRY
    image: str = DEFAULT_IMAGE
    push_ref: str = DEFAULT_PUSH_REF
    engine: str = "docker"
    compose_file: str | None = None
    trigger: Trigger = field(default_factory=Trigger)

    @property
    def registry_host(self) -> str:
        """Return the registry hostname (scheme and path stripped)."""
        return registry_host(self.registry)


def registry_host(url: str) -> str:
    """Extract the hostname (with port, if any) from a registry URL."""
    for prefix in ("https://", "http://"):
        if url.startswith(prefix):
            url = url[len(prefix):]
            break
    return url.split("/")[0]


def image_tag(ref: str) -> str | None:
    """Return the tag of image reference *ref*, or None when it has none."""
    name = ref.split("@", 1)[0]
    last = name.rsplit("/", 1)[-1]
    m = _TAG_RE.search(last)
    return m.group(1) if m else None


# ── Loading ──────────────────────────────────────────────────────────

def _find_config_file(base: Path) -> Path | None:
    for name in _CONFIG_PATHS:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def _parse(data: dict[str, Any], source: Path | str) -> dict[str, Any]:
    """Turn raw YAML data into Config keyword arguments."""
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at the top level")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "trigger":
            if isinstance(value, str):
                kwargs["trigger"] = Trigger(event=value)
            elif isinstance(value, dict):
                extra = sorted(set(value) - {"event"})
                if extra:
                    raise ConfigError(
                        f"{source}: unknown key(s) under 'trigger': {', '.join(extra)}"
                    )
                kwargs["trigger"] = Trigger(event=str(value.get("event", "push")))
            else:
                raise ConfigError(f"{source}: 'trigger' must be a string or mapping")
        elif key == "compose_file":
            kwargs[key] = None if value is None else str(value)
        else:
            kwargs[key] = str(value)
    return kwargs


def _apply_env(cfg: Config, environ: dict[str, str] | None = None) -> Config:
    env = os.environ if environ is None else environ
    for var, attr in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            setattr(cfg, attr, value)
    return cfg


def validate(cfg: Config) -> None:
    """Raise :class:`ConfigError` if *cfg* cannot describe a release."""
    if cfg.trigger.event != "push":
        raise ConfigError(
            f"unsupported trigger event: {cfg.trigger.event}  (only push is supported)"
        )
    if cfg.engine not in SUPPORTED_ENGINES:
        raise ConfigError(
            f"unsupported engine: {cfg.engine}  "
            f"(supported: {', '.join(SUPPORTED_ENGINES)})"
        )
    if not cfg.push_ref.startswith("refs/"):
        raise ConfigError(
            f"push_ref must be a full ref (e.g. refs/heads/main), got {cfg.push_ref!r}"
        )
    if image_tag(cfg.image) is None:
        raise ConfigError(f"image has no explicit tag: {cfg.image}")
    host = cfg.registry_host
    if not host:
        raise ConfigError("registry is empty")
    if cfg.image.split("/", 1)[0] != host:
        raise ConfigError(
            f"image {cfg.image} is not hosted on the login registry {host}"
        )


def load(base: Path | None = None) -> Config:
    """Load configuration: defaults, then config file, then environment.

    Parameters
    ----------
    base:
        Project root directory.  Defaults to the current working directory.
    """
    if base is None:
        base = Path.cwd()
    base = Path(base)

    cfg = Config()
    config_file = _find_config_file(base)
    if config_file is not None:
        with open(config_file) as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{config_file}: {exc}") from exc
        cfg = Config(**_parse(data, config_file))

    return _apply_env(cfg)
