"""GitHub Actions workflow rendering.

Produces the declarative equivalent of :mod:`ocirelease.pipeline` for
projects that prefer to run the release steps as a native workflow:
one job, triggered on every push, with the push step guarded by the
configured push ref.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any

import yaml

from ocirelease import log
from ocirelease.config import Config

DEFAULT_PATH = Path(".github") / "workflows" / "oci-image.yaml"


def _build_command(cfg: Config) -> str:
    cmd = [cfg.engine, "compose"]
    if cfg.compose_file:
        cmd += ["-f", cfg.compose_file]
    cmd.append("build")
    return shlex.join(cmd)


def as_dict(cfg: Config) -> dict[str, Any]:
    """Return the workflow as a plain mapping (insertion-ordered)."""
    steps: list[dict[str, Any]] = [
        {
            "name": "📥 Checkout repository",
            "uses": "actions/checkout@v4",
        },
        {
            "name": "🧰 Login to registry",
            "uses": "docker/login-action@v3",
            "with": {
                "registry": cfg.registry_host,
                "username": "${{ github.actor }}",
                "password": "${{ secrets.GITHUB_TOKEN }}",
            },
        },
        {
            "name": "🚀 Build the image",
            "run": _build_command(cfg),
        },
        {
            "name": "📤 Push the image",
            "if": f"github.ref == '{cfg.push_ref}'",
            "run": shlex.join([cfg.engine, "push", cfg.image]),
        },
    ]
    return {
        "name": cfg.name,
        "on": {cfg.trigger.event: None},
        "jobs": {
            "build": {
                "runs-on": cfg.runner,
                "steps": steps,
            },
        },
    }


def render(cfg: Config) -> str:
    """Render the workflow YAML for *cfg*."""
    text = yaml.safe_dump(
        as_dict(cfg),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    # PyYAML quotes the "on" key (a YAML 1.1 boolean) and spells None as
    # "null"; GitHub reads both, but the bare forms are the usual style.
    text = text.replace("'on':", "on:", 1)
    return text.replace(": null\n", ":\n")


def write(cfg: Config, path: Path | None = None, *, force: bool = False) -> bool:
    """Write the rendered workflow to *path*.

    Returns True if the file was written, False if it already existed
    and *force* was not given.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_PATH
    path = Path(path)

    if path.exists() and not force:
        log.warn(f"skipped {path} (already exists; use --force to overwrite)")
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render(cfg))
    log.success(f"wrote {path}")
    return True
