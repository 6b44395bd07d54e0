"""Command-line interface for ocirelease.

This is the user-facing entry point.  It parses arguments, loads
configuration, and dispatches to the appropriate subcommand module.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

import ocirelease
from ocirelease import log
from ocirelease.config import Config, ConfigError, validate
from ocirelease.config import load as load_config

# ── Helpers ───────────────────────────────────────────────────────────

def _make_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with all subcommands."""

    parser = argparse.ArgumentParser(
        prog="ocirelease",
        description="Build an OCI image with compose and push it from the release branch",
        epilog="Run 'ocirelease <command> --help' for subcommand-specific options.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ocirelease {ocirelease.VERSION}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="print tracebacks on failure",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="disable colored output",
    )
    parser.add_argument(
        "--ref",
        metavar="REF",
        default=None,
        help="git ref being released (default: from CI or the local checkout)",
    )
    parser.add_argument(
        "--registry",
        metavar="HOST",
        default=None,
        help="override the login registry (e.g. ghcr.io)",
    )
    parser.add_argument(
        "--image",
        metavar="REF",
        default=None,
        help="override the image reference that is pushed",
    )
    parser.add_argument(
        "--engine",
        metavar="NAME",
        default=None,
        help="container engine CLI (docker or podman)",
    )

    sub = parser.add_subparsers(dest="command", title="commands")

    # -- run --
    run_parser = sub.add_parser(
        "run",
        help="run the full release pipeline (checkout -> login -> build -> push)",
        description="Run every release step in order; push only on the push ref.",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="print which steps would run and exit",
    )

    sub.add_parser(
        "plan",
        help="show which steps would run for the current ref",
        description="Print the release plan without running anything.",
    )
    sub.add_parser(
        "checkout",
        help="check out the commit under release",
        description="Verify or fetch the commit being released.",
    )
    sub.add_parser(
        "login",
        help="log in to the registry",
        description="Authenticate the container engine against the registry.",
    )
    sub.add_parser(
        "build",
        help="build the image via compose",
        description="Run '<engine> compose build'.",
    )
    sub.add_parser(
        "push",
        help="push the image (only on the push ref)",
        description="Push the release image when the ref equals the push ref.",
    )

    # -- workflow --
    workflow_parser = sub.add_parser(
        "workflow",
        help="render the equivalent GitHub Actions workflow",
        description="Print or write the GitHub Actions workflow for this configuration.",
    )
    workflow_parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        default=None,
        help="write the workflow to FILE instead of stdout",
    )
    workflow_parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="overwrite FILE if it exists",
    )

    return parser


def _apply_overrides(cfg: Config, args: argparse.Namespace) -> Config:
    """Apply CLI overrides (--registry, --image, --engine) to the loaded config."""
    if args.registry is not None:
        cfg.registry = args.registry
    if args.image is not None:
        cfg.image = args.image
    if args.engine is not None:
        cfg.engine = args.engine
    return cfg


def _dispatch_run(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import pipeline
    return pipeline.run(cfg, args)


def _dispatch_plan(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import ci as ci_mod
    from ocirelease import pipeline
    ref = pipeline.resolve_ref(args, ci_mod.detect())
    pipeline.print_plan(cfg, ref)
    return 0


def _dispatch_checkout(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import checkout
    from ocirelease import ci as ci_mod
    checkout.run(ci_mod.detect())
    return 0


def _dispatch_login(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import ci as ci_mod
    from ocirelease import login
    login.run(cfg, ci_mod.detect())
    return 0


def _dispatch_build(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import build
    build.run(cfg)
    return 0


def _dispatch_push(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import ci as ci_mod
    from ocirelease import pipeline, push
    backend = ci_mod.detect()
    push.run(cfg, backend, pipeline.resolve_ref(args, backend))
    return 0


def _dispatch_workflow(cfg: Config, args: argparse.Namespace) -> int:
    from ocirelease import workflow
    if args.output is None:
        sys.stdout.write(workflow.render(cfg))
        sys.stdout.flush()
        return 0
    written = workflow.write(cfg, Path(args.output), force=args.force)
    return 0 if written else 1


_DISPATCHERS: dict[str, Callable[[Config, argparse.Namespace], int]] = {
    "run": _dispatch_run,
    "plan": _dispatch_plan,
    "checkout": _dispatch_checkout,
    "login": _dispatch_login,
    "build": _dispatch_build,
    "push": _dispatch_push,
    "workflow": _dispatch_workflow,
}


# ── Entry point ───────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    """Parse arguments, load config, dispatch to subcommand.

    Parameters
    ----------
    argv:
        Argument list for testing.  Defaults to ``sys.argv[1:]``.
    """
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        log.set_color(False)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(2)

    try:
        cfg = _apply_overrides(load_config(Path.cwd()), args)
        validate(cfg)
    except ConfigError as exc:
        log.error(f"invalid configuration: {exc}")
        sys.exit(2)
    except Exception as exc:
        log.error(f"failed to load configuration: {exc}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    dispatcher = _DISPATCHERS.get(args.command)
    if dispatcher is None:
        log.error(f"unknown command: {args.command}")
        sys.exit(2)

    try:
        rc = dispatcher(cfg, args)
    except KeyboardInterrupt:
        log.warn("interrupted")
        sys.exit(130)
    except Exception as exc:
        log.error(f"{args.command} failed: {exc}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    sys.exit(rc)
