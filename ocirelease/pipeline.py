"""Release pipeline orchestration.

Runs the release steps in order::

    checkout -> login -> build -> push (only on the push ref)

Steps run sequentially.  The first failing step stops the pipeline and
later steps are reported as not run.  Failures come from the external
tools (git, the container engine, the registry); nothing is retried.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ocirelease import build, checkout, log, login, push
from ocirelease import ci as ci_mod
from ocirelease.config import Config
from ocirelease.engine import EngineError


@dataclass
class Context:
    """Everything a step needs at run time."""

    cfg: Config
    ci: ci_mod.CIBase
    ref: str | None
    base: Path


@dataclass
class Step:
    """One pipeline step.

    ``condition`` returns None when the step should run, or a reason
    string explaining why it is skipped.
    """

    name: str
    title: str
    action: Callable[[Context], object]
    condition: Callable[[Config, str | None], str | None] | None = None

    def skip_reason(self, cfg: Config, ref: str | None) -> str | None:
        if self.condition is None:
            return None
        return self.condition(cfg, ref)


@dataclass
class StepResult:
    name: str
    ran: bool
    ok: bool
    reason: str = ""


@dataclass
class StepPlan:
    """Whether a step will run for a given ref, and why not."""

    name: str
    runs: bool
    reason: str = ""


# Failures raised by the external collaborators behind each step.
_STEP_ERRORS = (
    checkout.CheckoutError,
    login.LoginError,
    EngineError,
    ValueError,
)


def _push_condition(cfg: Config, ref: str | None) -> str | None:
    if push.should_push(ref, cfg.push_ref):
        return None
    return f"ref {ref or '(unknown)'} != {cfg.push_ref}"


STEPS: list[Step] = [
    Step("checkout", "Checkout repository",
         lambda ctx: checkout.run(ctx.ci, ctx.base)),
    Step("login", "Login to registry",
         lambda ctx: login.run(ctx.cfg, ctx.ci)),
    Step("build", "Build the image",
         lambda ctx: build.run(ctx.cfg)),
    Step("push", "Push the image",
         lambda ctx: push.run(ctx.cfg, ctx.ci, ctx.ref),
         condition=_push_condition),
]


def plan(cfg: Config, ref: str | None) -> list[StepPlan]:
    """Return which steps would run for *ref*, without running anything."""
    plans: list[StepPlan] = []
    for step in STEPS:
        reason = step.skip_reason(cfg, ref)
        plans.append(StepPlan(step.name, runs=reason is None, reason=reason or ""))
    return plans


def resolve_ref(args: argparse.Namespace, ci: ci_mod.CIBase) -> str | None:
    """``--ref`` wins over the ref reported by the CI backend."""
    ref = getattr(args, "ref", None)
    if ref:
        return ref
    return ci.get_ref()


def print_plan(cfg: Config, ref: str | None) -> None:
    log.step(f"Plan for {ref or '(unknown ref)'}")
    for item in plan(cfg, ref):
        if item.runs:
            log.info(f"  run   {item.name}")
        else:
            log.info(f"  skip  {item.name}  ({item.reason})")


def _summary(results: list[StepResult]) -> None:
    log.step("Pipeline summary")
    for r in results:
        if not r.ran:
            log.info(f"  {r.name}: skipped ({r.reason})")
        elif r.ok:
            log.success(f"  {r.name}")
        else:
            log.error(f"  {r.name}: {r.reason}")


def execute(ctx: Context) -> list[StepResult]:
    """Run every step in order and return the per-step results."""
    results: list[StepResult] = []
    failed = False
    for step in STEPS:
        if failed:
            results.append(StepResult(step.name, ran=False, ok=False, reason="previous step failed"))
            continue

        reason = step.skip_reason(ctx.cfg, ctx.ref)
        if reason is not None:
            log.info(f"Skipping {step.name}: {reason}")
            results.append(StepResult(step.name, ran=False, ok=True, reason=reason))
            continue

        with log.group(step.title):
            try:
                step.action(ctx)
            except _STEP_ERRORS as exc:
                log.error(f"{step.name} failed: {exc}")
                results.append(StepResult(step.name, ran=True, ok=False, reason=str(exc)))
                failed = True
                continue
        results.append(StepResult(step.name, ran=True, ok=True))
    return results


def run(cfg: Config, args: argparse.Namespace) -> int:
    """Run the release pipeline.

    Parameters
    ----------
    cfg:
        Validated workflow configuration.
    args:
        CLI arguments.  Recognised attributes:

        * ``ref``     -- override the git ref (optional).
        * ``dry_run`` -- print the plan and exit (optional).

    Returns ``0`` on success, ``1`` if any step failed.
    """
    backend = ci_mod.detect()
    ref = resolve_ref(args, backend)

    if getattr(args, "dry_run", False):
        print_plan(cfg, ref)
        return 0

    meta = backend.event_metadata()
    log.info(f"Event: {meta.get('event', '?')}  ref: {ref or '(unknown)'}")
    if meta.get("run_url"):
        log.info(f"Run: {meta['run_url']}")

    ctx = Context(cfg=cfg, ci=backend, ref=ref, base=Path.cwd())
    results = execute(ctx)
    _summary(results)

    push_result = next(r for r in results if r.name == "push")
    if not (push_result.ran and push_result.ok):
        backend.set_output("pushed", "false")

    if any(r.ran and not r.ok for r in results):
        log.error("Release pipeline failed")
        return 1
    log.success("Release pipeline complete")
    return 0
