"""Sequential step execution with per-step failure policy and compensations.

A workflow is a plain list of ``WorkflowStep``. ``run_steps`` executes them in
order, one at a time:

- a step that succeeds is recorded as completed;
- a ``WARN_AND_CONTINUE`` step that fails is logged, its leftover artifact is
  added to the report's warnings, and execution continues;
- an ``ABORT`` step that fails stops the workflow. Its compensations run in
  order; a failing compensation is logged and never escalated. The failure is
  then raised as ``WorkflowAbortedError`` naming any artifacts the step keeps
  on purpose.

Prompts declined or answered badly inside a step are re-raised as-is after
compensation, so callers can treat them as a cancellation rather than a
failure.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, ContextManager, Optional

from distrobox_backup.domain import RetainedArtifact, StepPolicy, WorkflowReport
from distrobox_backup.exceptions import (
    ConfirmationDeclinedError,
    ToolError,
    UserInputError,
    WorkflowAbortedError,
)
from distrobox_backup.logging import EventLogger, LoggerFactory

if TYPE_CHECKING:
    from loguru import Logger

IndicatorFactory = Callable[[str], ContextManager]

# Errors a step may raise that the executor knows how to handle. Anything
# else is a bug and propagates untouched.
STEP_ERRORS = (ToolError, OSError)


@dataclass
class Compensation:
    """A best-effort cleanup action."""

    description: str
    action: Callable[[], object]


@dataclass
class WorkflowStep:
    name: str
    action: Callable[[], object]
    on_failure: StepPolicy = StepPolicy.ABORT
    compensations: list[Compensation] = field(default_factory=list)
    # Artifacts deliberately kept when this step aborts
    retained: Optional[Callable[[], list[RetainedArtifact]]] = None
    # Leftover to report when a WARN_AND_CONTINUE step fails
    warning: Optional[Callable[[BaseException], RetainedArtifact]] = None
    # Progress message shown while the step runs; None for interactive steps
    progress: Optional[str] = None


def no_indicator(message: str) -> ContextManager:
    return nullcontext()


def _run_compensations(
    workflow: str, step: WorkflowStep, log: Logger
) -> None:
    for compensation in step.compensations:
        log.debug(f"Cleanup after '{step.name}': {compensation.description}")
        try:
            compensation.action()
        except STEP_ERRORS as error:
            EventLogger.log_compensation_failed(
                log, workflow, step.name, compensation.description, error
            )


def run_steps(
    workflow: str,
    steps: list[WorkflowStep],
    *,
    log: Logger | None = None,
    indicator: IndicatorFactory = no_indicator,
) -> WorkflowReport:
    """Execute ``steps`` in order and return the report.

    Raises:
        WorkflowAbortedError: If an ``ABORT`` step fails
        ConfirmationDeclinedError: If a step's prompt was declined
        UserInputError: If a step's prompt received unusable input
    """
    log = log or LoggerFactory.for_workflow(workflow)
    report = WorkflowReport(workflow=workflow, summary="")

    for step in steps:
        EventLogger.log_step_started(log, workflow, step.name)
        try:
            if step.progress is None:
                step.action()
            else:
                with indicator(step.progress):
                    step.action()
        except STEP_ERRORS as error:
            if step.on_failure is StepPolicy.WARN_AND_CONTINUE:
                artifact = (
                    step.warning(error)
                    if step.warning is not None
                    else RetainedArtifact("step", step.name, str(error))
                )
                log.warning(
                    f"Step '{step.name}' did not complete: {error}. "
                    f"Left behind: {artifact.describe()}"
                )
                report.warnings.append(artifact)
                continue

            if isinstance(error, (ConfirmationDeclinedError, UserInputError)):
                log.info(f"Step '{step.name}' cancelled: {error}")
            else:
                EventLogger.log_step_failed(
                    log, workflow, step.name, error, step.on_failure.value
                )
            _run_compensations(workflow, step, log)
            if isinstance(error, (ConfirmationDeclinedError, UserInputError)):
                raise
            retained = step.retained() if step.retained is not None else []
            raise WorkflowAbortedError(workflow, step.name, error, retained) from error

        report.completed_steps.append(step.name)

    return report
