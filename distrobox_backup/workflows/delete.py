"""Delete: force-remove a container after one confirmation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from distrobox_backup.domain import Container, WorkflowReport
from distrobox_backup.exceptions import ConfirmationDeclinedError
from distrobox_backup.logging import operation_context

from .steps import WorkflowStep, run_steps

if TYPE_CHECKING:
    from .engine import WorkflowEngine


def run_delete(engine: WorkflowEngine, container: Container) -> WorkflowReport:
    prompt = (
        f"You are about to permanently delete the container '{container.name}'. "
        "This action cannot be undone. Are you sure?"
    )
    if not engine.prompts.confirm(prompt):
        raise ConfirmationDeclinedError(prompt)

    steps = [
        WorkflowStep(
            "remove container",
            lambda: engine.toolchain.force_remove(container.name),
            progress="Deleting...",
        )
    ]
    with operation_context("delete", container=container.name) as log:
        report = run_steps("delete", steps, log=log, indicator=engine.indicator)

    report.summary = f"Container '{container.name}' has been deleted"
    return report
