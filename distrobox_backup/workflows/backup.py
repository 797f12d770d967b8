"""Backup: commit a container to a temporary image and save it as a tar archive."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from distrobox_backup.config.settings import BACKUP_IMAGE_PREFIX
from distrobox_backup.domain import Container, RetainedArtifact, StepPolicy, WorkflowReport
from distrobox_backup.exceptions import ConfirmationDeclinedError, UserInputError
from distrobox_backup.logging import operation_context

from .steps import Compensation, WorkflowStep, run_steps

if TYPE_CHECKING:
    from .engine import WorkflowEngine

ARCHIVE_SUFFIX = ".tar"


def backup_target(destination_dir: Path, name: str) -> Path:
    return destination_dir / f"{name}{ARCHIVE_SUFFIX}"


def run_backup(
    engine: WorkflowEngine, container: Container, destination_dir: Path, name: str
) -> WorkflowReport:
    """Back up ``container`` to ``destination_dir/name.tar``.

    Raises:
        UserInputError: If the name is empty or the destination is not a directory
        ConfirmationDeclinedError: If overwriting an existing archive is declined
        WorkflowAbortedError: If committing or saving fails
    """
    name = name.strip()
    if not name:
        raise UserInputError("Backup name cannot be empty")
    if not destination_dir.is_dir():
        raise UserInputError(f"Not a directory: {destination_dir}")

    target = backup_target(destination_dir, name)
    if target.exists():
        prompt = f"File '{target}' already exists. Overwrite?"
        if not engine.prompts.confirm(prompt):
            raise ConfirmationDeclinedError(prompt)

    toolchain = engine.toolchain
    temp_images = engine.temp_images
    temp_image = temp_images.new_image(BACKUP_IMAGE_PREFIX, container, "backup.commit")

    def commit() -> None:
        toolchain.commit(container.name, temp_image.name)
        temp_images.track(temp_image)

    steps = [
        WorkflowStep("commit", commit, progress="Committing container..."),
        WorkflowStep(
            "save",
            lambda: toolchain.save(temp_image.name, target),
            compensations=[
                Compensation(
                    f"remove temporary image {temp_image.name}",
                    lambda: temp_images.remove(temp_image),
                )
            ],
            progress="Saving archive...",
        ),
        WorkflowStep(
            "remove temporary image",
            lambda: temp_images.remove(temp_image),
            on_failure=StepPolicy.WARN_AND_CONTINUE,
            warning=lambda error: RetainedArtifact(
                "image", temp_image.name, "temporary image could not be removed"
            ),
            progress="Cleaning up...",
        ),
    ]

    with operation_context("backup", container=container.name, target=str(target)) as log:
        log.info(f"Backing up '{container.name}' to '{target}'...")
        report = run_steps("backup", steps, log=log, indicator=engine.indicator)

    report.summary = f"Backup for '{container.name}' completed successfully: {target}"
    return report
