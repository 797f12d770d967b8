"""Restore: load a backup archive and create a new container from it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from distrobox_backup.domain import ContainerType, RetainedArtifact, StepPolicy, WorkflowReport
from distrobox_backup.exceptions import (
    ConfirmationDeclinedError,
    UserInputError,
    WorkflowError,
)
from distrobox_backup.logging import operation_context
from distrobox_backup.services import extract_loaded_image

from .steps import Compensation, WorkflowStep, run_steps

if TYPE_CHECKING:
    from .engine import WorkflowEngine

RESTORE_TYPE_OPTIONS = [
    (ContainerType.STANDARD, "Standard Box (Shares your host Home directory)"),
    (ContainerType.ISOLATED, "Isolated Box (Has its own separate Home directory)"),
]


@dataclass
class RestorePlan:
    """Values discovered while the restore runs."""

    archive: Path
    load_output: str = ""
    image: Optional[str] = None
    name: Optional[str] = None
    container_type: ContainerType = ContainerType.STANDARD
    home: Optional[Path] = None


def run_restore(engine: WorkflowEngine, archive: Path) -> WorkflowReport:
    """Restore a container from ``archive``.

    The loaded image is removed once the container exists. If creation
    fails the image is kept and named in the error so the container can be
    created again by hand without reloading the archive.

    Raises:
        UserInputError: If the archive is missing or the new name is empty
        ConfirmationDeclinedError: If no container type is chosen
        WorkflowAbortedError: If loading, identifying or creating fails
    """
    if not archive.is_file():
        raise UserInputError(f"Backup file not found: {archive}")

    toolchain = engine.toolchain
    prompts = engine.prompts
    plan = RestorePlan(archive=archive)

    def load() -> None:
        plan.load_output = toolchain.load(plan.archive)

    def identify_image() -> None:
        plan.image = extract_loaded_image(plan.load_output)
        if plan.image is None:
            raise WorkflowError("Could not determine the name of the loaded image")
        log.success(f"Image '{plan.image}' loaded successfully.")

    def choose_container() -> None:
        name = prompts.read_text("Enter a name for the new container").strip()
        if not name:
            raise UserInputError("Container name cannot be empty")
        index = prompts.select(
            [label for _, label in RESTORE_TYPE_OPTIONS],
            "How would you like to restore this container?",
        )
        if index is None:
            raise ConfirmationDeclinedError("Select restore type")
        plan.name = name
        plan.container_type = RESTORE_TYPE_OPTIONS[index][0]
        if plan.container_type is ContainerType.ISOLATED:
            plan.home = engine.classifier.isolated_home_path(name)

    def create() -> None:
        log.info(
            f"Creating new {plan.container_type.value.upper()} container '{plan.name}'..."
        )
        if plan.home is not None:
            log.info(f"Container home will be at: {plan.home}")
        toolchain.create(plan.name, plan.image, home=plan.home)

    def remove_loaded_image() -> None:
        toolchain.remove_image(plan.image)

    steps = [
        WorkflowStep("load", load, progress="Loading..."),
        WorkflowStep("identify loaded image", identify_image),
        WorkflowStep(
            "choose container",
            choose_container,
            compensations=[Compensation("remove loaded image", remove_loaded_image)],
        ),
        WorkflowStep(
            "create",
            create,
            retained=lambda: [
                RetainedArtifact(
                    "image",
                    plan.image,
                    "loaded image kept; create the container manually or remove the image",
                )
            ],
            progress="Creating container...",
        ),
        WorkflowStep(
            "remove loaded image",
            remove_loaded_image,
            on_failure=StepPolicy.WARN_AND_CONTINUE,
            warning=lambda error: RetainedArtifact(
                "image", plan.image, "loaded image could not be removed"
            ),
            progress="Cleaning up...",
        ),
    ]

    with operation_context("restore", archive=str(archive)) as log:
        log.info(f"Loading image from '{archive}'...")
        report = run_steps("restore", steps, log=log, indicator=engine.indicator)

    report.summary = (
        f"Container '{plan.name}' restored successfully "
        f"as {plan.container_type.label}"
    )
    return report
