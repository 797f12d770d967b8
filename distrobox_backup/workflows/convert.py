"""Edit/Convert: recreate a container as Standard or Isolated.

Steps after the confirmations:

1. stop the container
2. commit it to a temporary image
3. force-remove the original container
4. create the replacement from the temporary image
5. delete the old isolated home (only when converting to Standard)
6. remove the temporary image

Between 3 and 4 no container exists. If creation fails there, the temporary
image and the old home directory are left untouched and named in the error;
the container has to be recreated from the image by hand.
"""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING

from distrobox_backup.config.settings import CONVERT_IMAGE_PREFIX
from distrobox_backup.domain import (
    Container,
    ContainerType,
    RetainedArtifact,
    StepPolicy,
    WorkflowReport,
)
from distrobox_backup.exceptions import ConfirmationDeclinedError
from distrobox_backup.logging import operation_context

from .steps import Compensation, WorkflowStep, run_steps

if TYPE_CHECKING:
    from .engine import WorkflowEngine

# Step after which the original container is gone
NON_ATOMIC_STEP = "create replacement"


def run_convert(engine: WorkflowEngine, container: Container) -> WorkflowReport:
    """Convert ``container`` to the opposite type.

    Raises:
        ConfirmationDeclinedError: If either confirmation is declined
        WorkflowAbortedError: If any abort-class step fails
    """
    source = engine.classifier.classify(container.name)
    target_type = source.target_type
    current = source.kind.value.upper()
    target = target_type.value.upper()

    prompt = (
        f"Container '{container.name}' is currently {current}. Convert to {target}? "
        "This involves recreating the container."
    )
    if not engine.prompts.confirm(prompt):
        raise ConfirmationDeclinedError(prompt)

    old_home = source.home_path
    if source.is_isolated:
        data_loss_prompt = (
            "Converting to STANDARD will PERMANENTLY DELETE the isolated home "
            f"directory {old_home}. All data inside will be lost. "
            "Are you absolutely sure?"
        )
        if not engine.prompts.confirm(data_loss_prompt):
            raise ConfirmationDeclinedError(data_loss_prompt)

    toolchain = engine.toolchain
    temp_images = engine.temp_images
    temp_image = temp_images.new_image(CONVERT_IMAGE_PREFIX, container, "convert.commit")
    new_home = (
        engine.classifier.isolated_home_path(container.name)
        if target_type is ContainerType.ISOLATED
        else None
    )

    def commit() -> None:
        toolchain.commit(container.name, temp_image.name)
        temp_images.track(temp_image)

    def retained_after_failed_create() -> list[RetainedArtifact]:
        artifacts = [
            RetainedArtifact(
                "image",
                temp_image.name,
                f"recreate the container with: {engine.config.create_command} "
                f"--name {container.name} --image {temp_image.name}",
            )
        ]
        if old_home is not None:
            artifacts.append(
                RetainedArtifact("directory", str(old_home), "old isolated home not deleted")
            )
        return artifacts

    steps = [
        WorkflowStep("stop", lambda: toolchain.stop(container.name), progress="Stopping..."),
        WorkflowStep("commit", commit, progress="Committing container..."),
        WorkflowStep(
            "remove original",
            lambda: toolchain.force_remove(container.name),
            compensations=[
                Compensation(
                    f"remove temporary image {temp_image.name}",
                    lambda: temp_images.remove(temp_image),
                )
            ],
            progress="Removing old container...",
        ),
        WorkflowStep(
            NON_ATOMIC_STEP,
            lambda: toolchain.create(container.name, temp_image.name, home=new_home),
            retained=retained_after_failed_create,
            progress=f"Creating {target} container...",
        ),
    ]
    if old_home is not None:
        steps.append(
            WorkflowStep(
                "delete old home",
                lambda: shutil.rmtree(old_home),
                on_failure=StepPolicy.WARN_AND_CONTINUE,
                warning=lambda error: RetainedArtifact(
                    "directory",
                    str(old_home),
                    "old isolated home could not be deleted; remove it manually",
                ),
                progress="Deleting old home directory...",
            )
        )
    steps.append(
        WorkflowStep(
            "remove temporary image",
            lambda: temp_images.remove(temp_image),
            on_failure=StepPolicy.WARN_AND_CONTINUE,
            warning=lambda error: RetainedArtifact(
                "image", temp_image.name, "temporary image could not be removed"
            ),
            progress="Cleaning up...",
        )
    )

    with operation_context(
        "convert", container=container.name, source_type=source.kind.value
    ) as log:
        log.info(f"Converting '{container.name}' from {current} to {target}...")
        report = run_steps("convert", steps, log=log, indicator=engine.indicator)

    report.summary = f"Container '{container.name}' successfully converted to {target}"
    return report
