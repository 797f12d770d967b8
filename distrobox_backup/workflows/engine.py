"""Entry point for the four container workflows."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from distrobox_backup.config import ToolConfig
from distrobox_backup.domain import Container, WorkflowReport
from distrobox_backup.services import (
    CommandRunner,
    HomeClassifier,
    TempImageManager,
    Toolchain,
)

from .backup import run_backup
from .convert import run_convert
from .delete import run_delete
from .restore import run_restore
from .steps import IndicatorFactory, no_indicator

if TYPE_CHECKING:
    from distrobox_backup.ui.prompts import Prompts


class WorkflowEngine:
    """Runs Backup, Restore, Edit/Convert and Delete.

    Collaborators are injected so the same engine drives the interactive
    menu and the tests. ``prompts`` supplies every confirmation and answer
    the workflows need; ``indicator`` wraps each long-running step.
    """

    def __init__(
        self,
        config: ToolConfig,
        toolchain: Toolchain,
        classifier: HomeClassifier,
        temp_images: TempImageManager,
        prompts: Prompts,
        indicator: IndicatorFactory | None = None,
    ):
        self.config = config
        self.toolchain = toolchain
        self.classifier = classifier
        self.temp_images = temp_images
        self.prompts = prompts
        self.indicator = indicator or no_indicator

    @classmethod
    def from_config(
        cls,
        config: ToolConfig,
        prompts: Prompts,
        runner: CommandRunner | None = None,
        indicator: IndicatorFactory | None = None,
    ) -> WorkflowEngine:
        toolchain = Toolchain(config, runner or CommandRunner())
        return cls(
            config,
            toolchain,
            HomeClassifier(config),
            TempImageManager(toolchain),
            prompts,
            indicator=indicator,
        )

    def backup(self, container: Container, destination_dir: Path, name: str) -> WorkflowReport:
        return run_backup(self, container, Path(destination_dir), name)

    def restore(self, archive_path: Path) -> WorkflowReport:
        return run_restore(self, Path(archive_path))

    def convert(self, container: Container) -> WorkflowReport:
        return run_convert(self, container)

    def delete(self, container: Container) -> WorkflowReport:
        return run_delete(self, container)
