"""Interactive main menu."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from distrobox_backup.config import ToolConfig
from distrobox_backup.domain import Container, WorkflowReport
from distrobox_backup.exceptions import (
    ConfirmationDeclinedError,
    UserInputError,
    WorkflowAbortedError,
)
from distrobox_backup.logging import LoggerFactory
from distrobox_backup.services import ContainerRegistry, HomeClassifier
from distrobox_backup.workflows import WorkflowEngine

from .prompts import Prompts, parse_selection

log = LoggerFactory.for_menu()

MENU_ACTIONS = ("Backup", "Restore", "Delete", "Edit", "Exit")
RULE = "=" * 58


class MainMenu:
    """Lists containers and dispatches the chosen workflow.

    A failed or cancelled workflow is logged and the menu is shown again;
    only Exit (or a failing container listing) ends the loop.
    """

    def __init__(
        self,
        config: ToolConfig,
        registry: ContainerRegistry,
        classifier: HomeClassifier,
        engine: WorkflowEngine,
        prompts: Prompts,
        output: TextIO | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.classifier = classifier
        self.engine = engine
        self.prompts = prompts
        self.output = output or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.output)

    def print_header(self) -> None:
        self._print("Distrobox Backup Tool")
        self._print(
            f"Version: {self.config.distrobox_version} | Host OS: {self.config.host_distro}"
        )
        self._print()

    def print_containers(self, containers: list[Container]) -> None:
        for number, container in enumerate(containers, start=1):
            state = self.classifier.classify(container.name)
            self._print(f"  {number}. {container.name:<25}  ({state.kind.label})")

    def display(self, containers: list[Container]) -> None:
        self.print_header()
        self._print("=== Distrobox Containers " + "=" * 33)
        if containers:
            self.print_containers(containers)
        else:
            self._print("  No Distrobox containers found.")
        self._print(RULE)
        self._print(
            "  ".join(f"{number}) {label}" for number, label in enumerate(MENU_ACTIONS, 1))
        )
        self._print()

    def run(self) -> None:
        """Show the menu until the user exits.

        Raises:
            ExternalCommandError: If containers cannot be listed
        """
        while True:
            containers = self.registry.list_containers()
            self.display(containers)
            if not self.handle_choice(containers):
                return

    def handle_choice(self, containers: list[Container]) -> bool:
        """Process one menu selection. Returns False when the user exits."""
        answer = self.prompts.read_text("Select an option")
        if not answer:
            return True
        try:
            index = parse_selection(answer, len(MENU_ACTIONS))
        except UserInputError as error:
            log.warning(str(error))
            return True

        action = MENU_ACTIONS[index]
        if action == "Exit":
            self._print("Goodbye!")
            return False
        if action == "Restore":
            self._run_workflow("restore", self.restore)
            return True
        if not containers:
            log.warning(f"No containers available to {action.lower()}.")
            return True
        handlers: dict[str, Callable[[list[Container]], Optional[WorkflowReport]]] = {
            "Backup": self.backup,
            "Delete": self.delete,
            "Edit": self.edit,
        }
        self._run_workflow(action.lower(), lambda: handlers[action](containers))
        return True

    def _run_workflow(
        self, name: str, handler: Callable[[], Optional[WorkflowReport]]
    ) -> None:
        try:
            report = handler()
        except ConfirmationDeclinedError:
            log.info(f"{name.capitalize()} cancelled.")
            return
        except UserInputError as error:
            log.warning(f"{error} Aborting.")
            return
        except WorkflowAbortedError as error:
            log.error(str(error))
            return
        if report is None:
            return
        log.success(report.summary)
        for artifact in report.warnings:
            log.warning(f"Left behind: {artifact.describe()}. You may want to remove it manually.")

    def _choose_container(self, containers: list[Container], verb: str) -> Optional[Container]:
        index = self.prompts.select(
            [container.name for container in containers],
            f"Enter the number of the container to {verb}",
        )
        if index is None:
            return None
        return containers[index]

    def backup(self, containers: list[Container]) -> Optional[WorkflowReport]:
        container = self._choose_container(containers, "backup")
        if container is None:
            return None
        log.info("Please choose a backup destination folder.")
        destination = self.prompts.select_directory("Select Backup Folder")
        if destination is None:
            destination = self.config.default_backup_dir
        if destination is None:
            raise UserInputError("No valid destination directory selected.")
        name = self.prompts.read_text(
            "Enter a name for the backup file (e.g., 'ubuntu-dev-backup')"
        )
        return self.engine.backup(container, destination, name)

    def restore(self) -> Optional[WorkflowReport]:
        log.info("Please choose a backup file (.tar) to restore.")
        archive = self.prompts.select_file("Select Backup File", "*.tar")
        if archive is None:
            raise UserInputError("No backup file selected.")
        return self.engine.restore(archive)

    def delete(self, containers: list[Container]) -> Optional[WorkflowReport]:
        container = self._choose_container(containers, "DELETE")
        if container is None:
            return None
        return self.engine.delete(container)

    def edit(self, containers: list[Container]) -> Optional[WorkflowReport]:
        container = self._choose_container(containers, "edit")
        if container is None:
            return None
        return self.engine.convert(container)
