"""
Pytest configuration and shared fixtures for distrobox-backup-tool tests.

This module provides a scripted stand-in for the external tools (podman and
the distrobox scripts), a configuration rooted in a temporary home directory
and prompts answered from a script.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import Mock

import pytest

from distrobox_backup.config import ToolConfig
from distrobox_backup.domain import Container
from distrobox_backup.exceptions import ExternalCommandError
from distrobox_backup.logging import logger
from distrobox_backup.workflows import WorkflowEngine


# ==============================================================================
# External Tool Fakes
# ==============================================================================


LOAD_OUTPUT_TEMPLATE = (
    "Getting image source signatures\n"
    "Copying blob 5f70bf18a086 done\n"
    "Writing manifest to image destination\n"
    "Loaded image: {image}\n"
)


class FakeDistrobox:
    """
    Stateful replacement for ``CommandRunner`` driving podman and distrobox.

    Containers, images and written archives are simulated so tests can assert
    on the resulting state rather than only on the commands issued. Any verb
    listed with ``fail()`` raises ``ExternalCommandError`` without side effects.
    """

    def __init__(self, runtime: str = "podman") -> None:
        self.runtime = runtime
        self.containers: Dict[str, str] = {}
        self.images: set = set()
        self.calls: List[tuple] = []
        self.failures: Dict[str, str] = {}
        self.loaded_image = "localhost/restored:latest"
        self.load_output: Optional[str] = None
        self.created_homes: Dict[str, Path] = {}

    def add_container(self, name: str, image: str = "docker.io/library/ubuntu:24.04") -> None:
        self.containers[name] = image

    def fail(self, verb: str, output: str = "Error: simulated failure") -> None:
        self.failures[verb] = output

    def verbs(self) -> List[str]:
        return [self._verb(call[0], call[1:]) for call in self.calls]

    def _verb(self, executable: str, args: Sequence[str]) -> str:
        if executable == "distrobox-create":
            return "create"
        if executable == "distrobox-rm":
            return "rm"
        if executable == "distrobox-list":
            return "list"
        if executable == self.runtime:
            return args[0]
        return executable

    def run(self, executable: str, *args: str) -> str:
        self.calls.append((executable, *args))
        verb = self._verb(executable, args)
        if verb in self.failures:
            raise ExternalCommandError(
                executable,
                args,
                "exit status 125",
                output=self.failures[verb],
                returncode=125,
            )
        handler = getattr(self, f"_do_{verb}", None)
        if handler is None:
            return ""
        return handler(list(args))

    def _do_commit(self, args: List[str]) -> str:
        container, image = args[1], args[2]
        if container not in self.containers:
            raise ExternalCommandError(self.runtime, args, "no such container")
        self.images.add(image)
        return "sha256:0123456789abcdef\n"

    def _do_save(self, args: List[str]) -> str:
        path, image = Path(args[2]), args[3]
        if image not in self.images:
            raise ExternalCommandError(self.runtime, args, "no such image")
        path.write_bytes(b"fake archive for " + image.encode())
        return ""

    def _do_load(self, args: List[str]) -> str:
        self.images.add(self.loaded_image)
        if self.load_output is not None:
            return self.load_output
        return LOAD_OUTPUT_TEMPLATE.format(image=self.loaded_image)

    def _do_rmi(self, args: List[str]) -> str:
        self.images.discard(args[1])
        return ""

    def _do_create(self, args: List[str]) -> str:
        options = dict(zip(args[::2], args[1::2]))
        image = options["--image"]
        if image not in self.images:
            raise ExternalCommandError("distrobox-create", args, "no such image")
        self.containers[options["--name"]] = image
        if "--home" in options:
            home = Path(options["--home"])
            home.mkdir(parents=True, exist_ok=True)
            self.created_homes[options["--name"]] = home
        return ""

    def _do_rm(self, args: List[str]) -> str:
        self.containers.pop(args[0], None)
        return ""

    def _do_list(self, args: List[str]) -> str:
        if not self.containers:
            raise ExternalCommandError(
                "distrobox-list", args, "exit status 1", output="No distroboxes found\n"
            )
        lines = ["ID           | NAME       | STATUS       | IMAGE"]
        for index, (name, image) in enumerate(sorted(self.containers.items())):
            lines.append(f"{index:012x} | {name} | Up 2 hours | {image}")
        return "\n".join(lines) + "\n"


class ScriptedPrompts:
    """
    Prompts answered from queues.

    Every question is recorded in ``asked`` so tests can check that a
    workflow asked what it should (and nothing it should not).
    """

    def __init__(
        self,
        confirms: Sequence[bool] = (),
        texts: Sequence[str] = (),
        selections: Sequence[Optional[int]] = (),
        directories: Sequence[Optional[Path]] = (),
        files: Sequence[Optional[Path]] = (),
    ) -> None:
        self.confirms = list(confirms)
        self.texts = list(texts)
        self.selections = list(selections)
        self.directories = list(directories)
        self.files = list(files)
        self.asked: List[tuple] = []

    def confirm(self, prompt: str) -> bool:
        self.asked.append(("confirm", prompt))
        return self.confirms.pop(0)

    def select(self, options: Sequence[str], prompt: str) -> Optional[int]:
        self.asked.append(("select", prompt))
        return self.selections.pop(0)

    def read_text(self, prompt: str) -> str:
        self.asked.append(("read_text", prompt))
        return self.texts.pop(0)

    def select_directory(self, title: str) -> Optional[Path]:
        self.asked.append(("select_directory", title))
        return self.directories.pop(0)

    def select_file(self, title: str, pattern: str) -> Optional[Path]:
        self.asked.append(("select_file", title))
        return self.files.pop(0)


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def user_home(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def tool_config(user_home) -> ToolConfig:
    """
    Fixture providing a podman configuration rooted in a temporary home.

    Returns:
        ToolConfig whose homes_dir lives under tmp_path.
    """
    return ToolConfig(runtime="podman", user_home=user_home)


@pytest.fixture
def fake_distrobox() -> FakeDistrobox:
    distrobox = FakeDistrobox()
    distrobox.add_container("dev")
    return distrobox


@pytest.fixture
def dev_container() -> Container:
    return Container(id="3f2a9c1b0d4e", name="dev", image="docker.io/library/ubuntu:24.04")


@pytest.fixture
def prompts() -> ScriptedPrompts:
    return ScriptedPrompts()


@pytest.fixture
def engine(tool_config, fake_distrobox, prompts) -> WorkflowEngine:
    """
    Fixture providing a workflow engine wired to the fake tools.

    Tests adjust ``engine.prompts`` answers before running a workflow.
    """
    return WorkflowEngine.from_config(tool_config, prompts, runner=fake_distrobox)


@pytest.fixture
def isolated_home(tool_config) -> Path:
    """Create the dedicated home of the ``dev`` container with some data in it."""
    home = tool_config.homes_dir / "dev"
    home.mkdir(parents=True)
    (home / ".bashrc").write_text("export EDITOR=vim\n")
    return home


@pytest.fixture
def backup_dir(tmp_path) -> Path:
    directory = tmp_path / "backups"
    directory.mkdir()
    return directory


@pytest.fixture
def mock_subprocess_run(mocker) -> Mock:
    """
    Fixture providing a mock for subprocess.run.

    Returns:
        Mock object for subprocess.run
    """
    return mocker.patch("subprocess.run")


# ==============================================================================
# Logging Fixtures
# ==============================================================================


@pytest.fixture
def log_records() -> List[Dict[str, Any]]:
    """
    Capture loguru records emitted during the test.

    Returns:
        List that receives each record dict as it is logged.
    """
    records: List[Dict[str, Any]] = []

    def sink(message):
        records.append(message.record)

    handler_id = logger.add(sink, level="TRACE", enqueue=False)
    yield records
    logger.remove(handler_id)
