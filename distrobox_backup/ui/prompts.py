"""Questions the workflows ask the user, answered on the terminal."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence, TextIO

from distrobox_backup.exceptions import UserInputError
from distrobox_backup.logging import LoggerFactory

log = LoggerFactory.for_menu()


class Prompts(Protocol):
    """Presentation boundary consumed by the workflow engine."""

    def confirm(self, prompt: str) -> bool: ...

    def select(self, options: Sequence[str], prompt: str) -> Optional[int]: ...

    def read_text(self, prompt: str) -> str: ...

    def select_directory(self, title: str) -> Optional[Path]: ...

    def select_file(self, title: str, pattern: str) -> Optional[Path]: ...


def parse_selection(text: str, count: int) -> int:
    """Convert a 1-based menu answer to a 0-based index.

    Raises:
        UserInputError: If the answer is not a number between 1 and count
    """
    try:
        choice = int(text)
    except ValueError:
        raise UserInputError(
            f"Invalid input. Please enter a number between 1 and {count}."
        ) from None
    if not 1 <= choice <= count:
        raise UserInputError(f"Invalid input. Please enter a number between 1 and {count}.")
    return choice - 1


def expand_user_path(text: str) -> Path:
    return Path(text).expanduser()


def picker_command(picker: str, title: str, *, directory: bool, pattern: str = "") -> list[str]:
    """Build the zenity/kdialog invocation for a file or folder dialog."""
    if picker == "zenity":
        command = ["zenity", "--file-selection", f"--title={title}"]
        if directory:
            command.append("--directory")
        elif pattern:
            command.append(f"--file-filter={pattern}")
        return command
    if picker == "kdialog":
        if directory:
            return ["kdialog", "--getexistingdirectory", ".", "--title", title]
        return ["kdialog", "--getopenfilename", ".", pattern, "--title", title]
    raise ValueError(f"Unknown file picker: {picker}")


class ConsolePrompts:
    """Prompts on stdin/stdout with an optional GUI file picker."""

    def __init__(
        self,
        file_picker: str | None = None,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self.file_picker = file_picker
        self.input_func = input_func
        self.output = output or sys.stdout

    def _ask(self, prompt: str) -> str:
        return self.input_func(f"> {prompt}: ").strip()

    def confirm(self, prompt: str) -> bool:
        answer = self.input_func(f"{prompt} (y/N): ").strip()
        return answer.lower() == "y"

    def select(self, options: Sequence[str], prompt: str) -> Optional[int]:
        """Ask for one of ``options``; blank input returns None."""
        for number, option in enumerate(options, start=1):
            print(f"  {number}) {option}", file=self.output)
        while True:
            answer = self._ask(prompt)
            if not answer:
                return None
            try:
                return parse_selection(answer, len(options))
            except UserInputError as error:
                log.warning(str(error))

    def read_text(self, prompt: str) -> str:
        return self._ask(prompt)

    def _run_picker(self, command: list[str]) -> Optional[str]:
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as error:
            log.debug(f"File picker could not be started: {error}")
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def select_directory(self, title: str) -> Optional[Path]:
        if self.file_picker:
            chosen = self._run_picker(
                picker_command(self.file_picker, title, directory=True)
            )
            if chosen:
                return Path(chosen)
            log.warning("GUI folder picker failed. Falling back to terminal.")
        while True:
            answer = self._ask("Enter the full path to the directory")
            if not answer:
                return None
            path = expand_user_path(answer)
            if path.is_dir():
                return path
            log.warning(f"Invalid or non-existent directory: {path}")

    def select_file(self, title: str, pattern: str) -> Optional[Path]:
        if self.file_picker:
            chosen = self._run_picker(
                picker_command(self.file_picker, title, directory=False, pattern=pattern)
            )
            if chosen:
                return Path(chosen)
            log.warning("GUI file picker failed. Falling back to terminal.")
        while True:
            answer = self._ask(f"Enter the full path to the backup file ({pattern})")
            if not answer:
                return None
            path = expand_user_path(answer)
            if path.is_file():
                return path
            log.warning(f"File not found: {path}")
