"""Custom exceptions for container lifecycle operations.

This module defines a hierarchy of exceptions so callers can tell a missing
tool apart from a failed external command or a cancelled prompt.

Exception Hierarchy:
    ToolError (base)
        ├── DependencyMissingError
        ├── ExternalCommandError
        ├── UserInputError
        ├── ConfirmationDeclinedError
        └── WorkflowError
            └── WorkflowAbortedError

Leftover artifacts after a successful workflow are not exceptions; they are
reported as ``RetainedArtifact`` warnings on the workflow report.

Usage:
    from distrobox_backup.exceptions import ExternalCommandError

    try:
        runner.run("podman", "stop", "dev")
    except ExternalCommandError as error:
        log.error(error.output)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from distrobox_backup.domain import RetainedArtifact


class ToolError(Exception):
    """Base exception for all tool operations."""


class DependencyMissingError(ToolError):
    """A required external executable is not installed."""

    def __init__(self, executable: str, hint: str = ""):
        self.executable = executable
        self.hint = hint
        msg = f"Required command not found: {executable}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)


class ExternalCommandError(ToolError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        executable: str,
        args: Sequence[str],
        detail: str,
        output: str = "",
        returncode: int | None = None,
    ):
        self.executable = executable
        self.args_list = list(args)
        self.detail = detail
        self.output = output
        self.returncode = returncode
        command = " ".join([executable, *self.args_list])
        super().__init__(f"command '{command}' failed: {detail}\nOutput: {output}")


class UserInputError(ToolError):
    """Malformed or out-of-range input."""


class ConfirmationDeclinedError(ToolError):
    """The user declined a required confirmation."""

    def __init__(self, prompt: str):
        self.prompt = prompt
        super().__init__(f"Cancelled: {prompt}")


class WorkflowError(ToolError):
    """Base exception for workflow execution."""


class WorkflowAbortedError(WorkflowError):
    """A workflow step failed and the workflow was halted."""

    def __init__(
        self,
        workflow: str,
        step: str,
        cause: BaseException,
        retained: Sequence[RetainedArtifact] = (),
    ):
        self.workflow = workflow
        self.step = step
        self.cause = cause
        self.retained = list(retained)
        msg = f"{workflow} aborted at step '{step}': {cause}"
        for artifact in self.retained:
            msg += f"\nKept for manual recovery: {artifact.describe()}"
        super().__init__(msg)
