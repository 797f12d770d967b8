"""External command execution."""

from __future__ import annotations

import shutil
import subprocess

from distrobox_backup.exceptions import ExternalCommandError
from distrobox_backup.logging import LoggerFactory

log = LoggerFactory.for_command()


def command_exists(name: str) -> bool:
    """Return True if ``name`` is an executable on PATH."""
    return shutil.which(name) is not None


class CommandRunner:
    """Runs one external process per call and returns its combined output.

    Standard error is merged into standard output so the captured text reads
    the way it would on a terminal. Nothing is retried.
    """

    def run(self, executable: str, *args: str) -> str:
        """Run ``executable`` with ``args`` and return its output.

        Raises:
            ExternalCommandError: If the command cannot be started or exits
                with a non-zero status. The error carries the captured
                output verbatim.
        """
        command = [executable, *args]
        log.debug(f"Running command: {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as error:
            log.debug(f"Command could not be started: {error}")
            raise ExternalCommandError(executable, args, str(error)) from error
        output = result.stdout or ""
        if output:
            log.trace(f"output of {executable}: {output.rstrip()}")
        if result.returncode != 0:
            log.debug(f"Command failed with code {result.returncode}: {executable}")
            raise ExternalCommandError(
                executable,
                args,
                f"exit status {result.returncode}",
                output=output,
                returncode=result.returncode,
            )
        return output
