"""Terminal spinner shown while a workflow step blocks on an external command."""

from __future__ import annotations

import sys
import threading
from typing import Callable, TextIO

from distrobox_backup.config.settings import DEFAULT_SPINNER_INTERVAL

SPINNER_FRAMES = ("|", "/", "-", "\\")


class ProgressIndicator:
    """Animates a spinner on a background thread until stopped.

    The only thing shared with the caller is the output stream and a single
    completion event. ``stop()`` sets the event and joins the thread, so the
    animation never outlives the step it decorates. Use it as a context
    manager to guarantee that, including when the step raises.
    """

    def __init__(
        self,
        message: str,
        stream: TextIO | None = None,
        interval: float = DEFAULT_SPINNER_INTERVAL,
    ) -> None:
        self.message = message
        self.stream = stream or sys.stdout
        self.interval = interval
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self._succeeded = True

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._spin,
            name="ProgressIndicator",
            daemon=True,
        )
        self._thread.start()

    def stop(self, succeeded: bool = True) -> None:
        """Signal completion and wait for the spinner thread to finish."""
        if self._done.is_set():
            return
        self._succeeded = succeeded
        self._done.set()
        if self._thread is not None:
            self._thread.join()

    def _spin(self) -> None:
        index = 0
        while not self._done.is_set():
            self.stream.write(f"\r{self.message} {SPINNER_FRAMES[index]} ")
            self.stream.flush()
            index = (index + 1) % len(SPINNER_FRAMES)
            self._done.wait(self.interval)
        outcome = "Done!" if self._succeeded else "Failed."
        label = self.message.rstrip(".")
        self.stream.write(f"\r{label}... {outcome}              \n")
        self.stream.flush()

    def __enter__(self) -> ProgressIndicator:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop(succeeded=exc_type is None)


def spinner_factory(
    stream: TextIO | None = None, interval: float = DEFAULT_SPINNER_INTERVAL
) -> Callable[[str], ProgressIndicator]:
    """Return an indicator factory for ``WorkflowEngine``."""

    def create(message: str) -> ProgressIndicator:
        return ProgressIndicator(message, stream=stream, interval=interval)

    return create
