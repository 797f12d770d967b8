from __future__ import annotations

import os
import sys
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger

from distrobox_backup.exceptions import ConfirmationDeclinedError, UserInputError

DEFAULT_LOG_DIR = Path(
    os.environ.get(
        "DISTROBOX_BACKUP_LOG_DIR",
        Path.home() / ".local" / "state" / "distrobox-backup-tool" / "logs",
    )
)


def setup_logging(
    *,
    debug: bool = False,
    trace: bool = False,
    log_dir: Path | None = None,
) -> Logger:
    """
    Setup multi-tier logging with separate sinks for different log levels.

    Logging Tiers:
    - CRITICAL/ERROR: Aborted workflows, missing dependencies
    - SUCCESS/INFO: Workflow progress and results
    - DEBUG: Every external command and workflow step
    - TRACE: Captured output of every external command

    Log Files:
    - operations.log: INFO+ events (7 day retention)
    - debug.log: DEBUG+ events when --debug or --trace is enabled (3 day retention)
    - structured.jsonl: Structured JSON logs for analysis (7 day retention)

    Args:
        debug: Enable DEBUG level logging
        trace: Enable TRACE level logging (very verbose)
        log_dir: Custom log directory (defaults to ~/.local/state/distrobox-backup-tool/logs)
    """
    logger.remove()
    logger.configure(extra={"job_id": "-", "tags": [], "source": "APP"})

    if trace:
        console_level = "TRACE"
    elif debug:
        console_level = "DEBUG"
    else:
        console_level = "INFO"

    # SINK 1: Console (stderr) - User-facing
    logger.add(
        sys.stderr,
        level=console_level,
        backtrace=False,
        diagnose=False,
        colorize=True,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[source]: <10}</cyan> | "
            "{message}"
        ),
    )

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # SINK 2: Operations Log - Important events only (INFO+)
    logger.add(
        log_dir / "operations.log",
        level="INFO",
        rotation="5 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[source]: <10} | "
            "{extra[job_id]: <20} | "
            "{message}"
        ),
    )

    # SINK 3: Debug Log - Detailed diagnostics (DEBUG+ when debug=True)
    if debug or trace:
        logger.add(
            log_dir / "debug.log",
            level="TRACE" if trace else "DEBUG",
            rotation="10 MB",
            retention="3 days",
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=True,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[source]: <10} | "
                "{extra[job_id]: <20} | "
                "{extra[tags]} | "
                "{message}"
            ),
        )

    # SINK 4: Structured JSON Log - For analysis tools (INFO+)
    logger.add(
        log_dir / "structured.jsonl",
        level="INFO",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,
        serialize=True,
        format="{message}",
    )

    return logger


def get_logger(
    *,
    job_id: str | None = None,
    tags: Iterable[str] | None = None,
    source: str | None = None,
) -> Logger:
    """
    Get a logger with bound context.

    Args:
        job_id: Job identifier for tracking a workflow run
        tags: Tags for filtering (e.g., ["workflow", "backup"])
        source: Source component (e.g., "runner", "registry", "menu")

    Returns:
        Logger with bound context
    """
    extras: dict[str, object] = {}
    if job_id is not None:
        extras["job_id"] = job_id
    if tags is not None:
        extras["tags"] = list(tags)
    if source is not None:
        extras["source"] = source
    return logger.bind(**extras)


@contextmanager
def operation_context(operation: str, **details):
    """
    Context manager for tracking a workflow run with automatic timing.

    Logs start, completion and failure with duration tracking.

    Args:
        operation: Operation name (e.g., "backup", "restore", "convert")
        **details: Operation-specific details to log

    Yields:
        Logger bound with job_id and operation context

    Example:
        with operation_context("backup", container="dev") as log:
            log.debug("Committing container")
    """
    job_id = f"{operation}-{uuid.uuid4().hex[:8]}"

    with logger.contextualize(job_id=job_id, operation=operation, **details):
        start_time = time.time()
        log = logger.bind(source=operation, job_id=job_id, tags=["workflow", operation])

        log.info(f"{operation.capitalize()} started", **details)

        try:
            yield log
            duration = time.time() - start_time
            log.success(
                f"{operation.capitalize()} completed", duration_seconds=round(duration, 2)
            )
        except (ConfirmationDeclinedError, UserInputError) as e:
            # the user backed out; nothing went wrong
            log.info(f"{operation.capitalize()} cancelled", reason=str(e))
            raise
        except Exception as e:
            duration = time.time() - start_time
            log.error(
                f"{operation.capitalize()} failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=round(duration, 2),
            )
            raise


class LoggerFactory:
    """
    Factory for creating component loggers with automatic context.
    """

    @staticmethod
    def for_workflow(workflow: str, job_id: str | None = None) -> Logger:
        """Logger for a workflow run."""
        if job_id is None:
            job_id = f"{workflow}-{uuid.uuid4().hex[:8]}"
        return logger.bind(job_id=job_id, source=workflow, tags=["workflow", workflow])

    @staticmethod
    def for_command() -> Logger:
        """Logger for external command execution."""
        return logger.bind(source="runner", tags=["command"])

    @staticmethod
    def for_registry() -> Logger:
        """Logger for container listing and home classification."""
        return logger.bind(source="registry", tags=["registry"])

    @staticmethod
    def for_menu() -> Logger:
        """Logger for the interactive menu."""
        return logger.bind(source="menu", tags=["ui", "menu"])

    @staticmethod
    def for_system() -> Logger:
        """Logger for startup, dependency detection and configuration."""
        return logger.bind(source="system", tags=["system"])


class EventLogger:
    """
    Structured event logger for workflow steps.

    Keeps the fields of step events consistent so structured.jsonl can be
    filtered by event_type.
    """

    @staticmethod
    def log_step_started(log: Logger, workflow: str, step: str, **extra) -> None:
        """Log the start of a workflow step."""
        log.debug(
            f"Step '{step}' started",
            event_type="step_started",
            workflow=workflow,
            step=step,
            **extra,
        )

    @staticmethod
    def log_step_failed(
        log: Logger, workflow: str, step: str, error: BaseException, policy: str, **extra
    ) -> None:
        """Log a failing workflow step."""
        # bind() keeps braces in command output out of str.format
        log.bind(
            event_type="step_failed",
            workflow=workflow,
            step=step,
            policy=policy,
            error_type=type(error).__name__,
            **extra,
        ).error(f"Step '{step}' failed: {error}")

    @staticmethod
    def log_compensation_failed(
        log: Logger, workflow: str, step: str, description: str, error: BaseException
    ) -> None:
        """Log a compensation that could not be carried out."""
        log.bind(
            event_type="compensation_failed",
            workflow=workflow,
            step=step,
            compensation=description,
            error_type=type(error).__name__,
        ).warning(f"Cleanup '{description}' after step '{step}' failed: {error}")
