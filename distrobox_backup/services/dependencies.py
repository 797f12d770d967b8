"""Startup checks for required tools and host information."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable

from distrobox_backup.config import DEFAULT_SETTINGS, ToolConfig
from distrobox_backup.config.settings import FILE_PICKER_CHOICES, RUNTIME_CHOICES
from distrobox_backup.exceptions import DependencyMissingError, ExternalCommandError
from distrobox_backup.logging import LoggerFactory

from .command_runner import CommandRunner, command_exists

log = LoggerFactory.for_system()

OS_RELEASE_PATH = Path("/etc/os-release")
_OS_NAME_PATTERN = re.compile(r'^NAME="?([^"\n]+)"?', re.MULTILINE)

Exists = Callable[[str], Any]


def read_host_distro(os_release: Path = OS_RELEASE_PATH) -> str:
    """Return the host distribution name from os-release, or "Unknown"."""
    try:
        content = os_release.read_text(encoding="utf-8")
    except OSError:
        return "Unknown"
    match = _OS_NAME_PATTERN.search(content)
    return match.group(1) if match else "Unknown"


def read_distrobox_version(runner: CommandRunner) -> str:
    try:
        return runner.run("distrobox", "--version").strip() or "Unknown"
    except ExternalCommandError:
        return "Unknown"


def select_runtime(preference: str, exists: Exists) -> str:
    """Pick the container runtime.

    Raises:
        ValueError: If the preference is not a known runtime setting
        DependencyMissingError: If the preferred runtime, or neither podman
            nor docker in auto mode, is installed
    """
    if preference not in RUNTIME_CHOICES:
        raise ValueError(f"Unknown runtime setting: {preference}")
    if preference != "auto":
        if not exists(preference):
            raise DependencyMissingError(preference, "Configured as the container runtime")
        return preference
    for candidate in ("podman", "docker"):
        if exists(candidate):
            return candidate
    raise DependencyMissingError(
        "podman or docker", "Distrobox requires one of these runtimes to function"
    )


def select_file_picker(preference: str, exists: Exists) -> str | None:
    """Pick a GUI file picker, or None to fall back to terminal input.

    Raises:
        ValueError: If the preference is not a known picker setting
    """
    if preference not in FILE_PICKER_CHOICES:
        raise ValueError(f"Unknown file picker setting: {preference}")
    if preference == "none":
        return None
    candidates = ("zenity", "kdialog") if preference == "auto" else (preference,)
    for candidate in candidates:
        if exists(candidate):
            return candidate
    log.warning("No GUI file picker (zenity/kdialog) found. Falling back to terminal input.")
    return None


def _choice_setting(settings: dict[str, Any], key: str, choices: tuple[str, ...]) -> str:
    value = settings.get(key, DEFAULT_SETTINGS[key])
    if value in choices:
        return value
    log.warning(
        f"Invalid value {value!r} for setting '{key}' (expected one of "
        f"{', '.join(choices)}). Using '{DEFAULT_SETTINGS[key]}'."
    )
    return DEFAULT_SETTINGS[key]


def _interval_setting(settings: dict[str, Any]) -> float:
    value = settings.get("spinner_interval", DEFAULT_SETTINGS["spinner_interval"])
    try:
        interval = float(value)
    except (TypeError, ValueError):
        interval = 0.0
    if interval > 0:
        return interval
    log.warning(
        f"Invalid value {value!r} for setting 'spinner_interval' (expected a positive "
        f"number). Using {DEFAULT_SETTINGS['spinner_interval']}."
    )
    return DEFAULT_SETTINGS["spinner_interval"]


def detect_tool_config(
    settings: dict[str, Any],
    runner: CommandRunner | None = None,
    exists: Exists = command_exists,
    os_release: Path = OS_RELEASE_PATH,
    user_home: Path | None = None,
) -> ToolConfig:
    """Check dependencies and build the configuration used for this run.

    Settings with invalid values are replaced by their defaults with a
    warning, the same way an unreadable settings file is.

    Raises:
        DependencyMissingError: If distrobox or a container runtime is missing
    """
    if not exists("distrobox"):
        raise DependencyMissingError("distrobox", "Please install it first to use this tool")
    runner = runner or CommandRunner()
    runtime = select_runtime(_choice_setting(settings, "runtime", RUNTIME_CHOICES), exists)
    log.info(f"Using '{runtime}' as the container runtime.")
    file_picker = select_file_picker(
        _choice_setting(settings, "file_picker", FILE_PICKER_CHOICES), exists
    )

    backup_dir = settings.get("default_backup_dir")
    if backup_dir is not None and not isinstance(backup_dir, str):
        log.warning(f"Invalid value {backup_dir!r} for setting 'default_backup_dir'. Ignoring it.")
        backup_dir = None
    return ToolConfig(
        runtime=runtime,
        user_home=user_home or Path.home(),
        file_picker=file_picker,
        distrobox_version=read_distrobox_version(runner),
        host_distro=read_host_distro(os_release),
        default_backup_dir=Path(backup_dir).expanduser() if backup_dir else None,
        spinner_interval=_interval_setting(settings),
    )
