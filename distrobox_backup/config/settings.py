"""Settings storage and the tool configuration built from it at startup."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "DISTROBOX_BACKUP_SETTINGS_PATH",
        Path.home() / ".config" / "distrobox-backup-tool" / "settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_SPINNER_INTERVAL = 0.1
TOOL_NAME = "distrobox"
BACKUP_IMAGE_PREFIX = "distrobox-backup"
CONVERT_IMAGE_PREFIX = "distrobox-convert"

RUNTIME_CHOICES = ("auto", "podman", "docker")
FILE_PICKER_CHOICES = ("auto", "zenity", "kdialog", "none")

DEFAULT_SETTINGS: dict[str, Any] = {
    "runtime": "auto",
    "file_picker": "auto",
    "default_backup_dir": None,
    "spinner_interval": DEFAULT_SPINNER_INTERVAL,
}


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Return the default settings merged with the settings file, if any.

    A missing or unreadable file is not an error; defaults are used.
    """
    path = path or SETTINGS_PATH
    values = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return values
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return values
    if isinstance(data, dict):
        values.update(data)
    return values


@dataclass(frozen=True)
class ToolConfig:
    """Configuration constructed once at startup and passed to each component.

    Nothing in the package reads the runtime or picker choice from module
    state; it always comes from here.
    """

    runtime: str  # "podman" or "docker"
    user_home: Path
    file_picker: str | None = None  # "zenity", "kdialog" or None for terminal input
    distrobox_version: str = "Unknown"
    host_distro: str = "Unknown"
    default_backup_dir: Path | None = None
    spinner_interval: float = DEFAULT_SPINNER_INTERVAL
    list_command: str = "distrobox-list"
    create_command: str = "distrobox-create"
    remove_command: str = "distrobox-rm"

    @property
    def homes_dir(self) -> Path:
        """Directory holding the dedicated homes of isolated containers."""
        return self.user_home / ".local" / "share" / TOOL_NAME / "homes"
