"""Isolated home directory detection."""

from __future__ import annotations

from pathlib import Path

from distrobox_backup.config import ToolConfig
from distrobox_backup.domain import IsolationState


class HomeClassifier:
    """Tells isolated containers from standard ones.

    A container is isolated when its dedicated home directory exists. The
    answer is recomputed on every call because conversions change it.
    """

    def __init__(self, config: ToolConfig):
        self.homes_dir = config.homes_dir

    def isolated_home_path(self, container_name: str) -> Path:
        """Return the dedicated home path a container with this name would use."""
        return self.homes_dir / container_name

    def classify(self, container_name: str) -> IsolationState:
        home_path = self.isolated_home_path(container_name)
        if home_path.exists():
            return IsolationState.isolated(home_path)
        return IsolationState.standard()
