"""Fixed-shape calls into the container runtime and distrobox."""

from __future__ import annotations

from pathlib import Path

from distrobox_backup.config import ToolConfig

from .command_runner import CommandRunner

# Checked in order. podman prints "Loaded image:" (older releases
# "Loaded image(s):"); docker prints "Loaded image ID:" for untagged images.
LOADED_IMAGE_MARKERS = ("Loaded image:", "Loaded image(s):", "Loaded image ID:")


def extract_loaded_image(output: str) -> str | None:
    """Return the image identifier reported by a ``load`` command.

    Any line containing a marker qualifies, regardless of surrounding log
    noise; the text after the marker is stripped and returned.
    """
    for marker in LOADED_IMAGE_MARKERS:
        for line in output.splitlines():
            if marker not in line:
                continue
            identifier = line.split(marker, 1)[1].strip()
            if identifier:
                return identifier
    return None


class Toolchain:
    """Runtime (podman/docker) and distrobox commands used by the workflows."""

    def __init__(self, config: ToolConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    @property
    def runtime(self) -> str:
        return self.config.runtime

    def commit(self, container_name: str, image: str) -> str:
        return self.runner.run(self.runtime, "commit", container_name, image)

    def save(self, image: str, archive_path: Path) -> str:
        return self.runner.run(self.runtime, "save", "-o", str(archive_path), image)

    def load(self, archive_path: Path) -> str:
        return self.runner.run(self.runtime, "load", "-i", str(archive_path))

    def remove_image(self, image: str) -> str:
        return self.runner.run(self.runtime, "rmi", image)

    def stop(self, container_name: str) -> str:
        return self.runner.run(self.runtime, "stop", container_name)

    def create(self, name: str, image: str, home: Path | None = None) -> str:
        args = ["--name", name, "--image", image]
        if home is not None:
            args += ["--home", str(home)]
        return self.runner.run(self.config.create_command, *args)

    def force_remove(self, container_name: str) -> str:
        return self.runner.run(self.config.remove_command, container_name, "--force")
