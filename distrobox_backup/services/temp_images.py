"""Temporary image naming and best-effort cleanup."""

from __future__ import annotations

import time
from typing import Callable

from distrobox_backup.domain import Container, TempImage
from distrobox_backup.logging import LoggerFactory

from .toolchain import Toolchain

log = LoggerFactory.for_command()


class TempImageManager:
    """Issues unique temporary image names and removes them afterwards.

    Every image committed under an issued name is tracked until it is
    removed, so ``outstanding()`` always lists what this process may have
    left in the runtime's image store.
    """

    def __init__(self, toolchain: Toolchain, clock: Callable[[], float] = time.time):
        self.toolchain = toolchain
        self.clock = clock
        self._issued: set[str] = set()
        self._outstanding: dict[str, TempImage] = {}

    def new_image(self, prefix: str, container: Container, created_by: str) -> TempImage:
        """Return a fresh ``<prefix>-<container-id>-<unix-timestamp>`` image."""
        base = f"{prefix}-{container.id}-{int(self.clock())}".lower()
        name = base
        counter = 1
        while name in self._issued:
            name = f"{base}-{counter}"
            counter += 1
        self._issued.add(name)
        image = TempImage(name=name, created_by=created_by)
        log.debug(f"Temporary image name issued: {name} ({created_by})")
        return image

    def track(self, image: TempImage) -> None:
        """Record that the image now exists in the runtime."""
        self._outstanding[image.name] = image

    def remove(self, image: TempImage) -> None:
        """Remove the image from the runtime.

        Raises:
            ExternalCommandError: If the runtime refuses; the image stays
                tracked as outstanding.
        """
        self.toolchain.remove_image(image.name)
        self._outstanding.pop(image.name, None)
        log.debug(f"Temporary image removed: {image.name}")

    def outstanding(self) -> list[TempImage]:
        return list(self._outstanding.values())
