"""Container listing parsed from ``distrobox-list`` output."""

from __future__ import annotations

from distrobox_backup.config import ToolConfig
from distrobox_backup.domain import Container
from distrobox_backup.exceptions import ExternalCommandError
from distrobox_backup.logging import LoggerFactory

from .command_runner import CommandRunner

log = LoggerFactory.for_registry()

FIELD_DELIMITER = "|"
HEADER_TOKENS = frozenset({"ID", "NAME", "STATUS", "IMAGE"})
NO_CONTAINERS_SENTINEL = "No distroboxes found"
MIN_FIELDS = 4


def _is_header_row(fields: list[str]) -> bool:
    return any(field in HEADER_TOKENS for field in fields)


def _is_rule_row(fields: list[str]) -> bool:
    return all(set(field) <= {"-"} for field in fields)


def parse_container_list(output: str) -> list[Container]:
    """Parse pipe-delimited ``distrobox-list`` rows into containers.

    Header rows, separator rows and lines without a delimiter are skipped.
    Rows with fewer than four fields are dropped without raising.
    """
    containers = []
    for line in output.splitlines():
        if FIELD_DELIMITER not in line:
            continue
        fields = [field.strip() for field in line.split(FIELD_DELIMITER)]
        if _is_header_row(fields) or _is_rule_row(fields):
            continue
        if len(fields) < MIN_FIELDS:
            log.debug(f"Skipping malformed row: {line!r}")
            continue
        containers.append(Container.from_list_fields(fields))
    return containers


class ContainerRegistry:
    """Lists the containers distrobox knows about."""

    def __init__(self, config: ToolConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def list_containers(self) -> list[Container]:
        """Return all containers.

        An empty catalog is not a failure: when the listing command exits
        non-zero but reports that no containers exist, an empty list is
        returned.

        Raises:
            ExternalCommandError: If listing fails for any other reason
        """
        try:
            output = self.runner.run(self.config.list_command, "--no-color")
        except ExternalCommandError as error:
            if NO_CONTAINERS_SENTINEL in error.output:
                log.debug("No containers found")
                return []
            raise
        containers = parse_container_list(output)
        log.debug(f"Found {len(containers)} container(s)")
        return containers
