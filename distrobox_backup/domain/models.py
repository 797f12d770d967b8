"""Domain model for container lifecycle operations.

Type-safe objects passed between the registry, the classifier and the
workflow engine instead of raw strings and boolean flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


# ==============================================================================
# Container Domain
# ==============================================================================


@dataclass(frozen=True)
class Container:
    """A distrobox container as reported by ``distrobox-list``.

    Identity is the name. Uniqueness is enforced by distrobox, not here.
    """

    id: str  # e.g., "3f2a9c1b0d4e"
    name: str  # e.g., "ubuntu-dev"
    image: str  # e.g., "docker.io/library/ubuntu:24.04"

    @classmethod
    def from_list_fields(cls, fields: list[str]) -> Container:
        """Build a container from one split ``distrobox-list`` row.

        Columns are ``ID | NAME | STATUS | IMAGE``.

        Raises:
            IndexError: If fewer than four fields are given
        """
        return cls(
            id=fields[0].strip(),
            name=fields[1].strip(),
            image=fields[3].strip(),
        )


class ContainerType(Enum):
    """How a container's home directory is provided."""

    STANDARD = "standard"  # Shares the host home directory
    ISOLATED = "isolated"  # Dedicated home under ~/.local/share/distrobox/homes

    def complement(self) -> ContainerType:
        if self is ContainerType.STANDARD:
            return ContainerType.ISOLATED
        return ContainerType.STANDARD

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class IsolationState:
    """Tagged variant: ``Standard`` or ``Isolated(home_path)``.

    Derived from filesystem evidence on demand, never stored.
    """

    kind: ContainerType
    home_path: Path | None = None

    def __post_init__(self) -> None:
        if self.kind is ContainerType.ISOLATED and self.home_path is None:
            raise ValueError("Isolated state requires a home path")
        if self.kind is ContainerType.STANDARD and self.home_path is not None:
            raise ValueError("Standard state cannot carry a home path")

    @classmethod
    def standard(cls) -> IsolationState:
        return cls(ContainerType.STANDARD)

    @classmethod
    def isolated(cls, home_path: Path) -> IsolationState:
        return cls(ContainerType.ISOLATED, Path(home_path))

    @property
    def is_isolated(self) -> bool:
        return self.kind is ContainerType.ISOLATED

    @property
    def target_type(self) -> ContainerType:
        """Type a conversion would produce."""
        return self.kind.complement()


# ==============================================================================
# Workflow Artifacts
# ==============================================================================


@dataclass(frozen=True)
class TempImage:
    """A short-lived image used to move container state within one workflow."""

    name: str  # <prefix>-<container-id>-<unix-timestamp>
    created_by: str  # Workflow step that commits it, e.g., "backup.commit"


@dataclass(frozen=True)
class RetainedArtifact:
    """Something left behind that a human has to reconcile.

    Reported as a warning after a best-effort cleanup failed, or attached to
    an abort when an artifact is deliberately kept for manual recovery.
    """

    kind: str  # "image" or "directory"
    identifier: str  # Image name or filesystem path
    reason: str = ""

    def describe(self) -> str:
        text = f"{self.kind} '{self.identifier}'"
        if self.reason:
            text = f"{text} ({self.reason})"
        return text


class StepPolicy(Enum):
    """What a failing workflow step does to the rest of the workflow."""

    ABORT = "abort"  # Halt, run compensations, raise
    WARN_AND_CONTINUE = "warn"  # Log a warning, keep going, still succeed


@dataclass
class WorkflowReport:
    """Outcome of a workflow that reached its end."""

    workflow: str
    summary: str
    warnings: list[RetainedArtifact] = field(default_factory=list)
    completed_steps: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """True when nothing was left behind."""
        return not self.warnings
