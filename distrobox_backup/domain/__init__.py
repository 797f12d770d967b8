"""Domain models for container lifecycle operations."""

from __future__ import annotations

from .models import (
    Container,
    ContainerType,
    IsolationState,
    RetainedArtifact,
    StepPolicy,
    TempImage,
    WorkflowReport,
)


__all__ = [
    "Container",
    "ContainerType",
    "IsolationState",
    "RetainedArtifact",
    "StepPolicy",
    "TempImage",
    "WorkflowReport",
]
