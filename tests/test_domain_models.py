"""Tests for domain models.

These tests cover the pure domain layer: no external commands, no filesystem.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from distrobox_backup.domain import (
    Container,
    ContainerType,
    IsolationState,
    RetainedArtifact,
    StepPolicy,
    TempImage,
    WorkflowReport,
)


# ==============================================================================
# Container Tests
# ==============================================================================


class TestContainer:
    """Test Container domain model."""

    def test_from_list_fields(self):
        """Test building a container from a split listing row."""
        container = Container.from_list_fields(
            [" 3f2a ", " dev ", " Up 2 hours ", " docker.io/library/ubuntu:24.04 "]
        )

        assert container == Container("3f2a", "dev", "docker.io/library/ubuntu:24.04")

    def test_from_list_fields_too_short(self):
        """Test rows missing the image column are rejected."""
        with pytest.raises(IndexError):
            Container.from_list_fields(["3f2a", "dev", "Up"])

    def test_container_is_immutable(self):
        """Test containers cannot be modified."""
        container = Container("3f2a", "dev", "img")

        with pytest.raises(AttributeError):
            container.name = "other"  # type: ignore[misc]


# ==============================================================================
# ContainerType / IsolationState Tests
# ==============================================================================


class TestContainerType:
    """Test ContainerType enum."""

    def test_complement(self):
        """Test each type converts to the other."""
        assert ContainerType.STANDARD.complement() is ContainerType.ISOLATED
        assert ContainerType.ISOLATED.complement() is ContainerType.STANDARD

    def test_label(self):
        """Test labels are capitalized values."""
        assert ContainerType.STANDARD.label == "Standard"
        assert ContainerType.ISOLATED.label == "Isolated"


class TestIsolationState:
    """Test IsolationState variant."""

    def test_standard(self):
        """Test the standard state has no home path."""
        state = IsolationState.standard()

        assert not state.is_isolated
        assert state.home_path is None
        assert state.target_type is ContainerType.ISOLATED

    def test_isolated(self):
        """Test the isolated state carries its home path."""
        state = IsolationState.isolated("/home/alex/.local/share/distrobox/homes/dev")

        assert state.is_isolated
        assert state.home_path == Path("/home/alex/.local/share/distrobox/homes/dev")
        assert state.target_type is ContainerType.STANDARD

    def test_isolated_requires_home(self):
        """Test an isolated state without a home path is invalid."""
        with pytest.raises(ValueError, match="requires a home path"):
            IsolationState(ContainerType.ISOLATED)

    def test_standard_rejects_home(self):
        """Test a standard state cannot carry a home path."""
        with pytest.raises(ValueError, match="cannot carry"):
            IsolationState(ContainerType.STANDARD, Path("/tmp/home"))


# ==============================================================================
# Workflow Artifact Tests
# ==============================================================================


class TestWorkflowArtifacts:
    """Test temp images, retained artifacts and reports."""

    def test_retained_artifact_describe(self):
        """Test describe includes the reason when present."""
        assert RetainedArtifact("image", "tmp-1").describe() == "image 'tmp-1'"
        assert RetainedArtifact("directory", "/h", "not deleted").describe() == (
            "directory '/h' (not deleted)"
        )

    def test_temp_image_fields(self):
        """Test temp images record which step created them."""
        image = TempImage(name="distrobox-backup-abc-1", created_by="backup.commit")

        assert image.created_by == "backup.commit"

    def test_report_clean(self):
        """Test a report is clean until a warning is added."""
        report = WorkflowReport(workflow="backup", summary="done")
        assert report.clean

        report.warnings.append(RetainedArtifact("image", "tmp-1"))
        assert not report.clean

    def test_reports_do_not_share_lists(self):
        """Test default lists are per instance."""
        first = WorkflowReport(workflow="a", summary="")
        second = WorkflowReport(workflow="b", summary="")
        first.completed_steps.append("x")

        assert second.completed_steps == []

    def test_step_policy_values(self):
        """Test policy values used in structured logs."""
        assert StepPolicy.ABORT.value == "abort"
        assert StepPolicy.WARN_AND_CONTINUE.value == "warn"
