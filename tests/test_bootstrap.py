"""Tests for setting up a workspace from the sample files."""

import shutil

import pytest

from fleet_inventory.bootstrap import CopyOutcome, check_inventory, copy_samples
from fleet_inventory.errors import InvalidArgumentError
from fleet_inventory.hierarchy.types import ResourceKind


@pytest.fixture
def workspace(tmp_path, sample_inventory_path):
    """A directory holding both sample files and no working copies."""
    shutil.copy(sample_inventory_path.parent / "config.sample.yaml", tmp_path)
    shutil.copy(sample_inventory_path, tmp_path)
    return tmp_path


class TestCopySamples:

    def test_creates_working_copies(self, workspace):
        results = copy_samples(workspace)
        assert [r.outcome for r in results] == [CopyOutcome.CREATED, CopyOutcome.CREATED]
        assert (workspace / "config.yaml").read_text() == (workspace / "config.sample.yaml").read_text()
        assert (workspace / "inventory.yaml").exists()

    def test_keeps_existing_copy(self, workspace):
        (workspace / "config.yaml").write_text("server:\n  port: 9000\n")
        results = copy_samples(workspace)
        assert results[0].outcome == CopyOutcome.KEPT
        assert (workspace / "config.yaml").read_text() == "server:\n  port: 9000\n"

    def test_force_overwrites(self, workspace):
        (workspace / "config.yaml").write_text("server:\n  port: 9000\n")
        results = copy_samples(workspace, force=True)
        assert results[0].outcome == CopyOutcome.OVERWRITTEN
        assert "8060" in (workspace / "config.yaml").read_text()

    def test_missing_sample(self, tmp_path):
        results = copy_samples(tmp_path)
        assert {r.outcome for r in results} == {CopyOutcome.NO_SAMPLE}
        assert list(tmp_path.iterdir()) == []


class TestCheckInventory:

    def test_counts_sample_records(self, workspace):
        copy_samples(workspace)
        counts = check_inventory(workspace)
        assert counts[ResourceKind.REGION] == 3
        assert counts[ResourceKind.HOST] == 2
        assert counts[ResourceKind.REPEATED_SCHEDULE] == 1

    def test_no_config_means_no_inventory(self, tmp_path):
        assert check_inventory(tmp_path) == {}

    def test_configured_nesting_limit_applies(self, workspace):
        copy_samples(workspace)
        (workspace / "config.yaml").write_text("hierarchy:\n  definition_file: inventory.yaml\n  max_nesting: 2\n")
        with pytest.raises(InvalidArgumentError):
            check_inventory(workspace)
