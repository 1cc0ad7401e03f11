"""Tests for loading inventory definitions from YAML."""

import pytest

from fleet_inventory.errors import InvalidArgumentError, NotFoundError
from fleet_inventory.hierarchy.types import ResourceKind
from fleet_inventory.loader import load_inventory, load_inventory_from_yaml
from fleet_inventory.service import InventoryService
from fleet_inventory.targets import Target, TargetKind
from fleet_inventory.telemetry import LogLevel


class TestSampleInventory:

    def test_counts(self, sample_store):
        assert sample_store.count(ResourceKind.REGION) == 3
        assert sample_store.count(ResourceKind.OU) == 3
        assert sample_store.count(ResourceKind.SITE) == 1
        assert sample_store.count(ResourceKind.HOST) == 2
        assert sample_store.count(ResourceKind.INSTANCE) == 1
        assert sample_store.count(ResourceKind.TELEMETRY_GROUP) == 2
        assert sample_store.count(ResourceKind.TELEMETRY_PROFILE) == 3
        assert sample_store.count(ResourceKind.SINGLE_SCHEDULE) == 1
        assert sample_store.count(ResourceKind.REPEATED_SCHEDULE) == 1

    def test_fields(self, sample_store):
        site = sample_store.get(ResourceKind.SITE, "site-0000000a")
        assert site.region_id == "region-0000000c"
        assert site.ou_id == "ou-0000000c"

        profile = sample_store.get(ResourceKind.TELEMETRY_PROFILE, "telemetryprofile-0000000b")
        assert profile.target == Target(TargetKind.SITE, "site-0000000a")
        assert profile.log_level == LogLevel.WARN

        schedule = sample_store.get(ResourceKind.REPEATED_SCHEDULE, "repeatedsche-0000000a")
        assert schedule.cron_day_week == "1-5"
        assert schedule.target == Target(TargetKind.REGION, "region-0000000c")

    def test_metadata_chain(self, sample_store):
        service = InventoryService(sample_store)
        inherited = service.metadata.inherited_metadata("region-0000000c")
        assert [(i.key, i.value) for i in inherited] == [("examplekey2", "r2")]

    def test_sample_site_in_maintenance(self, sample_store):
        service = InventoryService(sample_store)
        assert service.schedules.is_in_maintenance("host-0000000a", at=1767225600).active
        assert not service.schedules.is_in_maintenance("host-0000000b", at=1767225600).active


class TestLoadInventory:

    def test_children_before_parents_in_file(self):
        data = {
            "regions": {
                "region-00000003": {"parent": "region-00000002"},
                "region-00000002": {"parent": "region-00000001"},
                "region-00000001": {},
            }
        }
        store = load_inventory(data)
        assert store.get(ResourceKind.REGION, "region-00000003").parent_region_id == "region-00000002"

    def test_metadata_list_form(self):
        data = {"regions": {"region-00000001": {"metadata": [{"key": "tier", "value": "gold"}]}}}
        region = load_inventory(data).get(ResourceKind.REGION, "region-00000001")
        assert region.metadata[0].key == "tier"

    def test_cycle_rejected(self):
        data = {
            "regions": {
                "region-00000001": {"parent": "region-00000002"},
                "region-00000002": {"parent": "region-00000001"},
            }
        }
        with pytest.raises((InvalidArgumentError, NotFoundError)):
            load_inventory(data)

    def test_section_must_be_mapping(self):
        with pytest.raises(InvalidArgumentError):
            load_inventory({"regions": ["region-00000001"]})

    def test_bad_enum_value(self):
        data = {"telemetry_groups": {"telemetrygroup-00000001": {"name": "g", "kind": "traces", "groups": ["x"]}}}
        with pytest.raises(InvalidArgumentError):
            load_inventory(data)

    def test_missing_required_field(self):
        data = {"single_schedules": {"singlesche-00000001": {"name": "no-start"}}}
        with pytest.raises(InvalidArgumentError):
            load_inventory(data)

    def test_populates_given_store(self, store):
        load_inventory({"regions": {"region-00000001": {}}}, store)
        assert store.count() == 1


def test_missing_file_gives_empty_store(tmp_path):
    store = load_inventory_from_yaml(tmp_path / "absent.yaml")
    assert store.count() == 0


def test_yaml_file(tmp_path):
    path = tmp_path / "inventory.yaml"
    path.write_text(
        "regions:\n"
        "  region-00000001:\n"
        "    name: europe\n"
        "    metadata:\n"
        "      tier: gold\n"
    )
    store = load_inventory_from_yaml(path)
    assert store.get(ResourceKind.REGION, "region-00000001").name == "europe"
