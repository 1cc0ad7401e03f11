"""
Tests for inherited metadata resolution.

Key behaviors tested:
1. Ancestors contribute keys the record does not define itself
2. The nearest ancestor wins for a key, the record's own value always wins
3. Sites resolve their region and OU chains independently
4. Clearing a parent link clears the inherited metadata
"""

import pytest
from dataclasses import replace

from fleet_inventory.errors import InvalidArgumentError, NotFoundError
from fleet_inventory.hierarchy.types import MetadataItem, Region, ResourceKind, Site
from fleet_inventory.metadata import (
    SiteInheritedMetadata,
    fold_inherited,
    validate_metadata,
)

R1, R2, R3 = "region-00000001", "region-00000002", "region-00000003"
O3 = "ou-00000003"
S1 = "site-00000001"


def pairs(items) -> list[tuple[str, str]]:
    return [(item.key, item.value) for item in items]


class TestRegionInheritance:

    def test_nearest_ancestor_wins(self, service):
        # R3 defines examplekey itself; examplekey2 comes from R2, not R1
        inherited = service.metadata.inherited_metadata(R3)
        assert pairs(inherited) == [("examplekey2", "r2")]

    def test_middle_region(self, service):
        assert pairs(service.metadata.inherited_metadata(R2)) == []

    def test_root_region_inherits_nothing(self, service):
        assert service.metadata.inherited_metadata(R1) == ()

    def test_accepts_record(self, service):
        r3 = service.store.get(ResourceKind.REGION, R3)
        assert pairs(service.metadata.inherited_metadata(r3)) == [("examplekey2", "r2")]

    def test_own_key_never_inherited(self, service):
        for item in service.metadata.inherited_metadata(R3):
            assert item.key != "examplekey"

    def test_unknown_region(self, service):
        with pytest.raises(NotFoundError):
            service.metadata.inherited_metadata("region-000000ff")

    def test_ancestor_without_metadata_is_skipped(self, service):
        service.store.register(Region(id="region-00000004", parent_region_id=R3))
        inherited = service.metadata.inherited_metadata("region-00000004")
        assert pairs(inherited) == [("examplekey", "r3"), ("examplekey2", "r2")]


class TestOuInheritance:

    def test_ou_chain(self, service):
        inherited = service.metadata.inherited_metadata(O3)
        assert pairs(inherited) == [("examplekey", "o2"), ("team", "edge-ops")]


class TestSiteInheritance:

    def test_two_independent_chains(self, service):
        inherited = service.metadata.inherited_metadata(S1)
        assert isinstance(inherited, SiteInheritedMetadata)
        assert pairs(inherited.location) == [("examplekey", "r3"), ("examplekey2", "r2")]
        assert pairs(inherited.ou) == [("examplekey", "o2"), ("team", "edge-ops")]

    def test_site_own_metadata_shadows_both_chains(self, service):
        site = service.store.get(ResourceKind.SITE, S1)
        service.store.update(replace(site, metadata=(MetadataItem("examplekey", "s1"),)))
        inherited = service.metadata.inherited_metadata(S1)
        assert pairs(inherited.location) == [("examplekey2", "r2")]
        assert pairs(inherited.ou) == [("team", "edge-ops")]

    def test_clearing_region_empties_location_chain(self, service):
        site = service.store.get(ResourceKind.SITE, S1)
        service.store.update(replace(site, region_id=""))
        inherited = service.metadata.inherited_metadata(S1)
        assert inherited.location == ()
        assert pairs(inherited.ou) == [("examplekey", "o2"), ("team", "edge-ops")]

    def test_unparented_site(self, service):
        service.store.register(Site(id="site-00000002"))
        assert service.metadata.inherited_metadata("site-00000002") == SiteInheritedMetadata()

    def test_to_dict_shape(self, service):
        payload = service.metadata.inherited_metadata(S1).to_dict()
        assert payload["location"][0] == {"key": "examplekey", "value": "r3"}
        assert set(payload) == {"location", "ou"}

    def test_hosts_do_not_inherit_metadata(self, service):
        with pytest.raises(InvalidArgumentError):
            service.metadata.inherited_metadata("host-00000001")


class TestEffectiveMetadata:

    def test_region(self, service):
        assert service.metadata.effective_metadata(R3) == {"examplekey": "r3", "examplekey2": "r2"}

    def test_site_ou_layer_applied_after_location(self, service):
        effective = service.metadata.effective_metadata(S1)
        assert effective == {"examplekey": "o2", "examplekey2": "r2", "team": "edge-ops"}


class TestFoldInherited:

    def test_fold_is_order_sensitive(self):
        near = Region(id=R2, metadata=(MetadataItem("zone", "near"),))
        far = Region(id=R1, metadata=(MetadataItem("zone", "far"), MetadataItem("tier", "gold")))
        assert pairs(fold_inherited((), [near, far])) == [("zone", "near"), ("tier", "gold")]
        assert pairs(fold_inherited((), [far, near])) == [("zone", "far"), ("tier", "gold")]


class TestMetadataValidation:

    @pytest.mark.parametrize("key", ["examplekey", "a", "cost-center", "edge.io/zone", "k8s_label"])
    def test_valid_keys(self, key):
        validate_metadata([MetadataItem(key, "value")])

    @pytest.mark.parametrize("key", ["", "UPPER", "-leading", "trailing-", "has space", "x" * 64])
    def test_invalid_keys(self, key):
        with pytest.raises(InvalidArgumentError):
            validate_metadata([MetadataItem(key, "value")])

    @pytest.mark.parametrize("value", ["", "v", "r1", "edge-ops", "v1.2_3"])
    def test_valid_values(self, value):
        validate_metadata([MetadataItem("key", value)])

    @pytest.mark.parametrize("value", ["Capital", "-x", "x-", "a b", "v" * 64])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidArgumentError):
            validate_metadata([MetadataItem("key", value)])

    def test_duplicate_key(self):
        with pytest.raises(InvalidArgumentError, match="Duplicate"):
            validate_metadata([MetadataItem("key", "a"), MetadataItem("key", "b")])
