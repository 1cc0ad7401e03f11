"""Shared test fixtures for the fleet inventory tests.

Fixtures build small in-memory hierarchies. The ``sample_inventory``
fixture loads the repository's ``sample_inventory.yaml``, which encodes
the R1 <- R2 <- R3 metadata chain used throughout.
"""

import pytest
from pathlib import Path

from fleet_inventory.config import Config
from fleet_inventory.hierarchy.types import (
    Host,
    Instance,
    MetadataItem,
    OrganizationalUnit,
    Region,
    Site,
)
from fleet_inventory.loader import load_inventory_from_yaml
from fleet_inventory.service import InventoryService
from fleet_inventory.store import HierarchyStore

_REPO_ROOT = Path(__file__).parent.parent

# Ids shared by the chain fixtures
R1, R2, R3 = "region-00000001", "region-00000002", "region-00000003"
O1, O2, O3 = "ou-00000001", "ou-00000002", "ou-00000003"
S1 = "site-00000001"
H1 = "host-00000001"
I1 = "inst-00000001"


def meta(**pairs) -> tuple:
    """Build a metadata tuple from keyword pairs."""
    return tuple(MetadataItem(k, v) for k, v in pairs.items())


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def store() -> HierarchyStore:
    """Empty store."""
    return HierarchyStore()


@pytest.fixture
def chain_store(store) -> HierarchyStore:
    """Region chain R1 <- R2 <- R3, OU chain O1 <- O2 <- O3, and S1 under R3 / O3.

    H1 sits at S1 and I1 runs on H1.
    """
    store.register(Region(id=R1, name="r1", metadata=meta(examplekey="r1", examplekey2="r1")))
    store.register(Region(id=R2, name="r2", parent_region_id=R1, metadata=meta(examplekey="r2", examplekey2="r2")))
    store.register(Region(id=R3, name="r3", parent_region_id=R2, metadata=meta(examplekey="r3")))

    store.register(OrganizationalUnit(id=O1, name="o1", metadata=meta(examplekey="o1", team="edge-ops")))
    store.register(OrganizationalUnit(id=O2, name="o2", parent_ou_id=O1, metadata=meta(examplekey="o2")))
    store.register(OrganizationalUnit(id=O3, name="o3", parent_ou_id=O2))

    store.register(Site(id=S1, name="s1", region_id=R3, ou_id=O3))
    store.register(Host(id=H1, name="h1", site_id=S1))
    store.register(Instance(id=I1, name="i1", host_id=H1))
    return store


@pytest.fixture
def config() -> Config:
    """Default test configuration."""
    return Config()


@pytest.fixture
def service(chain_store, config) -> InventoryService:
    """Inventory service over the chain fixture."""
    return InventoryService(chain_store, config)


@pytest.fixture
def sample_inventory_path() -> Path:
    return _REPO_ROOT / "sample_inventory.yaml"


@pytest.fixture
def sample_store(sample_inventory_path) -> HierarchyStore:
    """Store loaded from sample_inventory.yaml."""
    return load_inventory_from_yaml(sample_inventory_path)


# =============================================================================
# Test Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks as integration test")
    config.addinivalue_line("markers", "cron: tests for recurrence matching")
