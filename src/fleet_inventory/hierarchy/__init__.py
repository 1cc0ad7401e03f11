"""
Location Hierarchy

Record types for regions, OUs, sites, hosts and instances, and the bounded
ancestor walk shared by every inheritance resolver.
"""

from .types import (
    ResourceKind,
    MetadataItem,
    Region,
    OrganizationalUnit,
    Site,
    Host,
    Instance,
    Chain,
    kind_of,
    validate_resource_id,
)
from .walker import AncestorWalker, MAX_NESTING

__all__ = [
    "ResourceKind",
    "MetadataItem",
    "Region",
    "OrganizationalUnit",
    "Site",
    "Host",
    "Instance",
    "Chain",
    "kind_of",
    "validate_resource_id",
    "AncestorWalker",
    "MAX_NESTING",
]
