"""
Location hierarchy data model.

Regions nest under regions, OUs under OUs. A Site hangs off one Region and
one OU independently, a Host off a Site, an Instance off a Host. Every link
is optional except Instance -> Host.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from ..errors import InvalidArgumentError


class ResourceKind(str, Enum):
    """Kinds of records held by the hierarchy store."""
    REGION = "region"
    OU = "ou"
    SITE = "site"
    HOST = "host"
    INSTANCE = "instance"
    TELEMETRY_GROUP = "telemetry_group"
    TELEMETRY_PROFILE = "telemetry_profile"
    SINGLE_SCHEDULE = "single_schedule"
    REPEATED_SCHEDULE = "repeated_schedule"

    @property
    def prefix(self) -> str:
        """Resource id prefix, e.g. ``region`` in ``region-0a1b2c3d``."""
        return RESOURCE_PREFIXES[self]


RESOURCE_PREFIXES: dict[ResourceKind, str] = {
    ResourceKind.REGION: "region",
    ResourceKind.OU: "ou",
    ResourceKind.SITE: "site",
    ResourceKind.HOST: "host",
    ResourceKind.INSTANCE: "inst",
    ResourceKind.TELEMETRY_GROUP: "telemetrygroup",
    ResourceKind.TELEMETRY_PROFILE: "telemetryprofile",
    ResourceKind.SINGLE_SCHEDULE: "singlesche",
    ResourceKind.REPEATED_SCHEDULE: "repeatedsche",
}

_KINDS_BY_PREFIX = {prefix: kind for kind, prefix in RESOURCE_PREFIXES.items()}

_RESOURCE_ID_PATTERN = re.compile(r"^([a-z]+)-([0-9a-f]{8})$")


def kind_of(resource_id: str) -> ResourceKind:
    """
    Determine the record kind from a resource id.

    Args:
        resource_id: An id such as ``site-00c0ffee``

    Returns:
        The kind encoded by the id prefix

    Raises:
        InvalidArgumentError: If the id is malformed or the prefix unknown
    """
    match = _RESOURCE_ID_PATTERN.match(resource_id or "")
    if not match or match.group(1) not in _KINDS_BY_PREFIX:
        raise InvalidArgumentError(f"Malformed resource id: {resource_id!r}")
    return _KINDS_BY_PREFIX[match.group(1)]


def validate_resource_id(resource_id: str, kind: ResourceKind) -> str:
    """Check that ``resource_id`` is well formed and names a ``kind`` record."""
    actual = kind_of(resource_id)
    if actual != kind:
        raise InvalidArgumentError(
            f"Resource id {resource_id!r} is a {actual.value}, expected {kind.value}"
        )
    return resource_id


@dataclass(frozen=True, slots=True)
class MetadataItem:
    """A single key/value metadata pair."""
    key: str
    value: str

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}


def metadata_from_raw(raw) -> tuple[MetadataItem, ...]:
    """
    Build metadata items from YAML/JSON shapes.

    Accepts either a mapping (``{key: value}``) or a list of
    ``{"key": ..., "value": ...}`` entries. Order is preserved.
    """
    if not raw:
        return ()
    if isinstance(raw, dict):
        return tuple(MetadataItem(str(k), str(v)) for k, v in raw.items())
    return tuple(MetadataItem(str(item["key"]), str(item["value"])) for item in raw)


@dataclass(frozen=True, slots=True)
class Region:
    """A geographic region; regions nest under a parent region."""
    KIND: ClassVar[ResourceKind] = ResourceKind.REGION

    id: str
    name: str = ""
    parent_region_id: str | None = None
    metadata: tuple[MetadataItem, ...] = ()


@dataclass(frozen=True, slots=True)
class OrganizationalUnit:
    """An organizational unit; OUs nest under a parent OU."""
    KIND: ClassVar[ResourceKind] = ResourceKind.OU

    id: str
    name: str = ""
    parent_ou_id: str | None = None
    metadata: tuple[MetadataItem, ...] = ()


@dataclass(frozen=True, slots=True)
class Site:
    """
    A physical site.

    A site belongs to at most one Region (its location chain) and at most one
    OU (its organizational chain). The two chains are independent.
    """
    KIND: ClassVar[ResourceKind] = ResourceKind.SITE

    id: str
    name: str = ""
    region_id: str | None = None
    ou_id: str | None = None
    metadata: tuple[MetadataItem, ...] = ()


@dataclass(frozen=True, slots=True)
class Host:
    """An edge host, optionally placed at a site."""
    KIND: ClassVar[ResourceKind] = ResourceKind.HOST

    id: str
    name: str = ""
    site_id: str | None = None


@dataclass(frozen=True, slots=True)
class Instance:
    """An OS instance running on a host."""
    KIND: ClassVar[ResourceKind] = ResourceKind.INSTANCE

    id: str
    host_id: str
    name: str = ""


LocationRecord = Union[Region, OrganizationalUnit, Site, Host, Instance]

LOCATION_KINDS = (
    ResourceKind.REGION,
    ResourceKind.OU,
    ResourceKind.SITE,
    ResourceKind.HOST,
    ResourceKind.INSTANCE,
)


class Chain(str, Enum):
    """Which ancestor chain to follow from a record."""
    LOCATION = "location"
    ORGANIZATION = "ou"


def default_chain(kind: ResourceKind) -> Chain:
    """OUs only have an organizational chain; everything else walks by location."""
    return Chain.ORGANIZATION if kind == ResourceKind.OU else Chain.LOCATION


def parent_link(record: LocationRecord, chain: Chain) -> tuple[ResourceKind, str] | None:
    """
    Return the typed parent reference of ``record`` along ``chain``.

    Region -> Region and Host -> Site -> Region form the location chain,
    OU -> OU the organizational one. A Site participates in both.

    Returns:
        ``(parent_kind, parent_id)`` or None when there is no parent
    """
    if isinstance(record, Region):
        link = (ResourceKind.REGION, record.parent_region_id) if chain == Chain.LOCATION else None
    elif isinstance(record, OrganizationalUnit):
        link = (ResourceKind.OU, record.parent_ou_id) if chain == Chain.ORGANIZATION else None
    elif isinstance(record, Site):
        if chain == Chain.LOCATION:
            link = (ResourceKind.REGION, record.region_id)
        else:
            link = (ResourceKind.OU, record.ou_id)
    elif isinstance(record, Host):
        link = (ResourceKind.SITE, record.site_id) if chain == Chain.LOCATION else None
    elif isinstance(record, Instance):
        link = (ResourceKind.HOST, record.host_id) if chain == Chain.LOCATION else None
    else:
        raise InvalidArgumentError(f"{type(record).__name__} has no parent link")

    if link is None or not link[1]:
        return None
    return link
