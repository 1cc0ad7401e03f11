"""
Thread-safe in-memory inventory store.

Holds every record kind keyed by resource id: the location hierarchy,
telemetry groups and profiles, and maintenance schedules. Writes validate
references so the hierarchy stays consistent; reads hand out frozen records.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Union

from .errors import ConflictError, InvalidArgumentError, NotFoundError
from .hierarchy.types import (
    Chain,
    Host,
    Instance,
    LOCATION_KINDS,
    LocationRecord,
    OrganizationalUnit,
    Region,
    ResourceKind,
    Site,
    default_chain,
    kind_of,
    parent_link,
    validate_resource_id,
)
from .hierarchy.walker import MAX_NESTING
from .metadata.validation import validate_metadata
from .schedules.types import RepeatedSchedule, SingleSchedule
from .targets import Target, TargetKind
from .telemetry.types import TelemetryGroup, TelemetryProfile

logger = logging.getLogger(__name__)

Record = Union[LocationRecord, TelemetryGroup, TelemetryProfile, SingleSchedule, RepeatedSchedule]

TARGETED_KINDS = (
    ResourceKind.TELEMETRY_PROFILE,
    ResourceKind.SINGLE_SCHEDULE,
    ResourceKind.REPEATED_SCHEDULE,
)

_TARGET_KINDS = {kind.resource_kind: kind for kind in TargetKind}


def _parent_ids(record: LocationRecord) -> set[str]:
    ids = set()
    for chain in Chain:
        link = parent_link(record, chain)
        if link is not None:
            ids.add(link[1])
    return ids


class HierarchyStore:
    """
    Thread-safe store for inventory records.

    Provides register/update/delete plus the lookups the resolvers need:
    ``get``, ``list_children`` and ``list_by_target_ref``.

    Region and OU chains are kept at most ``max_nesting`` levels deep,
    counting the root as level one.
    """

    def __init__(self, max_nesting: int = MAX_NESTING) -> None:
        self.max_nesting = max_nesting
        self._records: dict[ResourceKind, dict[str, Any]] = {kind: {} for kind in ResourceKind}
        self._lock = threading.RLock()

    def new_id(self, kind: ResourceKind) -> str:
        """Generate an unused resource id for ``kind``."""
        with self._lock:
            while True:
                candidate = f"{kind.prefix}-{uuid.uuid4().hex[:8]}"
                if candidate not in self._records[kind]:
                    return candidate

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, kind: ResourceKind, resource_id: str) -> Record | None:
        """
        Get a record by kind and id.

        Returns:
            The record if found, None otherwise
        """
        with self._lock:
            return self._records[kind].get(resource_id)

    def get_or_raise(self, kind: ResourceKind, resource_id: str) -> Record:
        """
        Get a record by kind and id, raising if not found.

        Raises:
            NotFoundError: If no such record exists
        """
        with self._lock:
            record = self._records[kind].get(resource_id)
            if record is None:
                raise NotFoundError(kind.value, resource_id)
            return record

    def lookup(self, resource_id: str) -> Record:
        """Get a record by id alone; the kind is taken from the id prefix."""
        return self.get_or_raise(kind_of(resource_id), resource_id)

    def exists(self, kind: ResourceKind, resource_id: str) -> bool:
        with self._lock:
            return resource_id in self._records[kind]

    def all(self, kind: ResourceKind) -> list[Record]:
        """All records of ``kind``, sorted by id."""
        with self._lock:
            return sorted(self._records[kind].values(), key=lambda r: r.id)

    def count(self, kind: ResourceKind | None = None) -> int:
        with self._lock:
            if kind is not None:
                return len(self._records[kind])
            return sum(len(records) for records in self._records.values())

    def list_children(self, parent_id: str, kind: ResourceKind) -> list[LocationRecord]:
        """
        List records of ``kind`` whose parent link points at ``parent_id``.

        A site is a child of both its region and its OU.
        """
        with self._lock:
            return [r for r in self.all(kind) if parent_id in _parent_ids(r)]

    def list_by_target_ref(
        self,
        target_kind: TargetKind,
        target_id: str,
        record_kind: ResourceKind,
    ) -> list[Record]:
        """
        List profiles or schedules bound directly to a target.

        Args:
            target_kind: Level of the target (host, site, region, instance)
            target_id: Id of the target resource
            record_kind: One of the telemetry profile or schedule kinds

        Returns:
            Matching records sorted by id
        """
        if record_kind not in TARGETED_KINDS:
            raise InvalidArgumentError(f"{record_kind.value} records have no target")
        target = Target(target_kind, target_id)
        with self._lock:
            return [r for r in self.all(record_kind) if r.target == target]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def register(self, record: Record) -> Record:
        """
        Add a new record.

        Raises:
            InvalidArgumentError: If the record or one of its references is malformed,
                or a region or OU would nest deeper than ``max_nesting``
            NotFoundError: If a referenced record does not exist
            ConflictError: If the id is taken, or the record contradicts a referenced one
        """
        kind = record.KIND
        validate_resource_id(record.id, kind)
        with self._lock:
            if record.id in self._records[kind]:
                raise ConflictError(f"{kind.value} '{record.id}' already registered")
            self._validate(record)
            self._records[kind][record.id] = record
        logger.info(f"Registered {kind.value} {record.id}")
        return record

    def update(self, record: Record) -> Record:
        """
        Replace an existing record.

        Raises:
            NotFoundError: If the record does not exist, or a reference is missing
            InvalidArgumentError: If the new version is malformed, introduces a cycle
                or makes its region or OU chain too deep
        """
        kind = record.KIND
        with self._lock:
            self.get_or_raise(kind, record.id)
            self._validate(record)
            self._records[kind][record.id] = record
        logger.info(f"Updated {kind.value} {record.id}")
        return record

    def delete(self, kind: ResourceKind, resource_id: str) -> Record:
        """
        Delete a record that nothing references any more.

        Raises:
            NotFoundError: If the record does not exist
            ConflictError: If children, profiles or schedules still reference it
        """
        with self._lock:
            record = self.get_or_raise(kind, resource_id)
            referrers = self.references_to(kind, resource_id)
            if referrers:
                raise ConflictError(
                    f"{kind.value} {resource_id} is still referenced by: {', '.join(referrers)}"
                )
            del self._records[kind][resource_id]
        logger.info(f"Deleted {kind.value} {resource_id}")
        return record

    def references_to(self, kind: ResourceKind, resource_id: str) -> list[str]:
        """Ids of records pointing at the given record."""
        with self._lock:
            referrers: list[str] = []
            if kind in LOCATION_KINDS:
                for child_kind in LOCATION_KINDS:
                    referrers.extend(r.id for r in self.list_children(resource_id, child_kind))
                target_kind = _TARGET_KINDS.get(kind)
                if target_kind is not None:
                    for record_kind in TARGETED_KINDS:
                        referrers.extend(
                            r.id for r in self.list_by_target_ref(target_kind, resource_id, record_kind)
                        )
            elif kind == ResourceKind.TELEMETRY_GROUP:
                referrers.extend(
                    r.id for r in self.all(ResourceKind.TELEMETRY_PROFILE) if r.group_id == resource_id
                )
            return referrers

    def clear(self) -> None:
        """Remove every record."""
        with self._lock:
            for records in self._records.values():
                records.clear()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _require(self, kind: ResourceKind, resource_id: str | None) -> None:
        if not resource_id:
            return
        validate_resource_id(resource_id, kind)
        if resource_id not in self._records[kind]:
            raise NotFoundError(kind.value, resource_id)

    def _check_acyclic(self, record: Region | OrganizationalUnit) -> None:
        chain = default_chain(record.KIND)
        seen = {record.id}
        link = parent_link(record, chain)
        while link is not None:
            parent_kind, parent_id = link
            if parent_id in seen:
                raise InvalidArgumentError(
                    f"Setting the parent of {record.id} would create a cycle through {parent_id}"
                )
            seen.add(parent_id)
            parent = self._records[parent_kind].get(parent_id)
            if parent is None:
                return
            link = parent_link(parent, chain)

    def _check_nesting(self, record: Region | OrganizationalUnit) -> None:
        chain = default_chain(record.KIND)
        depth = 1
        link = parent_link(record, chain)
        while link is not None:
            parent = self._records[link[0]].get(link[1])
            if parent is None:
                break
            depth += 1
            link = parent_link(parent, chain)

        depth += self._subtree_height(record)
        if depth > self.max_nesting:
            raise InvalidArgumentError(
                f"{record.id} would make a {record.KIND.value} chain {depth} levels deep, "
                f"the limit is {self.max_nesting}"
            )

    def _subtree_height(self, record: Region | OrganizationalUnit) -> int:
        """Levels of stored descendants of the same kind below ``record``."""
        children = self.list_children(record.id, record.KIND)
        return max((1 + self._subtree_height(child) for child in children), default=0)

    def _validate(self, record: Record) -> None:
        if isinstance(record, Region):
            validate_metadata(record.metadata)
            self._require(ResourceKind.REGION, record.parent_region_id)
            self._check_acyclic(record)
            self._check_nesting(record)
        elif isinstance(record, OrganizationalUnit):
            validate_metadata(record.metadata)
            self._require(ResourceKind.OU, record.parent_ou_id)
            self._check_acyclic(record)
            self._check_nesting(record)
        elif isinstance(record, Site):
            validate_metadata(record.metadata)
            self._require(ResourceKind.REGION, record.region_id)
            self._require(ResourceKind.OU, record.ou_id)
        elif isinstance(record, Host):
            self._require(ResourceKind.SITE, record.site_id)
        elif isinstance(record, Instance):
            if not record.host_id:
                raise InvalidArgumentError(f"Instance {record.id} must reference a host")
            self._require(ResourceKind.HOST, record.host_id)
        elif isinstance(record, TelemetryGroup):
            record.validate()
        elif isinstance(record, TelemetryProfile):
            record.validate_parameters()
            validate_resource_id(record.group_id, ResourceKind.TELEMETRY_GROUP)
            group = self.get_or_raise(ResourceKind.TELEMETRY_GROUP, record.group_id)
            record.validate_group(group)
            self._require_target(record.target)
        elif isinstance(record, (SingleSchedule, RepeatedSchedule)):
            record.validate()
            self._require_target(record.target)
        else:
            raise InvalidArgumentError(f"Unsupported record type: {type(record).__name__}")

    def _require_target(self, target: Target | None) -> None:
        if target is not None:
            self._require(target.kind.resource_kind, target.id)

