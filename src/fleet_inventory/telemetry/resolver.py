"""Telemetry profile inheritance.

Profiles are independent configuration units: unlike metadata, a nearer
profile never hides a farther one. Inheriting is a plain union over the
target and its ancestors, bounded by the walker's nesting limit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import InvalidArgumentError
from ..hierarchy.types import Instance, Region, ResourceKind, Site, kind_of
from ..hierarchy.walker import AncestorWalker
from ..targets import Target, TargetKind
from .types import PROFILE_TARGET_KINDS, TelemetryKind, TelemetryProfile

if TYPE_CHECKING:
    from ..store import HierarchyStore

logger = logging.getLogger(__name__)


class TelemetryProfileInheritanceResolver:
    """Lists the telemetry profiles that apply to an instance, site or region."""

    def __init__(self, store: HierarchyStore, walker: AncestorWalker):
        self._store = store
        self._walker = walker

    def binding_chain(self, target_id: str, show_inherited: bool = True) -> list[Target]:
        """
        Targets whose profiles apply to ``target_id``, nearest first.

        Instance -> Site -> Region -> parent regions. The instance's host
        never carries profiles and the structural hops up to the first
        region are free; only parent-region hops count against the nesting
        limit.

        Raises:
            InvalidArgumentError: If the id is not an instance, site or region
            NotFoundError: If the target does not exist
            DataIntegrityError: If the ancestor chain is broken
        """
        kind = kind_of(target_id)
        if kind not in {k.resource_kind for k in PROFILE_TARGET_KINDS}:
            raise InvalidArgumentError(
                f"Telemetry profiles bind to instances, sites or regions, not {kind.value}"
            )
        record = self._store.get_or_raise(kind, target_id)
        chain = [Target(TargetKind(kind.value), record.id)]
        if not show_inherited:
            return chain

        site = None
        if isinstance(record, Instance):
            host = self._walker.parent(record)
            site = self._walker.parent(host) if host is not None else None
            if site is not None:
                chain.append(Target(TargetKind.SITE, site.id))
        elif isinstance(record, Site):
            site = record

        region = self._walker.parent(site) if site is not None else None
        if isinstance(record, Region):
            region = record
        elif region is not None:
            chain.append(Target(TargetKind.REGION, region.id))

        if region is not None:
            chain.extend(Target(TargetKind.REGION, r.id) for r in self._walker.walk_up(region))
        return chain

    def list_applicable_profiles(
        self,
        target_id: str,
        kind: TelemetryKind | None = None,
        show_inherited: bool = False,
    ) -> list[TelemetryProfile]:
        """
        Resolve the profiles applying to a target.

        Args:
            target_id: Instance, site or region id
            kind: Only return profiles of this kind (both when None)
            show_inherited: Include profiles bound to ancestors

        Returns:
            Profiles deduplicated by id, the target's own first, then
            ancestors nearest first
        """
        profiles: dict[str, TelemetryProfile] = {}
        for target in self.binding_chain(target_id, show_inherited):
            bound = self._store.list_by_target_ref(target.kind, target.id, ResourceKind.TELEMETRY_PROFILE)
            for profile in bound:
                if kind is not None and profile.kind != kind:
                    continue
                profiles.setdefault(profile.id, profile)

        logger.debug(
            f"Resolved {len(profiles)} telemetry profiles for {target_id} "
            f"(kind={kind.value if kind else 'any'}, inherited={show_inherited})"
        )
        return list(profiles.values())
