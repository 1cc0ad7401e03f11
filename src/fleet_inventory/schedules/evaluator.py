"""Maintenance state evaluation.

A host is covered by schedules on itself, its site and that site's region.
A site is covered by its own and its region's schedules, a region only by
its own. Coverage stops at the first region: parent regions do not put
their descendants' hosts into maintenance.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from ..errors import InvalidArgumentError
from ..hierarchy.types import ResourceKind, kind_of
from ..hierarchy.walker import AncestorWalker
from ..targets import Target, TargetKind, target_from_fields
from .types import SCHEDULE_TARGET_KINDS, RepeatedSchedule, SingleSchedule, check_epoch

if TYPE_CHECKING:
    from ..store import HierarchyStore

logger = logging.getLogger(__name__)

# Host -> Site -> Region
MAX_COVERAGE_HOPS = 2


@dataclass(frozen=True, slots=True)
class ScheduleSet:
    """Single and repeated schedules, kept apart as the API returns them."""
    single_schedules: tuple[SingleSchedule, ...] = ()
    repeated_schedules: tuple[RepeatedSchedule, ...] = ()

    def __len__(self) -> int:
        return len(self.single_schedules) + len(self.repeated_schedules)

    @property
    def schedules(self) -> list[SingleSchedule | RepeatedSchedule]:
        return [*self.single_schedules, *self.repeated_schedules]


@dataclass(frozen=True, slots=True)
class MaintenanceState:
    """Whether a resource is in maintenance at an instant, and why."""
    resource_id: str
    at: int
    active: bool
    matching: ScheduleSet

    @property
    def matching_schedules(self) -> list[SingleSchedule | RepeatedSchedule]:
        return self.matching.schedules


class MaintenanceScheduleEvaluator:
    """Finds the schedules covering a resource and checks which are active."""

    def __init__(self, store: HierarchyStore, walker: AncestorWalker):
        self._store = store
        self._walker = walker

    def coverage(self, resource_id: str) -> list[Target]:
        """
        Targets whose schedules apply to ``resource_id``, nearest first.

        Raises:
            InvalidArgumentError: If the id is not a host, site or region
            NotFoundError: If the resource does not exist
            DataIntegrityError: If a parent link is dangling
        """
        kind = kind_of(resource_id)
        if kind not in {k.resource_kind for k in SCHEDULE_TARGET_KINDS}:
            raise InvalidArgumentError(
                f"Schedules apply to hosts, sites or regions, not {kind.value}"
            )
        record = self._store.get_or_raise(kind, resource_id)
        hops = {ResourceKind.HOST: MAX_COVERAGE_HOPS, ResourceKind.SITE: 1}.get(kind, 0)

        targets = [Target(TargetKind(kind.value), record.id)]
        for ancestor in self._walker.walk_up(record, max_hops=hops):
            targets.append(Target(TargetKind(ancestor.KIND.value), ancestor.id))
        return targets

    def _bound(self, targets: Sequence[Target], at: int | None) -> ScheduleSet:
        single: dict[str, SingleSchedule] = {}
        repeated: dict[str, RepeatedSchedule] = {}
        for target in targets:
            for schedule in self._store.list_by_target_ref(target.kind, target.id, ResourceKind.SINGLE_SCHEDULE):
                if at is None or schedule.is_active(at):
                    single.setdefault(schedule.id, schedule)
            for schedule in self._store.list_by_target_ref(target.kind, target.id, ResourceKind.REPEATED_SCHEDULE):
                if at is None or schedule.is_active(at):
                    repeated.setdefault(schedule.id, schedule)
        return ScheduleSet(tuple(single.values()), tuple(repeated.values()))

    def is_in_maintenance(self, resource_id: str, at: int | None = None) -> MaintenanceState:
        """
        Check whether a host, site or region is in a maintenance window.

        Args:
            resource_id: Host, site or region id
            at: Unix epoch seconds, defaults to now

        Returns:
            The state, with every active schedule covering the resource
        """
        if at is None:
            at = int(time.time())
        check_epoch(at)
        matching = self._bound(self.coverage(resource_id), at)
        state = MaintenanceState(resource_id=resource_id, at=at, active=len(matching) > 0, matching=matching)
        logger.debug(f"{resource_id} at {at}: active={state.active} ({len(matching)} schedules)")
        return state

    def find_schedules(
        self,
        host_id: str | None = None,
        site_id: str | None = None,
        region_id: str | None = None,
        at: int | None = None,
    ) -> ScheduleSet:
        """
        List schedules covering a resource, optionally only those active at ``at``.

        With no filter every schedule in the store is considered.

        Raises:
            ConflictError: If more than one filter is given
            InvalidArgumentError: If ``at`` is not a representable instant
        """
        if at is not None:
            check_epoch(at)
        target = target_from_fields(
            {"host_id": host_id, "site_id": site_id, "region_id": region_id},
            SCHEDULE_TARGET_KINDS,
            required=False,
        )
        if target is not None:
            return self._bound(self.coverage(target.id), at)

        single = self._store.all(ResourceKind.SINGLE_SCHEDULE)
        repeated = self._store.all(ResourceKind.REPEATED_SCHEDULE)
        if at is not None:
            single = [s for s in single if s.is_active(at)]
            repeated = [s for s in repeated if s.is_active(at)]
        return ScheduleSet(tuple(single), tuple(repeated))
