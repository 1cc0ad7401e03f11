"""
Inventory loader.

Loads a YAML inventory definition into a HierarchyStore, registering
records in dependency order so every reference resolves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from .errors import InvalidArgumentError
from .hierarchy.types import (
    Host,
    Instance,
    OrganizationalUnit,
    Region,
    Site,
    metadata_from_raw,
)
from .schedules.types import (
    SCHEDULE_TARGET_KINDS,
    RepeatedSchedule,
    ScheduleStatus,
    SingleSchedule,
)
from .store import HierarchyStore, Record
from .targets import target_from_fields
from .telemetry.types import (
    PROFILE_TARGET_KINDS,
    CollectorKind,
    LogLevel,
    TelemetryGroup,
    TelemetryKind,
    TelemetryProfile,
)

logger = logging.getLogger(__name__)


def _parents_first(items: dict[str, dict], parent_key: str) -> list[tuple[str, dict]]:
    """Order nested records so each parent precedes its children."""
    pending = dict(items)
    ordered: list[tuple[str, dict]] = []
    placed: set[str] = set()
    while pending:
        ready = [
            rid for rid, data in pending.items()
            if not data.get(parent_key) or data[parent_key] in placed or data[parent_key] not in items
        ]
        if not ready:
            # Cycle: hand the rest over as-is and let the store reject it
            ordered.extend(pending.items())
            break
        for rid in ready:
            ordered.append((rid, pending.pop(rid)))
            placed.add(rid)
    return ordered


def region_from_dict(region_id: str, data: dict) -> Region:
    return Region(
        id=region_id,
        name=data.get("name", ""),
        parent_region_id=data.get("parent") or None,
        metadata=metadata_from_raw(data.get("metadata")),
    )


def ou_from_dict(ou_id: str, data: dict) -> OrganizationalUnit:
    return OrganizationalUnit(
        id=ou_id,
        name=data.get("name", ""),
        parent_ou_id=data.get("parent") or None,
        metadata=metadata_from_raw(data.get("metadata")),
    )


def site_from_dict(site_id: str, data: dict) -> Site:
    return Site(
        id=site_id,
        name=data.get("name", ""),
        region_id=data.get("region") or None,
        ou_id=data.get("ou") or None,
        metadata=metadata_from_raw(data.get("metadata")),
    )


def host_from_dict(host_id: str, data: dict) -> Host:
    return Host(id=host_id, name=data.get("name", ""), site_id=data.get("site") or None)


def instance_from_dict(instance_id: str, data: dict) -> Instance:
    return Instance(id=instance_id, host_id=data.get("host", ""), name=data.get("name", ""))


def telemetry_group_from_dict(group_id: str, data: dict) -> TelemetryGroup:
    return TelemetryGroup(
        id=group_id,
        name=data.get("name", ""),
        kind=TelemetryKind(data["kind"]),
        collector_kind=CollectorKind(data.get("collector_kind", CollectorKind.HOST.value)),
        groups=tuple(data.get("groups", [])),
    )


def telemetry_profile_from_dict(profile_id: str, data: dict) -> TelemetryProfile:
    log_level = data.get("log_level")
    return TelemetryProfile(
        id=profile_id,
        group_id=data["group"],
        kind=TelemetryKind(data["kind"]),
        target=target_from_fields(data, PROFILE_TARGET_KINDS),
        log_level=LogLevel(log_level) if log_level else None,
        metrics_interval=data.get("metrics_interval"),
    )


def single_schedule_from_dict(schedule_id: str, data: dict) -> SingleSchedule:
    return SingleSchedule(
        id=schedule_id,
        start_seconds=int(data["start_seconds"]),
        end_seconds=int(data["end_seconds"]) if data.get("end_seconds") else None,
        target=target_from_fields(data, SCHEDULE_TARGET_KINDS),
        status=ScheduleStatus(data.get("status", ScheduleStatus.MAINTENANCE.value)),
        name=data.get("name", ""),
    )


def repeated_schedule_from_dict(schedule_id: str, data: dict) -> RepeatedSchedule:
    return RepeatedSchedule(
        id=schedule_id,
        duration_seconds=int(data["duration_seconds"]),
        cron_minutes=str(data.get("cron_minutes", "")),
        cron_hours=str(data.get("cron_hours", "")),
        cron_day_month=str(data.get("cron_day_month", "")),
        cron_month=str(data.get("cron_month", "")),
        cron_day_week=str(data.get("cron_day_week", "")),
        target=target_from_fields(data, SCHEDULE_TARGET_KINDS),
        status=ScheduleStatus(data.get("status", ScheduleStatus.MAINTENANCE.value)),
        name=data.get("name", ""),
    )


# Section name, record builder, parent key for sections that nest
_SECTIONS: list[tuple[str, Callable[[str, dict], Record], Optional[str]]] = [
    ("regions", region_from_dict, "parent"),
    ("ous", ou_from_dict, "parent"),
    ("sites", site_from_dict, None),
    ("hosts", host_from_dict, None),
    ("instances", instance_from_dict, None),
    ("telemetry_groups", telemetry_group_from_dict, None),
    ("telemetry_profiles", telemetry_profile_from_dict, None),
    ("single_schedules", single_schedule_from_dict, None),
    ("repeated_schedules", repeated_schedule_from_dict, None),
]


def load_inventory(data: dict[str, Any], store: Optional[HierarchyStore] = None) -> HierarchyStore:
    """
    Load an inventory definition from a parsed dictionary.

    Expected format:
        regions:
          region-00000001:
            name: europe
            metadata: {tier: gold}
          region-00000002:
            name: emea-north
            parent: region-00000001
        sites:
          site-00000001:
            name: dublin
            region: region-00000002
            ou: ou-00000001
        single_schedules:
          singlesche-00000001:
            site_id: site-00000001
            start_seconds: 1700000000
        ...

    Args:
        data: Parsed YAML/JSON document
        store: Optional store to populate; a new one is created otherwise

    Returns:
        The populated store

    Raises:
        InvalidArgumentError: If a section or record is malformed
    """
    store = store if store is not None else HierarchyStore()

    for section, build, parent_key in _SECTIONS:
        items = data.get(section) or {}
        if not isinstance(items, dict):
            raise InvalidArgumentError(f"Inventory section '{section}' must be a mapping of id to record")
        entries = _parents_first(items, parent_key) if parent_key else list(items.items())
        for resource_id, record_data in entries:
            try:
                record = build(resource_id, record_data or {})
            except (KeyError, ValueError, TypeError) as e:
                raise InvalidArgumentError(f"Invalid {section} entry {resource_id}: {e}") from e
            store.register(record)
        if items:
            logger.info(f"Loaded {len(items)} {section}")

    return store


def load_inventory_from_yaml(
    file_path: str | Path,
    store: Optional[HierarchyStore] = None,
) -> HierarchyStore:
    """
    Load an inventory definition from a YAML file.

    Args:
        file_path: Path to the YAML file
        store: Optional store to populate

    Returns:
        The populated store (empty if the file does not exist)
    """
    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Inventory file not found: {path}")
        return store if store is not None else HierarchyStore()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return load_inventory(data, store)
