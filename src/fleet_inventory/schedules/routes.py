"""FastAPI routes for maintenance schedules."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import PaginationConfig
from ..hierarchy.types import ResourceKind
from ..service import InventoryService, paginate
from ..targets import apply_target_update, target_from_fields, target_to_fields
from .types import MAX_EPOCH_SECONDS, SCHEDULE_TARGET_KINDS, RepeatedSchedule, SingleSchedule
from .models import (
    CreateRepeatedScheduleRequest,
    CreateSingleScheduleRequest,
    MaintenanceResponse,
    RepeatedScheduleModel,
    ScheduleListResponse,
    SingleScheduleModel,
    UpdateRepeatedScheduleRequest,
    UpdateSingleScheduleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["Schedules"])

# Configuration - will be set during app startup
_service: InventoryService | None = None
_pagination: PaginationConfig = PaginationConfig()

_REPEATED_FIELDS = (
    "name", "status", "duration_seconds",
    "cron_minutes", "cron_hours", "cron_day_month", "cron_month", "cron_day_week",
)


def configure(service: InventoryService, pagination: Optional[PaginationConfig] = None) -> None:
    """Configure the schedule routes."""
    global _service, _pagination
    _service = service
    _pagination = pagination or PaginationConfig()


def _get_service() -> InventoryService:
    """Get the inventory service, raising if not configured."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Inventory service not initialized")
    return _service


def _single_to_model(schedule: SingleSchedule) -> SingleScheduleModel:
    return SingleScheduleModel(
        resource_id=schedule.id,
        name=schedule.name,
        status=schedule.status,
        start_seconds=schedule.start_seconds,
        end_seconds=schedule.end_seconds,
        **target_to_fields(schedule.target, SCHEDULE_TARGET_KINDS),
    )


def _repeated_to_model(schedule: RepeatedSchedule) -> RepeatedScheduleModel:
    return RepeatedScheduleModel(
        resource_id=schedule.id,
        name=schedule.name,
        status=schedule.status,
        duration_seconds=schedule.duration_seconds,
        cron_minutes=schedule.cron_minutes,
        cron_hours=schedule.cron_hours,
        cron_day_month=schedule.cron_day_month,
        cron_month=schedule.cron_month,
        cron_day_week=schedule.cron_day_week,
        **target_to_fields(schedule.target, SCHEDULE_TARGET_KINDS),
    )


# =============================================================================
# Listing and maintenance state
# =============================================================================

@router.get("", response_model=ScheduleListResponse)
async def list_schedules(
    host_id: Optional[str] = Query(None),
    site_id: Optional[str] = Query(None),
    region_id: Optional[str] = Query(None),
    unix_epoch: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_SECONDS, description="Only schedules active at this instant"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """
    List schedules covering a host, site or region.

    A host is covered by its own, its site's and its site's region's
    schedules. The resource is in maintenance at ``unix_epoch`` when the
    filtered result is non-empty.
    """
    service = _get_service()
    found = service.schedules.find_schedules(
        host_id=host_id, site_id=site_id, region_id=region_id, at=unix_epoch,
    )
    page = paginate(found.schedules, offset, _pagination.clamp(page_size))
    return ScheduleListResponse(
        single_schedules=[_single_to_model(s) for s in page.items if isinstance(s, SingleSchedule)],
        repeated_schedules=[_repeated_to_model(s) for s in page.items if isinstance(s, RepeatedSchedule)],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/maintenance/{resource_id}", response_model=MaintenanceResponse)
async def get_maintenance_state(
    resource_id: str,
    unix_epoch: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_SECONDS, description="Instant to evaluate, defaults to now"),
):
    """Report whether a host, site or region is in a maintenance window."""
    service = _get_service()
    at = unix_epoch if unix_epoch is not None else int(time.time())
    state = service.schedules.is_in_maintenance(resource_id, at)
    return MaintenanceResponse(
        resource_id=resource_id,
        unix_epoch=state.at,
        active=state.active,
        single_schedules=[_single_to_model(s) for s in state.matching.single_schedules],
        repeated_schedules=[_repeated_to_model(s) for s in state.matching.repeated_schedules],
    )


# =============================================================================
# Single schedules
# =============================================================================

@router.post("/single", response_model=SingleScheduleModel, status_code=201)
async def create_single_schedule(request: CreateSingleScheduleRequest):
    """Create a single schedule bound to exactly one host, site or region."""
    service = _get_service()
    schedule = SingleSchedule(
        id=service.store.new_id(ResourceKind.SINGLE_SCHEDULE),
        start_seconds=request.start_seconds,
        end_seconds=request.end_seconds or None,
        target=target_from_fields(request.model_dump(), SCHEDULE_TARGET_KINDS),
        status=request.status,
        name=request.name,
    )
    service.store.register(schedule)
    logger.info(f"Created single schedule: {schedule.id} -> {schedule.target}")
    return _single_to_model(schedule)


@router.get("/single/{resource_id}", response_model=SingleScheduleModel)
async def get_single_schedule(resource_id: str):
    service = _get_service()
    return _single_to_model(service.store.get_or_raise(ResourceKind.SINGLE_SCHEDULE, resource_id))


@router.patch("/single/{resource_id}", response_model=SingleScheduleModel)
async def update_single_schedule(resource_id: str, request: UpdateSingleScheduleRequest):
    """Update a single schedule; "" in a target field clears that relation."""
    service = _get_service()
    existing = service.store.get_or_raise(ResourceKind.SINGLE_SCHEDULE, resource_id)
    updates = request.model_dump(exclude_unset=True)

    changes = {k: updates[k] for k in ("name", "status", "start_seconds") if updates.get(k) is not None}
    if "end_seconds" in updates:
        changes["end_seconds"] = updates["end_seconds"] or None
    updated = replace(
        existing,
        target=apply_target_update(existing.target, updates, SCHEDULE_TARGET_KINDS),
        **changes,
    )
    service.store.update(updated)
    return _single_to_model(updated)


@router.delete("/single/{resource_id}", status_code=204)
async def delete_single_schedule(resource_id: str):
    service = _get_service()
    service.store.delete(ResourceKind.SINGLE_SCHEDULE, resource_id)


# =============================================================================
# Repeated schedules
# =============================================================================

@router.post("/repeated", response_model=RepeatedScheduleModel, status_code=201)
async def create_repeated_schedule(request: CreateRepeatedScheduleRequest):
    """
    Create a repeated schedule.

    All five cron fields are parsed here; a malformed field is rejected
    with 400 rather than failing later at evaluation time.
    """
    service = _get_service()
    schedule = RepeatedSchedule(
        id=service.store.new_id(ResourceKind.REPEATED_SCHEDULE),
        duration_seconds=request.duration_seconds,
        cron_minutes=request.cron_minutes,
        cron_hours=request.cron_hours,
        cron_day_month=request.cron_day_month,
        cron_month=request.cron_month,
        cron_day_week=request.cron_day_week,
        target=target_from_fields(request.model_dump(), SCHEDULE_TARGET_KINDS),
        status=request.status,
        name=request.name,
    )
    service.store.register(schedule)
    logger.info(f"Created repeated schedule: {schedule.id} -> {schedule.target}")
    return _repeated_to_model(schedule)


@router.get("/repeated/{resource_id}", response_model=RepeatedScheduleModel)
async def get_repeated_schedule(resource_id: str):
    service = _get_service()
    return _repeated_to_model(service.store.get_or_raise(ResourceKind.REPEATED_SCHEDULE, resource_id))


@router.patch("/repeated/{resource_id}", response_model=RepeatedScheduleModel)
async def update_repeated_schedule(resource_id: str, request: UpdateRepeatedScheduleRequest):
    """Update a repeated schedule; "" in a target field clears that relation."""
    service = _get_service()
    existing = service.store.get_or_raise(ResourceKind.REPEATED_SCHEDULE, resource_id)
    updates = request.model_dump(exclude_unset=True)

    changes = {k: updates[k] for k in _REPEATED_FIELDS if updates.get(k) is not None}
    updated = replace(
        existing,
        target=apply_target_update(existing.target, updates, SCHEDULE_TARGET_KINDS),
        **changes,
    )
    service.store.update(updated)
    return _repeated_to_model(updated)


@router.delete("/repeated/{resource_id}", status_code=204)
async def delete_repeated_schedule(resource_id: str):
    service = _get_service()
    service.store.delete(ResourceKind.REPEATED_SCHEDULE, resource_id)
