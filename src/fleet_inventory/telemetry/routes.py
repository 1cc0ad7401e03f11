"""FastAPI routes for telemetry groups and profiles."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import PaginationConfig
from ..hierarchy.types import ResourceKind
from ..service import InventoryService, paginate
from ..targets import apply_target_update, target_from_fields, target_to_fields
from .types import PROFILE_TARGET_KINDS, TelemetryGroup, TelemetryKind, TelemetryProfile
from .models import (
    CreateTelemetryGroupRequest,
    CreateTelemetryProfileRequest,
    TelemetryGroupListResponse,
    TelemetryGroupModel,
    TelemetryProfileListResponse,
    TelemetryProfileModel,
    UpdateTelemetryProfileRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telemetry", tags=["Telemetry"])

# Configuration - will be set during app startup
_service: InventoryService | None = None
_pagination: PaginationConfig = PaginationConfig()


def configure(service: InventoryService, pagination: Optional[PaginationConfig] = None) -> None:
    """Configure the telemetry routes."""
    global _service, _pagination
    _service = service
    _pagination = pagination or PaginationConfig()


def _get_service() -> InventoryService:
    """Get the inventory service, raising if not configured."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Inventory service not initialized")
    return _service


def _group_to_model(group: TelemetryGroup) -> TelemetryGroupModel:
    return TelemetryGroupModel(
        resource_id=group.id,
        name=group.name,
        kind=group.kind,
        collector_kind=group.collector_kind,
        groups=list(group.groups),
    )


def _profile_to_model(profile: TelemetryProfile) -> TelemetryProfileModel:
    return TelemetryProfileModel(
        resource_id=profile.id,
        group_id=profile.group_id,
        kind=profile.kind,
        log_level=profile.log_level,
        metrics_interval=profile.metrics_interval,
        **target_to_fields(profile.target, PROFILE_TARGET_KINDS),
    )


# =============================================================================
# Telemetry groups
# =============================================================================

@router.get("/groups", response_model=TelemetryGroupListResponse)
async def list_groups(
    kind: Optional[TelemetryKind] = Query(None),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List telemetry groups."""
    service = _get_service()
    groups = service.store.all(ResourceKind.TELEMETRY_GROUP)
    if kind is not None:
        groups = [g for g in groups if g.kind == kind]
    page = paginate(groups, offset, _pagination.clamp(page_size))
    return TelemetryGroupListResponse(
        groups=[_group_to_model(g) for g in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.post("/groups", response_model=TelemetryGroupModel, status_code=201)
async def create_group(request: CreateTelemetryGroupRequest):
    """Create a telemetry group."""
    service = _get_service()
    group = TelemetryGroup(
        id=service.store.new_id(ResourceKind.TELEMETRY_GROUP),
        name=request.name,
        kind=request.kind,
        collector_kind=request.collector_kind,
        groups=tuple(request.groups),
    )
    service.store.register(group)
    logger.info(f"Created telemetry group: {group.id} ({group.name})")
    return _group_to_model(group)


@router.get("/groups/{resource_id}", response_model=TelemetryGroupModel)
async def get_group(resource_id: str):
    service = _get_service()
    return _group_to_model(service.store.get_or_raise(ResourceKind.TELEMETRY_GROUP, resource_id))


@router.delete("/groups/{resource_id}", status_code=204)
async def delete_group(resource_id: str):
    """Delete a telemetry group no profile uses any more."""
    service = _get_service()
    service.store.delete(ResourceKind.TELEMETRY_GROUP, resource_id)


# =============================================================================
# Telemetry profiles
# =============================================================================

@router.get("/profiles", response_model=TelemetryProfileListResponse)
async def list_profiles(
    instance_id: Optional[str] = Query(None),
    site_id: Optional[str] = Query(None),
    region_id: Optional[str] = Query(None),
    kind: Optional[TelemetryKind] = Query(None, description="Only profiles of this kind"),
    show_inherited: bool = Query(False, description="Include profiles bound to ancestors"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """
    List telemetry profiles.

    With a target, returns the profiles bound to it and, when
    ``show_inherited`` is set, those bound to its site and region chain.
    Without a target, returns every profile.
    """
    service = _get_service()
    target = target_from_fields(
        {"instance_id": instance_id, "site_id": site_id, "region_id": region_id},
        PROFILE_TARGET_KINDS,
        required=False,
    )
    if target is not None:
        profiles = service.telemetry.list_applicable_profiles(target.id, kind, show_inherited)
    else:
        profiles = service.store.all(ResourceKind.TELEMETRY_PROFILE)
        if kind is not None:
            profiles = [p for p in profiles if p.kind == kind]

    page = paginate(profiles, offset, _pagination.clamp(page_size))
    return TelemetryProfileListResponse(
        profiles=[_profile_to_model(p) for p in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.post("/profiles", response_model=TelemetryProfileModel, status_code=201)
async def create_profile(request: CreateTelemetryProfileRequest):
    """Create a telemetry profile bound to exactly one instance, site or region."""
    service = _get_service()
    profile = TelemetryProfile(
        id=service.store.new_id(ResourceKind.TELEMETRY_PROFILE),
        group_id=request.group_id,
        kind=request.kind,
        target=target_from_fields(request.model_dump(), PROFILE_TARGET_KINDS),
        log_level=request.log_level,
        metrics_interval=request.metrics_interval,
    )
    service.store.register(profile)
    logger.info(f"Created telemetry profile: {profile.id} -> {profile.target}")
    return _profile_to_model(profile)


@router.get("/profiles/{resource_id}", response_model=TelemetryProfileModel)
async def get_profile(resource_id: str):
    service = _get_service()
    return _profile_to_model(service.store.get_or_raise(ResourceKind.TELEMETRY_PROFILE, resource_id))


@router.patch("/profiles/{resource_id}", response_model=TelemetryProfileModel)
async def update_profile(resource_id: str, request: UpdateTelemetryProfileRequest):
    """
    Update a telemetry profile.

    Target fields follow the clear-sentinel rule: omitted keeps, "" clears,
    an id sets. At most one target may remain set.
    """
    service = _get_service()
    existing = service.store.get_or_raise(ResourceKind.TELEMETRY_PROFILE, resource_id)
    updates = request.model_dump(exclude_unset=True)

    updated = replace(
        existing,
        target=apply_target_update(existing.target, updates, PROFILE_TARGET_KINDS),
        log_level=updates.get("log_level", existing.log_level),
        metrics_interval=updates.get("metrics_interval", existing.metrics_interval),
    )
    service.store.update(updated)
    logger.info(f"Updated telemetry profile: {resource_id}")
    return _profile_to_model(updated)


@router.delete("/profiles/{resource_id}", status_code=204)
async def delete_profile(resource_id: str):
    service = _get_service()
    service.store.delete(ResourceKind.TELEMETRY_PROFILE, resource_id)
    logger.info(f"Deleted telemetry profile: {resource_id}")
