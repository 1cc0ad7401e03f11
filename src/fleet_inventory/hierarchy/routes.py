"""FastAPI routes for the location hierarchy (read side)."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import PaginationConfig
from ..metadata.resolver import SiteInheritedMetadata
from ..service import InventoryService, paginate
from .types import Host, Instance, MetadataItem, OrganizationalUnit, Region, ResourceKind, Site
from .models import (
    HostListResponse,
    HostModel,
    InstanceListResponse,
    InstanceModel,
    MetadataItemModel,
    OUListResponse,
    OUModel,
    RegionListResponse,
    RegionModel,
    SiteInheritedMetadataModel,
    SiteListResponse,
    SiteModel,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Locations"])

# Configuration - will be set during app startup
_service: InventoryService | None = None
_pagination: PaginationConfig = PaginationConfig()


def configure(service: InventoryService, pagination: Optional[PaginationConfig] = None) -> None:
    """Configure the location routes.

    Args:
        service: The inventory service to query
        pagination: Page size defaults and limits
    """
    global _service, _pagination
    _service = service
    _pagination = pagination or PaginationConfig()


def _get_service() -> InventoryService:
    """Get the inventory service, raising if not configured."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Inventory service not initialized")
    return _service


def _items_to_models(items: tuple[MetadataItem, ...]) -> list[MetadataItemModel]:
    return [MetadataItemModel(key=item.key, value=item.value) for item in items]


def _region_to_model(service: InventoryService, region: Region) -> RegionModel:
    return RegionModel(
        resource_id=region.id,
        name=region.name,
        parent_region_id=region.parent_region_id or None,
        metadata=_items_to_models(region.metadata),
        inherited_metadata=_items_to_models(service.metadata.inherited_metadata(region)),
    )


def _ou_to_model(service: InventoryService, ou: OrganizationalUnit) -> OUModel:
    return OUModel(
        resource_id=ou.id,
        name=ou.name,
        parent_ou_id=ou.parent_ou_id or None,
        metadata=_items_to_models(ou.metadata),
        inherited_metadata=_items_to_models(service.metadata.inherited_metadata(ou)),
    )


def _site_to_model(service: InventoryService, site: Site) -> SiteModel:
    inherited: SiteInheritedMetadata = service.metadata.inherited_metadata(site)
    return SiteModel(
        resource_id=site.id,
        name=site.name,
        region_id=site.region_id or None,
        ou_id=site.ou_id or None,
        metadata=_items_to_models(site.metadata),
        inherited_metadata=SiteInheritedMetadataModel(
            location=_items_to_models(inherited.location),
            ou=_items_to_models(inherited.ou),
        ),
    )


def _host_to_model(host: Host) -> HostModel:
    return HostModel(resource_id=host.id, name=host.name, site_id=host.site_id or None)


def _instance_to_model(instance: Instance) -> InstanceModel:
    return InstanceModel(resource_id=instance.id, name=instance.name, host_id=instance.host_id)


# =============================================================================
# Regions
# =============================================================================

@router.get("/regions", response_model=RegionListResponse)
async def list_regions(
    parent: Optional[str] = Query(None, description="Only regions directly under this region"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List regions with their resolved inherited metadata."""
    service = _get_service()
    if parent:
        regions = service.store.list_children(parent, ResourceKind.REGION)
    else:
        regions = service.store.all(ResourceKind.REGION)
    page = paginate(regions, offset, _pagination.clamp(page_size))
    return RegionListResponse(
        regions=[_region_to_model(service, r) for r in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/regions/{resource_id}", response_model=RegionModel)
async def get_region(resource_id: str):
    """Get a region with its own and inherited metadata."""
    service = _get_service()
    region = service.store.get_or_raise(ResourceKind.REGION, resource_id)
    return _region_to_model(service, region)


# =============================================================================
# Organizational units
# =============================================================================

@router.get("/ous", response_model=OUListResponse)
async def list_ous(
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List OUs with their resolved inherited metadata."""
    service = _get_service()
    page = paginate(service.store.all(ResourceKind.OU), offset, _pagination.clamp(page_size))
    return OUListResponse(
        ous=[_ou_to_model(service, ou) for ou in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/ous/{resource_id}", response_model=OUModel)
async def get_ou(resource_id: str):
    """Get an OU with its own and inherited metadata."""
    service = _get_service()
    ou = service.store.get_or_raise(ResourceKind.OU, resource_id)
    return _ou_to_model(service, ou)


# =============================================================================
# Sites, hosts, instances
# =============================================================================

@router.get("/sites", response_model=SiteListResponse)
async def list_sites(
    region_id: Optional[str] = Query(None, description="Only sites in this region"),
    ou_id: Optional[str] = Query(None, description="Only sites in this OU"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List sites; region and OU filters combine."""
    service = _get_service()
    sites = service.store.all(ResourceKind.SITE)
    if region_id:
        sites = [s for s in sites if s.region_id == region_id]
    if ou_id:
        sites = [s for s in sites if s.ou_id == ou_id]
    page = paginate(sites, offset, _pagination.clamp(page_size))
    return SiteListResponse(
        sites=[_site_to_model(service, s) for s in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/sites/{resource_id}", response_model=SiteModel)
async def get_site(resource_id: str):
    """
    Get a site.

    ``inherited_metadata`` is split into the location (region) chain and
    the OU chain; each is resolved independently.
    """
    service = _get_service()
    site = service.store.get_or_raise(ResourceKind.SITE, resource_id)
    return _site_to_model(service, site)


@router.get("/hosts", response_model=HostListResponse)
async def list_hosts(
    site_id: Optional[str] = Query(None, description="Only hosts at this site"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List hosts."""
    service = _get_service()
    if site_id:
        hosts = service.store.list_children(site_id, ResourceKind.HOST)
    else:
        hosts = service.store.all(ResourceKind.HOST)
    page = paginate(hosts, offset, _pagination.clamp(page_size))
    return HostListResponse(
        hosts=[_host_to_model(h) for h in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/hosts/{resource_id}", response_model=HostModel)
async def get_host(resource_id: str):
    service = _get_service()
    return _host_to_model(service.store.get_or_raise(ResourceKind.HOST, resource_id))


@router.get("/instances", response_model=InstanceListResponse)
async def list_instances(
    host_id: Optional[str] = Query(None, description="Only instances running on this host"),
    offset: int = Query(0, ge=0),
    page_size: Optional[int] = Query(None, ge=1),
):
    """List instances."""
    service = _get_service()
    if host_id:
        instances = service.store.list_children(host_id, ResourceKind.INSTANCE)
    else:
        instances = service.store.all(ResourceKind.INSTANCE)
    page = paginate(instances, offset, _pagination.clamp(page_size))
    return InstanceListResponse(
        instances=[_instance_to_model(i) for i in page.items],
        total_elements=page.total_elements,
        has_next=page.has_next,
    )


@router.get("/instances/{resource_id}", response_model=InstanceModel)
async def get_instance(resource_id: str):
    service = _get_service()
    return _instance_to_model(service.store.get_or_raise(ResourceKind.INSTANCE, resource_id))
