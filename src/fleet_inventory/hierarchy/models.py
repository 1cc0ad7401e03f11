"""
Pydantic models for the location API.

Every region, OU and site response carries its own ``metadata`` and the
resolved ``inherited_metadata``.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class MetadataItemModel(BaseModel):
    """A key/value metadata pair."""

    key: str = Field(..., description="Metadata key")
    value: str = Field(..., description="Metadata value")


class SiteInheritedMetadataModel(BaseModel):
    """Metadata a site inherits along its two independent chains."""

    location: List[MetadataItemModel] = Field(default_factory=list, description="Inherited through the region chain")
    ou: List[MetadataItemModel] = Field(default_factory=list, description="Inherited through the OU chain")


class RegionModel(BaseModel):
    """Region representation for API responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "resource_id": "region-0000000c",
                "name": "emea-north",
                "parent_region_id": "region-0000000b",
                "metadata": [{"key": "examplekey", "value": "r3"}],
                "inherited_metadata": [{"key": "examplekey2", "value": "r2"}],
            }
        }
    )

    resource_id: str = Field(..., description="Region id")
    name: str = Field("", description="Region name")
    parent_region_id: Optional[str] = Field(None, description="Parent region id")
    metadata: List[MetadataItemModel] = Field(default_factory=list, description="Own metadata")
    inherited_metadata: List[MetadataItemModel] = Field(default_factory=list, description="Metadata inherited from parent regions")


class OUModel(BaseModel):
    """Organizational unit representation for API responses."""

    resource_id: str = Field(..., description="OU id")
    name: str = Field("", description="OU name")
    parent_ou_id: Optional[str] = Field(None, description="Parent OU id")
    metadata: List[MetadataItemModel] = Field(default_factory=list, description="Own metadata")
    inherited_metadata: List[MetadataItemModel] = Field(default_factory=list, description="Metadata inherited from parent OUs")


class SiteModel(BaseModel):
    """Site representation for API responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "resource_id": "site-0000000a",
                "name": "dublin-1",
                "region_id": "region-0000000c",
                "ou_id": "ou-0000000c",
                "metadata": [],
                "inherited_metadata": {
                    "location": [
                        {"key": "examplekey", "value": "r3"},
                        {"key": "examplekey2", "value": "r2"},
                    ],
                    "ou": [{"key": "team", "value": "edge-ops"}],
                },
            }
        }
    )

    resource_id: str = Field(..., description="Site id")
    name: str = Field("", description="Site name")
    region_id: Optional[str] = Field(None, description="Region the site belongs to")
    ou_id: Optional[str] = Field(None, description="OU the site belongs to")
    metadata: List[MetadataItemModel] = Field(default_factory=list, description="Own metadata")
    inherited_metadata: SiteInheritedMetadataModel = Field(
        default_factory=SiteInheritedMetadataModel,
        description="Metadata inherited along the location and OU chains",
    )


class HostModel(BaseModel):
    """Host representation for API responses."""

    resource_id: str = Field(..., description="Host id")
    name: str = Field("", description="Host name")
    site_id: Optional[str] = Field(None, description="Site the host is placed at")


class InstanceModel(BaseModel):
    """Instance representation for API responses."""

    resource_id: str = Field(..., description="Instance id")
    name: str = Field("", description="Instance name")
    host_id: str = Field(..., description="Host the instance runs on")


class RegionListResponse(BaseModel):
    regions: List[RegionModel]
    total_elements: int
    has_next: bool


class OUListResponse(BaseModel):
    ous: List[OUModel]
    total_elements: int
    has_next: bool


class SiteListResponse(BaseModel):
    sites: List[SiteModel]
    total_elements: int
    has_next: bool


class HostListResponse(BaseModel):
    hosts: List[HostModel]
    total_elements: int
    has_next: bool


class InstanceListResponse(BaseModel):
    instances: List[InstanceModel]
    total_elements: int
    has_next: bool
