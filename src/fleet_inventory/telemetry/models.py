"""
Pydantic models for the telemetry API.

Profile targets travel as three optional fields (``instance_id``,
``site_id``, ``region_id``). On update an omitted field is left alone and
an empty string clears the relation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .types import CollectorKind, LogLevel, TelemetryKind


class TelemetryGroupModel(BaseModel):
    """Telemetry group representation for API responses."""

    resource_id: str = Field(..., description="Telemetry group id")
    name: str = Field(..., description="Group name")
    kind: TelemetryKind = Field(..., description="logs or metrics")
    collector_kind: CollectorKind = Field(CollectorKind.HOST, description="Where the collector runs")
    groups: List[str] = Field(default_factory=list, description="Member log sources or metric inputs")


class CreateTelemetryGroupRequest(BaseModel):
    """Request model for creating a telemetry group."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "kernel-logs",
                "kind": "logs",
                "collector_kind": "host",
                "groups": ["syslog", "kern"],
            }
        }
    )

    name: str = Field(..., description="Group name")
    kind: TelemetryKind = Field(..., description="logs or metrics")
    collector_kind: CollectorKind = Field(CollectorKind.HOST, description="Where the collector runs")
    groups: List[str] = Field(..., description="Member log sources or metric inputs")


class TelemetryProfileModel(BaseModel):
    """Telemetry profile representation for API responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "resource_id": "telemetryprofile-0000abcd",
                "group_id": "telemetrygroup-00001234",
                "kind": "metrics",
                "instance_id": None,
                "site_id": "site-0000000a",
                "region_id": None,
                "log_level": None,
                "metrics_interval": 30,
            }
        }
    )

    resource_id: str = Field(..., description="Telemetry profile id")
    group_id: str = Field(..., description="Telemetry group the profile configures")
    kind: TelemetryKind = Field(..., description="logs or metrics")
    instance_id: Optional[str] = Field(None, description="Target instance")
    site_id: Optional[str] = Field(None, description="Target site")
    region_id: Optional[str] = Field(None, description="Target region")
    log_level: Optional[LogLevel] = Field(None, description="Minimum severity (logs only)")
    metrics_interval: Optional[int] = Field(None, description="Collection interval in seconds (metrics only)")


class CreateTelemetryProfileRequest(BaseModel):
    """Request model for creating a telemetry profile. Exactly one target must be set."""

    group_id: str = Field(..., description="Telemetry group id")
    kind: TelemetryKind = Field(..., description="Must match the group's kind")
    instance_id: Optional[str] = Field(None, description="Target instance")
    site_id: Optional[str] = Field(None, description="Target site")
    region_id: Optional[str] = Field(None, description="Target region")
    log_level: Optional[LogLevel] = Field(None, description="Required for logs profiles")
    metrics_interval: Optional[int] = Field(None, description="Required for metrics profiles")


class UpdateTelemetryProfileRequest(BaseModel):
    """Partial update; omitted fields keep their value, "" clears a target."""

    instance_id: Optional[str] = Field(None, description="New target instance, or \"\" to clear")
    site_id: Optional[str] = Field(None, description="New target site, or \"\" to clear")
    region_id: Optional[str] = Field(None, description="New target region, or \"\" to clear")
    log_level: Optional[LogLevel] = None
    metrics_interval: Optional[int] = None


class TelemetryGroupListResponse(BaseModel):
    groups: List[TelemetryGroupModel]
    total_elements: int
    has_next: bool


class TelemetryProfileListResponse(BaseModel):
    """Resolved profiles plus paging metadata."""

    profiles: List[TelemetryProfileModel]
    total_elements: int = Field(..., description="Number of profiles across all pages")
    has_next: bool = Field(..., description="Whether another page follows")
