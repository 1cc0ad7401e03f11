"""
Pydantic models for the schedule API.

Schedule targets travel as ``host_id`` / ``site_id`` / ``region_id``. On
update an omitted field is left alone and an empty string clears it.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .types import MAX_DURATION_SECONDS, ScheduleStatus


class SingleScheduleModel(BaseModel):
    """Single schedule representation for API responses."""

    resource_id: str = Field(..., description="Single schedule id")
    name: str = Field("", description="Schedule name")
    status: ScheduleStatus = Field(ScheduleStatus.MAINTENANCE, description="maintenance or os_update")
    start_seconds: int = Field(..., description="Window start, unix epoch seconds")
    end_seconds: Optional[int] = Field(None, description="Window end (inclusive); absent means open-ended")
    host_id: Optional[str] = None
    site_id: Optional[str] = None
    region_id: Optional[str] = None


class RepeatedScheduleModel(BaseModel):
    """Repeated schedule representation for API responses."""

    resource_id: str = Field(..., description="Repeated schedule id")
    name: str = Field("", description="Schedule name")
    status: ScheduleStatus = Field(ScheduleStatus.MAINTENANCE, description="maintenance or os_update")
    duration_seconds: int = Field(..., description="Window length after each matching minute")
    cron_minutes: str
    cron_hours: str
    cron_day_month: str
    cron_month: str
    cron_day_week: str
    host_id: Optional[str] = None
    site_id: Optional[str] = None
    region_id: Optional[str] = None


class CreateSingleScheduleRequest(BaseModel):
    """Request model for creating a single schedule. Exactly one target must be set."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "firmware-rollout",
                "status": "maintenance",
                "start_seconds": 1767225600,
                "end_seconds": 1767229200,
                "site_id": "site-0000000a",
            }
        }
    )

    name: str = Field("", description="Schedule name")
    status: ScheduleStatus = Field(ScheduleStatus.MAINTENANCE)
    start_seconds: int = Field(..., ge=0, description="Window start, unix epoch seconds")
    end_seconds: Optional[int] = Field(None, description="Window end; omit for open-ended")
    host_id: Optional[str] = None
    site_id: Optional[str] = None
    region_id: Optional[str] = None


class UpdateSingleScheduleRequest(BaseModel):
    """Partial update of a single schedule."""

    name: Optional[str] = None
    status: Optional[ScheduleStatus] = None
    start_seconds: Optional[int] = Field(None, ge=0)
    end_seconds: Optional[int] = Field(None, description="0 makes the window open-ended")
    host_id: Optional[str] = Field(None, description="New target host, or \"\" to clear")
    site_id: Optional[str] = Field(None, description="New target site, or \"\" to clear")
    region_id: Optional[str] = Field(None, description="New target region, or \"\" to clear")


class CreateRepeatedScheduleRequest(BaseModel):
    """Request model for creating a repeated schedule. Exactly one target must be set."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "nightly-patching",
                "status": "os_update",
                "duration_seconds": 3600,
                "cron_minutes": "0",
                "cron_hours": "2",
                "cron_day_month": "*",
                "cron_month": "*",
                "cron_day_week": "1-5",
                "region_id": "region-0000000c",
            }
        }
    )

    name: str = Field("", description="Schedule name")
    status: ScheduleStatus = Field(ScheduleStatus.MAINTENANCE)
    duration_seconds: int = Field(..., gt=0, le=MAX_DURATION_SECONDS, description="Window length in seconds")
    cron_minutes: str = Field(..., description="Minute pattern (0-59)")
    cron_hours: str = Field(..., description="Hour pattern (0-23)")
    cron_day_month: str = Field(..., description="Day-of-month pattern (1-31)")
    cron_month: str = Field(..., description="Month pattern (1-12)")
    cron_day_week: str = Field(..., description="Day-of-week pattern (0-7, Sunday is 0 or 7)")
    host_id: Optional[str] = None
    site_id: Optional[str] = None
    region_id: Optional[str] = None


class UpdateRepeatedScheduleRequest(BaseModel):
    """Partial update of a repeated schedule."""

    name: Optional[str] = None
    status: Optional[ScheduleStatus] = None
    duration_seconds: Optional[int] = Field(None, gt=0, le=MAX_DURATION_SECONDS)
    cron_minutes: Optional[str] = None
    cron_hours: Optional[str] = None
    cron_day_month: Optional[str] = None
    cron_month: Optional[str] = None
    cron_day_week: Optional[str] = None
    host_id: Optional[str] = Field(None, description="New target host, or \"\" to clear")
    site_id: Optional[str] = Field(None, description="New target site, or \"\" to clear")
    region_id: Optional[str] = Field(None, description="New target region, or \"\" to clear")


class ScheduleListResponse(BaseModel):
    """Schedules covering the filter, single and repeated kept apart."""

    single_schedules: List[SingleScheduleModel]
    repeated_schedules: List[RepeatedScheduleModel]
    total_elements: int = Field(..., description="Number of schedules across all pages")
    has_next: bool = Field(..., description="Whether another page follows")


class MaintenanceResponse(BaseModel):
    """Maintenance state of a host, site or region at an instant."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "resource_id": "host-00000001",
                "unix_epoch": 1767225600,
                "active": True,
                "single_schedules": [],
                "repeated_schedules": [],
            }
        }
    )

    resource_id: str
    unix_epoch: int
    active: bool
    single_schedules: List[SingleScheduleModel]
    repeated_schedules: List[RepeatedScheduleModel]
