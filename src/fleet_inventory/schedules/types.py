"""Maintenance schedule types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Union

from ..errors import InvalidArgumentError
from ..hierarchy.types import ResourceKind
from ..targets import Target, TargetKind
from .cron import CronExpression

SCHEDULE_TARGET_KINDS = (TargetKind.HOST, TargetKind.SITE, TargetKind.REGION)

# Durations are stored as unsigned 32-bit seconds
MAX_DURATION_SECONDS = 2**32 - 1

# 9999-12-31T23:59:59Z, the last instant a UTC datetime can hold
MAX_EPOCH_SECONDS = 253402300799


def check_epoch(at: int) -> None:
    """Raise InvalidArgumentError unless ``at`` falls between 1970 and the end of year 9999."""
    if not 0 <= at <= MAX_EPOCH_SECONDS:
        raise InvalidArgumentError(f"unix epoch {at} is outside 0..{MAX_EPOCH_SECONDS}")


class ScheduleStatus(str, Enum):
    """What the resource is unavailable for while a schedule is active."""
    MAINTENANCE = "maintenance"
    OS_UPDATE = "os_update"


@dataclass(frozen=True, slots=True)
class SingleSchedule:
    """
    A one-off maintenance window.

    Active from ``start_seconds`` through ``end_seconds`` inclusive. Without
    an end the window never closes.
    """
    KIND: ClassVar[ResourceKind] = ResourceKind.SINGLE_SCHEDULE

    id: str
    start_seconds: int
    end_seconds: int | None = None
    target: Target | None = None
    status: ScheduleStatus = ScheduleStatus.MAINTENANCE
    name: str = ""

    def validate(self) -> None:
        """Raise InvalidArgumentError unless the window is well formed."""
        if self.start_seconds < 0:
            raise InvalidArgumentError("start_seconds cannot be negative")
        if self.end_seconds and self.end_seconds <= self.start_seconds:
            raise InvalidArgumentError("end_seconds must be greater than start_seconds")

    def is_active(self, at: int) -> bool:
        if at < self.start_seconds:
            return False
        return not self.end_seconds or at <= self.end_seconds


@dataclass(frozen=True, slots=True)
class RepeatedSchedule:
    """
    A recurring maintenance window.

    Each minute matching the five cron fields (UTC) opens a window lasting
    ``duration_seconds``.
    """
    KIND: ClassVar[ResourceKind] = ResourceKind.REPEATED_SCHEDULE

    id: str
    duration_seconds: int
    cron_minutes: str
    cron_hours: str
    cron_day_month: str
    cron_month: str
    cron_day_week: str
    target: Target | None = None
    status: ScheduleStatus = ScheduleStatus.MAINTENANCE
    name: str = ""

    def expression(self) -> CronExpression:
        """Parse the cron fields; raises CronSyntaxError when malformed."""
        return CronExpression(
            minute=self.cron_minutes,
            hour=self.cron_hours,
            day_of_month=self.cron_day_month,
            month=self.cron_month,
            day_of_week=self.cron_day_week,
        )

    def validate(self) -> None:
        """Reject malformed cron fields and non-positive durations up front."""
        if self.duration_seconds <= 0:
            raise InvalidArgumentError("duration_seconds must be positive")
        if self.duration_seconds > MAX_DURATION_SECONDS:
            raise InvalidArgumentError(f"duration_seconds cannot exceed {MAX_DURATION_SECONDS}")
        self.expression()

    def latest_start(self, at: int) -> int | None:
        """Start of the window covering ``at``, or None if ``at`` is outside every window."""
        check_epoch(at)
        moment = datetime.fromtimestamp(at, tz=timezone.utc)
        earliest = datetime.fromtimestamp(max(0, at - self.duration_seconds + 1), tz=timezone.utc)
        start = self.expression().latest_match(moment, earliest)
        return int(start.timestamp()) if start is not None else None

    def is_active(self, at: int) -> bool:
        return self.latest_start(at) is not None


Schedule = Union[SingleSchedule, RepeatedSchedule]
