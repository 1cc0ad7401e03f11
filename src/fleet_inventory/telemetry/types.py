"""
Telemetry configuration data model.

A TelemetryGroup names a set of collectors (log sources or metric inputs).
A TelemetryProfile binds a group to an instance, site or region together
with the collection parameters for its kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from ..errors import ConflictError, InvalidArgumentError
from ..hierarchy.types import ResourceKind
from ..targets import Target, TargetKind

PROFILE_TARGET_KINDS = (TargetKind.INSTANCE, TargetKind.SITE, TargetKind.REGION)


class TelemetryKind(str, Enum):
    """Kind of telemetry collected."""
    LOGS = "logs"
    METRICS = "metrics"


class CollectorKind(str, Enum):
    """Where the collector runs."""
    HOST = "host"
    CLUSTER = "cluster"


class LogLevel(str, Enum):
    """Minimum severity shipped by a Logs profile."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True, slots=True)
class TelemetryGroup:
    """A named set of log sources or metric inputs."""
    KIND: ClassVar[ResourceKind] = ResourceKind.TELEMETRY_GROUP

    id: str
    name: str
    kind: TelemetryKind
    collector_kind: CollectorKind = CollectorKind.HOST
    groups: tuple[str, ...] = ()

    def validate(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Telemetry group name must be set")
        if not self.groups:
            raise InvalidArgumentError(f"Telemetry group {self.name} must list at least one member")


@dataclass(frozen=True, slots=True)
class TelemetryProfile:
    """Binding of a telemetry group to one instance, site or region."""
    KIND: ClassVar[ResourceKind] = ResourceKind.TELEMETRY_PROFILE

    id: str
    group_id: str
    kind: TelemetryKind
    target: Target | None = None
    log_level: LogLevel | None = None
    metrics_interval: int | None = None

    def validate_parameters(self) -> None:
        """Check the kind-specific payload."""
        if self.kind == TelemetryKind.METRICS:
            if not self.metrics_interval or self.metrics_interval <= 0:
                raise InvalidArgumentError("metrics_interval must be set for a metrics profile")
        elif self.kind == TelemetryKind.LOGS:
            if self.log_level is None:
                raise InvalidArgumentError("log_level must be set for a logs profile")

    def validate_group(self, group: TelemetryGroup) -> None:
        """A profile must bind a group of its own kind."""
        if group.kind != self.kind:
            raise ConflictError(
                f"Telemetry profile of kind {self.kind.value} cannot use "
                f"{group.kind.value} group {group.id}"
            )
