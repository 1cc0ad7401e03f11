"""
Telemetry Profiles

Telemetry groups name log sources or metric inputs; profiles bind a group to
an instance, site or region. Profiles bound higher up the hierarchy apply to
everything below them, up to the nesting limit.
"""

from .types import (
    TelemetryKind,
    CollectorKind,
    LogLevel,
    TelemetryGroup,
    TelemetryProfile,
    PROFILE_TARGET_KINDS,
)
from .resolver import TelemetryProfileInheritanceResolver

__all__ = [
    "TelemetryKind",
    "CollectorKind",
    "LogLevel",
    "TelemetryGroup",
    "TelemetryProfile",
    "PROFILE_TARGET_KINDS",
    "TelemetryProfileInheritanceResolver",
]
