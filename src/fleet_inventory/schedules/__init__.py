"""
Maintenance Schedules

Single (one-off) and repeated (cron-style) maintenance windows bound to a
host, site or region, and the evaluator that decides whether a resource is
in maintenance at a given instant.
"""

from .types import ScheduleStatus, SingleSchedule, RepeatedSchedule, SCHEDULE_TARGET_KINDS
from .cron import CronExpression, CronSyntaxError, cron_matches, parse_field
from .evaluator import MaintenanceScheduleEvaluator, MaintenanceState, ScheduleSet

__all__ = [
    "ScheduleStatus",
    "SingleSchedule",
    "RepeatedSchedule",
    "SCHEDULE_TARGET_KINDS",
    "CronExpression",
    "CronSyntaxError",
    "cron_matches",
    "parse_field",
    "MaintenanceScheduleEvaluator",
    "MaintenanceState",
    "ScheduleSet",
]
