"""
Fleet Inventory - Hierarchy Inheritance and Maintenance Resolution

An inventory core for edge fleets providing:
- Region / OU / Site / Host / Instance hierarchies with single-parent links
- Inherited metadata resolved nearest-ancestor-first
- Telemetry profile inheritance bounded by a nesting limit
- Maintenance window evaluation for single and cron-style repeated schedules
"""

__version__ = "0.1.0"
