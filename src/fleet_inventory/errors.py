"""Inventory error taxonomy.

Every resolver and store operation raises one of these. The HTTP layer maps
them to status codes in ``main.py``; nothing here is retried internally.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for inventory failures."""
    pass


class NotFoundError(InventoryError):
    """Raised when a requested record does not exist."""

    def __init__(self, kind: str, resource_id: str):
        super().__init__(f"{kind} not found: {resource_id}")
        self.kind = kind
        self.resource_id = resource_id


class InvalidArgumentError(InventoryError):
    """Raised for malformed input: ids, cron fields, sentinels, missing fields."""
    pass


class ConflictError(InvalidArgumentError):
    """Raised for well-formed but contradictory input.

    Examples: two targets supplied for one schedule, a Logs profile bound to
    a Metrics group, deleting a record other records still point at.
    """
    pass


class DataIntegrityError(InventoryError):
    """Raised when an ancestor walk meets a cycle or a dangling parent link."""

    def __init__(self, message: str, chain: list[str] | None = None):
        super().__init__(message)
        self.chain = list(chain or [])
