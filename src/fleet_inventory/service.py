"""Inventory service layer.

Wires the store to the ancestor walker and the three resolvers so the HTTP
routes and tests share a single entry point:

1. Records live in a HierarchyStore
2. AncestorWalker walks parent links with the configured nesting limit
3. Metadata, telemetry and schedule resolvers fold ancestor facts per their rules
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from .config import Config
from .errors import InvalidArgumentError
from .hierarchy.walker import AncestorWalker
from .loader import load_inventory_from_yaml
from .metadata.resolver import MetadataInheritanceResolver
from .schedules.evaluator import MaintenanceScheduleEvaluator
from .store import HierarchyStore
from .telemetry.resolver import TelemetryProfileInheritanceResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a resolved listing."""
    items: list[T]
    total_elements: int
    has_next: bool


def paginate(items: Sequence[T], offset: int, page_size: int) -> Page[T]:
    """
    Slice a fully resolved listing.

    Raises:
        InvalidArgumentError: On a negative offset or a non-positive page size
    """
    if offset < 0:
        raise InvalidArgumentError("offset cannot be negative")
    if page_size <= 0:
        raise InvalidArgumentError("page_size must be positive")
    page = list(items[offset:offset + page_size])
    return Page(items=page, total_elements=len(items), has_next=offset + page_size < len(items))


class InventoryService:
    """Resolution entry point over one store."""

    def __init__(self, store: HierarchyStore, config: Config | None = None):
        self.config = config or Config()
        self.store = store
        self.walker = AncestorWalker(store, max_nesting=self.config.hierarchy.max_nesting)
        self.metadata = MetadataInheritanceResolver(store, self.walker)
        self.telemetry = TelemetryProfileInheritanceResolver(store, self.walker)
        self.schedules = MaintenanceScheduleEvaluator(store, self.walker)

    @classmethod
    def from_config(cls, config: Config) -> InventoryService:
        """Build a service, preloading the configured inventory file if any."""
        store = HierarchyStore(max_nesting=config.hierarchy.max_nesting)
        if config.hierarchy.definition_file:
            load_inventory_from_yaml(config.hierarchy.definition_file, store)
            logger.info(
                f"Loaded inventory from {config.hierarchy.definition_file}: {store.count()} records"
            )
        return cls(store, config)
