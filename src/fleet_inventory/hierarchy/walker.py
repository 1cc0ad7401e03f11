"""Bounded upward traversal over the hierarchy store.

All three resolvers share this walk. Chain discovery is sequential because
each hop depends on the previous record's parent reference.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import DataIntegrityError
from .types import Chain, LocationRecord, default_chain, parent_link

if TYPE_CHECKING:
    from ..store import HierarchyStore

logger = logging.getLogger(__name__)

# Maximum number of parent hops followed by any walk
MAX_NESTING = 5


class AncestorWalker:
    """
    Walks ancestor chains nearest-first.

    The walk stops at the first record without a parent or after
    ``max_hops`` hops, whichever comes first. Stopping at the hop limit is
    expected; a cycle or a parent id with no record behind it is not, and
    raises ``DataIntegrityError`` instead of truncating the chain.
    """

    def __init__(self, store: HierarchyStore, max_nesting: int = MAX_NESTING):
        self._store = store
        self.max_nesting = max_nesting

    def parent(self, record: LocationRecord, chain: Chain | None = None) -> LocationRecord | None:
        """
        Fetch the direct parent of ``record``.

        Returns:
            The parent record, or None if the link is unset

        Raises:
            DataIntegrityError: If the link points at a missing record
        """
        link = parent_link(record, chain or default_chain(record.KIND))
        if link is None:
            return None
        parent_kind, parent_id = link
        parent = self._store.get(parent_kind, parent_id)
        if parent is None:
            logger.error(f"Dangling {parent_kind.value} reference {parent_id} from {record.id}")
            raise DataIntegrityError(
                f"{record.id} references missing {parent_kind.value} {parent_id}",
                chain=[record.id, parent_id],
            )
        return parent

    def walk_up(
        self,
        record: LocationRecord,
        max_hops: int | None = None,
        chain: Chain | None = None,
    ) -> list[LocationRecord]:
        """
        Collect ancestors of ``record``, nearest first.

        Args:
            record: Starting record (never part of the result)
            max_hops: Hop limit, defaults to the walker's nesting limit
            chain: Which parent link to follow, defaults to the record's natural chain

        Returns:
            Ancestor records ordered nearest first, no duplicates

        Raises:
            DataIntegrityError: On a cycle or a dangling parent reference
        """
        hops = self.max_nesting if max_hops is None else max_hops
        chain = chain or default_chain(record.KIND)

        visited = [record.id]
        ancestors: list[LocationRecord] = []
        current = record

        while len(ancestors) < hops:
            link = parent_link(current, chain)
            if link is None:
                break
            if link[1] in visited:
                logger.error(f"Cycle detected walking up from {record.id}: {' -> '.join(visited + [link[1]])}")
                raise DataIntegrityError(
                    f"Parent cycle detected at {link[1]} while walking up from {record.id}",
                    chain=visited + [link[1]],
                )
            current = self.parent(current, chain)
            visited.append(current.id)
            ancestors.append(current)

        logger.debug(f"Walked {chain.value} chain from {record.id}: {visited[1:]}")
        return ancestors
