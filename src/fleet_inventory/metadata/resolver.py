"""Inherited metadata resolution.

A record's inherited metadata is what its ancestors declare that it does
not already declare itself. The nearest ancestor wins for a given key; the
record's own value always wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from ..errors import InvalidArgumentError
from ..hierarchy.types import (
    Chain,
    LocationRecord,
    MetadataItem,
    OrganizationalUnit,
    Region,
    ResourceKind,
    Site,
    kind_of,
)
from ..hierarchy.walker import AncestorWalker

if TYPE_CHECKING:
    from ..store import HierarchyStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SiteInheritedMetadata:
    """A site inherits along two independent chains."""
    location: tuple[MetadataItem, ...] = ()
    ou: tuple[MetadataItem, ...] = ()

    def to_dict(self) -> dict:
        return {
            "location": [item.to_dict() for item in self.location],
            "ou": [item.to_dict() for item in self.ou],
        }


def fold_inherited(
    own: Iterable[MetadataItem],
    ancestors: Sequence[LocationRecord],
) -> tuple[MetadataItem, ...]:
    """
    Fold ancestor metadata under a record's own metadata.

    Args:
        own: The record's own metadata
        ancestors: Ancestor records, nearest first

    Returns:
        Inherited pairs in walk order, at most one per key, excluding keys
        the record defines itself
    """
    shadowed = {item.key for item in own}
    inherited = []
    for ancestor in ancestors:
        for item in ancestor.metadata:
            if item.key in shadowed:
                continue
            shadowed.add(item.key)
            inherited.append(item)
    return tuple(inherited)


class MetadataInheritanceResolver:
    """Computes inherited metadata for regions, OUs and sites."""

    def __init__(self, store: HierarchyStore, walker: AncestorWalker):
        self._store = store
        self._walker = walker

    def _chain_metadata(self, record: LocationRecord, chain: Chain) -> tuple[MetadataItem, ...]:
        ancestors = self._walker.walk_up(record, chain=chain)
        return fold_inherited(record.metadata, ancestors)

    def inherited_metadata(
        self, record: LocationRecord | str
    ) -> tuple[MetadataItem, ...] | SiteInheritedMetadata:
        """
        Resolve the inherited metadata of a region, OU or site.

        Args:
            record: The record, or its resource id

        Returns:
            A tuple of pairs for a Region or OU (empty when it has no parent),
            or a ``SiteInheritedMetadata`` for a Site

        Raises:
            NotFoundError: If given an id that does not exist
            InvalidArgumentError: For hosts, instances and non-location ids
            DataIntegrityError: If the ancestor chain is broken
        """
        if isinstance(record, str):
            record = self._store.get_or_raise(kind_of(record), record)

        if isinstance(record, Site):
            return SiteInheritedMetadata(
                location=self._chain_metadata(record, Chain.LOCATION),
                ou=self._chain_metadata(record, Chain.ORGANIZATION),
            )
        if isinstance(record, Region):
            return self._chain_metadata(record, Chain.LOCATION)
        if isinstance(record, OrganizationalUnit):
            return self._chain_metadata(record, Chain.ORGANIZATION)

        raise InvalidArgumentError(
            f"Metadata is only inherited by {ResourceKind.REGION.value}, "
            f"{ResourceKind.OU.value} and {ResourceKind.SITE.value} records, got {record.id}"
        )

    def effective_metadata(self, record: LocationRecord | str) -> dict[str, str]:
        """
        Own metadata overlaid on inherited metadata, as a plain mapping.

        For a site the location chain is applied before the OU chain, so a
        key present in both resolves to the OU value.
        """
        if isinstance(record, str):
            record = self._store.get_or_raise(kind_of(record), record)

        inherited = self.inherited_metadata(record)
        if isinstance(inherited, SiteInheritedMetadata):
            layers = [inherited.location, inherited.ou]
        else:
            layers = [inherited]

        effective: dict[str, str] = {}
        for layer in layers:
            effective.update((item.key, item.value) for item in layer)
        effective.update((item.key, item.value) for item in record.metadata)
        logger.debug(f"Effective metadata for {record.id}: {len(effective)} keys")
        return effective
