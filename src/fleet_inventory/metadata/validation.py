"""Metadata key/value validation."""

from __future__ import annotations

import re
from typing import Iterable

from ..errors import InvalidArgumentError
from ..hierarchy.types import MetadataItem

MAX_KEY_NAME_LENGTH = 63
MAX_KEY_PREFIX_LENGTH = 253
MAX_VALUE_LENGTH = 63

# Keys are DNS-label style names with an optional "prefix/" part
KEY_PATTERN = re.compile(
    r"^[a-z.]+/$|^[a-z.]+/[a-z0-9][a-z0-9_.-]*[a-z0-9]$|^[a-z.]+/[a-z0-9]$"
    r"|^[a-z]$|^[a-z0-9][a-z0-9_.-]*[a-z0-9]$"
)
VALUE_PATTERN = re.compile(r"^$|^[a-z0-9]$|^[a-z0-9][a-z0-9._-]*[a-z0-9]$")


def validate_metadata(items: Iterable[MetadataItem]) -> tuple[MetadataItem, ...]:
    """
    Validate a record's metadata.

    Args:
        items: Metadata pairs in declaration order

    Returns:
        The pairs as a tuple

    Raises:
        InvalidArgumentError: On a malformed key or value, or a repeated key
    """
    items = tuple(items)
    seen: set[str] = set()
    for item in items:
        if not KEY_PATTERN.match(item.key):
            raise InvalidArgumentError(f"Invalid metadata key: {item.key!r}")
        prefix, _, name = item.key.rpartition("/")
        if len(prefix) > MAX_KEY_PREFIX_LENGTH or len(name) > MAX_KEY_NAME_LENGTH:
            raise InvalidArgumentError(f"Metadata key too long: {item.key!r}")
        if len(item.value) > MAX_VALUE_LENGTH or not VALUE_PATTERN.match(item.value):
            raise InvalidArgumentError(f"Invalid metadata value for {item.key!r}: {item.value!r}")
        if item.key in seen:
            raise InvalidArgumentError(f"Duplicate metadata key: {item.key!r}")
        seen.add(item.key)
    return items
