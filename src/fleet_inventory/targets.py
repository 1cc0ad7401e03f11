"""Binding targets for schedules and telemetry profiles.

Internally a target is one ``Target(kind, id)`` value or ``None``. On the
wire it is spread over optional ``<kind>_id`` fields where:

- a missing field (``None``) means "leave as is",
- ``""`` means "clear this relation",
- anything else must be a well-formed id of the matching kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from .errors import ConflictError, InvalidArgumentError
from .hierarchy.types import ResourceKind, validate_resource_id

# Empty string on the wire clears a relation
CLEAR = ""


class TargetKind(str, Enum):
    """Resource levels a schedule or profile can bind to."""
    HOST = "host"
    SITE = "site"
    REGION = "region"
    INSTANCE = "instance"

    @property
    def resource_kind(self) -> ResourceKind:
        return ResourceKind(self.value)

    @property
    def field_name(self) -> str:
        """Wire field carrying this target, e.g. ``site_id``."""
        return f"{self.value}_id"


@dataclass(frozen=True, slots=True)
class Target:
    """The single resource a schedule or profile is bound to."""
    kind: TargetKind
    id: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


def _check_value(kind: TargetKind, value: str) -> str:
    if value != CLEAR and not value.strip():
        raise InvalidArgumentError(f"{kind.field_name} must be a resource id or empty to clear, got {value!r}")
    if value != CLEAR:
        validate_resource_id(value, kind.resource_kind)
    return value


def _set_fields(fields: Mapping[str, str], allowed: Sequence[TargetKind]) -> list[TargetKind]:
    return [kind for kind in allowed if fields.get(kind.field_name)]


def target_from_fields(
    fields: Mapping[str, str | None],
    allowed: Sequence[TargetKind],
    required: bool = True,
) -> Target | None:
    """
    Build a target from wire fields on create.

    Args:
        fields: Mapping of ``<kind>_id`` to value (None or "" when unset)
        allowed: Target kinds valid for the record type
        required: Whether a missing target is an error

    Returns:
        The target, or None if none was set and ``required`` is False

    Raises:
        InvalidArgumentError: Malformed or blank id, or no target when required
        ConflictError: More than one target set
    """
    values = {}
    for kind in allowed:
        value = fields.get(kind.field_name)
        if value is not None:
            values[kind.field_name] = _check_value(kind, value)

    chosen = _set_fields(values, allowed)
    if len(chosen) > 1:
        names = ", ".join(k.field_name for k in chosen)
        raise ConflictError(f"Only one target may be set, got: {names}")
    if not chosen:
        if required:
            names = ", ".join(k.field_name for k in allowed)
            raise InvalidArgumentError(f"Exactly one of {names} must be set")
        return None

    kind = chosen[0]
    return Target(kind, values[kind.field_name])


def apply_target_update(
    current: Target | None,
    updates: Mapping[str, str | None],
    allowed: Sequence[TargetKind],
) -> Target | None:
    """
    Apply a partial target update.

    Omitted fields keep their value, ``""`` clears the relation, an id sets
    it. After the update at most one target may remain set.

    Raises:
        InvalidArgumentError: Malformed or blank id
        ConflictError: More than one target would remain set
    """
    merged = target_to_fields(current, allowed)
    for kind in allowed:
        value = updates.get(kind.field_name)
        if value is not None:
            merged[kind.field_name] = _check_value(kind, value)

    chosen = _set_fields(merged, allowed)
    if len(chosen) > 1:
        names = ", ".join(k.field_name for k in chosen)
        raise ConflictError(f"Only one target may remain set after update, got: {names}")
    if not chosen:
        return None
    return Target(chosen[0], merged[chosen[0].field_name])


def target_to_fields(target: Target | None, allowed: Sequence[TargetKind]) -> dict[str, str | None]:
    """Spread a target over its wire fields; unset fields are None."""
    fields: dict[str, str | None] = {kind.field_name: None for kind in allowed}
    if target is not None:
        fields[target.kind.field_name] = target.id
    return fields
