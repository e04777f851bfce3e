from __future__ import annotations

import types
from typing import Any, TypeGuard, Union, get_args, get_origin


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    """Return true for ``typing.Protocol`` definitions, which cannot be instantiated."""
    return bool(candidate.__dict__.get("_is_protocol", False))


def strip_optional(annotation: Any) -> Any:
    """Return ``X`` for ``X | None`` and ``Optional[X]``, else the annotation unchanged."""
    origin = get_origin(annotation)
    if origin is not Union and origin is not types.UnionType:
        return annotation
    members = tuple(member for member in get_args(annotation) if member is not type(None))
    if len(members) != 1:
        return annotation
    return members[0]


__all__ = ["is_protocol_class", "is_runtime_class", "strip_optional"]
