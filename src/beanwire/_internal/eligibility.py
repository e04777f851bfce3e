from __future__ import annotations

import datetime
import decimal
import enum
import inspect
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any

from beanwire._internal.type_checks import is_protocol_class, is_runtime_class


@dataclass(frozen=True, slots=True)
class ConstructorEligibilityPolicy:
    """Decide whether calling a class is an acceptable way to build it.

    Value-like types (paths, dates, ids, decimals, enums) are never built from
    their constructor: a bare call would produce a meaningless default or fail
    on required positional data that no inspector can supply.
    """

    value_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
        enum.Enum,
    )

    def rejection_reason(self, candidate: object) -> str | None:
        """Return why ``candidate`` cannot be built by calling it, or ``None`` if it can."""
        if not is_runtime_class(candidate):
            return "not a class"
        if candidate.__module__ == "builtins":
            return "builtin type"
        if inspect.isabstract(candidate):
            return "abstract class"
        if is_protocol_class(candidate):
            return "protocol class"
        if issubclass(candidate, type):
            return "metaclass"
        if issubclass(candidate, self.value_types):
            return "value type"
        return None

    def allows(self, candidate: object) -> bool:
        return self.rejection_reason(candidate) is None


__all__ = ["ConstructorEligibilityPolicy"]
