from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Any, get_args, get_origin

from beanwire._internal.type_checks import is_runtime_class

NO_NAME = ""
"""Registration name used for unnamed beans; ``Named("")`` lands in the same bucket."""


@dataclass(frozen=True, slots=True)
class Parameterization:
    """Describe a generic type together with its ordered type arguments.

    Equality is structural: two parameterizations are equal when the raw type
    and every type argument compare equal, regardless of how they were built.

    Examples:
        .. code-block:: python

            Parameterization.of(Repository[Fruit]) == Parameterization.of(Repository, Fruit)

    """

    raw_type: Any
    arguments: tuple[Any, ...]

    @classmethod
    def of(cls, value: Any, *arguments: Any) -> Parameterization:
        """Normalize a generic alias, or a raw type plus explicit arguments.

        Args:
            value: Either a subscripted alias such as ``Repository[Fruit]`` or a
                raw generic class.
            arguments: Explicit type arguments when ``value`` is a raw class.

        """
        if isinstance(value, Parameterization):
            return value
        if arguments:
            return cls(raw_type=value, arguments=tuple(arguments))
        origin = get_origin(value)
        if origin is None:
            msg = f"{value!r} is not a parameterized type; pass type arguments explicitly."
            raise TypeError(msg)
        return cls(raw_type=origin, arguments=get_args(value))

    @classmethod
    def from_annotation(cls, annotation: Any) -> Parameterization | None:
        """Return the parameterization of a subscripted class annotation, if any."""
        origin = get_origin(annotation)
        if not is_runtime_class(origin) or origin is types.UnionType:
            return None
        arguments = get_args(annotation)
        if not arguments:
            return None
        return cls(raw_type=origin, arguments=arguments)

    def argument(self, index: int) -> Any:
        return self.arguments[index]

    def __str__(self) -> str:
        raw_name = getattr(self.raw_type, "__qualname__", repr(self.raw_type))
        rendered = ", ".join(getattr(item, "__qualname__", repr(item)) for item in self.arguments)
        return f"{raw_name}[{rendered}]"


@dataclass(frozen=True, slots=True)
class BindingKey:
    """Identify a requested dependency by type, optional name and parameterization.

    ``name=None`` means "no name specified" and matches any registration name.
    Registrations always store a concrete string, with ``NO_NAME`` for unnamed
    beans.
    """

    bean_type: Any
    name: str | None = None
    parameterization: Parameterization | None = None

    @property
    def registration_name(self) -> str:
        return NO_NAME if self.name is None else self.name

    def name_matches(self, candidate_name: str | None) -> bool:
        """Return whether a declared name satisfies this key, ignoring case."""
        if self.name is None:
            return True
        return self.name.casefold() == (candidate_name or NO_NAME).casefold()

    def accepts_type(self, candidate: Any) -> bool:
        """Return whether ``candidate`` is a class assignable to the requested type."""
        if not is_runtime_class(candidate) or not is_runtime_class(self.bean_type):
            return False
        try:
            return issubclass(candidate, self.bean_type)
        except TypeError:
            # Non-runtime protocols refuse issubclass; fall back to nominal inheritance.
            return self.bean_type in candidate.__mro__

    def accepts_instance(self, instance: object) -> bool:
        if not is_runtime_class(self.bean_type):
            return False
        try:
            return isinstance(instance, self.bean_type)
        except TypeError:
            return self.bean_type in type(instance).__mro__

    def __str__(self) -> str:
        type_name = str(self.parameterization) if self.parameterization is not None else getattr(
            self.bean_type,
            "__qualname__",
            repr(self.bean_type),
        )
        if self.name is None:
            return type_name
        return f"{type_name}({self.name})"


__all__ = ["NO_NAME", "BindingKey", "Parameterization"]
