from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Deferred(ABC, Generic[T]):
    """Repeatable handle that produces a dependency when called.

    Sites annotated with ``Provider[T]`` receive a ``Deferred[T]``. Whether
    repeated calls return the same object depends on the handle:
    ``SingletonDeferred`` always returns its one value, while a
    ``ConstructionFactory`` builds a fresh instance on every call.
    """

    @abstractmethod
    def get(self) -> T:
        """Produce the dependency."""

    def __call__(self) -> T:
        return self.get()


class SingletonDeferred(Deferred[T]):
    """Deferred handle around a single, already resolved value."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def get(self) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"SingletonDeferred({self._value!r})"


__all__ = ["Deferred", "SingletonDeferred"]
