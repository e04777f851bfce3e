from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from beanwire._internal.binding import BindingKey, Parameterization
from beanwire._internal.factory import ConstructionFactory
from beanwire.exceptions import NoSuchBeanError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def factory_for(
    bean_type: Any,
    parameterization: Parameterization | None = None,
) -> ConstructionFactory[Any]:
    """Return a new, unconfigured factory for ``bean_type``.

    Subscripted aliases such as ``Repository[Fruit]`` are split into the raw
    type and its parameterization. The factory has no inspectors; add them
    with the ``with_*`` methods before the first ``get()``.
    """
    return ConstructionFactory(bean_type, parameterization)


def build(bean_type: type[T]) -> T:
    """Build one instance of ``bean_type`` without a context.

    Only builders whose parameters all have defaults can be used, since no
    dependency is injected.

    Raises:
        UnsupportedConstructionError: If no static builder or constructor applies.

    """
    return factory_for(bean_type).get()


def name_matches(expected: str, actual: str, *stop_words: str) -> bool:
    """Return whether ``actual`` equals ``expected`` ignoring case, after removing stop words.

    The stop words are removed from ``actual`` only, so ``"Arg"`` matches
    ``"NoArg"`` with the stop word ``"No"``.
    """
    if actual.casefold() == expected.casefold():
        return True
    if not stop_words:
        return False
    smaller = actual
    for stop_word in stop_words:
        smaller = smaller.replace(stop_word, "")
    return smaller.casefold() == expected.casefold()


def build_by_name(
    interface: type[T],
    name: str,
    *stop_words: str,
    catalog: Iterable[type[Any]] | None = None,
) -> T:
    """Build the implementation of ``interface`` whose class name matches ``name``.

    Useful when configuration names an implementation but the caller does not
    know every concrete type. Spaces are removed from ``name``; stop words
    are removed from candidate class names.

    Args:
        interface: Expected base type.
        name: Simple class name to look for, e.g. ``"banana"``.
        stop_words: Fragments dropped from candidate class names before
            comparing, e.g. ``"Model"`` so ``"Banana"`` finds ``BananaModel``.
        catalog: Candidate types. Defaults to every loaded subclass of
            ``interface``.

    Raises:
        NoSuchBeanError: If no candidate matches ``name``.
        UnsupportedConstructionError: If the match cannot be built.

    Examples:
        .. code-block:: python

            fruit = build_by_name(Fruit, settings.fruit_kind, "Model")

    """
    identifier = name.replace(" ", "")
    key = BindingKey(interface)
    candidates = _iter_subclasses(interface) if catalog is None else iter(catalog)
    for candidate in candidates:
        if not key.accepts_type(candidate):
            continue
        if name_matches(identifier, candidate.__name__, *stop_words):
            logger.debug("Building %s for name %r", candidate.__qualname__, name)
            return build(candidate)
    raise NoSuchBeanError(name, interface)


def _iter_subclasses(base: type[Any]) -> Iterator[type[Any]]:
    seen: set[type[Any]] = set()
    pending = list(base.__subclasses__())
    while pending:
        candidate = pending.pop(0)
        if candidate in seen:
            continue
        seen.add(candidate)
        yield candidate
        pending.extend(candidate.__subclasses__())


__all__ = ["build", "build_by_name", "factory_for", "name_matches"]
