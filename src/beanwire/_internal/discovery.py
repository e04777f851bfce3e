from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Iterator
from types import ModuleType
from typing import Any

from beanwire._internal.markers import declared_name

logger = logging.getLogger(__name__)


def discover_named_types(*targets: ModuleType | str) -> dict[type[Any], str]:
    """Collect every ``@Named`` class defined in the given modules and packages.

    Packages are walked recursively. A class only counts for the module that
    defines it, so re-exports are not reported twice. Submodules that fail to
    import are logged and skipped.

    Args:
        targets: Module objects or dotted module names.

    Returns:
        Mapping from class to its declared name, in discovery order.

    """
    named_types: dict[type[Any], str] = {}
    for module in _iter_modules(targets):
        for _, candidate in inspect.getmembers(module, inspect.isclass):
            if candidate.__module__ != module.__name__:
                continue
            for named_type in _iter_named(candidate):
                name = declared_name(named_type)
                if name is not None and named_type not in named_types:
                    logger.debug("Discovered named type %s as %r", named_type.__qualname__, name)
                    named_types[named_type] = name
    return named_types


def _iter_named(candidate: type[Any]) -> Iterator[type[Any]]:
    yield candidate
    for _, nested in inspect.getmembers(candidate, inspect.isclass):
        if nested.__module__ == candidate.__module__ and nested.__qualname__.startswith(
            f"{candidate.__qualname__}.",
        ):
            yield from _iter_named(nested)


def _iter_modules(targets: tuple[ModuleType | str, ...]) -> Iterator[ModuleType]:
    seen: set[str] = set()
    for target in targets:
        module = importlib.import_module(target) if isinstance(target, str) else target
        if module.__name__ in seen:
            continue
        seen.add(module.__name__)
        yield module
        search_path = getattr(module, "__path__", None)
        if search_path is None:
            continue
        for module_info in pkgutil.walk_packages(search_path, prefix=f"{module.__name__}."):
            if module_info.name in seen:
                continue
            seen.add(module_info.name)
            try:
                yield importlib.import_module(module_info.name)
            except ImportError as error:
                logger.warning("Skipping %s during type discovery: %s", module_info.name, error)


__all__ = ["discover_named_types"]
