from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@runtime_checkable
class ConfigurationSource(Protocol):
    """Look up external string values by key, falling back to a default on a miss."""

    def get(self, key: str, default: str) -> str: ...


class EnvironmentConfiguration:
    """Read external values from ``os.environ`` on every lookup.

    Args:
        prefix: Prepended to every key before the environment lookup.

    """

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix

    def get(self, key: str, default: str) -> str:
        return os.environ.get(f"{self._prefix}{key}", default)

    def __repr__(self) -> str:
        return f"EnvironmentConfiguration(prefix={self._prefix!r})"


class MappingConfiguration:
    """Hold external values in memory with an explicit override lifecycle.

    Values can be replaced with ``set`` and removed with ``clear`` at any
    time; every lookup sees the current state.
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: str) -> str:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def clear(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def __repr__(self) -> str:
        return f"MappingConfiguration({sorted(self._values)!r})"


class SettingsConfiguration:
    """Expose the fields of a pydantic ``BaseSettings`` instance as external values.

    Keys match either the field name or its alias. ``None`` field values count
    as missing, and non-string values are rendered with ``str``.
    """

    def __init__(self, settings: BaseSettings) -> None:
        self._settings = settings

    def get(self, key: str, default: str) -> str:
        values: dict[str, Any] = self._settings.model_dump()
        value = values.get(key)
        if value is None:
            value = self._settings.model_dump(by_alias=True).get(key)
        if value is None:
            return default
        return value if isinstance(value, str) else str(value)

    def __repr__(self) -> str:
        return f"SettingsConfiguration({type(self._settings).__qualname__})"


class ContextSettings(BaseSettings):
    """Engine settings for ``ResolutionContext``, read from ``BEANWIRE_*`` variables.

    ``scan_packages`` lists packages walked for ``@Named`` types when a context
    is created without an explicit catalog. ``strict_dependencies`` makes
    unresolved builder arguments raise ``MissingDependencyError``; when false
    they are passed as ``None``.
    """

    model_config = SettingsConfigDict(env_prefix="BEANWIRE_")

    scan_packages: list[str] = Field(default_factory=list)
    strict_dependencies: bool = True


__all__ = [
    "ConfigurationSource",
    "ContextSettings",
    "EnvironmentConfiguration",
    "MappingConfiguration",
    "SettingsConfiguration",
]
