"""Shared pytest fixtures for beanwire tests."""

from typing import Any

import pytest

from beanwire import ContextSettings, MappingConfiguration, ResolutionContext, discover_named_types


@pytest.fixture(scope="session")
def fruit_stand_catalog() -> dict[type[Any], str]:
    """Named types discovered in the sample ``fruit_stand`` package."""
    return discover_named_types("fruit_stand")


@pytest.fixture()
def configuration() -> MappingConfiguration:
    """Empty in-memory configuration source."""
    return MappingConfiguration()


@pytest.fixture()
def context(
    fruit_stand_catalog: dict[type[Any], str],
    configuration: MappingConfiguration,
) -> ResolutionContext:
    """Strict context over the sample catalog."""
    return ResolutionContext(
        fruit_stand_catalog,
        configuration=configuration,
        settings=ContextSettings(strict_dependencies=True),
    )


@pytest.fixture()
def empty_context(configuration: MappingConfiguration) -> ResolutionContext:
    """Strict context with no catalog entries."""
    return ResolutionContext(
        {},
        configuration=configuration,
        settings=ContextSettings(strict_dependencies=True),
    )


@pytest.fixture()
def permissive_context(
    fruit_stand_catalog: dict[type[Any], str],
    configuration: MappingConfiguration,
) -> ResolutionContext:
    """Context that passes ``None`` for unresolved builder arguments."""
    return ResolutionContext(
        fruit_stand_catalog,
        configuration=configuration,
        settings=ContextSettings(strict_dependencies=False),
    )
