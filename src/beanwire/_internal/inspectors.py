from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from beanwire._internal.binding import BindingKey, Parameterization
from beanwire._internal.configuration import ConfigurationSource
from beanwire._internal.injection_site import InjectionSite
from beanwire._internal.markers import ExternalValue, TypeParam, declared_name
from beanwire._internal.maybe import Maybe
from beanwire._internal.type_checks import is_runtime_class
from beanwire.exceptions import InvalidMetadataError, NoSuchBeanError, UnsupportedConstructionError

logger = logging.getLogger(__name__)

Resolver: TypeAlias = Callable[[InjectionSite], Maybe]
"""Produce a value for one injection site, or abstain."""

ImplementationResolver: TypeAlias = Callable[[Any], Collection[type[Any]] | None]
"""Return the known implementation classes assignable to a type."""

SiteLookup: TypeAlias = Callable[[InjectionSite], Any]
"""Find or build a bean for a site, returning ``None`` when nothing matches."""

ImplementationBuilder: TypeAlias = Callable[[type[Any], Parameterization | None], Any]
"""Build one implementation class, optionally for a parameterization."""


class Inspector(Protocol):
    """Decide whether a resolver applies to an injection site.

    Returning ``None`` means the inspector is structurally inapplicable and the
    next inspector is asked. That is different from a resolver that applies
    but abstains at resolution time.
    """

    def find_resolver(self, site: InjectionSite) -> Resolver | None: ...


@dataclass(frozen=True, slots=True)
class _ConstantResolver:
    result: Maybe

    def __call__(self, site: InjectionSite) -> Maybe:
        return self.result


@dataclass(frozen=True, slots=True)
class _ExternalValueResolver:
    configuration: ConfigurationSource
    key: str
    default: str

    def __call__(self, site: InjectionSite) -> Maybe:
        return Maybe.produced(self.configuration.get(self.key, self.default))


class ExternalValueInspector:
    """Resolve ``ExternalValue``-marked sites from a configuration source.

    The resolver never abstains: a missing key produces the marker default.

    Raises:
        InvalidMetadataError: From ``find_resolver`` when the marker key is empty.

    """

    def __init__(self, configuration: ConfigurationSource) -> None:
        self._configuration = configuration

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        marker = site.metadata(ExternalValue)
        if marker is None:
            return None
        if not marker.key:
            msg = f"ExternalValue for {site} requires a key."
            raise InvalidMetadataError(msg)
        return _ExternalValueResolver(
            configuration=self._configuration,
            key=marker.key,
            default=marker.default,
        )


@dataclass(frozen=True, slots=True)
class _TypeParamResolver:
    index: int

    def __call__(self, site: InjectionSite) -> Maybe:
        parameterization = site.expected_parameterization
        if parameterization is None:
            msg = f"Not parameterized: {site}"
            raise InvalidMetadataError(msg)
        if not 0 <= self.index < len(parameterization.arguments):
            msg = (
                f"Type parameter index {self.index} for {site} is out of range for "
                f"{parameterization}."
            )
            raise InvalidMetadataError(msg)
        argument = parameterization.argument(self.index)
        if not is_runtime_class(argument):
            msg = f"Expected class for {site}, got {argument!r}."
            raise InvalidMetadataError(msg)
        return Maybe.produced(argument)


class TypeParamInspector:
    """Resolve ``TypeParam``-marked sites to a type argument of the enclosing request.

    Raises:
        InvalidMetadataError: From ``find_resolver`` when the marker uses the
            default index on a site without an ordinal position.

    """

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        marker = site.metadata(TypeParam)
        if marker is None:
            return None
        if marker.index == TypeParam.INDEX_DEFAULT:
            if site.ordinal is None:
                msg = f"Must specify an index for TypeParam: {site}"
                raise InvalidMetadataError(msg)
            return _TypeParamResolver(index=site.ordinal)
        return _TypeParamResolver(index=marker.index)


class FixedInstanceInspector:
    """Supply one object to every site whose target type accepts it."""

    def __init__(self, instance: object) -> None:
        self._instance = instance
        self._resolver = _ConstantResolver(result=Maybe.produced(instance))

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        if not BindingKey(site.target_type).accepts_instance(self._instance):
            return None
        return self._resolver


@dataclass(frozen=True, slots=True)
class _LookupResolver:
    lookup: SiteLookup

    def __call__(self, site: InjectionSite) -> Maybe:
        value = self.lookup(site)
        if value is None:
            return Maybe.abstain()
        return Maybe.produced(value)


class ContextInspector:
    """Fallback inspector that asks the owning context for a bean.

    It applies to every site and abstains when the context finds nothing, so
    a later inspector or the missing-dependency path can take over.
    """

    def __init__(self, lookup: SiteLookup) -> None:
        self._resolver = _LookupResolver(lookup=lookup)

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        return self._resolver


@dataclass(frozen=True, slots=True)
class _ImplementationScanResolver:
    candidates: tuple[type[Any], ...]
    build: ImplementationBuilder

    def __call__(self, site: InjectionSite) -> Maybe:
        for candidate in self.candidates:
            try:
                built = self.build(candidate, site.parameterization)
            except (NoSuchBeanError, UnsupportedConstructionError) as error:
                logger.debug("Implementation %s could not be built for %s: %s", candidate, site, error)
                continue
            if built is not None:
                return Maybe.produced(built)
        return Maybe.abstain()


class ImplementationScanInspector:
    """Build a site's value from known implementations of its target type.

    Applies when at least one implementation's declared name matches the
    site's name hint (ignoring case; no hint matches everything). Candidates
    are built in order and the first one that builds wins.

    Args:
        implementation_resolver: Source of implementation classes.
        build: Builds one candidate through a nested factory.
        name_of: Returns a candidate's declared name. Defaults to the
            ``@Named`` value stamped on the class.

    """

    def __init__(
        self,
        implementation_resolver: ImplementationResolver,
        build: ImplementationBuilder,
        name_of: Callable[[type[Any]], str | None] = declared_name,
    ) -> None:
        self._implementation_resolver = implementation_resolver
        self._build = build
        self._name_of = name_of

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        target_type = site.target_type
        if not is_runtime_class(target_type):
            return None
        implementations = self._implementation_resolver(target_type)
        if not implementations:
            return None
        key = BindingKey(target_type, name=site.name_hint)
        candidates = tuple(
            candidate for candidate in implementations if key.name_matches(self._name_of(candidate))
        )
        if not candidates:
            return None
        return _ImplementationScanResolver(candidates=candidates, build=self._build)


__all__ = [
    "ContextInspector",
    "ExternalValueInspector",
    "FixedInstanceInspector",
    "ImplementationResolver",
    "ImplementationScanInspector",
    "Inspector",
    "Resolver",
    "TypeParamInspector",
]
