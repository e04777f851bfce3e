from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, TypeAlias, TypeVar, get_origin, get_type_hints

from typing_extensions import Self

from beanwire._internal.binding import Parameterization
from beanwire._internal.deferred import Deferred, SingletonDeferred
from beanwire._internal.eligibility import ConstructorEligibilityPolicy
from beanwire._internal.injection_site import InjectionSite
from beanwire._internal.inspectors import (
    FixedInstanceInspector,
    ImplementationBuilder,
    ImplementationResolver,
    ImplementationScanInspector,
    Inspector,
    Resolver,
)
from beanwire._internal.markers import declared_name
from beanwire._internal.maybe import Maybe
from beanwire._internal.type_checks import is_runtime_class
from beanwire.exceptions import NoSuchBeanError, UnsupportedConstructionError

T = TypeVar("T")

logger = logging.getLogger(__name__)

MissingErrorFactory: TypeAlias = Callable[[str | None, Any, InjectionSite], Exception]
"""Build the exception raised for an unresolved builder argument."""

Builder: TypeAlias = Callable[[], Any]

_VARIADIC_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
_CONSTRUCTOR_POLICY = ConstructorEligibilityPolicy()


@dataclass(frozen=True, slots=True)
class _Argument:
    site: InjectionSite
    parameter: Parameter
    resolver: Resolver | None


@dataclass(frozen=True, slots=True)
class _ExecutableBuilder:
    """Invoke one chosen builder, resolving every argument on each call."""

    function: Callable[..., Any]
    arguments: tuple[_Argument, ...]
    missing_error_factory: MissingErrorFactory | None

    def __call__(self) -> Any:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for argument in self.arguments:
            site = argument.site
            parameter = argument.parameter
            result = argument.resolver(site) if argument.resolver is not None else Maybe.abstain()
            if result.abstained:
                if site.has_default:
                    if parameter.kind is Parameter.POSITIONAL_ONLY:
                        args.append(parameter.default)
                    continue
                if self.missing_error_factory is not None:
                    raise self.missing_error_factory(site.name_hint, site.target_type, site)
                value = None
            else:
                value = _adapt_deferred(result.value, site)
            if parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return self.function(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class _ImplementationBuilder:
    """Try each implementation through a nested factory; first success wins."""

    factories: tuple[ConstructionFactory[Any], ...]

    def __call__(self) -> Any:
        for factory in self.factories:
            try:
                built = factory.get()
            except (NoSuchBeanError, UnsupportedConstructionError) as error:
                logger.debug("Implementation %s was not built: %s", factory.bean_type, error)
                continue
            if built is not None:
                return built
        return None


class ConstructionFactory(Deferred[T]):
    """Figure out once how to build a type, then build it on every call.

    The first call runs the strategy search, in order:

    1. a public ``staticmethod``/``classmethod`` declared on the type whose
       return annotation is the type (or ``Self``) and whose parameters all
       have a resolver;
    2. the class constructor, when every parameter has a resolver;
    3. implementation lookup through the configured implementation
       resolvers, building each candidate with a nested factory.

    The chosen builder is memoized under a lock, so the search runs at most
    once per factory even under concurrent first calls. Every call after that
    re-runs the builder and therefore the argument resolvers; the instance is
    not cached here.

    Examples:
        .. code-block:: python

            factory = (
                ConstructionFactory(Apple)
                .with_inspector(ExternalValueInspector(EnvironmentConfiguration()))
                .with_missing_errors(MissingDependencyError)
            )
            apple = factory.get()

    """

    def __init__(self, bean_type: type[T], parameterization: Parameterization | None = None) -> None:
        if parameterization is None:
            parameterization = Parameterization.from_annotation(bean_type)
            if parameterization is not None:
                bean_type = parameterization.raw_type
        self._bean_type = bean_type
        self._parameterization = parameterization
        self._inspectors: list[Inspector] = []
        self._implementation_resolvers: list[ImplementationResolver] = []
        self._missing_error_factory: MissingErrorFactory | None = None
        self._builder: Builder | None = None
        self._lock = threading.Lock()

    @property
    def bean_type(self) -> type[T]:
        return self._bean_type

    @property
    def parameterization(self) -> Parameterization | None:
        return self._parameterization

    # region Configuration
    def with_bean(self, instance: object) -> Self:
        """Supply ``instance`` to every site whose target type accepts it."""
        self._inspectors.append(FixedInstanceInspector(instance))
        return self

    def with_inspector(self, inspector: Inspector) -> Self:
        """Append an inspector; earlier inspectors win."""
        self._inspectors.append(inspector)
        return self

    def with_implementation_resolver(
        self,
        implementation_resolver: ImplementationResolver,
        name_of: Callable[[type[Any]], str | None] = declared_name,
        build: ImplementationBuilder | None = None,
    ) -> Self:
        """Enable implementation lookup for this type and for argument sites.

        Args:
            implementation_resolver: Returns implementation classes for a type.
            name_of: Returns the declared name of an implementation, matched
                against site name hints.
            build: Builds a matched implementation for an argument site.
                Defaults to a nested factory sharing this factory's inspectors.

        """
        self._implementation_resolvers.append(implementation_resolver)
        self._inspectors.append(
            ImplementationScanInspector(
                implementation_resolver,
                build=build if build is not None else self._build_other,
                name_of=name_of,
            ),
        )
        return self

    def with_missing_errors(self, missing_error_factory: MissingErrorFactory) -> Self:
        """Raise ``missing_error_factory(name, type, site)`` for unresolved arguments.

        Without it the factory is permissive and passes ``None`` instead.
        """
        self._missing_error_factory = missing_error_factory
        return self

    # endregion Configuration

    def get(self) -> T:
        """Build an instance, choosing the strategy on the first call.

        Raises:
            UnsupportedConstructionError: If no strategy can build the type.

        """
        builder = self._builder
        if builder is None:
            with self._lock:
                if self._builder is None:
                    self._builder = self._choose_builder()
                builder = self._builder
        return builder()

    def _choose_builder(self) -> Builder:
        strategies: tuple[tuple[str, Callable[[], Builder | None]], ...] = (
            ("static builder", self._from_static_builder),
            ("constructor", self._from_constructor),
            ("implementation lookup", self._from_implementation_resolvers),
        )
        for strategy_name, strategy in strategies:
            builder = strategy()
            if builder is not None:
                logger.debug("Building %s with %s", self._type_name, strategy_name)
                return builder
        raise UnsupportedConstructionError(self._bean_type)

    # region Strategies
    def _from_static_builder(self) -> Builder | None:
        if not is_runtime_class(self._bean_type):
            return None
        for member_name, member in list(vars(self._bean_type).items()):
            if member_name.startswith("_"):
                continue
            if not isinstance(member, staticmethod | classmethod):
                continue
            if not self._returns_bean_type(member.__func__):
                continue
            builder = self._from_executable(getattr(self._bean_type, member_name))
            if builder is not None:
                return builder
        return None

    def _from_constructor(self) -> Builder | None:
        reason = _CONSTRUCTOR_POLICY.rejection_reason(self._bean_type)
        if reason is not None:
            logger.debug("Not calling %s directly: %s", self._type_name, reason)
            return None
        return self._from_executable(self._bean_type)

    def _from_implementation_resolvers(self) -> Builder | None:
        for implementation_resolver in self._implementation_resolvers:
            implementations = implementation_resolver(self._bean_type) or ()
            factories = tuple(
                self._for_other_type(implementation, self._parameterization)
                for implementation in implementations
                if implementation is not self._bean_type
            )
            if not factories:
                continue
            return _ImplementationBuilder(factories=factories)
        return None

    # endregion Strategies

    def _from_executable(self, function: Callable[..., Any]) -> Builder | None:
        try:
            signature = inspect.signature(function)
        except (TypeError, ValueError):
            return None

        hints = _resolved_type_hints(function)
        arguments: list[_Argument] = []
        ordinal = 0
        for parameter in signature.parameters.values():
            if parameter.kind in _VARIADIC_KINDS:
                continue
            site = InjectionSite.for_parameter(
                parameter,
                ordinal,
                declaring_type=self._bean_type,
                annotation=hints.get(parameter.name, parameter.annotation),
                expected_parameterization=self._parameterization,
            )
            ordinal += 1
            resolver = self._find_resolver(site)
            if resolver is None and not site.has_default:
                logger.debug("No resolver for %s; skipping %r", site, function)
                return None
            arguments.append(_Argument(site=site, parameter=parameter, resolver=resolver))

        return _ExecutableBuilder(
            function=function,
            arguments=tuple(arguments),
            missing_error_factory=self._missing_error_factory,
        )

    def _find_resolver(self, site: InjectionSite) -> Resolver | None:
        for inspector in self._inspectors:
            resolver = inspector.find_resolver(site)
            if resolver is not None:
                return resolver
        return None

    def _for_other_type(
        self,
        other_type: type[Any],
        parameterization: Parameterization | None,
    ) -> ConstructionFactory[Any]:
        factory: ConstructionFactory[Any] = ConstructionFactory(other_type, parameterization)
        factory._implementation_resolvers.extend(self._implementation_resolvers)
        factory._inspectors.extend(self._inspectors)
        factory._missing_error_factory = self._missing_error_factory
        return factory

    def _build_other(self, other_type: type[Any], parameterization: Parameterization | None) -> Any:
        return self._for_other_type(other_type, parameterization).get()

    def _returns_bean_type(self, function: Callable[..., Any]) -> bool:
        hints = _resolved_type_hints(function)
        if "return" in hints:
            return_annotation = hints["return"]
        else:
            return_annotation = getattr(function, "__annotations__", {}).get("return")
        if return_annotation is Self:
            return True
        if isinstance(return_annotation, str):
            return return_annotation in {
                "Self",
                self._bean_type.__name__,
                self._bean_type.__qualname__,
            }
        return_type = get_origin(return_annotation) or return_annotation
        if not is_runtime_class(return_type):
            return False
        return issubclass(return_type, self._bean_type)

    @property
    def _type_name(self) -> str:
        if self._parameterization is not None:
            return str(self._parameterization)
        return getattr(self._bean_type, "__qualname__", repr(self._bean_type))

    def __repr__(self) -> str:
        return f"ConstructionFactory({self._type_name})"


def _adapt_deferred(value: Any, site: InjectionSite) -> Any:
    is_handle = isinstance(value, Deferred)
    if site.wants_deferred == is_handle:
        return value
    if site.wants_deferred:
        return SingletonDeferred(value)
    return value.get()


def _resolved_type_hints(function: Callable[..., Any]) -> dict[str, Any]:
    if inspect.isclass(function):
        merged: dict[str, Any] = {}
        for member_name in ("__init__", "__new__"):
            for name, hint in _resolved_type_hints(getattr(function, member_name)).items():
                merged.setdefault(name, hint)
        merged.pop("return", None)
        return merged
    try:
        return get_type_hints(function, include_extras=True)
    except (AttributeError, NameError, TypeError):
        return {}


__all__ = ["ConstructionFactory", "MissingErrorFactory"]
