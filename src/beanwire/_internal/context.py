from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, get_origin, get_type_hints, overload

from beanwire._internal.binding import NO_NAME, BindingKey, Parameterization
from beanwire._internal.configuration import (
    ConfigurationSource,
    ContextSettings,
    EnvironmentConfiguration,
)
from beanwire._internal.deferred import Deferred, SingletonDeferred
from beanwire._internal.discovery import discover_named_types
from beanwire._internal.factory import ConstructionFactory
from beanwire._internal.injection_site import InjectionSite
from beanwire._internal.inspectors import (
    ContextInspector,
    ExternalValueInspector,
    TypeParamInspector,
)
from beanwire._internal.markers import InjectMarker, Named, ProviderMarker
from beanwire.exceptions import (
    FieldInjectionError,
    MissingDependencyError,
    NoSuchBeanError,
    UnsupportedConstructionError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Registration:
    instance: Any
    name: str
    parameterization: Parameterization | None = None


class ResolutionContext:
    """Find, build and remember beans for one application.

    A context owns three registries: built or registered instances by name,
    parameterized instances (``Repository[Fruit]``) by parameterization, and
    the catalog of ``@Named`` types used to satisfy requests for interfaces.
    Everything it builds goes through a ``ConstructionFactory`` wired with
    the context itself, the external-value and type-parameter inspectors,
    implementation lookup over the catalog and, as the fallback, a recursive
    "ask this context" inspector.

    Instances are cached forever; a second request for the same type returns
    the same object. Construction cycles are not detected and end in
    ``RecursionError``.

    Args:
        catalog: Mapping of named types to their declared names. When omitted
            the packages listed in ``settings.scan_packages`` are scanned.
        configuration: Source for ``ExternalValue`` sites. Defaults to the
            process environment.
        settings: Engine settings; read from ``BEANWIRE_*`` variables when omitted.

    Examples:
        .. code-block:: python

            context = ResolutionContext(discover_named_types("fruit_stand"))
            apple = context.require_bean(Apple)

    """

    _FIELD_MARKERS: ClassVar[tuple[type[Any], ...]] = (Named, InjectMarker, ProviderMarker)

    def __init__(
        self,
        catalog: Mapping[type[Any], str] | None = None,
        *,
        configuration: ConfigurationSource | None = None,
        settings: ContextSettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else ContextSettings()
        if catalog is None:
            catalog = discover_named_types(*self._settings.scan_packages)
        self._catalog: dict[type[Any], str] = dict(catalog)
        self._configuration = (
            configuration if configuration is not None else EnvironmentConfiguration()
        )
        self._instances: dict[int, _Registration] = {}
        self._parameterized_instances: dict[tuple[int, Parameterization], _Registration] = {}
        self._lock = threading.Lock()
        self._external_value_inspector = ExternalValueInspector(self._configuration)
        self._type_param_inspector = TypeParamInspector()
        self._context_inspector = ContextInspector(self._lookup_for_site)
        logger.info(
            "Resolution context ready with %d catalog types (strict=%s)",
            len(self._catalog),
            self._settings.strict_dependencies,
        )

    @property
    def settings(self) -> ContextSettings:
        return self._settings

    @property
    def configuration(self) -> ConfigurationSource:
        return self._configuration

    @property
    def catalog(self) -> Mapping[type[Any], str]:
        """Return a snapshot of the known named types."""
        with self._lock:
            return dict(self._catalog)

    # region Building
    @overload
    def build_bean(self, bean_type: type[T], name: str | None = None) -> T | None: ...

    @overload
    def build_bean(self, bean_type: Any, name: str | None = None) -> Any: ...

    def build_bean(self, bean_type: Any, name: str | None = None) -> Any:
        """Find or build a bean, returning ``None`` when nothing matches.

        Without a name the registry is searched by type and otherwise a new
        instance is built through a factory, so a concrete class needs no
        catalog entry. With a name the registry is searched by name, then by
        type, then the catalog is scanned for an assignable type declared
        under that name (ignoring case).

        Subscripted generics such as ``Repository[Fruit]`` are routed to
        ``build_parameterized_bean``.

        Raises:
            MissingDependencyError: If a strict builder argument stays unresolved.
            UnsupportedConstructionError: If no strategy can build the type.

        """
        parameterization = Parameterization.from_annotation(bean_type)
        if parameterization is not None:
            return self.build_parameterized_bean(parameterization)
        if name is None:
            return self.build_parameterized_bean(None, bean_type)
        return self._build_named(BindingKey(bean_type, name=name))

    def build_parameterized_bean(
        self,
        parameterization: Parameterization | None,
        bean_type: Any = None,
    ) -> Any:
        """Find or build a bean for an exact parameterization.

        An existing registration for an equal parameterization wins. Otherwise
        a new instance is built with the parameterization available to
        ``TypeParam`` sites, registered and field-filled. With
        ``parameterization=None`` this is the unnamed ``build_bean`` path.

        Args:
            parameterization: Requested parameterization, e.g.
                ``Parameterization.of(Repository, Fruit)``.
            bean_type: Raw type to build. Defaults to the parameterization's raw type.

        """
        if parameterization is None and bean_type is None:
            msg = "Either a parameterization or a bean type is required."
            raise ValueError(msg)
        if bean_type is None:
            bean_type = parameterization.raw_type  # type: ignore[union-attr]

        if parameterization is not None:
            existing = self.find_bean_by_parameterization(parameterization, bean_type)
        else:
            existing = self.find_bean_by_type(bean_type)
        if existing is not None:
            return existing

        built = self.factory_for(bean_type, parameterization).get()
        if built is None:
            return None
        if parameterization is not None:
            self._remember_parameterized(built, NO_NAME, parameterization)
        else:
            self._remember(built, self._catalog.get(type(built), NO_NAME))
        self.inject_fields(built)
        return built

    @overload
    def require_bean(self, bean_type: type[T], name: str | None = None) -> T: ...

    @overload
    def require_bean(self, bean_type: Any, name: str | None = None) -> Any: ...

    def require_bean(self, bean_type: Any, name: str | None = None) -> Any:
        """Like ``build_bean`` but raise when nothing is found.

        Raises:
            NoSuchBeanError: If the bean could not be found or built. A missing
                nested dependency surfaces as ``MissingDependencyError``, a
                subclass carrying the dependency's name and type.

        """
        bean = self.build_bean(bean_type, name)
        if bean is None:
            raise NoSuchBeanError(name, bean_type)
        return bean

    def factory_for(
        self,
        bean_type: Any,
        parameterization: Parameterization | None = None,
    ) -> ConstructionFactory[Any]:
        """Return a new factory wired to this context.

        Inspector order: this context as a fixed instance, external values,
        type parameters, catalog implementation scan, then recursive context
        lookup as the fallback. Implementations found by the scan are built
        through this context, so they are registered and shared.
        """
        factory: ConstructionFactory[Any] = (
            ConstructionFactory(bean_type, parameterization)
            .with_bean(self)
            .with_inspector(self._external_value_inspector)
            .with_inspector(self._type_param_inspector)
            .with_implementation_resolver(
                self.implementations_for,
                name_of=self._catalog_name,
                build=self._build_implementation,
            )
            .with_inspector(self._context_inspector)
        )
        if self._settings.strict_dependencies:
            factory.with_missing_errors(MissingDependencyError)
        return factory

    def _build_named(self, key: BindingKey) -> Any:
        by_name = self.find_bean_by_name(key.name, key.bean_type)
        if by_name is not None:
            return by_name
        by_type = self.find_bean_by_type(key.bean_type)
        if by_type is not None:
            return by_type

        for candidate, candidate_name in self._catalog_snapshot():
            if not key.accepts_type(candidate) or not key.name_matches(candidate_name):
                continue
            logger.debug("Catalog match for %s: %s", key, candidate.__qualname__)
            try:
                built = self.build_parameterized_bean(None, candidate)
            except UnsupportedConstructionError as error:
                logger.debug("Catalog type %s could not be built: %s", candidate.__qualname__, error)
                continue
            if built is not None:
                self._remember(built, candidate_name)
                return built
        return None

    def _build_implementation(self, candidate: type[Any], parameterization: Parameterization | None) -> Any:
        return self.build_parameterized_bean(parameterization, candidate)

    def _lookup_for_site(self, site: InjectionSite) -> Any:
        if site.parameterization is not None:
            try:
                return self.build_parameterized_bean(site.parameterization, site.target_type)
            except UnsupportedConstructionError as error:
                logger.debug("No bean for %s: %s", site, error)
                return None
        return self._build_named(BindingKey(site.target_type, name=site.name_hint))

    # endregion Building

    # region Registries
    def register_bean(self, bean_type: type[T], instance: T, name: str | None = None) -> ResolutionContext:
        """Register an externally built instance.

        The instance becomes visible by exact name and by assignable type, and
        ``bean_type`` is added to the catalog under ``name``. Registering the
        same instance again replaces its name.
        """
        registration_name = NO_NAME if name is None else name
        self._remember(instance, registration_name)
        with self._lock:
            self._catalog[bean_type] = registration_name
        return self

    def register_parameterized_bean(
        self,
        instance: Any,
        name: str | None,
        bean_type: type[Any],
        *type_params: Any,
    ) -> ResolutionContext:
        """Register an externally built instance under ``bean_type[*type_params]``."""
        parameterization = Parameterization.of(bean_type, *type_params)
        self._remember_parameterized(instance, NO_NAME if name is None else name, parameterization)
        return self

    def find_bean_by_name(self, name: str | None, bean_type: Any) -> Any:
        """Return the registered instance with exactly ``name`` that is a ``bean_type``."""
        if name is None:
            return None
        key = BindingKey(bean_type)
        for registration in self._instance_snapshot():
            if registration.name == name and key.accepts_instance(registration.instance):
                logger.debug("Registry hit for %s by name %r", bean_type, name)
                return registration.instance
        return None

    def find_bean_by_type(self, bean_type: Any) -> Any:
        """Return the first registered instance assignable to ``bean_type``."""
        key = BindingKey(bean_type)
        for registration in self._instance_snapshot():
            if key.accepts_instance(registration.instance):
                logger.debug("Registry hit for %s by type", bean_type)
                return registration.instance
        return None

    def find_bean_by_parameterization(self, parameterization: Parameterization, bean_type: Any = None) -> Any:
        """Return the instance registered for an equal parameterization."""
        with self._lock:
            registrations = tuple(self._parameterized_instances.values())
        key = BindingKey(bean_type) if bean_type is not None else None
        for registration in registrations:
            if registration.parameterization != parameterization:
                continue
            if key is not None and not key.accepts_instance(registration.instance):
                continue
            logger.debug("Registry hit for %s", parameterization)
            return registration.instance
        return None

    def implementations_for(self, bean_type: Any) -> list[type[Any]]:
        """Return catalog types assignable to ``bean_type``, in catalog order."""
        key = BindingKey(bean_type)
        return [candidate for candidate, _ in self._catalog_snapshot() if key.accepts_type(candidate)]

    def _remember(self, instance: Any, name: str) -> None:
        with self._lock:
            self._instances[id(instance)] = _Registration(instance=instance, name=name)

    def _remember_parameterized(self, instance: Any, name: str, parameterization: Parameterization) -> None:
        with self._lock:
            self._parameterized_instances[(id(instance), parameterization)] = _Registration(
                instance=instance,
                name=name,
                parameterization=parameterization,
            )

    def _instance_snapshot(self) -> tuple[_Registration, ...]:
        with self._lock:
            return tuple(self._instances.values())

    def _catalog_snapshot(self) -> tuple[tuple[type[Any], str], ...]:
        with self._lock:
            return tuple(self._catalog.items())

    def _catalog_name(self, candidate: type[Any]) -> str | None:
        return self._catalog.get(candidate)

    # endregion Registries

    # region Field injection
    def inject_fields(self, instance: Any) -> None:
        """Fill ``Named``, ``Injected`` and ``Provider`` class attributes that are still ``None``.

        Values come from ``ExternalValue`` metadata when present, otherwise
        from the same lookup used for constructor arguments. Fields that
        already hold a value are never overwritten. Attributes that cannot be
        written are logged and skipped.

        Raises:
            FieldInjectionError: If no value could be found for a field.

        """
        if instance is None:
            return
        owner = type(instance)
        try:
            hints = get_type_hints(owner, include_extras=True)
        except (NameError, TypeError) as error:
            logger.warning("Skipping field injection for %s: %s", owner.__qualname__, error)
            return

        for field_name, annotation in hints.items():
            if get_origin(annotation) is ClassVar:
                continue
            site = InjectionSite.for_field(owner, field_name, annotation)
            if not any(site.metadata(marker) is not None for marker in self._FIELD_MARKERS):
                continue
            # An annotation without a value reads as unset.
            if getattr(instance, field_name, None) is not None:
                continue

            value = self._resolve_field(site)
            if value is None:
                raise FieldInjectionError(owner, field_name)
            try:
                setattr(instance, field_name, value)
            except AttributeError as error:
                logger.warning("%s is not writable: %s", site, error)

    def _resolve_field(self, site: InjectionSite) -> Any:
        resolver = self._external_value_inspector.find_resolver(site)
        if resolver is not None:
            value = resolver(site).value
        else:
            value = self._lookup_for_site(site)
        if value is None:
            return None
        if site.wants_deferred and not isinstance(value, Deferred):
            return SingletonDeferred(value)
        return value

    # endregion Field injection

    def __repr__(self) -> str:
        return f"ResolutionContext(catalog={len(self._catalog)}, instances={len(self._instances)})"


__all__ = ["ResolutionContext"]
