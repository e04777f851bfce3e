from beanwire._internal.binding import NO_NAME, BindingKey, Parameterization
from beanwire._internal.configuration import (
    ConfigurationSource,
    ContextSettings,
    EnvironmentConfiguration,
    MappingConfiguration,
    SettingsConfiguration,
)
from beanwire._internal.context import ResolutionContext
from beanwire._internal.deferred import Deferred, SingletonDeferred
from beanwire._internal.discovery import discover_named_types
from beanwire._internal.factory import ConstructionFactory
from beanwire._internal.injection_site import InjectionSite
from beanwire._internal.inspectors import (
    ContextInspector,
    ExternalValueInspector,
    FixedInstanceInspector,
    ImplementationScanInspector,
    Inspector,
    Resolver,
    TypeParamInspector,
)
from beanwire._internal.loader import build, build_by_name, factory_for, name_matches
from beanwire._internal.markers import ExternalValue, Injected, Named, Provider, TypeParam
from beanwire._internal.maybe import Maybe
from beanwire.exceptions import (
    BeanwireError,
    FieldInjectionError,
    InvalidMetadataError,
    MissingDependencyError,
    NoSuchBeanError,
    UnsupportedConstructionError,
)

__all__ = [
    "NO_NAME",
    "BeanwireError",
    "BindingKey",
    "ConfigurationSource",
    "ConstructionFactory",
    "ContextInspector",
    "ContextSettings",
    "Deferred",
    "EnvironmentConfiguration",
    "ExternalValue",
    "ExternalValueInspector",
    "FieldInjectionError",
    "FixedInstanceInspector",
    "ImplementationScanInspector",
    "Injected",
    "InjectionSite",
    "Inspector",
    "InvalidMetadataError",
    "MappingConfiguration",
    "Maybe",
    "MissingDependencyError",
    "Named",
    "NoSuchBeanError",
    "Parameterization",
    "Provider",
    "ResolutionContext",
    "Resolver",
    "SettingsConfiguration",
    "SingletonDeferred",
    "TypeParam",
    "TypeParamInspector",
    "UnsupportedConstructionError",
    "build",
    "build_by_name",
    "discover_named_types",
    "factory_for",
    "name_matches",
]
