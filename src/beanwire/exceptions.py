from __future__ import annotations

from typing import Any


class BeanwireError(Exception):
    """Represent a base class for all Beanwire-specific failures.

    Catch this type when you want to handle any Beanwire error path without
    matching each concrete exception class individually.
    """


class NoSuchBeanError(BeanwireError):
    """Signal that a requested bean could not be found or built.

    Raised by ``ResolutionContext.require_bean`` when lookup and construction
    both come back empty, and by ``build_by_name`` when no catalog type matches
    the requested name.

    Typical fixes include decorating the implementation with ``@Named(...)``
    and making sure its module is part of the discovered catalog, or
    registering a pre-built instance with ``ResolutionContext.register_bean``.
    """

    def __init__(self, name: str | None, bean_type: type[Any] | None) -> None:
        self.name = name
        self.bean_type = bean_type
        super().__init__(_format_name_and_type(name, bean_type))


class MissingDependencyError(NoSuchBeanError):
    """Signal that a constructor or builder argument resolved to nothing.

    Raised while invoking a chosen builder in strict mode, when a parameter
    site without a default abstained through the whole inspector chain.
    ``name`` is the site's name hint and ``bean_type`` its target type.

    Typical fixes include registering the dependency, adding a ``Named``
    marker that matches a catalog entry, or giving the parameter a default.
    """

    def __init__(self, name: str | None, bean_type: type[Any] | None, site: object = None) -> None:
        self.site = site
        super().__init__(name, bean_type)


class UnsupportedConstructionError(BeanwireError):
    """Signal that no construction strategy could build a type.

    Raised by ``ConstructionFactory.get`` after the static builder, public
    constructor and implementation lookup strategies are all exhausted.

    Typical fixes include adding a public ``staticmethod``/``classmethod``
    builder with a return annotation, making every constructor parameter
    resolvable, or registering a named implementation for the abstract type.
    """

    def __init__(self, bean_type: type[Any], detail: str | None = None) -> None:
        self.bean_type = bean_type
        type_name = getattr(bean_type, "__qualname__", repr(bean_type))
        msg = f"Could not build: {type_name}"
        if detail:
            msg = f"{msg}. {detail}"
        super().__init__(msg)


class InvalidMetadataError(BeanwireError):
    """Signal malformed injection metadata on a field or parameter.

    Raised when an ``ExternalValue`` marker has an empty key, when a
    ``TypeParam`` marker cannot determine its index or points at a missing or
    non-class type argument, and when a site needing a parameterization has
    none.

    These failures are deterministic; fix the declaration instead of retrying.
    """


class FieldInjectionError(InvalidMetadataError):
    """Signal that the field-filling pass found no value for an injected field.

    ``owner`` is the class being filled and ``field_name`` the attribute that
    could not be satisfied.
    """

    def __init__(self, owner: type[Any], field_name: str) -> None:
        self.owner = owner
        self.field_name = field_name
        super().__init__(f"{owner.__qualname__}.{field_name}")


def _format_name_and_type(name: str | None, bean_type: type[Any] | None) -> str:
    if name is None and bean_type is None:
        return ""
    if bean_type is None:
        return str(name)
    type_name = getattr(bean_type, "__qualname__", repr(bean_type))
    if name is None:
        return type_name
    return f"{type_name}({name})"
