from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])
_ANNOTATED_MARKER_MIN_ARGS = 2

NAMED_TYPE_ATTR = "__beanwire_named__"
"""Class attribute stamped by ``@Named(...)``; read from the class ``__dict__`` only."""


class Named(NamedTuple):
    """Give a class, field or parameter a bean name.

    As ``typing.Annotated`` metadata it is a name hint for the injection site.
    Used as a class decorator it declares the class as a named, discoverable
    catalog type. An empty value names nothing on a site and registers the
    class under the unnamed bucket.

    Examples:
        .. code-block:: python

            @Named("fruitBowl")
            class PlasticBowl(FruitBowl): ...


            class Apple:
                def __init__(self, bowl: Annotated[FruitBowl, Named("fruitBowl")]) -> None:
                    self.bowl = bowl

    """

    value: str = ""

    def __call__(self, cls: C) -> C:
        setattr(cls, NAMED_TYPE_ATTR, self.value)
        return cls


class InjectMarker:
    """Mark a class attribute for the field-filling pass without naming it."""


class ExternalValue(NamedTuple):
    """Resolve a site from the external configuration source.

    ``key`` is mandatory; ``default`` is returned when the key is not
    configured. Values are looked up on every resolution.
    """

    key: str
    default: str = ""


class TypeParam(NamedTuple):
    """Inject the class bound to a type parameter of the enclosing request.

    With the default index the site's own ordinal position selects the type
    argument, so the first ``TypeParam`` constructor parameter receives the
    first argument of ``Repository[Fruit, Owner]`` and so on.

    Examples:
        .. code-block:: python

            class Repository(Generic[T]):
                def __init__(self, item_type: Annotated[type[T], TypeParam()]) -> None:
                    self.item_type = item_type

    """

    INDEX_DEFAULT = -1

    index: int = INDEX_DEFAULT


class ProviderMarker(NamedTuple):
    """Marker for deferred, repeatable handles to a dependency."""

    dependency_key: Any


if TYPE_CHECKING:
    Injected = Union[T, T]  # noqa: UP007,PYI016
    """Mark a class attribute for field injection.

    At runtime ``Injected[T]`` becomes ``Annotated[T, InjectMarker()]``.
    """

    Provider = Callable[[], T]
    """Ask for a deferred handle instead of an eager value.

    At runtime ``Provider[T]`` becomes ``Annotated[T, ProviderMarker(T)]`` and the
    site receives a ``Deferred`` handle returning ``T`` when called.
    """

else:

    class Injected:
        """Mark a class attribute for field injection.

        At runtime ``Injected[T]`` resolves to ``Annotated[T, InjectMarker()]``.

        Examples:
            .. code-block:: python

                class Banana:
                    peeler: Injected[Peeler] = None

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                return build_annotated_key((args[0], *args[1:], InjectMarker()))
            return build_annotated_key((item, InjectMarker()))

    class Provider:
        """Ask for a deferred handle instead of an eager value."""

        def __class_getitem__(cls, item: T) -> Annotated[T, ProviderMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                return build_annotated_key((args[0], *args[1:], ProviderMarker(args[0])))
            return build_annotated_key((item, ProviderMarker(item)))


def split_annotation(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return the bare type and the ``Annotated`` metadata of an annotation."""
    if get_origin(annotation) is not Annotated:
        return annotation, ()
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return annotation_args[0], ()
    return annotation_args[0], tuple(annotation_args[1:])


def find_marker(metadata: tuple[Any, ...], kind: type[T]) -> T | None:
    """Return the first metadata item of ``kind``, or ``None``."""
    return next((item for item in metadata if isinstance(item, kind)), None)


def declared_name(cls: type[Any]) -> str | None:
    """Return the name declared with ``@Named`` directly on ``cls``.

    Subclasses of a named class are not named themselves.
    """
    value = cls.__dict__.get(NAMED_TYPE_ATTR)
    if isinstance(value, str):
        return value
    return None


def build_annotated_key(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]


__all__ = [
    "NAMED_TYPE_ATTR",
    "ExternalValue",
    "InjectMarker",
    "Injected",
    "Named",
    "Provider",
    "ProviderMarker",
    "TypeParam",
    "build_annotated_key",
    "declared_name",
    "find_marker",
    "split_annotation",
]
