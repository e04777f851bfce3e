from __future__ import annotations

import inspect
from typing import Any, NamedTuple, TypeVar, get_args, get_origin

from beanwire._internal.binding import Parameterization
from beanwire._internal.deferred import Deferred
from beanwire._internal.markers import Named, ProviderMarker, find_marker, split_annotation
from beanwire._internal.type_checks import strip_optional

M = TypeVar("M")


class FieldRef(NamedTuple):
    """Point at an annotated attribute of a class."""

    owner: type[Any]
    name: str


class InjectionSite:
    """Describe one place that needs a value: a class field or a builder parameter.

    A site is built once per construction attempt and never changes. The
    declared annotation is unpacked eagerly:

    - ``Annotated`` metadata becomes available through ``metadata(kind)``;
    - ``Provider[T]`` (or a bare ``Deferred[T]``) sets ``wants_deferred`` and
      targets ``T``;
    - ``X | None`` targets ``X``;
    - a subscripted class such as ``Repository[Fruit]`` targets the erased
      ``Repository`` and keeps ``Repository[Fruit]`` as ``parameterization``.
    """

    __slots__ = (
        "_annotation",
        "_declaring_type",
        "_expected_parameterization",
        "_field",
        "_metadata",
        "_ordinal",
        "_parameter",
        "_parameterization",
        "_target_type",
        "_wants_deferred",
    )

    def __init__(
        self,
        *,
        annotation: Any,
        field: FieldRef | None = None,
        parameter: inspect.Parameter | None = None,
        declaring_type: Any = None,
        ordinal: int | None = None,
        expected_parameterization: Parameterization | None = None,
    ) -> None:
        if field is None and parameter is None:
            msg = "Injection site needs either a field or a parameter."
            raise ValueError(msg)
        if field is not None and parameter is not None:
            msg = "Injection site cannot be both a field and a parameter."
            raise ValueError(msg)

        self._field = field
        self._parameter = parameter
        self._declaring_type = field.owner if field is not None else declaring_type
        self._ordinal = ordinal
        self._expected_parameterization = expected_parameterization
        self._annotation = Any if annotation is inspect.Parameter.empty else annotation

        base, metadata = split_annotation(self._annotation)
        provider_marker = find_marker(metadata, ProviderMarker)
        wants_deferred = provider_marker is not None
        if not wants_deferred and get_origin(base) is Deferred:
            wants_deferred = True
            base = get_args(base)[0]
        base = strip_optional(base)
        inner_base, inner_metadata = split_annotation(base)
        if inner_metadata:
            base = inner_base
            metadata = (*metadata, *inner_metadata)

        self._wants_deferred = wants_deferred
        self._metadata = metadata
        self._parameterization = Parameterization.from_annotation(base)
        self._target_type = (
            self._parameterization.raw_type if self._parameterization is not None else base
        )

    @classmethod
    def for_field(
        cls,
        owner: type[Any],
        name: str,
        annotation: Any,
        expected_parameterization: Parameterization | None = None,
    ) -> InjectionSite:
        return cls(
            annotation=annotation,
            field=FieldRef(owner=owner, name=name),
            expected_parameterization=expected_parameterization,
        )

    @classmethod
    def for_parameter(
        cls,
        parameter: inspect.Parameter,
        ordinal: int,
        *,
        declaring_type: Any,
        annotation: Any = inspect.Parameter.empty,
        expected_parameterization: Parameterization | None = None,
    ) -> InjectionSite:
        if annotation is inspect.Parameter.empty:
            annotation = parameter.annotation
        return cls(
            annotation=annotation,
            parameter=parameter,
            declaring_type=declaring_type,
            ordinal=ordinal,
            expected_parameterization=expected_parameterization,
        )

    @property
    def annotation(self) -> Any:
        return self._annotation

    @property
    def target_type(self) -> Any:
        """Return the class to supply; the wrapped class for deferred sites."""
        return self._target_type

    @property
    def wants_deferred(self) -> bool:
        return self._wants_deferred

    @property
    def parameterization(self) -> Parameterization | None:
        """Return the site's own declared parameterization, e.g. ``Repository[Fruit]``."""
        return self._parameterization

    @property
    def expected_parameterization(self) -> Parameterization | None:
        """Return the parameterization of the request that is building the declaring type."""
        return self._expected_parameterization

    @property
    def ordinal(self) -> int | None:
        return self._ordinal

    @property
    def declaring_type(self) -> Any:
        return self._declaring_type

    @property
    def name(self) -> str:
        """Return the attribute or parameter name."""
        if self._field is not None:
            return self._field.name
        return self._parameter.name  # type: ignore[union-attr]

    @property
    def is_field(self) -> bool:
        return self._field is not None

    @property
    def parameter(self) -> inspect.Parameter | None:
        return self._parameter

    @property
    def has_default(self) -> bool:
        return self._parameter is not None and self._parameter.default is not inspect.Parameter.empty

    @property
    def name_hint(self) -> str | None:
        """Return the ``Named`` value attached to the site, or ``None`` when absent or empty."""
        named = find_marker(self._metadata, Named)
        if named is None or not named.value:
            return None
        return named.value

    def metadata(self, kind: type[M]) -> M | None:
        """Return the first ``Annotated`` metadata item of ``kind``, or ``None``."""
        return find_marker(self._metadata, kind)

    def __str__(self) -> str:
        owner = getattr(self._declaring_type, "__qualname__", repr(self._declaring_type))
        if self._field is not None:
            return f"{owner}.{self._field.name}"
        return f"{owner}({self.name})"

    def __repr__(self) -> str:
        return f"InjectionSite({self})"


__all__ = ["FieldRef", "InjectionSite"]
