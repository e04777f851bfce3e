import inspect
from typing import Annotated, Any, Generic, Optional, TypeVar

import pytest

from beanwire import Deferred, ExternalValue, InjectionSite, Named, Parameterization, Provider, TypeParam
from beanwire._internal.injection_site import FieldRef

T = TypeVar("T")


class Fruit:
    pass


class Repository(Generic[T]):
    pass


def _parameter(function: Any, name: str) -> inspect.Parameter:
    return inspect.signature(function).parameters[name]


def build_basket(
    fruit: Annotated[Fruit, Named("banana")],
    spare: Provider[Fruit],
    raw: Deferred[Fruit],
    maybe: Optional[Annotated[Fruit, Named("cherry")]],
    repository: Repository[Fruit],
    color: Annotated[str, ExternalValue("color", "red")],
    untyped,  # noqa: ANN001
    count: int = 3,
) -> None: ...


def _site(name: str, ordinal: int = 0) -> InjectionSite:
    return InjectionSite.for_parameter(
        _parameter(build_basket, name),
        ordinal,
        declaring_type=Fruit,
    )


def test_site_requires_exactly_one_backing() -> None:
    with pytest.raises(ValueError, match="either a field or a parameter"):
        InjectionSite(annotation=Fruit)

    with pytest.raises(ValueError, match="cannot be both"):
        InjectionSite(
            annotation=Fruit,
            field=FieldRef(owner=Fruit, name="x"),
            parameter=_parameter(build_basket, "fruit"),
        )


def test_name_hint_and_target_type() -> None:
    site = _site("fruit")

    assert site.target_type is Fruit
    assert site.name_hint == "banana"
    assert site.wants_deferred is False
    assert site.name == "fruit"
    assert site.ordinal == 0
    assert not site.is_field


def test_provider_site_wants_deferred_wrapped_type() -> None:
    site = _site("spare")

    assert site.wants_deferred is True
    assert site.target_type is Fruit


def test_bare_deferred_annotation_wants_deferred() -> None:
    site = _site("raw")

    assert site.wants_deferred is True
    assert site.target_type is Fruit


def test_optional_is_unwrapped_and_keeps_inner_metadata() -> None:
    site = _site("maybe")

    assert site.target_type is Fruit
    assert site.name_hint == "cherry"


def test_parameterized_annotation_targets_the_erased_type() -> None:
    site = _site("repository")

    assert site.target_type is Repository
    assert site.parameterization == Parameterization.of(Repository, Fruit)


def test_metadata_lookup_by_kind() -> None:
    site = _site("color")

    assert site.metadata(ExternalValue) == ExternalValue("color", "red")
    assert site.metadata(TypeParam) is None
    assert site.name_hint is None


def test_missing_annotation_targets_any() -> None:
    assert _site("untyped").target_type is Any


def test_has_default() -> None:
    assert _site("count").has_default
    assert not _site("fruit").has_default


def test_empty_name_is_no_hint() -> None:
    site = InjectionSite.for_field(Fruit, "peel", Annotated[Fruit, Named("")])

    assert site.name_hint is None


def test_field_site() -> None:
    expected = Parameterization.of(Repository, Fruit)
    site = InjectionSite.for_field(Fruit, "peel", Annotated[str, Named("peel")], expected)

    assert site.is_field
    assert site.ordinal is None
    assert site.declaring_type is Fruit
    assert site.expected_parameterization == expected
    assert site.parameter is None
    assert not site.has_default
    assert str(site) == "Fruit.peel"


def test_parameter_site_str() -> None:
    assert str(_site("fruit")) == "Fruit(fruit)"


def test_explicit_annotation_overrides_parameter_annotation() -> None:
    site = InjectionSite.for_parameter(
        _parameter(build_basket, "untyped"),
        6,
        declaring_type=Fruit,
        annotation=Fruit,
    )

    assert site.target_type is Fruit
    assert site.annotation is Fruit
