from typing import Annotated, get_args, get_origin

from beanwire import ExternalValue, Injected, Named, Provider, TypeParam
from beanwire._internal.markers import (
    NAMED_TYPE_ATTR,
    InjectMarker,
    ProviderMarker,
    declared_name,
    find_marker,
    split_annotation,
)


class Fruit:
    pass


@Named("banana")
class Banana(Fruit):
    pass


class Plantain(Banana):
    pass


def test_named_decorator_stamps_the_class() -> None:
    assert Banana.__dict__[NAMED_TYPE_ATTR] == "banana"
    assert declared_name(Banana) == "banana"


def test_declared_name_is_not_inherited() -> None:
    assert declared_name(Plantain) is None
    assert declared_name(Fruit) is None


def test_named_without_value_declares_the_unnamed_bucket() -> None:
    @Named()
    class Cherry:
        pass

    assert declared_name(Cherry) == ""


def test_named_is_value_based_and_hashable() -> None:
    marker = Named("banana")

    assert marker == Named("banana")
    assert {marker: 1}[Named("banana")] == 1


def test_injected_wraps_dependency_with_inject_marker() -> None:
    dependency = Injected[Fruit]

    assert get_origin(dependency) is Annotated
    annotation_args = get_args(dependency)
    assert annotation_args[0] is Fruit
    assert isinstance(annotation_args[1], InjectMarker)


def test_injected_preserves_nested_metadata() -> None:
    dependency = Injected[Annotated[str, ExternalValue("color")]]

    base, metadata = split_annotation(dependency)
    assert base is str
    assert find_marker(metadata, ExternalValue) == ExternalValue("color")
    assert find_marker(metadata, InjectMarker) is not None


def test_provider_carries_the_wrapped_type() -> None:
    base, metadata = split_annotation(Provider[Fruit])

    assert base is Fruit
    assert find_marker(metadata, ProviderMarker) == ProviderMarker(Fruit)


def test_provider_keeps_name_hint() -> None:
    base, metadata = split_annotation(Provider[Annotated[Fruit, Named("banana")]])

    assert base is Fruit
    assert find_marker(metadata, Named) == Named("banana")
    assert find_marker(metadata, ProviderMarker) is not None


def test_marker_defaults() -> None:
    assert ExternalValue("color").default == ""
    assert TypeParam().index == TypeParam.INDEX_DEFAULT
    assert TypeParam(2).index == 2


def test_split_plain_annotation() -> None:
    assert split_annotation(Fruit) == (Fruit, ())


def test_find_marker_returns_none_when_absent() -> None:
    assert find_marker((Named("x"),), ExternalValue) is None
