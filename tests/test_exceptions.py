"""Tests for the exception hierarchy."""

import pytest
from fruit_stand.produce import Fruit

from beanwire import (
    BeanwireError,
    FieldInjectionError,
    InvalidMetadataError,
    MissingDependencyError,
    NoSuchBeanError,
    UnsupportedConstructionError,
)


class Unbuildable:
    def __init__(self, correct: bool) -> None:
        self.correct = correct


class TestNoSuchBeanError:
    def test_message_includes_type_and_name(self) -> None:
        error = NoSuchBeanError("banana", Fruit)

        assert str(error) == "Fruit(banana)"
        assert error.name == "banana"
        assert error.bean_type is Fruit

    def test_message_without_name(self) -> None:
        assert str(NoSuchBeanError(None, Fruit)) == "Fruit"

    def test_message_without_type(self) -> None:
        assert str(NoSuchBeanError("banana", None)) == "banana"

    def test_message_without_anything(self) -> None:
        assert str(NoSuchBeanError(None, None)) == ""


class TestMissingDependencyError:
    def test_is_a_no_such_bean_error(self) -> None:
        error = MissingDependencyError("banana", Fruit, site="Basket(fruit)")

        assert isinstance(error, NoSuchBeanError)
        assert error.site == "Basket(fruit)"
        assert str(error) == "Fruit(banana)"


class TestUnsupportedConstructionError:
    def test_message_names_the_type(self) -> None:
        error = UnsupportedConstructionError(Unbuildable)

        assert str(error) == "Could not build: Unbuildable"
        assert error.bean_type is Unbuildable

    def test_detail_is_appended(self) -> None:
        error = UnsupportedConstructionError(Unbuildable, "no public builder")

        assert str(error) == "Could not build: Unbuildable. no public builder"


class TestFieldInjectionError:
    def test_message_names_owner_and_field(self) -> None:
        error = FieldInjectionError(Unbuildable, "correct")

        assert str(error) == "Unbuildable.correct"
        assert isinstance(error, InvalidMetadataError)


@pytest.mark.parametrize(
    "error_type",
    [
        NoSuchBeanError,
        MissingDependencyError,
        UnsupportedConstructionError,
        InvalidMetadataError,
        FieldInjectionError,
    ],
)
def test_every_error_is_a_beanwire_error(error_type: type[Exception]) -> None:
    assert issubclass(error_type, BeanwireError)
