from abc import ABC, abstractmethod

from beanwire import Named


class FruitBowl(ABC):
    @abstractmethod
    def material(self) -> str: ...


@Named("fruitBowl")
class PlasticBowl(FruitBowl):
    def material(self) -> str:
        return "plastic"


class GlassBowl(FruitBowl):
    """Not named, so never discovered."""

    def material(self) -> str:
        return "glass"


class Shelf:
    @Named("shelfLabel")
    class Label:
        text = "fresh"
