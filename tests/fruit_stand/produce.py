from abc import ABC, abstractmethod
from typing import Protocol

from beanwire import Named


class Fruit(ABC):
    @abstractmethod
    def name(self) -> str: ...


@Named("banana")
class Banana(Fruit):
    def name(self) -> str:
        return "banana"


@Named()
class Cherry(Fruit):
    def name(self) -> str:
        return "cherry"


class Basket(Protocol):
    def capacity(self) -> int: ...


@Named("wicker")
class WickerBasket(Basket):
    def capacity(self) -> int:
        return 12
