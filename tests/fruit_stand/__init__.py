"""Sample package scanned by the discovery and context tests."""

from fruit_stand.bowls import FruitBowl, PlasticBowl
from fruit_stand.produce import Banana, Cherry, Fruit

__all__ = ["Banana", "Cherry", "Fruit", "FruitBowl", "PlasticBowl"]
