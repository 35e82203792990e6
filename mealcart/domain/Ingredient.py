"""Ingredient domain entity: normalized name, quantity, canonical unit and resolved store."""
import math
from typing import Any, Iterable, Optional

from mealcart.logic.ingredients.normalize import normalize_name, normalize_unit, pick_store
from mealcart.utilities.constants import DEFAULT_UNIT, UNASSIGNED


class Ingredient:
    def __init__(self, name: str = "", qty: float = 1.0, unit: str = DEFAULT_UNIT,
                 store: str = UNASSIGNED):
        self.name = name
        self.qty = qty
        self.unit = unit
        self.store = store

    def __str__(self) -> str:
        return f"{self.name} - {self.qty} {self.unit} @ {self.store}"

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Ingredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data, stores: Optional[Iterable[Any]] = None) -> Optional["Ingredient"]:
        '''Creates a normalized Ingredient from a dictionary. Returns None when the name is empty.'''
        d = data if isinstance(data, dict) else {}
        name = normalize_name(d.get("name"))
        if not name:
            return None
        try:
            qty = float(d.get("qty"))
        except (TypeError, ValueError):
            qty = 1.0
        if not math.isfinite(qty) or qty <= 0:
            qty = 1.0
        return Ingredient(
            name=name,
            qty=qty,
            unit=normalize_unit(d.get("unit") or DEFAULT_UNIT),
            store=pick_store(d.get("store"), stores),
        )

    def to_dict(self):
        '''Converts the Ingredient to the JSON shape used by the API and the state file.'''
        return {
            "name": self.name,
            "qty": self.qty,
            "unit": self.unit,
            "store": self.store,
        }
