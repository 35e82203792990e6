"""ShoppingList aggregate: merged grocery line items keyed by (store, name, unit)."""
import math
from typing import Dict, List, Tuple

from mealcart.domain.Ingredient import Ingredient


class GroceryLineItem(Ingredient):
    '''An Ingredient whose qty is the running total across every planned meal.'''

    @property
    def merge_key(self) -> Tuple[str, str, str]:
        return (self.store, self.name, self.unit)


class ShoppingList:
    def __init__(self):
        self.items: Dict[Tuple[str, str, str], GroceryLineItem] = {}
        self._addends: Dict[Tuple[str, str, str], List[float]] = {}

    def add_item(self, name: str, qty: float, unit: str, store: str):
        '''
        Adds qty to the entry for (store, name, unit), creating it if needed.
        The total is an exactly rounded sum, so it does not depend on the order items arrive in.
        '''
        key = (store, name, unit)
        addends = self._addends.setdefault(key, [])
        addends.append(qty)
        existing = self.items.get(key)
        if existing:
            existing.qty = math.fsum(addends)
        else:
            self.items[key] = GroceryLineItem(name=name, qty=qty, unit=unit, store=store)

    def get_items(self) -> List[GroceryLineItem]:
        return list(self.items.values())

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return f"Shopping List {self.get_items()}"

    def __repr__(self) -> str:
        return self.__str__()
