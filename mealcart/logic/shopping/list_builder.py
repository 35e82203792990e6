"""Grocery list builder.

Provides build_grocery_list(week_plan, recipes, pantry, ingredient_catalog, stores,
household_servings, planning_days=7), the state-level wrapper group_groceries(state)
and build_week_balance(state).
"""
import locale
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mealcart.domain.Plan import WeekPlan
from mealcart.domain.PlannerState import PlannerState
from mealcart.domain.Recipe import Recipe
from mealcart.domain.ShoppingList import GroceryLineItem, ShoppingList
from mealcart.logic.ingredients.normalize import (
    catalog_store, normalize_name, normalize_servings, normalize_store_list,
    normalize_unit, pick_store,
)
from mealcart.utilities.constants import DAYS, DEFAULT_SERVINGS, MEAL_SLOTS, UNASSIGNED

logger = logging.getLogger(__name__)

_QUICK_TAG_RE = re.compile(r"\b(15-min|20-min)\b", re.I)
_PROTEIN_TAG_RE = re.compile(r"high-protein", re.I)
_LEFTOVERS_TAG_RE = re.compile(r"leftovers", re.I)


def _sort_key(item: GroceryLineItem):
    return (locale.strxfrm(item.name), item.name)


def recipe_scale(recipe: Recipe, target_servings: Optional[int], household_servings: int) -> float:
    '''Ratio of planned servings to the recipe's own servings, no rounding.'''
    recipe_servings = normalize_servings(recipe.servings, DEFAULT_SERVINGS)
    planned = normalize_servings(target_servings, household_servings)
    return planned / recipe_servings


def _active_days(planning_days: int) -> List[str]:
    return list(DAYS[:min(len(DAYS), max(1, planning_days))])


def build_grocery_list(week_plan: WeekPlan, recipes: Iterable[Recipe], pantry: Iterable[str],
                       ingredient_catalog: Optional[Mapping[str, Any]], stores: Optional[Iterable[Any]],
                       household_servings: int, *, planning_days: int = 7) -> Dict[str, List[GroceryLineItem]]:
    """Merge the ingredients of every planned recipe slot into store-grouped line items.

    Args:
        week_plan: WeekPlan to walk; only the first planning_days days count.
        recipes: recipes the plan may reference; unknown ids are skipped.
        pantry: ingredient names already at home, never added to the list.
        ingredient_catalog: name -> preferred store, used for ingredients without a store.
        stores: custom store names (defaults and Unassigned are always present).
        household_servings: target servings when a slot has no override.

    Returns:
        Dict store -> list of GroceryLineItem sorted by name. Every store is a key.
    """
    store_list = normalize_store_list(stores)
    recipe_index = {recipe.id: recipe for recipe in recipes}
    pantry_set = {normalize_name(p) for p in pantry}
    household = normalize_servings(household_servings, DEFAULT_SERVINGS)
    shopping = ShoppingList()

    for day in _active_days(planning_days):
        day_plan = week_plan.days.get(day)
        if day_plan is None or day_plan.day_mode != "planned":
            continue
        for slot in MEAL_SLOTS:
            meal = day_plan.meals.get(slot)
            if meal is None or meal.mode != "recipe" or not meal.recipe_id:
                continue
            recipe = recipe_index.get(meal.recipe_id)
            if recipe is None:
                logger.debug("Skipping %s %s: recipe %s no longer exists", day, slot, meal.recipe_id)
                continue
            override = meal.servings_override if meal.servings_override is not None else household
            scale = recipe_scale(recipe, override, household)
            for ing in recipe.ingredients:
                name = normalize_name(ing.name)
                if not name or name in pantry_set:
                    continue
                if ing.store and ing.store != UNASSIGNED:
                    store = pick_store(ing.store, store_list)
                else:
                    store = catalog_store(name, ingredient_catalog, store_list)
                qty = ing.qty if isinstance(ing.qty, (int, float)) and math.isfinite(ing.qty) else 1.0
                shopping.add_item(name, qty * scale, normalize_unit(ing.unit), store)

    grouped: Dict[str, List[GroceryLineItem]] = {store: [] for store in store_list}
    for item in shopping.get_items():
        grouped.setdefault(item.store, []).append(item)
    for store in grouped:
        grouped[store].sort(key=_sort_key)
    return grouped


def group_groceries(state: PlannerState) -> Dict[str, List[GroceryLineItem]]:
    return build_grocery_list(
        state.week_plan,
        state.recipes,
        state.pantry,
        state.ingredient_catalog,
        state.stores,
        state.household_servings,
        planning_days=state.planning_days,
    )


def count_items(grouped: Mapping[str, List[GroceryLineItem]]) -> int:
    return sum(len(items) for items in grouped.values())


def build_week_balance(state: PlannerState) -> Dict[str, int]:
    """Summary counts for the active days: planned, quick, high-protein and leftovers meals."""
    active_days = _active_days(state.planning_days)
    recipe_index = state.recipes_by_id
    chosen: List[Recipe] = []
    leftover_slots = 0
    override_days = 0

    for day in active_days:
        day_plan = state.week_plan.days.get(day)
        if day_plan is None:
            continue
        if day_plan.day_mode != "planned":
            override_days += 1
            if day_plan.day_mode == "leftovers":
                leftover_slots += len(MEAL_SLOTS)
            continue
        for slot in MEAL_SLOTS:
            meal = day_plan.meals[slot]
            if meal.mode == "leftovers":
                leftover_slots += 1
            elif meal.mode == "recipe" and meal.recipe_id in recipe_index:
                chosen.append(recipe_index[meal.recipe_id])

    def tagged(pattern) -> int:
        return sum(1 for r in chosen if any(pattern.search(t) for t in r.tags))

    return {
        "quickMeals": tagged(_QUICK_TAG_RE),
        "proteinMeals": tagged(_PROTEIN_TAG_RE),
        "leftoversMeals": tagged(_LEFTOVERS_TAG_RE) + leftover_slots,
        "overrideDays": override_days,
        "plannedMeals": len(chosen),
        "householdServings": state.household_servings,
        "planningDays": len(active_days),
    }


__all__ = ['recipe_scale', 'build_grocery_list', 'group_groceries', 'count_items', 'build_week_balance']
