"""PlannerState aggregate: everything a household saves (recipes, stores, pantry, catalog, week plan)."""
from typing import Any, Dict, List, Optional

from mealcart.domain.Plan import WeekPlan
from mealcart.domain.Recipe import Recipe
from mealcart.logic.ingredients.normalize import (
    normalize_name, normalize_servings, normalize_store_list, pick_store,
)
from mealcart.utilities.config import DEFAULT_HOUSEHOLD_SERVINGS
from mealcart.utilities.constants import DAYS, UNASSIGNED

DEFAULT_PANTRY = ("salt", "black pepper", "olive oil")
MEAL_PLAN_NAME_MAX = 80
MEAL_PLAN_DESCRIPTION_MAX = 280

SEED_RECIPES: List[Dict[str, Any]] = [
    {
        "title": "Sheet Pan Chicken + Veg",
        "mealType": "dinner",
        "description": "A balanced weeknight bake with minimal cleanup.",
        "servings": 4,
        "tags": ["high-protein", "45-min", "leftovers"],
        "ingredients": [
            {"name": "Chicken breast", "qty": 1.5, "unit": "lb", "store": "Sprouts"},
            {"name": "Broccoli", "qty": 2, "unit": "head", "store": "Aldi"},
            {"name": "Sweet potato", "qty": 3, "unit": "each", "store": "Aldi"},
            {"name": "Olive oil", "qty": 2, "unit": "tbsp", "store": "Target"},
        ],
        "steps": [
            "Heat oven to 425F and line a sheet pan.",
            "Toss chicken and vegetables with olive oil, salt, and pepper.",
            "Roast until chicken reaches 165F and vegetables are tender.",
        ],
    },
    {
        "title": "Turkey Taco Bowls",
        "mealType": "dinner",
        "description": "Fast protein-forward dinner bowls with pantry staples.",
        "servings": 4,
        "tags": ["30-min", "high-protein", "kid-friendly"],
        "ingredients": [
            {"name": "Ground turkey", "qty": 1.25, "unit": "lb", "store": "Sprouts"},
            {"name": "Jasmine rice", "qty": 2, "unit": "cup", "store": "Target"},
            {"name": "Black beans", "qty": 1, "unit": "can", "store": "Aldi"},
            {"name": "Salsa", "qty": 1, "unit": "jar", "store": "Target"},
        ],
        "steps": [
            "Cook rice according to package directions.",
            "Brown turkey in a skillet and season to taste.",
            "Warm beans, then build bowls with rice, turkey, beans, and salsa.",
        ],
    },
    {
        "title": "Pesto Pasta + Salmon",
        "mealType": "dinner",
        "description": "Quick pasta and salmon combo with bold flavor.",
        "servings": 4,
        "tags": ["35-min", "omega-3"],
        "ingredients": [
            {"name": "Salmon fillet", "qty": 1.25, "unit": "lb", "store": "Trader Joe's"},
            {"name": "Pasta", "qty": 16, "unit": "oz", "store": "Aldi"},
            {"name": "Pesto", "qty": 1, "unit": "jar", "store": "Trader Joe's"},
            {"name": "Parmesan", "qty": 4, "unit": "oz", "store": "Target"},
        ],
        "steps": [
            "Cook pasta in salted water and reserve a little pasta water.",
            "Bake or pan-sear salmon until cooked through.",
            "Toss pasta with pesto, thin with pasta water, and top with salmon and parmesan.",
        ],
    },
    {
        "title": "Greek Chicken Wraps",
        "mealType": "dinner",
        "description": "No-fuss wraps for busy nights.",
        "servings": 4,
        "tags": ["20-min", "high-protein"],
        "ingredients": [
            {"name": "Rotisserie chicken", "qty": 1, "unit": "each", "store": "Target"},
            {"name": "Greek yogurt", "qty": 24, "unit": "oz", "store": "Target"},
            {"name": "Cucumber", "qty": 1, "unit": "each", "store": "Sprouts"},
            {"name": "Whole wheat wraps", "qty": 1, "unit": "pack", "store": "Aldi"},
        ],
        "steps": [
            "Shred chicken and dice cucumber.",
            "Mix yogurt with lemon, garlic, and herbs for a quick sauce.",
            "Fill wraps with chicken, cucumber, and sauce.",
        ],
    },
]


def normalize_planning_days(value: Any) -> int:
    return min(len(DAYS), max(1, normalize_servings(value, len(DAYS))))


def build_catalog_from_recipes(recipes: List[Recipe], stores: List[str]) -> Dict[str, Dict[str, str]]:
    '''Every ingredient with a known store becomes a catalog entry; later recipes win.'''
    catalog: Dict[str, Dict[str, str]] = {}
    for recipe in recipes:
        for ing in recipe.ingredients:
            store = pick_store(ing.store, stores)
            if ing.name and store != UNASSIGNED:
                catalog[ing.name] = {"store": store, "tag": ""}
    return catalog


def normalize_catalog(raw_catalog: Any, stores: List[str]) -> Dict[str, Dict[str, str]]:
    catalog: Dict[str, Dict[str, str]] = {}
    if not isinstance(raw_catalog, dict):
        return catalog
    for name, entry in raw_catalog.items():
        if isinstance(entry, dict):
            raw_store, tag = entry.get("store") or entry.get("preferredStore"), entry.get("tag")
        else:
            raw_store, tag = entry, ""
        key = normalize_name(name)
        store = pick_store(raw_store, stores)
        if not key or store == UNASSIGNED:
            continue
        catalog[key] = {"store": store, "tag": str(tag or "").strip()}
    return catalog


class PlannerState:
    def __init__(self, recipes: List[Recipe], stores: List[str], pantry: List[str],
                 household_servings: int, ingredient_catalog: Dict[str, Dict[str, str]],
                 planning_days: int, week_plan: WeekPlan,
                 meal_plan_name: str = "", meal_plan_description: str = ""):
        self.recipes = recipes
        self.stores = stores
        self.pantry = pantry
        self.household_servings = household_servings
        self.ingredient_catalog = ingredient_catalog
        self.planning_days = planning_days
        self.week_plan = week_plan
        self.meal_plan_name = meal_plan_name
        self.meal_plan_description = meal_plan_description

    def __str__(self) -> str:
        return (f"PlannerState({len(self.recipes)} recipes, {len(self.stores)} stores,"
                f" {self.planning_days} planning days)")

    __repr__ = __str__

    @property
    def recipes_by_id(self) -> Dict[str, Recipe]:
        return {recipe.id: recipe for recipe in self.recipes}

    def find_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self.recipes_by_id.get(recipe_id)

    def remember_ingredient_stores(self, recipe: Recipe) -> None:
        '''Records the store of every ingredient that has one, so later imports default to it.'''
        for name, entry in build_catalog_from_recipes([recipe], self.stores).items():
            previous = self.ingredient_catalog.get(name) or {}
            self.ingredient_catalog[name] = {"store": entry["store"], "tag": previous.get("tag", "")}

    @staticmethod
    def default() -> "PlannerState":
        stores = normalize_store_list()
        recipes = [Recipe.from_dict(r, stores) for r in SEED_RECIPES]
        return PlannerState(
            recipes=recipes,
            stores=stores,
            pantry=list(DEFAULT_PANTRY),
            household_servings=DEFAULT_HOUSEHOLD_SERVINGS,
            ingredient_catalog=build_catalog_from_recipes(recipes, stores),
            planning_days=len(DAYS),
            week_plan=WeekPlan.default([r.id for r in recipes]),
        )

    @staticmethod
    def from_dict(data) -> Optional["PlannerState"]:
        '''
        Hydrates a saved state. Returns None when the payload is unusable
        (not a dict, or no valid recipes), callers then fall back to default().
        '''
        if not isinstance(data, dict):
            return None
        stores = normalize_store_list(data.get("stores"))
        raw_recipes = data.get("recipes") if isinstance(data.get("recipes"), list) else []
        recipes = [r for r in (Recipe.from_dict(raw, stores) for raw in raw_recipes) if r]
        if not recipes:
            return None

        pantry: List[str] = []
        for item in data.get("pantry") if isinstance(data.get("pantry"), list) else []:
            name = normalize_name(item)
            if name and name not in pantry:
                pantry.append(name)

        catalog = normalize_catalog(data.get("ingredientCatalog"), stores)
        for name, entry in build_catalog_from_recipes(recipes, stores).items():
            catalog.setdefault(name, entry)

        return PlannerState(
            recipes=recipes,
            stores=stores,
            pantry=pantry,
            household_servings=normalize_servings(data.get("householdServings"), DEFAULT_HOUSEHOLD_SERVINGS),
            ingredient_catalog=catalog,
            planning_days=normalize_planning_days(data.get("planningDays")),
            week_plan=WeekPlan.from_dict(data.get("weekPlan"), [r.id for r in recipes]),
            meal_plan_name=str(data.get("mealPlanName") or "").strip()[:MEAL_PLAN_NAME_MAX],
            meal_plan_description=str(data.get("mealPlanDescription") or "").strip()[:MEAL_PLAN_DESCRIPTION_MAX],
        )

    def to_dict(self):
        return {
            "recipes": [r.to_dict() for r in self.recipes],
            "stores": list(self.stores),
            "pantry": list(self.pantry),
            "householdServings": self.household_servings,
            "ingredientCatalog": {k: dict(v) for k, v in self.ingredient_catalog.items()},
            "planningDays": self.planning_days,
            "weekPlan": self.week_plan.to_dict(),
            "mealPlanName": self.meal_plan_name,
            "mealPlanDescription": self.meal_plan_description,
        }
