"""Plan domain entities: a week of DayPlans, each with breakfast/lunch/dinner MealPlans."""
from typing import Any, Dict, List, Optional

from mealcart.logic.ingredients.normalize import parse_optional_servings
from mealcart.utilities.constants import DAY_MODES, DAYS, MEAL_MODES, MEAL_SLOTS


def _normalize_mode(value: Any, allowed, fallback: str) -> str:
    normalized = str(value or "").strip().lower()
    return normalized if normalized in allowed else fallback


class MealPlan:
    def __init__(self, mode: str = "skip", recipe_id: Optional[str] = None,
                 servings_override: Optional[int] = None):
        self.mode = _normalize_mode(mode, MEAL_MODES, "skip")
        # recipe_id only means something for recipe slots
        self.recipe_id = (str(recipe_id).strip() or None) if recipe_id and self.mode == "recipe" else None
        self.servings_override = parse_optional_servings(servings_override)

    def __repr__(self) -> str:
        return f"MealPlan({self.mode!r}, {self.recipe_id!r}, {self.servings_override!r})"

    @staticmethod
    def from_dict(data) -> "MealPlan":
        if not isinstance(data, dict):
            return MealPlan()
        return MealPlan(data.get("mode"), data.get("recipeId"), data.get("servingsOverride"))

    def to_dict(self):
        return {
            "mode": self.mode,
            "recipeId": self.recipe_id,
            "servingsOverride": self.servings_override,
        }


class DayPlan:
    def __init__(self, day_mode: str = "planned", meals: Optional[Dict[str, MealPlan]] = None):
        self.day_mode = _normalize_mode(day_mode, DAY_MODES, "planned")
        meals = meals or {}
        self.meals: Dict[str, MealPlan] = {slot: meals.get(slot) or MealPlan() for slot in MEAL_SLOTS}

    def __repr__(self) -> str:
        return f"DayPlan({self.day_mode!r}, {self.meals!r})"

    @staticmethod
    def default(recipe_ids: List[str], day_index: int = 0) -> "DayPlan":
        '''Dinner rotates through the recipe list; breakfast and lunch start skipped.'''
        dinner_id = recipe_ids[day_index % len(recipe_ids)] if recipe_ids else None
        dinner = MealPlan("recipe", dinner_id) if dinner_id else MealPlan()
        return DayPlan("planned", {"dinner": dinner})

    @staticmethod
    def from_dict(data, recipe_ids: Optional[List[str]] = None, day_index: int = 0) -> "DayPlan":
        fallback = DayPlan.default(recipe_ids or [], day_index)
        if not data:
            return fallback
        # Oldest saves stored only the dinner recipe id per day
        if isinstance(data, str):
            fallback.meals["dinner"] = MealPlan("recipe", data)
            return fallback
        if not isinstance(data, dict):
            return fallback

        day = DayPlan(data.get("dayMode"), dict(fallback.meals))
        legacy_recipe_id = str(data.get("recipeId") or "").strip()
        if legacy_recipe_id:
            day.meals["dinner"] = MealPlan("recipe", legacy_recipe_id, data.get("servingsOverride"))
        if isinstance(data.get("meals"), dict):
            for slot in MEAL_SLOTS:
                day.meals[slot] = MealPlan.from_dict(data["meals"].get(slot))
        return day

    def to_dict(self):
        return {
            "dayMode": self.day_mode,
            "meals": {slot: meal.to_dict() for slot, meal in self.meals.items()},
        }


class WeekPlan:
    def __init__(self, days: Optional[Dict[str, DayPlan]] = None):
        days = days or {}
        self.days: Dict[str, DayPlan] = {day: days.get(day) or DayPlan() for day in DAYS}

    def __repr__(self) -> str:
        return f"WeekPlan({self.days!r})"

    @staticmethod
    def default(recipe_ids: List[str]) -> "WeekPlan":
        return WeekPlan({day: DayPlan.default(recipe_ids, i) for i, day in enumerate(DAYS)})

    @staticmethod
    def from_dict(data, recipe_ids: Optional[List[str]] = None) -> "WeekPlan":
        source = data if isinstance(data, dict) else {}
        return WeekPlan({
            day: DayPlan.from_dict(source.get(day), recipe_ids, i) for i, day in enumerate(DAYS)
        })

    def remove_recipe(self, recipe_id: str) -> int:
        '''Turns every slot pointing at recipe_id into a skipped slot. Returns the number of slots changed.'''
        changed = 0
        for day in self.days.values():
            for slot, meal in day.meals.items():
                if meal.recipe_id == recipe_id:
                    day.meals[slot] = MealPlan("skip", None, meal.servings_override)
                    changed += 1
        return changed

    def to_dict(self):
        return {day: plan.to_dict() for day, plan in self.days.items()}
