import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from mealcart.domain.PlannerState import PlannerState
from mealcart.domain.Recipe import Recipe, new_recipe_id
from mealcart.infra.paths import STATE_FILE

logger = logging.getLogger(__name__)


class RecipeNotFoundError(KeyError):
    pass


class RecipeConflictError(ValueError):
    pass


class InvalidRecipeError(ValueError):
    pass


def _atomic_write(path: Path, payload: dict):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), prefix=".state_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(payload, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class StateRepository:
    """Planner state persisted as one JSON document."""

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else None

    @property
    def path(self) -> Path:
        return self._path or STATE_FILE

    def _read_raw(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.info(f"State file not found: {self.path}. Seeding default state.")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in state file: {e}")
            return None
        except OSError as e:
            logger.error(f"Error reading state: {e}")
            return None

    def get_state(self) -> PlannerState:
        '''Loads the saved state; an unusable or missing file is replaced by the seeded default.'''
        state = PlannerState.from_dict(self._read_raw())
        if state is not None:
            return state
        seeded = PlannerState.default()
        self.save_state(seeded)
        return seeded

    def save_state(self, state: PlannerState) -> PlannerState:
        _atomic_write(self.path, state.to_dict())
        return state

    def replace_state(self, raw_state) -> Optional[PlannerState]:
        '''Normalizes and stores a client-submitted state. Returns None if it is invalid.'''
        state = PlannerState.from_dict(raw_state)
        if state is None:
            return None
        return self.save_state(state)

    def list_recipes(self) -> List[Recipe]:
        return self.get_state().recipes

    def create_recipe(self, payload) -> Recipe:
        state = self.get_state()
        data = dict(payload) if isinstance(payload, dict) else {}
        data["id"] = str(data.get("id") or "").strip() or new_recipe_id()
        recipe = Recipe.from_dict(data, state.stores)
        if recipe is None:
            raise InvalidRecipeError("Recipe payload is invalid.")
        if state.find_recipe(recipe.id):
            raise RecipeConflictError("Recipe id already exists.")
        state.recipes.append(recipe)
        state.remember_ingredient_stores(recipe)
        self.save_state(state)
        logger.info("Created recipe %s (%s)", recipe.id, recipe.title)
        return recipe

    def update_recipe(self, recipe_id: str, payload) -> Recipe:
        state = self.get_state()
        if not state.find_recipe(recipe_id):
            raise RecipeNotFoundError("Recipe not found.")
        data = dict(payload) if isinstance(payload, dict) else {}
        data["id"] = recipe_id
        recipe = Recipe.from_dict(data, state.stores)
        if recipe is None:
            raise InvalidRecipeError("Recipe payload is invalid.")
        state.recipes = [recipe if r.id == recipe_id else r for r in state.recipes]
        state.remember_ingredient_stores(recipe)
        self.save_state(state)
        return recipe

    def delete_recipe(self, recipe_id: str) -> dict:
        '''Removes the recipe and turns every plan slot that used it into a skipped slot.'''
        state = self.get_state()
        if not state.find_recipe(recipe_id):
            raise RecipeNotFoundError("Recipe not found.")
        state.recipes = [r for r in state.recipes if r.id != recipe_id]
        cleared = state.week_plan.remove_recipe(recipe_id)
        self.save_state(state)
        logger.info("Deleted recipe %s, cleared %d plan slot(s)", recipe_id, cleared)
        return {"deleted": True, "id": recipe_id}
