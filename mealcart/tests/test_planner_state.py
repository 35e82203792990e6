import json
import os
import tempfile
import unittest
from pathlib import Path

from mealcart.domain.Plan import DayPlan, WeekPlan
from mealcart.domain.PlannerState import PlannerState
from mealcart.infra.State_Repository import (
    InvalidRecipeError,
    RecipeConflictError,
    RecipeNotFoundError,
    StateRepository,
)

RECIPE = {
    "id": "tacos",
    "title": "Fish Tacos",
    "servings": 2,
    "ingredients": [{"name": "Cod", "qty": 1, "unit": "lb", "store": "Sprouts"}],
    "steps": ["1. Bake cod.", "2. Build tacos."],
}


class TestPlannerStateHydration(unittest.TestCase):

    def test_default_state(self):
        state = PlannerState.default()
        self.assertEqual(len(state.recipes), 4)
        self.assertEqual(state.stores[-1], "Unassigned")
        self.assertEqual(state.planning_days, 7)
        monday = state.week_plan.days["Monday"]
        self.assertEqual(monday.meals["dinner"].recipe_id, state.recipes[0].id)
        self.assertEqual(monday.meals["breakfast"].mode, "skip")
        self.assertEqual(state.ingredient_catalog["olive oil"]["store"], "Target")

    def test_unusable_payloads(self):
        self.assertIsNone(PlannerState.from_dict(None))
        self.assertIsNone(PlannerState.from_dict({"recipes": []}))
        self.assertIsNone(PlannerState.from_dict({"recipes": [{"title": "No ingredients"}]}))

    def test_normalizes_fields(self):
        state = PlannerState.from_dict({
            "recipes": [RECIPE],
            "stores": ["Costco", "target", ""],
            "pantry": ["Salt", "salt", " "],
            "householdServings": "3",
            "planningDays": 12,
            "ingredientCatalog": {"Rice": "costco", "Beans": {"store": "Nowhere"}},
            "mealPlanName": "x" * 100,
        })
        self.assertEqual(state.stores, ["Target", "Sprouts", "Aldi", "Trader Joe's", "Costco", "Unassigned"])
        self.assertEqual(state.pantry, ["salt"])
        self.assertEqual(state.household_servings, 3)
        self.assertEqual(state.planning_days, 7)
        self.assertEqual(state.ingredient_catalog["rice"], {"store": "Costco", "tag": ""})
        self.assertNotIn("beans", state.ingredient_catalog)
        self.assertEqual(state.ingredient_catalog["cod"]["store"], "Sprouts")
        self.assertEqual(len(state.meal_plan_name), 80)
        self.assertEqual(state.recipes[0].steps, ["Bake cod.", "Build tacos."])

    def test_legacy_week_plan_shapes(self):
        plan = WeekPlan.from_dict({
            "Monday": "tacos",
            "Tuesday": {"recipeId": "tacos", "servingsOverride": 6},
            "Wednesday": {"dayMode": "eat-out", "meals": {"lunch": {"mode": "recipe", "recipeId": "tacos"}}},
        }, ["tacos"])
        self.assertEqual(plan.days["Monday"].meals["dinner"].recipe_id, "tacos")
        self.assertEqual(plan.days["Tuesday"].meals["dinner"].servings_override, 6)
        self.assertEqual(plan.days["Wednesday"].day_mode, "eat-out")
        self.assertEqual(plan.days["Wednesday"].meals["lunch"].recipe_id, "tacos")
        self.assertEqual(plan.days["Wednesday"].meals["dinner"].mode, "skip")

    def test_round_trip_keeps_plan(self):
        state = PlannerState.default()
        state.week_plan.days["Friday"] = DayPlan("leftovers")
        again = PlannerState.from_dict(state.to_dict())
        self.assertEqual(again.to_dict(), state.to_dict())


class TestStateRepository(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "data" / "state.json"
        self.repo = StateRepository(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_is_seeded_and_saved(self):
        state = self.repo.get_state()
        self.assertTrue(self.path.exists())
        with open(self.path, encoding="utf-8") as f:
            saved = json.load(f)
        self.assertEqual([r["id"] for r in saved["recipes"]], [r.id for r in state.recipes])

    def test_corrupt_file_is_replaced(self):
        os.makedirs(self.path.parent)
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(len(self.repo.get_state().recipes), 4)

    def test_replace_state(self):
        self.assertIsNone(self.repo.replace_state({"recipes": []}))
        state = self.repo.replace_state({"recipes": [RECIPE]})
        self.assertEqual([r.id for r in self.repo.get_state().recipes], ["tacos"])
        self.assertEqual(state.week_plan.days["Monday"].meals["dinner"].recipe_id, "tacos")

    def test_create_recipe(self):
        recipe = self.repo.create_recipe(RECIPE)
        self.assertEqual(recipe.id, "tacos")
        state = self.repo.get_state()
        self.assertEqual(len(state.recipes), 5)
        self.assertEqual(state.ingredient_catalog["cod"]["store"], "Sprouts")

    def test_create_assigns_an_id(self):
        recipe = self.repo.create_recipe({k: v for k, v in RECIPE.items() if k != "id"})
        self.assertTrue(recipe.id.startswith("recipe_"))

    def test_create_duplicate_id(self):
        self.repo.create_recipe(RECIPE)
        with self.assertRaises(RecipeConflictError):
            self.repo.create_recipe(RECIPE)

    def test_create_invalid(self):
        with self.assertRaises(InvalidRecipeError):
            self.repo.create_recipe({"title": "Empty"})

    def test_update_recipe(self):
        self.repo.create_recipe(RECIPE)
        updated = self.repo.update_recipe("tacos", dict(RECIPE, id="other", title="Shrimp Tacos"))
        self.assertEqual(updated.id, "tacos")
        self.assertEqual(self.repo.get_state().find_recipe("tacos").title, "Shrimp Tacos")
        with self.assertRaises(RecipeNotFoundError):
            self.repo.update_recipe("missing", RECIPE)

    def test_delete_recipe_clears_plan_slots(self):
        state = self.repo.get_state()
        first_id = state.recipes[0].id
        result = self.repo.delete_recipe(first_id)
        self.assertEqual(result, {"deleted": True, "id": first_id})

        state = self.repo.get_state()
        self.assertIsNone(state.find_recipe(first_id))
        for day in ("Monday", "Friday"):
            dinner = state.week_plan.days[day].meals["dinner"]
            self.assertEqual(dinner.mode, "skip")
            self.assertIsNone(dinner.recipe_id)
        with self.assertRaises(RecipeNotFoundError):
            self.repo.delete_recipe(first_id)


if __name__ == '__main__':
    unittest.main()
