import unittest
from mealcart.domain.Ingredient import Ingredient
from mealcart.domain.Recipe import Recipe, infer_meal_type, normalize_meal_type
from mealcart.domain.ShoppingList import ShoppingList


class TestRecipe(unittest.TestCase):

    def setUp(self):
        self.data = {
            "id": "pancakes",
            "title": "  Pancakes ",
            "mealType": "Breakfast",
            "servings": "2.5",
            "ingredients": [
                {"name": "Flour", "qty": "200", "unit": "grams", "store": "aldi"},
                {"name": "Milk", "qty": -1, "unit": "Cups."},
                {"name": "", "qty": 2},
            ],
            "steps": "1. Mix ingredients\n- Cook on skillet\n\n",
            "tags": ["breakfast", " ", "vegetarian"],
        }

    def test_from_dict_normalizes(self):
        recipe = Recipe.from_dict(self.data)
        self.assertEqual(recipe.id, "pancakes")
        self.assertEqual(recipe.title, "Pancakes")
        self.assertEqual(recipe.meal_type, "breakfast")
        self.assertEqual(recipe.servings, 3)
        self.assertEqual(recipe.ingredients, [
            Ingredient("flour", 200.0, "g", "Aldi"),
            Ingredient("milk", 1.0, "cup", "Unassigned"),
        ])
        self.assertEqual(recipe.steps, ["Mix ingredients", "Cook on skillet"])
        self.assertEqual(recipe.tags, ["breakfast", "vegetarian"])

    def test_from_dict_requires_title_and_ingredients(self):
        self.assertIsNone(Recipe.from_dict({"title": "Empty", "ingredients": []}))
        self.assertIsNone(Recipe.from_dict({"ingredients": [{"name": "Milk"}]}))
        self.assertIsNone(Recipe.from_dict("not a recipe"))

    def test_extracted_dict_has_no_id(self):
        data = Recipe.from_dict(self.data).to_extracted_dict()
        self.assertNotIn("id", data)
        self.assertEqual(data["sourceUrl"], "")

    def test_meal_types(self):
        self.assertEqual(normalize_meal_type("brunch"), "dinner")
        self.assertEqual(infer_meal_type(["Chicken Salad Sandwich"]), "lunch")
        self.assertEqual(infer_meal_type(["Beef stew"]), "dinner")


class TestShoppingList(unittest.TestCase):

    def test_add_item_merges_same_store_name_unit(self):
        shopping = ShoppingList()
        shopping.add_item("rice", 1, "cup", "Aldi")
        shopping.add_item("rice", 2, "cup", "Aldi")
        shopping.add_item("rice", 1, "lb", "Aldi")
        self.assertEqual(len(shopping), 2)
        self.assertEqual(shopping.items[("Aldi", "rice", "cup")].qty, 3)

    def test_total_is_the_same_in_any_order(self):
        forward, backward = ShoppingList(), ShoppingList()
        for qty in (0.1, 0.2, 0.3):
            forward.add_item("olive oil", qty, "tbsp", "Target")
        for qty in (0.3, 0.2, 0.1):
            backward.add_item("olive oil", qty, "tbsp", "Target")
        self.assertEqual(forward.get_items()[0].qty, 0.6)
        self.assertEqual(backward.get_items()[0].qty, 0.6)


if __name__ == '__main__':
    unittest.main()
