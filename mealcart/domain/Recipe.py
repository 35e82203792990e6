"""Recipe domain entity: title, meal type, servings, ingredients, steps and source url."""
from uuid import uuid4
from typing import Any, Iterable, List, Optional

from mealcart.domain.Ingredient import Ingredient
from mealcart.logic.ingredients.normalize import normalize_servings, normalize_steps
from mealcart.utilities.constants import (
    DEFAULT_MEAL_TYPE, DEFAULT_SERVINGS, MEAL_SLOTS, MEAL_TYPE_KEYWORDS,
)


def new_recipe_id() -> str:
    return f"recipe_{uuid4().hex[:8]}"


def normalize_meal_type(value: Any, fallback: str = DEFAULT_MEAL_TYPE) -> str:
    normalized = str(value or "").strip().lower()
    return normalized if normalized in MEAL_SLOTS else fallback


def infer_meal_type(parts: Iterable[Any], fallback: str = DEFAULT_MEAL_TYPE) -> str:
    '''Guesses breakfast/lunch/dinner from category, keywords or title text.'''
    content = " ".join(str(p) for p in parts if p)
    for meal_type, pattern in MEAL_TYPE_KEYWORDS:
        if pattern.search(content):
            return meal_type
    return fallback


class Recipe:
    def __init__(self, title: str = "", meal_type: str = DEFAULT_MEAL_TYPE, description: str = "",
                 servings: int = DEFAULT_SERVINGS, ingredients: Optional[List[Ingredient]] = None,
                 steps: Optional[List[str]] = None, source_url: str = "",
                 recipe_id: Optional[str] = None, tags: Optional[List[str]] = None):
        self.id = recipe_id
        self.title = title
        self.meal_type = meal_type
        self.description = description
        self.servings = servings
        self.ingredients = ingredients[:] if ingredients else []
        self.steps = steps[:] if steps else []
        self.source_url = source_url
        self.tags = tags[:] if tags else []

    def __str__(self) -> str:
        return (f"{self.title} - {self.servings} servings - {len(self.ingredients)} ingredients"
                f" - {len(self.steps)} steps")

    __repr__ = __str__

    def copy(self, **changes) -> "Recipe":
        fields = {
            "title": self.title,
            "meal_type": self.meal_type,
            "description": self.description,
            "servings": self.servings,
            "ingredients": self.ingredients,
            "steps": self.steps,
            "source_url": self.source_url,
            "recipe_id": self.id,
            "tags": self.tags,
        }
        fields.update(changes)
        return Recipe(**fields)

    @staticmethod
    def from_dict(data, stores: Optional[Iterable[Any]] = None) -> Optional["Recipe"]:
        '''Normalizes a persisted or submitted recipe. Returns None without a title or ingredients.'''
        d = data if isinstance(data, dict) else {}
        title = str(d.get("title") or "").strip()
        raw_ingredients = d.get("ingredients") if isinstance(d.get("ingredients"), list) else []
        ingredients = [ing for ing in (Ingredient.from_dict(i, stores) for i in raw_ingredients) if ing]
        if not title or not ingredients:
            return None
        tags = d.get("tags") if isinstance(d.get("tags"), list) else []
        return Recipe(
            title=title,
            meal_type=normalize_meal_type(d.get("mealType")),
            description=str(d.get("description") or "").strip(),
            servings=normalize_servings(d.get("servings")),
            ingredients=ingredients,
            steps=normalize_steps(d.get("steps")),
            source_url=str(d.get("sourceUrl") or "").strip(),
            recipe_id=str(d.get("id") or "").strip() or new_recipe_id(),
            tags=[str(t).strip() for t in tags if str(t).strip()],
        )

    def to_extracted_dict(self):
        '''The import result shape: no id or tags, those are assigned when the draft is saved.'''
        return {
            "title": self.title,
            "mealType": self.meal_type,
            "description": self.description,
            "servings": self.servings,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "steps": self.steps,
            "sourceUrl": self.source_url,
        }

    def to_dict(self):
        data = self.to_extracted_dict()
        data["id"] = self.id
        data["tags"] = self.tags
        return data
