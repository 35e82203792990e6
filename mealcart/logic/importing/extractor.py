"""Recipe extraction from raw page text.

Strategies run in priority order (JSON-LD, site adapter, generic heuristic).
The first usable candidate wins; when none is usable the result is merged
field by field from whatever the strategies did find. A Recipe is always
returned, even for empty input.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from mealcart.domain.Recipe import Recipe
from mealcart.logic.importing.adapters import extract_adapter_recipe
from mealcart.logic.importing.heuristic import extract_heuristic_recipe, title_from_source_url
from mealcart.logic.importing.jsonld import extract_jsonld_recipe
from mealcart.utilities.constants import DEFAULT_MEAL_TYPE, DEFAULT_SERVINGS

logger = logging.getLogger(__name__)

__all__ = ["STRATEGIES", "candidate_score", "is_usable", "compose_fallback", "extract_recipe_from_web_text"]

MIN_USABLE_SCORE = 3

Strategy = Callable[[str, str, Optional[Mapping[str, Any]], Optional[Iterable[Any]]], Optional[Recipe]]

STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("json-ld", extract_jsonld_recipe),
    ("adapter", extract_adapter_recipe),
    ("heuristic", extract_heuristic_recipe),
)


def candidate_score(recipe: Optional[Recipe]) -> int:
    if recipe is None:
        return 0
    return (1 if recipe.title else 0) + len(recipe.ingredients) + len(recipe.steps)


def is_usable(recipe: Optional[Recipe]) -> bool:
    return (recipe is not None and candidate_score(recipe) >= MIN_USABLE_SCORE
            and bool(recipe.ingredients) and bool(recipe.steps))


def compose_fallback(candidates: List[Tuple[str, Optional[Recipe]]], source_url: str = "") -> Recipe:
    '''
    Field-level merge across candidates (priority order): first non-empty
    title and description, the longest ingredient and step lists (earlier
    strategy on ties), servings and meal type from the first candidate found.
    '''
    found = [recipe for _, recipe in candidates if recipe is not None]
    title = next((r.title for r in found if r.title), "") or title_from_source_url(source_url)
    description = next((r.description for r in found if r.description), "")
    ingredients: list = []
    steps: List[str] = []
    for recipe in found:
        if len(recipe.ingredients) > len(ingredients):
            ingredients = recipe.ingredients
        if len(recipe.steps) > len(steps):
            steps = recipe.steps
    return Recipe(
        title=title,
        meal_type=found[0].meal_type if found else DEFAULT_MEAL_TYPE,
        description=description,
        servings=found[0].servings if found else DEFAULT_SERVINGS,
        ingredients=ingredients,
        steps=steps,
        source_url=source_url,
    )


def extract_recipe_from_web_text(text: Any, source_url: str = "",
                                 ingredient_catalog: Optional[Mapping[str, Any]] = None,
                                 stores: Optional[Iterable[Any]] = None) -> Recipe:
    """Best-effort recipe for one page of text."""
    raw = str(text or "")
    url = str(source_url or "")
    candidates: List[Tuple[str, Optional[Recipe]]] = []
    for label, strategy in STRATEGIES:
        recipe = strategy(raw, url, ingredient_catalog, stores)
        if is_usable(recipe):
            logger.debug("Extraction strategy %s won for %s (score %d)", label, url, candidate_score(recipe))
            return recipe
        candidates.append((label, recipe))

    logger.debug("No usable extraction for %s, composing fallback from %s",
                 url, [label for label, r in candidates if r is not None])
    return compose_fallback(candidates, url)
