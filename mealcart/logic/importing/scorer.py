"""Ranking of extractions when the same URL was fetched more than one way.

A direct fetch and a read-proxy fetch of one page often disagree: one side
may have picked up a related-recipes widget as "steps". Each extraction is
sanitized and scored, and the best one wins with ties going to fetch order.
"""
from __future__ import annotations
import logging
import re
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from mealcart.domain.Recipe import Recipe
from mealcart.logic.importing.extractor import extract_recipe_from_web_text

logger = logging.getLogger(__name__)

__all__ = [
    "ImportCandidate", "is_meaningful", "sanitize_imported_recipe",
    "imported_recipe_score", "select_best_candidate",
]

MAX_INGREDIENTS = 40
MAX_STEPS = 25
SCORING_INGREDIENT_LIMIT = 25
SCORING_STEP_LIMIT = 15

_SEPARATOR_RE = re.compile(r"^[-_=~*•|]+$")
_MD_IMAGE_RE = re.compile(r"^!\[[^\]]*\]\([^)]+\)$")
_MD_LINK_RE = re.compile(r"^\[[^\]]+\]\(https?://[^)]+\)$")
_MEDIA_PREFIX_RE = re.compile(r"^(image|photo)\b", re.I)
_LETTER_RE = re.compile(r"[^\W\d_]")


class ImportCandidate(NamedTuple):
    recipe: Recipe
    source: str
    score: int


def is_meaningful(value: Any) -> bool:
    normalized = str(value or "").strip()
    if len(normalized) < 3:
        return False
    if _SEPARATOR_RE.match(normalized) or _MD_IMAGE_RE.match(normalized) or _MD_LINK_RE.match(normalized):
        return False
    if _MEDIA_PREFIX_RE.match(normalized):
        return False
    return bool(_LETTER_RE.search(normalized))


def sanitize_imported_recipe(recipe: Recipe) -> Recipe:
    '''Drops meaningless ingredients/steps and caps both lists for persistence.'''
    ingredients = [ing for ing in recipe.ingredients if is_meaningful(ing.name)]
    steps = [step for step in recipe.steps if is_meaningful(step)]
    return recipe.copy(ingredients=ingredients[:MAX_INGREDIENTS], steps=steps[:MAX_STEPS])


def imported_recipe_score(recipe: Optional[Recipe]) -> int:
    if recipe is None:
        return 0
    valid_ingredients = sum(1 for ing in recipe.ingredients if is_meaningful(ing.name))
    valid_steps = sum(1 for step in recipe.steps if is_meaningful(step))
    invalid_ingredients = len(recipe.ingredients) - valid_ingredients
    invalid_steps = len(recipe.steps) - valid_steps
    return (
        (1 if recipe.title.strip() else 0)
        + (1 if recipe.description.strip() else 0)
        + 4 * valid_ingredients
        + 4 * valid_steps
        - 2 * invalid_ingredients
        - 2 * invalid_steps
        - 3 * max(0, valid_ingredients - SCORING_INGREDIENT_LIMIT)
        - 10 * max(0, valid_steps - SCORING_STEP_LIMIT)
    )


def select_best_candidate(sources: Sequence[Tuple[str, str]], source_url: str,
                          ingredient_catalog: Optional[Mapping[str, Any]] = None,
                          stores: Optional[Iterable[Any]] = None) -> Optional[ImportCandidate]:
    """
    Extract, sanitize and score every (label, text) fetch result.

    Returns the highest scoring candidate, or None when no text could be
    extracted at all.
    """
    stores = list(stores) if stores is not None else None
    candidates: List[ImportCandidate] = []
    for label, text in sources:
        try:
            recipe = sanitize_imported_recipe(
                extract_recipe_from_web_text(text, source_url, ingredient_catalog, stores)
            )
        except Exception as e:
            logger.warning("Extraction from %s fetch of %s failed: %s", label, source_url, e)
            continue
        candidates.append(ImportCandidate(recipe, label, imported_recipe_score(recipe)))

    if not candidates:
        return None
    # sorted() is stable, so equal scores keep fetch order
    best = sorted(candidates, key=lambda c: c.score, reverse=True)[0]
    logger.debug("Import candidates for %s: %s", source_url, [(c.source, c.score) for c in candidates])
    return best
