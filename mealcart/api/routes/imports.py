import logging

from fastapi import APIRouter, HTTPException

from mealcart.infra.fetch import fetch_recipe_sources, normalize_import_url
from mealcart.logic.importing.scorer import select_best_candidate
from mealcart.logic.ingredients.parser import parse_ingredients_with_diagnostics
from mealcart.utilities.validators import ImportParseRequest, IngredientParseRequest

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


@router.post("/ingredients/parse")
def parse_ingredients(body: IngredientParseRequest):
    """Parse pasted ingredient text; lines that are not ingredients come back in skippedLines."""
    result = parse_ingredients_with_diagnostics(body.text, body.ingredient_catalog, body.stores)
    return {
        "ingredients": [ing.to_dict() for ing in result["ingredients"]],
        "skippedLines": result["skippedLines"],
    }


@router.post("/import/parse")
async def import_recipe(body: ImportParseRequest):
    url = normalize_import_url(body.url)
    if not url:
        raise HTTPException(status_code=400, detail="A valid recipe URL is required.")

    logger.info("Importing recipe from %s", url)
    sources = await fetch_recipe_sources(url)
    if not sources:
        raise HTTPException(status_code=422, detail="Unable to fetch recipe content from this URL.")

    best = select_best_candidate(sources, url, body.ingredient_catalog, body.stores)
    if best is None:
        raise HTTPException(status_code=422, detail="Could not parse recipe sections from this URL.")

    logger.info("Imported '%s' from %s fetch (score %d)", best.recipe.title, best.source, best.score)
    payload = best.recipe.to_extracted_dict()
    payload["source"] = best.source
    return payload
