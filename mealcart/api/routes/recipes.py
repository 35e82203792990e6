import logging

from fastapi import APIRouter, Body, HTTPException

from mealcart.infra.State_Repository import (
    InvalidRecipeError,
    RecipeConflictError,
    RecipeNotFoundError,
    StateRepository,
)

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


@router.get("/state")
def get_state():
    return StateRepository().get_state().to_dict()


@router.put("/state")
def put_state(payload=Body(default=None)):
    state = StateRepository().replace_state(payload)
    if state is None:
        raise HTTPException(status_code=400, detail="State payload is invalid.")
    return state.to_dict()


@router.get("/recipes")
def list_recipes():
    return [recipe.to_dict() for recipe in StateRepository().list_recipes()]


@router.post("/recipes", status_code=201)
def create_recipe(payload=Body(default=None)):
    try:
        recipe = StateRepository().create_recipe(payload)
    except RecipeConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidRecipeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return recipe.to_dict()


@router.put("/recipes/{recipe_id}")
def update_recipe(recipe_id: str, payload=Body(default=None)):
    try:
        recipe = StateRepository().update_recipe(recipe_id, payload)
    except RecipeNotFoundError:
        raise HTTPException(status_code=404, detail="Recipe not found.")
    except InvalidRecipeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return recipe.to_dict()


@router.delete("/recipes/{recipe_id}")
def delete_recipe(recipe_id: str):
    try:
        return StateRepository().delete_recipe(recipe_id)
    except RecipeNotFoundError:
        raise HTTPException(status_code=404, detail="Recipe not found.")
