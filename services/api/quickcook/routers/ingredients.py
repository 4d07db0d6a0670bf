"""Ingredient endpoints. Access always goes through the parent recipe's owner.

Endpoints:
- GET /api/ingredients/recipe/{recipe_id} - List a recipe's ingredients
- POST /api/ingredients - Add an ingredient to a recipe
- PUT /api/ingredients/{id} - Merge-patch an ingredient
- DELETE /api/ingredients/{id} - Delete one ingredient
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..deps import get_current_identity, get_db
from ..schemas import (
    IngredientCreate,
    IngredientOut,
    IngredientPatch,
    IngredientResponse,
    MessageResponse,
)
from ..security import Identity
from ..services import aggregates, queries
from ..services.ownership import authorize_ingredient, authorize_recipe

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("/recipe/{recipe_id}", response_model=list[IngredientOut])
def list_recipe_ingredients(
    recipe_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    recipe = authorize_recipe(db, identity, recipe_id)
    return queries.list_ingredients(db, recipe)


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def add_ingredient(
    payload: IngredientCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    recipe = authorize_recipe(db, identity, payload.recipe_id)
    ingredient = aggregates.add_ingredient(
        db, recipe, payload.model_dump(exclude={"recipe_id"})
    )
    return IngredientResponse(
        message="Ingredient added.",
        ingredient=IngredientOut.model_validate(ingredient),
    )


@router.put("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: str,
    payload: IngredientPatch,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ingredient = authorize_ingredient(db, identity, ingredient_id)
    ingredient = aggregates.update_ingredient(
        db, ingredient, payload.model_dump(exclude_unset=True)
    )
    return IngredientResponse(
        message="Ingredient updated.",
        ingredient=IngredientOut.model_validate(ingredient),
    )


@router.delete("/{ingredient_id}", response_model=MessageResponse)
def delete_ingredient(
    ingredient_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ingredient = authorize_ingredient(db, identity, ingredient_id)
    aggregates.delete_ingredient(db, ingredient)
    return MessageResponse(message="Ingredient deleted.")
