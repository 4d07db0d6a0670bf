"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - List the caller's recipes (optional ?search, ?category)
- POST /api/recipes - Create a recipe with optional ingredients
- GET /api/recipes/{id} - Get a recipe with its ingredients
- PUT /api/recipes/{id} - Merge-patch a recipe
- DELETE /api/recipes/{id} - Delete a recipe and its ingredients
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..deps import get_current_identity, get_db
from ..schemas import (
    MessageResponse,
    RecipeCreate,
    RecipeListOut,
    RecipeOut,
    RecipePatch,
    RecipeResponse,
)
from ..security import Identity
from ..services import aggregates, queries
from ..services.ownership import authorize_recipe

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=list[RecipeListOut])
def list_recipes(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """List the caller's recipes, newest first."""
    return queries.list_recipes(db, identity.user_id, search=search, category=category)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Create a recipe and its ingredients in one transaction."""
    fields = payload.model_dump(exclude={"ingredients"})
    ingredients = [i.model_dump() for i in payload.ingredients or []]
    recipe = aggregates.create_recipe_with_ingredients(
        db, identity.user_id, fields, ingredients
    )
    return RecipeResponse(
        message="Recipe created successfully.",
        recipe=RecipeOut.model_validate(recipe),
    )


@router.get("/{recipe_id}", response_model=RecipeOut)
def get_recipe(
    recipe_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Get a recipe by ID with all ingredients."""
    recipe = authorize_recipe(db, identity, recipe_id)
    return RecipeOut.model_validate(recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: str,
    payload: RecipePatch,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Update only the fields present in the body."""
    recipe = authorize_recipe(db, identity, recipe_id)
    recipe = aggregates.update_recipe(db, recipe, payload.model_dump(exclude_unset=True))
    return RecipeResponse(
        message="Recipe updated successfully.",
        recipe=RecipeOut.model_validate(recipe),
    )


@router.delete("/{recipe_id}", response_model=MessageResponse)
def delete_recipe(
    recipe_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    recipe = authorize_recipe(db, identity, recipe_id)
    aggregates.delete_recipe(db, recipe)
    return MessageResponse(message="Recipe deleted successfully.")
