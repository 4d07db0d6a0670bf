from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Ingredient, Recipe

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def list_recipes(
    db: Session,
    owner_id: str,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> list[Recipe]:
    """Recipes owned by ``owner_id``, newest first.

    ``search`` is a case-insensitive substring match on the title and
    ``category`` an exact match; both must hold when given.
    """
    query = select(Recipe).where(Recipe.user_id == owner_id)

    if search:
        query = query.where(
            Recipe.title.ilike(f"%{_escape_like(search)}%", escape=LIKE_ESCAPE)
        )

    if category:
        query = query.where(Recipe.category == category)

    query = query.order_by(Recipe.created_at.desc(), Recipe.seq.desc())
    return list(db.scalars(query).all())


def list_ingredients(db: Session, recipe: Recipe) -> list[Ingredient]:
    """Ingredients of an already-authorized recipe, in submission order."""
    query = (
        select(Ingredient)
        .where(Ingredient.recipe_id == recipe.id)
        .order_by(Ingredient.position, Ingredient.id)
    )
    return list(db.scalars(query).all())
