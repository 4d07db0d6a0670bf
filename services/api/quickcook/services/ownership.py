"""Ownership checks for recipes and ingredients.

Every resource kind maps to one owner query returning ``(record, owner_id)``.
Recipes carry their owner directly; ingredients are resolved through a join
on the parent recipe, so an ingredient never needs an owner column.

Missing and foreign records both raise ``NotFoundOrDenied``. Nothing is
cached: each call reads the current stored state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ..errors import NotFoundOrDenied
from ..models import Ingredient, Recipe
from ..security import Identity

logger = logging.getLogger("quickcook.ownership")

ResourceKind = Literal["recipe", "ingredient"]
Owned = Union[Recipe, Ingredient]


@dataclass(frozen=True)
class ResourceRef:
    kind: ResourceKind
    id: str

    @classmethod
    def recipe(cls, recipe_id: str) -> "ResourceRef":
        return cls("recipe", recipe_id)

    @classmethod
    def ingredient(cls, ingredient_id: str) -> "ResourceRef":
        return cls("ingredient", ingredient_id)


def _recipe_owner(resource_id: str) -> Select:
    return select(Recipe, Recipe.user_id).where(Recipe.id == resource_id)


def _ingredient_owner(resource_id: str) -> Select:
    return (
        select(Ingredient, Recipe.user_id)
        .join(Recipe, Ingredient.recipe_id == Recipe.id)
        .where(Ingredient.id == resource_id)
    )


OWNER_QUERIES: dict[str, Callable[[str], Select]] = {
    "recipe": _recipe_owner,
    "ingredient": _ingredient_owner,
}


def resolve_owner(db: Session, ref: ResourceRef) -> tuple[Optional[Owned], Optional[str]]:
    """Return the addressed record and the id of the user who owns it."""
    build_query = OWNER_QUERIES.get(ref.kind)
    if build_query is None:
        raise ValueError(f"Unknown resource kind: {ref.kind!r}")

    row = db.execute(build_query(ref.id)).first()
    if row is None:
        return None, None
    return row[0], row[1]


def authorize(db: Session, identity: Identity, ref: ResourceRef) -> Owned:
    """Return the record if ``identity`` owns it, else raise NotFoundOrDenied."""
    record, owner_id = resolve_owner(db, ref)
    if record is None or owner_id != identity.user_id:
        logger.info(
            f"Denied {ref.kind} {ref.id} for user {identity.user_id}"
        )
        raise NotFoundOrDenied(ref.kind)
    return record


def authorize_recipe(db: Session, identity: Identity, recipe_id: str) -> Recipe:
    return authorize(db, identity, ResourceRef.recipe(recipe_id))


def authorize_ingredient(db: Session, identity: Identity, ingredient_id: str) -> Ingredient:
    return authorize(db, identity, ResourceRef.ingredient(ingredient_id))
