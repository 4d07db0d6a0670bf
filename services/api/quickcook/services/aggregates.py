"""Writes for the recipe aggregate (a recipe plus its ingredients).

Each public function is one unit of work: it either commits everything it
touched or rolls the session back and raises ``AggregateWriteFailed``. A
write whose target was deleted by a concurrent request after it was
authorized raises ``NotFoundOrDenied`` instead. Callers are expected to
have authorized the recipe/ingredient beforehand.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import AggregateWriteFailed, NotFoundOrDenied
from ..models import Ingredient, Recipe
from .ownership import ResourceRef, resolve_owner

logger = logging.getLogger("quickcook.aggregates")

RECIPE_FIELDS = (
    "title",
    "description",
    "instructions",
    "prep_time",
    "servings",
    "category",
    "image_url",
)
INGREDIENT_FIELDS = ("name", "quantity", "unit")


@contextmanager
def write_unit(
    db: Session, operation: str, target: Optional[ResourceRef] = None
) -> Iterator[None]:
    """Commit on success; roll back and raise AggregateWriteFailed on any datastore error.

    If ``target`` no longer exists once rolled back, the failure is reported
    as NotFoundOrDenied for that resource.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        if target is not None and resolve_owner(db, target)[0] is None:
            logger.info(f"{operation}: {target.kind} {target.id} no longer exists")
            raise NotFoundOrDenied(target.kind) from e
        logger.exception(f"{operation} failed, rolled back")
        raise AggregateWriteFailed(operation) from e
    except BaseException:
        db.rollback()
        raise


def _pick(data: Mapping[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    return {k: data[k] for k in fields if k in data}


def _merge_patch(record: Any, changes: Mapping[str, Any], fields: Sequence[str]) -> list[str]:
    """Copy supplied, non-null values onto ``record``. Returns the changed field names."""
    applied = []
    for field, value in _pick(changes, fields).items():
        if value is None:
            continue
        setattr(record, field, value)
        applied.append(field)
    return applied


def create_recipe_with_ingredients(
    db: Session,
    owner_id: str,
    fields: Mapping[str, Any],
    ingredients: Optional[Sequence[Mapping[str, Any]]] = None,
) -> Recipe:
    """Insert a recipe and its ingredients as one transaction.

    Ingredients keep their submission order through ``position``. If any
    insert fails nothing is persisted.
    """
    with write_unit(db, "create_recipe"):
        recipe = Recipe(user_id=owner_id, **_pick(fields, RECIPE_FIELDS))
        db.add(recipe)
        db.flush()

        for position, item in enumerate(ingredients or []):
            ingredient = Ingredient(
                recipe_id=recipe.id,
                position=position,
                **_pick(item, INGREDIENT_FIELDS),
            )
            recipe.ingredients.append(ingredient)
            db.flush()

    logger.info(
        f"Created recipe {recipe.id} for user {owner_id} "
        f"with {len(recipe.ingredients)} ingredient(s)"
    )
    return recipe


def add_ingredient(db: Session, recipe: Recipe, fields: Mapping[str, Any]) -> Ingredient:
    """Append one ingredient after the recipe's existing ones."""
    with write_unit(db, "add_ingredient", ResourceRef.recipe(recipe.id)):
        last = db.scalar(
            select(func.max(Ingredient.position)).where(Ingredient.recipe_id == recipe.id)
        )
        ingredient = Ingredient(
            recipe_id=recipe.id,
            position=0 if last is None else last + 1,
            **_pick(fields, INGREDIENT_FIELDS),
        )
        db.add(ingredient)
        db.flush()
    return ingredient


def update_recipe(db: Session, recipe: Recipe, changes: Mapping[str, Any]) -> Recipe:
    with write_unit(db, "update_recipe", ResourceRef.recipe(recipe.id)):
        applied = _merge_patch(recipe, changes, RECIPE_FIELDS)
    logger.info(f"Updated recipe {recipe.id}: {applied}")
    return recipe


def update_ingredient(db: Session, ingredient: Ingredient, changes: Mapping[str, Any]) -> Ingredient:
    with write_unit(db, "update_ingredient", ResourceRef.ingredient(ingredient.id)):
        applied = _merge_patch(ingredient, changes, INGREDIENT_FIELDS)
    logger.info(f"Updated ingredient {ingredient.id}: {applied}")
    return ingredient


def delete_recipe(db: Session, recipe: Recipe) -> None:
    """Delete the recipe; its ingredients go with it in the same transaction."""
    recipe_id = recipe.id
    with write_unit(db, "delete_recipe"):
        db.delete(recipe)
    logger.info(f"Deleted recipe {recipe_id}")


def delete_ingredient(db: Session, ingredient: Ingredient) -> None:
    with write_unit(db, "delete_ingredient"):
        db.delete(ingredient)
