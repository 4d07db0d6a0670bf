"""SQLAlchemy ORM models for QuickCook.

Tables:
- users: Account identity (unique email, hashed password)
- recipes: Recipe rows, each owned by exactly one user
- ingredients: Line items of a recipe; ownership is always derived from the parent recipe
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    Integer,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .orm_types import UTCDateTime


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Registered account. Owns zero or more recipes."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    username: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )

    recipes: Mapped[list["Recipe"]] = relationship(
        "Recipe", back_populates="user", cascade="all, delete-orphan"
    )


class Recipe(Base):
    """Recipe scoped to its owning user."""
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_user_id_created_at", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    # Insertion counter; orders recipes created within the same instant
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, default=generate_uuid
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    instructions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prep_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    servings: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # Set client-side so ordering keeps sub-second precision on every backend
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="recipes")

    ingredients: Mapped[list["Ingredient"]] = relationship(
        "Ingredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="Ingredient.position"
    )


class Ingredient(Base):
    """Ingredient line item. Has no owner column of its own."""
    __tablename__ = "ingredients"
    __table_args__ = (
        Index("ix_ingredients_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Submission order within the recipe
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")
