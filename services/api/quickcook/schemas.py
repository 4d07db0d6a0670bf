"""Pydantic schemas for QuickCook API.

Request/response models for:
- Accounts (register / login)
- Recipes (with nested ingredients)
- Ingredients
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Users ---

class UserOut(BaseModel):
    id: str
    username: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


# --- Ingredients ---

class IngredientIn(BaseModel):
    """Ingredient line submitted together with a new recipe."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=30)


class IngredientCreate(IngredientIn):
    recipe_id: str = Field(..., min_length=1)


class IngredientPatch(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=30)


class IngredientOut(BaseModel):
    id: str
    recipe_id: str
    name: str
    quantity: Optional[str]
    unit: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class IngredientResponse(BaseModel):
    message: str
    ingredient: IngredientOut


# --- Recipes ---

class RecipeFields(BaseModel):
    description: Optional[str] = None
    instructions: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    category: Optional[str] = Field(None, max_length=80)
    image_url: Optional[str] = Field(None, max_length=1024)


class RecipeCreate(RecipeFields):
    title: str = Field(..., min_length=1, max_length=200)
    ingredients: Optional[list[IngredientIn]] = None


class RecipePatch(RecipeFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)


class RecipeListOut(BaseModel):
    """Recipe row without its ingredients, for list views."""
    id: str
    user_id: str
    title: str
    description: Optional[str]
    instructions: Optional[str]
    prep_time: Optional[int]
    servings: Optional[int]
    category: Optional[str]
    image_url: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecipeOut(RecipeListOut):
    ingredients: list[IngredientOut] = []


class RecipeResponse(BaseModel):
    message: str
    recipe: RecipeOut


class MessageResponse(BaseModel):
    message: str
