"""
Database models for the recipe application.
"""

from .user import User
from .recipe import Recipe, Tag, Category, recipe_tags, recipe_categories
from .ingredient import Ingredient, RecipeIngredient
from .collection import Collection, recipe_collections

__all__ = [
    "User",
    "Recipe",
    "Tag",
    "Category",
    "recipe_tags",
    "recipe_categories",
    "Ingredient",
    "RecipeIngredient",
    "Collection",
    "recipe_collections",
]
