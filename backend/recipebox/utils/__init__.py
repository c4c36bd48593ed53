"""
Utility modules for the recipe application.
"""

from .exceptions import (
    RecipeAppException,
    RecipeNotFoundError,
    TagNotFoundError,
    IngredientNotFoundError,
    CollectionNotFoundError,
    SearchQueryError,
    AuthenticationError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    "RecipeAppException",
    "RecipeNotFoundError",
    "TagNotFoundError",
    "IngredientNotFoundError",
    "CollectionNotFoundError",
    "SearchQueryError",
    "AuthenticationError",
    "PermissionDeniedError",
    "ValidationError",
]
