"""
Custom exception classes for the recipe application.
"""

from typing import Optional


class RecipeAppException(Exception):
    """Base exception for all recipe application errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)


class RecipeNotFoundError(RecipeAppException):
    """Raised when a recipe is not found."""

    def __init__(self, recipe_id: int, detail: Optional[str] = None):
        message = f"Recipe not found: {recipe_id}"
        super().__init__(message, detail)
        self.recipe_id = recipe_id


class TagNotFoundError(RecipeAppException):
    """Raised when a tag is not found."""

    def __init__(self, tag_id: int, detail: Optional[str] = None):
        message = f"Tag not found: {tag_id}"
        super().__init__(message, detail)
        self.tag_id = tag_id


class IngredientNotFoundError(RecipeAppException):
    """Raised when an ingredient is not found."""

    def __init__(self, ingredient_id: int, detail: Optional[str] = None):
        message = f"Ingredient not found: {ingredient_id}"
        super().__init__(message, detail)
        self.ingredient_id = ingredient_id


class CollectionNotFoundError(RecipeAppException):
    """Raised when a collection does not exist or belongs to someone else."""

    def __init__(self, collection_id: int, detail: Optional[str] = None):
        message = f"Collection not found: {collection_id}"
        super().__init__(message, detail)
        self.collection_id = collection_id


class SearchQueryError(RecipeAppException):
    """Raised when a search, suggestion or tag-ranking read fails in the store."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Search error: {message}", detail)


class AuthenticationError(RecipeAppException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed", detail: Optional[str] = None):
        super().__init__(message, detail)


class PermissionDeniedError(RecipeAppException):
    """Raised when the caller may not act on a resource."""

    def __init__(self, message: str = "Permission denied", detail: Optional[str] = None):
        super().__init__(message, detail)


class ValidationError(RecipeAppException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, detail)
        self.field = field
