"""
Main API router configuration.
"""

from fastapi import APIRouter
from recipebox.api.endpoints import auth, collections, ingredients, recipes, search, tags, users

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(recipes.router, prefix="/recipes", tags=["recipes"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(tags.category_router, prefix="/categories", tags=["categories"])
api_router.include_router(ingredients.router, prefix="/ingredients", tags=["ingredients"])
api_router.include_router(collections.router, prefix="/collections", tags=["collections"])
