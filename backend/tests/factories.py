"""
Test factories for creating test data.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.models.collection import Collection
from recipebox.models.ingredient import Ingredient
from recipebox.models.recipe import Recipe, Tag, Category
from recipebox.models.user import User
from recipebox.services.auth_service import AuthService

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


async def create_test_user(
    db: AsyncSession,
    username: str = "testuser",
    email: str = "test@example.com",
    password: str = "testpassword123",
    is_admin: bool = False,
) -> User:
    """Create a test user."""
    auth_service = AuthService()
    return await auth_service.create_user(
        username=username,
        email=email,
        password=password,
        full_name=username.title(),
        is_admin=is_admin,
        db=db
    )


async def create_test_tag(db: AsyncSession, name: str, color: str = "#6b7280") -> Tag:
    tag = Tag(name=name, color=color)
    db.add(tag)
    await db.commit()
    return tag


async def create_test_category(db: AsyncSession, owner: User, name: str = "Dinner") -> Category:
    category = Category(user_id=owner.id, name=name)
    db.add(category)
    await db.commit()
    return category


async def create_test_ingredient(db: AsyncSession, name: str, category: Optional[str] = None) -> Ingredient:
    ingredient = Ingredient(name=name, category=category)
    db.add(ingredient)
    await db.commit()
    return ingredient


async def create_test_collection(
    db: AsyncSession,
    owner: User,
    name: str = "Favourites",
    recipes: Iterable[Recipe] = (),
) -> Collection:
    collection = Collection(user_id=owner.id, name=name, description=None)
    collection.recipes = list(recipes)
    db.add(collection)
    await db.commit()
    return collection


async def create_test_recipe(
    db: AsyncSession,
    owner: User,
    title: str = "Test Recipe",
    description: Optional[str] = "A test recipe",
    instructions: str = "Mix everything together and cook.",
    prep_time: Optional[int] = 10,
    cook_time: Optional[int] = 20,
    servings: int = 4,
    difficulty: str = "easy",
    is_public: bool = True,
    tags: Iterable[Tag] = (),
    categories: Iterable[Category] = (),
    age_minutes: int = 0,
) -> Recipe:
    """
    Create a test recipe.

    ``age_minutes`` moves ``created_at`` back from a fixed base time so tests
    control the creation order.
    """
    created_at = BASE_TIME - timedelta(minutes=age_minutes)
    recipe = Recipe(
        user_id=owner.id,
        title=title,
        description=description,
        instructions=instructions,
        prep_time=prep_time,
        cook_time=cook_time,
        servings=servings,
        difficulty=difficulty,
        is_public=is_public,
        created_at=created_at,
        updated_at=created_at,
    )
    recipe.tags = list(tags)
    recipe.categories = list(categories)
    recipe.ingredients = []
    db.add(recipe)
    await db.commit()
    return recipe
