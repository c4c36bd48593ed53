"""
Ingredient catalogue management.
"""

from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.models.ingredient import Ingredient, RecipeIngredient
from recipebox.schemas.ingredient import IngredientCreate
from recipebox.utils.exceptions import IngredientNotFoundError, ValidationError

SEARCH_LIMIT = 10


class IngredientService:
    """Service for the shared ingredient catalogue."""

    async def list_ingredients(self, db: AsyncSession, search: Optional[str] = None) -> List[Ingredient]:
        """
        List ingredients alphabetically.

        Args:
            db: Database session
            search: Optional case-insensitive substring of the name; when
                given only the first ``SEARCH_LIMIT`` matches are returned

        Returns:
            List of ingredients
        """
        query = select(Ingredient).order_by(Ingredient.name)
        search = (search or "").strip()
        if search:
            query = query.where(Ingredient.name.icontains(search, autoescape=True)).limit(SEARCH_LIMIT)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_ingredient(self, ingredient_id: int, db: AsyncSession) -> Ingredient:
        ingredient = await db.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise IngredientNotFoundError(ingredient_id)
        return ingredient

    async def create_ingredient(self, data: IngredientCreate, db: AsyncSession) -> Ingredient:
        """Create an ingredient; names are unique."""
        await self._check_name_free(data.name, db)

        ingredient = Ingredient(name=data.name, category=data.category)
        db.add(ingredient)
        await db.commit()
        logger.info(f"Created ingredient '{ingredient.name}'")
        return ingredient

    async def update_ingredient(self, ingredient_id: int, data: IngredientCreate, db: AsyncSession) -> Ingredient:
        ingredient = await self.get_ingredient(ingredient_id, db)
        if data.name != ingredient.name:
            await self._check_name_free(data.name, db)

        ingredient.name = data.name
        ingredient.category = data.category
        await db.commit()
        logger.info(f"Updated ingredient {ingredient_id}")
        return ingredient

    async def delete_ingredient(self, ingredient_id: int, db: AsyncSession) -> None:
        """Delete an ingredient that no recipe lists."""
        ingredient = await self.get_ingredient(ingredient_id, db)

        in_use = await db.execute(
            select(func.count(RecipeIngredient.id)).where(RecipeIngredient.ingredient_id == ingredient_id)
        )
        if in_use.scalar_one():
            raise ValidationError("Ingredient is used by recipes", field="ingredient_id")

        await db.delete(ingredient)
        await db.commit()
        logger.info(f"Deleted ingredient {ingredient_id}")

    async def _check_name_free(self, name: str, db: AsyncSession) -> None:
        existing = await db.execute(select(Ingredient.id).where(Ingredient.name == name))
        if existing.scalar_one_or_none() is not None:
            raise ValidationError("Ingredient already exists", field="name")


ingredient_service = IngredientService()
