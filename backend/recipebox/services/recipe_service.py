"""
Recipe service for managing recipes, their tag and category links and ingredient lists.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_, delete
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.models.collection import recipe_collections
from recipebox.models.ingredient import Ingredient, RecipeIngredient
from recipebox.models.recipe import Recipe, Tag, Category
from recipebox.models.user import User
from recipebox.schemas.ingredient import RecipeIngredientIn
from recipebox.schemas.recipe import RecipeCreate, RecipeUpdate
from recipebox.utils.exceptions import (
    RecipeNotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class RecipeService:
    """Service for recipe CRUD."""

    def _visible_to(self, viewer: Optional[User]):
        if viewer is None:
            return Recipe.is_public.is_(True)
        if viewer.is_admin:
            return None
        return or_(Recipe.is_public.is_(True), Recipe.user_id == viewer.id)

    async def list_recipes(
        self,
        db: AsyncSession,
        viewer: Optional[User] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Recipe], int]:
        """
        Get a page of recipes visible to the viewer, newest first.

        Args:
            db: Database session
            viewer: Authenticated user, or None for anonymous callers
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (recipes list, total count)
        """
        condition = self._visible_to(viewer)

        query = select(Recipe)
        count_query = select(func.count(Recipe.id))
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = query.order_by(Recipe.created_at.desc(), Recipe.id.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        recipes = list(result.scalars().all())
        total = (await db.execute(count_query)).scalar_one()
        return recipes, total

    async def get_recipe(
        self,
        recipe_id: int,
        db: AsyncSession,
        viewer: Optional[User] = None,
    ) -> Recipe:
        """Get a recipe, hiding private recipes from everyone but their owner and admins."""
        result = await db.execute(select(Recipe).where(Recipe.id == recipe_id))
        recipe = result.scalar_one_or_none()
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        if not recipe.is_public and (viewer is None or not viewer.can_edit(recipe.user_id)):
            raise RecipeNotFoundError(recipe_id)
        return recipe

    async def create_recipe(self, data: RecipeCreate, owner: User, db: AsyncSession) -> Recipe:
        """Create a recipe owned by ``owner`` and link its tags and categories."""
        fields = data.model_dump(exclude={"tags", "categories", "ingredients"})
        fields["difficulty"] = data.difficulty.value
        recipe = Recipe(user_id=owner.id, **fields)
        recipe.tags = await self._resolve_tags(data.tags, db)
        recipe.categories = await self._resolve_categories(data.categories, owner, db)
        recipe.ingredients = await self._resolve_ingredients(data.ingredients, db)

        db.add(recipe)
        await db.commit()

        logger.info(f"Created recipe {recipe.id} '{recipe.title}' for user {owner.id}")
        return recipe

    async def update_recipe(
        self,
        recipe_id: int,
        data: RecipeUpdate,
        user: User,
        db: AsyncSession,
    ) -> Recipe:
        """Replace a recipe's fields; only the owner or an admin may do this."""
        recipe = await self.get_recipe(recipe_id, db, viewer=user)
        if not user.can_edit(recipe.user_id):
            raise PermissionDeniedError("Only the recipe owner can modify it")

        for name, value in data.model_dump(exclude={"tags", "categories", "ingredients"}).items():
            setattr(recipe, name, value)
        recipe.difficulty = data.difficulty.value
        recipe.updated_at = datetime.utcnow()

        if data.tags is not None:
            recipe.tags = await self._resolve_tags(data.tags, db)
        if data.categories is not None:
            owner = await db.get(User, recipe.user_id)
            recipe.categories = await self._resolve_categories(data.categories, owner, db)
        if data.ingredients is not None:
            recipe.ingredients = await self._resolve_ingredients(data.ingredients, db)

        await db.commit()
        logger.info(f"Updated recipe {recipe.id}")
        return recipe

    async def delete_recipe(self, recipe_id: int, user: User, db: AsyncSession) -> None:
        """Delete a recipe; only the owner or an admin may do this."""
        recipe = await self.get_recipe(recipe_id, db, viewer=user)
        if not user.can_edit(recipe.user_id):
            raise PermissionDeniedError("Only the recipe owner can delete it")

        await db.execute(delete(recipe_collections).where(recipe_collections.c.recipe_id == recipe_id))
        await db.delete(recipe)
        await db.commit()
        logger.info(f"Deleted recipe {recipe_id}")

    async def _resolve_tags(self, names: List[str], db: AsyncSession) -> List[Tag]:
        """Look up tags by name, creating the ones that do not exist yet."""
        wanted: List[str] = []
        for name in names:
            name = name.strip()
            if name and name not in wanted:
                wanted.append(name)
        if not wanted:
            return []

        result = await db.execute(select(Tag).where(Tag.name.in_(wanted)))
        existing = {tag.name: tag for tag in result.scalars().all()}

        tags = []
        for name in wanted:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                db.add(tag)
            tags.append(tag)
        return tags

    async def _resolve_categories(
        self,
        category_ids: List[int],
        owner: User,
        db: AsyncSession,
    ) -> List[Category]:
        ids = list(dict.fromkeys(category_ids))
        if not ids:
            return []

        result = await db.execute(
            select(Category).where(Category.id.in_(ids), Category.user_id == owner.id)
        )
        categories = list(result.scalars().all())
        missing = set(ids) - {category.id for category in categories}
        if missing:
            raise ValidationError(
                f"Unknown category ids: {sorted(missing)}",
                field="categories",
            )
        return categories

    async def _resolve_ingredients(
        self,
        items: List[RecipeIngredientIn],
        db: AsyncSession,
    ) -> List[RecipeIngredient]:
        """Build ingredient lines, creating catalogue entries for unknown names."""
        names = [item.name for item in items]
        if len(set(names)) != len(names):
            raise ValidationError("Each ingredient may be listed once", field="ingredients")
        if not names:
            return []

        result = await db.execute(select(Ingredient).where(Ingredient.name.in_(names)))
        existing = {ingredient.name: ingredient for ingredient in result.scalars().all()}

        lines = []
        for item in items:
            ingredient = existing.get(item.name)
            if ingredient is None:
                ingredient = Ingredient(name=item.name, category=None)
                db.add(ingredient)
            lines.append(
                RecipeIngredient(
                    ingredient=ingredient,
                    quantity=item.quantity,
                    unit=item.unit,
                    notes=item.notes,
                )
            )
        return lines


recipe_service = RecipeService()
