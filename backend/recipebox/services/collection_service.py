"""
Recipe collections: private, named sets of recipes kept by each user.
"""

from datetime import datetime
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.models.collection import Collection
from recipebox.models.recipe import Recipe
from recipebox.models.user import User
from recipebox.schemas.collection import CollectionCreate, CollectionUpdate
from recipebox.services.recipe_service import recipe_service
from recipebox.utils.exceptions import CollectionNotFoundError


class CollectionService:
    """Service for collection CRUD and membership."""

    async def list_collections(self, owner: User, db: AsyncSession) -> List[Collection]:
        """List the owner's collections, newest first."""
        result = await db.execute(
            select(Collection)
            .where(Collection.user_id == owner.id)
            .order_by(Collection.created_at.desc(), Collection.id.desc())
        )
        return list(result.scalars().all())

    async def get_collection(self, collection_id: int, owner: User, db: AsyncSession) -> Collection:
        """Get one of the owner's collections; anybody else's reads as missing."""
        collection = await db.get(Collection, collection_id, populate_existing=True)
        if collection is None or collection.user_id != owner.id:
            raise CollectionNotFoundError(collection_id)
        return collection

    async def get_collection_recipes(
        self,
        collection_id: int,
        owner: User,
        db: AsyncSession,
    ) -> Tuple[Collection, List[Recipe]]:
        """
        Get a collection with the recipes its owner can still see.

        Recipes another user has since made private are left out.

        Returns:
            Tuple of (collection, recipes newest first)
        """
        collection = await self.get_collection(collection_id, owner, db)
        recipes = [
            recipe for recipe in collection.recipes
            if recipe.is_public or owner.can_edit(recipe.user_id)
        ]
        recipes.sort(key=lambda recipe: (recipe.created_at, recipe.id), reverse=True)
        return collection, recipes

    async def create_collection(self, data: CollectionCreate, owner: User, db: AsyncSession) -> Collection:
        collection = Collection(user_id=owner.id, name=data.name, description=data.description)
        collection.recipes = []
        db.add(collection)
        await db.commit()
        logger.info(f"Created collection {collection.id} '{collection.name}' for user {owner.id}")
        return collection

    async def update_collection(
        self,
        collection_id: int,
        data: CollectionUpdate,
        owner: User,
        db: AsyncSession,
    ) -> Collection:
        collection = await self.get_collection(collection_id, owner, db)
        for name, value in data.model_dump(exclude_unset=True).items():
            if name == "name" and value is None:
                continue
            setattr(collection, name, value)
        collection.updated_at = datetime.utcnow()

        await db.commit()
        logger.info(f"Updated collection {collection_id}")
        return collection

    async def delete_collection(self, collection_id: int, owner: User, db: AsyncSession) -> None:
        collection = await self.get_collection(collection_id, owner, db)
        await db.delete(collection)
        await db.commit()
        logger.info(f"Deleted collection {collection_id}")

    async def add_recipe(self, collection_id: int, recipe_id: int, owner: User, db: AsyncSession) -> Collection:
        """Add a recipe the owner can see; adding it twice changes nothing."""
        collection = await self.get_collection(collection_id, owner, db)
        recipe = await recipe_service.get_recipe(recipe_id, db, viewer=owner)

        if recipe not in collection.recipes:
            collection.recipes.append(recipe)
            collection.updated_at = datetime.utcnow()
            await db.commit()
            logger.info(f"Added recipe {recipe_id} to collection {collection_id}")
        return collection

    async def remove_recipe(self, collection_id: int, recipe_id: int, owner: User, db: AsyncSession) -> None:
        """Remove a recipe; removing one that is not there is not an error."""
        collection = await self.get_collection(collection_id, owner, db)

        remaining = [recipe for recipe in collection.recipes if recipe.id != recipe_id]
        if len(remaining) != len(collection.recipes):
            collection.recipes = remaining
            collection.updated_at = datetime.utcnow()
            await db.commit()
            logger.info(f"Removed recipe {recipe_id} from collection {collection_id}")


collection_service = CollectionService()
