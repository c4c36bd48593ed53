"""
Tag and category management.
"""

from typing import List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.models.recipe import Tag, Category, recipe_tags
from recipebox.models.user import User
from recipebox.schemas.recipe import TagCreate, CategoryCreate
from recipebox.utils.exceptions import TagNotFoundError, ValidationError


class TagService:
    """Service for tags and user categories."""

    async def list_tags(self, db: AsyncSession) -> List[Tag]:
        result = await db.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def create_tag(self, data: TagCreate, db: AsyncSession) -> Tag:
        """Create a tag; names are unique."""
        existing = await db.execute(select(Tag).where(Tag.name == data.name))
        if existing.scalar_one_or_none() is not None:
            raise ValidationError("Tag already exists", field="name")

        tag = Tag(name=data.name, color=data.color)
        db.add(tag)
        await db.commit()
        logger.info(f"Created tag '{tag.name}'")
        return tag

    async def get_tag(self, tag_id: int, db: AsyncSession) -> Tag:
        tag = await db.get(Tag, tag_id)
        if tag is None:
            raise TagNotFoundError(tag_id)
        return tag

    async def update_tag(self, tag_id: int, data: TagCreate, db: AsyncSession) -> Tag:
        """Rename or recolour a tag; the new name must not belong to another tag."""
        tag = await self.get_tag(tag_id, db)
        if data.name != tag.name:
            existing = await db.execute(select(Tag).where(Tag.name == data.name))
            if existing.scalar_one_or_none() is not None:
                raise ValidationError("Tag already exists", field="name")

        tag.name = data.name
        tag.color = data.color
        await db.commit()
        logger.info(f"Updated tag {tag_id}")
        return tag

    async def delete_tag(self, tag_id: int, db: AsyncSession) -> None:
        tag = await self.get_tag(tag_id, db)
        await db.execute(delete(recipe_tags).where(recipe_tags.c.tag_id == tag_id))
        await db.delete(tag)
        await db.commit()
        logger.info(f"Deleted tag {tag_id}")

    async def list_categories(self, owner: User, db: AsyncSession) -> List[Category]:
        result = await db.execute(
            select(Category).where(Category.user_id == owner.id).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def create_category(self, data: CategoryCreate, owner: User, db: AsyncSession) -> Category:
        """Create a category, optionally nested under one of the owner's categories."""
        if data.parent_id is not None:
            parent = await db.get(Category, data.parent_id)
            if parent is None or parent.user_id != owner.id:
                raise ValidationError("Parent category not found", field="parent_id")

        category = Category(user_id=owner.id, name=data.name.strip(), parent_id=data.parent_id)
        db.add(category)
        await db.commit()
        logger.info(f"Created category '{category.name}' for user {owner.id}")
        return category


tag_service = TagService()
