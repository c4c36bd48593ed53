"""
Recipe, tag and category database models.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Boolean,
    ForeignKey,
    Table,
    Index,
)
from sqlalchemy.orm import relationship

from recipebox.core.database import Base


DEFAULT_TAG_COLOR = "#6b7280"


recipe_tags = Table(
    "recipe_tags",
    Base.metadata,
    Column("recipe_id", Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

recipe_categories = Table(
    "recipe_categories",
    Base.metadata,
    Column("recipe_id", Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Recipe(Base):
    """A recipe shared by a user."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=False)

    # Minutes; NULL when the author did not say
    prep_time = Column(Integer, nullable=True)
    cook_time = Column(Integer, nullable=True)
    servings = Column(Integer, nullable=False, default=1)
    difficulty = Column(String(10), nullable=False, default="easy")

    image_url = Column(String(500), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="recipes")
    tags = relationship("Tag", secondary=recipe_tags, back_populates="recipes", lazy="selectin")
    categories = relationship("Category", secondary=recipe_categories, back_populates="recipes", lazy="selectin")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_recipes_is_public_created_at", "is_public", "created_at"),
    )

    def __repr__(self):
        return f"<Recipe(id={self.id}, title='{self.title}')>"


class Tag(Base):
    """A label shared across recipes, matched by name in searches."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    color = Column(String(7), nullable=False, default=DEFAULT_TAG_COLOR)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    recipes = relationship("Recipe", secondary=recipe_tags, back_populates="tags", passive_deletes=True)

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}')>"


class Category(Base):
    """A user-owned, optionally nested, recipe category."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="categories")
    recipes = relationship("Recipe", secondary=recipe_categories, back_populates="categories", passive_deletes=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
