"""
Ingredient database models.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from recipebox.core.database import Base


class Ingredient(Base):
    """A named ingredient shared by every recipe that uses it."""

    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name='{self.name}')>"


class RecipeIngredient(Base):
    """One line of a recipe's ingredient list."""

    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False, index=True)

    quantity = Column(Float, nullable=True)
    unit = Column(String(50), nullable=True)
    notes = Column(String(255), nullable=True)

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", lazy="selectin")

    @property
    def name(self) -> str:
        return self.ingredient.name

    @property
    def category(self):
        return self.ingredient.category

    def __repr__(self):
        return f"<RecipeIngredient(recipe_id={self.recipe_id}, ingredient_id={self.ingredient_id})>"
