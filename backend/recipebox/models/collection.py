"""
Recipe collection database models.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from recipebox.core.database import Base


recipe_collections = Table(
    "recipe_collections",
    Base.metadata,
    Column("collection_id", Integer, ForeignKey("collections.id", ondelete="CASCADE"), primary_key=True),
    Column("recipe_id", Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("added_at", DateTime(timezone=True), default=datetime.utcnow, nullable=False),
)


class Collection(Base):
    """A private, named set of recipes kept by one user."""

    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="collections")
    recipes = relationship("Recipe", secondary=recipe_collections, lazy="selectin", passive_deletes=True)

    def __repr__(self):
        return f"<Collection(id={self.id}, name='{self.name}')>"
