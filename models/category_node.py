from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, utcnow

# parent_key stands in for parent_id in the unique constraint: NULLs never
# collide in a unique index, so roots use 0 instead.
ROOT_PARENT_KEY = 0

class CategoryNodeORM(Base):
    """One segment of a category breadcrumb. Nodes are created once and never updated."""
    __tablename__ = 'category_nodes'
    __table_args__ = (
        UniqueConstraint('name', 'parent_key', 'level', name='uq_category_nodes_name_parent_level'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(nullable=False)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey('category_nodes.id'), nullable=True, index=True)
    parent_key: Mapped[int] = mapped_column(nullable=False, default=ROOT_PARENT_KEY)
    level: Mapped[int] = mapped_column(nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<CategoryNode(id={self.id}, name={self.name}, parent_id={self.parent_id}, level={self.level})>"

class CategoryNode(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_id: int | None = None
    level: int = 0
