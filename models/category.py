from datetime import datetime
from typing import List, Optional
from sqlalchemy import DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, StringArray

class CategoryORM(Base):
    """A product seen on a category search page (category-association row)."""
    __tablename__ = 'categories'

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    time_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    product_id: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    search_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    category_tree: Mapped[List[str]] = mapped_column(StringArray, default=list)
    category_node_id: Mapped[Optional[int]] = mapped_column(nullable=True)
    product_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    product_name: Mapped[Optional[str]] = mapped_column(nullable=True)
    is_ad: Mapped[bool] = mapped_column(default=False)
    star_seller: Mapped[bool] = mapped_column(default=False)
    store_reviews_number: Mapped[Optional[int]] = mapped_column(nullable=True)
    store_reviews_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    store_name: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_url: Mapped[Optional[str]] = mapped_column(nullable=True)
