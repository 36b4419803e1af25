from datetime import datetime
from typing import List, Optional
from sqlalchemy import DateTime, Float, Index, Text
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, StringArray

class StoreORM(Base):
    """One scraped store snapshot, keyed for history by store name."""
    __tablename__ = 'stores'
    __table_args__ = (
        Index('ix_stores_store_name_time_added', 'store_name', 'time_added'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    time_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    store_id: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_name: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_sub_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    welcome_to_our_shop_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    store_logo_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    most_recent_product_urls: Mapped[List[str]] = mapped_column(StringArray, default=list)
    store_country: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    star_seller: Mapped[bool] = mapped_column(default=False)
    store_last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    store_reviews: Mapped[Optional[int]] = mapped_column(nullable=True)
    store_review_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    on_etsy_since: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    store_sales: Mapped[Optional[int]] = mapped_column(nullable=True)
    store_admirers: Mapped[Optional[int]] = mapped_column(nullable=True)
    number_of_store_products: Mapped[Optional[int]] = mapped_column(nullable=True)
    looking_for_more_urls: Mapped[List[str]] = mapped_column(StringArray, default=list)
    facebook_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    instagram_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    pinterest_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    tiktok_url: Mapped[Optional[str]] = mapped_column(nullable=True)

    def __repr__(self):
        return f"<Store(id={self.id}, store_name={self.store_name}, time_added={self.time_added})>"
