from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime, Float, Index, Text
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base

class ProductORM(Base):
    """One scraped product snapshot. Rows are append-only: a re-upload adds a new row."""
    __tablename__ = 'products'
    __table_args__ = (
        Index('ix_products_product_id_time_added', 'product_id', 'time_added'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    time_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    time_scraped: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    cid: Mapped[Optional[str]] = mapped_column(nullable=True)
    pjson: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    productj: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    breadcrumbj: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category_name: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    category_tree: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    category_node_id: Mapped[Optional[int]] = mapped_column(nullable=True)
    product_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    product_id: Mapped[Optional[str]] = mapped_column(nullable=True)
    product_id_new: Mapped[Optional[str]] = mapped_column(nullable=True)
    product_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    image: Mapped[Optional[str]] = mapped_column(nullable=True)
    last_24_hours: Mapped[Optional[int]] = mapped_column(nullable=True)
    number_in_basket: Mapped[Optional[int]] = mapped_column(nullable=True)
    product_reviews: Mapped[Optional[int]] = mapped_column(nullable=True)
    ratingvalue: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    date_of_latest_review: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    date_listed: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    number_of_favourties: Mapped[Optional[int]] = mapped_column(nullable=True)
    related_searches: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    star_seller: Mapped[bool] = mapped_column(default=False)
    ad: Mapped[bool] = mapped_column(default=False)
    digital_download: Mapped[bool] = mapped_column(default=False)
    price_usd: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sale_price_usd: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    store_reviews: Mapped[Optional[int]] = mapped_column(nullable=True)
    store_name: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    store_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    store_country: Mapped[Optional[str]] = mapped_column(nullable=True, index=True)
    on_etsy_since: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    store_sales: Mapped[Optional[int]] = mapped_column(nullable=True)
    store_admirers: Mapped[Optional[int]] = mapped_column(nullable=True)
    number_of_store_products: Mapped[Optional[int]] = mapped_column(nullable=True)
    facebook_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    instagram_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    pinterest_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    tiktok_url: Mapped[Optional[str]] = mapped_column(nullable=True)

    def __repr__(self):
        return f"<Product(id={self.id}, product_id={self.product_id}, time_added={self.time_added})>"
