"""Declarative descriptors for the tables the dashboard can ingest into and browse.

SQL text is only ever built from the names declared here. A table name coming
from a request is resolved through ``resolve_table`` and anything outside
``TableName`` is rejected before a query is constructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from utils.coercion import FieldKind, FieldSpec
from utils.errors import InvalidTableError


class TableName(str, Enum):
    PRODUCTS = "products"
    STORES = "stores"
    CATEGORIES = "categories"


class FilterShape(str, Enum):
    RANGE = "range"        # {key}_from / {key}_to
    EQUALS = "equals"      # {key} = value
    ANY_OF = "any_of"      # {key} = ANY(array)
    FLAG = "flag"          # boolean, only when the key is present


@dataclass(frozen=True)
class FilterField:
    key: str
    column: str
    shape: FilterShape


@dataclass(frozen=True)
class TableSchema:
    name: TableName
    fields: tuple[FieldSpec, ...]
    filters: tuple[FilterField, ...]
    search_columns: tuple[str, ...]
    # Natural key used by the field history endpoints
    history_key: str | None = None
    history_fields: frozenset[str] = field(default_factory=frozenset)
    # Column holding a breadcrumb resolved into the category tree on ingestion
    breadcrumb_column: str | None = None
    search_key: str = "search"

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def sortable_columns(self) -> frozenset[str]:
        return frozenset(self.field_names) | {"id", "time_added"}

    def kind_of(self, column: str) -> FieldKind | None:
        """Declared kind of ``column``, including the columns every table carries."""
        for spec in self.fields:
            if spec.name == column:
                return spec.kind
        if column == "time_added":
            return FieldKind.TIMESTAMP
        if column in ("id", "category_node_id"):
            return FieldKind.INTEGER
        return None


def _fields(kind: FieldKind, *names: str) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(name, kind) for name in names)


def _filters(shape: FilterShape, *columns: str) -> tuple[FilterField, ...]:
    return tuple(FilterField(column, column, shape) for column in columns)


PRODUCTS = TableSchema(
    name=TableName.PRODUCTS,
    fields=(
        FieldSpec("time_scraped", FieldKind.TIMESTAMP),
        *_fields(FieldKind.STRING, "cid", "pjson", "productj", "breadcrumbj",
                 "category_name", "category_tree", "category_url", "product_url"),
        FieldSpec("product_id", FieldKind.STRING, required=True),
        FieldSpec("product_id_new", FieldKind.STRING),
        FieldSpec("product_title", FieldKind.STRING, required=True),
        *_fields(FieldKind.STRING, "brand", "image"),
        *_fields(FieldKind.INTEGER, "last_24_hours", "number_in_basket", "product_reviews"),
        FieldSpec("ratingvalue", FieldKind.FLOAT),
        *_fields(FieldKind.TIMESTAMP, "date_of_latest_review", "date_listed"),
        FieldSpec("number_of_favourties", FieldKind.INTEGER),
        FieldSpec("related_searches", FieldKind.STRING),
        *_fields(FieldKind.BOOLEAN, "star_seller", "ad", "digital_download"),
        *_fields(FieldKind.FLOAT, "price_usd", "sale_price_usd"),
        FieldSpec("store_reviews", FieldKind.INTEGER),
        *_fields(FieldKind.STRING, "store_name", "store_url", "store_country"),
        FieldSpec("on_etsy_since", FieldKind.TIMESTAMP),
        *_fields(FieldKind.INTEGER, "store_sales", "store_admirers", "number_of_store_products"),
        *_fields(FieldKind.STRING, "facebook_url", "instagram_url", "pinterest_url", "tiktok_url"),
    ),
    filters=(
        *_filters(FilterShape.RANGE, "time_added", "time_scraped", "date_listed", "price_usd",
                  "sale_price_usd", "store_reviews", "product_reviews", "number_of_favourties",
                  "ratingvalue", "store_sales"),
        *_filters(FilterShape.EQUALS, "product_id", "store_name", "store_country", "brand"),
        FilterField("category", "category_name", FilterShape.EQUALS),
        FilterField("categories", "category_name", FilterShape.ANY_OF),
        FilterField("countries", "store_country", FilterShape.ANY_OF),
        FilterField("brands", "brand", FilterShape.ANY_OF),
        FilterField("category_node_id", "category_node_id", FilterShape.EQUALS),
        *_filters(FilterShape.FLAG, "star_seller", "ad", "digital_download"),
    ),
    search_columns=("product_title", "brand", "category_name", "category_tree",
                    "store_name", "related_searches"),
    history_key="product_id",
    history_fields=frozenset({
        "price_usd", "sale_price_usd", "product_reviews", "ratingvalue", "number_of_favourties",
        "number_in_basket", "last_24_hours", "store_reviews", "store_sales", "store_admirers",
    }),
    breadcrumb_column="category_tree",
)

STORES = TableSchema(
    name=TableName.STORES,
    fields=(
        FieldSpec("store_id", FieldKind.STRING),
        FieldSpec("store_name", FieldKind.STRING, required=True),
        FieldSpec("store_url", FieldKind.STRING, required=True),
        *_fields(FieldKind.STRING, "store_sub_title", "welcome_to_our_shop_text",
                 "store_logo_url", "store_description"),
        FieldSpec("most_recent_product_urls", FieldKind.STRING_ARRAY),
        FieldSpec("store_country", FieldKind.STRING),
        FieldSpec("star_seller", FieldKind.BOOLEAN),
        FieldSpec("store_last_updated", FieldKind.TIMESTAMP),
        FieldSpec("store_reviews", FieldKind.INTEGER),
        FieldSpec("store_review_score", FieldKind.FLOAT),
        FieldSpec("on_etsy_since", FieldKind.TIMESTAMP),
        *_fields(FieldKind.INTEGER, "store_sales", "store_admirers", "number_of_store_products"),
        FieldSpec("looking_for_more_urls", FieldKind.STRING_ARRAY),
        *_fields(FieldKind.STRING, "facebook_url", "instagram_url", "pinterest_url", "tiktok_url"),
    ),
    filters=(
        *_filters(FilterShape.RANGE, "time_added", "store_last_updated", "on_etsy_since",
                  "store_reviews", "store_review_score", "store_sales", "store_admirers",
                  "number_of_store_products"),
        *_filters(FilterShape.EQUALS, "store_id", "store_name", "store_country"),
        FilterField("countries", "store_country", FilterShape.ANY_OF),
        FilterField("star_seller", "star_seller", FilterShape.FLAG),
    ),
    search_columns=("store_name", "store_sub_title", "store_description", "welcome_to_our_shop_text"),
    history_key="store_name",
    history_fields=frozenset({
        "store_reviews", "store_review_score", "store_sales", "store_admirers",
        "number_of_store_products",
    }),
)

CATEGORIES = TableSchema(
    name=TableName.CATEGORIES,
    fields=(
        FieldSpec("product_id", FieldKind.STRING, required=True),
        FieldSpec("search_url", FieldKind.STRING),
        FieldSpec("category_tree", FieldKind.STRING_ARRAY),
        FieldSpec("product_url", FieldKind.STRING, required=True),
        FieldSpec("product_name", FieldKind.STRING),
        *_fields(FieldKind.BOOLEAN, "is_ad", "star_seller"),
        FieldSpec("store_reviews_number", FieldKind.INTEGER),
        FieldSpec("store_reviews_score", FieldKind.FLOAT),
        *_fields(FieldKind.STRING, "store_name", "store_url"),
    ),
    filters=(
        *_filters(FilterShape.RANGE, "time_added", "store_reviews_number", "store_reviews_score"),
        *_filters(FilterShape.EQUALS, "product_id", "store_name", "category_node_id"),
        *_filters(FilterShape.FLAG, "is_ad", "star_seller"),
    ),
    search_columns=("product_name", "store_name", "search_url", "product_url"),
    breadcrumb_column="category_tree",
)

TABLE_SCHEMAS: dict[TableName, TableSchema] = {
    TableName.PRODUCTS: PRODUCTS,
    TableName.STORES: STORES,
    TableName.CATEGORIES: CATEGORIES,
}


def resolve_table(table) -> TableSchema:
    """Look up the descriptor for a requested table, or raise ``InvalidTableError``."""
    if isinstance(table, TableSchema):
        return table
    try:
        return TABLE_SCHEMAS[TableName(table)]
    except (ValueError, KeyError, TypeError):
        raise InvalidTableError(table)
