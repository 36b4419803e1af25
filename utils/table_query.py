"""Paginated browsing, export, field history and filter options over the dashboard tables.

The page, count and export queries of one request share the WHERE fragment
and parameters produced by ``utils.query.compile_filters``, so the total count
of a page always equals the number of rows an export of the same filters
returns. Table and column names only ever come from ``utils.table_schemas``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from db.clients.rds_storage_client import db_session
from utils.errors import InvalidHistoryFieldError, InvalidSortError, QueryExecutionError, ValidationError
from utils.query import CompiledFilter, compile_filters
from utils.table_schemas import FilterShape, TableName, TableSchema, resolve_table

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000
MAX_FILTER_OPTIONS = 5000
# Multi-select widgets of the browsing UI, present for every table
FILTER_OPTION_KEYS = ("countries", "categories", "brands")

SORT_DIRECTIONS = {"asc": "ASC", "desc": "DESC"}

# Products are shown with the attributes of their store. The join goes to the
# most recent snapshot of each store name so it can never multiply products.
LATEST_STORES = "(SELECT * FROM stores WHERE id IN (SELECT MAX(id) FROM stores GROUP BY store_name))"
PRODUCTS_FROM = f"products LEFT JOIN {LATEST_STORES} AS store ON store.store_name = products.store_name"
PRODUCTS_SELECT = (
    "products.*, "
    "store.store_logo_url AS store_logo_url, "
    "store.store_review_score AS store_review_score, "
    "store.store_sub_title AS store_sub_title, "
    "store.on_etsy_since AS store_on_etsy_since"
)


@dataclass(frozen=True)
class SortSpec:
    column: str = "id"
    direction: str = "ASC"

    def order_by(self, table: str) -> str:
        clause = f"{table}.{self.column} {self.direction}"
        if self.column != "id":
            # Stable pagination when the sort column has ties
            clause = f"{clause}, {table}.id {self.direction}"
        return clause


def parse_sort(sort, schema: TableSchema) -> SortSpec:
    """Validate ``{column, direction}`` against the table's columns.

    No sort means insertion order.
    """
    if not sort:
        return SortSpec()
    if isinstance(sort, str):
        sort = {"column": sort}
    if not isinstance(sort, Mapping):
        raise InvalidSortError("Sort must be an object with a column and a direction")
    column = sort.get("column")
    if not column:
        return SortSpec()
    if column not in schema.sortable_columns:
        raise InvalidSortError(f"Cannot sort {schema.name.value} by {column!r}")
    direction = SORT_DIRECTIONS.get(str(sort.get("direction") or "asc").lower())
    if direction is None:
        raise InvalidSortError(f"Invalid sort direction: {sort.get('direction')!r}")
    return SortSpec(column, direction)


def parse_bound(value, name: str, default: int, maximum: int = None) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
    if number < 0:
        raise ValidationError(f"{name} must not be negative")
    if maximum is not None:
        number = min(number, maximum)
    return number


def select_sql(schema: TableSchema, compiled: CompiledFilter, sort: SortSpec) -> str:
    """SELECT for the rows matching ``compiled``, without pagination."""
    table = schema.name.value
    if schema.name is TableName.PRODUCTS:
        source, columns = PRODUCTS_FROM, PRODUCTS_SELECT
    else:
        source, columns = table, f"{table}.*"
    return f"SELECT {columns} FROM {source} WHERE {compiled.where} ORDER BY {sort.order_by(table)}"


def count_sql(schema: TableSchema, compiled: CompiledFilter) -> str:
    return f"SELECT COUNT(*) FROM {schema.name.value} WHERE {compiled.where}"


def page_sql(schema: TableSchema, compiled: CompiledFilter, sort: SortSpec) -> str:
    return f"{select_sql(schema, compiled, sort)} LIMIT :limit OFFSET :offset"


def _rows(result) -> list[dict]:
    return [dict(row) for row in result.mappings()]


def fetch_page(table, start=0, count=DEFAULT_PAGE_SIZE, filters: Mapping = None, sort=None,
               session_maker=None) -> dict:
    """One page of ``table`` plus the number of rows matching the same filters.

    Returns ``{"rows": [...], "total_count": int}``.
    """
    schema = resolve_table(table)
    compiled = compile_filters(filters, schema)
    sort_spec = parse_sort(sort, schema)
    start = parse_bound(start, "start", 0)
    count = parse_bound(count, "count", DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
    params = compiled.bind_params()
    logger.debug("[TableQuery] %s WHERE %s", schema.name.value, compiled.where)

    try:
        with db_session(session_maker) as session:
            total_count = session.execute(text(count_sql(schema, compiled)), params).scalar_one()
            rows = _rows(session.execute(
                text(page_sql(schema, compiled, sort_spec)),
                {**params, "limit": count, "offset": start},
            ))
    except SQLAlchemyError as e:
        logger.error("[TableQuery] Page query on %s failed: %s", schema.name.value, e)
        raise QueryExecutionError(f"Could not query {schema.name.value}: {e}")

    logger.debug("[TableQuery] %s page start=%s count=%s -> %d/%d", schema.name.value, start, count, len(rows), total_count)
    return {"rows": rows, "total_count": total_count}


def export_all(table, filters: Mapping = None, sort=None, session_maker=None) -> list[dict]:
    """Every row of ``table`` matching ``filters``, unpaginated."""
    schema = resolve_table(table)
    compiled = compile_filters(filters, schema)
    sort_spec = parse_sort(sort, schema)

    try:
        with db_session(session_maker) as session:
            rows = _rows(session.execute(text(select_sql(schema, compiled, sort_spec)), compiled.bind_params()))
    except SQLAlchemyError as e:
        logger.error("[TableQuery] Export of %s failed: %s", schema.name.value, e)
        raise QueryExecutionError(f"Could not export {schema.name.value}: {e}")

    logger.info("[TableQuery] Exported %d %s rows", len(rows), schema.name.value)
    return rows


def field_history(table, key: str, field: str, session_maker=None) -> list[dict[str, Any]]:
    """Every recorded value of ``field`` for one entity, oldest first.

    ``key`` is the entity's natural key (product id or store name).
    """
    schema = resolve_table(table)
    if schema.history_key is None:
        raise InvalidHistoryFieldError(f"{schema.name.value} has no field history")
    if field not in schema.history_fields:
        raise InvalidHistoryFieldError(f"Invalid field for {schema.name.value} history: {field!r}")

    name = schema.name.value
    sql = (
        f"SELECT {name}.time_added AS time_added, {name}.{field} AS {field} FROM {name} "
        f"WHERE {name}.{schema.history_key} = :key ORDER BY {name}.time_added ASC, {name}.id ASC"
    )
    try:
        with db_session(session_maker) as session:
            return _rows(session.execute(text(sql), {"key": key}))
    except SQLAlchemyError as e:
        logger.error("[TableQuery] History of %s.%s failed: %s", name, field, e)
        raise QueryExecutionError(f"Could not load history of {field}: {e}")


def filter_options(table, session_maker=None) -> dict[str, list]:
    """Distinct values for every multi-select filter of ``table``, keyed by filter name."""
    schema = resolve_table(table)
    name = schema.name.value
    options = {key: [] for key in FILTER_OPTION_KEYS}
    try:
        with db_session(session_maker) as session:
            for filter_field in schema.filters:
                if filter_field.shape is not FilterShape.ANY_OF:
                    continue
                column = f"{name}.{filter_field.column}"
                sql = (
                    f"SELECT DISTINCT {column} AS value FROM {name} WHERE {column} IS NOT NULL "
                    "ORDER BY value LIMIT :limit"
                )
                values = session.execute(text(sql), {"limit": MAX_FILTER_OPTIONS}).scalars().all()
                options[filter_field.key] = [value for value in values if value != ""]
    except SQLAlchemyError as e:
        logger.error("[TableQuery] Filter options of %s failed: %s", name, e)
        raise QueryExecutionError(f"Could not load filter options for {name}: {e}")
    return options
