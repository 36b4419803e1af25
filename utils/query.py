"""Compile a request's filter bag into a parameterised WHERE fragment.

A filter bag is a flat mapping sent by the browsing UI, e.g.::

    {
        "price_usd_from": 10,
        "price_usd_to": 50,
        "categories": ["Jewelry", "Art"],
        "star_seller": True,
        "search": "mug",
    }

Each table descriptor in ``utils.table_schemas`` declares which keys it
understands and which shape they take. Keys it does not declare are ignored.
The compiled fragment uses ``:p1``, ``:p2``... placeholders whose values are in
``CompiledFilter.params`` in the same order. The same fragment is reused
verbatim by the page, count and export queries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from utils.coercion import FieldKind, coerce_boolean, coerce_value, normalize_null
from utils.errors import ValidationError
from utils.table_schemas import FilterField, FilterShape, TableSchema, resolve_table

logger = logging.getLogger(__name__)

ALWAYS_TRUE = "TRUE"

compilers: dict[FilterShape, Callable] = {}


@dataclass(frozen=True)
class CompiledFilter:
    where: str
    params: tuple

    def bind_params(self) -> dict:
        """Placeholder name to value mapping, as expected by ``sqlalchemy.text``."""
        return {f"p{index}": value for index, value in enumerate(self.params, start=1)}


class ParameterList:
    """Positional parameters; ``add`` returns the placeholder for the new value."""

    def __init__(self):
        self.values = []

    def add(self, value) -> str:
        self.values.append(value)
        return f":p{len(self.values)}"


def register(shape: FilterShape):
    """Decorator to register the clause builder for a filter shape.

    A builder receives the filter field, the filter bag, the parameter list
    and the qualified column name, and returns the clauses it emits (possibly
    none).
    """
    def decorator(func):
        compilers[shape] = func
        return func
    return decorator


def is_present(value: Any) -> bool:
    """Whether a filter value was actually supplied (cleared inputs send ``''``)."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    return normalize_null(value) is not None


def _typed(value: Any, kind: FieldKind | None) -> Any:
    if kind in (FieldKind.INTEGER, FieldKind.FLOAT, FieldKind.TIMESTAMP):
        return coerce_value(value, kind)
    return value


@register(FilterShape.RANGE)
def compile_range(field: FilterField, filters: Mapping, params: ParameterList, column: str, kind=None) -> list[str]:
    clauses = []
    for suffix, operator in (("_from", ">="), ("_to", "<=")):
        raw = filters.get(f"{field.key}{suffix}")
        if not is_present(raw):
            continue
        value = _typed(raw, kind)
        if value is None:
            logger.debug("[Query] Ignoring unparsable bound %s%s=%r", field.key, suffix, raw)
            continue
        clauses.append(f"{column} {operator} {params.add(value)}")
    return clauses


@register(FilterShape.EQUALS)
def compile_equals(field: FilterField, filters: Mapping, params: ParameterList, column: str, kind=None) -> list[str]:
    raw = filters.get(field.key)
    if not is_present(raw) or isinstance(raw, (list, tuple, dict)):
        return []
    value = _typed(raw, kind)
    if value is None:
        return []
    return [f"{column} = {params.add(value)}"]


@register(FilterShape.ANY_OF)
def compile_any_of(field: FilterField, filters: Mapping, params: ParameterList, column: str, kind=None) -> list[str]:
    raw = filters.get(field.key)
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return []
    values = [value for value in raw if is_present(value)]
    if not values:
        return []
    return [f"{column} = ANY({params.add(values)})"]


@register(FilterShape.FLAG)
def compile_flag(field: FilterField, filters: Mapping, params: ParameterList, column: str, kind=None) -> list[str]:
    # Absence is not false: only emit when the key was sent
    value = filters.get(field.key)
    if field.key not in filters or not is_present(value):
        return []
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        flag = value != 0
    else:
        flag = coerce_boolean(value)
    return [f"{column} = {params.add(flag)}"]


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def compile_search(schema: TableSchema, filters: Mapping, params: ParameterList) -> list[str]:
    term = filters.get(schema.search_key)
    if not isinstance(term, str) or not term.strip() or not schema.search_columns:
        return []
    # One parameter shared by every branch of the OR group
    placeholder = params.add(f"%{escape_like(term.strip())}%")
    branches = " OR ".join(
        f"{schema.name.value}.{column} ILIKE {placeholder}" for column in schema.search_columns
    )
    return [f"({branches})"]


def compile_filters(filters: Mapping | None, table) -> CompiledFilter:
    """Compile ``filters`` for ``table`` into a WHERE fragment and its parameters.

    Raises ``InvalidTableError`` for a table outside the allow-list, before any
    SQL is built. With no applicable filters the fragment is ``TRUE``.
    """
    schema = resolve_table(table)
    if filters is None:
        filters = {}
    if not isinstance(filters, Mapping):
        raise ValidationError("Filters must be an object")

    params = ParameterList()
    clauses = []
    for field in schema.filters:
        column = f"{schema.name.value}.{field.column}"
        clauses.extend(compilers[field.shape](field, filters, params, column, schema.kind_of(field.column)))
    clauses.extend(compile_search(schema, filters, params))

    where = " AND ".join(clauses) if clauses else ALWAYS_TRUE
    return CompiledFilter(where=where, params=tuple(params.values))


def apply_filter_change(state: Mapping | None, key: str, value: Any) -> dict:
    """Return a new filter bag with ``key`` set to ``value``.

    ``None``, ``''`` and empty lists remove the key. ``state`` is not modified.
    """
    new_state = dict(state or {})
    if is_present(value):
        new_state[key] = list(value) if isinstance(value, (tuple, set, frozenset)) else value
    else:
        new_state.pop(key, None)
    return new_state
