"""The table descriptors must only name columns that exist."""

import pytest

from models import TABLE_MODELS
from utils.table_schemas import TABLE_SCHEMAS, resolve_table
from utils.errors import InvalidTableError


@pytest.mark.parametrize("schema", TABLE_SCHEMAS.values(), ids=lambda schema: schema.name.value)
def test_schema_columns_exist(schema):
    columns = set(TABLE_MODELS[schema.name.value].__table__.columns.keys())
    assert set(schema.field_names) <= columns
    assert {field.column for field in schema.filters} <= columns
    assert set(schema.search_columns) <= columns
    assert schema.sortable_columns <= columns
    assert schema.history_fields <= columns
    if schema.history_key:
        assert schema.history_key in columns
    if schema.breadcrumb_column:
        assert {schema.breadcrumb_column, "category_node_id"} <= columns


def test_resolve_table():
    assert resolve_table("stores").name.value == "stores"
    for table in ("users", "upload_history", "", None, "Products"):
        with pytest.raises(InvalidTableError):
            resolve_table(table)
