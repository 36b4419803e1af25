"""Unit tests for utils/etl/ingestion.py on an in-memory SQLite database."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from models import CategoryNodeORM, ProductORM, StoreORM
from models.upload_history import UploadStatus
from utils.errors import IngestionError, InvalidTableError, ValidationError
from utils.category_tree import CategoryTree
from utils.etl.ingestion import BatchIngestor, RowFailure, chunked


def product(product_id, **fields):
    return {
        "product_id": product_id,
        "product_title": f"Product {product_id}",
        "price_usd": "12.50",
        "star_seller": "Y",
        **fields,
    }


def count(session_maker, orm):
    with session_maker() as session:
        return session.scalar(select(func.count()).select_from(orm))


def test_chunked():
    assert [list(chunk) for chunk in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]


def test_row_failure_str():
    assert str(RowFailure(2, "missing or unparsable required fields", ["product_id"])) == \
        "row 3: missing or unparsable required fields (product_id)"


def test_partial_batch(session_maker, history):
    rows = [product("p1"), product("p2"), {"product_title": "No id"}, product("p4"), product("p5")]
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", rows, uploaded_by="admin@example.com")

    assert result.count == 4
    assert result.total_rows == 5
    assert [failure.index for failure in result.failures] == [2]
    assert result.failures[0].fields == ["product_id"]
    assert result.status is UploadStatus.PARTIAL
    assert count(session_maker, ProductORM) == 4

    assert len(history.calls) == 1
    entry = history.calls[0]
    assert entry["file_type"] == "products"
    assert entry["rows_processed"] == 4
    assert entry["total_rows"] == 5
    assert entry["status"] is UploadStatus.PARTIAL
    assert "row 3" in entry["error_message"]
    assert entry["uploaded_by"] == "admin@example.com"


def test_values_are_coerced(session_maker, history):
    BatchIngestor(session_maker=session_maker, history=history).ingest(
        "products", [product("p1", product_reviews="1,204", ad="NULL", brand="")]
    )
    with session_maker() as session:
        stored = session.scalars(select(ProductORM)).one()
    assert stored.price_usd == 12.5
    assert stored.product_reviews == 1204
    assert stored.star_seller is True
    assert stored.ad is False
    assert stored.brand is None
    assert stored.time_added is not None


def test_batch_shares_one_time_added(session_maker, history):
    BatchIngestor(session_maker=session_maker, batch_size=2, history=history).ingest(
        "products", [product(f"p{i}") for i in range(5)]
    )
    with session_maker() as session:
        stamps = set(session.scalars(select(ProductORM.time_added)).all())
    assert len(stamps) == 1


def test_ids_are_returned_in_input_order(session_maker, history):
    result = BatchIngestor(session_maker=session_maker, batch_size=2, history=history).ingest(
        "products", [product(f"p{i}") for i in range(5)]
    )
    with session_maker() as session:
        by_id = dict(session.execute(select(ProductORM.id, ProductORM.product_id)).all())
    assert [by_id[row_id] for row_id in result.inserted_ids] == [f"p{i}" for i in range(5)]


def test_reingest_appends_snapshots(session_maker, history):
    ingestor = BatchIngestor(session_maker=session_maker, history=history)
    ingestor.ingest("products", [product("p1")])
    ingestor.ingest("products", [product("p1", price_usd="14.00")])
    assert count(session_maker, ProductORM) == 2


def test_breadcrumbs_are_resolved(session_maker, history):
    rows = [
        product("p1", category_tree="A > B > C"),
        product("p2", category_tree="A > B > D"),
        product("p3", category_tree="A > B > C"),
        product("p4"),
    ]
    BatchIngestor(session_maker=session_maker, history=history).ingest("products", rows)

    assert count(session_maker, CategoryNodeORM) == 4
    with session_maker() as session:
        nodes = dict(session.execute(select(ProductORM.product_id, ProductORM.category_node_id)).all())
    assert nodes["p1"] == nodes["p3"]
    assert nodes["p1"] != nodes["p2"]
    assert nodes["p4"] is None


def test_category_failure_does_not_block_the_row(session_maker, history):
    original = CategoryTree.resolve_path

    def resolve_path(tree, breadcrumb):
        if breadcrumb == "Broken > Path":
            raise OperationalError("INSERT", {}, Exception("deadlock"))
        return original(tree, breadcrumb)

    rows = [
        product("p1", category_tree="A > B"),
        product("p2", category_tree="Broken > Path"),
        product("p3", category_tree="A > C"),
    ]
    with patch.object(CategoryTree, "resolve_path", new=resolve_path):
        result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", rows)

    assert result.count == 3
    assert result.status is UploadStatus.SUCCESS
    with session_maker() as session:
        nodes = dict(session.execute(select(ProductORM.product_id, ProductORM.category_node_id)).all())
    assert nodes["p2"] is None
    assert nodes["p1"] is not None
    assert nodes["p3"] is not None
    assert count(session_maker, CategoryNodeORM) == 3


def test_category_tree_unavailable(session_maker, history):
    rows = [product("p1", category_tree="A > B"), product("p2", category_tree="A > C")]
    with patch("utils.etl.ingestion.CategoryTree", side_effect=OperationalError("SELECT", {}, Exception("down"))):
        result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", rows)

    assert result.count == 2
    assert count(session_maker, CategoryNodeORM) == 0
    with session_maker() as session:
        assert session.scalars(select(ProductORM.category_node_id)).all() == [None, None]


def test_oversized_integer_only_nulls_that_value(session_maker, history):
    rows = [product(f"p{index}") for index in range(1, 6)]
    rows[2]["last_24_hours"] = "100000000000000000000"
    rows[3]["last_24_hours"] = "12"
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", rows)

    assert result.count == 5
    assert result.failures == []
    with session_maker() as session:
        sales = dict(session.execute(select(ProductORM.product_id, ProductORM.last_24_hours)).all())
    assert sales["p3"] is None
    assert sales["p4"] == 12


def test_category_rows_with_list_breadcrumbs(session_maker, history):
    rows = [{
        "product_id": "p1",
        "product_url": "https://example.com/p1",
        "category_tree": ["Home", "Kitchen"],
        "is_ad": "true",
    }]
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("categories", rows)
    assert result.count == 1
    assert count(session_maker, CategoryNodeORM) == 2


def test_stores(session_maker, history):
    rows = [
        {"store_name": "Acme", "store_url": "https://example.com/acme", "most_recent_product_urls": "a,b"},
        {"store_name": "Nope"},
    ]
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("stores", rows)
    assert result.count == 1
    assert result.failures[0].fields == ["store_url"]
    with session_maker() as session:
        store = session.scalars(select(StoreORM)).one()
    assert store.most_recent_product_urls == ["a", "b"]


def test_all_rows_rejected(session_maker, history):
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", [{}, "not a row"])
    assert result.count == 0
    assert result.status is UploadStatus.FAILED
    assert result.failures[1].reason == "row is not an object"
    assert history.calls[0]["status"] is UploadStatus.FAILED


def test_empty_batch(session_maker, history):
    result = BatchIngestor(session_maker=session_maker, history=history).ingest("products", [])
    assert result.to_dict()["success"] is True
    assert result.status is UploadStatus.SUCCESS
    assert history.calls[0]["rows_processed"] == 0


def test_history_can_be_skipped(session_maker, history):
    BatchIngestor(session_maker=session_maker, history=history).ingest("products", [product("p1")], record_history=False)
    assert history.calls == []


def test_history_failure_does_not_fail_the_batch(session_maker):
    def broken_history(**entry):
        raise ValueError("history table unavailable")

    result = BatchIngestor(session_maker=session_maker, history=broken_history).ingest("products", [product("p1")])
    assert result.count == 1


def test_invalid_input(session_maker, history):
    ingestor = BatchIngestor(session_maker=session_maker, history=history)
    with pytest.raises(InvalidTableError):
        ingestor.ingest("users", [product("p1")])
    with pytest.raises(ValidationError):
        ingestor.ingest("products", {"product_id": "p1"})
    assert history.calls == []


def test_insert_failure_stores_nothing(session_maker, history):
    ingestor = BatchIngestor(session_maker=session_maker, history=history)
    with patch.object(BatchIngestor, "insert", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        with pytest.raises(IngestionError):
            ingestor.ingest("products", [product("p1")])
    assert count(session_maker, ProductORM) == 0
    assert history.calls[0]["status"] is UploadStatus.FAILED
    assert history.calls[0]["rows_processed"] == 0


def test_to_dict(session_maker, history):
    result = BatchIngestor(session_maker=session_maker, history=history).ingest(
        "products", [product("p1"), {"product_id": "p2"}]
    )
    body = result.to_dict()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["total"] == 2
    assert body["status"] == "partial"
    assert body["message"] == "Inserted 1 of 2 products rows"
    assert body["failures"] == [{"index": 1, "reason": "missing or unparsable required fields", "fields": ["product_title"]}]
