"""Batch ingestion of loosely typed rows into the products, stores and categories tables.

Every row is coerced on its own. A row whose required fields are missing or
unparsable is reported as a failure and the rest of the batch still goes in.
Rows are inserted with one multi-row statement per chunk, all chunks in one
transaction, and all stamped with the same ``time_added``. Nothing is
deduplicated: ingesting the same rows twice stores them twice.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Iterable, Mapping, Sequence

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from config import config
from db.clients.rds_storage_client import db_session
from models import TABLE_MODELS
from models.base import utcnow
from models.upload_history import UploadStatus
from utils.category_tree import CategoryTree
from utils.coercion import coerce, missing_required
from utils.errors import IngestionError, StorageError, ValidationError
from utils.table_schemas import TableName, TableSchema, resolve_table
from utils.upload_history import record_upload

logger = logging.getLogger(__name__)

# Failures listed in the upload history error message
MAX_REPORTED_FAILURES = 10


@dataclass
class RowFailure:
    index: int
    reason: str
    fields: list[str] = field(default_factory=list)

    def __str__(self):
        suffix = f" ({', '.join(self.fields)})" if self.fields else ""
        return f"row {self.index + 1}: {self.reason}{suffix}"


@dataclass
class IngestResult:
    entity_type: TableName
    total_rows: int
    inserted_ids: list[int] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.inserted_ids)

    @property
    def status(self) -> UploadStatus:
        if not self.failures:
            return UploadStatus.SUCCESS
        return UploadStatus.PARTIAL if self.inserted_ids else UploadStatus.FAILED

    @property
    def message(self) -> str:
        return f"Inserted {self.count} of {self.total_rows} {self.entity_type.value} rows"

    def failure_summary(self) -> str | None:
        if not self.failures:
            return None
        shown = "; ".join(str(failure) for failure in self.failures[:MAX_REPORTED_FAILURES])
        hidden = len(self.failures) - MAX_REPORTED_FAILURES
        if hidden > 0:
            shown = f"{shown}; and {hidden} more"
        return f"{len(self.failures)} rows rejected: {shown}"

    def to_dict(self) -> dict:
        return {
            "success": self.count > 0 or self.total_rows == 0,
            "message": self.message,
            "status": self.status.value,
            "count": self.count,
            "total": self.total_rows,
            "ids": self.inserted_ids,
            "failures": [asdict(failure) for failure in self.failures],
        }


def chunked(items: Sequence, size: int) -> Iterable[Sequence]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class BatchIngestor:
    """Coerces, enriches and bulk inserts batches of rows.

    Args:
        session_maker: SQLAlchemy session factory. Defaults to a short-lived
            engine on the configured database for every call.
        batch_size: Rows per INSERT statement.
        history: Callable recording the outcome in the upload history.
    """

    def __init__(self, session_maker=None, batch_size: int = None, history: Callable = record_upload):
        self.session_maker = session_maker
        self.batch_size = batch_size or config.ingestion.batch_size
        self.history = history

    def prepare(self, schema: TableSchema, raw_rows: Sequence) -> tuple[list[dict], list[RowFailure]]:
        """Coerce every row, splitting them into insertable rows and failures."""
        rows, failures = [], []
        for index, raw in enumerate(raw_rows):
            if not isinstance(raw, Mapping):
                failures.append(RowFailure(index, "row is not an object"))
                continue
            row = coerce(raw, schema.fields)
            missing = missing_required(row, schema.fields)
            if missing:
                failure = RowFailure(index, "missing or unparsable required fields", missing)
                logger.warning("[Ingestion] %s %s", schema.name.value, failure)
                failures.append(failure)
                continue
            if schema.breadcrumb_column is not None:
                # Same key set on every row keeps the chunk a single multi-row INSERT
                row["category_node_id"] = None
            rows.append(row)
        return rows, failures

    def resolve_categories(self, schema: TableSchema, rows: list[dict]) -> None:
        """Attach ``category_node_id`` to rows carrying a breadcrumb.

        Best effort: a row whose breadcrumb cannot be resolved keeps a null
        node id and is still inserted.
        """
        if schema.breadcrumb_column is None:
            return
        try:
            with db_session(self.session_maker) as session:
                tree = CategoryTree(session)
                # Sequential on purpose so one batch never races itself on new nodes
                for row in rows:
                    breadcrumb = row.get(schema.breadcrumb_column)
                    if not breadcrumb:
                        continue
                    try:
                        row["category_node_id"] = tree.resolve_path(breadcrumb)
                        session.commit()
                    except SQLAlchemyError as e:
                        session.rollback()
                        logger.warning("[Ingestion] Could not resolve category %r: %s", breadcrumb, e)
        except (SQLAlchemyError, StorageError) as e:
            logger.warning("[Ingestion] Category tree unavailable, skipping enrichment: %s", e)

    def insert(self, schema: TableSchema, rows: list[dict]) -> list[int]:
        """Insert ``rows`` in chunks inside one transaction and return their ids in order."""
        orm = TABLE_MODELS[schema.name.value]
        time_added = utcnow()
        inserted_ids = []
        with db_session(self.session_maker) as session:
            try:
                for chunk in chunked(rows, self.batch_size):
                    values = [{**row, "time_added": time_added} for row in chunk]
                    statement = insert(orm).returning(orm.id, sort_by_parameter_order=True)
                    inserted_ids.extend(session.scalars(statement, values).all())
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
        return inserted_ids

    def ingest(self, entity_type, raw_rows: Sequence, uploaded_by: str = None, record_history: bool = True) -> IngestResult:
        """Ingest ``raw_rows`` into the table for ``entity_type``.

        Raises ``InvalidTableError`` for an unknown entity type,
        ``ValidationError`` when ``raw_rows`` is not a list and
        ``IngestionError`` when the insert itself fails, in which case nothing
        from the batch is stored.
        """
        schema = resolve_table(entity_type)
        if not isinstance(raw_rows, (list, tuple)):
            raise ValidationError("Rows must be an array of objects")

        result = IngestResult(schema.name, len(raw_rows))
        rows, result.failures = self.prepare(schema, raw_rows)
        if result.failures:
            logger.info("[Ingestion] %s: %d of %d rows rejected", schema.name.value, len(result.failures), len(raw_rows))

        if rows:
            self.resolve_categories(schema, rows)
            try:
                result.inserted_ids = self.insert(schema, rows)
            except (SQLAlchemyError, StorageError) as e:
                logger.error("[Ingestion] Insert into %s failed: %s", schema.name.value, e)
                if record_history:
                    self.record(schema, 0, len(raw_rows), UploadStatus.FAILED, str(e), uploaded_by)
                raise IngestionError(f"Could not insert {schema.name.value} rows: {e}")

        logger.info("[Ingestion] %s", result.message)
        if record_history:
            self.record(schema, result.count, result.total_rows, result.status, result.failure_summary(), uploaded_by)
        return result

    def record(self, entity_type, rows_processed: int, total_rows: int, status: UploadStatus,
               error_message: str | None, uploaded_by: str | None) -> None:
        # The rows are already committed, a history failure must not report them as lost
        try:
            self.history(
                file_type=resolve_table(entity_type).name.value,
                rows_processed=rows_processed,
                total_rows=total_rows,
                status=status,
                error_message=error_message,
                uploaded_by=uploaded_by,
            )
        except (SQLAlchemyError, StorageError, ValueError) as e:
            logger.error("[Ingestion] Could not record upload history: %s", e)


def ingest(entity_type, raw_rows: Sequence, uploaded_by: str = None, session_maker=None) -> IngestResult:
    """Ingest one batch with the default settings."""
    return BatchIngestor(session_maker=session_maker).ingest(entity_type, raw_rows, uploaded_by=uploaded_by)
