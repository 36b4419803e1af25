"""Read uploaded CSV extracts and feed them to the batch ingestor."""

import csv
import io
import logging
from dataclasses import replace

from models.upload_history import UploadStatus
from utils.errors import IngestionError, ValidationError
from utils.etl.ingestion import BatchIngestor, IngestResult, RowFailure
from utils.table_schemas import TableName

logger = logging.getLogger(__name__)

# Names the upload UI and the S3 keys use for each table
FILE_TYPE_ALIASES = {
    'product': TableName.PRODUCTS,
    'products': TableName.PRODUCTS,
    'store': TableName.STORES,
    'stores': TableName.STORES,
    'category': TableName.CATEGORIES,
    'categories': TableName.CATEGORIES,
}


def normalize_file_type(file_type: str) -> TableName:
    """Map an upload file type such as ``product`` to its table."""
    table = FILE_TYPE_ALIASES.get(str(file_type or '').strip().lower())
    if table is None:
        raise ValidationError(f"Unknown file type: {file_type!r}", comment="INVALID_FILE_TYPE")
    return table


def read_csv_rows(content) -> list[dict]:
    """Parse CSV text (or UTF-8 bytes) into one dict per data row.

    Header names are trimmed. Cells beyond the header are dropped and missing
    cells read as absent.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise ValidationError(f"CSV file is not valid UTF-8: {e}", comment="INVALID_CSV")
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("CSV file is empty", comment="INVALID_CSV")

    try:
        reader = csv.DictReader(io.StringIO(content.lstrip('\ufeff'), newline=''))
        rows = []
        for row in reader:
            rows.append({
                key.strip(): value.strip()
                for key, value in row.items()
                if key is not None and value is not None
            })
    except csv.Error as e:
        raise ValidationError(f"Could not parse CSV: {e}", comment="INVALID_CSV")
    return rows


def ingest_csv(file_type: str, content, uploaded_by: str = None, ingestor: BatchIngestor = None) -> IngestResult:
    """Parse ``content`` and ingest it as ``file_type`` rows, one batch at a time.

    Every batch commits on its own and a failed batch does not stop the
    following ones. One upload history entry covers the whole file. A file
    that cannot be parsed is recorded as a failed upload with zero processed
    rows before the error is raised.
    """
    table = normalize_file_type(file_type)
    ingestor = ingestor or BatchIngestor()
    try:
        rows = read_csv_rows(content)
    except ValidationError as e:
        logger.warning("[CSV] Rejected %s upload: %s", table.value, e)
        ingestor.record(table, 0, None, UploadStatus.FAILED, str(e), uploaded_by)
        raise
    logger.info("[CSV] Parsed %d %s rows", len(rows), table.value)

    result = IngestResult(table, len(rows))
    for offset in range(0, len(rows), ingestor.batch_size):
        batch = rows[offset:offset + ingestor.batch_size]
        try:
            batch_result = ingestor.ingest(table, batch, uploaded_by=uploaded_by, record_history=False)
        except IngestionError as e:
            result.failures.extend(
                RowFailure(offset + index, f"batch insert failed: {e}") for index in range(len(batch))
            )
            continue
        result.inserted_ids.extend(batch_result.inserted_ids)
        result.failures.extend(
            replace(failure, index=offset + failure.index) for failure in batch_result.failures
        )

    logger.info("[CSV] %s", result.message)
    ingestor.record(table, result.count, result.total_rows, result.status, result.failure_summary(), uploaded_by)
    return result
