import logging
from models.base import utcnow
from db.shared_repositories import upload_history_repository
from models.upload_history import UploadHistory, UploadStatus

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100

def record_upload(file_type: str,
                  rows_processed: int,
                  status: UploadStatus | str,
                  total_rows: int = None,
                  error_message: str = None,
                  uploaded_by: str = None,
                  repository=upload_history_repository) -> dict:
    """Append one entry to the upload history and return it."""
    entry = {
        'file_type': file_type,
        'rows_processed': rows_processed,
        'total_rows': total_rows,
        'status': UploadStatus(status),
        'error_message': error_message,
        'uploaded_by': uploaded_by,
        'uploaded_at': utcnow(),
    }
    with repository.create_session() as session:
        created = session.create(entry)
    logger.info("[UploadHistory] %s upload: %s/%s rows, %s", file_type, rows_processed, total_rows, created['status'].value)
    return created

def list_uploads(limit: int = DEFAULT_LIMIT, repository=upload_history_repository) -> list[UploadHistory]:
    """Most recent uploads first."""
    with repository.create_session() as session:
        return session.list(order_by='uploaded_at', descending=True, limit=limit)
