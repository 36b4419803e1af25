"""Error taxonomy shared by the ingestion, query and route layers.

Every error carries the HTTP status and the ``comment`` code that the routes
put in the ``{"success": False, "comment": ...}`` response body.
"""


class EtsyVizError(Exception):
    status_code = 500
    comment = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = None, *, comment: str = None, status_code: int = None):
        super().__init__(message or self.comment)
        if comment is not None:
            self.comment = comment
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            "success": False,
            "comment": self.comment,
            "error": str(self),
        }


class ValidationError(EtsyVizError):
    """Bad or missing input. Nothing has been written when this is raised."""
    status_code = 400
    comment = "VALIDATION_FAILED"


class InvalidTableError(ValidationError):
    comment = "INVALID_TABLE"

    def __init__(self, table):
        super().__init__(f"Invalid table name: {table!r}")
        self.table = table


class InvalidSortError(ValidationError):
    comment = "INVALID_SORT"


class InvalidHistoryFieldError(ValidationError):
    comment = "INVALID_HISTORY_FIELD"


class AuthorizationError(EtsyVizError):
    status_code = 401
    comment = "UNAUTHORISED"


class StorageError(EtsyVizError):
    comment = "STORAGE_ERROR"


class QueryExecutionError(StorageError):
    comment = "QUERY_FAILED"


class IngestionError(StorageError):
    comment = "INGESTION_FAILED"
