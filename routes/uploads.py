import logging
from middlewares.authenticate import authenticate
from middlewares.authorise import authorise_admin
from models.upload_history import UploadStatus
from routes import route
from utils import Response, use
from utils.etl.csv_extract import ingest_csv, normalize_file_type
from utils.presign import presign_upload
from utils.upload_history import DEFAULT_LIMIT, list_uploads, record_upload

logger = logging.getLogger(__name__)

@route('upload-history', 'GET')
@use(authenticate)
def get_upload_history(event, response: Response):
    """List past uploads

    Upload history entries, most recent first.
    ---
    tags:
        - uploads
    parameters:
        - in: query
          name: limit
          required: false
          schema:
            type: integer
            default: 100
    responses:
        200:
            description: Upload history entries
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
                            properties:
                                id:
                                    type: string
                                file_type:
                                    type: string
                                rows_processed:
                                    type: integer
                                total_rows:
                                    type: integer
                                status:
                                    type: string
                                    enum: [success, partial, failed]
                                error_message:
                                    type: string
                                uploaded_by:
                                    type: string
                                uploaded_at:
                                    type: string
                                    format: date-time
    """
    query = event.get('queryStringParameters') or {}
    try:
        limit = max(1, int(query.get('limit', DEFAULT_LIMIT)))
    except (TypeError, ValueError):
        return response.status(400).json({
            "success": False,
            "comment": "VALIDATION_FAILED",
            "error": "limit must be an integer"
        })
    return [entry.model_dump(mode='json') for entry in list_uploads(limit=limit)]

@route('upload-history', 'POST')
@use(authenticate)
@use(authorise_admin)
def add_upload_history(event, response: Response):
    """Record an upload (admin only)

    Used by clients that send a file as several batches with `record_history=false` and record the outcome once.
    ---
    tags:
        - uploads
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    required:
                        - file_type
                        - rows_processed
                        - status
                    properties:
                        file_type:
                            type: string
                        rows_processed:
                            type: integer
                        total_rows:
                            type: integer
                        status:
                            type: string
                            enum: [success, partial, failed]
                        error_message:
                            type: string
    responses:
        201:
            description: Entry recorded
        400:
            description: Invalid entry
    """
    body = event.get('body') or {}
    try:
        table = normalize_file_type(body.get('file_type'))
        rows_processed = int(body.get('rows_processed'))
        total_rows = body.get('total_rows')
        total_rows = int(total_rows) if total_rows is not None else None
        status = UploadStatus(body.get('status'))
    except (TypeError, ValueError) as e:
        return response.status(400).json({
            "success": False,
            "comment": "VALIDATION_FAILED",
            "error": str(e)
        })
    entry = record_upload(
        file_type=table.value,
        rows_processed=rows_processed,
        total_rows=total_rows,
        status=status,
        error_message=body.get('error_message'),
        uploaded_by=event['user'].email,
    )
    return response.status(201).json({"success": True, "id": entry['id']})

@route('uploads/{file_type}', 'POST')
@use(authenticate)
@use(authorise_admin)
def upload_csv(event, response: Response):
    """Ingest a CSV file sent inline (admin only)

    Parses `content` as CSV and ingests it batch by batch. One upload history entry covers the whole file. Larger files should go through a pre-signed upload.
    ---
    tags:
        - uploads
    parameters:
        - in: path
          name: file_type
          required: true
          schema:
            type: string
            enum: [products, stores, categories]
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    required:
                        - content
                    properties:
                        content:
                            type: string
    responses:
        200:
            description: Same body as the batch insert endpoints
        400:
            description: Unknown file type or unreadable CSV
    """
    body = event.get('body') or {}
    content = body.get('content') if isinstance(body, dict) else None
    if not content:
        return response.status(400).json({
            "success": False,
            "comment": "VALIDATION_FAILED",
            "error": "content is required"
        })
    result = ingest_csv(event['pathParameters']['file_type'], content, uploaded_by=event['user'].email)
    return result.to_dict()

@route('uploads/{file_type}/presign', 'POST')
@use(authenticate)
@use(authorise_admin)
def presign_csv_upload(event):
    """Create a pre-signed upload URL (admin only)

    The file is ingested once the PUT to the returned URL completes.
    ---
    tags:
        - uploads
    parameters:
        - in: path
          name: file_type
          required: true
          schema:
            type: string
            enum: [products, stores, categories]
    responses:
        200:
            description: Pre-signed PUT URL
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            url:
                                type: string
                            bucket:
                                type: string
                            key:
                                type: string
                            expires_in:
                                type: integer
    """
    table = normalize_file_type(event['pathParameters']['file_type'])
    upload = presign_upload(table.value)
    logger.info("[Uploads] Pre-signed %s for %s", upload['key'], event['user'].email)
    return {"success": True, **upload}
