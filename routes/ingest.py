"""Batch insert endpoints used by the CSV upload screens.

Each endpoint accepts a JSON array of loosely typed rows, one CSV line per
object, as produced by the browser-side CSV reader.
"""

from middlewares.authenticate import authenticate
from middlewares.authorise import authorise_admin
from routes import route
from utils import Response, use
from utils.etl.ingestion import BatchIngestor
from utils.table_schemas import TableName


def wants_history(event) -> bool:
    query = event.get('queryStringParameters') or {}
    return str(query.get('record_history', 'true')).lower() not in ('false', '0', 'no')


def ingest_batch(table: TableName, event, response: Response):
    rows = event.get('body')
    if not isinstance(rows, list):
        return response.status(400).json({
            "success": False,
            "comment": "VALIDATION_FAILED",
            "error": f"Request body must be an array of {table.value}",
        })
    result = BatchIngestor().ingest(
        table,
        rows,
        uploaded_by=event['user'].email,
        record_history=wants_history(event),
    )
    return result.to_dict()


@route('add-product-batch', 'POST')
@use(authenticate)
@use(authorise_admin)
def add_product_batch(event, response: Response):
    """Insert a batch of product rows (admin only)

    Breadcrumbs in category_tree are added to the category hierarchy.
    ---
    tags:
        - ingestion
    parameters:
        - in: query
          name: record_history
          required: false
          description: Set to false when the caller records one upload history entry for the whole file itself.
          schema:
            type: boolean
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: array
                    items:
                        type: object
    responses:
        200:
            description: Rows persisted. count may be lower than total when some rows were rejected.
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            message:
                                type: string
                            status:
                                type: string
                                enum: [success, partial, failed]
                            count:
                                type: integer
                            total:
                                type: integer
                            ids:
                                type: array
                                items:
                                    type: integer
                            failures:
                                type: array
                                items:
                                    type: object
        400:
            description: The body is not an array of rows
        500:
            description: The insert failed and nothing was stored
    """
    return ingest_batch(TableName.PRODUCTS, event, response)


@route('add-store-batch', 'POST')
@use(authenticate)
@use(authorise_admin)
def add_store_batch(event, response: Response):
    """Insert a batch of store rows (admin only)

    Every row is a new snapshot of the store.
    ---
    tags:
        - ingestion
    parameters:
        - in: query
          name: record_history
          required: false
          description: Set to false when the caller records one upload history entry for the whole file itself.
          schema:
            type: boolean
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: array
                    items:
                        type: object
    responses:
        200:
            description: Rows persisted. count may be lower than total when some rows were rejected.
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            message:
                                type: string
                            status:
                                type: string
                                enum: [success, partial, failed]
                            count:
                                type: integer
                            total:
                                type: integer
                            ids:
                                type: array
                                items:
                                    type: integer
                            failures:
                                type: array
                                items:
                                    type: object
        400:
            description: The body is not an array of rows
        500:
            description: The insert failed and nothing was stored
    """
    return ingest_batch(TableName.STORES, event, response)


@route('add-category-batch', 'POST')
@use(authenticate)
@use(authorise_admin)
def add_category_batch(event, response: Response):
    """Insert a batch of category search result rows (admin only)

    The category_tree segments are added to the category hierarchy.
    ---
    tags:
        - ingestion
    parameters:
        - in: query
          name: record_history
          required: false
          description: Set to false when the caller records one upload history entry for the whole file itself.
          schema:
            type: boolean
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: array
                    items:
                        type: object
    responses:
        200:
            description: Rows persisted. count may be lower than total when some rows were rejected.
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            message:
                                type: string
                            status:
                                type: string
                                enum: [success, partial, failed]
                            count:
                                type: integer
                            total:
                                type: integer
                            ids:
                                type: array
                                items:
                                    type: integer
                            failures:
                                type: array
                                items:
                                    type: object
        400:
            description: The body is not an array of rows
        500:
            description: The insert failed and nothing was stored
    """
    return ingest_batch(TableName.CATEGORIES, event, response)
