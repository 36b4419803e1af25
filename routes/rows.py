from middlewares.authenticate import authenticate
from routes import route
from utils import Response, use
from utils.table_query import export_all, fetch_page, filter_options


@route('get-rows', 'POST')
@use(authenticate)
def get_rows(event, response: Response):
    """Fetch one page of a table

    Returns the rows of `table` matching `filters`, sorted and paginated, along with the number of rows matching the same filters. Product rows carry the logo, review score, sub title and start date of their store.
    ---
    tags:
        - browse
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    required:
                        - table
                    properties:
                        table:
                            type: string
                            enum: [products, stores, categories]
                        start:
                            type: integer
                            default: 0
                        count:
                            type: integer
                            default: 50
                        filters:
                            type: object
                            example:
                                price_usd_from: 10
                                price_usd_to: 50
                                categories: [Jewelry, Art]
                                star_seller: true
                                search: mug
                        sort:
                            type: object
                            properties:
                                column:
                                    type: string
                                direction:
                                    type: string
                                    enum: [asc, desc]
    responses:
        200:
            description: A page of rows
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            data:
                                type: array
                                items:
                                    type: object
                            totalCount:
                                type: integer
        400:
            description: Invalid table, sort or pagination
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                                example: False
                            comment:
                                type: string
                                example: 'INVALID_TABLE'
                            error:
                                type: string
        500:
            description: The query failed
    """
    body = event.get('body') or {}
    page = fetch_page(
        body.get('table'),
        start=body.get('start', 0),
        count=body.get('count'),
        filters=body.get('filters'),
        sort=body.get('sort'),
    )
    return {
        "success": True,
        "data": page["rows"],
        "totalCount": page["total_count"],
    }


@route('export-data', 'POST')
@use(authenticate)
def export_data(event, response: Response):
    """Export every row of a table matching the filters

    Same filters and sort as `get-rows`, without pagination. The client renders the rows to CSV.
    ---
    tags:
        - browse
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    required:
                        - table
                    properties:
                        table:
                            type: string
                            enum: [products, stores, categories]
                        filters:
                            type: object
                        sort:
                            type: object
    responses:
        200:
            description: Every matching row
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
        400:
            description: Invalid table or sort
        500:
            description: The query failed
    """
    body = event.get('body') or {}
    return export_all(body.get('table'), filters=body.get('filters'), sort=body.get('sort'))


@route('filter-options/{table}', 'GET')
@use(authenticate)
def get_filter_options(event):
    """List the values of the multi-select filters

    Distinct countries, categories and brands present in the table.
    ---
    tags:
        - browse
    parameters:
        - in: path
          name: table
          required: true
          schema:
            type: string
            enum: [products, stores, categories]
    responses:
        200:
            description: Values per filter
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            countries:
                                type: array
                                items:
                                    type: string
                            categories:
                                type: array
                                items:
                                    type: string
                            brands:
                                type: array
                                items:
                                    type: string
        400:
            description: Invalid table
    """
    return filter_options(event['pathParameters']['table'])
