from urllib.parse import unquote
from middlewares.authenticate import authenticate
from routes import route
from utils import use
from utils.table_query import field_history
from utils.table_schemas import TableName

@route('product-history/{product_id}/{field}', 'GET')
@use(authenticate)
def get_product_history(event):
    """Values of one product field over time

    Every recorded value of `field` across all snapshots of the product, oldest first.
    ---
    tags:
        - history
    parameters:
        - in: path
          name: product_id
          required: true
          schema:
            type: string
        - in: path
          name: field
          required: true
          schema:
            type: string
            enum: [price_usd, sale_price_usd, product_reviews, ratingvalue, number_of_favourties, number_in_basket, last_24_hours, store_reviews, store_sales, store_admirers]
    responses:
        200:
            description: The values with the time they were added
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
                            properties:
                                time_added:
                                    type: string
                                    format: date-time
        400:
            description: The field has no history
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
                                example: 'INVALID_HISTORY_FIELD'
    """
    params = event['pathParameters']
    return field_history(TableName.PRODUCTS, unquote(params['product_id']), params['field'])

@route('store-history/{store_name}/{field}', 'GET')
@use(authenticate)
def get_store_history(event):
    """Values of one store field over time

    Every recorded value of `field` across all snapshots of the store, oldest first.
    ---
    tags:
        - history
    parameters:
        - in: path
          name: store_name
          required: true
          schema:
            type: string
        - in: path
          name: field
          required: true
          schema:
            type: string
            enum: [store_reviews, store_review_score, store_sales, store_admirers, number_of_store_products]
    responses:
        200:
            description: The values with the time they were added
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
        400:
            description: The field has no history
    """
    params = event['pathParameters']
    return field_history(TableName.STORES, unquote(params['store_name']), params['field'])
