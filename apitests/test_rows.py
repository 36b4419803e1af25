import pytest
from base import execute_endpoint

ROWS = [
    {'product_id': 'rows-1', 'product_title': 'Rows mug', 'price_usd': 5, 'brand': 'RowsBrand',
     'store_name': 'Rows Store', 'store_country': 'NZ', 'category_name': 'RowsCategory', 'star_seller': 'Y'},
    {'product_id': 'rows-2', 'product_title': 'Rows cup', 'price_usd': 25, 'brand': 'RowsBrand',
     'store_name': 'Rows Store', 'store_country': 'NZ', 'category_name': 'RowsCategory'},
    {'product_id': 'rows-3', 'product_title': 'Rows print', 'price_usd': 50, 'brand': 'RowsBrand',
     'store_name': 'Rows Store', 'store_country': 'NZ', 'category_name': 'RowsCategory'},
]

@pytest.fixture(scope='module', autouse=True)
def seed_rows():
    execute_endpoint('/add-store-batch', method='POST', auth=True,
                     body=[{'store_name': 'Rows Store', 'store_url': 'https://example.com/rows', 'store_logo_url': 'logo.png'}])
    execute_endpoint('/add-product-batch', method='POST', body=ROWS, auth=True)

def test_get_rows():
    body = {
        'table': 'products',
        'start': 0,
        'count': 2,
        'filters': {'brand': 'RowsBrand'},
        'sort': {'column': 'price_usd', 'direction': 'desc'},
    }
    response = execute_endpoint('/get-rows', method='POST', body=body, auth=True, admin=False)
    assert response['statusCode'] == 200, response['body']
    assert response['body']['success'] is True
    assert response['body']['totalCount'] == 3
    data = response['body']['data']
    assert [row['product_id'] for row in data] == ['rows-3', 'rows-2']
    assert data[0]['store_logo_url'] == 'logo.png'

def test_get_rows_second_page():
    body = {'table': 'products', 'start': 2, 'count': 2, 'filters': {'brand': 'RowsBrand'},
            'sort': {'column': 'price_usd', 'direction': 'desc'}}
    response = execute_endpoint('/get-rows', method='POST', body=body, auth=True)
    assert [row['product_id'] for row in response['body']['data']] == ['rows-1']
    assert response['body']['totalCount'] == 3

def test_total_count_matches_export():
    filters = {'brand': 'RowsBrand', 'price_usd_from': 10}
    page = execute_endpoint('/get-rows', method='POST', auth=True,
                            body={'table': 'products', 'start': 0, 'count': 1, 'filters': filters})
    export = execute_endpoint('/export-data', method='POST', auth=True,
                              body={'table': 'products', 'filters': filters})
    assert export['statusCode'] == 200
    assert page['body']['totalCount'] == len(export['body']) == 2

def test_flag_filter():
    response = execute_endpoint('/export-data', method='POST', auth=True,
                                body={'table': 'products', 'filters': {'brand': 'RowsBrand', 'star_seller': True}})
    assert [row['product_id'] for row in response['body']] == ['rows-1']

def test_invalid_table():
    response = execute_endpoint('/get-rows', method='POST', body={'table': 'users'}, auth=True)
    assert response['statusCode'] == 400
    assert response['body']['comment'] == 'INVALID_TABLE'

def test_invalid_sort():
    response = execute_endpoint('/get-rows', method='POST', auth=True,
                                body={'table': 'products', 'sort': {'column': 'password'}})
    assert response['statusCode'] == 400
    assert response['body']['comment'] == 'INVALID_SORT'

def test_get_rows_requires_login():
    response = execute_endpoint('/get-rows', method='POST', body={'table': 'products'})
    assert response['statusCode'] == 401

def test_filter_options():
    response = execute_endpoint('/filter-options/products', auth=True)
    assert response['statusCode'] == 200
    assert 'NZ' in response['body']['countries']
    assert 'RowsCategory' in response['body']['categories']
    assert 'RowsBrand' in response['body']['brands']

def test_product_history():
    execute_endpoint('/add-product-batch', method='POST', auth=True,
                     body=[{**ROWS[0], 'price_usd': 7}])
    response = execute_endpoint('/product-history/rows-1/price_usd', auth=True)
    assert response['statusCode'] == 200
    assert [entry['price_usd'] for entry in response['body']] == [5.0, 7.0]

def test_store_history_field_allow_list():
    response = execute_endpoint('/store-history/Rows%20Store/store_url', auth=True)
    assert response['statusCode'] == 400
    assert response['body']['comment'] == 'INVALID_HISTORY_FIELD'

def test_store_history():
    response = execute_endpoint('/store-history/Rows%20Store/store_sales', auth=True)
    assert response['statusCode'] == 200
    assert len(response['body']) == 1
