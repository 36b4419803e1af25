import pytest
from unittest.mock import patch
from base import execute_endpoint
from lambda_function import lambda_handler
from config import config

CSV_CONTENT = (
    "product_id,product_title,price_usd,category_tree\n"
    "csv-1,CSV mug,10,CSV Root > Mugs\n"
    "csv-2,CSV cup,NULL,CSV Root > Cups\n"
    "csv-3,,12,CSV Root > Mugs\n"
)

def test_upload_csv():
    response = execute_endpoint('/uploads/product', method='POST', body={'content': CSV_CONTENT}, auth=True)
    assert response['statusCode'] == 200, response['body']
    assert response['body']['count'] == 2
    assert response['body']['total'] == 3
    assert response['body']['status'] == 'partial'
    assert response['body']['failures'][0]['index'] == 2

    latest = execute_endpoint('/upload-history?limit=1', auth=True)['body'][0]
    assert latest['file_type'] == 'products'
    assert latest['rows_processed'] == 2
    assert latest['total_rows'] == 3
    assert latest['status'] == 'partial'

def test_upload_unknown_file_type():
    response = execute_endpoint('/uploads/users', method='POST', body={'content': CSV_CONTENT}, auth=True)
    assert response['statusCode'] == 400
    assert response['body']['comment'] == 'INVALID_FILE_TYPE'

def test_upload_without_content():
    response = execute_endpoint('/uploads/products', method='POST', body={}, auth=True)
    assert response['statusCode'] == 400

def test_upload_requires_admin():
    response = execute_endpoint('/uploads/products', method='POST', body={'content': CSV_CONTENT}, auth=True, admin=False)
    assert response['statusCode'] == 403

def test_record_upload_history():
    body = {'file_type': 'store', 'rows_processed': 40, 'total_rows': 42, 'status': 'partial', 'error_message': '2 rows rejected'}
    response = execute_endpoint('/upload-history', method='POST', body=body, auth=True)
    assert response['statusCode'] == 201
    entry_id = response['body']['id']

    history = execute_endpoint('/upload-history', auth=True)['body']
    entry = next(entry for entry in history if entry['id'] == entry_id)
    assert entry['file_type'] == 'stores'
    assert entry['rows_processed'] == 40
    assert entry['error_message'] == '2 rows rejected'

def test_record_upload_history_validation():
    body = {'file_type': 'products', 'rows_processed': 'many', 'status': 'partial'}
    response = execute_endpoint('/upload-history', method='POST', body=body, auth=True)
    assert response['statusCode'] == 400
    body = {'file_type': 'products', 'rows_processed': 1, 'status': 'done'}
    response = execute_endpoint('/upload-history', method='POST', body=body, auth=True)
    assert response['statusCode'] == 400

def test_upload_history_limit_must_be_a_number():
    response = execute_endpoint('/upload-history?limit=ten', auth=True)
    assert response['statusCode'] == 400

def test_presign():
    with patch('routes.uploads.presign_upload', return_value={
        'url': 'https://presigned.example.com/upload', 'bucket': config.uploads.bucket,
        'key': 'uploads/stores/1.abc.csv', 'expires_in': 900,
    }) as presign:
        response = execute_endpoint('/uploads/store/presign', method='POST', auth=True)
    assert response['statusCode'] == 200
    assert response['body']['success'] is True
    assert response['body']['key'] == 'uploads/stores/1.abc.csv'
    presign.assert_called_once_with('stores')

def test_s3_event_ingests_the_object():
    content = b"store_name,store_url\nS3 Store,https://example.com/s3\n"
    event = {'Records': [{'s3': {
        'bucket': {'name': config.uploads.bucket},
        'object': {'key': 'uploads/stores/1700000000000.abc.csv'},
    }}]}
    with patch('lambda_function.read_upload', return_value=content) as read_upload:
        results = lambda_handler(event, None)
    read_upload.assert_called_once_with(config.uploads.bucket, 'uploads/stores/1700000000000.abc.csv')
    assert results[0]['count'] == 1
    assert results[0]['key'] == 'uploads/stores/1700000000000.abc.csv'

def test_s3_event_from_another_bucket():
    event = {'Records': [{'s3': {'bucket': {'name': 'someone-elses-bucket'}, 'object': {'key': 'uploads/stores/1.csv'}}}]}
    with pytest.raises(ValueError):
        lambda_handler(event, None)
