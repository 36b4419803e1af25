import json
import logging
import traceback
import urllib.parse
from config import config
from middlewares import parse_body
from routes import parse_path_parameters, parse_query_parameters, routes
from utils import json_default
from utils.errors import EtsyVizError
from utils.etl.csv_extract import ingest_csv
from utils.presign import parse_upload_key, read_upload

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s %(message)s')
logger = logging.getLogger(__name__)

def error_body(status_code: int, comment: str, error: str) -> dict:
    return {
        'statusCode': status_code,
        'isBase64Encoded': False,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*'
        },
        'body': json.dumps({
            'success': False,
            'comment': comment,
            'error': error
        }, default=json_default)
    }

def handle_api_gateway_event(event_raw, context):
    try:
        event, response, context = parse_body(event_raw, context, None)
        path = event['path']
        method = event['httpMethod']
        path, query_params = parse_query_parameters(path)
        if not path.startswith('/'):
            path = f'/{path}'
        if path.endswith('/') and len(path) > 1:
            path = path[:-1]

        try:
            route, path_params = parse_path_parameters(path)
        except KeyError:
            route, path_params = None, {}
        logger.info("Route: %s %s (path params: %s)", method, route, path_params)

        if query_params:
            event['queryStringParameters'] = {**(event.get('queryStringParameters') or {}), **query_params}
        if path_params:
            event['pathParameters'] = path_params

        if route in routes and method in routes[route]:
            action = routes[route][method]
            _, response, _ = action(event, response, context)
            return response.body

        return error_body(404, 'ACTION_NOT_FOUND', f'No route found for "{path}" with method "{method}"')
    except EtsyVizError as e:
        return error_body(e.status_code, e.comment, str(e))
    except Exception as e:
        logger.error(traceback.format_exc())
        return error_body(500, 'INTERNAL_SERVER_ERROR', str(e))

def handle_s3_event(event, context):
    """Ingest every CSV object created in the uploads bucket."""
    results = []
    for record in event['Records']:
        bucket = record['s3']['bucket']['name']
        key = urllib.parse.unquote_plus(record['s3']['object']['key'], encoding='utf-8')
        # Only the uploads bucket is wired to this function
        if bucket != config.uploads.bucket:
            raise ValueError(f'This lambda function does not support bucket {bucket}')
        file_type = parse_upload_key(key)
        logger.info("Processing upload %s/%s as %s", bucket, key, file_type)
        try:
            result = ingest_csv(file_type, read_upload(bucket, key))
        except Exception:
            logger.error("Error ingesting object %s from bucket %s", key, bucket)
            raise
        results.append({'key': key, **result.to_dict()})
    return results

def lambda_handler(event, context):
    # If the event has records, it is an S3 event, so handle S3 event
    if event.get("Records"):
        logger.info('Handling S3 event')
        return handle_s3_event(event, context)
    # If the event has a path, it is an API Gateway event, so handle API call
    if event.get("path"):
        logger.info('Handling API Gateway event %s %s', event.get('httpMethod'), event.get('path'))
        return handle_api_gateway_event(event, context)

def invoke(event, verbose=False):
    result = lambda_handler({
        **event,
        "headers": {
            'Content-Type': 'application/json',
            **(event.get('headers', {}))
        }
    }, {})
    if verbose: print(json.dumps(result, indent=2))
    return result

if __name__ == "__main__":
    invoke({
        "path": 'category-hierarchy',
        "httpMethod": 'GET',
        "headers": {
            'Content-Type': 'application/json',
        }
    }, verbose=True)
