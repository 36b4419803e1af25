import base64
import json
import logging

logger = logging.getLogger(__name__)

def parse_body(event_raw, context, response):
    """Decode the JSON request body of an API Gateway event in place.

    A body that is not JSON is left as it is for the route to reject.
    """
    event = event_raw
    request_body = event_raw.get('body')
    if not isinstance(request_body, (str, bytes)):
        return (event, response, context)
    try:
        if event_raw.get('isBase64Encoded'):
            request_body = base64.b64decode(request_body)
        event['body'] = json.loads(request_body) if request_body else {}
    except (ValueError, TypeError) as e:
        logger.debug("[Middleware] Request body is not JSON: %s", e)
    return (event, response, context)
