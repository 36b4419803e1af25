from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
import json
import inspect

CORS_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*',
}

def json_default(value):
    """Serialise the values database rows carry that `json` does not know."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

class Response:
    """API Gateway proxy response built up by middlewares and routes.

    Setting a status or a body terminates the response, after which no further
    middleware or route runs.
    """

    def __init__(self):
        self.status_code = 200
        self.body = {}
        self.terminated = False
        self.logs = []

    def status(self, code: int):
        self.status_code = code
        self.body = {'statusCode': code}
        self.terminated = True
        return self

    def json(self, body):
        self.body = {
            'statusCode': self.status_code,
            'headers': dict(CORS_HEADERS),
            'isBase64Encoded': False,
            'body': json.dumps(body, default=json_default),
        }
        self.terminated = True
        return self

    def log(self, message):
        self.logs.append(message)
        return self

    def error(self, error):
        """Terminate with the status and body of an `EtsyVizError`."""
        return self.status(error.status_code).json(error.to_dict())

def middleware_docs(middleware) -> str:
    """OpenAPI lines a middleware contributes: everything after the first `---` of its docstring."""
    _, separator, block = (middleware.__doc__ or '').partition('---')
    return block.strip('\n') if separator else ''

def use(middleware):
    """Run `middleware` before the decorated route.

    The middleware takes and returns `(event, response, context)`. When it
    terminates the response the route is skipped. The route receives only as
    many of the three arguments as it declares.

    Lines after `---` in the middleware's docstring are appended to the route's
    docstring so `docgen.py` picks them up, e.g.:

    ```python
    \"\"\"
    ---
    security:
        - bearerAuth: []
    \"\"\"
    ```
    """
    def decorator(func):
        @wraps(func)
        def wrapper(event, response=None, context={}):
            if response is None:
                response = Response()
            event, response, context = middleware(event, response, context)
            if response.terminated:
                return event, response, context
            args = (event, response, context)
            num_args = len(inspect.signature(func).parameters)
            return func(*args[:num_args])
        extra = middleware_docs(middleware)
        if extra:
            wrapper.__doc__ = f'{wrapper.__doc__ or ""}\n\n{extra}'
        return wrapper
    return decorator
