import logging
from utils import jwt

logger = logging.getLogger(__name__)

def get_bearer(headers: dict) -> str | None:
    # API Gateway keeps the client's header casing
    for key, value in headers.items():
        if key.lower() == 'authorization':
            return value
    return None

def authenticate(event, response, context):
    """Middleware to authenticate the user using a JSON web token.

    This function passes the payload of the JSON web token and the user to the applied function.

    Appends the following OpenAPI documentation to the applied function:

    ---
    security:
        - bearerAuth: []
    """
    headers = event.get('headers', None)
    if headers is None:
        response.status(401).json({
            "success": False,
            "comment": 'NO_HEADERS',
        })
        return event, response, context
    bearer = get_bearer(headers)
    if bearer is None:
        response.status(401).json({
            "success": False,
            "comment": 'NO_AUTHORIZATION_HEADER',
        })
        return event, response, context
    if not bearer.startswith('Bearer '):
        response.status(401).json({
            "success": False,
            "comment": 'INVALID_AUTHORIZATION_HEADER',
        })
        return event, response, context
    token = bearer[7:]
    if not jwt.verify_token(token):
        response.status(401).json({
            "success": False,
            "comment": "SESSION_TOKEN_EXPIRED",
        })
        return event, response, context

    json_web_token = jwt.JsonWebToken.from_token(token)

    # Ensure the user still exists in the database
    user = json_web_token.user
    if user is None:
        response.status(401).json({
            "success": False,
            "comment": "USER_NOT_FOUND",
        })
        return event, response, context

    event['token'] = json_web_token
    event['user'] = user
    logger.info("[Authentication] User successfully verified: %s", user.email)
    return event, response, context
