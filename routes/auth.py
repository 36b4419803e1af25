from routes import route
from middlewares.authenticate import authenticate
from models.user import User
from utils import Response, use, jwt


@route("auth/login", "POST")
def login(event, response: Response):
    """Log the user in and return a JSON web token.

    Log the user in and create a JSON web token for the user, which can be used to authenticate the user in future requests.
    ---
    tags:
        - auth
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        email:
                            type: string
                        password:
                            type: string
    responses:
        200:
            description: A successful login
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            token:
                                type: string
        400:
            description: Missing credentials
        401:
            description: Invalid credentials
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
                                example: 'INVALID_CREDENTIALS'
    """
    body = event.get("body") or {}
    email = (body.get("email") or "").strip().lower()
    if not email:
        return response.status(400).json({"success": False, "comment": "EMAIL_REQUIRED"})
    password = body.get("password")
    if not password:
        return response.status(400).json({"success": False, "comment": "PASSWORD_REQUIRED"})
    return {"success": True, "token": jwt.create_session_token(email, password)}


@route("auth/verify", "POST")
def verify(event, response: Response):
    """Verify the JSON web token.

    Return whether the JSON web token is valid.
    ---
    tags:
        - auth
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        token:
                            type: string
    responses:
        200:
            description: A successful verification
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
        400:
            description: A failed verification
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
                                example: 'VERIFY_FAILED'
    """
    token = (event.get("body") or {}).get("token")
    if not token:
        return response.status(400).json({"success": False, "comment": "TOKEN_REQUIRED"})
    if jwt.verify_token(token):
        return {"success": True}
    return response.status(400).json({"success": False, "comment": "VERIFY_FAILED"})


@route("auth/me", "GET")
@use(authenticate)
def me(event):
    """Return the authenticated user.
    ---
    tags:
        - auth
    responses:
        200:
            description: The current user, without the password hash
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            user:
                                type: object
    """
    user: User = event['user']
    return {"success": True, "user": user.public_dict()}
