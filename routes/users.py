import logging
from models.user import User
from routes import route
from middlewares.authenticate import authenticate
from middlewares.authorise import authorise_admin
from utils import Response, use
from utils.hash_password import hash_password
from db.shared_repositories import users_repository

logger = logging.getLogger(__name__)

ACCESS_FLAGS = ['is_admin', 'prod_access', 'store_access', 'prod_and_store_access']
EDITABLE_FIELDS = ['email', 'name', 'password', *ACCESS_FLAGS]

@route('users', 'GET')
@use(authenticate)
@use(authorise_admin)
# Event is not directly used here, but is needed for authenticate to work
def list_users(event):
    """Returns a list of users from the database (admin only)

    Returns every user without their password hash.
    ---
    tags:
        - users
    responses:
        200:
            description: A successful response
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
                            properties:
                                id:
                                    type: string
                                email:
                                    type: string
                                name:
                                    type: string
                                is_admin:
                                    type: boolean
                                prod_access:
                                    type: boolean
                                store_access:
                                    type: boolean
                                prod_and_store_access:
                                    type: boolean
        403:
            description: Not an admin
    """
    with users_repository.create_session() as user_session:
        users: list[User] = user_session.list(order_by='created_at')
    return [user.public_dict() for user in users]

@route('users', 'POST')
@use(authenticate)
@use(authorise_admin)
def create_user(event, response: Response):
    """Create a new user (admin only)

    Create a new user in the database.
    ---
    tags:
        - users
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    required:
                        - email
                        - password
                    type: object
                    properties:
                        email:
                            type: string
                        password:
                            type: string
                        name:
                            type: string
                        is_admin:
                            type: boolean
                        prod_access:
                            type: boolean
                        store_access:
                            type: boolean
                        prod_and_store_access:
                            type: boolean
    responses:
        201:
            description: User created successfully
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            user:
                                type: object
        400:
            description: Missing email or password
        409:
            description: A user with this email already exists
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
                                example: 'USER_ALREADY_EXISTS'
    """
    body = event.get('body') or {}
    email = (body.get('email') or '').strip().lower()
    password = body.get('password')
    if not email or not password:
        return response.status(400).json({
            "success": False,
            "comment": "EMAIL_AND_PASSWORD_REQUIRED"
        })

    with users_repository.create_session() as user_session:
        if user_session.get_first({'email': email}) is not None:
            return response.status(409).json({
                "success": False,
                "comment": "USER_ALREADY_EXISTS"
            })
        created = user_session.create({
            'email': email,
            'password': hash_password(password),
            'name': body.get('name'),
            **{flag: bool(body.get(flag, False)) for flag in ACCESS_FLAGS},
        })
        user = user_session.get_first({'id': created['id']})

    logger.info("[Users] Created user %s", email)
    return response.status(201).json({
        "success": True,
        "user": user.public_dict()
    })

@route('users/{user_id}', 'PUT')
@use(authenticate)
@use(authorise_admin)
def update_user(event, response: Response):
    """Update a user (admin only)

    Update a user's email, name, password or access flags. Only the fields provided are changed.
    ---
    tags:
        - users
    parameters:
        - in: path
          name: user_id
          required: true
          schema:
            type: string
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        email:
                            type: string
                        name:
                            type: string
                        password:
                            type: string
                        is_admin:
                            type: boolean
                        prod_access:
                            type: boolean
                        store_access:
                            type: boolean
                        prod_and_store_access:
                            type: boolean
    responses:
        200:
            description: User updated
        400:
            description: Unknown field
        404:
            description: User not found
    """
    user_id = event['pathParameters']['user_id']
    new_data = event.get('body') or {}

    # Ensure that the fields are acceptable
    for key in new_data:
        if key not in EDITABLE_FIELDS:
            return response.status(400).json({
                "success": False,
                "comment": "FIELD_NOT_EDITABLE",
                "error": f"Field '{key}' is not editable"
            })

    changes = {'id': user_id}
    for key, value in new_data.items():
        if key == 'password':
            changes[key] = hash_password(value)
        elif key in ACCESS_FLAGS:
            changes[key] = bool(value)
        elif key == 'email':
            changes[key] = str(value).strip().lower()
        else:
            changes[key] = value

    with users_repository.create_session() as user_session:
        if user_session.get_first({'id': user_id}) is None:
            return response.status(404).json({
                "success": False,
                "comment": "USER_NOT_FOUND"
            })
        if 'email' in changes:
            other = user_session.get_first({'email': changes['email']})
            if other is not None and other.id != user_id:
                return response.status(409).json({
                    "success": False,
                    "comment": "USER_ALREADY_EXISTS"
                })
        user_session.update(changes)
        user = user_session.get_first({'id': user_id})

    return {"success": True, "user": user.public_dict()}
