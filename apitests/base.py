# Base file for testing the API endpoints.
import json
from typing import Literal
from lambda_function import lambda_handler as local_handler

from utils.hash_password import hash_password
# Need to access the database directly as without functional authentication, it is not possible to create users through the API (which needs authentication).
from db.shared_repositories import users_repository

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'admin-password'
ANALYST_EMAIL = 'analyst@example.com'
ANALYST_PASSWORD = 'analyst-password'

_tokens = {}

def ensure_user_exists(email: str, password: str, is_admin: bool = False):
    """
    Ensure that a user with the given email exists, creating it directly in the database if not.
    """
    with users_repository.create_session() as session:
        if session.get_first({'email': email}) is None:
            session.create({
                'email': email,
                'password': hash_password(password),
                'name': 'Test User (Auto-generated)',
                'is_admin': is_admin,
            })

def login(email: str, password: str):
    event = {
        'path': '/auth/login',
        'httpMethod': 'POST',
        'body': json.dumps({'email': email, 'password': password})
    }
    response = local_handler(event, None)
    response['body'] = json.loads(response['body'])
    return response

def get_login_token(admin: bool = True) -> str:
    email, password = (ADMIN_EMAIL, ADMIN_PASSWORD) if admin else (ANALYST_EMAIL, ANALYST_PASSWORD)
    if email not in _tokens:
        ensure_user_exists(email, password, is_admin=admin)
        _tokens[email] = login(email, password)['body']['token']
    return _tokens[email]

def execute_endpoint(endpoint:str, 
                     method: Literal['GET', 'POST', 'DELETE', 'PUT', 'PATCH']='GET', 
                     body:dict | list | None = None, 
                     headers:dict | None = None, 
                     auth = False,
                     admin = True
                    ):
    """
    Execute a local API endpoint with the given method and body.
    
    :param endpoint: The API endpoint to call.
    :param method: The HTTP method to use (default is 'GET').
    :param body: The request body (default is None).
    :param headers: Additional headers to include in the request (default is None).
    :param auth: Whether to send a bearer token.
    :param admin: Whether the token belongs to an admin or to an analyst.
    :return: The response from the API call.
    """
    headers = dict(headers or {})
    if auth:
        headers['Authorization'] = f'Bearer {get_login_token(admin)}'
    
    event = {
        'httpMethod': method,
        'path': endpoint,
        'headers': headers,
    }
    
    if body is not None:
        event['body'] = json.dumps(body)
    
    response = local_handler(event, None)
    if 'body' in response and response['body'] is not None:
        response['body'] = json.loads(response['body'])
    return response
