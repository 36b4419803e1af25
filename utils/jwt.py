from dataclasses import dataclass
import base64
import hashlib
import hmac
import json
import logging
import time
from config import config
from db.shared_repositories import users_repository
from models.user import User
from utils.errors import AuthorizationError
from utils.hash_password import verify_password

logger = logging.getLogger(__name__)

def to_base64(data: dict) -> str:
    """
    Encode a dictionary as unpadded URL-safe base64 of its JSON representation.

    Args:
        data (dict): The dictionary to encode.

    Returns:
        str: The encoded string.
    """
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

def from_base64(data: str) -> dict:
    padded = data + "=" * (-len(data) % 4)
    return json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))

def sign(message: str, secret: str = None) -> str:
    secret = secret or config.jwt.secret
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")

@dataclass
class JsonWebToken:
    """
    Class to handle JSON Web Token (JWT) creation, decoding, and verification.
    """
    sub: str  # subject identifier (user ID)
    iat: int  # issued at timestamp
    exp: int  # expiration timestamp
    email: str
    name: str | None = None
    is_admin: bool = False

    @property
    def payload(self) -> dict:
        """
        Convert the JsonWebToken instance to a dictionary payload.

        Returns:
            dict: The JWT payload.
        """
        return {
            "sub": self.sub,
            "iat": self.iat,
            "exp": self.exp,
            "email": self.email,
            "name": self.name,
            "is_admin": self.is_admin,
        }

    @property
    def token(self) -> str:
        """
        Generate the signed token string from the instance data.

        Returns:
            str: The encoded JWT token.
        """
        signing_input = f"{to_base64({'alg': 'HS256', 'typ': 'JWT'})}.{to_base64(self.payload)}"
        return f"{signing_input}.{sign(signing_input)}"

    @property
    def is_expired(self) -> bool:
        return time.time() > self.exp

    @staticmethod
    def from_token(token: str) -> 'JsonWebToken':
        """
        Decode a JWT token string into a JsonWebToken instance, if the signature is valid.

        Args:
            token (str): The JWT token to decode.

        Returns:
            JsonWebToken: An instance of JsonWebToken with the decoded data.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise ValueError("Invalid token format")

        header_base64, payload_base64, signature = parts
        if not hmac.compare_digest(signature, sign(f"{header_base64}.{payload_base64}")):
            raise ValueError("Invalid token signature")

        payload = from_base64(payload_base64)
        return JsonWebToken(
            sub=payload["sub"],
            iat=payload["iat"],
            exp=payload["exp"],
            email=payload["email"],
            name=payload.get("name"),
            is_admin=bool(payload.get("is_admin", False)),
        )

    @staticmethod
    def from_user(user: User, expire: int = None) -> 'JsonWebToken':
        """
        Create a JsonWebToken instance for a user.

        Args:
            user (User): The user.
            expire (int, optional): Lifetime of the token in seconds. Defaults to the configured expiration.
        """
        current_time = int(time.time())
        lifetime = config.jwt.expiration if expire is None else expire
        return JsonWebToken(
            sub=user.id,
            iat=current_time,
            exp=current_time + lifetime,
            email=user.email,
            name=user.name,
            is_admin=user.is_admin,
        )

    @property
    def user(self) -> User | None:
        """
        Get the User object associated with this token.
        """
        with users_repository.create_session() as session:
            return session.get_first({'id': self.sub})

def decode_token(token: str) -> dict | None:
    """
    Decode a JSON Web Token (JWT) and return its payload, or None when it is invalid.
    """
    try:
        return JsonWebToken.from_token(token).payload
    except (ValueError, TypeError, KeyError, UnicodeError):
        return None

def verify_token(token: str) -> bool:
    """
    Verify the validity of a JSON Web Token (JWT).

    Args:
        token (str): The JWT to verify.

    Returns:
        bool: True if the token is valid and not expired, False otherwise.
    """
    try:
        return not JsonWebToken.from_token(token).is_expired
    except (ValueError, TypeError, KeyError, UnicodeError):
        return False

def create_session_token(email: str, password: str) -> str:
    """
    Create a session token for the user with the given email and password.

    Raises:
        AuthorizationError: If the credentials are invalid.
    """
    with users_repository.create_session() as session:
        user = session.get_first({'email': email})
    if user is None or not verify_password(password, user.password):
        logger.info("[Auth] Invalid credentials for %s", email)
        raise AuthorizationError("Invalid email or password", comment="INVALID_CREDENTIALS")
    logger.info("[Auth] Password validation successful for %s", email)
    return JsonWebToken.from_user(user).token
