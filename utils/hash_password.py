import hashlib
import hmac
from config import config

ITERATIONS = 260000

def hash_password(password: str, salt: str = None) -> str:
    """
    Hashes a password using PBKDF2-HMAC-SHA256 and the configured salt.

    :param password: The password to hash.
    :param salt: Overrides the configured salt.
    :return: The hashed password as a hexadecimal string.
    """
    salt = salt if salt is not None else config.app.salt
    return hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('utf-8'), ITERATIONS).hex()

def verify_password(password: str, hashed: str, salt: str = None) -> bool:
    """Compare a password against a stored hash in constant time."""
    if not password or not hashed:
        return False
    return hmac.compare_digest(hash_password(password, salt), hashed)
