"""Unit tests for utils/jwt.py and utils/hash_password.py."""

import time

import pytest

from models.user import User
from utils import jwt
from utils.hash_password import hash_password, verify_password


def make_user(**fields):
    return User(id="user-1", email="analyst@example.com", password=hash_password("secret"), **fields)


class TestHashPassword:

    def test_hash_is_deterministic(self):
        assert hash_password("secret") == hash_password("secret")
        assert hash_password("secret") != hash_password("Secret")

    def test_salt_changes_the_hash(self):
        assert hash_password("secret", salt="a") != hash_password("secret", salt="b")

    def test_verify_password(self):
        hashed = hash_password("secret")
        assert verify_password("secret", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("", hashed)
        assert not verify_password("secret", None)


class TestJsonWebToken:

    def test_token_round_trip(self):
        token = jwt.JsonWebToken.from_user(make_user(name="Ana", is_admin=True)).token
        decoded = jwt.JsonWebToken.from_token(token)
        assert decoded.sub == "user-1"
        assert decoded.email == "analyst@example.com"
        assert decoded.name == "Ana"
        assert decoded.is_admin is True
        assert jwt.verify_token(token)

    def test_tampered_payload_is_rejected(self):
        token = jwt.JsonWebToken.from_user(make_user()).token
        header, _, signature = token.split(".")
        forged = jwt.to_base64({"sub": "admin", "iat": 0, "exp": int(time.time()) + 60, "email": "x", "is_admin": True})
        assert not jwt.verify_token(f"{header}.{forged}.{signature}")
        assert jwt.decode_token(f"{header}.{forged}.{signature}") is None

    def test_expired_token(self):
        token = jwt.JsonWebToken.from_user(make_user(), expire=-10).token
        assert not jwt.verify_token(token)
        assert jwt.decode_token(token)["sub"] == "user-1"

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "!!.??.##"])
    def test_malformed_tokens(self, token):
        assert not jwt.verify_token(token)
        assert jwt.decode_token(token) is None

    def test_base64_round_trip(self):
        data = {"sub": "user-1", "name": "Zoë"}
        encoded = jwt.to_base64(data)
        assert "=" not in encoded
        assert jwt.from_base64(encoded) == data
