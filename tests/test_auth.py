# tests/test_auth.py
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from bson import ObjectId

from config import SECRET_KEY, SECRET_KEY_REFRESH
from errors import NotFoundError, UnauthorizedError
from utils.auth import decode_token, generate_tokens, hash_password, refresh_tokens, verify_password


def test_password_hash_round_trip():
    password_hash = hash_password("secret123")
    assert password_hash != "secret123"
    assert verify_password("secret123", password_hash)
    assert not verify_password("wrong", password_hash)


def test_tokens_carry_user_id_and_use_separate_secrets():
    user_id = ObjectId()
    tokens = generate_tokens(user_id)
    assert decode_token(tokens["token"]) == str(user_id)
    assert decode_token(tokens["refreshToken"], SECRET_KEY_REFRESH) == str(user_id)
    with pytest.raises(UnauthorizedError):
        decode_token(tokens["refreshToken"])


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode({"sub": str(ObjectId()), "exp": past}, SECRET_KEY, algorithm="HS256")
    with pytest.raises(UnauthorizedError, match="Token invalid"):
        decode_token(token)


def test_token_with_bad_subject_is_rejected():
    token = jwt.encode({"sub": "someone"}, SECRET_KEY, algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        decode_token(token)


async def test_refresh_returns_new_pair(db, user):
    tokens = await refresh_tokens(db, generate_tokens(user["_id"])["refreshToken"])
    assert decode_token(tokens["token"]) == str(user["_id"])


async def test_refresh_for_deleted_user(db):
    with pytest.raises(NotFoundError):
        await refresh_tokens(db, generate_tokens(ObjectId())["refreshToken"])


def test_token_of_deleted_user_is_401(client):
    headers = {"Authorization": f"Bearer {generate_tokens(ObjectId())['token']}"}
    response = client.get("/country/selAll", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "User no longer exists"


def test_root_is_public(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "API is running..."}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"status": 404, "message": "Not Found"}
