# utils/auth.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from bson import ObjectId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from config import (
    ACCESS_TOKEN_EXPIRES_HOURS,
    REFRESH_TOKEN_EXPIRES_HOURS,
    SECRET_KEY,
    SECRET_KEY_REFRESH,
)
from database import get_db
from errors import NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"
PUBLIC_USER_FIELDS = {"passwordHash": 0}


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _sign(user_id: str, secret: str, hours: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": user_id, "iat": now, "exp": now + timedelta(hours=hours)}
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def generate_tokens(user_id) -> dict:
    user_id = str(user_id)
    return {
        "token": _sign(user_id, SECRET_KEY, ACCESS_TOKEN_EXPIRES_HOURS),
        "refreshToken": _sign(user_id, SECRET_KEY_REFRESH, REFRESH_TOKEN_EXPIRES_HOURS),
    }


def decode_token(token: str, secret: str = SECRET_KEY) -> str:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError as err:
        logger.info("Rejected token: %s", err)
        raise UnauthorizedError("Token invalid")
    user_id = payload.get("sub")
    if not user_id or not ObjectId.is_valid(user_id):
        raise UnauthorizedError("Token invalid")
    return user_id


async def load_user(db, user_id: str) -> dict:
    user = await db.users.find_one({"_id": ObjectId(user_id)}, PUBLIC_USER_FIELDS)
    if not user:
        raise UnauthorizedError("User no longer exists")
    return user


async def refresh_tokens(db, refresh_token: str) -> dict:
    user_id = decode_token(refresh_token, SECRET_KEY_REFRESH)
    user = await db.users.find_one({"_id": ObjectId(user_id)}, PUBLIC_USER_FIELDS)
    if not user:
        raise NotFoundError("User not found")
    return generate_tokens(user["_id"])


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_db),
):
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError()
    user_id = decode_token(credentials.credentials)
    return await load_user(db, user_id)
