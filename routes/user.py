# routes/user.py
import logging

from fastapi import APIRouter, Depends

from database import get_db
from errors import NotFoundError, UnauthorizedError, ValidationError
from models.common import dump_changes
from models.user import RefreshRequest, UserCreate, UserLogin, UserUpdate
from services.crud import apply_patch, delete_document, find_or_404, insert_document
from utils.auth import (
    PUBLIC_USER_FIELDS,
    generate_tokens,
    get_current_user,
    hash_password,
    refresh_tokens,
    verify_password,
)
from utils.diff import FieldKind, diff_fields
from utils.response import (
    DELETED,
    LOGGED_IN,
    REGISTERED,
    SELECT_ALL,
    SELECT_ONE,
    UPDATED,
    send_create,
    send_success,
)

logger = logging.getLogger(__name__)

router = APIRouter()
protected = [Depends(get_current_user)]

PROFILE_FIELDS = {
    "name": FieldKind.STRING,
    "email": FieldKind.STRING,
    "phone": FieldKind.STRING,
}


def public_user(user: dict) -> dict:
    return {key: value for key, value in user.items() if key != "passwordHash"}


# === POST: Register ===
@router.post("/register")
async def register(user_in: UserCreate, db=Depends(get_db)):
    if await db.users.find_one({"email": user_in.email}):
        raise ValidationError(["Email already registered"])
    data = user_in.model_dump(exclude={"password"})
    data.update({
        "passwordHash": hash_password(user_in.password),
        "passport": {},
        "addresses": [],
        "loyaltyPoints": 0,
    })
    user = await insert_document(db.users, data)
    return send_create(REGISTERED, public_user(user))


# === POST: Login ===
@router.post("/login")
async def login(user_in: UserLogin, db=Depends(get_db)):
    user = await db.users.find_one({"email": user_in.email})
    if not user or not verify_password(user_in.password, user.get("passwordHash", "")):
        logger.warning("Failed login for %s", user_in.email)
        raise UnauthorizedError("Invalid email or password")
    return send_success(LOGGED_IN, {**public_user(user), **generate_tokens(user["_id"])})


# === PUT: New token pair from a refresh token ===
@router.put("/refresh")
async def refresh(body: RefreshRequest, db=Depends(get_db)):
    tokens = await refresh_tokens(db, body.refreshToken)
    return send_success(UPDATED, tokens)


# === GET: All users ===
@router.get("/selAll", dependencies=protected)
async def get_users(db=Depends(get_db)):
    users = await db.users.find({}, PUBLIC_USER_FIELDS).to_list(length=None)
    if not users:
        raise NotFoundError("Users not found")
    return send_success(SELECT_ALL, users)


# === GET: One user ===
@router.get("/selOne/{user_id}", dependencies=protected)
async def get_user(user_id: str, db=Depends(get_db)):
    user = await find_or_404(db.users, user_id, "User", PUBLIC_USER_FIELDS)
    return send_success(SELECT_ONE, user)


# === PUT: Update profile ===
@router.put("/update/{user_id}", dependencies=protected)
async def update_profile(user_id: str, user_in: UserUpdate, db=Depends(get_db)):
    current = await find_or_404(db.users, user_id, "User")
    changes = dump_changes(user_in)
    patch = diff_fields(changes, current, PROFILE_FIELDS)
    if "email" in patch and await db.users.find_one({"email": patch["email"]}):
        raise ValidationError(["Email already registered"])
    user = await apply_patch(db.users, current["_id"], patch, PUBLIC_USER_FIELDS)
    return send_success(UPDATED, user)


# === DELETE: Remove user ===
@router.delete("/delete/{user_id}", dependencies=protected)
async def delete_user(user_id: str, db=Depends(get_db)):
    await delete_document(db.users, user_id, "User")
    return send_success(DELETED)
