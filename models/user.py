# models/user.py
import re
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field

from models.common import NonBlankStr

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def check_email(value: str) -> str:
    if not EMAIL_PATTERN.fullmatch(value.strip()):
        raise ValueError("must be a valid email address")
    return value.strip()


def check_phone(value: str) -> str:
    digits = re.sub(r"\D", "", value)
    if not 10 <= len(digits) <= 15:
        raise ValueError("must have 10 to 15 digits")
    return value


Email = Annotated[str, AfterValidator(check_email)]
Phone = Annotated[NonBlankStr, AfterValidator(check_phone)]


class UserCreate(BaseModel):
    name: NonBlankStr
    email: Email
    phone: Phone
    password: str = Field(min_length=6)
    role: Literal["customer", "admin", "staff"] = "customer"


class UserLogin(BaseModel):
    email: Email
    password: NonBlankStr


class UserUpdate(BaseModel):
    name: Optional[Annotated[NonBlankStr, Field(min_length=2)]] = None
    email: Optional[Email] = None
    phone: Optional[Phone] = None


class RefreshRequest(BaseModel):
    refreshToken: NonBlankStr
