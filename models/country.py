# models/country.py
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

from models.common import NonBlankStr


def upper(value: str) -> str:
    return value.upper()


class Currency(BaseModel):
    code: str = Field(min_length=3, max_length=3)
    name: str = ""
    symbol: str = ""


class CountryCreate(BaseModel):
    name: NonBlankStr
    iso2: Annotated[str, Field(min_length=2, max_length=2), AfterValidator(upper)]
    iso3: Annotated[str, Field(min_length=3, max_length=3), AfterValidator(upper)]
    phoneCode: str = ""
    currency: Currency


class CountryUpdate(BaseModel):
    name: Optional[NonBlankStr] = None
    phoneCode: Optional[str] = None
    currency: Optional[Currency] = None
