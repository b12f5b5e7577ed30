# models/attraction.py
import re
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from models.common import GeoPoint, NonBlankStr, Number, ObjectIdField, Quantity

URL_PATTERN = re.compile(r"https?://\S+")


def check_url(value: str) -> str:
    if not URL_PATTERN.fullmatch(value):
        raise ValueError("must be a valid URL")
    return value


AttractionName = Annotated[NonBlankStr, Field(max_length=200)]
Description = Annotated[str, Field(max_length=2000)]
Rating = Annotated[Number, Field(ge=0, le=5)]
ImageUrl = Annotated[str, AfterValidator(check_url)]


class AttractionCreate(BaseModel):
    name: AttractionName
    description: Description = ""
    city_id: ObjectIdField
    province_id: ObjectIdField
    country_id: ObjectIdField
    location: Optional[GeoPoint] = None
    categories: List[NonBlankStr] = []
    images: List[ImageUrl] = []
    ratingAvg: Rating = 0
    ratingCount: Quantity = 0
    isActive: bool = True


class AttractionUpdate(BaseModel):
    name: Optional[AttractionName] = None
    description: Optional[Description] = None
    city_id: Optional[ObjectIdField] = None
    province_id: Optional[ObjectIdField] = None
    country_id: Optional[ObjectIdField] = None
    location: Optional[GeoPoint] = None
    categories: Optional[List[NonBlankStr]] = None
    images: Optional[List[ImageUrl]] = None
    ratingAvg: Optional[Rating] = None
    ratingCount: Optional[Quantity] = None
    isActive: Optional[bool] = None


class RatingIn(BaseModel):
    rating: Rating
