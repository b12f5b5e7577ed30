# models/city.py
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from models.common import GeoPoint, NonBlankStr, ObjectIdField

CityName = Annotated[NonBlankStr, Field(max_length=100)]


class CityCreate(BaseModel):
    name: CityName
    province_id: ObjectIdField
    country_id: ObjectIdField
    location: Optional[GeoPoint] = None


class CityUpdate(BaseModel):
    name: Optional[CityName] = None
    province_id: Optional[ObjectIdField] = None
    country_id: Optional[ObjectIdField] = None
    location: Optional[GeoPoint] = None
