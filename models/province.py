# models/province.py
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from models.common import NonBlankStr, ObjectIdField

ProvinceName = Annotated[NonBlankStr, Field(max_length=100)]


class ProvinceCreate(BaseModel):
    name: ProvinceName
    country_id: ObjectIdField


class ProvinceUpdate(BaseModel):
    name: Optional[ProvinceName] = None
    country_id: Optional[ObjectIdField] = None
