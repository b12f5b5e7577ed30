# models/common.py
from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal

from bson import ObjectId
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    PlainValidator,
    StrictFloat,
    StrictInt,
    WithJsonSchema,
    field_validator,
)


def parse_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError("must be a valid ObjectId")


def utcnow() -> datetime:
    # pymongo hands datetimes back naive (UTC), so everything is kept naive
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("must be an ISO-8601 date")
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def check_not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("cannot be empty")
    return value


# 24-hex id, stored as a real ObjectId and rendered back as a string
ObjectIdField = Annotated[
    ObjectId,
    PlainValidator(parse_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
    WithJsonSchema({"type": "string", "pattern": "^[0-9a-fA-F]{24}$"}),
]

DateField = Annotated[datetime, BeforeValidator(parse_datetime)]

# JSON numbers only: numeric strings and booleans are rejected
Number = StrictFloat
Quantity = Annotated[StrictInt, Field(ge=0)]

NonBlankStr = Annotated[str, AfterValidator(check_not_blank)]


class GeoPoint(BaseModel):
    type: Literal["Point"]
    coordinates: List[Number] = Field(min_length=2, max_length=2)

    @field_validator("coordinates")
    @classmethod
    def check_range(cls, coordinates):
        lng, lat = coordinates
        if lng < -180 or lng > 180:
            raise ValueError("longitude must be between -180 and 180")
        if lat < -90 or lat > 90:
            raise ValueError("latitude must be between -90 and 90")
        return coordinates


def dump_changes(model: BaseModel) -> dict:
    """Top-level fields the client sent; nested values keep their defaults."""
    data = model.model_dump(exclude_none=True)
    return {field: value for field, value in data.items() if field in model.model_fields_set}
