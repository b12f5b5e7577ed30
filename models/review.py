# models/review.py
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field, StrictInt

from models.common import ObjectIdField

TargetType = Literal["package", "attraction"]
Stars = Annotated[StrictInt, Field(ge=1, le=5)]


class ReviewTarget(BaseModel):
    type: TargetType
    id: ObjectIdField


class ReviewCreate(BaseModel):
    user_id: ObjectIdField
    rating: Stars
    comment: str = ""
    photos: List[str] = []
    target: ReviewTarget


class ReviewUpdate(BaseModel):
    rating: Optional[Stars] = None
    comment: Optional[str] = None
    photos: Optional[List[str]] = None
    target: Optional[ReviewTarget] = None
