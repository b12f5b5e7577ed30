# models/package.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, model_validator

from models.common import DateField, NonBlankStr, Number, ObjectIdField, Quantity

DepartureStatus = Literal["available", "soldout", "cancelled"]


class Departure(BaseModel):
    model_config = ConfigDict(extra="allow")

    departureDate: DateField
    returnDate: DateField
    availableSlots: StrictInt = Field(gt=0)
    bookedSlots: Quantity = 0
    status: DepartureStatus = "available"
    priceAdult: Optional[Number] = Field(default=None, ge=0)
    priceChild: Optional[Number] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_dates(self):
        if self.departureDate >= self.returnDate:
            raise ValueError("returnDate must be after departureDate")
        return self


class PackageCreate(BaseModel):
    name: NonBlankStr
    code: NonBlankStr
    description: str = ""
    baseCurrency: NonBlankStr
    durationDays: StrictInt
    isActive: StrictBool
    startCity_id: ObjectIdField
    country_id: ObjectIdField
    minTravelers: Optional[Quantity] = None
    maxTravelers: Optional[Quantity] = None
    priceAdult: Number = Field(default=0, ge=0)
    priceChild: Number = Field(default=0, ge=0)
    inclusions: List[str] = []
    exclusions: List[str] = []
    requirements: List[str] = []
    ratingAvg: Number = Field(default=0, ge=0, le=5)
    ratingCount: Quantity = 0
    scheduledDepartures: List[Departure] = Field(min_length=1)


class PackageUpdate(BaseModel):
    name: Optional[NonBlankStr] = None
    code: Optional[NonBlankStr] = None
    description: Optional[str] = None
    baseCurrency: Optional[NonBlankStr] = None
    durationDays: Optional[StrictInt] = None
    isActive: Optional[StrictBool] = None
    startCity_id: Optional[ObjectIdField] = None
    country_id: Optional[ObjectIdField] = None
    minTravelers: Optional[Quantity] = None
    maxTravelers: Optional[Quantity] = None
    priceAdult: Optional[Number] = Field(default=None, ge=0)
    priceChild: Optional[Number] = Field(default=None, ge=0)
    inclusions: Optional[List[str]] = None
    exclusions: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    scheduledDepartures: Optional[List[Departure]] = None
