# models/booking.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.common import DateField, NonBlankStr, Number, ObjectIdField, Quantity
from services.pricing import generate_booking_no

BookingStatus = Literal["pending", "confirmed", "paid", "completed", "cancelled"]
PaymentStatus = Literal["unpaid", "paid"]

# Statuses that consume package capacity
ACTIVE_STATUSES = ["confirmed", "paid", "completed"]


class BookingOption(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    price: Number = 0


class BookingItem(BaseModel):
    # extra client fields (departure info, notes...) are kept on the item
    model_config = ConfigDict(extra="allow")

    package_id: ObjectIdField
    title: NonBlankStr
    qtyAdults: Quantity
    qtyChildren: Quantity = 0
    priceAdult: Number = Field(ge=0)
    priceChild: Number = Field(default=0, ge=0)
    options: List[BookingOption] = []


class Amounts(BaseModel):
    itemsTotal: Optional[Number] = None   # always recomputed
    discount: Optional[Number] = None
    tax: Optional[Number] = None
    fee: Optional[Number] = None
    grandTotal: Optional[Number] = None   # always recomputed


class TravelWindow(BaseModel):
    startDate: Optional[DateField] = None
    endDate: Optional[DateField] = None


class Traveler(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    dob: Optional[DateField] = None


class PaymentRequest(BaseModel):
    method: Optional[str] = None


class PaymentUpdate(BaseModel):
    method: Optional[str] = None
    status: Optional[PaymentStatus] = None
    amount: Optional[Number] = Field(default=None, gt=0)
    ref: Optional[str] = None


class BookingCreate(BaseModel):
    bookingNo: str
    user_id: ObjectIdField
    status: BookingStatus
    items: List[BookingItem] = Field(min_length=1)
    currency: NonBlankStr
    amounts: Optional[Amounts] = None
    payment: Optional[PaymentRequest] = None
    travelWindow: Optional[TravelWindow] = None
    travelers: Optional[List[Traveler]] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def assign_booking_no(cls, data):
        # bookingNo is generated server side, before the rest is validated
        if isinstance(data, dict):
            data = {**data, "bookingNo": generate_booking_no()}
        return data


class BookingUpdate(BaseModel):
    user_id: Optional[ObjectIdField] = None
    status: Optional[BookingStatus] = None
    items: Optional[List[BookingItem]] = Field(default=None, min_length=1)
    currency: Optional[NonBlankStr] = None
    amounts: Optional[Amounts] = None
    payment: Optional[PaymentUpdate] = None
    travelWindow: Optional[TravelWindow] = None
    travelers: Optional[List[Traveler]] = None
    notes: Optional[str] = None
