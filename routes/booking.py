# routes/booking.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError, ValidationError
from models.booking import ACTIVE_STATUSES, BookingCreate, BookingStatus, BookingUpdate
from models.common import parse_datetime
from services.booking import create_booking, update_booking
from services.crud import delete_document, find_or_404, object_id_or_400, paginate
from services.summary import get_booking_summary
from utils.auth import get_current_user
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

NEWEST_FIRST = [("createdAt", -1)]


def date_param(value: Optional[str], name: str):
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        raise ValidationError([f"Invalid {name}"])


# === POST: Create booking ===
@router.post("/add")
async def add_booking(booking_in: BookingCreate, db=Depends(get_db)):
    booking = await create_booking(db, booking_in)
    return send_create(CREATED, booking)


# === GET: All bookings (paginated) ===
@router.get("/selAll")
async def get_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: Optional[BookingStatus] = None,
    db=Depends(get_db),
):
    query = {"status": status} if status else {}
    bookings, pagination = await paginate(db.bookings, query, page, limit, sort=NEWEST_FIRST)
    if not bookings and not query:
        raise NotFoundError("Bookings not found")
    return send_success(SELECT_ALL, {"bookings": bookings, "pagination": pagination})


# === GET: Bookings of a user ===
@router.get("/user/{user_id}")
async def get_bookings_by_user(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db=Depends(get_db),
):
    query = {"user_id": object_id_or_400(user_id, "userID")}
    bookings, pagination = await paginate(db.bookings, query, page, limit, sort=NEWEST_FIRST)
    return send_success(SELECT_ALL, {"bookings": bookings, "pagination": pagination})


# === GET: Revenue / traveler summary ===
@router.get("/bookingsummary")
async def booking_summary(
    packageID: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    status: Optional[List[BookingStatus]] = Query(None),
    groupBy: Literal["package", "day", "month", "status"] = "package",
    db=Depends(get_db),
):
    package_id = object_id_or_400(packageID, "packageID") if packageID else None
    statuses = status or ACTIVE_STATUSES
    summary = await get_booking_summary(
        db,
        package_id=package_id,
        statuses=statuses,
        start_date=date_param(startDate, "startDate"),
        end_date=date_param(endDate, "endDate"),
        group_by=groupBy,
    )
    return send_success("Booking summary", {
        "summary": summary,
        "filters": {
            "packageID": packageID,
            "startDate": startDate,
            "endDate": endDate,
            "status": statuses,
            "groupBy": groupBy,
        },
        "totalResults": len(summary),
    })


# === GET: One booking ===
@router.get("/selOne/{booking_id}")
async def get_booking(booking_id: str, db=Depends(get_db)):
    booking = await find_or_404(db.bookings, booking_id, "Booking")
    return send_success(SELECT_ONE, booking)


# === PUT: Partial update ===
@router.put("/update/{booking_id}")
async def edit_booking(booking_id: str, booking_in: BookingUpdate, db=Depends(get_db)):
    booking = await update_booking(db, booking_id, booking_in)
    return send_success(UPDATED, booking)


# === DELETE: Remove booking ===
@router.delete("/delete/{booking_id}")
async def delete_booking(booking_id: str, db=Depends(get_db)):
    await delete_document(db.bookings, booking_id, "Booking")
    return send_success(DELETED)
