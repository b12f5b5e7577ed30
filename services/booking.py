# services/booking.py
"""Booking workflow: creation with capacity checks, diff-based updates.

The capacity check counts active bookings and then inserts; two concurrent
requests can both pass the check. That is the accepted baseline contract, no
lock or reservation is taken here.
"""
import logging
from typing import Mapping

from bson import ObjectId

from errors import CapacityError, InsertError, NoChangeError, NotFoundError, UpdateError
from models.booking import ACTIVE_STATUSES, BookingCreate, BookingUpdate
from models.common import dump_changes, utcnow
from services.crud import find_or_404
from services.pricing import calculate_amounts, generate_transaction_ref, price_items
from utils.diff import FieldKind, diff_fields

logger = logging.getLogger(__name__)

BOOKING_FIELDS = {
    "user_id": FieldKind.REFERENCE,
    "status": FieldKind.STRING,
    "currency": FieldKind.STRING,
    "notes": FieldKind.STRING,
    "travelWindow": FieldKind.OBJECT,
    "travelers": FieldKind.ARRAY,
}


async def get_package_or_404(db, package_id: ObjectId) -> dict:
    package = await db.packages.find_one({"_id": package_id})
    if not package:
        raise NotFoundError(f"Package not found: {package_id}")
    return package


async def check_capacity(db, package: Mapping, item: Mapping):
    max_travelers = package.get("maxTravelers")
    if not max_travelers:
        return

    active_bookings = await db.bookings.count_documents({
        "items.package_id": package["_id"],
        "status": {"$in": ACTIVE_STATUSES},
    })
    available_slots = max_travelers - active_bookings
    requested = (item.get("qtyAdults") or 0) + (item.get("qtyChildren") or 0)
    name = package.get("name", package["_id"])

    if available_slots <= 0:
        logger.warning("Package %s sold out (%s active bookings)", package["_id"], active_bookings)
        raise CapacityError(f'Package "{name}" is sold out')
    if requested > available_slots:
        logger.warning("Package %s: %s requested, %s left", package["_id"], requested, available_slots)
        raise CapacityError(
            f'Only {available_slots} slots available for "{name}". '
            f"You requested {requested} travelers."
        )


async def create_booking(db, booking_in: BookingCreate) -> dict:
    data = booking_in.model_dump(exclude_none=True)

    for item in data["items"]:
        package = await get_package_or_404(db, item["package_id"])
        await check_capacity(db, package, item)

    items = price_items(data["items"])
    now = utcnow()
    booking = {
        **data,
        "items": items,
        "amounts": calculate_amounts(items, data.get("amounts")),
        "payment": {
            "method": data.get("payment", {}).get("method") or "",
            "status": "unpaid",
            "transactions": [],
        },
        "createdAt": now,
        "updatedAt": now,
    }

    result = await db.bookings.insert_one(booking)
    if not result.inserted_id:
        raise InsertError()
    booking["_id"] = result.inserted_id
    logger.info("Booking %s created (%s)", booking["bookingNo"], result.inserted_id)
    return booking


def _amount_overrides(current: Mapping, provided: Mapping) -> dict:
    stored = current.get("amounts") or {}
    overrides = {key: stored.get(key) for key in ("discount", "tax", "fee")}
    overrides.update({key: value for key, value in provided.items() if key in overrides})
    return overrides


async def update_booking(db, booking_id, booking_in: BookingUpdate) -> dict:
    current = await find_or_404(db.bookings, booking_id, "Booking")
    changes = dump_changes(booking_in)

    patch = diff_fields(changes, current, BOOKING_FIELDS)
    push = {}

    if "items" in changes:
        for item in changes["items"]:
            await get_package_or_404(db, item["package_id"])
        items = price_items(changes["items"])
        amounts = calculate_amounts(items, _amount_overrides(current, changes.get("amounts", {})))
        if items != current.get("items"):
            patch["items"] = items
        if amounts != current.get("amounts"):
            patch["amounts"] = amounts
    elif "amounts" in changes:
        amounts = calculate_amounts(
            current.get("items") or [],
            _amount_overrides(current, changes["amounts"]),
        )
        if amounts != current.get("amounts"):
            patch["amounts"] = amounts

    if "payment" in changes:
        payment = changes["payment"]
        stored_payment = current.get("payment") or {}
        for key in ("method", "status"):
            if key in payment and payment[key] != stored_payment.get(key):
                patch[f"payment.{key}"] = payment[key]

        merged_status = payment.get("status", stored_payment.get("status"))
        if merged_status == "paid" and payment.get("amount"):
            now = utcnow()
            push["payment.transactions"] = {
                "ref": payment.get("ref") or generate_transaction_ref(),
                "amount": float(payment["amount"]),
                "timestamp": now,
            }
            patch["payment.paidAt"] = now

    if not patch and not push:
        raise NoChangeError()

    update = {"$set": {**patch, "updatedAt": utcnow()}}
    if push:
        update["$push"] = push
    result = await db.bookings.update_one({"_id": current["_id"]}, update)
    if result.modified_count == 0:
        raise UpdateError()

    logger.info("Booking %s updated: %s", current["_id"], sorted(list(patch) + list(push)))
    return await db.bookings.find_one({"_id": current["_id"]})
