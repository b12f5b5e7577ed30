# services/summary.py
from datetime import datetime
from typing import List, Optional

from bson import ObjectId

from models.booking import ACTIVE_STATUSES

GROUP_BY_OPTIONS = ("package", "day", "month", "status")

# groupBy -> (key added next to the package, expression)
_GROUP_KEYS = {
    "day": ("date", {"$dateToString": {"format": "%Y-%m-%d", "date": "$createdAt"}}),
    "month": ("month", {"$dateToString": {"format": "%Y-%m", "date": "$createdAt"}}),
    "status": ("status", "$status"),
}


def build_summary_pipeline(
    package_id: Optional[ObjectId] = None,
    statuses: Optional[List[str]] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    group_by: str = "package",
) -> list:
    match = {"status": {"$in": statuses or ACTIVE_STATUSES}}
    if package_id is not None:
        match["items.package_id"] = package_id
    if start_date or end_date:
        match["createdAt"] = {}
        if start_date:
            match["createdAt"]["$gte"] = start_date
        if end_date:
            match["createdAt"]["$lte"] = end_date

    pipeline = [
        {"$match": match},
        {"$unwind": "$items"},
        {"$match": {"items.package_id": {"$exists": True, "$ne": None}}},
    ]

    if group_by in _GROUP_KEYS:
        key, expression = _GROUP_KEYS[group_by]
        group_id = {key: expression, "package": "$items.package_id"}
        package_field = "_id.package"
    else:
        key = None
        group_id = "$items.package_id"
        package_field = "_id"

    pipeline += [
        {"$group": {
            "_id": group_id,
            "totalBookings": {"$sum": 1},
            "totalAdults": {"$sum": {"$ifNull": ["$items.qtyAdults", 0]}},
            "totalChildren": {"$sum": {"$ifNull": ["$items.qtyChildren", 0]}},
            "totalRevenue": {"$sum": {"$ifNull": ["$amounts.grandTotal", 0]}},
            "avgRevenue": {"$avg": {"$ifNull": ["$amounts.grandTotal", 0]}},
        }},
        {"$lookup": {
            "from": "packages",
            "localField": package_field,
            "foreignField": "_id",
            "as": "packageDetails",
        }},
        {"$unwind": {"path": "$packageDetails", "preserveNullAndEmptyArrays": True}},
    ]

    project = {
        "_id": 0,
        "package": {
            "_id": "$packageDetails._id",
            "name": "$packageDetails.name",
            "code": "$packageDetails.code",
            "maxTravelers": "$packageDetails.maxTravelers",
        },
        "totalBookings": 1,
        "totalAdults": 1,
        "totalChildren": 1,
        "totalTravelers": {"$add": ["$totalAdults", "$totalChildren"]},
        "totalRevenue": 1,
        "avgRevenue": {"$round": ["$avgRevenue", 2]},
    }
    if key:
        project[key] = f"$_id.{key}"

    pipeline += [
        {"$project": project},
        {"$sort": {"totalRevenue": -1}},
    ]
    return pipeline


async def get_booking_summary(db, **filters) -> list:
    cursor = await db.bookings.aggregate(build_summary_pipeline(**filters))
    return await cursor.to_list(length=None)
