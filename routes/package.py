# routes/package.py
from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError, ValidationError
from models.common import dump_changes, parse_datetime, utcnow
from models.package import PackageCreate, PackageUpdate
from services.crud import (
    apply_patch,
    delete_document,
    ensure_references,
    find_or_404,
    insert_document,
    name_regex,
    object_id_or_400,
)
from utils.auth import get_current_user
from utils.diff import FieldKind, diff_fields
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

PACKAGE_FIELDS = {
    "name": FieldKind.STRING,
    "code": FieldKind.STRING,
    "description": FieldKind.STRING,
    "baseCurrency": FieldKind.STRING,
    "inclusions": FieldKind.ARRAY,
    "exclusions": FieldKind.ARRAY,
    "requirements": FieldKind.ARRAY,
    "durationDays": FieldKind.NUMBER,
    "minTravelers": FieldKind.NUMBER,
    "maxTravelers": FieldKind.NUMBER,
    "priceAdult": FieldKind.NUMBER,
    "priceChild": FieldKind.NUMBER,
    "isActive": FieldKind.BOOLEAN,
    "startCity_id": FieldKind.REFERENCE,
    "country_id": FieldKind.REFERENCE,
}
PARENTS = ["startCity_id", "country_id"]


def with_availability(package: dict) -> dict:
    """Add remainingSlots/isAvailable to every departure, stored values untouched."""
    now = utcnow()
    departures = []
    for departure in package.get("scheduledDepartures") or []:
        remaining = departure.get("availableSlots", 0) - departure.get("bookedSlots", 0)
        departures.append({
            **departure,
            "remainingSlots": remaining,
            "isAvailable": (
                remaining > 0
                and departure.get("status") == "available"
                and departure["departureDate"] > now
            ),
        })
    return {**package, "scheduledDepartures": departures}


# === POST: Add package ===
@router.post("/add")
async def create_package(package_in: PackageCreate, db=Depends(get_db)):
    data = package_in.model_dump(exclude_none=True)
    await ensure_references(db, data, PARENTS)
    package = await insert_document(db.packages, data)
    return send_create(CREATED, package)


# === GET: All packages ===
@router.get("/selAll")
async def get_packages(db=Depends(get_db)):
    packages = await db.packages.find({}).to_list(length=None)
    if not packages:
        raise NotFoundError("Packages not found")
    return send_success(SELECT_ALL, [with_availability(p) for p in packages])


# === GET: Search by keyword ===
@router.get("/search")
async def search_packages(keyword: str = Query(..., min_length=1), db=Depends(get_db)):
    query = {"$or": [
        {"name": name_regex(keyword)},
        {"code": name_regex(keyword)},
        {"description": name_regex(keyword)},
    ]}
    packages = await db.packages.find(query).to_list(length=None)
    return send_success(SELECT_ALL, packages)


# === GET: Most / least reviewed packages ===
@router.get("/mostPopular")
async def get_most_popular(limit: int = Query(5, ge=1), db=Depends(get_db)):
    cursor = db.packages.find({}).sort([("ratingCount", -1), ("ratingAvg", -1)]).limit(limit)
    return send_success("Most popular packages", await cursor.to_list(length=None))


@router.get("/leastPopular")
async def get_least_popular(limit: int = Query(5, ge=1), db=Depends(get_db)):
    cursor = db.packages.find({}).sort([("ratingCount", 1), ("ratingAvg", 1)]).limit(limit)
    return send_success("Least popular packages", await cursor.to_list(length=None))


# === GET: Active packages ===
@router.get("/active")
async def get_active_packages(db=Depends(get_db)):
    packages = await db.packages.find({"isActive": True}).to_list(length=None)
    return send_success("Active packages", packages)


# === GET: Packages of a country ===
@router.get("/country/{country_id}")
async def get_packages_by_country(country_id: str, db=Depends(get_db)):
    query = {"country_id": object_id_or_400(country_id, "countryID")}
    packages = await db.packages.find(query).to_list(length=None)
    return send_success(f"Packages in country {country_id}", packages)


# === GET: Active packages with an open departure on a given day ===
@router.get("/departures")
async def get_packages_by_departure(date: str = Query(..., min_length=1), db=Depends(get_db)):
    try:
        day = parse_datetime(date)
    except ValueError:
        raise ValidationError(["Invalid date format"])
    day = day.replace(hour=0, minute=0, second=0, microsecond=0)
    query = {
        "isActive": True,
        "scheduledDepartures": {"$elemMatch": {
            "departureDate": {"$gte": day, "$lt": day + timedelta(days=1)},
            "status": "available",
        }},
    }
    packages = await db.packages.find(query).to_list(length=None)
    return send_success(f"Packages departing on {date}", packages)


# === GET: One package ===
@router.get("/selOne/{package_id}")
async def get_package(package_id: str, db=Depends(get_db)):
    package = await find_or_404(db.packages, package_id, "Package")
    return send_success(SELECT_ONE, with_availability(package))


# === PUT: Update package ===
@router.put("/update/{package_id}")
async def update_package(package_id: str, package_in: PackageUpdate, db=Depends(get_db)):
    current = await find_or_404(db.packages, package_id, "Package")
    changes = dump_changes(package_in)
    patch = diff_fields(changes, current, PACKAGE_FIELDS)
    await ensure_references(db, patch, PARENTS)

    if "scheduledDepartures" in changes:
        # departures without their own prices fall back to the package's
        departures = [
            {
                **departure,
                "priceAdult": departure.get("priceAdult", current.get("priceAdult")),
                "priceChild": departure.get("priceChild", current.get("priceChild")),
            }
            for departure in changes["scheduledDepartures"]
        ]
        if departures != (current.get("scheduledDepartures") or []):
            patch["scheduledDepartures"] = departures

    package = await apply_patch(db.packages, current["_id"], patch)
    return send_success(UPDATED, package)


# === DELETE: Remove package ===
@router.delete("/delete/{package_id}")
async def delete_package(package_id: str, db=Depends(get_db)):
    await delete_document(db.packages, package_id, "Package")
    return send_success(DELETED)
