# routes/attraction.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError, ValidationError
from models.attraction import AttractionCreate, AttractionUpdate, RatingIn
from models.common import dump_changes
from services.crud import (
    apply_patch,
    delete_document,
    ensure_references,
    find_or_404,
    insert_document,
    name_regex,
    near_query,
    object_id_or_400,
    paginate,
)
from utils.auth import get_current_user
from utils.diff import FieldKind, diff_fields
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

ATTRACTION_FIELDS = {
    "name": FieldKind.STRING,
    "description": FieldKind.STRING,
    "city_id": FieldKind.REFERENCE,
    "province_id": FieldKind.REFERENCE,
    "country_id": FieldKind.REFERENCE,
    "location": FieldKind.OBJECT,
    "categories": FieldKind.ARRAY,
    "images": FieldKind.ARRAY,
    "ratingAvg": FieldKind.NUMBER,
    "ratingCount": FieldKind.NUMBER,
    "isActive": FieldKind.BOOLEAN,
}
PARENTS = ["city_id", "province_id", "country_id"]


async def list_active_by(db, field: str, value: str, page: int, limit: int):
    query = {field: object_id_or_400(value, field), "isActive": True}
    attractions, pagination = await paginate(db.attractions, query, page, limit)
    return send_success(SELECT_ALL, {"attractions": attractions, "pagination": pagination})


# === POST: Add attraction ===
@router.post("/add")
async def create_attraction(attraction_in: AttractionCreate, db=Depends(get_db)):
    data = attraction_in.model_dump(exclude_none=True)
    await ensure_references(db, data, PARENTS)
    attraction = await insert_document(db.attractions, data)
    return send_create(CREATED, attraction)


# === GET: All attractions (paginated) ===
@router.get("/selAll")
async def get_attractions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    activeOnly: bool = False,
    db=Depends(get_db),
):
    query = {"isActive": True} if activeOnly else {}
    attractions, pagination = await paginate(db.attractions, query, page, limit)
    if not attractions and not query:
        raise NotFoundError("Attractions not found")
    return send_success(SELECT_ALL, {"attractions": attractions, "pagination": pagination})


# === GET: Active attractions by city / province / country ===
@router.get("/city/{city_id}")
async def get_attractions_by_city(
    city_id: str, page: int = Query(1, ge=1), limit: int = Query(10, ge=1), db=Depends(get_db)
):
    return await list_active_by(db, "city_id", city_id, page, limit)


@router.get("/province/{province_id}")
async def get_attractions_by_province(
    province_id: str, page: int = Query(1, ge=1), limit: int = Query(10, ge=1), db=Depends(get_db)
):
    return await list_active_by(db, "province_id", province_id, page, limit)


@router.get("/country/{country_id}")
async def get_attractions_by_country(
    country_id: str, page: int = Query(1, ge=1), limit: int = Query(10, ge=1), db=Depends(get_db)
):
    return await list_active_by(db, "country_id", country_id, page, limit)


# === GET: Active attractions around a point ===
@router.get("/nearby")
async def get_nearby_attractions(
    lng: float = Query(..., ge=-180, le=180),
    lat: float = Query(..., ge=-90, le=90),
    maxDistance: float = Query(10000, gt=0),
    limit: int = Query(10, ge=1),
    db=Depends(get_db),
):
    query = {"location": near_query(lng, lat, maxDistance), "isActive": True}
    attractions = await db.attractions.find(query).limit(limit).to_list(length=None)
    return send_success(SELECT_ALL, attractions)


# === GET: Search by text and/or category ===
@router.get("/search")
async def search_attractions(
    q: Optional[str] = None,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db=Depends(get_db),
):
    if not q and not category:
        raise ValidationError(["Search query or category is required"])
    query = {"isActive": True}
    if q:
        query["$or"] = [{"name": name_regex(q)}, {"description": name_regex(q)}]
    if category:
        query["categories"] = {"$in": [category]}
    attractions, pagination = await paginate(db.attractions, query, page, limit)
    return send_success(SELECT_ALL, {"attractions": attractions, "pagination": pagination})


# === GET: One attraction ===
@router.get("/selOne/{attraction_id}")
async def get_attraction(attraction_id: str, db=Depends(get_db)):
    attraction = await find_or_404(db.attractions, attraction_id, "Attraction")
    return send_success(SELECT_ONE, attraction)


# === PUT: Update attraction ===
@router.put("/update/{attraction_id}")
async def update_attraction(attraction_id: str, attraction_in: AttractionUpdate, db=Depends(get_db)):
    current = await find_or_404(db.attractions, attraction_id, "Attraction")
    changes = dump_changes(attraction_in)
    patch = diff_fields(changes, current, ATTRACTION_FIELDS)
    await ensure_references(db, patch, PARENTS)
    attraction = await apply_patch(db.attractions, current["_id"], patch)
    return send_success(UPDATED, attraction)


# === PUT: Fold one rating into the running average ===
@router.put("/rating/{attraction_id}")
async def rate_attraction(attraction_id: str, rating_in: RatingIn, db=Depends(get_db)):
    current = await find_or_404(db.attractions, attraction_id, "Attraction")
    count = current.get("ratingCount") or 0
    average = current.get("ratingAvg") or 0
    new_count = count + 1
    patch = {
        "ratingAvg": (average * count + rating_in.rating) / new_count,
        "ratingCount": new_count,
    }
    attraction = await apply_patch(db.attractions, current["_id"], patch)
    return send_success("Rating updated successfully", attraction)


# === DELETE: Remove attraction ===
@router.delete("/delete/{attraction_id}")
async def delete_attraction(attraction_id: str, db=Depends(get_db)):
    await delete_document(db.attractions, attraction_id, "Attraction")
    return send_success(DELETED)
