# routes/city.py
from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError
from models.common import dump_changes
from models.city import CityCreate, CityUpdate
from services.crud import (
    apply_patch,
    delete_document,
    ensure_references,
    find_or_404,
    insert_document,
    name_regex,
    near_query,
    object_id_or_400,
)
from utils.auth import get_current_user
from utils.diff import FieldKind, diff_fields
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

CITY_FIELDS = {
    "name": FieldKind.STRING,
    "province_id": FieldKind.REFERENCE,
    "country_id": FieldKind.REFERENCE,
    "location": FieldKind.OBJECT,
}


# === POST: Add city ===
@router.post("/add")
async def create_city(city_in: CityCreate, db=Depends(get_db)):
    data = city_in.model_dump(exclude_none=True)
    await ensure_references(db, data, ["province_id", "country_id"])
    city = await insert_document(db.cities, data)
    return send_create(CREATED, city)


# === GET: All cities ===
@router.get("/selAll")
async def get_cities(db=Depends(get_db)):
    cities = await db.cities.find({}).to_list(length=None)
    if not cities:
        raise NotFoundError("Cities not found")
    return send_success(SELECT_ALL, cities)


# === GET: Cities of a province ===
@router.get("/province/{province_id}")
async def get_cities_by_province(province_id: str, db=Depends(get_db)):
    query = {"province_id": object_id_or_400(province_id, "provinceID")}
    cities = await db.cities.find(query).to_list(length=None)
    return send_success(SELECT_ALL, cities)


# === GET: Cities of a country ===
@router.get("/country/{country_id}")
async def get_cities_by_country(country_id: str, db=Depends(get_db)):
    query = {"country_id": object_id_or_400(country_id, "countryID")}
    cities = await db.cities.find(query).to_list(length=None)
    return send_success(SELECT_ALL, cities)


# === GET: Cities around a point (2dsphere) ===
@router.get("/nearby")
async def get_nearby_cities(
    lng: float = Query(..., ge=-180, le=180),
    lat: float = Query(..., ge=-90, le=90),
    maxDistance: float = Query(10000, gt=0),
    db=Depends(get_db),
):
    cities = await db.cities.find({"location": near_query(lng, lat, maxDistance)}).to_list(length=None)
    return send_success(SELECT_ALL, cities)


# === GET: Search by name ===
@router.get("/search")
async def search_cities(name: str = Query(..., min_length=1), db=Depends(get_db)):
    query = {"name": name_regex(name)}
    cities = await db.cities.find(query).to_list(length=None)
    return send_success(SELECT_ALL, cities)


# === GET: One city ===
@router.get("/selOne/{city_id}")
async def get_city(city_id: str, db=Depends(get_db)):
    city = await find_or_404(db.cities, city_id, "City")
    return send_success(SELECT_ONE, city)


# === PUT: Update city ===
@router.put("/update/{city_id}")
async def update_city(city_id: str, city_in: CityUpdate, db=Depends(get_db)):
    current = await find_or_404(db.cities, city_id, "City")
    changes = dump_changes(city_in)
    patch = diff_fields(changes, current, CITY_FIELDS)
    await ensure_references(db, patch, ["province_id", "country_id"])
    city = await apply_patch(db.cities, current["_id"], patch)
    return send_success(UPDATED, city)


# === DELETE: Remove city ===
@router.delete("/delete/{city_id}")
async def delete_city(city_id: str, db=Depends(get_db)):
    await delete_document(db.cities, city_id, "City")
    return send_success(DELETED)
