# routes/province.py
from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError
from models.common import dump_changes
from models.province import ProvinceCreate, ProvinceUpdate
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

PROVINCE_FIELDS = {
    "name": FieldKind.STRING,
    "country_id": FieldKind.REFERENCE,
}


# === POST: Add province ===
@router.post("/add")
async def create_province(province_in: ProvinceCreate, db=Depends(get_db)):
    data = province_in.model_dump()
    await ensure_references(db, data, ["country_id"])
    province = await insert_document(db.provinces, data)
    return send_create(CREATED, province)


# === GET: All provinces ===
@router.get("/selAll")
async def get_provinces(db=Depends(get_db)):
    provinces = await db.provinces.find({}).to_list(length=None)
    if not provinces:
        raise NotFoundError("Provinces not found")
    return send_success(SELECT_ALL, provinces)


# === GET: Provinces of a country ===
@router.get("/country/{country_id}")
async def get_provinces_by_country(country_id: str, db=Depends(get_db)):
    query = {"country_id": object_id_or_400(country_id, "countryID")}
    provinces = await db.provinces.find(query).to_list(length=None)
    return send_success(SELECT_ALL, provinces)


# === GET: Search by name ===
@router.get("/search")
async def search_provinces(name: str = Query(..., min_length=1), db=Depends(get_db)):
    query = {"name": name_regex(name)}
    provinces = await db.provinces.find(query).to_list(length=None)
    return send_success(SELECT_ALL, provinces)


# === GET: One province ===
@router.get("/selOne/{province_id}")
async def get_province(province_id: str, db=Depends(get_db)):
    province = await find_or_404(db.provinces, province_id, "Province")
    return send_success(SELECT_ONE, province)


# === PUT: Update province ===
@router.put("/update/{province_id}")
async def update_province(province_id: str, province_in: ProvinceUpdate, db=Depends(get_db)):
    current = await find_or_404(db.provinces, province_id, "Province")
    changes = dump_changes(province_in)
    patch = diff_fields(changes, current, PROVINCE_FIELDS)
    await ensure_references(db, patch, ["country_id"])
    province = await apply_patch(db.provinces, current["_id"], patch)
    return send_success(UPDATED, province)


# === DELETE: Remove province ===
@router.delete("/delete/{province_id}")
async def delete_province(province_id: str, db=Depends(get_db)):
    await delete_document(db.provinces, province_id, "Province")
    return send_success(DELETED)
