# routes/country.py
from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError, ValidationError
from models.common import dump_changes
from models.country import CountryCreate, CountryUpdate
from services.crud import apply_patch, delete_document, find_or_404, insert_document, name_regex
from utils.auth import get_current_user
from utils.diff import FieldKind, diff_fields
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

COUNTRY_FIELDS = {
    "name": FieldKind.STRING,
    "phoneCode": FieldKind.STRING,
    "currency": FieldKind.OBJECT,
}


# === POST: Add country ===
@router.post("/add")
async def create_country(country_in: CountryCreate, db=Depends(get_db)):
    country = await insert_document(db.countries, country_in.model_dump())
    return send_create(CREATED, country)


# === GET: All countries ===
@router.get("/selAll")
async def get_countries(db=Depends(get_db)):
    countries = await db.countries.find({}).to_list(length=None)
    if not countries:
        raise NotFoundError("Countries not found")
    return send_success(SELECT_ALL, countries)


# === GET: Search by name ===
@router.get("/search")
async def search_countries(name: str = Query(..., min_length=1), db=Depends(get_db)):
    query = {"name": name_regex(name)}
    countries = await db.countries.find(query).to_list(length=None)
    return send_success(SELECT_ALL, countries)


# === GET: By ISO code (2 or 3 letters) ===
@router.get("/iso/{iso}")
async def get_country_by_iso(iso: str, db=Depends(get_db)):
    if len(iso) == 2:
        query = {"iso2": iso.upper()}
    elif len(iso) == 3:
        query = {"iso3": iso.upper()}
    else:
        raise ValidationError(["Invalid ISO code format"])
    country = await db.countries.find_one(query)
    if not country:
        raise NotFoundError("Country not found")
    return send_success(SELECT_ONE, country)


# === GET: One country ===
@router.get("/selOne/{country_id}")
async def get_country(country_id: str, db=Depends(get_db)):
    country = await find_or_404(db.countries, country_id, "Country")
    return send_success(SELECT_ONE, country)


# === PUT: Update country ===
@router.put("/update/{country_id}")
async def update_country(country_id: str, country_in: CountryUpdate, db=Depends(get_db)):
    current = await find_or_404(db.countries, country_id, "Country")
    changes = dump_changes(country_in)
    patch = diff_fields(changes, current, COUNTRY_FIELDS)
    country = await apply_patch(db.countries, current["_id"], patch)
    return send_success(UPDATED, country)


# === DELETE: Remove country ===
@router.delete("/delete/{country_id}")
async def delete_country(country_id: str, db=Depends(get_db)):
    await delete_document(db.countries, country_id, "Country")
    return send_success(DELETED)
