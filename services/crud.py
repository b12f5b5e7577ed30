# services/crud.py
"""Collection helpers shared by every resource router."""
import asyncio
import logging
import math
import re
from typing import List, Mapping, Optional, Tuple

from bson import ObjectId

from errors import InsertError, NoChangeError, NotFoundError, UpdateError, ValidationError
from models.common import utcnow

logger = logging.getLogger(__name__)

# reference field -> (collection, label used in messages)
REFERENCES = {
    "country_id": ("countries", "Country"),
    "province_id": ("provinces", "Province"),
    "city_id": ("cities", "City"),
    "startCity_id": ("cities", "Start city"),
    "user_id": ("users", "User"),
    "package_id": ("packages", "Package"),
}


def object_id_or_400(value: str, field: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError([f"Invalid {field}"])
    return ObjectId(value)


async def find_or_404(collection, doc_id, label: str, projection: Optional[Mapping] = None) -> dict:
    # malformed ids are reported exactly like unknown ones
    if not isinstance(doc_id, ObjectId):
        if not ObjectId.is_valid(doc_id):
            raise NotFoundError(f"{label} not found")
        doc_id = ObjectId(doc_id)
    doc = await collection.find_one({"_id": doc_id}, projection)
    if not doc:
        raise NotFoundError(f"{label} not found")
    return doc


async def ensure_exists(db, field: str, value: ObjectId) -> dict:
    collection_name, label = REFERENCES[field]
    doc = await db[collection_name].find_one({"_id": value})
    if not doc:
        raise NotFoundError(f"{label} not found")
    return doc


async def ensure_references(db, payload: Mapping, fields: List[str]):
    for field in fields:
        if payload.get(field) is not None:
            await ensure_exists(db, field, payload[field])


async def paginate(
    collection,
    query: Mapping,
    page: int,
    limit: int,
    sort: Optional[List[Tuple[str, int]]] = None,
    projection: Optional[Mapping] = None,
) -> Tuple[list, dict]:
    skip = (page - 1) * limit
    cursor = collection.find(query, projection)
    if sort:
        cursor = cursor.sort(sort)
    # list and count are independent reads
    docs, total = await asyncio.gather(
        cursor.skip(skip).limit(limit).to_list(length=None),
        collection.count_documents(query),
    )
    return docs, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


async def insert_document(collection, doc: dict) -> dict:
    now = utcnow()
    doc = {**doc, "createdAt": now, "updatedAt": now}
    result = await collection.insert_one(doc)
    if not result.inserted_id:
        raise InsertError()
    doc["_id"] = result.inserted_id
    logger.info("Inserted %s into %s", result.inserted_id, collection.name)
    return doc


async def apply_patch(collection, doc_id: ObjectId, patch: Mapping, projection: Optional[Mapping] = None) -> dict:
    if not patch:
        raise NoChangeError()
    result = await collection.update_one(
        {"_id": doc_id},
        {"$set": {**patch, "updatedAt": utcnow()}},
    )
    if result.modified_count == 0:
        raise UpdateError()
    logger.info("Updated %s in %s: %s", doc_id, collection.name, sorted(patch))
    return await collection.find_one({"_id": doc_id}, projection)


async def delete_document(collection, doc_id, label: str):
    doc = await find_or_404(collection, doc_id, label)
    await collection.delete_one({"_id": doc["_id"]})
    logger.info("Deleted %s from %s", doc["_id"], collection.name)
    return doc


def near_query(lng: float, lat: float, max_distance: float) -> dict:
    return {
        "$near": {
            "$geometry": {"type": "Point", "coordinates": [lng, lat]},
            "$maxDistance": max_distance,
        }
    }


def name_regex(text: str) -> dict:
    return {"$regex": re.escape(text), "$options": "i"}
