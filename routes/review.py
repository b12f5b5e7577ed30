# routes/review.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from errors import NotFoundError
from models.common import dump_changes
from models.review import ReviewCreate, ReviewUpdate, TargetType
from services.crud import (
    apply_patch,
    delete_document,
    ensure_exists,
    find_or_404,
    insert_document,
    object_id_or_400,
    paginate,
)
from utils.auth import get_current_user
from utils.diff import FieldKind, diff_fields
from utils.response import CREATED, DELETED, SELECT_ALL, SELECT_ONE, UPDATED, send_create, send_success

router = APIRouter(dependencies=[Depends(get_current_user)])

REVIEW_FIELDS = {
    "rating": FieldKind.NUMBER,
    "comment": FieldKind.STRING,
    "photos": FieldKind.ARRAY,
    "target": FieldKind.OBJECT,
}
TARGET_COLLECTIONS = {"package": "packages", "attraction": "attractions"}
NEWEST_FIRST = [("createdAt", -1)]


async def ensure_target(db, target: dict):
    doc = await db[TARGET_COLLECTIONS[target["type"]]].find_one({"_id": target["id"]})
    if not doc:
        raise NotFoundError("Target not found")


# === POST: Add review ===
@router.post("/add")
async def create_review(review_in: ReviewCreate, db=Depends(get_db)):
    data = review_in.model_dump()
    await ensure_exists(db, "user_id", data["user_id"])
    await ensure_target(db, data["target"])
    review = await insert_document(db.reviews, data)
    return send_create(CREATED, review)


# === GET: All reviews (paginated, optional target filter) ===
@router.get("/selAll")
async def get_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    targetType: Optional[TargetType] = None,
    targetId: Optional[str] = None,
    db=Depends(get_db),
):
    query = {}
    if targetType:
        query["target.type"] = targetType
    if targetId:
        query["target.id"] = object_id_or_400(targetId, "targetId")
    reviews, pagination = await paginate(db.reviews, query, page, limit, sort=NEWEST_FIRST)
    if not reviews and not query:
        raise NotFoundError("Reviews not found")
    return send_success(SELECT_ALL, {"reviews": reviews, "pagination": pagination})


# === GET: Reviews written by a user ===
@router.get("/user/{user_id}")
async def get_reviews_by_user(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db=Depends(get_db),
):
    query = {"user_id": object_id_or_400(user_id, "userID")}
    reviews, pagination = await paginate(db.reviews, query, page, limit, sort=NEWEST_FIRST)
    return send_success(SELECT_ALL, {"reviews": reviews, "pagination": pagination})


# === GET: Average rating of a package / attraction ===
@router.get("/rating")
async def get_average_rating(targetType: TargetType, targetId: str, db=Depends(get_db)):
    match = {"target.type": targetType, "target.id": object_id_or_400(targetId, "targetId")}
    pipeline = [
        {"$match": match},
        {"$group": {
            "_id": None,
            "averageRating": {"$avg": "$rating"},
            "totalReviews": {"$sum": 1},
            "ratings": {"$push": "$rating"},
        }},
    ]
    cursor = await db.reviews.aggregate(pipeline)
    result = await cursor.to_list(length=None)
    stats = result[0] if result else {"averageRating": 0, "totalReviews": 0, "ratings": []}

    distribution = {str(star): 0 for star in range(1, 6)}
    for rating in stats["ratings"]:
        if str(rating) in distribution:
            distribution[str(rating)] += 1

    return send_success(SELECT_ONE, {
        "averageRating": round(stats["averageRating"] or 0, 1),
        "totalReviews": stats["totalReviews"],
        "distribution": distribution,
    })


# === GET: One review ===
@router.get("/selOne/{review_id}")
async def get_review(review_id: str, db=Depends(get_db)):
    review = await find_or_404(db.reviews, review_id, "Review")
    return send_success(SELECT_ONE, review)


# === PUT: Update review ===
@router.put("/update/{review_id}")
async def update_review(review_id: str, review_in: ReviewUpdate, db=Depends(get_db)):
    current = await find_or_404(db.reviews, review_id, "Review")
    changes = dump_changes(review_in)
    patch = diff_fields(changes, current, REVIEW_FIELDS)
    if "target" in patch:
        await ensure_target(db, patch["target"])
    review = await apply_patch(db.reviews, current["_id"], patch)
    return send_success(UPDATED, review)


# === DELETE: Remove review ===
@router.delete("/delete/{review_id}")
async def delete_review(review_id: str, db=Depends(get_db)):
    await delete_document(db.reviews, review_id, "Review")
    return send_success(DELETED)
