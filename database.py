# database.py
import logging

from pymongo import ASCENDING, GEOSPHERE, AsyncMongoClient

from config import MONGODB_URI, DATABASE_NAME

logger = logging.getLogger(__name__)

_client = None


def get_client() -> AsyncMongoClient:
    global _client
    if _client is None:
        _client = AsyncMongoClient(MONGODB_URI)
    return _client


def get_db():
    """FastAPI dependency returning the travel_booking database."""
    return get_client()[DATABASE_NAME]


async def ensure_indexes(db):
    await db.users.create_index([("email", ASCENDING)], unique=True)
    await db.bookings.create_index([("bookingNo", ASCENDING)], unique=True)
    await db.bookings.create_index([("items.package_id", ASCENDING), ("status", ASCENDING)])
    await db.bookings.create_index([("user_id", ASCENDING)])
    # Proximity search needs 2dsphere indexes
    await db.cities.create_index([("location", GEOSPHERE)])
    await db.attractions.create_index([("location", GEOSPHERE)])
    logger.info("MongoDB indexes ensured on %s", db.name)


async def close_client():
    global _client
    if _client is not None:
        await _client.close()
        _client = None
