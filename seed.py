# seed.py
import asyncio
from datetime import timedelta

from database import close_client, ensure_indexes, get_db
from models.booking import BookingCreate
from models.common import utcnow
from services.booking import create_booking
from services.crud import insert_document
from utils.auth import hash_password

COLLECTIONS = ["users", "countries", "provinces", "cities", "attractions", "packages", "bookings", "reviews"]


async def seed():
    db = get_db()

    # === Wipe old data ===
    for name in COLLECTIONS:
        await db[name].delete_many({})
    await ensure_indexes(db)
    print("All old data removed\n")

    # ================== 1. Admin & customer ==================
    admin = await insert_document(db.users, {
        "name": "Admin Travel", "email": "admin@travel.com", "phone": "0812345678901",
        "role": "admin", "passwordHash": hash_password("admin123"),
        "passport": {}, "addresses": [], "loyaltyPoints": 0,
    })
    customer = await insert_document(db.users, {
        "name": "Somchai Jaidee", "email": "somchai@gmail.com", "phone": "0898765432100",
        "role": "customer", "passwordHash": hash_password("123456"),
        "passport": {}, "addresses": [], "loyaltyPoints": 0,
    })
    print(f"Users created: {admin['email']}, {customer['email']}")

    # ================== 2. Geography ==================
    country = await insert_document(db.countries, {
        "name": "Thailand", "iso2": "TH", "iso3": "THA", "phoneCode": "+66",
        "currency": {"code": "THB", "name": "Thai Baht", "symbol": "฿"},
    })
    province = await insert_document(db.provinces, {"name": "Chiang Mai", "country_id": country["_id"]})
    city = await insert_document(db.cities, {
        "name": "Chiang Mai City", "province_id": province["_id"], "country_id": country["_id"],
        "location": {"type": "Point", "coordinates": [98.9853, 18.7883]},
    })
    print(f"Geography created: {country['name']} > {province['name']} > {city['name']}")

    # ================== 3. Attraction ==================
    attraction = await insert_document(db.attractions, {
        "name": "Wat Phra That Doi Suthep", "description": "Temple on Doi Suthep mountain",
        "city_id": city["_id"], "province_id": province["_id"], "country_id": country["_id"],
        "location": {"type": "Point", "coordinates": [98.9217, 18.8048]},
        "categories": ["temple", "culture"], "images": [],
        "ratingAvg": 0, "ratingCount": 0, "isActive": True,
    })
    print(f"Attraction created: {attraction['name']}")

    # ================== 4. Package with departures ==================
    now = utcnow().replace(hour=8, minute=0, second=0, microsecond=0)
    package = await insert_document(db.packages, {
        "name": "Chiang Mai Highlights", "code": "CNX-3D", "description": "3 days in the north",
        "baseCurrency": "THB", "durationDays": 3, "isActive": True,
        "startCity_id": city["_id"], "country_id": country["_id"],
        "minTravelers": 1, "maxTravelers": 20, "priceAdult": 4500, "priceChild": 2500,
        "inclusions": ["Hotel", "Breakfast"], "exclusions": ["Flights"], "requirements": [],
        "ratingAvg": 0, "ratingCount": 0,
        "scheduledDepartures": [
            {
                "departureDate": now + timedelta(days=days),
                "returnDate": now + timedelta(days=days + 3),
                "availableSlots": 20, "bookedSlots": 0, "status": "available",
            }
            for days in (7, 14, 21)
        ],
    })
    print(f"Package created: {package['code']} ({len(package['scheduledDepartures'])} departures)")

    # ================== 5. Bookings through the booking service ==================
    for status in ("confirmed", "pending"):
        booking = await create_booking(db, BookingCreate(**{
            "user_id": str(customer["_id"]),
            "status": status,
            "currency": "THB",
            "items": [{
                "package_id": str(package["_id"]),
                "title": package["name"],
                "qtyAdults": 2,
                "qtyChildren": 1,
                "priceAdult": 4500.0,
                "priceChild": 2500.0,
            }],
            "amounts": {"discount": 500.0, "tax": 0.0, "fee": 100.0},
            "payment": {"method": "card"},
        }))
        print(f"Booking {booking['bookingNo']} ({status}): {booking['amounts']['grandTotal']} THB")

    # ================== 6. Review ==================
    await insert_document(db.reviews, {
        "user_id": customer["_id"], "rating": 5, "comment": "Great trip", "photos": [],
        "target": {"type": "package", "id": package["_id"]},
    })
    print("Review created")

    print("\nSeed complete! Login: admin@travel.com / admin123")


async def main():
    try:
        await seed()
    finally:
        await close_client()


if __name__ == "__main__":
    asyncio.run(main())
