# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from database import get_db
from fakes import FakeDatabase
from main import app
from models.common import utcnow
from utils.auth import generate_tokens, hash_password

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    now = utcnow()
    return db.users.add({
        "name": "Test Customer",
        "email": "customer@example.com",
        "phone": "0812345678901",
        "role": "customer",
        "passwordHash": PASSWORD_HASH,
        "passport": {},
        "addresses": [],
        "loyaltyPoints": 0,
        "createdAt": now,
        "updatedAt": now,
    })


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {generate_tokens(user['_id'])['token']}"}


@pytest.fixture
def geography(db):
    """Country > province > city chain."""
    country = db.countries.add({
        "name": "Thailand",
        "iso2": "TH",
        "iso3": "THA",
        "phoneCode": "+66",
        "currency": {"code": "THB", "name": "Thai Baht", "symbol": "B"},
    })
    province = db.provinces.add({"name": "Chiang Mai", "country_id": country["_id"]})
    city = db.cities.add({
        "name": "Chiang Mai City",
        "province_id": province["_id"],
        "country_id": country["_id"],
        "location": {"type": "Point", "coordinates": [98.98, 18.78]},
    })
    return {"country": country, "province": province, "city": city}


@pytest.fixture
def make_package(db, geography):
    def _make(**overrides):
        package = {
            "name": "Chiang Mai Highlights",
            "code": "CNX-3D",
            "description": "Three days in the north",
            "baseCurrency": "THB",
            "durationDays": 3,
            "isActive": True,
            "startCity_id": geography["city"]["_id"],
            "country_id": geography["country"]["_id"],
            "priceAdult": 50.0,
            "priceChild": 25.0,
            "ratingAvg": 0,
            "ratingCount": 0,
            "scheduledDepartures": [],
        }
        package.update(overrides)
        return db.packages.add(package)

    return _make
