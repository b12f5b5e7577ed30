# tests/test_users.py
from bson import ObjectId


def register(client, **overrides):
    data = {
        "name": "Nok Sriwan",
        "email": "nok@example.com",
        "phone": "0891234567",
        "password": "secret123",
    }
    data.update(overrides)
    return client.post("/user/register", json=data)


def test_register_hides_password_hash(client, db):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Register successfully"
    assert "passwordHash" not in body["data"]
    assert "password" not in body["data"]
    assert body["data"]["role"] == "customer"
    assert body["data"]["loyaltyPoints"] == 0
    stored = db.users.docs[0]
    assert stored["passwordHash"].startswith("$2")


def test_register_duplicate_email(client, user):
    response = register(client, email=user["email"])
    assert response.status_code == 400
    assert response.json()["errors"] == ["Email already registered"]


def test_register_validation(client):
    response = register(client, email="not-an-email", password="123", role="root")
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "email must be a valid email address" in errors
    assert any(e.startswith("password:") for e in errors)
    assert any(e.startswith("role:") for e in errors)


def test_login_returns_tokens(client, user):
    response = client.post("/user/login", json={"email": user["email"], "password": "secret123"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["_id"] == str(user["_id"])
    assert data["token"]
    assert data["refreshToken"]
    assert "passwordHash" not in data


def test_login_failures_share_one_message(client, user):
    wrong_password = client.post("/user/login", json={"email": user["email"], "password": "nope-nope"})
    unknown_email = client.post("/user/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["message"] == unknown_email.json()["message"]


def test_token_from_login_opens_protected_routes(client, user):
    login = client.post("/user/login", json={"email": user["email"], "password": "secret123"})
    headers = {"Authorization": f"Bearer {login.json()['data']['token']}"}
    assert client.get("/user/selAll", headers=headers).status_code == 200


def test_refresh(client, user):
    login = client.post("/user/login", json={"email": user["email"], "password": "secret123"})
    refresh_token = login.json()["data"]["refreshToken"]

    response = client.put("/user/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 200
    assert set(response.json()["data"]) == {"token", "refreshToken"}

    response = client.put("/user/refresh", json={"refreshToken": "garbage"})
    assert response.status_code == 401


def test_select_all_and_one_strip_password(client, auth_headers, user):
    response = client.get("/user/selAll", headers=auth_headers)
    assert response.status_code == 200
    assert all("passwordHash" not in u for u in response.json()["data"])

    response = client.get(f"/user/selOne/{user['_id']}", headers=auth_headers)
    assert response.json()["data"]["email"] == user["email"]
    assert "passwordHash" not in response.json()["data"]

    assert client.get(f"/user/selOne/{ObjectId()}", headers=auth_headers).status_code == 404


def test_user_routes_need_token(client, user):
    assert client.get("/user/selAll").status_code == 401
    assert client.delete(f"/user/delete/{user['_id']}").status_code == 401


def test_update_profile(client, auth_headers, user):
    response = client.put(
        f"/user/update/{user['_id']}",
        json={"name": "Renamed", "phone": "+66 81 234 5678"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Renamed"
    assert data["phone"] == "+66 81 234 5678"
    assert "passwordHash" not in data


def test_update_profile_validation(client, auth_headers, user):
    response = client.put(
        f"/user/update/{user['_id']}",
        json={"name": "A", "phone": "12345"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "phone must have 10 to 15 digits" in response.json()["errors"]


def test_update_profile_without_change(client, auth_headers, user):
    response = client.put(f"/user/update/{user['_id']}", json={"name": user["name"]}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No valid changes detected"


def test_delete_user(client, db, auth_headers):
    other = db.users.add({"name": "Other", "email": "other@example.com"})
    response = client.delete(f"/user/delete/{other['_id']}", headers=auth_headers)
    assert response.status_code == 200
    assert db.users.get(other["_id"]) is None
