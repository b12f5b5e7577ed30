# tests/test_geography.py
from bson import ObjectId


def test_create_country_upper_cases_iso_codes(client, db, auth_headers):
    response = client.post("/country/add", json={
        "name": "Japan",
        "iso2": "jp",
        "iso3": "jpn",
        "phoneCode": "+81",
        "currency": {"code": "JPY", "name": "Yen", "symbol": "Y"},
    }, headers=auth_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert (data["iso2"], data["iso3"]) == ("JP", "JPN")
    assert data["createdAt"] == data["updatedAt"]
    assert len(db.countries.docs) == 1


def test_create_country_validation(client, auth_headers):
    response = client.post("/country/add", json={
        "name": "Nowhere",
        "iso2": "NWH",
        "iso3": "NW",
        "currency": {"code": "EURO"},
    }, headers=auth_headers)
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert any(e.startswith("iso2:") for e in errors)
    assert any(e.startswith("iso3:") for e in errors)
    assert any(e.startswith("currency.code:") for e in errors)


def test_country_by_iso(client, auth_headers, geography):
    assert client.get("/country/iso/th", headers=auth_headers).json()["data"]["name"] == "Thailand"
    assert client.get("/country/iso/THA", headers=auth_headers).json()["data"]["name"] == "Thailand"
    assert client.get("/country/iso/XX", headers=auth_headers).status_code == 404
    assert client.get("/country/iso/THAI", headers=auth_headers).status_code == 400


def test_country_search_is_case_insensitive(client, auth_headers, geography):
    response = client.get("/country/search?name=thai", headers=auth_headers)
    assert [c["name"] for c in response.json()["data"]] == ["Thailand"]
    assert client.get("/country/search", headers=auth_headers).status_code == 400


def test_country_select_all_empty_is_404(client, auth_headers):
    assert client.get("/country/selAll", headers=auth_headers).status_code == 404


def test_country_update_and_no_change(client, auth_headers, geography):
    country_id = geography["country"]["_id"]
    response = client.put(f"/country/update/{country_id}", json={"phoneCode": "+660"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["phoneCode"] == "+660"

    response = client.put(f"/country/update/{country_id}", json={"name": "Thailand"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No valid changes detected"


def test_country_currency_update_keeps_defaults(client, db, auth_headers, geography):
    country_id = geography["country"]["_id"]
    response = client.put(f"/country/update/{country_id}", json={"currency": {"code": "USD"}}, headers=auth_headers)
    assert response.status_code == 200
    assert db.countries.get(country_id)["currency"] == {"code": "USD", "name": "", "symbol": ""}


def test_create_province_checks_country(client, auth_headers, geography):
    response = client.post("/province/add", json={
        "name": "Phuket",
        "country_id": str(geography["country"]["_id"]),
    }, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["data"]["country_id"] == str(geography["country"]["_id"])

    response = client.post("/province/add", json={
        "name": "Atlantis",
        "country_id": str(ObjectId()),
    }, headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Country not found"


def test_province_name_length(client, auth_headers, geography):
    response = client.post("/province/add", json={
        "name": "x" * 101,
        "country_id": str(geography["country"]["_id"]),
    }, headers=auth_headers)
    assert response.status_code == 400


def test_provinces_by_country_and_search(client, auth_headers, geography):
    country_id = geography["country"]["_id"]
    response = client.get(f"/province/country/{country_id}", headers=auth_headers)
    assert [p["name"] for p in response.json()["data"]] == ["Chiang Mai"]
    assert client.get(f"/province/country/{ObjectId()}", headers=auth_headers).json()["data"] == []
    assert client.get("/province/country/abc", headers=auth_headers).status_code == 400

    response = client.get("/province/search?name=chiang", headers=auth_headers)
    assert len(response.json()["data"]) == 1


def test_province_update_rechecks_country(client, auth_headers, geography):
    province_id = geography["province"]["_id"]
    response = client.put(
        f"/province/update/{province_id}",
        json={"country_id": str(ObjectId())},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_create_city_with_location(client, auth_headers, geography):
    response = client.post("/city/add", json={
        "name": "Chiang Rai",
        "province_id": str(geography["province"]["_id"]),
        "country_id": str(geography["country"]["_id"]),
        "location": {"type": "Point", "coordinates": [99.83, 19.91]},
    }, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["data"]["location"]["coordinates"] == [99.83, 19.91]


def test_city_rejects_out_of_range_coordinates(client, auth_headers, geography):
    response = client.post("/city/add", json={
        "name": "Nowhere",
        "province_id": str(geography["province"]["_id"]),
        "country_id": str(geography["country"]["_id"]),
        "location": {"type": "Point", "coordinates": [200.0, 10.0]},
    }, headers=auth_headers)
    assert response.status_code == 400
    assert "location.coordinates longitude must be between -180 and 180" in response.json()["errors"]


def test_cities_by_parent(client, auth_headers, geography):
    province_id = geography["province"]["_id"]
    country_id = geography["country"]["_id"]
    assert len(client.get(f"/city/province/{province_id}", headers=auth_headers).json()["data"]) == 1
    assert len(client.get(f"/city/country/{country_id}", headers=auth_headers).json()["data"]) == 1


def test_nearby_cities(client, db, auth_headers, geography):
    db.cities.add({"name": "No location", "province_id": geography["province"]["_id"]})
    response = client.get("/city/nearby?lng=98.9&lat=18.7", headers=auth_headers)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["data"]] == ["Chiang Mai City"]
    assert client.get("/city/nearby?lng=98.9", headers=auth_headers).status_code == 400
    assert client.get("/city/nearby?lng=abc&lat=1", headers=auth_headers).status_code == 400


def test_city_select_one_update_delete(client, db, auth_headers, geography):
    city_id = geography["city"]["_id"]
    assert client.get(f"/city/selOne/{city_id}", headers=auth_headers).json()["data"]["name"] == "Chiang Mai City"

    response = client.put(f"/city/update/{city_id}", json={"name": "Chiang Mai"}, headers=auth_headers)
    assert response.json()["data"]["name"] == "Chiang Mai"

    assert client.delete(f"/city/delete/{city_id}", headers=auth_headers).status_code == 200
    assert db.cities.docs == []
