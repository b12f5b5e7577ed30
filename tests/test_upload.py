# tests/test_upload.py
import cloudinary.uploader
import pytest


@pytest.fixture
def uploads(monkeypatch):
    calls = []

    def fake_upload(file, **options):
        calls.append({"content": file.read(), **options})
        public_id = f"{options['folder']}/img{len(calls)}"
        return {"secure_url": f"https://res.cloudinary.com/demo/{public_id}.jpg", "public_id": public_id}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    return calls


def test_upload_single_image(client, auth_headers, uploads):
    response = client.post(
        "/upload/image",
        files={"file": ("beach.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"] == {
        "url": "https://res.cloudinary.com/demo/travel-booking/img1.jpg",
        "public_id": "travel-booking/img1",
    }
    assert uploads[0]["content"] == b"jpeg-bytes"
    assert uploads[0]["transformation"][0] == {"width": 1200, "height": 800, "crop": "limit"}


def test_upload_into_custom_folder(client, auth_headers, uploads):
    response = client.post(
        "/upload/image",
        files={"file": ("beach.jpg", b"x", "image/jpeg")},
        data={"folder": "packages"},
        headers=auth_headers,
    )
    assert response.json()["data"]["public_id"] == "packages/img1"


def test_upload_several_images(client, auth_headers, uploads):
    response = client.post(
        "/upload/images",
        files=[
            ("files", ("a.jpg", b"a", "image/jpeg")),
            ("files", ("b.jpg", b"b", "image/jpeg")),
        ],
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert len(response.json()["data"]) == 2
    assert sorted(call["content"] for call in uploads) == [b"a", b"b"]


def test_upload_failure_is_500_with_provider_message(client, auth_headers, monkeypatch):
    def broken_upload(file, **options):
        raise RuntimeError("Invalid API key")

    monkeypatch.setattr(cloudinary.uploader, "upload", broken_upload)
    response = client.post(
        "/upload/image",
        files={"file": ("beach.jpg", b"x", "image/jpeg")},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json() == {"status": 500, "message": "Image upload failed", "error": "Invalid API key"}


def test_upload_requires_token(client, uploads):
    response = client.post("/upload/image", files={"file": ("beach.jpg", b"x", "image/jpeg")})
    assert response.status_code == 401
    assert uploads == []


def test_delete_image(client, auth_headers, monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id: {"result": "ok"})
    response = client.delete("/upload/image?public_id=travel-booking/img1", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"public_id": "travel-booking/img1", "result": "ok"}


def test_delete_missing_image(client, auth_headers, monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id: {"result": "not found"})
    response = client.delete("/upload/image?public_id=gone", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Image not found: gone"
