"""API tests for image upload and deletion."""

import io

from PIL import Image


def _png(width: int = 16, height: int = 16) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 40, 40)).save(buf, format="PNG")
    return buf.getvalue()


def _upload(client, headers, data: bytes, mime: str = "image/png", **form):
    return client.post(
        "/api/assets/images",
        files={"file": ("photo.png", data, mime)},
        data={k: str(v) for k, v in form.items()},
        headers=headers,
    )


class TestUpload:
    def test_small_image_stored_as_is(self, client, auth_headers, tmp_path):
        data = _png()
        response = _upload(client, auth_headers, data, context="profile")

        assert response.status_code == 201
        body = response.json()
        assert body["was_compressed"] is False
        assert body["original_size_label"] == body["new_size_label"]
        assert body["url"].startswith("/media/uploads/profile_")

        stored = tmp_path / "data" / "media" / body["url"].removeprefix("/media/")
        assert stored.read_bytes() == data

    def test_requires_identity(self, client):
        response = _upload(client, {}, _png())
        assert response.status_code == 401

    def test_quota_exceeded_is_413(self, client, auth_headers, tmp_path):
        response = _upload(client, auth_headers, _png(), context="content", current_count=2)

        assert response.status_code == 413
        assert response.json()["detail"]["code"] == "quota_exceeded"
        assert not (tmp_path / "data" / "media" / "uploads").exists()

    def test_unsupported_type_is_415(self, client, auth_headers):
        response = _upload(client, auth_headers, b"BM....", mime="image/bmp")

        assert response.status_code == 415
        assert response.json()["detail"]["code"] == "unsupported_type"

    def test_garbage_bytes_is_422(self, client, auth_headers):
        response = _upload(client, auth_headers, b"not an image at all")

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "decode_failed"

    def test_unknown_context_is_422(self, client, auth_headers):
        response = _upload(client, auth_headers, _png(), context="banner")

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "unknown_context"


class TestDelete:
    def test_delete_uploaded(self, client, auth_headers):
        url = _upload(client, auth_headers, _png(), context="profile").json()["url"]

        first = client.delete("/api/assets/images", params={"url": url}, headers=auth_headers)
        second = client.delete("/api/assets/images", params={"url": url}, headers=auth_headers)

        assert first.json() == {"deleted": True}
        assert second.json() == {"deleted": False}
