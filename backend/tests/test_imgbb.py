import base64

import httpx
import pytest

from app.utils import imgbb
from app.utils.imgbb import ImageUploadError, upload_image


def test_upload_returns_hosted_url(monkeypatch):
    seen = {}

    def fake_post(url, params=None, data=None, timeout=None):
        seen.update(url=url, params=params, data=data)
        return httpx.Response(200, json={"data": {"url": "https://i.ibb.co/abc/photo.png"}, "success": True})

    monkeypatch.setattr(imgbb.httpx, "post", fake_post)
    url = upload_image(b"imagebytes", "photo.png", api_key="k")
    assert url == "https://i.ibb.co/abc/photo.png"
    assert seen["params"] == {"key": "k"}
    assert base64.b64decode(seen["data"]["image"]) == b"imagebytes"


def test_upload_rejected_by_host(monkeypatch):
    monkeypatch.setattr(
        imgbb.httpx, "post",
        lambda *_a, **_k: httpx.Response(400, json={"error": {"message": "Invalid API key"}}),
    )
    with pytest.raises(ImageUploadError, match="Invalid API key"):
        upload_image(b"x", "photo.png", api_key="bad")


def test_upload_network_failure(monkeypatch):
    def boom(*_a, **_k):
        raise httpx.ConnectError("no route")

    monkeypatch.setattr(imgbb.httpx, "post", boom)
    with pytest.raises(ImageUploadError):
        upload_image(b"x", "photo.png", api_key="k")


def test_upload_without_api_key():
    with pytest.raises(ImageUploadError):
        upload_image(b"x", "photo.png", api_key="")
