"""Client for the imgbb image hosting API.

Only one call is needed: upload a profile photo and get back its public
URL. Failures surface as `ImageUploadError`; there is no retry.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

import httpx

from ..config import settings

logger = logging.getLogger("app.imgbb")


class ImageUploadError(RuntimeError):
    """Raised when the image host rejects an upload or cannot be reached."""


def upload_image(payload: bytes, filename: str, api_key: Optional[str] = None) -> str:
    """Upload `payload` and return the hosted image URL.

    The image is sent base64-encoded in a multipart form, which the API
    accepts for any image type it supports.
    """
    key = api_key if api_key is not None else settings.IMGBB_API_KEY
    if not key:
        raise ImageUploadError("IMGBB_API_KEY is not configured")
    try:
        response = httpx.post(
            settings.IMGBB_UPLOAD_URL,
            params={"key": key},
            data={"image": base64.b64encode(payload).decode("ascii"), "name": filename},
            timeout=settings.IMGBB_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as exc:
        raise ImageUploadError(f"image host unreachable: {exc}") from exc

    if response.status_code != 200:
        message = _error_message(response)
        logger.warning("imgbb upload rejected status=%s message=%s", response.status_code, message)
        raise ImageUploadError(f"Failed to upload image: {message}")

    try:
        url = response.json()["data"]["url"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ImageUploadError("unexpected response from image host") from exc
    logger.info("imgbb upload ok filename=%s", filename)
    return url


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return str(body)[:200]
