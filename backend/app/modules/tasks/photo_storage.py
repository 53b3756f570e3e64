"""Photo storage helpers for task completion evidence."""

from __future__ import annotations

import base64
import binascii
import logging
import os
import re
from datetime import datetime
from pathlib import Path

from app.core.errors import NotFoundError, ValidationError
from app.core.env import ReadIntEnv
from app.services.dates import EnsureUtc, NowUtc

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
PHOTO_URL_PREFIX = "/api/photos/"

logger = logging.getLogger("app.photos")

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)
_KEY_PATTERN = re.compile(r"^task-\d+-\d+\.jpg$")


def _GetStorageRoot() -> Path:
    root = os.getenv("PHOTO_STORAGE_ROOT", "").strip()
    if root:
        return Path(root)
    return Path(__file__).resolve().parents[4] / "storage" / "photos"


def _EnsureStorageRoot() -> Path:
    root = _GetStorageRoot()
    root.mkdir(parents=True, exist_ok=True)
    return root


def _ResolveMaxBytes() -> int:
    return max(1, ReadIntEnv("PHOTO_MAX_BYTES", DEFAULT_MAX_BYTES))


def DecodePhotoDataUrl(data_url: str) -> bytes:
    if not data_url or not data_url.strip():
        raise ValidationError("Photo is empty")
    payload = _DATA_URL_PREFIX.sub("", data_url.strip(), count=1)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Photo is not a valid base64 image") from exc
    if not data:
        raise ValidationError("Photo is empty")
    max_bytes = _ResolveMaxBytes()
    if len(data) > max_bytes:
        raise ValidationError(f"Photo exceeds {max_bytes // (1024 * 1024)} MB")
    return data


def PhotoKey(task_id: int, now: datetime | None = None) -> str:
    moment = EnsureUtc(now) if now else NowUtc()
    return f"task-{task_id}-{int(moment.timestamp() * 1000)}.jpg"


def SavePhoto(key: str, data: bytes) -> str:
    root = _EnsureStorageRoot()
    (root / key).write_bytes(data)
    return f"{PHOTO_URL_PREFIX}{key}"


def StoreTaskPhoto(task_id: int, data_url: str, now: datetime | None = None) -> str | None:
    """Decode and persist a completion photo, returning its public url.

    A malformed data url raises ``ValidationError``. A storage failure is
    logged and yields ``None`` so the completion itself can still go ahead.
    """
    data = DecodePhotoDataUrl(data_url)
    key = PhotoKey(task_id, now)
    try:
        url = SavePhoto(key, data)
    except OSError:
        logger.exception("photo store failed task=%s key=%s", task_id, key)
        return None
    logger.info("photo stored task=%s key=%s bytes=%s", task_id, key, len(data))
    return url


def ResolvePhotoPath(key: str) -> Path:
    if not _KEY_PATTERN.match(key or ""):
        raise NotFoundError("Photo not found")
    root = _EnsureStorageRoot()
    candidate = (root / key).resolve()
    try:
        candidate.relative_to(root.resolve())
    except ValueError as exc:
        raise NotFoundError("Photo not found") from exc
    if not candidate.is_file():
        raise NotFoundError("Photo not found")
    return candidate
