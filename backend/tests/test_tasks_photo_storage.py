import base64
from datetime import datetime, timezone

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.modules.tasks import photo_storage
from app.modules.tasks.photo_storage import (
    DecodePhotoDataUrl,
    PhotoKey,
    ResolvePhotoPath,
    StoreTaskPhoto,
)

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"
DATA_URL = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode("ascii")
NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def test_decode_strips_data_url_prefix():
    assert DecodePhotoDataUrl(DATA_URL) == JPEG_BYTES
    assert DecodePhotoDataUrl(base64.b64encode(JPEG_BYTES).decode("ascii")) == JPEG_BYTES


@pytest.mark.parametrize("value", ["", "data:image/jpeg;base64,", "data:image/jpeg;base64,@@not-base64@@"])
def test_decode_rejects_malformed_photos(value):
    with pytest.raises(ValidationError):
        DecodePhotoDataUrl(value)


def test_decode_enforces_size_limit(monkeypatch):
    monkeypatch.setenv("PHOTO_MAX_BYTES", "4")
    with pytest.raises(ValidationError):
        DecodePhotoDataUrl(DATA_URL)


def test_photo_key_uses_epoch_millis():
    assert PhotoKey(7, NOW) == f"task-7-{int(NOW.timestamp() * 1000)}.jpg"


def test_store_task_photo_writes_file(tmp_path, monkeypatch):
    monkeypatch.setenv("PHOTO_STORAGE_ROOT", str(tmp_path))
    url = StoreTaskPhoto(7, DATA_URL, NOW)
    key = PhotoKey(7, NOW)
    assert url == f"/api/photos/{key}"
    assert (tmp_path / key).read_bytes() == JPEG_BYTES
    assert ResolvePhotoPath(key) == (tmp_path / key).resolve()


def test_store_failure_is_not_fatal(monkeypatch):
    def _broken(_key, _data):
        raise OSError("bucket unavailable")

    monkeypatch.setattr(photo_storage, "SavePhoto", _broken)
    assert StoreTaskPhoto(7, DATA_URL, NOW) is None


def test_store_still_rejects_malformed_photo(monkeypatch):
    monkeypatch.setattr(photo_storage, "SavePhoto", lambda _key, _data: "/api/photos/x")
    with pytest.raises(ValidationError):
        StoreTaskPhoto(7, "data:image/jpeg;base64,%%%", NOW)


@pytest.mark.parametrize("key", ["../secret.txt", "task-1-2.png", "task-1-999.jpg"])
def test_resolve_rejects_unknown_keys(key, tmp_path, monkeypatch):
    monkeypatch.setenv("PHOTO_STORAGE_ROOT", str(tmp_path))
    with pytest.raises(NotFoundError):
        ResolvePhotoPath(key)
