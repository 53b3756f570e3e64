import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    AccessError,
    AuthError,
    ConflictError,
    HandleServiceError,
    NotFoundError,
    StatusForError,
    UpstreamError,
    ValidationError,
)
from app.modules.auth.deps import ResolveTokenUserId
from app.modules.auth.service import CreateAccessToken


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("bad"), 400),
        (AuthError("who"), 401),
        (AccessError("no"), 403),
        (NotFoundError("gone"), 404),
        (ConflictError("busy"), 409),
        (UpstreamError("down"), 500),
        (ValueError("plain"), 400),
    ],
)
def test_status_for_error(error, expected):
    assert StatusForError(error) == expected


def test_handle_service_error_keeps_message():
    with pytest.raises(HTTPException) as exc_info:
        HandleServiceError(ConflictError("Kid already has a task in progress"), "tasks")
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Kid already has a task in progress"


def test_handle_service_error_hides_database_details():
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with pytest.raises(HTTPException) as exc_info:
        HandleServiceError(error, "kids")
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Database not available"
    assert isinstance(exc_info.value.__cause__, UpstreamError)
    assert isinstance(exc_info.value.__cause__.__cause__, OperationalError)


@pytest.mark.parametrize(
    ("header", "message"),
    [
        ("", "Not authenticated"),
        ("Token abc", "Not authenticated"),
        ("Bearer not-a-jwt", "Invalid token"),
    ],
)
def test_resolve_token_user_id_raises_auth_error(header, message):
    with pytest.raises(AuthError) as exc_info:
        ResolveTokenUserId(header)
    assert str(exc_info.value) == message


def test_resolve_token_user_id_reads_subject():
    token, _ = CreateAccessToken(7, "parent")
    assert ResolveTokenUserId(f"Bearer {token}") == 7
