from dataclasses import dataclass

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.env import RequireEnv
from app.core.errors import AuthError, HandleServiceError
from app.db import GetDb
from app.modules.auth.models import User


def _decode_access_token(token: str) -> dict:
    secret = RequireEnv("JWT_SECRET_KEY")
    try:
        return jwt.decode(token, secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token") from exc


def ResolveTokenUserId(auth_header: str) -> int:
    if not auth_header.startswith("Bearer "):
        raise AuthError("Not authenticated")

    token = auth_header.replace("Bearer ", "", 1).strip()
    payload = _decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token")
    try:
        return int(user_id)
    except (TypeError, ValueError) as exc:
        raise AuthError("Invalid token") from exc


@dataclass
class UserContext:
    """Request-scoped principal handed to every owner-side service call."""

    Id: int
    Username: str
    Timezone: str = "UTC"


def RequireAuthenticated(
    request: Request,
    db: Session = Depends(GetDb),
) -> UserContext:
    try:
        user_id = ResolveTokenUserId(request.headers.get("Authorization", ""))
        user = db.query(User).filter(User.Id == user_id).first()
        if not user:
            raise AuthError("User not found")
    except AuthError as exc:
        HandleServiceError(exc, "auth")

    return UserContext(Id=user.Id, Username=user.Username, Timezone=user.Timezone)
