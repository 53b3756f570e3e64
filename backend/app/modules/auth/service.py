import secrets
from datetime import timedelta

import jwt
from passlib.context import CryptContext

from app.core.env import ReadIntEnv, RequireEnv
from app.services.dates import NowUtc

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def HashPassword(password: str) -> str:
    return pwd_context.hash(password)


def VerifyPassword(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def PasswordMinLength() -> int:
    return ReadIntEnv("AUTH_PASSWORD_MIN_LENGTH", 8)


def AccessTokenTtlMinutes() -> int:
    return ReadIntEnv("JWT_ACCESS_TTL_MINUTES", 60)


def RefreshTokenTtlDays() -> int:
    return ReadIntEnv("JWT_REFRESH_TTL_DAYS", 30)


def CreateAccessToken(user_id: int, username: str) -> tuple[str, int]:
    secret = RequireEnv("JWT_SECRET_KEY")
    ttl_minutes = AccessTokenTtlMinutes()
    now = NowUtc()
    expires = now + timedelta(minutes=ttl_minutes)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm="HS256")
    return token, ttl_minutes * 60


def CreateRefreshToken() -> str:
    return secrets.token_urlsafe(48)


def HashRefreshToken(token: str) -> str:
    return pwd_context.hash(token)


def VerifyRefreshToken(token: str, token_hash: str) -> bool:
    return pwd_context.verify(token, token_hash)
