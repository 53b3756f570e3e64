from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.auth.models import RefreshToken, User
from app.modules.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LogoutRequest,
    MeResponse,
    RefreshRequest,
    RegisterRequest,
    SuccessResponse,
    TokenResponse,
    UpdateSettingsRequest,
    UserOut,
)
from app.modules.auth.service import (
    CreateAccessToken,
    CreateRefreshToken,
    HashPassword,
    HashRefreshToken,
    PasswordMinLength,
    RefreshTokenTtlDays,
    VerifyPassword,
    VerifyRefreshToken,
)
from app.modules.chores.services.catalog_service import SeedCatalog
from app.services.dates import DefaultTimezoneName, IsValidTimezone, NowUtc

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("app.auth")


def _BuildUserOut(user: User) -> UserOut:
    return UserOut(
        Id=user.Id,
        Username=user.Username,
        Email=user.Email,
        Timezone=user.Timezone,
        CreatedAt=user.CreatedAt,
    )


def _IssueTokens(db: Session, user: User) -> TokenResponse:
    access_token, expires_in = CreateAccessToken(user.Id, user.Username)
    refresh_token = CreateRefreshToken()
    record = RefreshToken(
        UserId=user.Id,
        TokenHash=HashRefreshToken(refresh_token),
        ExpiresAt=NowUtc() + timedelta(days=RefreshTokenTtlDays()),
    )
    db.add(record)
    db.commit()
    return TokenResponse(
        AccessToken=access_token,
        RefreshToken=refresh_token,
        ExpiresIn=expires_in,
        User=_BuildUserOut(user),
    )


def _ValidatePassword(password: str) -> None:
    min_length = PasswordMinLength()
    if len(password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters",
        )


def _FindRefreshToken(db: Session, token: str) -> RefreshToken | None:
    now = NowUtc()
    candidates = (
        db.query(RefreshToken)
        .filter(RefreshToken.RevokedAt.is_(None), RefreshToken.ExpiresAt > now)
        .all()
    )
    for candidate in candidates:
        if VerifyRefreshToken(token, candidate.TokenHash):
            return candidate
    return None


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def Register(payload: RegisterRequest, db: Session = Depends(GetDb)) -> TokenResponse:
    username = payload.Username.strip()
    if not username or not payload.Password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username and password required")

    existing = db.query(User).filter(User.Username == username).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    _ValidatePassword(payload.Password)

    timezone_name = (payload.Timezone or "").strip() or DefaultTimezoneName()
    if not IsValidTimezone(timezone_name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown timezone")

    record = User(
        Username=username,
        PasswordHash=HashPassword(payload.Password),
        Email=payload.Email.strip().lower() if payload.Email else None,
        Timezone=timezone_name,
        LastSignedInAt=NowUtc(),
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    db.refresh(record)

    created = SeedCatalog(db, record.Id)
    logger.info("registered user id=%s seeded_chores=%s", record.Id, created)
    return _IssueTokens(db, record)


@router.post("/login", response_model=TokenResponse)
def Login(payload: LoginRequest, db: Session = Depends(GetDb)) -> TokenResponse:
    if not payload.Username or not payload.Password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username and password required")

    user = db.query(User).filter(User.Username == payload.Username.strip()).first()
    if not user or not VerifyPassword(payload.Password, user.PasswordHash):
        logger.warning("failed login username=%s", payload.Username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    user.LastSignedInAt = NowUtc()
    db.add(user)
    return _IssueTokens(db, user)


@router.post("/refresh", response_model=TokenResponse)
def Refresh(payload: RefreshRequest, db: Session = Depends(GetDb)) -> TokenResponse:
    matched = _FindRefreshToken(db, payload.RefreshToken)
    if not matched:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(User).filter(User.Id == matched.UserId).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    matched.RevokedAt = NowUtc()
    db.add(matched)
    return _IssueTokens(db, user)


@router.post("/logout", response_model=SuccessResponse)
def Logout(
    payload: LogoutRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> SuccessResponse:
    now = NowUtc()
    query = db.query(RefreshToken).filter(
        RefreshToken.UserId == user.Id,
        RefreshToken.RevokedAt.is_(None),
    )
    for token in query.all():
        if payload.RefreshToken and not VerifyRefreshToken(payload.RefreshToken, token.TokenHash):
            continue
        token.RevokedAt = now
        db.add(token)
    db.commit()
    return SuccessResponse()


@router.get("/me", response_model=MeResponse)
def Me(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> MeResponse:
    record = db.query(User).filter(User.Id == user.Id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MeResponse(User=_BuildUserOut(record))


@router.post("/change-password", response_model=SuccessResponse)
def ChangePassword(
    payload: ChangePasswordRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> SuccessResponse:
    record = db.query(User).filter(User.Id == user.Id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not VerifyPassword(payload.CurrentPassword, record.PasswordHash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")

    _ValidatePassword(payload.NewPassword)
    record.PasswordHash = HashPassword(payload.NewPassword)
    db.add(record)
    db.commit()
    logger.info("password changed user id=%s", record.Id)
    return SuccessResponse()


@router.put("/settings", response_model=MeResponse)
def UpdateSettings(
    payload: UpdateSettingsRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> MeResponse:
    timezone_name = payload.Timezone.strip()
    if not IsValidTimezone(timezone_name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown timezone")

    record = db.query(User).filter(User.Id == user.Id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    record.Timezone = timezone_name
    db.add(record)
    db.commit()
    db.refresh(record)
    return MeResponse(User=_BuildUserOut(record))
