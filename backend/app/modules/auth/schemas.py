from datetime import datetime

from pydantic import Field

from app.core.schemas import ApiModel


class UserOut(ApiModel):
    Id: int
    Username: str
    Email: str | None = None
    Timezone: str
    CreatedAt: datetime


class TokenResponse(ApiModel):
    AccessToken: str
    RefreshToken: str
    TokenType: str = "bearer"
    ExpiresIn: int
    User: UserOut


class RegisterRequest(ApiModel):
    Username: str = Field(..., max_length=120)
    Password: str = Field(..., max_length=200)
    Email: str | None = Field(default=None, max_length=254)
    Timezone: str | None = Field(default=None, max_length=64)


class LoginRequest(ApiModel):
    Username: str = Field(..., max_length=120)
    Password: str = Field(..., max_length=200)


class RefreshRequest(ApiModel):
    RefreshToken: str = Field(..., max_length=400)


class LogoutRequest(ApiModel):
    RefreshToken: str | None = Field(default=None, max_length=400)


class ChangePasswordRequest(ApiModel):
    CurrentPassword: str = Field(..., max_length=200)
    NewPassword: str = Field(..., max_length=200)


class UpdateSettingsRequest(ApiModel):
    Timezone: str = Field(..., max_length=64)


class MeResponse(ApiModel):
    User: UserOut


class SuccessResponse(ApiModel):
    Success: bool = True
