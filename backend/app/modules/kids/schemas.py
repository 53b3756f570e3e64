from datetime import date, datetime

from pydantic import Field

from app.core.schemas import ApiModel


class KidOut(ApiModel):
    Id: int
    Name: str
    Birthday: date
    AvatarColor: str
    PocketMoneyAmount: float
    PocketMoneyFrequency: str
    SavingsPercent: int
    Timezone: str | None = None
    NetWealth: float
    SavingsBalance: float
    CurrentEarnings: float
    CreatedAt: datetime


class KidCreate(ApiModel):
    Name: str = Field(min_length=1, max_length=120)
    Birthday: date
    AvatarColor: str | None = Field(default=None, max_length=7)
    PocketMoneyAmount: float = Field(default=0, ge=0)
    PocketMoneyFrequency: str = Field(default="weekly", max_length=20)
    SavingsPercent: int | None = Field(default=None, ge=0, le=100)
    Timezone: str | None = Field(default=None, max_length=64)


class KidUpdate(ApiModel):
    Name: str | None = Field(default=None, min_length=1, max_length=120)
    Birthday: date | None = None
    AvatarColor: str | None = Field(default=None, max_length=7)
    PocketMoneyAmount: float | None = Field(default=None, ge=0)
    PocketMoneyFrequency: str | None = Field(default=None, max_length=20)
    SavingsPercent: int | None = Field(default=None, ge=0, le=100)
    Timezone: str | None = Field(default=None, max_length=64)


class EarningsOut(ApiModel):
    Total: float


class BreakdownItemOut(ApiModel):
    ChoreId: int | None = None
    KidId: int | None = None
    ChoreTitle: str
    CompletedAt: datetime | None = None
    TimeToComplete: int = 0
    AmountEarned: float


class EarningPeriodOut(ApiModel):
    Id: int
    KidId: int
    PeriodStart: datetime
    PeriodEnd: datetime
    TotalEarned: float
    TasksCompleted: int
    SavingsAmount: float
    Breakdown: list[BreakdownItemOut]
    CreatedAt: datetime


class NetWorthOut(ApiModel):
    NetWealth: float
    SavingsBalance: float
    CurrentEarnings: float
    Total: float
