from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)

from app.db import Base
from app.services.dates import NowUtc

DEFAULT_AVATAR_COLOR = "#4F46E5"


class Kid(Base):
    __tablename__ = "kids"

    Id = Column(Integer, primary_key=True, index=True)
    OwnerUserId = Column(Integer, ForeignKey("users.Id"), nullable=False, index=True)
    Name = Column(String(120), nullable=False)
    Birthday = Column(Date, nullable=False)
    AvatarColor = Column(String(7), nullable=False, default=DEFAULT_AVATAR_COLOR)
    PocketMoneyAmount = Column(Numeric(10, 2), nullable=False, default=0)
    PocketMoneyFrequency = Column(String(20), nullable=False, default="weekly")
    SavingsPercent = Column(Integer, nullable=False, default=0)
    Timezone = Column(String(64))
    NetWealth = Column(Numeric(12, 2), nullable=False, default=0)
    SavingsBalance = Column(Numeric(12, 2), nullable=False, default=0)
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)


class EarningPeriod(Base):
    __tablename__ = "earning_periods"

    Id = Column(Integer, primary_key=True, index=True)
    KidId = Column(Integer, ForeignKey("kids.Id"), nullable=False, index=True)
    PeriodStart = Column(DateTime(timezone=True), nullable=False)
    PeriodEnd = Column(DateTime(timezone=True), nullable=False)
    TotalEarned = Column(Numeric(12, 2), nullable=False)
    TasksCompleted = Column(Integer, nullable=False)
    SavingsAmount = Column(Numeric(12, 2), nullable=False, default=0)
    BreakdownJson = Column(Text, nullable=False)
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
