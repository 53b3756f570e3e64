from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from app.db import Base
from app.services.dates import NowUtc


class ChoreFrequency(str, Enum):
    Daily = "daily"
    Weekly = "weekly"
    Monthly = "monthly"


class ChoreType(str, Enum):
    Individual = "individual"
    FirstCome = "first_come"

    @classmethod
    def Parse(cls, value: "str | ChoreType") -> "ChoreType":
        if isinstance(value, ChoreType):
            return value
        normalized = str(value).strip().lower()
        # Older clients send "shared" for first-come chores.
        if normalized == "shared":
            return cls.FirstCome
        return cls(normalized)


class Chore(Base):
    __tablename__ = "chores"

    Id = Column(Integer, primary_key=True, index=True)
    OwnerUserId = Column(Integer, ForeignKey("users.Id"), index=True)
    Title = Column(String(200), nullable=False)
    Description = Column(Text)
    PaymentAmount = Column(Numeric(10, 2), nullable=False)
    Frequency = Column(String(20), nullable=False, default=ChoreFrequency.Daily.value)
    ChoreType = Column(String(20), nullable=False, default=ChoreType.Individual.value)
    IsPrePopulated = Column(Boolean, nullable=False, default=False)
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
    UpdatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)

    @property
    def FrequencyEnum(self) -> ChoreFrequency:
        return ChoreFrequency(self.Frequency)

    @property
    def TypeEnum(self) -> "ChoreType":
        return ChoreType.Parse(self.ChoreType)


class ChoreAssignment(Base):
    __tablename__ = "chore_assignments"
    __table_args__ = (
        UniqueConstraint("ChoreId", "KidId", name="uq_chore_assignments_chore_kid"),
    )

    Id = Column(Integer, primary_key=True, index=True)
    ChoreId = Column(Integer, ForeignKey("chores.Id"), nullable=False, index=True)
    # Null means every kid of the chore's owner.
    KidId = Column(Integer, ForeignKey("kids.Id"), index=True)
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
