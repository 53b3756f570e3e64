from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)

from app.db import Base
from app.services.dates import NowUtc


class TaskStatus(str, Enum):
    InProgress = "in_progress"
    PendingApproval = "pending_approval"
    Approved = "approved"
    Rejected = "rejected"


COMPLETED_STATUSES = (TaskStatus.PendingApproval.value, TaskStatus.Approved.value)

_IN_PROGRESS_ONLY = text("\"Status\" = 'in_progress'")


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index(
            "ux_tasks_kid_in_progress",
            "KidId",
            unique=True,
            sqlite_where=_IN_PROGRESS_ONLY,
            postgresql_where=_IN_PROGRESS_ONLY,
            mssql_where=text("Status = 'in_progress'"),
        ),
        Index("ix_tasks_chore_completed", "ChoreId", "CompletedAt"),
        {"sqlite_autoincrement": True},
    )

    Id = Column(Integer, primary_key=True, index=True)
    ChoreId = Column(Integer, ForeignKey("chores.Id"), nullable=False, index=True)
    KidId = Column(Integer, ForeignKey("kids.Id"), nullable=False, index=True)
    Status = Column(String(20), nullable=False, default=TaskStatus.InProgress.value, index=True)
    StartedAt = Column(DateTime(timezone=True))
    CompletedAt = Column(DateTime(timezone=True))
    TimeToComplete = Column(Integer)
    PhotoUrl = Column(Text)
    EarningsAmount = Column(Numeric(10, 2), nullable=False)
    ReviewedAt = Column(DateTime(timezone=True))
    ReviewedByUserId = Column(Integer, ForeignKey("users.Id"))
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
