from datetime import datetime

from pydantic import Field

from app.core.schemas import ApiModel
from app.modules.tasks.models import TaskStatus


class TaskOut(ApiModel):
    Id: int
    ChoreId: int
    KidId: int
    Status: TaskStatus
    StartedAt: datetime | None = None
    CompletedAt: datetime | None = None
    TimeToComplete: int | None = None
    PhotoUrl: str | None = None
    EarningsAmount: float
    ReviewedAt: datetime | None = None
    ReviewedByUserId: int | None = None
    CreatedAt: datetime


class TaskDetailOut(TaskOut):
    ChoreTitle: str
    KidName: str | None = None


class StartTaskRequest(ApiModel):
    ChoreId: int
    KidId: int


class CompleteTaskRequest(ApiModel):
    Photo: str | None = Field(default=None, max_length=20_000_000)
