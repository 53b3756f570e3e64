from datetime import datetime

from pydantic import Field

from app.core.schemas import ApiModel
from app.modules.chores.models import ChoreFrequency


class ChoreOut(ApiModel):
    Id: int
    OwnerUserId: int | None = None
    Title: str
    Description: str | None = None
    PaymentAmount: float
    Frequency: ChoreFrequency
    ChoreType: str
    IsPrePopulated: bool
    CreatedAt: datetime
    UpdatedAt: datetime


class ChoreCreate(ApiModel):
    Title: str = Field(min_length=1, max_length=200)
    Description: str | None = Field(default=None, max_length=2000)
    PaymentAmount: float = Field(ge=0)
    Frequency: ChoreFrequency = ChoreFrequency.Daily
    ChoreType: str = Field(default="individual", max_length=20)


class ChoreUpdate(ApiModel):
    Title: str | None = Field(default=None, min_length=1, max_length=200)
    Description: str | None = Field(default=None, max_length=2000)
    PaymentAmount: float | None = Field(default=None, ge=0)
    Frequency: ChoreFrequency | None = None
    ChoreType: str | None = Field(default=None, max_length=20)


class AssignRequest(ApiModel):
    KidId: int | None = None
    AssignToAll: bool = False


class AssignmentOut(ApiModel):
    Id: int
    ChoreId: int
    KidId: int | None = None
    CreatedAt: datetime


class AssignedChoreOut(ApiModel):
    AssignmentId: int
    AssignedToAll: bool
    Chore: ChoreOut


class AvailableChoreOut(ApiModel):
    AssignmentId: int
    Chore: ChoreOut
    IsAvailable: bool
    CompletedToday: bool
    InProgressTaskId: int | None = None
