import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import HandleServiceError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.chores.schemas import AssignedChoreOut, AvailableChoreOut
from app.modules.chores.services.assignment_service import ListAssignedChores
from app.modules.chores.services.availability_service import ResolveAvailability
from app.modules.chores.views import BuildChoreOut
from app.modules.kids.models import EarningPeriod, Kid
from app.modules.kids.schemas import (
    BreakdownItemOut,
    EarningPeriodOut,
    EarningsOut,
    KidCreate,
    KidOut,
    KidUpdate,
    NetWorthOut,
)
from app.modules.kids.services.earnings_service import (
    DecodeBreakdown,
    GetNetWorth,
    GetTotalEarnings,
    ListEarningPeriods,
    ResetEarnings,
)
from app.modules.kids.services.kid_service import (
    CreateKid,
    DeleteKid,
    ListKids,
    LoadKid,
    LoadOwnedKid,
    UpdateKid,
)
from app.modules.tasks.schemas import TaskDetailOut
from app.modules.tasks.services import ListCompletedTasks, ListKidTasks
from app.modules.tasks.views import BuildTaskDetailOut
from app.services.money import MoneyToFloat

router = APIRouter(prefix="/api/kids", tags=["kids"])
logger = logging.getLogger("app.kids")


def _BuildKidOut(db: Session, kid: Kid) -> KidOut:
    return KidOut(
        Id=kid.Id,
        Name=kid.Name,
        Birthday=kid.Birthday,
        AvatarColor=kid.AvatarColor,
        PocketMoneyAmount=MoneyToFloat(kid.PocketMoneyAmount),
        PocketMoneyFrequency=kid.PocketMoneyFrequency,
        SavingsPercent=kid.SavingsPercent or 0,
        Timezone=kid.Timezone,
        NetWealth=MoneyToFloat(kid.NetWealth),
        SavingsBalance=MoneyToFloat(kid.SavingsBalance),
        CurrentEarnings=MoneyToFloat(GetTotalEarnings(db, kid.Id)),
        CreatedAt=kid.CreatedAt,
    )


def _BuildPeriodOut(period: EarningPeriod) -> EarningPeriodOut:
    return EarningPeriodOut(
        Id=period.Id,
        KidId=period.KidId,
        PeriodStart=period.PeriodStart,
        PeriodEnd=period.PeriodEnd,
        TotalEarned=MoneyToFloat(period.TotalEarned),
        TasksCompleted=period.TasksCompleted,
        SavingsAmount=MoneyToFloat(period.SavingsAmount),
        Breakdown=[BreakdownItemOut.model_validate(item) for item in DecodeBreakdown(period)],
        CreatedAt=period.CreatedAt,
    )


@router.get("", response_model=list[KidOut])
def ListKidItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[KidOut]:
    try:
        return [_BuildKidOut(db, kid) for kid in ListKids(db, user)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.post("", response_model=KidOut, status_code=status.HTTP_201_CREATED)
def CreateKidItem(
    payload: KidCreate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> KidOut:
    try:
        kid = CreateKid(
            db,
            user,
            name=payload.Name,
            birthday=payload.Birthday,
            pocket_money_amount=payload.PocketMoneyAmount,
            pocket_money_frequency=payload.PocketMoneyFrequency,
            avatar_color=payload.AvatarColor,
            savings_percent=payload.SavingsPercent,
            timezone_name=payload.Timezone,
        )
        return _BuildKidOut(db, kid)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}", response_model=KidOut)
def GetKidItem(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> KidOut:
    try:
        return _BuildKidOut(db, LoadOwnedKid(db, user, kid_id))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.put("/{kid_id}", response_model=KidOut)
def UpdateKidItem(
    kid_id: int,
    payload: KidUpdate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> KidOut:
    try:
        kid = UpdateKid(db, user, kid_id, payload.model_dump(exclude_unset=True))
        return _BuildKidOut(db, kid)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.delete("/{kid_id}", status_code=status.HTTP_204_NO_CONTENT)
def DeleteKidItem(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> None:
    try:
        DeleteKid(db, user, kid_id)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/chores", response_model=list[AssignedChoreOut])
def ListKidChores(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[AssignedChoreOut]:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        return [
            AssignedChoreOut(
                AssignmentId=item.AssignmentId,
                AssignedToAll=item.AssignedToAll,
                Chore=BuildChoreOut(item.Chore),
            )
            for item in ListAssignedChores(db, kid)
        ]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/available-chores", response_model=list[AvailableChoreOut])
def ListAvailableChores(kid_id: int, db: Session = Depends(GetDb)) -> list[AvailableChoreOut]:
    try:
        kid = LoadKid(db, kid_id)
        return [
            AvailableChoreOut(
                AssignmentId=item.AssignmentId,
                Chore=BuildChoreOut(item.Chore),
                IsAvailable=item.IsAvailable,
                CompletedToday=item.CompletedToday,
                InProgressTaskId=item.InProgressTaskId,
            )
            for item in ResolveAvailability(db, kid)
        ]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/tasks", response_model=list[TaskDetailOut])
def ListKidTaskItems(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[TaskDetailOut]:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        return [BuildTaskDetailOut(detail) for detail in ListKidTasks(db, kid.Id)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/tasks/completed", response_model=list[TaskDetailOut])
def ListCompletedTaskItems(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[TaskDetailOut]:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        return [BuildTaskDetailOut(detail) for detail in ListCompletedTasks(db, kid.Id)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/earnings", response_model=EarningsOut)
def GetEarnings(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> EarningsOut:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        return EarningsOut(Total=MoneyToFloat(GetTotalEarnings(db, kid.Id)))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.post("/{kid_id}/reset-earnings", response_model=EarningPeriodOut)
def ResetEarningsItem(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> EarningPeriodOut:
    try:
        return _BuildPeriodOut(ResetEarnings(db, user, kid_id))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/earning-periods", response_model=list[EarningPeriodOut])
def ListEarningPeriodItems(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[EarningPeriodOut]:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        return [_BuildPeriodOut(period) for period in ListEarningPeriods(db, kid.Id)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")


@router.get("/{kid_id}/net-worth", response_model=NetWorthOut)
def GetNetWorthItem(
    kid_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> NetWorthOut:
    try:
        kid = LoadOwnedKid(db, user, kid_id)
        worth = GetNetWorth(db, kid)
        return NetWorthOut(
            NetWealth=MoneyToFloat(worth.NetWealth),
            SavingsBalance=MoneyToFloat(worth.SavingsBalance),
            CurrentEarnings=MoneyToFloat(worth.CurrentEarnings),
            Total=MoneyToFloat(worth.Total),
        )
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "kids")
