from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.modules.auth.deps import UserContext
from app.modules.chores.models import Chore
from app.modules.kids.models import EarningPeriod, Kid
from app.modules.kids.services.kid_service import LoadOwnedKid
from app.modules.tasks.models import Task, TaskStatus
from app.services.dates import EnsureUtc, NowUtc
from app.services.money import MoneyToFloat, PercentOf, ToMoney

logger = logging.getLogger("app.kids")


@dataclass(frozen=True)
class NetWorth:
    NetWealth: Decimal
    SavingsBalance: Decimal
    CurrentEarnings: Decimal

    @property
    def Total(self) -> Decimal:
        return ToMoney(self.NetWealth + self.CurrentEarnings)


def _EarningFilters(kid_id: int) -> tuple:
    return (
        Task.KidId == kid_id,
        Task.CompletedAt.isnot(None),
        Task.Status == TaskStatus.Approved.value,
    )


def GetTotalEarnings(db: Session, kid_id: int) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(Task.EarningsAmount), 0))
        .filter(*_EarningFilters(kid_id))
        .scalar()
    )
    return ToMoney(total or 0)


def _BreakdownItem(task: Task, chore_title: str) -> dict:
    completed_at = EnsureUtc(task.CompletedAt)
    return {
        "choreId": task.ChoreId,
        "kidId": task.KidId,
        "choreTitle": chore_title,
        "completedAt": completed_at.isoformat() if completed_at else None,
        "timeToComplete": task.TimeToComplete or 0,
        "amountEarned": MoneyToFloat(task.EarningsAmount),
    }


def ResetEarnings(
    db: Session,
    user: UserContext,
    kid_id: int,
    now: datetime | None = None,
) -> EarningPeriod:
    """Roll a kid's approved earnings into a new immutable earning period.

    The period insert, the wealth update and the deletion of the summarized
    tasks commit together; any failure rolls all of them back.
    """
    kid = LoadOwnedKid(db, user, kid_id)
    rows = (
        db.query(Task, Chore.Title)
        .join(Chore, Task.ChoreId == Chore.Id)
        .filter(*_EarningFilters(kid.Id))
        .order_by(Task.CompletedAt.asc(), Task.Id.asc())
        .all()
    )
    if not rows:
        raise ValidationError("No approved earnings to reset")

    period_end = EnsureUtc(now) if now else NowUtc()
    total = ToMoney(sum((ToMoney(task.EarningsAmount) for task, _ in rows), Decimal("0")))
    savings = PercentOf(total, kid.SavingsPercent or 0)
    breakdown = [_BreakdownItem(task, title) for task, title in rows]
    task_ids = [task.Id for task, _ in rows]

    period = EarningPeriod(
        KidId=kid.Id,
        PeriodStart=EnsureUtc(rows[0][0].CompletedAt),
        PeriodEnd=period_end,
        TotalEarned=total,
        TasksCompleted=len(rows),
        SavingsAmount=savings,
        BreakdownJson=json.dumps(breakdown),
    )
    try:
        db.add(period)
        kid.NetWealth = ToMoney(ToMoney(kid.NetWealth) + total)
        kid.SavingsBalance = ToMoney(ToMoney(kid.SavingsBalance) + savings)
        db.add(kid)
        db.query(Task).filter(Task.Id.in_(task_ids)).delete(synchronize_session="fetch")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("earnings reset failed kid=%s", kid.Id)
        raise

    db.refresh(period)
    logger.info(
        "earnings reset kid=%s period=%s total=%s tasks=%s",
        kid.Id,
        period.Id,
        total,
        len(rows),
    )
    return period


def ListEarningPeriods(db: Session, kid_id: int) -> list[EarningPeriod]:
    return (
        db.query(EarningPeriod)
        .filter(EarningPeriod.KidId == kid_id)
        .order_by(EarningPeriod.PeriodEnd.desc(), EarningPeriod.Id.desc())
        .all()
    )


def DecodeBreakdown(period: EarningPeriod) -> list[dict]:
    if not period.BreakdownJson:
        return []
    try:
        decoded = json.loads(period.BreakdownJson)
    except json.JSONDecodeError:
        logger.warning("unreadable breakdown period=%s", period.Id)
        return []
    return decoded if isinstance(decoded, list) else []


def GetNetWorth(db: Session, kid: Kid) -> NetWorth:
    return NetWorth(
        NetWealth=ToMoney(kid.NetWealth),
        SavingsBalance=ToMoney(kid.SavingsBalance),
        CurrentEarnings=GetTotalEarnings(db, kid.Id),
    )
