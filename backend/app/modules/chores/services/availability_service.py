from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from app.modules.auth.models import User
from app.modules.chores.models import Chore, ChoreFrequency, ChoreType
from app.modules.chores.services.assignment_service import ListAssignedChores
from app.modules.kids.models import EarningPeriod, Kid
from app.modules.kids.services.earnings_service import DecodeBreakdown
from app.modules.tasks.models import COMPLETED_STATUSES, Task, TaskStatus
from app.services.dates import EnsureUtc, LocalDayStartUtc, NowUtc, ResolveTimezone


@dataclass
class ChoreAvailability:
    AssignmentId: int
    Chore: Chore
    IsAvailable: bool
    CompletedToday: bool
    InProgressTaskId: int | None = None


def KidDayStart(db: Session, kid: Kid, now: datetime | None = None) -> datetime:
    owner = db.query(User).filter(User.Id == kid.OwnerUserId).first()
    tz = ResolveTimezone(kid.Timezone, owner.Timezone if owner else None)
    return LocalDayStartUtc(now or NowUtc(), tz)


def _CompletedChoreIds(
    db: Session,
    chore_ids: list[int],
    since: datetime,
    kid_id: int | None = None,
    owner_user_id: int | None = None,
) -> set[int]:
    if not chore_ids:
        return set()
    query = (
        db.query(Task.ChoreId)
        .filter(
            Task.ChoreId.in_(chore_ids),
            Task.CompletedAt.isnot(None),
            Task.CompletedAt >= since,
            Task.Status.in_(COMPLETED_STATUSES),
        )
    )
    if kid_id is not None:
        query = query.filter(Task.KidId == kid_id)
    if owner_user_id is not None:
        query = query.join(Kid, Task.KidId == Kid.Id).filter(Kid.OwnerUserId == owner_user_id)
    done = {row.ChoreId for row in query.distinct().all()}
    return done | _CashedOutChoreIds(db, chore_ids, since, kid_id, owner_user_id)


def _CashedOutChoreIds(
    db: Session,
    chore_ids: list[int],
    since: datetime,
    kid_id: int | None,
    owner_user_id: int | None,
) -> set[int]:
    """Chores completed since the day start whose tasks were already rolled into a period."""
    query = db.query(EarningPeriod).filter(EarningPeriod.PeriodEnd >= since)
    if kid_id is not None:
        query = query.filter(EarningPeriod.KidId == kid_id)
    if owner_user_id is not None:
        query = query.join(Kid, EarningPeriod.KidId == Kid.Id).filter(Kid.OwnerUserId == owner_user_id)

    wanted = set(chore_ids)
    done: set[int] = set()
    for period in query.all():
        for item in DecodeBreakdown(period):
            chore_id = item.get("choreId")
            if chore_id not in wanted or not item.get("completedAt"):
                continue
            try:
                completed_at = EnsureUtc(datetime.fromisoformat(item["completedAt"]))
            except (TypeError, ValueError):
                continue
            if completed_at >= since:
                done.add(chore_id)
    return done


def IsDailyFirstCome(chore: Chore) -> bool:
    return chore.FrequencyEnum == ChoreFrequency.Daily and chore.TypeEnum == ChoreType.FirstCome


def ResolveAvailability(db: Session, kid: Kid, now: datetime | None = None) -> list[ChoreAvailability]:
    """Annotate every chore assigned to ``kid`` with whether it can be started now.

    Daily chores close for the rest of the kid's local day once completed; a
    daily first-come chore closes for every kid of the household as soon as
    any of them completes it. Weekly and monthly chores always stay open.
    Rejected tasks do not count as completions.
    """
    assigned = ListAssignedChores(db, kid)
    if not assigned:
        return []

    day_start = KidDayStart(db, kid, now)
    chore_ids = [item.Chore.Id for item in assigned]
    done_by_kid = _CompletedChoreIds(db, chore_ids, day_start, kid_id=kid.Id)
    shared_ids = [item.Chore.Id for item in assigned if IsDailyFirstCome(item.Chore)]
    done_by_anyone = _CompletedChoreIds(db, shared_ids, day_start, owner_user_id=kid.OwnerUserId)

    in_progress = {
        task.ChoreId: task.Id
        for task in db.query(Task)
        .filter(Task.KidId == kid.Id, Task.Status == TaskStatus.InProgress.value)
        .all()
    }

    results: list[ChoreAvailability] = []
    for item in assigned:
        chore = item.Chore
        completed_today = chore.Id in done_by_kid
        is_available = True
        if chore.FrequencyEnum == ChoreFrequency.Daily and completed_today:
            is_available = False
        if IsDailyFirstCome(chore) and chore.Id in done_by_anyone:
            is_available = False
        results.append(
            ChoreAvailability(
                AssignmentId=item.AssignmentId,
                Chore=chore,
                IsAvailable=is_available,
                CompletedToday=completed_today,
                InProgressTaskId=in_progress.get(chore.Id),
            )
        )
    return results


def IsChoreAvailable(db: Session, kid: Kid, chore_id: int, now: datetime | None = None) -> bool:
    for item in ResolveAvailability(db, kid, now):
        if item.Chore.Id == chore_id:
            return item.IsAvailable
    return False
