from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.env import EnvTruthy
from app.core.errors import AccessError, ConflictError, NotFoundError, ValidationError
from app.modules.auth.deps import UserContext
from app.modules.chores.models import Chore
from app.modules.chores.services.assignment_service import IsKidAssigned
from app.modules.chores.services.availability_service import IsChoreAvailable
from app.modules.kids.models import Kid
from app.modules.tasks.models import COMPLETED_STATUSES, Task, TaskStatus
from app.services.dates import ElapsedSeconds, EnsureUtc, NowUtc
from app.services.money import ToMoney

logger = logging.getLogger("app.tasks")


@dataclass
class TaskDetail:
    Task: Task
    ChoreTitle: str
    KidName: str | None = None


def EarningsRequireApproval() -> bool:
    return EnvTruthy("EARNINGS_REQUIRE_APPROVAL", True)


def LoadTask(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.Id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def EnsureInProgress(task: Task) -> None:
    if task.Status != TaskStatus.InProgress.value:
        raise ConflictError("Task is not in progress")


def _LoadReviewableTask(db: Session, user: UserContext, task_id: int) -> Task:
    task = LoadTask(db, task_id)
    kid = db.query(Kid).filter(Kid.Id == task.KidId).first()
    if not kid or kid.OwnerUserId != user.Id:
        raise AccessError("Only the kid's owner can review this task")
    if task.Status != TaskStatus.PendingApproval.value:
        raise ConflictError("Task is not awaiting approval")
    return task


def StartTask(db: Session, chore_id: int, kid_id: int, now: datetime | None = None) -> Task:
    chore = db.query(Chore).filter(Chore.Id == chore_id).first()
    if not chore:
        raise NotFoundError("Chore not found")
    kid = db.query(Kid).filter(Kid.Id == kid_id).first()
    if not kid:
        raise NotFoundError("Kid not found")
    if not IsKidAssigned(db, kid, chore.Id):
        raise ValidationError("Chore is not assigned to this kid")

    existing = (
        db.query(Task)
        .filter(Task.KidId == kid.Id, Task.Status == TaskStatus.InProgress.value)
        .first()
    )
    if existing:
        raise ConflictError("Kid already has a task in progress")

    started_at = EnsureUtc(now) if now else NowUtc()
    if not IsChoreAvailable(db, kid, chore.Id, started_at):
        raise ConflictError("Chore is not available right now")

    task = Task(
        ChoreId=chore.Id,
        KidId=kid.Id,
        Status=TaskStatus.InProgress.value,
        StartedAt=started_at,
        EarningsAmount=ToMoney(chore.PaymentAmount),
    )
    db.add(task)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Kid already has a task in progress") from exc
    db.refresh(task)
    logger.info("task started id=%s chore=%s kid=%s", task.Id, chore.Id, kid.Id)
    return task


def CompleteTask(
    db: Session,
    task_id: int,
    photo_url: str | None = None,
    now: datetime | None = None,
) -> Task:
    task = LoadTask(db, task_id)
    EnsureInProgress(task)

    completed_at = EnsureUtc(now) if now else NowUtc()
    task.CompletedAt = completed_at
    task.TimeToComplete = ElapsedSeconds(EnsureUtc(task.StartedAt), completed_at)
    task.PhotoUrl = photo_url
    if EarningsRequireApproval():
        task.Status = TaskStatus.PendingApproval.value
    else:
        task.Status = TaskStatus.Approved.value
        task.ReviewedAt = completed_at
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info(
        "task completed id=%s status=%s seconds=%s photo=%s",
        task.Id,
        task.Status,
        task.TimeToComplete,
        bool(photo_url),
    )
    return task


def ApproveTask(db: Session, user: UserContext, task_id: int, now: datetime | None = None) -> Task:
    task = _LoadReviewableTask(db, user, task_id)
    task.Status = TaskStatus.Approved.value
    task.ReviewedAt = EnsureUtc(now) if now else NowUtc()
    task.ReviewedByUserId = user.Id
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("task approved id=%s by=%s", task.Id, user.Id)
    return task


def RejectTask(db: Session, user: UserContext, task_id: int, now: datetime | None = None) -> Task:
    task = _LoadReviewableTask(db, user, task_id)
    task.Status = TaskStatus.Rejected.value
    task.ReviewedAt = EnsureUtc(now) if now else NowUtc()
    task.ReviewedByUserId = user.Id
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("task rejected id=%s by=%s", task.Id, user.Id)
    return task


def CancelTask(db: Session, task_id: int) -> None:
    task = LoadTask(db, task_id)
    EnsureInProgress(task)
    db.delete(task)
    db.commit()
    logger.info("task cancelled id=%s kid=%s", task_id, task.KidId)


def _DetailQuery(db: Session):
    return (
        db.query(Task, Chore.Title, Kid.Name)
        .join(Chore, Task.ChoreId == Chore.Id)
        .join(Kid, Task.KidId == Kid.Id)
    )


def _ToDetails(rows) -> list[TaskDetail]:
    return [TaskDetail(Task=task, ChoreTitle=title, KidName=name) for task, title, name in rows]


def ListKidTasks(db: Session, kid_id: int) -> list[TaskDetail]:
    rows = (
        _DetailQuery(db)
        .filter(Task.KidId == kid_id)
        .order_by(Task.CreatedAt.desc(), Task.Id.desc())
        .all()
    )
    return _ToDetails(rows)


def ListCompletedTasks(db: Session, kid_id: int) -> list[TaskDetail]:
    rows = (
        _DetailQuery(db)
        .filter(
            Task.KidId == kid_id,
            Task.CompletedAt.isnot(None),
            Task.Status.in_(COMPLETED_STATUSES),
        )
        .order_by(Task.CompletedAt.desc(), Task.Id.desc())
        .all()
    )
    return _ToDetails(rows)


def ListPendingTasks(db: Session, user: UserContext) -> list[TaskDetail]:
    rows = (
        _DetailQuery(db)
        .filter(
            Kid.OwnerUserId == user.Id,
            Task.Status == TaskStatus.PendingApproval.value,
        )
        .order_by(Task.CompletedAt.asc(), Task.Id.asc())
        .all()
    )
    return _ToDetails(rows)


def ListCompletedWithPhotos(db: Session, user: UserContext) -> list[TaskDetail]:
    rows = (
        _DetailQuery(db)
        .filter(
            Kid.OwnerUserId == user.Id,
            Task.CompletedAt.isnot(None),
            Task.PhotoUrl.isnot(None),
        )
        .order_by(Task.CompletedAt.desc(), Task.Id.desc())
        .all()
    )
    return _ToDetails(rows)
