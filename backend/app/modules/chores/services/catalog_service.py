from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import AccessError, NotFoundError, ValidationError
from app.modules.auth.deps import UserContext
from app.modules.chores.catalog import CHORE_CATALOG
from app.modules.chores.models import Chore, ChoreAssignment, ChoreFrequency, ChoreType
from app.modules.tasks.models import Task
from app.services.dates import NowUtc
from app.services.money import ToMoney

logger = logging.getLogger("app.chores")

_EDITABLE_FIELDS = ("Title", "Description", "PaymentAmount", "Frequency", "ChoreType")


def SeedCatalog(db: Session, owner_user_id: int) -> int:
    existing = (
        db.query(Chore.Id)
        .filter(Chore.OwnerUserId == owner_user_id, Chore.IsPrePopulated == True)
        .first()
    )
    if existing:
        return 0

    for entry in CHORE_CATALOG:
        db.add(
            Chore(
                OwnerUserId=owner_user_id,
                Title=entry.Title,
                Description=entry.Description,
                PaymentAmount=entry.Payment,
                Frequency=entry.Frequency.value,
                ChoreType=entry.Type.value,
                IsPrePopulated=True,
            )
        )
    db.commit()
    return len(CHORE_CATALOG)


def _NormalizeTitle(value: str | None) -> str:
    title = (value or "").strip()
    if not title:
        raise ValidationError("Title required")
    return title


def _NormalizePayment(value: Decimal | float | str | None) -> Decimal:
    if value is None:
        raise ValidationError("Payment amount required")
    try:
        amount = ToMoney(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if amount < 0:
        raise ValidationError("Payment amount must not be negative")
    return amount


def _NormalizeFrequency(value: ChoreFrequency | str | None) -> ChoreFrequency:
    try:
        return ChoreFrequency(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown frequency: {value}") from exc


def _NormalizeType(value: ChoreType | str | None) -> ChoreType:
    if value is None:
        raise ValidationError("Chore type required")
    try:
        return ChoreType.Parse(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown chore type: {value}") from exc


def ListChores(db: Session, user: UserContext) -> list[Chore]:
    return (
        db.query(Chore)
        .filter(or_(Chore.OwnerUserId == user.Id, Chore.OwnerUserId.is_(None)))
        .order_by(Chore.Id.asc())
        .all()
    )


def LoadChore(db: Session, user: UserContext, chore_id: int, editable: bool = False) -> Chore:
    chore = db.query(Chore).filter(Chore.Id == chore_id).first()
    if not chore:
        raise NotFoundError("Chore not found")
    if chore.OwnerUserId is None:
        if editable:
            raise AccessError("Global chores cannot be changed")
        return chore
    if chore.OwnerUserId != user.Id:
        raise NotFoundError("Chore not found")
    return chore


def CreateChore(
    db: Session,
    user: UserContext,
    title: str,
    payment_amount: Decimal | float | str,
    frequency: ChoreFrequency | str,
    chore_type: ChoreType | str,
    description: str | None = None,
) -> Chore:
    chore = Chore(
        OwnerUserId=user.Id,
        Title=_NormalizeTitle(title),
        Description=description.strip() if description else None,
        PaymentAmount=_NormalizePayment(payment_amount),
        Frequency=_NormalizeFrequency(frequency).value,
        ChoreType=_NormalizeType(chore_type).value,
        IsPrePopulated=False,
    )
    db.add(chore)
    db.commit()
    db.refresh(chore)
    logger.info("created chore id=%s owner=%s", chore.Id, user.Id)
    return chore


def UpdateChore(db: Session, user: UserContext, chore_id: int, changes: dict) -> Chore:
    chore = LoadChore(db, user, chore_id, editable=True)
    for field in _EDITABLE_FIELDS:
        if field not in changes or changes[field] is None:
            continue
        value = changes[field]
        if field == "Title":
            chore.Title = _NormalizeTitle(value)
        elif field == "Description":
            chore.Description = value.strip() or None
        elif field == "PaymentAmount":
            # Tasks already started keep the amount they were created with.
            chore.PaymentAmount = _NormalizePayment(value)
        elif field == "Frequency":
            chore.Frequency = _NormalizeFrequency(value).value
        elif field == "ChoreType":
            chore.ChoreType = _NormalizeType(value).value
    chore.UpdatedAt = NowUtc()
    db.add(chore)
    db.commit()
    db.refresh(chore)
    return chore


def DeleteChore(db: Session, user: UserContext, chore_id: int) -> None:
    chore = LoadChore(db, user, chore_id, editable=True)
    try:
        db.query(Task).filter(Task.ChoreId == chore.Id).delete(synchronize_session="fetch")
        db.query(ChoreAssignment).filter(ChoreAssignment.ChoreId == chore.Id).delete(
            synchronize_session="fetch"
        )
        db.delete(chore)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("deleted chore id=%s owner=%s", chore_id, user.Id)
