from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.modules.auth.deps import UserContext
from app.modules.chores.models import ChoreAssignment, ChoreFrequency
from app.modules.kids.models import DEFAULT_AVATAR_COLOR, EarningPeriod, Kid
from app.modules.tasks.models import Task
from app.services.dates import IsValidTimezone
from app.services.money import ToMoney

logger = logging.getLogger("app.kids")

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _NormalizeName(value: str | None) -> str:
    name = re.sub(r"\s+", " ", (value or "").strip())
    if not name:
        raise ValidationError("Name required")
    return name


def _NormalizeColor(value: str | None) -> str:
    if not value:
        return DEFAULT_AVATAR_COLOR
    if not _COLOR_PATTERN.match(value):
        raise ValidationError("Avatar color must look like #RRGGBB")
    return value.upper()


def _NormalizeAmount(value: Decimal | float | str | None) -> Decimal:
    try:
        amount = ToMoney(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if amount < 0:
        raise ValidationError("Pocket money amount must not be negative")
    return amount


def _NormalizeFrequency(value: str | None) -> str:
    try:
        return ChoreFrequency((value or "").strip().lower()).value
    except ValueError as exc:
        raise ValidationError(f"Unknown pocket money frequency: {value}") from exc


def _NormalizeSavingsPercent(value: int | None) -> int:
    if value is None:
        return 0
    if value < 0 or value > 100:
        raise ValidationError("Savings percent must be between 0 and 100")
    return int(value)


def _NormalizeTimezone(value: str | None) -> str | None:
    if not value or not value.strip():
        return None
    if not IsValidTimezone(value.strip()):
        raise ValidationError("Unknown timezone")
    return value.strip()


def ListKids(db: Session, user: UserContext) -> list[Kid]:
    return db.query(Kid).filter(Kid.OwnerUserId == user.Id).order_by(Kid.Id.asc()).all()


def LoadKid(db: Session, kid_id: int) -> Kid:
    kid = db.query(Kid).filter(Kid.Id == kid_id).first()
    if not kid:
        raise NotFoundError("Kid not found")
    return kid


def LoadOwnedKid(db: Session, user: UserContext, kid_id: int) -> Kid:
    kid = LoadKid(db, kid_id)
    if kid.OwnerUserId != user.Id:
        raise NotFoundError("Kid not found")
    return kid


def CreateKid(
    db: Session,
    user: UserContext,
    name: str,
    birthday: date,
    pocket_money_amount: Decimal | float | str,
    pocket_money_frequency: str,
    avatar_color: str | None = None,
    savings_percent: int | None = None,
    timezone_name: str | None = None,
) -> Kid:
    if birthday is None:
        raise ValidationError("Birthday required")
    kid = Kid(
        OwnerUserId=user.Id,
        Name=_NormalizeName(name),
        Birthday=birthday,
        AvatarColor=_NormalizeColor(avatar_color),
        PocketMoneyAmount=_NormalizeAmount(pocket_money_amount),
        PocketMoneyFrequency=_NormalizeFrequency(pocket_money_frequency),
        SavingsPercent=_NormalizeSavingsPercent(savings_percent),
        Timezone=_NormalizeTimezone(timezone_name),
        NetWealth=Decimal("0.00"),
        SavingsBalance=Decimal("0.00"),
    )
    db.add(kid)
    db.commit()
    db.refresh(kid)
    logger.info("created kid id=%s owner=%s", kid.Id, user.Id)
    return kid


def UpdateKid(db: Session, user: UserContext, kid_id: int, changes: dict) -> Kid:
    kid = LoadOwnedKid(db, user, kid_id)
    if changes.get("Name") is not None:
        kid.Name = _NormalizeName(changes["Name"])
    if changes.get("Birthday") is not None:
        kid.Birthday = changes["Birthday"]
    if changes.get("AvatarColor") is not None:
        kid.AvatarColor = _NormalizeColor(changes["AvatarColor"])
    if changes.get("PocketMoneyAmount") is not None:
        kid.PocketMoneyAmount = _NormalizeAmount(changes["PocketMoneyAmount"])
    if changes.get("PocketMoneyFrequency") is not None:
        kid.PocketMoneyFrequency = _NormalizeFrequency(changes["PocketMoneyFrequency"])
    if changes.get("SavingsPercent") is not None:
        kid.SavingsPercent = _NormalizeSavingsPercent(changes["SavingsPercent"])
    if "Timezone" in changes:
        kid.Timezone = _NormalizeTimezone(changes["Timezone"])
    db.add(kid)
    db.commit()
    db.refresh(kid)
    return kid


def DeleteKid(db: Session, user: UserContext, kid_id: int) -> None:
    kid = LoadOwnedKid(db, user, kid_id)
    try:
        db.query(Task).filter(Task.KidId == kid.Id).delete(synchronize_session="fetch")
        db.query(ChoreAssignment).filter(ChoreAssignment.KidId == kid.Id).delete(
            synchronize_session="fetch"
        )
        db.query(EarningPeriod).filter(EarningPeriod.KidId == kid.Id).delete(
            synchronize_session="fetch"
        )
        db.delete(kid)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("deleted kid id=%s owner=%s", kid_id, user.Id)
