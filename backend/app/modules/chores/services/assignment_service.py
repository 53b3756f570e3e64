from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.modules.auth.deps import UserContext
from app.modules.chores.models import Chore, ChoreAssignment
from app.modules.chores.services.catalog_service import LoadChore
from app.modules.kids.models import Kid


@dataclass
class AssignedChore:
    AssignmentId: int
    Chore: Chore
    AssignedToAll: bool


def _KidAssignmentFilter(kid: Kid):
    return or_(
        ChoreAssignment.KidId == kid.Id,
        and_(ChoreAssignment.KidId.is_(None), Chore.OwnerUserId == kid.OwnerUserId),
    )


def ListAssignedChores(db: Session, kid: Kid) -> list[AssignedChore]:
    rows = (
        db.query(ChoreAssignment, Chore)
        .join(Chore, ChoreAssignment.ChoreId == Chore.Id)
        .filter(_KidAssignmentFilter(kid))
        .order_by(ChoreAssignment.Id.asc())
        .all()
    )
    seen: set[int] = set()
    assigned: list[AssignedChore] = []
    for assignment, chore in rows:
        if chore.Id in seen:
            continue
        seen.add(chore.Id)
        assigned.append(
            AssignedChore(
                AssignmentId=assignment.Id,
                Chore=chore,
                AssignedToAll=assignment.KidId is None,
            )
        )
    return assigned


def IsKidAssigned(db: Session, kid: Kid, chore_id: int) -> bool:
    match = (
        db.query(ChoreAssignment.Id)
        .join(Chore, ChoreAssignment.ChoreId == Chore.Id)
        .filter(ChoreAssignment.ChoreId == chore_id, _KidAssignmentFilter(kid))
        .first()
    )
    return match is not None


def _EnsureAssignment(db: Session, chore_id: int, kid_id: int | None) -> ChoreAssignment:
    query = db.query(ChoreAssignment).filter(ChoreAssignment.ChoreId == chore_id)
    if kid_id is None:
        query = query.filter(ChoreAssignment.KidId.is_(None))
    else:
        query = query.filter(ChoreAssignment.KidId == kid_id)
    existing = query.first()
    if existing:
        return existing
    assignment = ChoreAssignment(ChoreId=chore_id, KidId=kid_id)
    db.add(assignment)
    return assignment


def AssignChore(
    db: Session,
    user: UserContext,
    chore_id: int,
    kid_id: int | None = None,
    assign_to_all: bool = False,
) -> list[ChoreAssignment]:
    chore = LoadChore(db, user, chore_id)
    if assign_to_all:
        if chore.OwnerUserId is None:
            # A kid-less row on a global chore would leak into other households.
            kids = db.query(Kid).filter(Kid.OwnerUserId == user.Id).order_by(Kid.Id.asc()).all()
            assignments = [_EnsureAssignment(db, chore.Id, kid.Id) for kid in kids]
        else:
            assignments = [_EnsureAssignment(db, chore.Id, None)]
    elif kid_id:
        kid = db.query(Kid).filter(Kid.Id == kid_id, Kid.OwnerUserId == user.Id).first()
        if not kid:
            raise NotFoundError("Kid not found")
        assignments = [_EnsureAssignment(db, chore.Id, kid.Id)]
    else:
        raise ValidationError("Must specify kidId or assignToAll")

    db.commit()
    for assignment in assignments:
        db.refresh(assignment)
    return assignments


def RemoveAssignment(db: Session, user: UserContext, assignment_id: int) -> None:
    row = (
        db.query(ChoreAssignment, Chore)
        .join(Chore, ChoreAssignment.ChoreId == Chore.Id)
        .filter(ChoreAssignment.Id == assignment_id)
        .first()
    )
    if not row:
        raise NotFoundError("Assignment not found")
    assignment, chore = row
    if chore.OwnerUserId not in (user.Id, None):
        raise NotFoundError("Assignment not found")
    if assignment.KidId is not None:
        kid = db.query(Kid).filter(Kid.Id == assignment.KidId).first()
        if not kid or kid.OwnerUserId != user.Id:
            raise NotFoundError("Assignment not found")
    db.delete(assignment)
    db.commit()
