import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import HandleServiceError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.chores.schemas import (
    AssignmentOut,
    AssignRequest,
    ChoreCreate,
    ChoreOut,
    ChoreUpdate,
)
from app.modules.chores.services.assignment_service import AssignChore, RemoveAssignment
from app.modules.chores.services.catalog_service import (
    CreateChore,
    DeleteChore,
    ListChores,
    LoadChore,
    UpdateChore,
)
from app.modules.chores.views import BuildChoreOut

router = APIRouter(prefix="/api/chores", tags=["chores"])
assignments_router = APIRouter(prefix="/api/assignments", tags=["chores"])
logger = logging.getLogger("app.chores")


@router.get("", response_model=list[ChoreOut])
def ListChoreItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[ChoreOut]:
    try:
        return [BuildChoreOut(chore) for chore in ListChores(db, user)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@router.post("", response_model=ChoreOut, status_code=status.HTTP_201_CREATED)
def CreateChoreItem(
    payload: ChoreCreate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ChoreOut:
    try:
        chore = CreateChore(
            db,
            user,
            title=payload.Title,
            payment_amount=payload.PaymentAmount,
            frequency=payload.Frequency,
            chore_type=payload.ChoreType,
            description=payload.Description,
        )
        return BuildChoreOut(chore)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@router.get("/{chore_id}", response_model=ChoreOut)
def GetChoreItem(
    chore_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ChoreOut:
    try:
        return BuildChoreOut(LoadChore(db, user, chore_id))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@router.put("/{chore_id}", response_model=ChoreOut)
def UpdateChoreItem(
    chore_id: int,
    payload: ChoreUpdate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ChoreOut:
    try:
        chore = UpdateChore(db, user, chore_id, payload.model_dump(exclude_unset=True))
        return BuildChoreOut(chore)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@router.delete("/{chore_id}", status_code=status.HTTP_204_NO_CONTENT)
def DeleteChoreItem(
    chore_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> None:
    try:
        DeleteChore(db, user, chore_id)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@router.post("/{chore_id}/assign", response_model=list[AssignmentOut], status_code=status.HTTP_201_CREATED)
def AssignChoreItem(
    chore_id: int,
    payload: AssignRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[AssignmentOut]:
    try:
        assignments = AssignChore(
            db,
            user,
            chore_id,
            kid_id=payload.KidId,
            assign_to_all=payload.AssignToAll,
        )
        logger.info(
            "assigned chore id=%s kid=%s all=%s rows=%s",
            chore_id,
            payload.KidId,
            payload.AssignToAll,
            len(assignments),
        )
        return [
            AssignmentOut(
                Id=assignment.Id,
                ChoreId=assignment.ChoreId,
                KidId=assignment.KidId,
                CreatedAt=assignment.CreatedAt,
            )
            for assignment in assignments
        ]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")


@assignments_router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def DeleteAssignmentItem(
    assignment_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> None:
    try:
        RemoveAssignment(db, user, assignment_id)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "chores")
