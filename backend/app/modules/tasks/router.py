import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import HandleServiceError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.tasks.photo_storage import ResolvePhotoPath, StoreTaskPhoto
from app.modules.tasks.schemas import (
    CompleteTaskRequest,
    StartTaskRequest,
    TaskDetailOut,
    TaskOut,
)
from app.modules.tasks.services import (
    ApproveTask,
    CancelTask,
    CompleteTask,
    EnsureInProgress,
    ListCompletedWithPhotos,
    ListPendingTasks,
    LoadTask,
    RejectTask,
    StartTask,
)
from app.modules.tasks.views import BuildTaskDetailOut, BuildTaskOut
from app.services.dates import NowUtc

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
photos_router = APIRouter(prefix="/api/photos", tags=["tasks"])
logger = logging.getLogger("app.tasks")


@router.get("/pending", response_model=list[TaskDetailOut])
def ListPendingTaskItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[TaskDetailOut]:
    try:
        return [BuildTaskDetailOut(detail) for detail in ListPendingTasks(db, user)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.get("/completed-with-photos", response_model=list[TaskDetailOut])
def ListPhotoTaskItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[TaskDetailOut]:
    try:
        return [BuildTaskDetailOut(detail) for detail in ListCompletedWithPhotos(db, user)]
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.post("/start", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def StartTaskItem(payload: StartTaskRequest, db: Session = Depends(GetDb)) -> TaskOut:
    try:
        return BuildTaskOut(StartTask(db, payload.ChoreId, payload.KidId))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.post("/{task_id}/complete", response_model=TaskOut)
def CompleteTaskItem(
    task_id: int,
    payload: CompleteTaskRequest,
    db: Session = Depends(GetDb),
) -> TaskOut:
    try:
        EnsureInProgress(LoadTask(db, task_id))
        now = NowUtc()
        photo_url = StoreTaskPhoto(task_id, payload.Photo, now) if payload.Photo else None
        return BuildTaskOut(CompleteTask(db, task_id, photo_url, now))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.post("/{task_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def CancelTaskItem(task_id: int, db: Session = Depends(GetDb)) -> None:
    try:
        CancelTask(db, task_id)
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.post("/{task_id}/approve", response_model=TaskOut)
def ApproveTaskItem(
    task_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> TaskOut:
    try:
        return BuildTaskOut(ApproveTask(db, user, task_id))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@router.post("/{task_id}/reject", response_model=TaskOut)
def RejectTaskItem(
    task_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> TaskOut:
    try:
        return BuildTaskOut(RejectTask(db, user, task_id))
    except (ValueError, SQLAlchemyError) as exc:
        HandleServiceError(exc, "tasks")


@photos_router.get("/{key}")
def GetPhoto(key: str) -> FileResponse:
    try:
        return FileResponse(ResolvePhotoPath(key), media_type="image/jpeg")
    except ValueError as exc:
        HandleServiceError(exc, "photos")
