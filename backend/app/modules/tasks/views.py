from app.modules.tasks.models import Task
from app.modules.tasks.schemas import TaskDetailOut, TaskOut
from app.modules.tasks.services import TaskDetail
from app.services.dates import EnsureUtc
from app.services.money import MoneyToFloat


def _TaskFields(task: Task) -> dict:
    return {
        "Id": task.Id,
        "ChoreId": task.ChoreId,
        "KidId": task.KidId,
        "Status": task.Status,
        "StartedAt": EnsureUtc(task.StartedAt),
        "CompletedAt": EnsureUtc(task.CompletedAt),
        "TimeToComplete": task.TimeToComplete,
        "PhotoUrl": task.PhotoUrl,
        "EarningsAmount": MoneyToFloat(task.EarningsAmount),
        "ReviewedAt": EnsureUtc(task.ReviewedAt),
        "ReviewedByUserId": task.ReviewedByUserId,
        "CreatedAt": EnsureUtc(task.CreatedAt),
    }


def BuildTaskOut(task: Task) -> TaskOut:
    return TaskOut(**_TaskFields(task))


def BuildTaskDetailOut(detail: TaskDetail) -> TaskDetailOut:
    return TaskDetailOut(
        **_TaskFields(detail.Task),
        ChoreTitle=detail.ChoreTitle,
        KidName=detail.KidName,
    )
