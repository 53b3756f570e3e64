import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import NotFoundError, ValidationError
from app.modules.kids.models import EarningPeriod
from app.modules.kids.services.earnings_service import (
    DecodeBreakdown,
    GetNetWorth,
    GetTotalEarnings,
    ListEarningPeriods,
    ResetEarnings,
)
from app.modules.tasks.models import Task, TaskStatus

T0 = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def _AddTask(db, kid, chore, amount, status=TaskStatus.Approved, completed_at=T0, seconds=60):
    task = Task(
        ChoreId=chore.Id,
        KidId=kid.Id,
        Status=status.value,
        StartedAt=completed_at - timedelta(seconds=seconds),
        CompletedAt=completed_at,
        TimeToComplete=seconds,
        EarningsAmount=Decimal(amount),
    )
    db.add(task)
    db.commit()
    return task


def test_total_earnings_is_zero_without_tasks(db, make_kid):
    kid = make_kid()
    assert GetTotalEarnings(db, kid.Id) == Decimal("0.00")


def test_total_earnings_counts_only_approved(db, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore()
    _AddTask(db, kid, chore, "2.00")
    _AddTask(db, kid, chore, "1.25")
    _AddTask(db, kid, chore, "5.00", status=TaskStatus.PendingApproval)
    _AddTask(db, kid, chore, "7.00", status=TaskStatus.Rejected)
    assert GetTotalEarnings(db, kid.Id) == Decimal("3.25")


def test_reset_without_earnings_writes_nothing(db, owner, make_kid, make_chore):
    kid = make_kid()
    _AddTask(db, kid, make_chore(), "5.00", status=TaskStatus.PendingApproval)
    with pytest.raises(ValidationError):
        ResetEarnings(db, owner, kid.Id, now=T0)
    assert db.query(EarningPeriod).count() == 0


def test_reset_rolls_tasks_into_period(db, owner, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore("Dishes")
    for offset, amount in enumerate(["4.50", "4.00", "4.00"]):
        _AddTask(db, kid, chore, amount, completed_at=T0 + timedelta(hours=offset))
    pending = _AddTask(db, kid, chore, "9.00", status=TaskStatus.PendingApproval)

    period = ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(days=1))

    assert period.TotalEarned == Decimal("12.50")
    assert period.TasksCompleted == 3
    assert db.query(EarningPeriod).count() == 1
    remaining = db.query(Task).filter(Task.KidId == kid.Id).all()
    assert [task.Id for task in remaining] == [pending.Id]
    assert GetTotalEarnings(db, kid.Id) == Decimal("0.00")

    breakdown = DecodeBreakdown(period)
    assert [item["amountEarned"] for item in breakdown] == [4.5, 4.0, 4.0]
    assert breakdown[0]["choreTitle"] == "Dishes"
    assert breakdown[0]["timeToComplete"] == 60
    assert breakdown[0]["choreId"] == chore.Id
    assert breakdown[0]["kidId"] == kid.Id


def test_reset_splits_savings(db, owner, make_kid, make_chore):
    kid = make_kid(SavingsPercent=50)
    chore = make_chore()
    _AddTask(db, kid, chore, "4.50")
    _AddTask(db, kid, chore, "8.00")

    period = ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(hours=1))
    db.refresh(kid)

    assert period.SavingsAmount == Decimal("6.25")
    assert kid.NetWealth == Decimal("12.50")
    assert kid.SavingsBalance == Decimal("6.25")


def test_reset_rolls_back_on_failure(db, owner, make_kid, make_chore, monkeypatch):
    kid = make_kid()
    chore = make_chore()
    _AddTask(db, kid, chore, "3.00")

    def _fail():
        raise OperationalError("COMMIT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "commit", _fail)
    with pytest.raises(OperationalError):
        ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(hours=1))

    assert db.query(EarningPeriod).count() == 0
    assert db.query(Task).filter(Task.KidId == kid.Id).count() == 1
    db.refresh(kid)
    assert kid.NetWealth == Decimal("0.00")


def test_reset_is_owner_scoped(db, make_owner, make_kid, make_chore):
    kid = make_kid()
    _AddTask(db, kid, make_chore(), "3.00")
    with pytest.raises(NotFoundError):
        ResetEarnings(db, make_owner("stranger"), kid.Id)


def test_periods_newest_first_and_net_worth(db, owner, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore()
    _AddTask(db, kid, chore, "2.00")
    older = ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(hours=1))
    _AddTask(db, kid, chore, "3.00", completed_at=T0 + timedelta(days=1))
    newer = ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(days=2))
    _AddTask(db, kid, chore, "1.50", completed_at=T0 + timedelta(days=3))

    assert [period.Id for period in ListEarningPeriods(db, kid.Id)] == [newer.Id, older.Id]

    db.refresh(kid)
    worth = GetNetWorth(db, kid)
    assert worth.NetWealth == Decimal("5.00")
    assert worth.CurrentEarnings == Decimal("1.50")
    assert worth.Total == Decimal("6.50")


def test_breakdown_tolerates_bad_json():
    period = EarningPeriod(Id=1, BreakdownJson="{not json")
    assert DecodeBreakdown(period) == []
    period.BreakdownJson = json.dumps({"unexpected": True})
    assert DecodeBreakdown(period) == []
