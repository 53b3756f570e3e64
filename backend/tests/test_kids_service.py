from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.modules.chores.models import ChoreAssignment
from app.modules.kids.models import DEFAULT_AVATAR_COLOR, EarningPeriod, Kid
from app.modules.kids.services.earnings_service import ResetEarnings
from app.modules.kids.services.kid_service import (
    CreateKid,
    DeleteKid,
    ListKids,
    LoadOwnedKid,
    UpdateKid,
)
from app.modules.tasks.models import Task
from app.modules.tasks.services import CompleteTask, StartTask

T0 = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def test_create_kid_applies_defaults(db, owner):
    kid = CreateKid(db, owner, " Sam  Lee ", date(2016, 1, 2), "5", "Weekly")
    assert kid.Name == "Sam Lee"
    assert kid.AvatarColor == DEFAULT_AVATAR_COLOR
    assert kid.PocketMoneyAmount == Decimal("5.00")
    assert kid.PocketMoneyFrequency == "weekly"
    assert kid.SavingsPercent == 0
    assert kid.Timezone is None
    assert kid.NetWealth == Decimal("0.00")


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "  "},
        {"pocket_money_amount": "-1"},
        {"pocket_money_frequency": "hourly"},
        {"avatar_color": "blue"},
        {"savings_percent": 120},
        {"timezone_name": "Nowhere/Special"},
    ],
)
def test_create_kid_validates_fields(db, owner, overrides):
    fields = {
        "name": "Sam",
        "birthday": date(2016, 1, 2),
        "pocket_money_amount": "5",
        "pocket_money_frequency": "weekly",
    }
    fields.update(overrides)
    with pytest.raises(ValidationError):
        CreateKid(db, owner, **fields)


def test_kids_are_scoped_to_owner(db, owner, make_owner):
    mine = CreateKid(db, owner, "Mine", date(2016, 1, 2), "1", "weekly")
    stranger = make_owner("stranger")
    CreateKid(db, stranger, "Theirs", date(2016, 1, 2), "1", "weekly")
    assert [kid.Id for kid in ListKids(db, owner)] == [mine.Id]
    with pytest.raises(NotFoundError):
        LoadOwnedKid(db, stranger, mine.Id)


def test_update_kid_changes_only_given_fields(db, owner):
    kid = CreateKid(db, owner, "Sam", date(2016, 1, 2), "1", "weekly", timezone_name="Europe/Paris")
    updated = UpdateKid(db, owner, kid.Id, {"SavingsPercent": 25, "AvatarColor": "#10b981"})
    assert updated.SavingsPercent == 25
    assert updated.AvatarColor == "#10B981"
    assert updated.Timezone == "Europe/Paris"

    cleared = UpdateKid(db, owner, kid.Id, {"Timezone": None})
    assert cleared.Timezone is None


def test_delete_kid_removes_dependents(db, owner, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore(assign_to=[kid])
    task = StartTask(db, chore.Id, kid.Id, now=T0)
    CompleteTask(db, task.Id, None, now=T0 + timedelta(minutes=1))
    db.query(Task).filter(Task.Id == task.Id).update({"Status": "approved"})
    db.commit()
    ResetEarnings(db, owner, kid.Id, now=T0 + timedelta(hours=1))

    DeleteKid(db, owner, kid.Id)

    assert db.query(Kid).filter(Kid.Id == kid.Id).first() is None
    assert db.query(ChoreAssignment).filter(ChoreAssignment.KidId == kid.Id).count() == 0
    assert db.query(EarningPeriod).filter(EarningPeriod.KidId == kid.Id).count() == 0
