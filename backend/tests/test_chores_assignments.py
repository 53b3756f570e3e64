from decimal import Decimal

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.modules.chores.models import Chore, ChoreAssignment
from app.modules.chores.services.assignment_service import (
    AssignChore,
    IsKidAssigned,
    ListAssignedChores,
    RemoveAssignment,
)


def test_assign_requires_a_target(db, owner, make_chore):
    chore = make_chore()
    with pytest.raises(ValidationError):
        AssignChore(db, owner, chore.Id)


def test_assign_to_kid_is_idempotent(db, owner, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore()
    first = AssignChore(db, owner, chore.Id, kid_id=kid.Id)
    second = AssignChore(db, owner, chore.Id, kid_id=kid.Id)
    assert [row.Id for row in first] == [row.Id for row in second]
    assert db.query(ChoreAssignment).count() == 1


def test_assign_to_all_covers_kids_added_later(db, owner, make_kid, make_chore):
    chore = make_chore()
    rows = AssignChore(db, owner, chore.Id, assign_to_all=True)
    assert len(rows) == 1 and rows[0].KidId is None

    later = make_kid("Later")
    assigned = ListAssignedChores(db, later)
    assert [item.Chore.Id for item in assigned] == [chore.Id]
    assert assigned[0].AssignedToAll is True
    assert IsKidAssigned(db, later, chore.Id)


def test_assign_to_all_does_not_leak_across_owners(db, owner, make_owner, make_kid, make_chore):
    chore = make_chore()
    AssignChore(db, owner, chore.Id, assign_to_all=True)
    stranger = make_owner("stranger")
    other_kid = make_kid("Other", user=stranger)
    assert ListAssignedChores(db, other_kid) == []


def test_assign_global_chore_to_all_expands_per_kid(db, owner, make_owner, make_kid):
    first = make_kid("First")
    second = make_kid("Second")
    stranger = make_owner("stranger")
    other_kid = make_kid("Other", user=stranger)
    shared = Chore(Title="Global", PaymentAmount=Decimal("1.00"), Frequency="daily", ChoreType="individual")
    db.add(shared)
    db.commit()

    rows = AssignChore(db, owner, shared.Id, assign_to_all=True)
    assert sorted(row.KidId for row in rows) == sorted([first.Id, second.Id])
    assert ListAssignedChores(db, other_kid) == []


def test_assigned_chores_keep_assignment_order_without_duplicates(db, owner, make_kid, make_chore):
    kid = make_kid()
    later = make_chore("Later")
    earlier = make_chore("Earlier")
    AssignChore(db, owner, later.Id, kid_id=kid.Id)
    AssignChore(db, owner, earlier.Id, kid_id=kid.Id)
    AssignChore(db, owner, later.Id, assign_to_all=True)

    titles = [item.Chore.Title for item in ListAssignedChores(db, kid)]
    assert titles == ["Later", "Earlier"]


def test_assign_rejects_other_owners_kid(db, owner, make_owner, make_kid, make_chore):
    stranger = make_owner("stranger")
    other_kid = make_kid("Other", user=stranger)
    chore = make_chore()
    with pytest.raises(NotFoundError):
        AssignChore(db, owner, chore.Id, kid_id=other_kid.Id)


def test_remove_assignment(db, owner, make_owner, make_kid, make_chore):
    kid = make_kid()
    chore = make_chore()
    (assignment,) = AssignChore(db, owner, chore.Id, kid_id=kid.Id)

    stranger = make_owner("stranger")
    with pytest.raises(NotFoundError):
        RemoveAssignment(db, stranger, assignment.Id)

    RemoveAssignment(db, owner, assignment.Id)
    assert ListAssignedChores(db, kid) == []
    with pytest.raises(NotFoundError):
        RemoveAssignment(db, owner, assignment.Id)
