import os
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from app.db import Base, EnableSqliteForeignKeys, GetDb
from app.modules.auth.deps import UserContext
from app.modules.auth.models import User
from app.modules.chores.models import Chore, ChoreAssignment, ChoreFrequency, ChoreType
from app.modules.kids.models import Kid
from app.modules.tasks import models as tasks_models  # noqa: F401


@pytest.fixture
def engine():
    created = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    EnableSqliteForeignKeys(created)
    Base.metadata.create_all(created)
    yield created
    created.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def _app_env(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("PHOTO_STORAGE_ROOT", str(tmp_path / "photos"))
    monkeypatch.delenv("EARNINGS_REQUIRE_APPROVAL", raising=False)
    monkeypatch.delenv("DEFAULT_TIMEZONE", raising=False)
    monkeypatch.delenv("RUN_MIGRATIONS_ON_STARTUP", raising=False)


@pytest.fixture
def make_owner(db):
    def _make(username: str = "parent", timezone_name: str = "UTC") -> UserContext:
        user = User(Username=username, PasswordHash="not-a-hash", Timezone=timezone_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return UserContext(Id=user.Id, Username=user.Username, Timezone=user.Timezone)

    return _make


@pytest.fixture
def owner(make_owner) -> UserContext:
    return make_owner()


@pytest.fixture
def make_kid(db, owner):
    def _make(name: str = "Kid", user: UserContext | None = None, **fields) -> Kid:
        kid = Kid(
            OwnerUserId=(user or owner).Id,
            Name=name,
            Birthday=date(2015, 6, 1),
            SavingsPercent=fields.pop("SavingsPercent", 0),
            NetWealth=Decimal("0.00"),
            SavingsBalance=Decimal("0.00"),
            **fields,
        )
        db.add(kid)
        db.commit()
        db.refresh(kid)
        return kid

    return _make


@pytest.fixture
def make_chore(db, owner):
    def _make(
        title: str = "Chore",
        payment: str = "1.00",
        frequency: ChoreFrequency = ChoreFrequency.Daily,
        chore_type: ChoreType = ChoreType.Individual,
        user: UserContext | None = None,
        assign_to: list[Kid] | None = None,
    ) -> Chore:
        chore = Chore(
            OwnerUserId=(user or owner).Id,
            Title=title,
            PaymentAmount=Decimal(payment),
            Frequency=frequency.value,
            ChoreType=chore_type.value,
            IsPrePopulated=False,
        )
        db.add(chore)
        db.commit()
        db.refresh(chore)
        for kid in assign_to or []:
            db.add(ChoreAssignment(ChoreId=chore.Id, KidId=kid.Id))
        db.commit()
        return chore

    return _make


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient

    from app.main import app

    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[GetDb] = _override_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
