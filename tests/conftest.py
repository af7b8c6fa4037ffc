"""Shared fixtures: SQLite engines, catalog factories and a fake ranking client."""

import datetime
import os
import re

# Settings require these; set before any app import.
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.alternatives.llm_client import Completion
from app.alternatives.metering import default_usage_settings
from app.db import base  # noqa: F401
from app.db.repositories.usage import UNLIMITED, UsageRepository
from app.models.equipment import OrganizationEquipment
from app.models.exercise import Exercise
from app.schemas.exercise import ExerciseData

NOW = datetime.datetime(2026, 10, 18, 12, 0, 0)
ORG = "org-1"
USER = "user-1"


class FakeRankingClient:
    """Stands in for the OpenAI client.

    By default it scores every candidate id found in the prompt, in prompt
    order, 90, 89, 88... so the AI order matches the rule order.
    """

    def __init__(self, content=None, total_tokens=420, error=None):
        self.content = content
        self.total_tokens = total_tokens
        self.error = error
        self.calls = []

    def complete(self, system, prompt, *, model):
        self.calls.append({"system": system, "prompt": prompt, "model": model})
        if self.error is not None:
            raise self.error
        content = self.content
        if content is None:
            ids = re.findall(r"^\d+\. \[(\d+)\]", prompt, flags=re.MULTILINE)
            rankings = ", ".join(
                f'{{"id": "{eid}", "score": {90 - i}, "reason": "ai reason {eid}"}}'
                for i, eid in enumerate(ids)
            )
            content = f'{{"rankings": [{rankings}]}}'
        return Completion(content=content, total_tokens=self.total_tokens)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_exercise(session):
    """Insert an exercise and return it as ``ExerciseData``."""

    def _make(name, movement_pattern=None, muscle_groups=(), equipment=(),
              difficulty="beginner", category="chest", organization_id=None, is_active=True):
        row = Exercise(
            name=name,
            movement_pattern=movement_pattern,
            muscle_groups=list(muscle_groups),
            equipment=list(equipment),
            difficulty=difficulty,
            category=category,
            organization_id=organization_id,
            is_active=is_active,
        )
        session.add(row)
        session.commit()
        session.refresh(row)
        return ExerciseData.model_validate(row)

    return _make


@pytest.fixture
def set_plan(session):
    """Create the organization's usage row for ``plan`` with optional overrides."""

    def _set(plan="pro", organization_id=ORG, **overrides):
        row = default_usage_settings(organization_id, plan)
        for key, value in overrides.items():
            setattr(row, key, value)
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    return _set


@pytest.fixture
def set_equipment(session):
    def _set(available, unavailable=(), organization_id=ORG):
        row = OrganizationEquipment(
            organization_id=organization_id,
            available_equipment=list(available),
            unavailable_equipment=list(unavailable),
        )
        session.add(row)
        session.commit()
        return row

    return _set


@pytest.fixture
def fill_counter(session):
    """Set a usage counter to ``value``."""

    def _fill(counter_id, value, organization_id=ORG, period="2026-10"):
        repository = UsageRepository(session)
        repository.ensure_counter(counter_id, organization_id, period)
        repository.compare_and_increment(counter_id, value, UNLIMITED)
        session.commit()

    return _fill
