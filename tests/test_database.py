# ABOUTME: Pytest tests for Dream/Step SQLModel tables and progress computation on in-memory SQLite.
# ABOUTME: Verifies create, save, ordered read-back and completed counts.

from uuid import uuid4

import pytest
from sqlmodel import Session, SQLModel, create_engine, select
from sqlmodel.pool import StaticPool

from core.database import Dream, Step
from core.progress import compute_progress


@pytest.fixture
def in_memory_engine():
    """Engine for in-memory SQLite; one DB per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(in_memory_engine):
    """Yield a session that uses the in-memory engine."""
    with Session(in_memory_engine) as session:
        yield session


def test_dream_and_steps_create_save_and_retrieve(session):
    """Create a Dream with steps, save them, and read them back in order_index order."""
    dream = Dream(
        user_id=uuid4(),
        title="Learn Japanese",
        description="Learn Japanese",
        domain="personal",
    )
    session.add(dream)
    for index in (2, 0, 1):
        session.add(
            Step(
                dream_id=dream.id,
                title=f"Step {index}",
                description="Do it",
                order_index=index,
            )
        )
    session.commit()

    read = session.get(Dream, dream.id)
    assert read is not None
    assert read.domain == "personal"
    steps = list(
        session.exec(
            select(Step).where(Step.dream_id == dream.id).order_by(Step.order_index)
        )
    )
    assert [s.title for s in steps] == ["Step 0", "Step 1", "Step 2"]
    assert all(s.completed is False for s in steps)


def _steps(*completed: bool) -> list[Step]:
    return [
        Step(dream_id=uuid4(), title="t", description="d", order_index=i, completed=c)
        for i, c in enumerate(completed)
    ]


def test_compute_progress_no_steps_is_zero():
    progress = compute_progress([])
    assert (progress.completed, progress.total, progress.percent) == (0, 0, 0)


def test_compute_progress_counts_completed():
    progress = compute_progress(_steps(True, False, True, False, False))
    assert progress.completed == 2
    assert progress.total == 5
    assert progress.percent == 40


def test_compute_progress_rounds_half_up():
    """1 of 8 is 12.5% and shows as 13%."""
    assert compute_progress(_steps(True, *([False] * 7))).percent == 13
    assert compute_progress(_steps(True, False, False)).percent == 33
    assert compute_progress(_steps(True, True, False)).percent == 67


def test_progress_to_json():
    assert compute_progress(_steps(True, True)).to_json() == {
        "completed": 2,
        "total": 2,
        "percent": 100,
    }
