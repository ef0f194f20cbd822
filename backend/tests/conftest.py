import os
from types import SimpleNamespace

# The app module builds its engine and settings at import time.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from academic_scheduler.api.deps import get_db  # noqa: E402
from academic_scheduler.core.config import Settings  # noqa: E402
from academic_scheduler.db.base import Base  # noqa: E402
from academic_scheduler.main import app  # noqa: E402
from academic_scheduler.models.group import Group  # noqa: E402
from academic_scheduler.models.lecturer import Lecturer  # noqa: E402
from academic_scheduler.models.subject import Subject  # noqa: E402
from academic_scheduler.models.venue import Venue, VenueType  # noqa: E402


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def settings():
    return Settings(
        schedule_days=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        schedule_time_windows=["08:00-10:00", "10:00-12:00", "13:00-15:00", "15:00-17:00"],
        supporting_departments=["Mathematics"],
    )


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def campus(db_session):
    """Two groups of different departments sharing the Mathematics lecturer."""
    lecturers = {
        "John Smith": Lecturer(name="John Smith", email="john.smith@university.edu", department="Computer Science"),
        "Sarah Johnson": Lecturer(
            name="Sarah Johnson", email="sarah.johnson@university.edu", department="Computer Science"
        ),
        "Michael Brown": Lecturer(name="Michael Brown", email="michael.brown@university.edu", department="Mathematics"),
        "Emily Davis": Lecturer(
            name="Emily Davis", email="emily.davis@university.edu", department="Computer Engineering"
        ),
        "Robert Wilson": Lecturer(
            name="Robert Wilson", email="robert.wilson@university.edu", department="Computer Engineering"
        ),
    }
    db_session.add_all(lecturers.values())
    db_session.flush()

    subjects = {
        "CS101": Subject(
            code="CS101",
            name="Introduction to Programming",
            department="Computer Science",
            lecturer_id=lecturers["John Smith"].id,
        ),
        "CS201": Subject(
            code="CS201",
            name="Data Structures and Algorithms",
            department="Computer Science",
            lecturer_id=lecturers["Sarah Johnson"].id,
            credits=4,
        ),
        "MATH204": Subject(
            code="MATH204",
            name="Discrete Mathematics",
            department="Mathematics",
            lecturer_id=lecturers["Michael Brown"].id,
        ),
        "CE101": Subject(
            code="CE101",
            name="Computer Architecture",
            department="Computer Engineering",
            lecturer_id=lecturers["Emily Davis"].id,
        ),
        "CE201": Subject(
            code="CE201",
            name="Digital Systems Design",
            department="Computer Engineering",
            lecturer_id=lecturers["Robert Wilson"].id,
            credits=4,
        ),
    }
    venues = {
        "Room101": Venue(
            name="Room101",
            building="Science Building",
            faculty="Science",
            department="Computer Science",
            capacity=50,
            type=VenueType.lecture,
        ),
        "Room102": Venue(
            name="Room102",
            building="Science Building",
            faculty="Science",
            department="Computer Science",
            capacity=30,
            type=VenueType.tutorial,
        ),
        "Lab1": Venue(
            name="Lab1",
            building="Computing Center",
            faculty="Science",
            department="Computer Science",
            capacity=25,
            type=VenueType.lab,
        ),
        "Room201": Venue(
            name="Room201",
            building="Engineering Building",
            faculty="Engineering",
            department="Computer Engineering",
            capacity=60,
            type=VenueType.lecture,
        ),
    }
    groups = {
        "CS-2023-1A": Group(
            name="CS-2023-1A", faculty="Science", department="Computer Science", year=2, roster_size=15
        ),
        "CE-2023-1A": Group(
            name="CE-2023-1A", faculty="Engineering", department="Computer Engineering", year=2, roster_size=15
        ),
    }
    db_session.add_all([*subjects.values(), *venues.values(), *groups.values()])
    db_session.flush()

    ids = SimpleNamespace(
        lecturers={name: item.id for name, item in lecturers.items()},
        subjects={code: item.id for code, item in subjects.items()},
        venues={name: item.id for name, item in venues.items()},
        groups={name: item.id for name, item in groups.items()},
    )
    db_session.commit()
    return ids
