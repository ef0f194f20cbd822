"""Seed sample lecturers, subjects, venues and groups for local scheduling runs.

Run:
  PYTHONPATH=backend python scripts/seed_sample_data.py
"""

from __future__ import annotations

import logging

from sqlalchemy import select

from academic_scheduler.db.bootstrap import ensure_schema
from academic_scheduler.db.session import SessionLocal
from academic_scheduler.models.group import Group, GroupType
from academic_scheduler.models.lecturer import Lecturer
from academic_scheduler.models.subject import Subject
from academic_scheduler.models.venue import Venue, VenueType

logger = logging.getLogger(__name__)

LECTURERS = [
    {"name": "John Smith", "email": "john.smith@university.edu", "department": "Computer Science"},
    {"name": "Sarah Johnson", "email": "sarah.johnson@university.edu", "department": "Computer Science"},
    {"name": "Michael Brown", "email": "michael.brown@university.edu", "department": "Mathematics"},
    {"name": "Emily Davis", "email": "emily.davis@university.edu", "department": "Computer Engineering"},
    {"name": "Robert Wilson", "email": "robert.wilson@university.edu", "department": "Computer Engineering"},
]

VENUES = [
    ("Room101", "Science Building", "Science", "Computer Science", 50, VenueType.lecture),
    ("Room102", "Science Building", "Science", "Computer Science", 30, VenueType.tutorial),
    ("Lab1", "Computing Center", "Science", "Computer Science", 25, VenueType.lab),
    ("Room201", "Engineering Building", "Engineering", "Computer Engineering", 60, VenueType.lecture),
    ("Room202", "Engineering Building", "Engineering", "Computer Engineering", 40, VenueType.tutorial),
    ("Lab2", "Engineering Building", "Engineering", "Computer Engineering", 30, VenueType.lab),
]

GROUPS = [
    ("CS-2023-1A", "Science", "Computer Science", GroupType.weekday),
    ("CS-2023-1B", "Science", "Computer Science", GroupType.weekday),
    ("CE-2023-1A", "Engineering", "Computer Engineering", GroupType.weekday),
    ("CE-2023-1B", "Engineering", "Computer Engineering", GroupType.weekend),
]

# (code, name, department, lecturer email, credits)
SUBJECTS = [
    ("CS101", "Introduction to Programming", "Computer Science", "john.smith@university.edu", 3),
    ("CS201", "Data Structures and Algorithms", "Computer Science", "sarah.johnson@university.edu", 4),
    ("MATH204", "Discrete Mathematics", "Mathematics", "michael.brown@university.edu", 3),
    ("CE101", "Computer Architecture", "Computer Engineering", "emily.davis@university.edu", 3),
    ("CE201", "Digital Systems Design", "Computer Engineering", "robert.wilson@university.edu", 4),
]

ROSTER_SIZE = 15


def _upsert_lecturers(session) -> dict[str, Lecturer]:
    by_email: dict[str, Lecturer] = {}
    for entry in LECTURERS:
        lecturer = session.execute(select(Lecturer).where(Lecturer.email == entry["email"])).scalar_one_or_none()
        if lecturer is None:
            lecturer = Lecturer(**entry)
            session.add(lecturer)
        else:
            lecturer.name = entry["name"]
            lecturer.department = entry["department"]
        by_email[entry["email"]] = lecturer
    session.flush()
    return by_email


def _upsert_venues(session) -> None:
    for name, building, faculty, department, capacity, venue_type in VENUES:
        venue = session.execute(select(Venue).where(Venue.name == name)).scalar_one_or_none()
        if venue is None:
            venue = Venue(name=name)
            session.add(venue)
        venue.building = building
        venue.faculty = faculty
        venue.department = department
        venue.capacity = capacity
        venue.type = venue_type


def _upsert_groups(session) -> None:
    for name, faculty, department, group_type in GROUPS:
        group = session.execute(select(Group).where(Group.name == name)).scalar_one_or_none()
        if group is None:
            group = Group(name=name)
            session.add(group)
        group.faculty = faculty
        group.department = department
        group.year = 2
        group.semester = 1
        group.group_type = group_type
        group.roster_size = ROSTER_SIZE


def _upsert_subjects(session, lecturers: dict[str, Lecturer]) -> None:
    for code, name, department, lecturer_email, credits in SUBJECTS:
        subject = session.execute(select(Subject).where(Subject.code == code)).scalar_one_or_none()
        if subject is None:
            subject = Subject(code=code)
            session.add(subject)
        subject.name = name
        subject.department = department
        subject.lecturer_id = lecturers[lecturer_email].id
        subject.credits = credits


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    ensure_schema()
    with SessionLocal() as session:
        lecturers = _upsert_lecturers(session)
        _upsert_venues(session)
        _upsert_groups(session)
        _upsert_subjects(session, lecturers)
        session.commit()

    logger.info(
        "SAMPLE DATA SEEDED | lecturers=%s | venues=%s | groups=%s | subjects=%s",
        len(LECTURERS),
        len(VENUES),
        len(GROUPS),
        len(SUBJECTS),
    )
    print("Sample data ready:")
    print(f"  groups: {', '.join(item[0] for item in GROUPS)}")
    print(f"  subjects: {', '.join(item[0] for item in SUBJECTS)}")
    print(f"  venues: {', '.join(item[0] for item in VENUES)}")


if __name__ == "__main__":
    main()
