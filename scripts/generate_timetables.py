"""Generate timetables for every group and print them day by day.

Run:
  PYTHONPATH=backend python scripts/generate_timetables.py

SCHEDULE_MONTH / SCHEDULE_YEAR pick the period (default: current month) and
FORCE_REGENERATE=1 replaces existing unlocked slots.
"""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from datetime import date

from sqlalchemy import select

from academic_scheduler.core.config import get_settings
from academic_scheduler.db.bootstrap import ensure_schema
from academic_scheduler.db.session import SessionLocal
from academic_scheduler.models.group import Group
from academic_scheduler.models.subject import Subject
from academic_scheduler.models.venue import Venue
from academic_scheduler.services.generation import generate_timetables
from academic_scheduler.services.timetable_store import TimetableStore


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key, "").strip()
    return int(value) if value else default


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    today = date.today()
    month = _env_int("SCHEDULE_MONTH", today.month)
    year = _env_int("SCHEDULE_YEAR", today.year)
    force = os.getenv("FORCE_REGENERATE", "").strip().lower() in {"1", "true", "yes"}
    days = get_settings().schedule_days

    ensure_schema()
    with SessionLocal() as session:
        outcome = generate_timetables(session, month=month, year=year, force_regenerate=force)

        groups = {item.id: item.name for item in session.execute(select(Group)).scalars()}
        subjects = {item.id: item.code for item in session.execute(select(Subject)).scalars()}
        venues = {item.id: item.name for item in session.execute(select(Venue)).scalars()}

        for timetable in TimetableStore(session).list_timetables(month=month, year=year):
            if timetable.id not in outcome.success:
                continue
            print(f"\n{groups.get(timetable.group_id, timetable.group_id)} {month:02d}/{year} "
                  f"(score {timetable.optimization_score:.3f})")
            by_day = defaultdict(list)
            for slot in timetable.time_slots:
                by_day[slot.day].append(slot)
            for day in days:
                for slot in sorted(by_day.get(day, []), key=lambda item: item.start_time):
                    lock = " [locked]" if slot.is_locked else ""
                    print(f"  {day:<9} {slot.start_time}-{slot.end_time}  "
                          f"{subjects.get(slot.subject_id, slot.subject_id):<8} "
                          f"{venues.get(slot.venue_id, slot.venue_id)}{lock}")

    for failure in outcome.failed:
        print(f"FAILED {failure.name or failure.group_id}: {failure.reason}")
    for item in outcome.unassigned:
        print(f"UNASSIGNED {groups.get(item.group_id, item.group_id)} {item.subject_code}: {item.reason}")


if __name__ == "__main__":
    main()
