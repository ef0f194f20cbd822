from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.core.exceptions import ValidationError
from academic_scheduler.models.group import Group
from academic_scheduler.models.subject import Subject, SubjectStatus
from academic_scheduler.models.venue import Venue
from academic_scheduler.services.snapshots import GroupSnapshot, SubjectSnapshot, VenueSnapshot
from academic_scheduler.services.timetable_store import persistence_guard

SOURCE = "Resource directory"


class ResourceDirectory:
    """Read-only lookups of the groups, subjects and venues a generation run needs.

    Database failures surface as ``PersistenceError`` so a batch can report
    them against the group being processed.
    """

    def __init__(self, db: Session, *, supporting_departments: Sequence[str] = ()) -> None:
        self.db = db
        self.supporting_departments = tuple(supporting_departments)

    def get_group(self, group_id: str) -> Group:
        with persistence_guard("load group", SOURCE):
            group = self.db.get(Group, group_id)
        if group is None:
            raise ValidationError(f"Group {group_id} does not exist", details={"groupId": group_id})
        return group

    def list_groups(self) -> list[Group]:
        with persistence_guard("list groups", SOURCE):
            return list(self.db.execute(select(Group).order_by(Group.name, Group.id)).scalars())

    def _departments_for(self, group: GroupSnapshot) -> list[str]:
        departments = [group.department]
        departments.extend(item for item in self.supporting_departments if item != group.department)
        return departments

    def eligible_subjects(self, group: GroupSnapshot) -> list[SubjectSnapshot]:
        """Active subjects of the group's department, then those of supporting departments."""
        statement = select(Subject).where(
            Subject.status == SubjectStatus.active,
            Subject.department.in_(self._departments_for(group)),
        )
        with persistence_guard("load subjects", SOURCE):
            rows = list(self.db.execute(statement).scalars())
        ordered = sorted(rows, key=lambda item: (item.department != group.department, item.code, item.id))
        return [SubjectSnapshot.from_model(item) for item in ordered]

    def candidate_venues(self, group: GroupSnapshot) -> list[VenueSnapshot]:
        statement = select(Venue).where(Venue.department.in_(self._departments_for(group)))
        if group.roster_size:
            statement = statement.where(Venue.capacity >= group.roster_size)
        else:
            statement = statement.where(Venue.capacity > 0)
        with persistence_guard("load venues", SOURCE):
            rows = list(self.db.execute(statement.order_by(Venue.capacity.desc(), Venue.name, Venue.id)).scalars())
        venues = [VenueSnapshot.from_model(item) for item in rows]
        if not venues:
            raise ValidationError(
                f"No suitable venues found for group {group.name}",
                details={"groupId": group.id, "rosterSize": group.roster_size},
            )
        return venues

    def lecturer_of(self, subject: SubjectSnapshot) -> str:
        return subject.lecturer_id

    def subject_snapshots(self, subject_ids: Iterable[str]) -> dict[str, SubjectSnapshot]:
        ids = set(subject_ids)
        if not ids:
            return {}
        with persistence_guard("load subjects", SOURCE):
            rows = list(self.db.execute(select(Subject).where(Subject.id.in_(ids))).scalars())
        return {item.id: SubjectSnapshot.from_model(item) for item in rows}
