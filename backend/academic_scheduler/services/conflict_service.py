from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, Iterable, List

from academic_scheduler.schemas.conflict import ConflictDetail, ConflictReport
from academic_scheduler.services.snapshots import SlotAssignment, TimeWindow


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return a_start < b_end and a_end > b_start


def windows_overlap(first: TimeWindow, second: TimeWindow) -> bool:
    return overlaps(first.start, first.end, second.start, second.end)


class GenerationRun:
    """Occupancy shared by every group processed in one generation call.

    Assignments are indexed by (venue, day), (lecturer, day) and (group, day),
    plus the exact (venue, day, window) cells, so each predicate only scans
    the entries of one resource on one day.
    """

    def __init__(self, assignments: Iterable[SlotAssignment] = ()) -> None:
        self._members: set[SlotAssignment] = set()
        self._ordered: list[SlotAssignment] = []
        self._by_venue: dict[tuple[str, str], list[SlotAssignment]] = defaultdict(list)
        self._by_lecturer: dict[tuple[str, str], list[SlotAssignment]] = defaultdict(list)
        self._by_group: dict[tuple[str, str], list[SlotAssignment]] = defaultdict(list)
        self._cells: Counter[tuple[str, str, TimeWindow]] = Counter()
        for assignment in assignments:
            self.add(assignment)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, assignment: SlotAssignment) -> bool:
        return assignment in self._members

    @property
    def assignments(self) -> list[SlotAssignment]:
        return list(self._ordered)

    def add(self, assignment: SlotAssignment) -> None:
        if assignment in self._members:
            return
        self._members.add(assignment)
        self._ordered.append(assignment)
        self._by_venue[(assignment.venue_id, assignment.day)].append(assignment)
        self._by_lecturer[(assignment.lecturer_id, assignment.day)].append(assignment)
        self._by_group[(assignment.group_id, assignment.day)].append(assignment)
        self._cells[(assignment.venue_id, assignment.day, assignment.window)] += 1

    def discard(self, assignments: Iterable[SlotAssignment]) -> None:
        for assignment in assignments:
            if assignment not in self._members:
                continue
            self._members.remove(assignment)
            self._ordered.remove(assignment)
            self._by_venue[(assignment.venue_id, assignment.day)].remove(assignment)
            self._by_lecturer[(assignment.lecturer_id, assignment.day)].remove(assignment)
            self._by_group[(assignment.group_id, assignment.day)].remove(assignment)
            cell = (assignment.venue_id, assignment.day, assignment.window)
            self._cells[cell] -= 1
            if self._cells[cell] <= 0:
                del self._cells[cell]

    def is_cell_occupied(self, venue_id: str, day: str, window: TimeWindow) -> bool:
        return self._cells.get((venue_id, day, window), 0) > 0

    def venue_collisions(self, venue_id: str, day: str, window: TimeWindow) -> list[SlotAssignment]:
        return [item for item in self._by_venue.get((venue_id, day), []) if windows_overlap(item.window, window)]

    def lecturer_collisions(self, lecturer_id: str, day: str, window: TimeWindow) -> list[SlotAssignment]:
        return [item for item in self._by_lecturer.get((lecturer_id, day), []) if windows_overlap(item.window, window)]

    def group_collisions(self, group_id: str, day: str, window: TimeWindow) -> list[SlotAssignment]:
        return [item for item in self._by_group.get((group_id, day), []) if windows_overlap(item.window, window)]

    def venue_conflict(self, venue_id: str, day: str, window: TimeWindow) -> bool:
        return any(windows_overlap(item.window, window) for item in self._by_venue.get((venue_id, day), []))

    def lecturer_conflict(self, lecturer_id: str, day: str, window: TimeWindow) -> bool:
        return any(windows_overlap(item.window, window) for item in self._by_lecturer.get((lecturer_id, day), []))

    def group_conflict(self, group_id: str, day: str, window: TimeWindow) -> bool:
        return any(windows_overlap(item.window, window) for item in self._by_group.get((group_id, day), []))

    def collisions(self, candidate: SlotAssignment) -> list[tuple[str, str, SlotAssignment]]:
        """Every (resource type, resource id, existing assignment) the candidate collides with."""
        found: list[tuple[str, str, SlotAssignment]] = []
        for existing in self.venue_collisions(candidate.venue_id, candidate.day, candidate.window):
            found.append(("venue", candidate.venue_id, existing))
        for existing in self.lecturer_collisions(candidate.lecturer_id, candidate.day, candidate.window):
            found.append(("lecturer", candidate.lecturer_id, existing))
        for existing in self.group_collisions(candidate.group_id, candidate.day, candidate.window):
            found.append(("group", candidate.group_id, existing))
        return found


class ConflictService:
    def __init__(
        self,
        assignments: List[SlotAssignment],
        venue_map: Dict[str, dict],
        lecturer_map: Dict[str, dict],
        group_map: Dict[str, dict],
    ):
        self.assignments = assignments
        self.venue_map = venue_map
        self.lecturer_map = lecturer_map
        self.group_map = group_map

    def detect_conflicts(self, *, month: int, year: int) -> ConflictReport:
        conflicts: List[ConflictDetail] = []

        slots_by_day = defaultdict(list)
        for slot in self.assignments:
            slots_by_day[slot.day].append(slot)

        for day_slots in slots_by_day.values():
            n = len(day_slots)
            for i in range(n):
                s1 = day_slots[i]

                venue = self.venue_map.get(s1.venue_id)
                group = self.group_map.get(s1.group_id)
                if venue and group and group.get("roster_size"):
                    capacity = venue.get("capacity", 0)
                    roster = group["roster_size"]
                    if capacity < roster:
                        conflicts.append(ConflictDetail(
                            id=f"cap-{s1.slot_id}",
                            conflict_type="venue_capacity",
                            description=f"Venue {venue.get('name')} capacity ({capacity}) < group {group.get('name')} ({roster})",
                            severity="hard",
                            affected_slots=[s1.slot_id or ""],
                        ))

                for j in range(i + 1, n):
                    s2 = day_slots[j]
                    if not windows_overlap(s1.window, s2.window):
                        continue
                    pair = [s1.slot_id or "", s2.slot_id or ""]
                    if s1.venue_id == s2.venue_id:
                        venue_name = self.venue_map.get(s1.venue_id, {}).get("name", s1.venue_id)
                        conflicts.append(ConflictDetail(
                            id=f"venue-{s1.slot_id}-{s2.slot_id}",
                            conflict_type="venue_conflict",
                            description=f"Venue overlap in {venue_name} on {s1.day}: {s1.window} and {s2.window}",
                            severity="hard",
                            affected_slots=pair,
                        ))
                    if s1.lecturer_id == s2.lecturer_id:
                        lecturer_name = self.lecturer_map.get(s1.lecturer_id, {}).get("name", s1.lecturer_id)
                        conflicts.append(ConflictDetail(
                            id=f"lecturer-{s1.slot_id}-{s2.slot_id}",
                            conflict_type="lecturer_conflict",
                            description=f"Lecturer overlap for {lecturer_name} on {s1.day}: {s1.window} and {s2.window}",
                            severity="hard",
                            affected_slots=pair,
                        ))
                    if s1.group_id == s2.group_id:
                        group_name = self.group_map.get(s1.group_id, {}).get("name", s1.group_id)
                        conflicts.append(ConflictDetail(
                            id=f"group-{s1.slot_id}-{s2.slot_id}",
                            conflict_type="group_conflict",
                            description=f"Group overlap for {group_name} on {s1.day}: {s1.window} and {s2.window}",
                            severity="hard",
                            affected_slots=pair,
                        ))

        return ConflictReport(month=month, year=year, conflicts=conflicts)
