from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter

from sqlalchemy.orm import Session

from academic_scheduler.core.config import Settings, get_settings
from academic_scheduler.core.exceptions import AppError, ConflictError, DuplicateError, PersistenceError, ValidationError
from academic_scheduler.models.timetable import Timetable
from academic_scheduler.services.conflict_service import GenerationRun
from academic_scheduler.services.optimizer import TimetableScore, TimetableScorer
from academic_scheduler.services.resource_directory import ResourceDirectory
from academic_scheduler.services.slot_engine import EngineResult, SlotAssignmentEngine
from academic_scheduler.services.snapshots import GroupSnapshot, ScheduleGrid, SlotAssignment
from academic_scheduler.services.timetable_store import TimetableStore, persistence_guard

logger = logging.getLogger(__name__)

ALL_GROUPS = "all"
# Smallest total gain an optimization candidate needs over the current best.
SCORE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class FailedGroup:
    group_id: str
    name: str | None
    reason: str


@dataclass(frozen=True)
class UnassignedEntry:
    group_id: str
    subject_id: str
    subject_code: str
    reason: str


@dataclass
class GenerationOutcome:
    success: list[str] = field(default_factory=list)
    failed: list[FailedGroup] = field(default_factory=list)
    unassigned: list[UnassignedEntry] = field(default_factory=list)


@dataclass
class OptimizationOutcome:
    timetable: Timetable
    before: TimetableScore
    after: TimetableScore

    @property
    def improved(self) -> bool:
        return self.after.total > self.before.total + SCORE_TOLERANCE


def score_timetable(db: Session, timetable: Timetable, settings: Settings | None = None) -> TimetableScore:
    settings = settings or get_settings()
    grid = ScheduleGrid.from_settings(settings)
    assignments = [SlotAssignment.from_model(slot, timetable.group_id) for slot in timetable.time_slots]
    directory = ResourceDirectory(db, supporting_departments=settings.supporting_departments)
    subjects = directory.subject_snapshots(item.subject_id for item in assignments)
    return TimetableScorer.from_settings(settings, grid.days).score(assignments, subjects)


def store_score(timetable: Timetable, score: TimetableScore) -> None:
    timetable.optimization_score = score.total
    timetable.optimization_details = score.as_details()


class TimetableGenerator:
    """Batch driver: one group or every group for a month, sequentially, one shared run."""

    def __init__(self, db: Session, settings: Settings | None = None) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.grid = ScheduleGrid.from_settings(self.settings)
        self.directory = ResourceDirectory(db, supporting_departments=self.settings.supporting_departments)
        self.store = TimetableStore(db)
        self.scorer = TimetableScorer.from_settings(self.settings, self.grid.days)

    def generate(
        self,
        *,
        month: int,
        year: int,
        group_id: str | None = None,
        force_regenerate: bool = False,
    ) -> GenerationOutcome:
        started = perf_counter()
        outcome = GenerationOutcome()
        logger.info(
            "TIMETABLE GENERATION START | group=%s | month=%s | year=%s | force=%s",
            group_id or ALL_GROUPS,
            month,
            year,
            force_regenerate,
        )

        if group_id in (None, ALL_GROUPS):
            groups = self.directory.list_groups()
        else:
            try:
                groups = [self.directory.get_group(group_id)]
            except AppError as exc:
                outcome.failed.append(FailedGroup(group_id=group_id, name=None, reason=exc.reason()))
                logger.warning("TIMETABLE GENERATION GROUP FAILED | group_id=%s | reason=%s", group_id, exc.reason())
                return outcome

        snapshots = [GroupSnapshot.from_model(group) for group in groups]
        run = self.seed_run(month=month, year=year)

        for group in snapshots:
            displaced: list[SlotAssignment] = []
            if force_regenerate:
                displaced = [
                    item for item in run.assignments if item.group_id == group.id and not item.locked
                ]
                run.discard(displaced)
            try:
                with persistence_guard("generate timetable", "Timetable generator"):
                    timetable, result = self._generate_group(
                        run,
                        group,
                        month=month,
                        year=year,
                        force_regenerate=force_regenerate,
                    )
            except AppError as exc:
                self.store.rollback()
                # The stored timetable survives a failed regeneration, so its slots stay booked.
                for assignment in displaced:
                    run.add(assignment)
                outcome.failed.append(FailedGroup(group_id=group.id, name=group.name, reason=exc.reason()))
                logger.warning(
                    "TIMETABLE GENERATION GROUP FAILED | group=%s | reason=%s",
                    group.name,
                    exc.reason(),
                )
                continue

            outcome.success.append(timetable.id)
            outcome.unassigned.extend(
                UnassignedEntry(
                    group_id=group.id,
                    subject_id=item.subject_id,
                    subject_code=item.subject_code,
                    reason=item.reason,
                )
                for item in result.unassigned
            )

        logger.info(
            "TIMETABLE GENERATION COMPLETE | month=%s | year=%s | success=%s | failed=%s | unassigned=%s | wall_ms=%s",
            month,
            year,
            len(outcome.success),
            len(outcome.failed),
            len(outcome.unassigned),
            int((perf_counter() - started) * 1000),
        )
        return outcome

    def seed_run(self, *, month: int, year: int) -> GenerationRun:
        """Occupancy already committed for the month before this batch places anything.

        A group's own unlocked slots are only released right before that group
        is regenerated, so groups earlier in the batch never take cells that a
        later, possibly failing, regeneration still holds.
        """
        run = GenerationRun()
        for _, assignments in self.store.period_assignments(month, year):
            for assignment in assignments:
                run.add(assignment)
        return run

    def _generate_group(
        self,
        run: GenerationRun,
        group: GroupSnapshot,
        *,
        month: int,
        year: int,
        force_regenerate: bool,
    ) -> tuple[Timetable, EngineResult]:
        existing = self.store.find(group.id, month, year)
        if existing is not None and not force_regenerate:
            raise DuplicateError(
                f"Timetable already exists for group {group.name} in {month:02d}/{year}",
                details={"groupId": group.id, "timetableId": existing.id},
            )

        subjects = self.directory.eligible_subjects(group)
        if not subjects:
            raise ValidationError(f"No subjects found for group {group.name}", details={"groupId": group.id})
        venues = self.directory.candidate_venues(group)

        locked = []
        if existing is not None:
            locked = [SlotAssignment.from_model(slot, group.id) for slot in existing.time_slots if slot.is_locked]

        engine = SlotAssignmentEngine(self.grid, run, self.directory.lecturer_of)
        result = engine.assign(group, subjects, venues, locked=locked)

        try:
            with persistence_guard("save timetable", "Timetable generator"):
                timetable = self.store.save_generated(
                    group_id=group.id,
                    month=month,
                    year=year,
                    assignments=result.assignments,
                    existing=existing,
                )
                subject_map = {subject.id: subject for subject in subjects}
                missing = {item.subject_id for item in result.locked} - subject_map.keys()
                subject_map.update(self.directory.subject_snapshots(missing))
                store_score(timetable, self.scorer.score(result.all_assignments, subject_map))
                self.store.commit()
        except PersistenceError:
            run.discard(result.assignments)
            raise

        logger.info(
            "TIMETABLE GENERATED | group=%s | timetable_id=%s | placed=%s | locked=%s | unassigned=%s | score=%.3f",
            group.name,
            timetable.id,
            len(result.assignments),
            len(result.locked),
            len(result.unassigned),
            timetable.optimization_score,
        )
        return timetable, result

    def optimize(self, timetable_id: str) -> OptimizationOutcome:
        """Re-place a timetable's unlocked slots from every cursor start and keep the best one.

        Locked slots and the slots of every other timetable in the same month
        stay booked. A candidate is only eligible when it places every subject
        the timetable already holds, and it replaces the stored slots only when
        its total beats the current one.
        """
        started = perf_counter()
        timetable = self.store.get(timetable_id)
        group = GroupSnapshot.from_model(self.directory.get_group(timetable.group_id))
        current = [SlotAssignment.from_model(slot, group.id) for slot in timetable.time_slots]
        locked = [item for item in current if item.locked]
        subject_map = self.directory.subject_snapshots(item.subject_id for item in current)
        subjects = [
            subject_map[subject_id]
            for subject_id in dict.fromkeys(item.subject_id for item in current if not item.locked)
            if subject_id in subject_map
        ]
        before = self.scorer.score(current, subject_map)
        outcome = OptimizationOutcome(timetable=timetable, before=before, after=before)

        if subjects:
            venues = self.directory.candidate_venues(group)
            occupied = [
                item
                for other, items in self.store.period_assignments(timetable.month, timetable.year)
                if other.id != timetable.id
                for item in items
            ]
            best: EngineResult | None = None
            for start in range(self.grid.cell_count):
                engine = SlotAssignmentEngine(self.grid, GenerationRun(occupied), self.directory.lecturer_of)
                try:
                    candidate = engine.assign(group, subjects, venues, locked=locked, start=start)
                except ConflictError:
                    continue
                if candidate.unassigned:
                    continue
                score = self.scorer.score(candidate.all_assignments, subject_map)
                if score.total > outcome.after.total + SCORE_TOLERANCE:
                    best, outcome.after = candidate, score
            if best is not None:
                self.store.replace_unlocked_slots(timetable, best.assignments)

        store_score(timetable, outcome.after)
        self.store.commit()
        logger.info(
            "TIMETABLE OPTIMIZED | timetable_id=%s | improved=%s | before=%.3f | after=%.3f | wall_ms=%s",
            timetable.id,
            outcome.improved,
            outcome.before.total,
            outcome.after.total,
            int((perf_counter() - started) * 1000),
        )
        return outcome


def generate_timetables(
    db: Session,
    *,
    month: int,
    year: int,
    group_id: str | None = None,
    force_regenerate: bool = False,
    settings: Settings | None = None,
) -> GenerationOutcome:
    return TimetableGenerator(db, settings).generate(
        month=month,
        year=year,
        group_id=group_id,
        force_regenerate=force_regenerate,
    )


def optimize_timetable(db: Session, timetable_id: str, settings: Settings | None = None) -> OptimizationOutcome:
    return TimetableGenerator(db, settings).optimize(timetable_id)
