import pytest

from academic_scheduler.core.exceptions import ConflictError
from academic_scheduler.services.conflict_service import GenerationRun
from academic_scheduler.services.slot_engine import SlotAssignmentEngine
from academic_scheduler.services.snapshots import (
    GroupSnapshot,
    ScheduleGrid,
    SlotAssignment,
    SubjectSnapshot,
    TimeWindow,
    VenueSnapshot,
)

WEEK = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
WINDOWS = (
    TimeWindow.from_strings("08:00", "10:00"),
    TimeWindow.from_strings("10:00", "12:00"),
    TimeWindow.from_strings("13:00", "15:00"),
    TimeWindow.from_strings("15:00", "17:00"),
)


def subject(code, lecturer_id, department="Computer Science", **kwargs):
    return SubjectSnapshot(
        id=f"sub-{code}",
        code=code,
        name=code,
        department=department,
        lecturer_id=lecturer_id,
        **kwargs,
    )


@pytest.fixture
def grid():
    return ScheduleGrid(days=WEEK, windows=WINDOWS)


@pytest.fixture
def cs_group():
    return GroupSnapshot(id="g-cs", name="CS-2023-1A", department="Computer Science", roster_size=15)


@pytest.fixture
def ce_group():
    return GroupSnapshot(id="g-ce", name="CE-2023-1A", department="Computer Engineering", roster_size=15)


@pytest.fixture
def cs_venues():
    return [
        VenueSnapshot(id="v-101", name="Room101", department="Computer Science", capacity=50, type="lecture"),
        VenueSnapshot(id="v-102", name="Room102", department="Computer Science", capacity=30, type="tutorial"),
        VenueSnapshot(id="v-lab1", name="Lab1", department="Computer Science", capacity=25, type="lab"),
    ]


@pytest.fixture
def cs_subjects():
    return [
        subject("CS101", "l-john"),
        subject("CS201", "l-sarah"),
        subject("MATH204", "l-michael", department="Mathematics"),
    ]


def placements(result):
    return [(item.subject_id, item.day, str(item.window), item.venue_id) for item in result.assignments]


def test_first_group_fills_cells_in_cursor_order(grid, cs_group, cs_subjects, cs_venues):
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, cs_subjects, cs_venues)

    assert placements(result) == [
        ("sub-CS101", "Monday", "08:00-10:00", "v-101"),
        ("sub-CS201", "Monday", "10:00-12:00", "v-101"),
        ("sub-MATH204", "Monday", "13:00-15:00", "v-101"),
    ]
    assert result.unassigned == []


def test_shared_lecturer_falls_through_to_next_cell(grid, cs_group, ce_group, cs_subjects, cs_venues):
    run = GenerationRun()
    engine = SlotAssignmentEngine(grid, run)
    engine.assign(cs_group, cs_subjects, cs_venues)

    ce_venues = [VenueSnapshot(id="v-201", name="Room201", department="Computer Engineering", capacity=60, type="lecture")]
    ce_subjects = [
        subject("CE101", "l-emily", department="Computer Engineering"),
        subject("CE201", "l-robert", department="Computer Engineering"),
        subject("MATH204", "l-michael", department="Mathematics"),
    ]
    result = engine.assign(ce_group, ce_subjects, ce_venues)

    assert placements(result) == [
        ("sub-CE101", "Monday", "08:00-10:00", "v-201"),
        ("sub-CE201", "Monday", "10:00-12:00", "v-201"),
        ("sub-MATH204", "Monday", "15:00-17:00", "v-201"),
    ]


def test_subject_that_exhausts_grid_is_reported_not_fatal(cs_group):
    grid = ScheduleGrid(days=("Monday",), windows=WINDOWS)
    venues = [VenueSnapshot(id="v-101", name="Room101", department="Computer Science", capacity=50, type="lecture")]
    subjects = [subject(f"CS10{index}", f"l-{index}") for index in range(1, 6)]

    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, subjects, venues)

    assert len(result.assignments) == 4
    assert [item.subject_id for item in result.unassigned] == ["sub-CS105"]
    assert result.unassigned[0].reason == "no conflict-free slot among 4 cells"


def test_cursor_keeps_advancing_after_a_skipped_cell(grid, cs_group, cs_subjects, cs_venues):
    busy = SlotAssignment(
        day="Monday",
        window=WINDOWS[0],
        subject_id="sub-other",
        venue_id="v-elsewhere",
        lecturer_id="l-john",
        group_id="g-other",
    )
    result = SlotAssignmentEngine(grid, GenerationRun([busy])).assign(cs_group, cs_subjects, cs_venues)

    # Monday 08:00 stays empty: the cursor never moves backwards.
    assert placements(result) == [
        ("sub-CS101", "Monday", "10:00-12:00", "v-101"),
        ("sub-CS201", "Monday", "13:00-15:00", "v-101"),
        ("sub-MATH204", "Monday", "15:00-17:00", "v-101"),
    ]


def test_cursor_wraps_to_first_cell(cs_group, cs_subjects, cs_venues):
    grid = ScheduleGrid(days=("Monday",), windows=WINDOWS[:3])
    busy = SlotAssignment(
        day="Monday",
        window=WINDOWS[0],
        subject_id="sub-other",
        venue_id="v-elsewhere",
        lecturer_id="l-john",
        group_id="g-other",
    )
    result = SlotAssignmentEngine(grid, GenerationRun([busy])).assign(cs_group, cs_subjects, cs_venues)

    assert placements(result) == [
        ("sub-CS101", "Monday", "10:00-12:00", "v-101"),
        ("sub-CS201", "Monday", "13:00-15:00", "v-101"),
        ("sub-MATH204", "Monday", "08:00-10:00", "v-101"),
    ]


def test_occupied_venue_moves_to_next_candidate(grid, cs_group, cs_subjects, cs_venues):
    busy = SlotAssignment(
        day="Monday",
        window=WINDOWS[0],
        subject_id="sub-other",
        venue_id="v-101",
        lecturer_id="l-other",
        group_id="g-other",
    )
    result = SlotAssignmentEngine(grid, GenerationRun([busy])).assign(cs_group, cs_subjects, cs_venues)

    assert placements(result)[0] == ("sub-CS101", "Monday", "08:00-10:00", "v-102")


def test_assignment_is_deterministic(grid, cs_group, cs_subjects, cs_venues):
    first = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, cs_subjects, cs_venues)
    second = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, cs_subjects, cs_venues)

    assert first.assignments == second.assignments


def test_locked_assignment_is_kept_and_its_subject_skipped(grid, cs_group, cs_subjects, cs_venues):
    locked = SlotAssignment(
        day="Tuesday",
        window=WINDOWS[0],
        subject_id="sub-MATH204",
        venue_id="v-102",
        lecturer_id="l-michael",
        group_id="g-cs",
        locked=True,
        slot_id="slot-math",
    )
    run = GenerationRun()
    result = SlotAssignmentEngine(grid, run).assign(cs_group, cs_subjects, cs_venues, locked=[locked])

    assert result.locked == [locked]
    assert locked in run
    assert [item.subject_id for item in result.assignments] == ["sub-CS101", "sub-CS201"]
    assert result.all_assignments[0] is locked


def test_required_venue_type_filters_candidates(grid, cs_group, cs_venues):
    lab_subject = subject("CS150", "l-john", required_venue_types=frozenset({"lab"}))
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, [lab_subject], cs_venues)

    assert placements(result) == [("sub-CS150", "Monday", "08:00-10:00", "v-lab1")]


def test_any_venue_type_accepts_every_venue(grid, cs_group, cs_venues):
    flexible = subject("CS160", "l-john", required_venue_types=frozenset({"any"}))
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, [flexible], cs_venues)

    assert result.assignments[0].venue_id == "v-101"


def test_session_duration_without_matching_window_is_unassigned(grid, cs_group, cs_subjects, cs_venues):
    short = subject("CS170", "l-other", session_duration=90)
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, [*cs_subjects, short], cs_venues)

    assert len(result.assignments) == 3
    assert result.unassigned[0].subject_code == "CS170"
    assert result.unassigned[0].reason == "no time window of 90 minutes"


def test_session_duration_selects_matching_windows(cs_group, cs_venues):
    grid = ScheduleGrid(
        days=("Monday",),
        windows=(
            TimeWindow.from_strings("08:00", "10:00"),
            TimeWindow.from_strings("10:00", "11:00"),
        ),
    )
    hour = subject("CS180", "l-john", session_duration=60)
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, [hour], cs_venues)

    assert str(result.assignments[0].window) == "10:00-11:00"


def test_group_with_nothing_placeable_raises_conflict(grid, cs_group):
    venues = [VenueSnapshot(id="v-101", name="Room101", department="Computer Science", capacity=50, type="lecture")]
    lab_only = subject("CS150", "l-john", required_venue_types=frozenset({"lab"}))

    with pytest.raises(ConflictError) as excinfo:
        SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, [lab_only], venues)

    assert "CS-2023-1A" in excinfo.value.message
    assert excinfo.value.details["unassigned"][0]["subjectCode"] == "CS150"


def test_start_cursor_seeds_the_first_attempt(grid, cs_group, cs_subjects, cs_venues):
    result = SlotAssignmentEngine(grid, GenerationRun()).assign(cs_group, cs_subjects, cs_venues, start=3)

    assert placements(result) == [
        ("sub-CS101", "Monday", "15:00-17:00", "v-101"),
        ("sub-CS201", "Tuesday", "08:00-10:00", "v-101"),
        ("sub-MATH204", "Tuesday", "10:00-12:00", "v-101"),
    ]


def test_lecturer_lookup_goes_through_the_given_resolver(grid, cs_group, cs_subjects, cs_venues):
    busy = SlotAssignment(
        day="Monday",
        window=WINDOWS[0],
        subject_id="sub-OTHER",
        venue_id="v-201",
        lecturer_id="l-substitute",
        group_id="g-ce",
    )
    engine = SlotAssignmentEngine(grid, GenerationRun([busy]), lambda item: "l-substitute")
    result = engine.assign(cs_group, cs_subjects[:1], cs_venues)

    assert placements(result) == [("sub-CS101", "Monday", "10:00-12:00", "v-101")]
    assert result.assignments[0].lecturer_id == "l-substitute"
