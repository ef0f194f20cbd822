from academic_scheduler.models.group import Group, GroupType  # noqa: F401
from academic_scheduler.models.lecturer import Lecturer  # noqa: F401
from academic_scheduler.models.subject import Subject, SubjectStatus  # noqa: F401
from academic_scheduler.models.timetable import TimeSlot, Timetable, TimetableStatus  # noqa: F401
from academic_scheduler.models.venue import Venue, VenueType  # noqa: F401
