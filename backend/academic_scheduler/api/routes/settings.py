from fastapi import APIRouter

from academic_scheduler.core.config import get_settings
from academic_scheduler.schemas.settings import ScheduleSettingsOut, ScoreWeightsOut, TimeRangeEntry
from academic_scheduler.services.snapshots import ScheduleGrid

router = APIRouter()


@router.get("/settings/schedule", response_model=ScheduleSettingsOut)
def get_schedule_settings() -> ScheduleSettingsOut:
    settings = get_settings()
    grid = ScheduleGrid.from_settings(settings)
    return ScheduleSettingsOut(
        days=list(grid.days),
        time_windows=[TimeRangeEntry(start_time=item.start_time, end_time=item.end_time) for item in grid.windows],
        supporting_departments=settings.supporting_departments,
        max_tolerable_gap_minutes=settings.max_tolerable_gap_minutes,
        score_weights=ScoreWeightsOut(
            gap=settings.gap_score_weight,
            distribution=settings.distribution_score_weight,
            preference=settings.preference_score_weight,
        ),
    )
