"""Quality scoring for finished timetables.

Three independent sub-scores in ``[0, 1]`` (higher is better) and a weighted
average of them:

* gap: idle minutes between consecutive classes on a day, normalised
  against ``max_gap_minutes``;
* distribution: how evenly classes spread over the configured days;
* preference: share of classes that respect their subject's preferred days
  and time ranges.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from academic_scheduler.core.config import Settings
from academic_scheduler.services.snapshots import SlotAssignment, SubjectSnapshot


@dataclass(frozen=True)
class ScoreWeights:
    gap: float = 1.0
    distribution: float = 1.0
    preference: float = 1.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoreWeights":
        return cls(
            gap=settings.gap_score_weight,
            distribution=settings.distribution_score_weight,
            preference=settings.preference_score_weight,
        )


@dataclass(frozen=True)
class TimetableScore:
    gap_score: float
    distribution_score: float
    preference_score: float
    total: float

    def as_details(self) -> dict:
        return {
            "gapScore": self.gap_score,
            "distributionScore": self.distribution_score,
            "preferenceScore": self.preference_score,
        }


class TimetableScorer:
    def __init__(
        self,
        *,
        days: Sequence[str],
        max_gap_minutes: int = 120,
        weights: ScoreWeights | None = None,
    ) -> None:
        if max_gap_minutes <= 0:
            raise ValueError("max_gap_minutes must be positive")
        self.days = tuple(days)
        self.max_gap_minutes = max_gap_minutes
        self.weights = weights or ScoreWeights()

    @classmethod
    def from_settings(cls, settings: Settings, days: Sequence[str]) -> "TimetableScorer":
        return cls(
            days=days,
            max_gap_minutes=settings.max_tolerable_gap_minutes,
            weights=ScoreWeights.from_settings(settings),
        )

    def score(
        self,
        assignments: Iterable[SlotAssignment],
        subjects: Mapping[str, SubjectSnapshot],
    ) -> TimetableScore:
        items = list(assignments)
        gap = self.gap_score(items)
        distribution = self.distribution_score(items)
        preference = self.preference_score(items, subjects)
        return TimetableScore(
            gap_score=gap,
            distribution_score=distribution,
            preference_score=preference,
            total=self._combine(gap, distribution, preference),
        )

    def gap_score(self, assignments: Sequence[SlotAssignment]) -> float:
        by_day: dict[str, list[SlotAssignment]] = defaultdict(list)
        for assignment in assignments:
            by_day[assignment.day].append(assignment)
        if not by_day:
            return 1.0

        day_scores: list[float] = []
        for day_items in by_day.values():
            if len(day_items) < 2:
                day_scores.append(1.0)
                continue
            ordered = sorted(day_items, key=lambda item: (item.window.start, item.window.end))
            idle = 0
            for previous, current in zip(ordered, ordered[1:]):
                idle += max(0, current.window.start - previous.window.end)
            day_scores.append(max(0.0, 1.0 - idle / self.max_gap_minutes))
        return sum(day_scores) / len(day_scores)

    def distribution_score(self, assignments: Sequence[SlotAssignment]) -> float:
        days = list(self.days)
        for assignment in assignments:
            if assignment.day not in days:
                days.append(assignment.day)
        total = len(assignments)
        day_count = len(days)
        if total == 0 or day_count <= 1:
            return 1.0

        counts = {day: 0 for day in days}
        for assignment in assignments:
            counts[assignment.day] += 1
        mean = total / day_count
        variance = sum((count - mean) ** 2 for count in counts.values()) / day_count
        # Worst case: every assignment on a single day.
        max_variance = ((total - mean) ** 2 + (day_count - 1) * mean**2) / day_count
        if max_variance == 0:
            return 1.0
        return max(0.0, 1.0 - variance / max_variance)

    def preference_score(
        self,
        assignments: Sequence[SlotAssignment],
        subjects: Mapping[str, SubjectSnapshot],
    ) -> float:
        considered = 0
        matched = 0
        for assignment in assignments:
            subject = subjects.get(assignment.subject_id)
            if subject is None or not subject.has_preferences:
                continue
            considered += 1
            day_ok = not subject.preferred_days or assignment.day in subject.preferred_days
            time_ok = not subject.preferred_time_ranges or any(
                time_range.contains(assignment.window) for time_range in subject.preferred_time_ranges
            )
            if day_ok and time_ok:
                matched += 1
        if considered == 0:
            return 1.0
        return matched / considered

    def _combine(self, gap: float, distribution: float, preference: float) -> float:
        weight_sum = self.weights.gap + self.weights.distribution + self.weights.preference
        if weight_sum == 0:
            return (gap + distribution + preference) / 3
        return (
            gap * self.weights.gap
            + distribution * self.weights.distribution
            + preference * self.weights.preference
        ) / weight_sum
