"""Progress scoring for a roadmap snapshot.

Pure functions: nothing is cached and nothing is written. Percentages are
rounded to the nearest integer; an empty roadmap scores 0 everywhere.
"""
from __future__ import annotations

import calendar
import math
from datetime import MAXYEAR, datetime, timezone
from typing import Optional

from career_coach.models.domain import SKILL_MILESTONE_TYPES, ProgressReport, RemainingTime, Roadmap

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30


def add_months(start: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length.

    Results past the last representable year saturate at ``datetime.max``.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    if year > MAXYEAR:
        return datetime.max.replace(tzinfo=start.tzinfo)
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _percent(part: float, whole: float) -> float:
    return 100.0 * part / whole if whole else 0.0


def _round(value: float) -> int:
    # half-up, matching how the UI rounds percentages
    return int(math.floor(value + 0.5))


# PUBLIC_INTERFACE
def score_progress(roadmap: Roadmap, now: Optional[datetime] = None) -> ProgressReport:
    """Compute completion, pacing, and skill metrics for ``roadmap`` at ``now``.

    Args:
        roadmap: Persisted roadmap; ``created_at`` is the timeline origin.
        now: Evaluation time (defaults to the current UTC time).

    Returns:
        ProgressReport with integer percentages in [0, 100].
    """
    current = _aware(now or datetime.now(timezone.utc))
    start = _aware(roadmap.created_at)
    target_end = add_months(start, roadmap.estimated_timeline_months)

    total = len(roadmap.milestones)
    completed = sum(1 for m in roadmap.milestones if m.completed)
    completion = _percent(completed, total)

    planned_seconds = (target_end - start).total_seconds()
    elapsed_seconds = (current - start).total_seconds()
    time_progress = min(100.0, max(0.0, _percent(elapsed_seconds, planned_seconds))) if planned_seconds > 0 else 100.0

    skill_milestones = [m for m in roadmap.milestones if m.type in SKILL_MILESTONE_TYPES]
    skill_done = sum(1 for m in skill_milestones if m.completed)

    remaining_seconds = max(0.0, (target_end - current).total_seconds())
    remaining_days = math.ceil(remaining_seconds / SECONDS_PER_DAY)

    pending = sorted((m for m in roadmap.milestones if not m.completed), key=lambda m: m.order)

    completion_pct = _round(completion)
    time_pct = _round(time_progress)
    return ProgressReport(
        roadmap_id=roadmap.id,
        completion_percentage=completion_pct,
        time_progress=time_pct,
        is_on_track=completion >= time_progress,
        remaining_time=RemainingTime(days=remaining_days, months=math.ceil(remaining_days / DAYS_PER_MONTH)),
        skill_improvement_score=_round(_percent(skill_done, len(skill_milestones))),
        completed_milestones=completed,
        total_milestones=total,
        target_end_date=target_end,
        next_milestone_id=pending[0].id if pending else None,
    )
