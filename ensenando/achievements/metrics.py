"""
Metrics aggregation for achievement evaluation.

compute_metrics() is a pure reduction over already-loaded records;
collect_metrics() loads them from the database and applies the usage
tracker side effect (one usage event per evaluation).
"""
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from ensenando.achievements.usage import StreakInfo, UsageTracker
from ensenando.core.config import (
    COMPLETION_THRESHOLD,
    GESTURE_LEARNED,
    RELATION_ACCEPTED,
    REPORT_RECENT_WINDOW_DAYS,
    ROLE_STUDENT,
    ROLE_TEACHER,
)
from ensenando.gestures.progress import get_all_items, get_progress
from ensenando.relations.service import get_relationships


@dataclass(frozen=True)
class AchievementMetrics:
    total_items: int = 0
    completed: int = 0
    completed_last_30: int = 0
    completion_percentage: int = 0
    consecutive_completed: int = 0
    ten_consecutive_correct: bool = False
    max_percentage: int = 0
    average_last_7: float = 0.0
    average_previous_7: float = 0.0
    streak_days: int = 0
    returned_after_week: bool = False
    relationships_total: int = 0
    relationships_accepted: int = 0
    report_recent: bool = False


def _local_naive(dt: datetime | None) -> datetime | None:
    if dt is not None and dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def is_completed(record) -> bool:
    estado = (getattr(record, "estado", "") or "").lower()
    return (record.porcentaje or 0) >= COMPLETION_THRESHOLD or estado == GESTURE_LEARNED


def _average(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_metrics(
    items: list,
    progress: list,
    relationships: list[dict],
    streak: StreakInfo,
    report_recent: bool,
    now: datetime,
) -> AchievementMetrics:
    day = timedelta(days=1)
    since_7 = now - 7 * day
    since_14 = now - 14 * day
    since_30 = now - 30 * day

    total_items = len(items)
    stamped = [(p, _local_naive(p.last_updated) or datetime.min) for p in progress]

    completed_rows = [(p, ts) for p, ts in stamped if is_completed(p)]
    completed = len(completed_rows)
    completed_last_30 = sum(1 for _, ts in completed_rows if ts >= since_30)
    completion_percentage = completed * 100 // total_items if total_items > 0 else 0

    # Ordered by most recent update; only the count is used.
    # NOTE: "ten consecutive correct" is the all-time completed count >= 10,
    # not a run of consecutive results.
    completed_rows.sort(key=lambda pair: pair[1], reverse=True)
    consecutive_completed = len(completed_rows)

    max_percentage = max((p.porcentaje or 0 for p in progress), default=0)
    average_last_7 = _average([p.porcentaje or 0 for p, ts in stamped if ts >= since_7])
    average_previous_7 = _average([p.porcentaje or 0 for p, ts in stamped if since_14 <= ts < since_7])

    accepted = sum(1 for r in relationships if (r.get("estado") or "").lower() == RELATION_ACCEPTED)

    return AchievementMetrics(
        total_items=total_items,
        completed=completed,
        completed_last_30=completed_last_30,
        completion_percentage=completion_percentage,
        consecutive_completed=consecutive_completed,
        ten_consecutive_correct=consecutive_completed >= 10,
        max_percentage=max_percentage,
        average_last_7=average_last_7,
        average_previous_7=average_previous_7,
        streak_days=streak.streak,
        returned_after_week=streak.returned_after_week,
        relationships_total=len(relationships),
        relationships_accepted=accepted,
        report_recent=report_recent,
    )


def collect_metrics(
    db: Session,
    user_id: int,
    tracker: UsageTracker,
    now: datetime | None = None,
) -> AchievementMetrics:
    """Read catalog, progress, relationships and usage state for user_id."""
    now = now or datetime.now()

    items = get_all_items(db)
    progress = get_progress(db, user_id)
    streak = tracker.record_use(now.date())
    relationships = (
        get_relationships(db, user_id, ROLE_STUDENT)
        + get_relationships(db, user_id, ROLE_TEACHER)
    )
    report_recent = tracker.report_generated_recently(now, REPORT_RECENT_WINDOW_DAYS)

    return compute_metrics(items, progress, relationships, streak, report_recent, now)
