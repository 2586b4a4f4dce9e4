"""
API routes for the current user's profile and progress.
"""
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ensenando.achievements.engine import get_user_achievements, logger, unlock_from_metrics
from ensenando.achievements.metrics import collect_metrics
from ensenando.achievements.remote import RemoteAchievementClient
from ensenando.achievements.usage import UsageTracker
from ensenando.auth.models import User
from ensenando.core.deps import get_current_user, get_remote_client, get_usage_tracker
from ensenando.db.session import get_db

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/me/progress")
def get_me_progress(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    tracker: UsageTracker = Depends(get_usage_tracker),
    remote: RemoteAchievementClient = Depends(get_remote_client),
):
    """
    Return user profile, usage streak, achievement metrics and achievements for UI display.
    Opening the profile counts as app usage and re-checks achievements.
    """
    now = datetime.now()
    metrics = None
    new_achievements = []
    streak = 0
    try:
        collected = collect_metrics(db, user.id, tracker, now)
        metrics = asdict(collected)
        streak = collected.streak_days
        new_achievements = unlock_from_metrics(db, user.id, collected, now, remote)
    except Exception as exc:
        db.rollback()
        logger.error(f"profile metrics failed user={user.id}: {exc!r}")

    try:
        achievements = get_user_achievements(db, user.id, remote)
    except Exception as exc:
        db.rollback()
        logger.error(f"profile achievements failed user={user.id}: {exc!r}")
        achievements = []

    return {
        "usuario": user.to_dict(),
        "racha": streak,
        "metricas": metrics,
        "nuevos_logros": [a.to_wire() for a in new_achievements],
        "logros": [a.to_wire() for a in achievements],
    }
