from datetime import datetime

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ensenando.achievements.definitions import ACHIEVEMENTS
from ensenando.achievements.engine import (
    InvalidIdentifierError,
    catalog_display,
    check_and_unlock,
    format_date,
    get_user_achievements,
    logger,
    require_id,
    unlock_or_refresh,
)
from ensenando.achievements.models import Achievement
from ensenando.achievements.remote import RemoteAchievementClient
from ensenando.achievements.usage import UsageTracker
from ensenando.auth.models import User
from ensenando.core.config import ROLE_ADMIN, ROLE_TEACHER
from ensenando.core.deps import get_current_user, get_remote_client, get_usage_tracker
from ensenando.core.permissions import ensure_can_view, get_user_or_404
from ensenando.db.session import get_db

router = APIRouter(prefix="/api/achievements", tags=["achievements"])


def _parse_date(value) -> datetime:
    if value in (None, ""):
        return datetime.now()
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="fecha_obtenido inválida")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@router.get("/catalog")
def get_catalog():
    return {"success": True, "data": [catalog_display(d).to_wire() for d in ACHIEVEMENTS]}


@router.get("")
def list_achievements(
    id_usuario: int | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    remote: RemoteAchievementClient = Depends(get_remote_client),
):
    """Achievement list for display: remote state merged with local unlocks."""
    target = get_user_or_404(db, id_usuario or user.id)
    ensure_can_view(db, user, target)
    try:
        achievements = get_user_achievements(db, target.id, remote)
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as exc:
        db.rollback()
        logger.error(f"listing failed user={target.id}: {exc!r}")
        return {"success": False, "message": "No se pudieron cargar los logros", "data": []}
    return {"success": True, "data": [a.to_wire() for a in achievements]}


@router.post("/check")
def check_achievements(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    tracker: UsageTracker = Depends(get_usage_tracker),
    remote: RemoteAchievementClient = Depends(get_remote_client),
):
    """Evaluate every rule for the caller; returns only the newly unlocked ones."""
    try:
        newly = check_and_unlock(db, user.id, tracker, remote=remote)
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as exc:
        db.rollback()
        logger.error(f"check failed user={user.id}: {exc!r}")
        return {"success": False, "message": "No se pudieron verificar los logros", "data": []}
    return {"success": True, "data": [a.to_wire() for a in newly]}


@router.post("/unlock")
def unlock_achievement(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Unlock (or refresh the date of) one achievement.
    Accepts id_logro|logro_id and id_usuario|usuario_id; the user defaults to the caller.
    """
    raw_achievement = payload.get("id_logro", payload.get("logro_id"))
    raw_user = payload.get("id_usuario", payload.get("usuario_id", user.id))

    try:
        achievement_id = require_id(raw_achievement, "id_logro")
        user_id = require_id(raw_user, "id_usuario")
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=400, detail=str(e))

    obtained_at = _parse_date(payload.get("fecha_obtenido"))

    if user_id != user.id and user.rol not in (ROLE_TEACHER, ROLE_ADMIN):
        raise HTTPException(status_code=403, detail="No tiene permisos para desbloquear este logro")

    get_user_or_404(db, user_id)
    achievement = db.query(Achievement).filter(Achievement.id == achievement_id).first()
    if not achievement:
        raise HTTPException(status_code=404, detail="Logro no encontrado")

    record, created = unlock_or_refresh(db, user_id, achievement_id, obtained_at)

    return {
        "success": True,
        "message": "Logro desbloqueado exitosamente" if created else "Logro actualizado exitosamente",
        "data": {
            "id_usuario": record.user_id,
            "id_logro": record.achievement_id,
            "fecha_obtenido": format_date(record.obtained_at),
            "logro": {
                "id_logro": achievement.id,
                "titulo": achievement.titulo,
                "descripcion": achievement.descripcion,
            },
        },
    }
