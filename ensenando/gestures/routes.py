"""
API routes for the gesture catalog and per-user progress.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ensenando.achievements.engine import check_and_unlock
from ensenando.achievements.remote import RemoteAchievementClient
from ensenando.achievements.usage import UsageTracker
from ensenando.auth.models import User
from ensenando.core.config import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER, RELATION_ACCEPTED
from ensenando.core.deps import get_current_user, get_remote_client, get_usage_tracker, require_roles
from ensenando.core.permissions import ensure_can_view, get_user_or_404
from ensenando.db.session import get_db
from ensenando.gestures.models import Gesture
from ensenando.gestures.progress import (
    get_all_items,
    get_progress_with_names,
    logger,
    record_progress,
    reset_progress,
)
from ensenando.gestures.schemas import GestureCreate, ProgressReset, ProgressUpdate
from ensenando.relations.models import TeacherStudent

router = APIRouter(prefix="/api", tags=["gestures"])


@router.get("/gestures")
def list_gestures(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {
        "success": True,
        "data": [
            {"id_gesto": g.id, "nombre": g.nombre, "descripcion": g.descripcion, "categoria": g.categoria}
            for g in get_all_items(db)
        ],
    }


@router.post("/gestures")
def create_gesture(
    body: GestureCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_ADMIN)),
):
    gesture = Gesture(nombre=body.nombre.strip(), descripcion=body.descripcion, categoria=body.categoria)
    db.add(gesture)
    db.commit()
    db.refresh(gesture)
    logger.info(f"gesture created id={gesture.id} nombre={gesture.nombre!r} by user={user.id}")
    return {"success": True, "data": {"id_gesto": gesture.id, "nombre": gesture.nombre}}


@router.get("/progress")
def get_user_progress(
    id_usuario: int | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Progress of `id_usuario` (defaults to the caller)."""
    target = get_user_or_404(db, id_usuario or user.id)
    ensure_can_view(db, user, target)
    return {"success": True, "data": get_progress_with_names(db, target.id)}


@router.post("/progress")
def update_progress(
    body: ProgressUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    tracker: UsageTracker = Depends(get_usage_tracker),
    remote: RemoteAchievementClient = Depends(get_remote_client),
):
    """Record progress for the caller, then re-check achievements."""
    if not db.query(Gesture).filter(Gesture.id == body.id_gesto).first():
        raise HTTPException(status_code=404, detail="Gesto no encontrado")

    record, updated = record_progress(db, user.id, body.id_gesto, body.porcentaje, body.estado)

    # A progress update is a natural trigger; failures just mean no news this time.
    try:
        new_achievements = check_and_unlock(db, user.id, tracker, remote=remote)
    except Exception as exc:
        db.rollback()
        logger.error(f"achievement check failed user={user.id}: {exc!r}")
        new_achievements = []

    return {
        "success": True,
        "message": "Progreso actualizado" if updated else "Progreso sin cambios",
        "data": {
            "id_gesto": record.gesture_id,
            "porcentaje": record.porcentaje,
            "estado": record.estado,
            "actualizado": updated,
        },
        "nuevos_logros": [a.to_wire() for a in new_achievements],
    }


@router.post("/progress/reset")
def reset_user_progress(
    body: ProgressReset,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_TEACHER, ROLE_ADMIN)),
):
    """Reset one gesture (or all) back to 0%; teachers only for accepted students."""
    target = get_user_or_404(db, body.id_usuario)
    ensure_can_view(db, user, target)
    count = reset_progress(db, target.id, body.id_gesto)
    return {"success": True, "message": "Progreso reiniciado", "data": {"registros": count}}


@router.get("/admin/progress")
def students_progress_summary(
    id_estudiante: int | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_TEACHER, ROLE_ADMIN)),
):
    """
    Per-student summary (admin: every student; docente: accepted students).
    With id_estudiante, returns that student's detailed progress.
    """
    if id_estudiante is not None:
        target = get_user_or_404(db, id_estudiante)
        ensure_can_view(db, user, target)
        return {"success": True, "progreso": get_progress_with_names(db, target.id)}

    query = db.query(User).filter(User.rol == ROLE_STUDENT)
    if user.rol == ROLE_TEACHER:
        query = query.join(TeacherStudent, TeacherStudent.student_id == User.id).filter(
            TeacherStudent.teacher_id == user.id,
            TeacherStudent.estado == RELATION_ACCEPTED,
        )

    summary = []
    for student in query.order_by(User.id.asc()).all():
        rows = get_progress_with_names(db, student.id)
        average = round(sum(r["porcentaje"] for r in rows) / len(rows), 1) if rows else 0.0
        summary.append({
            "id_usuario": student.id,
            "nombre": student.nombre,
            "correo": student.correo,
            "gestos_registrados": len(rows),
            "promedio": average,
        })
    return {"success": True, "progreso": summary}
