"""
Helper functions for gesture catalog and per-user progress.
Core rules:
  - porcentaje is clamped to 0..100
  - unknown estado values are stored as "pendiente"
  - an existing record only moves forward: higher percentage, or same
    percentage moving to "aprendido"
  - resets (teacher/admin) are the only way back to 0
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ensenando.core.config import GESTURE_STATES, GESTURE_PENDING, GESTURE_LEARNED
from ensenando.gestures.models import Gesture, UserGesture

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: [PROGRESS] %(message)s'))
    logger.addHandler(handler)
    logger.propagate = False


def normalize_state(estado) -> str:
    if isinstance(estado, str) and estado in GESTURE_STATES:
        return estado
    return GESTURE_PENDING


def clamp_percentage(porcentaje) -> int:
    return max(0, min(100, int(porcentaje)))


def should_update(existing_pct: int, existing_state: str, new_pct: int, new_state: str) -> bool:
    """True when the new reading is an improvement over the stored one."""
    if new_pct > existing_pct:
        return True
    if new_pct == existing_pct and existing_state != GESTURE_LEARNED and new_state == GESTURE_LEARNED:
        return True
    return False


# ---------------------------------------------------------------------------
# READ (item catalog source / item progress source)
# ---------------------------------------------------------------------------

def get_all_items(db: Session) -> list[Gesture]:
    return db.query(Gesture).order_by(Gesture.id.asc()).all()


def get_progress(db: Session, user_id: int) -> list[UserGesture]:
    return (
        db.query(UserGesture)
        .filter(UserGesture.user_id == user_id)
        .order_by(UserGesture.gesture_id.asc())
        .all()
    )


def get_progress_with_names(db: Session, user_id: int) -> list[dict]:
    """Progress rows joined with gesture names, for reports and teacher views."""
    rows = (
        db.query(UserGesture, Gesture)
        .join(Gesture, Gesture.id == UserGesture.gesture_id)
        .filter(UserGesture.user_id == user_id)
        .order_by(Gesture.id.asc())
        .all()
    )
    return [
        {
            "id_gesto": g.id,
            "nombre": g.nombre,
            "porcentaje": ug.porcentaje,
            "estado": ug.estado,
            "last_updated": ug.last_updated.isoformat(sep=" ", timespec="seconds") if ug.last_updated else None,
        }
        for ug, g in rows
    ]


# ---------------------------------------------------------------------------
# WRITE
# ---------------------------------------------------------------------------

def record_progress(
    db: Session,
    user_id: int,
    gesture_id: int,
    porcentaje: int,
    estado: str | None = None,
    now: datetime | None = None,
) -> tuple[UserGesture, bool]:
    """
    Upsert progress for (user, gesture).
    Returns (record, updated) where updated is False when the stored
    record was already at least as good.
    """
    now = now or datetime.now()
    pct = clamp_percentage(porcentaje)
    state = normalize_state(estado)

    record = db.query(UserGesture).filter(
        UserGesture.user_id == user_id,
        UserGesture.gesture_id == gesture_id,
    ).first()

    if record is None:
        record = UserGesture(
            user_id=user_id,
            gesture_id=gesture_id,
            porcentaje=pct,
            estado=state,
            last_updated=now,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(f"user={user_id} gesture={gesture_id} created {pct}% ({state})")
        return record, True

    if not should_update(record.porcentaje, record.estado, pct, state):
        return record, False

    old = record.porcentaje
    record.porcentaje = pct
    record.estado = state
    record.last_updated = now
    db.commit()
    db.refresh(record)
    logger.info(f"user={user_id} gesture={gesture_id} {old}% -> {pct}% ({state})")
    return record, True


def reset_progress(db: Session, user_id: int, gesture_id: int | None = None, now: datetime | None = None) -> int:
    """Set one or all gestures back to 0 / pendiente. Returns rows touched."""
    now = now or datetime.now()
    query = db.query(UserGesture).filter(UserGesture.user_id == user_id)
    if gesture_id is not None:
        query = query.filter(UserGesture.gesture_id == gesture_id)

    rows = query.all()
    for row in rows:
        row.porcentaje = 0
        row.estado = GESTURE_PENDING
        row.last_updated = now
    db.commit()
    logger.info(f"user={user_id} reset gestures={'all' if gesture_id is None else gesture_id} rows={len(rows)}")
    return len(rows)
