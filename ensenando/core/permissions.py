"""
Who may see or modify another user's data.

  - administrador: anyone
  - docente: self, or students with an accepted relationship
  - estudiante: self only
"""
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ensenando.auth.models import User
from ensenando.core.config import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from ensenando.relations.service import has_accepted_relation


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")
    return user


def ensure_can_view(db: Session, viewer: User, target: User) -> None:
    """Raise 403 unless viewer may read target's progress and reports."""
    if viewer.rol == ROLE_ADMIN or viewer.id == target.id:
        return
    if viewer.rol == ROLE_TEACHER:
        if target.rol != ROLE_STUDENT:
            raise HTTPException(status_code=403, detail="Solo puede ver reportes de sus estudiantes")
        if not has_accepted_relation(db, viewer.id, target.id):
            raise HTTPException(
                status_code=403,
                detail="El estudiante no tiene una relación aceptada con este docente",
            )
        return
    raise HTTPException(status_code=403, detail="No tiene permisos para ver este reporte")
