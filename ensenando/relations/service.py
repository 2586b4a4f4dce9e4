"""
Teacher/student relationship helpers.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ensenando.auth.models import User
from ensenando.core.config import ROLE_STUDENT, ROLE_TEACHER, RELATION_PENDING, RELATION_ACCEPTED
from ensenando.relations.models import TeacherStudent

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: [RELATION] %(message)s'))
    logger.addHandler(handler)
    logger.propagate = False


class RelationError(Exception):
    """Raised for invalid relationship operations; carries an HTTP status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def get_relationships(db: Session, user_id: int, as_role: str) -> list[dict]:
    """
    Relationship records where user_id plays as_role.
    Returns [{"other_user_id", "estado"}].
    """
    if as_role == ROLE_STUDENT:
        rows = db.query(TeacherStudent).filter(TeacherStudent.student_id == user_id).all()
        return [{"other_user_id": r.teacher_id, "estado": r.estado} for r in rows]
    if as_role == ROLE_TEACHER:
        rows = db.query(TeacherStudent).filter(TeacherStudent.teacher_id == user_id).all()
        return [{"other_user_id": r.student_id, "estado": r.estado} for r in rows]
    raise ValueError(f"unknown relationship role: {as_role!r}")


def get_relation(db: Session, teacher_id: int, student_id: int) -> TeacherStudent | None:
    return db.query(TeacherStudent).filter(
        TeacherStudent.teacher_id == teacher_id,
        TeacherStudent.student_id == student_id,
    ).first()


def has_accepted_relation(db: Session, teacher_id: int, student_id: int) -> bool:
    rel = get_relation(db, teacher_id, student_id)
    return rel is not None and rel.estado == RELATION_ACCEPTED


def list_user_relations(db: Session, user_id: int) -> list[TeacherStudent]:
    return (
        db.query(TeacherStudent)
        .filter(or_(TeacherStudent.teacher_id == user_id, TeacherStudent.student_id == user_id))
        .order_by(TeacherStudent.id.asc())
        .all()
    )


def create_request(db: Session, teacher_id: int, student_id: int) -> TeacherStudent:
    teacher = db.query(User).filter(User.id == teacher_id).first()
    if not teacher or teacher.rol != ROLE_TEACHER:
        raise RelationError(404, "Docente no encontrado")
    if teacher_id == student_id:
        raise RelationError(400, "No puede enviarse una solicitud a sí mismo")
    if get_relation(db, teacher_id, student_id):
        raise RelationError(400, "La solicitud ya existe")

    rel = TeacherStudent(teacher_id=teacher_id, student_id=student_id, estado=RELATION_PENDING)
    db.add(rel)
    db.commit()
    db.refresh(rel)
    logger.info(f"request student={student_id} -> teacher={teacher_id}")
    return rel


def set_status(db: Session, teacher_id: int, student_id: int, estado: str) -> TeacherStudent:
    rel = get_relation(db, teacher_id, student_id)
    if not rel:
        raise RelationError(404, "Relación no encontrada")
    rel.estado = estado
    db.commit()
    db.refresh(rel)
    logger.info(f"teacher={teacher_id} student={student_id} -> {estado}")
    return rel


def delete_relation(db: Session, teacher_id: int, student_id: int) -> None:
    rel = get_relation(db, teacher_id, student_id)
    if not rel:
        raise RelationError(404, "Relación no encontrada")
    db.delete(rel)
    db.commit()
    logger.info(f"deleted teacher={teacher_id} student={student_id}")


def search_users(users: list[User], query: str) -> list[User]:
    """Case-insensitive substring match over nombre, correo and id."""
    q = (query or "").lower().strip()
    if not q:
        return list(users)
    return [
        u for u in users
        if q in (u.nombre or "").lower()
        or q in (u.correo or "").lower()
        or q in str(u.id)
    ]
