"""
API routes for teacher/student relationships and user search.
"""
from fastapi import APIRouter, Depends, HTTPException, Form, Query
from sqlalchemy.orm import Session

from ensenando.auth.models import User
from ensenando.core.config import (
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    RELATION_ACCEPTED,
    RELATION_REJECTED,
)
from ensenando.core.deps import get_current_user, require_roles
from ensenando.db.session import get_db
from ensenando.relations.models import TeacherStudent
from ensenando.relations.service import (
    RelationError,
    create_request,
    delete_relation,
    list_user_relations,
    search_users,
    set_status,
)

router = APIRouter(prefix="/api", tags=["relations"])


def _user_row(u: User) -> dict:
    return {"id_usuario": u.id, "nombre": u.nombre, "correo": u.correo, "rol": u.rol}


@router.get("/teachers")
def list_teachers(
    q: str = Query(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    teachers = db.query(User).filter(User.rol == ROLE_TEACHER).order_by(User.id.asc()).all()
    return {"success": True, "data": [_user_row(u) for u in search_users(teachers, q)]}


@router.get("/students")
def list_students(
    q: str = Query(""),
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_TEACHER, ROLE_ADMIN)),
):
    students = db.query(User).filter(User.rol == ROLE_STUDENT).order_by(User.id.asc()).all()
    return {"success": True, "data": [_user_row(u) for u in search_users(students, q)]}


@router.get("/relations")
def get_relations(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.rol == ROLE_ADMIN:
        rows = db.query(TeacherStudent).order_by(TeacherStudent.id.asc()).all()
    else:
        rows = list_user_relations(db, user.id)
    return {"success": True, "data": [r.to_dict() for r in rows]}


@router.post("/relations")
def request_teacher(
    id_docente: int = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_STUDENT)),
):
    """Student sends a mentorship request to a teacher."""
    try:
        rel = create_request(db, id_docente, user.id)
    except RelationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "message": "Solicitud enviada", "data": rel.to_dict()}


@router.post("/relations/{teacher_id}/{student_id}/respond")
def respond_request(
    teacher_id: int,
    student_id: int,
    estado: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(ROLE_TEACHER, ROLE_ADMIN)),
):
    """Teacher accepts or rejects a pending request."""
    if estado not in (RELATION_ACCEPTED, RELATION_REJECTED):
        raise HTTPException(status_code=400, detail="Estado inválido")
    if user.rol == ROLE_TEACHER and user.id != teacher_id:
        raise HTTPException(status_code=403, detail="Solo el docente puede responder la solicitud")
    try:
        rel = set_status(db, teacher_id, student_id, estado)
    except RelationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "message": "Solicitud actualizada", "data": rel.to_dict()}


@router.delete("/relations/{teacher_id}/{student_id}")
def remove_relation(
    teacher_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.rol != ROLE_ADMIN and user.id not in (teacher_id, student_id):
        raise HTTPException(status_code=403, detail="No tiene permisos para eliminar esta relación")
    try:
        delete_relation(db, teacher_id, student_id)
    except RelationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "message": "Relación eliminada"}
