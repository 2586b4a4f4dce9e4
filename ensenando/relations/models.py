from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from ensenando.db.base import Base


class TeacherStudent(Base):
    """
    Mentorship link between a docente and an estudiante.
    Created by the student as "pendiente"; the teacher accepts or rejects.
    """
    __tablename__ = "teacher_students"

    id = Column(Integer, primary_key=True, index=True)

    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # pendiente | aceptado | rechazado
    estado = Column(String(32), nullable=False, default="pendiente")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("teacher_id", "student_id", name="uq_teacher_student"),
    )

    def to_dict(self) -> dict:
        return {
            "id_docente": self.teacher_id,
            "id_estudiante": self.student_id,
            "estado": self.estado,
            "fecha_solicitud": str(self.created_at) if self.created_at else None,
        }
