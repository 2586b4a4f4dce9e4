from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from ensenando.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    nombre = Column(String(255), nullable=False)
    correo = Column(String(255), unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    # User role: "estudiante" (default), "docente", "administrador"
    rol = Column(String(32), default="estudiante", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Updated on every authenticated request
    last_active = Column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id_usuario": self.id,
            "nombre": self.nombre,
            "correo": self.correo,
            "rol": self.rol,
            "fecha_registro": str(self.created_at) if self.created_at else None,
        }
