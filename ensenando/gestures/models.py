"""
Gesture catalog + per-user gesture progress.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from ensenando.db.base import Base


class Gesture(Base):
    __tablename__ = "gestures"

    id = Column(Integer, primary_key=True, index=True)

    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text, nullable=False, default="")
    categoria = Column(String(255), nullable=True, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class UserGesture(Base):
    """
    Progress of one user on one gesture.
    porcentaje is 0..100, estado is "pendiente" or "aprendido".
    """
    __tablename__ = "user_gestures"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    gesture_id = Column(Integer, ForeignKey("gestures.id", ondelete="CASCADE"), nullable=False, index=True)

    porcentaje = Column(Integer, nullable=False, default=0)
    estado = Column(String(32), nullable=False, default="pendiente")

    # Naive local time; metrics windows are computed against it
    last_updated = Column(DateTime, nullable=False)

    # One progress record per user per gesture
    __table_args__ = (
        UniqueConstraint("user_id", "gesture_id", name="uq_user_gesture"),
    )
