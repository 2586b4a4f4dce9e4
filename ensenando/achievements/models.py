from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey

from ensenando.db.base import Base


# ======================================================
# 🏆 ACHIEVEMENT CATALOG (mirrors the rule table, ids are fixed)
# ======================================================
class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, autoincrement=False)
    titulo = Column(String(255), nullable=False)
    descripcion = Column(Text, nullable=False, default="")


# ======================================================
# 🔓 UNLOCK RECORDS (one per user+achievement, never deleted)
# ======================================================
class UserAchievement(Base):
    __tablename__ = "user_achievements"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id"), primary_key=True)

    # Naive local time, shown as "YYYY-MM-DD HH:MM:SS"
    obtained_at = Column(DateTime, nullable=False)


# ======================================================
# 📅 USAGE STATE (per installation: streak + last report)
# ======================================================
class UsageStateRecord(Base):
    __tablename__ = "usage_state"

    installation_id = Column(String(128), primary_key=True)

    last_use = Column(Date, nullable=True)
    streak = Column(Integer, nullable=False, default=0)
    last_report = Column(DateTime, nullable=True)
