from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from pathlib import Path

from ensenando.db.session import get_db
from ensenando.auth.models import User
from ensenando.achievements.models import UserAchievement
from ensenando.db.base import engine

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/users")
def debug_users(db: Session = Depends(get_db)):
    unlocked = dict(
        db.query(UserAchievement.user_id, func.count(UserAchievement.achievement_id))
        .group_by(UserAchievement.user_id)
        .all()
    )
    users = db.query(User).order_by(User.id.asc()).all()
    return [
        {
            "id": u.id,
            "correo": u.correo,
            "nombre": u.nombre,
            "rol": u.rol,
            "logros": unlocked.get(u.id, 0),
            "created_at": str(getattr(u, "created_at", "")),
        }
        for u in users
    ]


@router.get("/diagnostics/db")
def db_diagnostics():
    """
    Lightweight DB diagnostics for debugging deployments.

    Exposed only when ENABLE_DEBUG_ROUTES=1; never includes the password.
    """
    url = engine.url
    backend = url.get_backend_name()
    rendered = url.render_as_string(hide_password=True)

    info = {
        "backend": backend,
        "url": rendered,
    }

    if backend == "sqlite":
        db_path = Path(url.database or "").resolve()
        exists = db_path.exists()
        size = db_path.stat().st_size if exists else 0
        info.update(
            {
                "sqlite_path": str(db_path),
                "sqlite_exists": exists,
                "sqlite_size_bytes": size,
            }
        )
    else:
        info.update(
            {
                "database": url.database,
                "host": url.host,
                "port": url.port,
                "drivername": url.drivername,
            }
        )

    return info
