from datetime import datetime, timezone

from fastapi import Request, Depends, HTTPException
from sqlalchemy.orm import Session

from ensenando.db.session import get_db
from ensenando.auth.models import User
from ensenando.achievements.remote import RemoteAchievementClient
from ensenando.achievements.usage import SqlUsageStore, UsageTracker, installation_key
from ensenando.core.security import decode_access_token


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization") or ""
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    token = _bearer_token(request)
    if not token:
        print(f"[AUTH] reject reason=missing_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Token no proporcionado")

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Token inválido o expirado")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Token inválido o expirado")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Usuario no encontrado")

    # Update last_active timestamp so admins can see who is online
    try:
        user.last_active = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()

    return user


def require_roles(*roles: str):
    """Dependency factory: the current user must have one of `roles`."""
    def _checker(user: User = Depends(get_current_user)) -> User:
        if user.rol not in roles:
            raise HTTPException(status_code=403, detail="No tiene permisos para esta acción")
        return user
    return _checker


def get_usage_tracker(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> UsageTracker:
    key = installation_key(request.headers.get("x-installation-id"), user.id)
    return UsageTracker(SqlUsageStore(db, key))


def get_remote_client(request: Request) -> RemoteAchievementClient:
    # Forward the caller's token; the upstream service shares the JWT secret.
    return RemoteAchievementClient(token=_bearer_token(request))
