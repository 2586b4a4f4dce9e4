import os

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from ensenando.db.base import Base, engine
from ensenando.db.session import SessionLocal
from ensenando.auth.models import User  # noqa: F401  Import so create_all picks it up
from ensenando.gestures.models import Gesture, UserGesture  # noqa: F401
from ensenando.relations.models import TeacherStudent  # noqa: F401
from ensenando.achievements.models import Achievement, UserAchievement, UsageStateRecord  # noqa: F401
from ensenando.achievements.engine import ensure_default_achievements

from ensenando.auth.routes import router as auth_router
from ensenando.api.routes import router as api_router
from ensenando.gestures.routes import router as gestures_router
from ensenando.relations.routes import router as relations_router
from ensenando.achievements.routes import router as achievements_router
from ensenando.reports.routes import router as reports_router
from ensenando.web.debug_routes import router as debug_router


app = FastAPI(title="Enseñando", version="0.1.0")

# Only expose debug routes (including diagnostics) when explicitly enabled.
if os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1":
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

# Keep the achievements table in sync with the rule table (fixed ids)
try:
    with SessionLocal() as _db:
        _created = ensure_default_achievements(_db)
    print(f"[DB] Achievement catalog ready (created={_created})", flush=True)
except Exception as e:
    print("[DB] Achievement catalog seeding failed:", repr(e), flush=True)

# Include routers
app.include_router(auth_router)
app.include_router(api_router)
app.include_router(gestures_router)
app.include_router(relations_router)
app.include_router(achievements_router)
app.include_router(reports_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")
