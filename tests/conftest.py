import os
import tempfile
import uuid

# Point the app at a throwaway SQLite file before ensenando.db.base is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="ensenando-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REMOTE_API_URL"] = ""

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ensenando.db.base import Base  # noqa: E402
from ensenando.auth.models import User  # noqa: E402
from ensenando.gestures.models import Gesture, UserGesture  # noqa: E402,F401
from ensenando.relations.models import TeacherStudent  # noqa: E402,F401
from ensenando.achievements.models import Achievement, UserAchievement, UsageStateRecord  # noqa: E402,F401


@pytest.fixture
def db_session():
    """Isolated in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def make_db_user(db_session):
    def _make(rol="estudiante", nombre="Ana"):
        user = User(
            nombre=nombre,
            correo=f"{uuid.uuid4().hex[:10]}@example.com",
            password_hash="x:y",
            rol=rol,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from ensenando.main import app

    return TestClient(app)


@pytest.fixture
def signup(client):
    """Register a fresh account; returns (usuario dict, auth headers)."""
    def _signup(rol="estudiante", nombre="Usuario Prueba", password="secreto123"):
        correo = f"{uuid.uuid4().hex[:12]}@example.com"
        resp = client.post(
            "/auth/signup",
            data={"nombre": nombre, "correo": correo, "password": password, "rol": rol},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["usuario"], {"Authorization": f"Bearer {body['token']}"}
    return _signup


@pytest.fixture
def admin(signup):
    """An administrador account (promoted directly in the database)."""
    from ensenando.db.session import SessionLocal

    usuario, headers = signup(nombre="Admin")
    with SessionLocal() as db:
        db.query(User).filter(User.id == usuario["id_usuario"]).update({"rol": "administrador"})
        db.commit()
    usuario["rol"] = "administrador"
    return usuario, headers
