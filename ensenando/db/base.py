import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base


def _build_database_url() -> str:
    """DATABASE_URL from the environment, or a local SQLite file for development."""
    url = os.getenv("DATABASE_URL", "sqlite:///./local.db").strip()

    if url.startswith("postgres://"):
        # Hosted Postgres URLs still use the legacy scheme
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    return url


DATABASE_URL = _build_database_url()

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # Route handlers run in FastAPI's threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args, future=True)

Base = declarative_base()

print(
    f"[DB] backend={engine.url.get_backend_name()} url={engine.url.render_as_string(hide_password=True)}",
    flush=True,
)
