from ensenando.db.base import _build_database_url


def test_legacy_postgres_scheme_is_normalized(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", " postgres://u:p@db.example.com:5432/ensenando ")
    assert _build_database_url() == "postgresql+psycopg2://u:p@db.example.com:5432/ensenando"


def test_sqlite_default(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert _build_database_url() == "sqlite:///./local.db"
