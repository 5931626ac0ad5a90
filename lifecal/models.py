from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import inspect, text
from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


class RenderStatus(str, Enum):
    DRAFT = "DRAFT"
    READY = "READY"
    FAILED = "FAILED"


class CalendarRender(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(index=True)
    birthdate: str
    years: int
    as_of: Optional[str] = None  # YYYY-MM-DD the weeks were counted to
    weeks_lived: Optional[int] = None
    status: RenderStatus = Field(default=RenderStatus.DRAFT)
    fail_code: Optional[str] = None
    fail_detail: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Artifact(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    render_id: int = Field(foreign_key="calendarrender.id", index=True)
    type: str
    path: str  # relative to OUT_DIR
    size_bytes: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


# columns added after the first release: table -> {column: sqlite type}
_ADDED_COLUMNS = {
    "calendarrender": {"as_of": "VARCHAR", "weeks_lived": "INTEGER"},
    "artifact": {"size_bytes": "INTEGER"},
}


def _database_url() -> str:
    return f"sqlite:///{config.DB_PATH}"


engine = create_engine(_database_url())


def reset_engine() -> None:
    """Point the engine at the current ``config.DB_PATH`` (after ``set_out_dir``)."""
    global engine
    engine = create_engine(_database_url())


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)
    _migrate_db()


def _migrate_db() -> None:
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    for table, added in _ADDED_COLUMNS.items():
        if table not in tables:
            continue
        existing = {col["name"] for col in inspector.get_columns(table)}
        missing = [(name, kind) for name, kind in added.items() if name not in existing]
        if not missing:
            continue
        with engine.begin() as conn:
            for name, kind in missing:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {kind}"))


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
