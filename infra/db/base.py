# infra/db/base.py
from __future__ import annotations
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine
from pathlib import Path
import logging
import os

from infra.path import default_db_path

logger = logging.getLogger(__name__)

Base = declarative_base()


def resolve_db_path() -> Path:
    override = (os.getenv("LEDGER_DB_PATH") or "").strip()
    if override:
        return Path(override).expanduser()
    return default_db_path()


# Build DB URL using LEDGER_DB_PATH or the per-user data dir
db_path: Path = resolve_db_path()
db_path.parent.mkdir(parents=True, exist_ok=True)

db_url = f"sqlite:///{db_path.as_posix()}"
logger.info("Using SQLite database at: %s", db_url)

engine = create_engine(
    db_url,
    echo=False,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
