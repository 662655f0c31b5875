"""Engine and session factories for the raffle database."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..config import ROOT_DIR, load_db_url
from .metadata import metadata_obj
from .utils import resolve_sqlite_url


def make_engine(database_url: Optional[str] = None, echo: bool = False):
    """Create an engine for ``database_url``, or for ``DB_URL`` when omitted.

    Relative SQLite paths are resolved against the project root.
    """
    url = resolve_sqlite_url(database_url, ROOT_DIR) if database_url else load_db_url()
    return create_engine(url, echo=echo, future=True)


def get_sessionmaker(engine):
    # Loaded rows stay readable after the CLI commits and closes its session.
    return sessionmaker(bind=engine, expire_on_commit=False, future=True)


def init_db(engine) -> None:
    """Create every raffle table that does not exist yet."""
    # Importing the models registers their tables on ``metadata_obj``.
    from .. import models  # noqa: F401

    metadata_obj.create_all(engine)
