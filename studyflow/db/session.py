## Engine/session factory for the local (guest) database
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studyflow.db.base import Base
from studyflow.settings import settings


def make_session_factory(database_url: str | None = None) -> sessionmaker:
    url = database_url or settings.local_database_url
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite") and ":memory:" in url:
        # one shared connection, otherwise every session sees an empty database
        kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

    engine = create_engine(url, **kwargs)
    # Import models so the tables are registered on Base.metadata
    from studyflow.db.models import milestone, roadmap, stats, task  # noqa: F401

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)
