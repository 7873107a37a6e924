from __future__ import annotations

import pytest

from app.database import Base, build_engine, build_session_factory
from factories import add_skill, relate


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'matches.db'}")
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def catalog(db):
    """Python, Django and PostgreSQL; Python <-> Django related at 0.8."""
    add_skill(db, 1, "Python")
    add_skill(db, 2, "Django")
    add_skill(db, 3, "PostgreSQL", category="database")
    relate(db, 1, 2, 0.8)
    return db
