"""pytest configuration for metable_db tests."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from metable_db.db import create_db_and_tables, get_engine
from sample_models import OtherMetable, SampleMetable


@pytest.fixture
def engine():
    """Create in-memory SQLite engine with all tables."""
    engine = get_engine("sqlite:///:memory:")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create SQLAlchemy session for testing."""
    with Session(engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def post(session):
    """A persisted SampleMetable owner."""
    post = SampleMetable(name="post")
    session.add(post)
    session.flush()
    return post


@pytest.fixture
def make_owner(session):
    """Factory for persisted owners of a given class."""

    def _make(cls=SampleMetable, **kwargs):
        owner = cls(**kwargs)
        session.add(owner)
        session.flush()
        return owner

    return _make


@pytest.fixture
def other(make_owner):
    """A persisted OtherMetable owner."""
    return make_owner(OtherMetable, name="other")
