# tests/conftest.py
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models import Base
from app.db.session import configure_sqlite_engine
from app.services.service_factory import ServiceFactory

# In-memory database shared by every connection of one test
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture()
def engine():
    engine = configure_sqlite_engine(
        create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def services(db):
    return ServiceFactory(db)


@pytest.fixture()
def statements(engine):
    """Record every SQL statement executed during a test."""
    executed = []

    @event.listens_for(engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        executed.append(statement)

    yield executed
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture()
def city(services):
    return services.get_city_service().create(
        {"name": "Salvador", "description": "Primeira capital", "state": "BA"},
        language="pt",
    )
