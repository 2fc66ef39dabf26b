# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.services.ledger import LedgerPolicy
from infra.db.base import Base
import infra.db.models  # noqa: F401
from infra.services import build_service_graph

TEST_SECRET = "confirm-1234"


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def policy():
    return LedgerPolicy(confirmation_secret=TEST_SECRET)


@pytest.fixture
def services(session, policy):
    return build_service_graph(session, policy=policy).as_dict()


@pytest.fixture
def secret():
    return TEST_SECRET
