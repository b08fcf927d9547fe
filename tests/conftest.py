"""
Pytest fixtures for CDM store tests.

Uses an in-memory SQLite DB for speed and isolation.
StaticPool keeps a single connection so the :memory: database (and tables) persist.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cdm_api.database import Base, get_db
from cdm_api.main import app
from cdm_shared.schemas import CausalDecisionModel, CausalDependency, Diagram, DiagramElement, Meta

TEST_DB = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory DB and tables per test."""
    test_engine = create_engine(
        TEST_DB,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # single connection so :memory: DB and tables persist
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Plain session on the test DB, for service-level tests."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine):
    """FastAPI TestClient with test DB."""
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def lever_outcome_model():
    """M1: one diagram D1 with Lever A, Outcome B and dependency A --> B."""
    return CausalDecisionModel(
        schema_tag="test",
        meta=Meta(uuid="m1", name="M1", version="1"),
        diagrams=[
            Diagram(
                meta=Meta(uuid="d1", name="D1"),
                elements=[
                    DiagramElement(meta=Meta(uuid="a", name="A"), causal_type="Lever", position={"x": 0, "y": 0}),
                    DiagramElement(meta=Meta(uuid="b", name="B"), causal_type="Outcome", position={"x": 500, "y": 0}),
                ],
                dependencies=[CausalDependency(meta=Meta(uuid="a-b", name="A --> B"), source="a", target="b")],
            )
        ],
    )
