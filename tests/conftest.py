"""Shared pytest fixtures and utilities for all tests."""

import os

# Keep the application's import-time table creation away from the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_API_KEY", "test-key")

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from consultant_hub.db.session import Base, get_db
from consultant_hub.llm.gateway_client import CompletionGateway, get_completion_gateway
from consultant_hub.main import create_app
from consultant_hub.records import models  # noqa: F401
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import (
    ClientCreate,
    ProjectCreate,
    TeamMemberCreate
)


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Database session bound to the in-memory engine."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return RecordRepository(db_session)


@pytest.fixture
def project(repo):
    """Project with a client and two team members."""
    client = repo.create_client(ClientCreate(
        company="Nordwind Logistics",
        contact_person="Jonas Weber",
        email="jonas.weber@nordwind.example"
    ))
    project = repo.create_project(ProjectCreate(name="Supply Chain Redesign", client_id=client.id))
    repo.create_team_member(project.id, TeamMemberCreate(name="Max", role="Consultant", email="max@consulting.eu"))
    repo.create_team_member(project.id, TeamMemberCreate(name="Anna", role="Partner", email="anna@consulting.eu"))
    return project


@pytest.fixture
def other_project(repo):
    """Second project with its own team member."""
    project = repo.create_project(ProjectCreate(name="Pricing Study"))
    repo.create_team_member(project.id, TeamMemberCreate(name="Lea", role="Analyst", email="lea@consulting.eu"))
    return project


@pytest.fixture
def mock_gateway():
    """Mock completion gateway."""
    gateway = MagicMock(spec=CompletionGateway)
    gateway.complete = AsyncMock(return_value="Mock completion")
    return gateway


@pytest.fixture
def app(engine, mock_gateway):
    """Application wired to the in-memory database and the mock gateway."""
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_gateway] = lambda: mock_gateway
    return app


@pytest.fixture
def api_client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(api_client):
    """Bearer headers for a freshly logged-in user."""
    response = api_client.post(
        "/api/session",
        json={"email": "anna.schmidt@consulting.eu", "password": "secret123"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
