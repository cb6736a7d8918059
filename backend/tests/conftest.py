import os

# Keep the app's own engine off disk; tests run against test_engine below
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from league_app.database import get_session  # noqa: E402
from league_app.main import app  # noqa: E402
from league_app.services import league_service  # noqa: E402
from league_app.services.match_recording import ParticipantInput, record_match  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables dropped after every test so ids and rows never leak between tests
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    # Import all models to ensure they're registered BEFORE create_all
    from league_app.models.dispute import Dispute  # noqa: F401
    from league_app.models.fixture import Fixture  # noqa: F401
    from league_app.models.league import League, LeagueMember  # noqa: F401
    from league_app.models.match import Match, MatchParticipant  # noqa: F401
    from league_app.models.player import Player  # noqa: F401
    from league_app.models.season import Season  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the entire
    duration, so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="make_league")
def make_league_fixture(session: Session):
    """Factory: league whose members are players P1..Pn in join order (P1 created it)"""

    def _make(player_count: int = 4, name: str = "Thursday Chess Club"):
        players = [league_service.create_player(session, f"P{i}") for i in range(1, player_count + 1)]
        league = league_service.create_league(session, name, "chess", created_by=players[0].id)
        for player in players[1:]:
            league_service.join_league(session, league.id, player.id)
        return league, players

    return _make


@pytest.fixture(name="played_match")
def played_match_fixture(session: Session, make_league):
    """League of three; P1 beat P2 10-5, P3 did not play"""
    league, players = make_league(3)
    p1, p2, p3 = players
    match = record_match(
        session,
        league.id,
        recorded_by=p1.id,
        match_date=datetime(2026, 3, 5, 19, 0),
        participants=[ParticipantInput(p1.id, 10), ParticipantInput(p2.id, 5)],
    )
    return league, match, (p1, p2, p3)
