import os

# Keep app startup off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.services import twilio_service  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. Use sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models MUST be imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables dropped after every test so tests never see each other's rows
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
    from app.models.game import Game  # noqa: F401
    from app.models.match import Match  # noqa: F401
    from app.models.player import Player  # noqa: F401
    from app.models.sms_log import SmsLog  # noqa: F401
    from app.models.team import Team  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sms_dry_run(monkeypatch):
    """Never talk to Twilio from tests: no credentials means dry-run mode."""
    for var in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_FROM_NUMBER"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SMS_NOTIFICATIONS_ENABLED", "true")
    monkeypatch.setattr(twilio_service, "_twilio_service", None)


@pytest.fixture
def make_game(session: Session):
    """Factory: persist a game with the given team names and capacity."""
    from app.models.game import Game
    from app.models.team import Team

    def _make_game(team_names=("A", "B", "C"), max_players_per_team=2, title="Sunday League", status="upcoming"):
        game = Game(
            title=title,
            scheduled_at=datetime(2025, 11, 21, 20, 0, tzinfo=timezone.utc),
            venue_name="Koci Soccer Field",
            address="Jl. Margonda Raya, Depok",
            maps_link="https://maps.example.com/koci",
            description="Open for all skill levels",
            price_per_player=100000,
            max_players_per_team=max_players_per_team,
            status=status,
            gallery_links=[],
        )
        game.teams = [Team(name=name) for name in team_names]
        session.add(game)
        session.commit()
        session.refresh(game)
        return game

    return _make_game


@pytest.fixture
def proof():
    from app.services.registration import ProofFile

    return ProofFile(name="payment.jpg", type="image/jpeg", url="https://storage.example.com/payment-proofs/1.jpg")
