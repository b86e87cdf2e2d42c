"""
Test fixtures for coaching-api.

Provides an in-memory Supabase client and auth overrides so route and
service tests run fast, deterministic and offline.
"""

import sys
import time
from pathlib import Path
from typing import Any, Dict

import jwt
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import coaching_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from coaching_api.auth import get_current_coach_id, require_session
from coaching_api.config import settings
from coaching_api.database import get_db
from coaching_api.main import app

from fakes import FakeSupabase


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


TEST_COACH_ID = "coach-123"
OTHER_COACH_ID = "coach-999"
TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"


async def mock_get_current_coach_id() -> str:
    """Mock auth dependency that returns the test coach."""
    return TEST_COACH_ID


async def mock_require_session() -> None:
    return None


def make_access_token(sub: str = TEST_COACH_ID, expires_in: int = 3600, **claims: Any) -> str:
    """Sign a Supabase-style access token with the test secret."""
    now = int(time.time())
    payload: Dict[str, Any] = {
        "sub": sub,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        **claims,
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Fresh in-memory database per test."""
    return FakeSupabase()


# ---------------------------------------------------------------------------
# Test Clients
# ---------------------------------------------------------------------------


@pytest.fixture
def client(fake_db) -> TestClient:
    """Client authenticated as TEST_COACH_ID, backed by ``fake_db``."""
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_current_coach_id] = mock_get_current_coach_id
    app.dependency_overrides[require_session] = mock_require_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db) -> TestClient:
    """Client with the real auth dependencies; only the database is faked."""
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Pin settings that tests depend on, regardless of the host environment."""
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "SUPABASE_JWT_AUDIENCE", "authenticated")
    monkeypatch.setattr(settings, "SESSION_COOKIE_NAME", "axend_sess")
    monkeypatch.setattr(settings, "SESSION_MAX_AGE_SECONDS", 3600)
    monkeypatch.setattr(settings, "COMPLETION_RPC_ENABLED", True)
    monkeypatch.setattr(settings, "API_NINJAS_KEY", "test-ninjas-key")
    return settings


@pytest.fixture
def sample_exercises():
    """A two-exercise completion payload in mixed snake/camel case."""
    return [
        {
            "workout_exercise_id": "we-1",
            "exercise_name": "Squat",
            "order": 1,
            "sets": 3,
            "reps": "10",
            "completedSets": [{"reps": 10}, {"reps": 9}, {"reps": 8}],
        },
        {
            "workoutExerciseId": "we-2",
            "exerciseName": "Bench Press",
            "plannedSets": 2,
            "plannedReps": "8",
            "plannedWeight": 60,
            "completedSets": [
                {"setNumber": 1, "repsCompleted": 8, "weightUsed": 60},
                {"setNumber": 2, "repsCompleted": 7, "weightUsed": "62.5"},
            ],
        },
    ]
