"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database and a scripted completion service for isolation.
"""
import pytest
import sqlite3
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database


class FakeCompletionService:
    """
    Completion service that answers from a script instead of calling a model.
    Each reply is keyed by the prompt kind; an Exception instance is raised instead of returned.
    Every call is recorded as (kind, system, user_text, json_mode).
    """

    name = "fake"

    def __init__(self, **replies):
        self.replies = replies
        self.calls = []

    @staticmethod
    def _kind(system: str) -> str:
        if system.startswith("You are a task classification AI"):
            return "classification"
        if system.startswith("Extract task information"):
            return "extraction"
        if system.startswith("Generate helpful, actionable advice"):
            return "advice"
        return "conversation"

    async def complete(self, system: str, user_text: str, json_mode: bool = False) -> str:
        kind = self._kind(system)
        self.calls.append((kind, system, user_text, json_mode))
        reply = self.replies[kind]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def kinds(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_completion():
    return FakeCompletionService


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL CHECK (length(title) BETWEEN 1 AND 200),
            date TEXT NOT NULL,
            advice TEXT NOT NULL DEFAULT '',
            notes TEXT NOT NULL DEFAULT '',
            completed INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app.
    Skips alembic migrations and provider setup; tests install their own agent.
    """
    from fastapi.testclient import TestClient
    import main

    # Skip alembic in tests - tables already created by test_db fixture
    monkeypatch.setattr(main, "init_db", lambda: None)
    monkeypatch.setattr(main, "build_completion_service", lambda: FakeCompletionService())

    with TestClient(main.app) as client:
        yield client
