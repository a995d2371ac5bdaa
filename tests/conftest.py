"""
Shared pytest fixtures: fixed clock, record builders, throwaway SQLite database.
"""

from datetime import datetime, timedelta, timezone

import pytest

import db
from models import FreelanceDetails, Income


@pytest.fixture
def now():
    return datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_income(now):
    def _make(amount=600.0, project_cost=1000.0, days_ago=0, cleared_at=None, client_id=None,
              category_id="1", income_id=1, tracked=True):
        freelance = None
        if tracked:
            freelance = FreelanceDetails(client_name="Acme", project_cost=project_cost, dues_cleared_at=cleared_at)
        return Income(
            id=income_id,
            description="Website build",
            amount=amount,
            date=now - timedelta(days=days_ago),
            category_id=category_id,
            user_id="u1",
            client_id=client_id,
            freelance=freelance,
        )
    return _make


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point db.py at a fresh file for the duration of a test."""
    monkeypatch.setattr(db, "DB_FILE", tmp_path / "test.db")
    db.init_db()
    return tmp_path / "test.db"
