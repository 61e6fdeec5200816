"""
Shared fixtures: an in-memory database with two teams and a few players.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus
from app.models.team import Team
from app.models.user import User, UserRole


@pytest.fixture
def db_engine():
    """In-memory SQLite shared across threads (TestClient runs handlers in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_db(db_engine):
    session = Session(db_engine)
    yield session
    session.close()


@pytest.fixture
def teams(test_db):
    teams = [
        Team(name="Royal Strikers", owner="Arjun", mentor="Suresh", purse=1000),
        Team(name="Thunder Kings", owner="Priya", mentor="Rahul", purse=250),
    ]
    test_db.add_all(teams)
    test_db.commit()
    return teams


@pytest.fixture
def players(test_db):
    players = [
        Player(name="Vikram Iyer", type=PlayerType.BATSMAN, category=PlayerCategory.L3,
               base_value=200, status=PlayerStatus.AVAILABLE),
        Player(name="Karan Shah", type=PlayerType.BOWLER, category=PlayerCategory.L2,
               base_value=300, status=PlayerStatus.AVAILABLE),
        Player(name="Rohan Pai", type=PlayerType.ALL_ROUNDER, category=PlayerCategory.L4,
               base_value=100, status=PlayerStatus.AVAILABLE),
    ]
    test_db.add_all(players)
    test_db.commit()
    return players


@pytest.fixture
def users(test_db):
    users = {
        role: User(email=f"{role.value}@kpl.test", name=role.value.title(), role=role)
        for role in UserRole
    }
    test_db.add_all(users.values())
    test_db.commit()
    return users
