"""
Shared fixtures: an in-memory database per test, a TestClient wired to it and
small factories for users, skills and swaps.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from skillswap.core.security import create_access_token, get_password_hash
from skillswap.db.session import create_db_engine, get_db, init_db
from skillswap.main import app
from skillswap.models import (
    ExperienceLevel, OfferedSkill, Priority, Skill, Swap, SwapStatus, User, WantedSkill,
)

PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def password():
    """Plain password of every user built by make_user."""
    return PASSWORD


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name=None, email=None, **fields):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            hashed_password=PASSWORD_HASH,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_skill(db_session):
    def _make_skill(name, category=None, description=None):
        skill = Skill(name=name, category=category, description=description)
        db_session.add(skill)
        db_session.commit()
        db_session.refresh(skill)
        return skill

    return _make_skill


@pytest.fixture
def offer(db_session):
    def _offer(user, skill, level=ExperienceLevel.INTERMEDIATE):
        db_session.add(OfferedSkill(user_id=user.id, skill_id=skill.id, experience_level=level))
        db_session.commit()

    return _offer


@pytest.fixture
def want(db_session):
    def _want(user, skill, priority=Priority.MEDIUM):
        db_session.add(WantedSkill(user_id=user.id, skill_id=skill.id, priority=priority))
        db_session.commit()

    return _want


@pytest.fixture
def make_swap(db_session):
    """Insert a swap directly in the given status, bypassing the lifecycle."""
    def _make_swap(requester, provider, offered, requested, status=SwapStatus.PENDING):
        swap = Swap(
            requester_id=requester.id,
            provider_id=provider.id,
            status=status,
            offered_skills=list(offered),
            requested_skills=list(requested),
        )
        db_session.add(swap)
        db_session.commit()
        db_session.refresh(swap)
        return swap

    return _make_swap


def auth_headers(user):
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def headers():
    return auth_headers


@pytest.fixture
def alice_bob(make_user, make_skill, offer):
    """Two users: Alice offers JavaScript, Bob offers Cooking."""
    alice = make_user(name="Alice", email="alice@example.com", location="Paris")
    bob = make_user(name="Bob", email="bob@example.com", location="Berlin")
    javascript = make_skill("JavaScript", category="Programming")
    cooking = make_skill("Cooking", category="Lifestyle")
    offer(alice, javascript)
    offer(bob, cooking)
    return alice, bob, javascript, cooking
