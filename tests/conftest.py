"""
Pytest configuration and fixtures.

Each test gets a fresh in-memory SQLite database and a TestClient whose
database, reply generator and storage dependencies point at test doubles.
"""
import os
import tempfile

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-agentchat-tests")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="agentchat-storage-"))
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="agentchat-logs-"))
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agentchat.core.chatagent import get_reply_generator
from agentchat.core.database import get_db
from agentchat.core.errors import UpstreamError, UpstreamFailure
from agentchat.core.security import create_access_token, hash_password
from agentchat.core.session import identity_verifier
from agentchat.core.storage import LocalStorage, get_storage
from agentchat.main import app
from agentchat.models.agent import Agent
from agentchat.models.base import Base
from agentchat.models.conversation import Conversation
from agentchat.models.profile import Profile, ProfileRole
from agentchat.models.user import User


class StubReplyGenerator:
    """Stands in for ReplyGenerator; records prompts and can be told to fail."""

    def __init__(self, reply="Hello from the stub agent.", fail=False, failure_kind=UpstreamFailure.UNAVAILABLE):
        self.reply = reply
        self.fail = fail
        self.failure_kind = failure_kind
        self.prompts = []
        self.api_key = "sk-test-1234567890"
        self.model = "stub-model"
        self.base_url = "http://llm.invalid/v1/"

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.fail:
            raise UpstreamError("LLM API error: stubbed outage", kind=self.failure_kind)
        return self.reply


@pytest.fixture(scope="function")
def db_session():
    """Fresh in-memory database shared by every connection of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def reset_identity_cache():
    identity_verifier.forget()
    yield
    identity_verifier.forget()


@pytest.fixture
def generator():
    return StubReplyGenerator()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(root=str(tmp_path / "storage"), public_base_url="http://testserver")


@pytest.fixture
def client(db_session, generator, storage):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_reply_generator] = lambda: generator
    app.dependency_overrides[get_storage] = lambda: storage

    # Not used as a context manager so the startup hook never touches the real database
    yield TestClient(app)

    app.dependency_overrides.clear()


def _create_account(db, email, role, full_name=None):
    user = User(email=email, password_hash=hash_password("password123"))
    db.add(user)
    db.flush()
    profile = Profile(id=user.id, email=email, full_name=full_name, role=role.value)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def user_profile(db_session):
    return _create_account(db_session, "alice@example.com", ProfileRole.USER, full_name="Alice")


@pytest.fixture
def other_profile(db_session):
    return _create_account(db_session, "bob@example.com", ProfileRole.USER, full_name="Bob")


@pytest.fixture
def admin_profile(db_session):
    return _create_account(db_session, "admin@example.com", ProfileRole.ADMIN, full_name="Admin")


def auth_headers(profile):
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.role)}"}


@pytest.fixture
def user_headers(user_profile):
    return auth_headers(user_profile)


@pytest.fixture
def other_headers(other_profile):
    return auth_headers(other_profile)


@pytest.fixture
def admin_headers(admin_profile):
    return auth_headers(admin_profile)


@pytest.fixture
def agent(db_session, admin_profile):
    agent = Agent(
        name="Helper",
        short_description="A helpful agent",
        system_prompt="You are a friendly assistant.",
        is_enabled=True,
        created_by=admin_profile.id,
    )
    db_session.add(agent)
    db_session.commit()
    db_session.refresh(agent)
    return agent


@pytest.fixture
def disabled_agent(db_session, admin_profile):
    agent = Agent(
        name="Retired",
        system_prompt="You are retired.",
        is_enabled=False,
        created_by=admin_profile.id,
    )
    db_session.add(agent)
    db_session.commit()
    db_session.refresh(agent)
    return agent


@pytest.fixture
def conversation(db_session, user_profile, agent):
    conversation = Conversation(user_id=user_profile.id, agent_id=agent.id, title="Chat with Helper")
    db_session.add(conversation)
    db_session.commit()
    db_session.refresh(conversation)
    return conversation
