"""Shared fixtures: in-memory database, settings and fake collaborators."""

from collections.abc import Callable

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from curator.core.db import Base
from curator.core.settings import Settings
from curator.models import schema  # noqa: F401
from curator.repositories.recommendation_repository import RecommendationRepository


@pytest.fixture
def test_db():
    """Create a test database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_db):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=test_db)


@pytest.fixture
def db_session(session_factory):
    """Create a test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        logs_dir=tmp_path / "logs",
        discord_bot_token="test-token",
        discord_guild_id="900",
        recommendations_channel_id="100",
        fiction_vault_forum_id="201",
        athenaeum_forum_id="202",
        growth_lab_forum_id="203",
        max_processing_attempts=3,
        backfill_batch_delay_seconds=0,
        bulk_import_delay_seconds=0,
    )


@pytest.fixture
def repository(session_factory) -> RecommendationRepository:
    return RecommendationRepository(session_factory, max_attempts=3)


class FakeLlmClient:
    """Returns canned completions in order and records every prompt."""

    def __init__(self, *completions: str):
        self.completions = list(completions)
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.completions:
            raise AssertionError("FakeLlmClient ran out of completions")
        return self.completions.pop(0)


@pytest.fixture
def fake_llm() -> type[FakeLlmClient]:
    return FakeLlmClient


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    def factory(handler):
        return httpx.MockTransport(handler)

    return factory
