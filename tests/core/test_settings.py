import pytest
from pydantic import ValidationError

from curator.core.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///./curator.db"
    assert settings.max_processing_attempts == 3
    assert settings.max_tags_per_post == 5
    assert settings.backfill_max_messages == 100


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("RECOMMENDATIONS_CHANNEL_ID", "123")
    monkeypatch.setenv("BACKFILL_ENABLED", "false")

    settings = Settings(_env_file=None)

    assert settings.recommendations_channel_id == "123"
    assert settings.backfill_enabled is False


def test_forum_ids(settings):
    assert settings.forum_ids() == {"fiction": "201", "athenaeum": "202", "growth": "203"}


@pytest.mark.parametrize("value", [0, 6])
def test_max_tags_per_post_is_bounded(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_tags_per_post=value)


def test_database_url_required():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="")
