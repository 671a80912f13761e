"""Tests for forum post rendering and publication."""

import pytest

from curator.errors import DiscordApiError, PublicationError
from curator.models.contracts import LibraryType
from curator.models.forum import ForumChannel, ForumTag
from curator.models.schema import Recommendation
from curator.services.forum_publisher import (
    DEFAULT_COLOR,
    ForumPublisher,
    build_embed,
    embed_color,
    quality_stars,
)
from curator.services.library_tags import get_library_tag_names


def _recommendation(**overrides) -> Recommendation:
    fields = dict(
        id=1,
        original_message_id="1234",
        original_channel_id="100",
        original_content="check this out",
        recommender_id="42",
        recommender_name="alice",
        url="https://example.com/ddia",
        title="Designing Data-Intensive Applications",
        description="Data systems book",
        content_type="book",
        topics=["programming", "technology"],
        duration="12 min",
        quality_score=9,
        sentiment="positive",
        ai_summary="Storage, replication and streams.",
        tldr="Read it.",
        key_takeaways=["Logs matter"],
        main_ideas=["Reliability"],
        thumbnail="https://example.com/cover.png",
        library_type="growth",
        primary_tag="Tech & Code",
        secondary_tags=["Advanced", "Gold Standard"],
    )
    fields.update(overrides)
    return Recommendation(**fields)


def _growth_forum() -> ForumChannel:
    tags = [ForumTag(str(i), name) for i, name in enumerate(get_library_tag_names(LibraryType.GROWTH))]
    return ForumChannel(id="203", name="growth-lab", is_forum=True, available_tags=tags)


@pytest.mark.parametrize("score, stars", [(10, "⭐⭐⭐"), (9, "⭐⭐⭐"), (7, "⭐⭐"), (5, "⭐"), (3, "")])
def test_quality_stars(score, stars):
    assert quality_stars(score) == stars


def test_embed_color_by_sentiment():
    assert embed_color("positive") == 0x00FF00
    assert embed_color("critical") == 0xFF9900
    assert embed_color("informative") == 0x0099FF
    assert embed_color("neutral") == DEFAULT_COLOR
    assert embed_color(None) == DEFAULT_COLOR


def test_build_embed_layout():
    embed = build_embed(_recommendation(), "https://discord.com/channels/900/100/1234")

    assert embed["title"] == "📚 Designing Data-Intensive Applications"
    assert embed["description"].startswith("**TL;DR:** Read it.")
    assert embed["url"] == "https://example.com/ddia"
    assert embed["image"] == {"url": "https://example.com/cover.png"}
    names = [field["name"] for field in embed["fields"]]
    assert names == [
        "Type",
        "Quality",
        "Duration",
        "Topics",
        "📝 Key Takeaways",
        "💡 Main Ideas",
        "Recommended by",
        "Original Message",
    ]
    values = {field["name"]: field["value"] for field in embed["fields"]}
    assert values["Quality"] == "⭐⭐⭐ 9/10"
    assert values["Recommended by"] == "<@42>"
    assert values["📝 Key Takeaways"] == "• Logs matter"


def test_build_embed_for_imported_recommendation():
    embed = build_embed(
        _recommendation(recommender_id="bulk-import", recommender_name="Bulk Import", tldr=None), None
    )

    values = {field["name"]: field["value"] for field in embed["fields"]}
    assert values["Recommended by"] == "Bulk Import"
    assert "Original Message" not in values
    assert not embed["description"].startswith("**TL;DR:**")


def test_build_embed_truncates_long_title():
    embed = build_embed(_recommendation(title="x" * 400), None)

    assert len(embed["title"]) == 256
    assert embed["title"].endswith("…")


def test_publish_creates_thread_with_resolved_tags(mocker, settings):
    api = mocker.Mock()
    api.get_channel.return_value = _growth_forum()
    api.create_forum_thread.return_value = {"id": "777", "message": {"id": "778"}}
    publisher = ForumPublisher(api, settings)

    post = publisher.publish(_recommendation(), "https://discord.com/channels/900/100/1234")

    assert (post.thread_id, post.post_id, post.forum_channel_id) == ("777", "778", "203")
    kwargs = api.create_forum_thread.call_args.kwargs
    assert api.create_forum_thread.call_args.args == ("203",)
    assert kwargs["name"] == "Designing Data-Intensive Applications"
    tag_names = {tag.id: tag.name for tag in _growth_forum().available_tags}
    assert [tag_names[tag_id] for tag_id in kwargs["applied_tags"]] == ["Tech & Code", "Advanced", "Gold Standard"]
    assert kwargs["auto_archive_duration"] == 10080


def test_publish_caches_forum_channel(mocker, settings):
    api = mocker.Mock()
    api.get_channel.return_value = _growth_forum()
    api.create_forum_thread.return_value = {"id": "777"}
    publisher = ForumPublisher(api, settings)

    publisher.publish(_recommendation())
    post = publisher.publish(_recommendation(id=2))

    api.get_channel.assert_called_once_with("203")
    # thread id doubles as the starter message id
    assert post.post_id == "777"


def test_publish_respects_tag_ceiling(mocker, settings):
    settings.max_tags_per_post = 2
    api = mocker.Mock()
    api.get_channel.return_value = _growth_forum()
    api.create_forum_thread.return_value = {"id": "777"}

    ForumPublisher(api, settings).publish(_recommendation())

    assert len(api.create_forum_thread.call_args.kwargs["applied_tags"]) == 2


def test_publish_requires_classification(mocker, settings):
    with pytest.raises(PublicationError):
        ForumPublisher(mocker.Mock(), settings).publish(_recommendation(library_type=None))


def test_publish_requires_configured_forum(mocker, settings):
    settings.growth_lab_forum_id = None

    with pytest.raises(PublicationError, match="No forum channel"):
        ForumPublisher(mocker.Mock(), settings).publish(_recommendation())


def test_publish_rejects_non_forum_channel(mocker, settings):
    api = mocker.Mock()
    api.get_channel.return_value = ForumChannel(id="203", name="general", is_forum=False)

    with pytest.raises(PublicationError, match="not a forum"):
        ForumPublisher(api, settings).publish(_recommendation())


def test_publish_wraps_discord_errors(mocker, settings):
    api = mocker.Mock()
    api.get_channel.return_value = _growth_forum()
    api.create_forum_thread.side_effect = DiscordApiError(403, "Missing Permissions")

    with pytest.raises(PublicationError, match="Missing Permissions"):
        ForumPublisher(api, settings).publish(_recommendation())


def test_check_forum_tags_reports_missing(mocker, settings):
    growth = _growth_forum()
    growth.available_tags = growth.available_tags[:18]
    forums = {
        "201": DiscordApiError(404, "Unknown Channel"),
        "202": ForumChannel(id="202", name="athenaeum", is_forum=True),
        "203": growth,
    }

    def get_channel(forum_id):
        value = forums[forum_id]
        if isinstance(value, Exception):
            raise value
        return value

    api = mocker.Mock()
    api.get_channel.side_effect = get_channel

    missing = ForumPublisher(api, settings).check_forum_tags()

    assert LibraryType.FICTION not in missing
    assert len(missing[LibraryType.ATHENAEUM]) == 20
    assert missing[LibraryType.GROWTH] == ["Quick Tip", "Gold Standard"]
