"""Tests for replaying recommendations missed while the bot was offline."""

from datetime import UTC, datetime, timedelta

import pytest

from curator.errors import DiscordApiError
from curator.models.contracts import ProcessingStatus
from curator.models.forum import ChatMessage, PublishedPost
from curator.pipeline import backfill as backfill_module
from curator.pipeline.backfill import BackfillReconciler
from curator.pipeline.submission_processor import ProcessingOutcome

NOW = datetime.now(UTC)


def _message(
    message_id: str, content: str, *, bot: bool = False, age: timedelta = timedelta()
) -> ChatMessage:
    return ChatMessage(
        id=message_id,
        channel_id="100",
        content=content,
        author_id="42",
        author_name="alice",
        author_is_bot=bot,
        created_at=NOW - age,
    )


@pytest.fixture
def discord_api(mocker):
    return mocker.Mock()


@pytest.fixture
def processor(mocker):
    processor = mocker.Mock()
    processor.process.return_value = ProcessingOutcome(ProcessingStatus.PUBLISHED, 1)
    return processor


@pytest.fixture
def reconciler(discord_api, repository, processor, settings):
    return BackfillReconciler(discord_api, repository, processor, settings, sleep=lambda _: None)


def _processed_ids(processor) -> list[str]:
    return [call.args[0].source_message_id for call in processor.process.call_args_list]


def test_missing_channel_does_nothing(reconciler, discord_api, settings):
    settings.recommendations_channel_id = None

    result = reconciler.run()

    assert result.checked == 0
    discord_api.get_messages.assert_not_called()


def test_processes_unseen_url_messages_oldest_first(reconciler, discord_api, processor, repository):
    repository.create(
        original_message_id="1",
        original_channel_id="100",
        original_content="https://example.com/known",
        recommender_id="42",
        recommender_name="alice",
        url="https://example.com/known",
    )
    # Discord returns newest first
    discord_api.get_messages.return_value = [
        _message("5", "late one https://example.com/five"),
        _message("4", "bot echo https://example.com/four", bot=True),
        _message("3", "no link here"),
        _message("2", "https://example.com/two"),
        _message("1", "https://example.com/known"),
    ]

    result = reconciler.run()

    # "1" is known but unpublished, so it is retried after the new messages
    assert _processed_ids(processor) == ["2", "5", "1"]
    assert result.checked == 5
    assert result.processed == 3
    assert result.skipped == 3
    assert result.retried == 1
    assert result.errors == 0
    assert result.limit_reached is False
    submission = processor.process.call_args_list[0].args[0]
    assert submission.raw_text == "https://example.com/two"
    assert submission.message_link == "https://discord.com/channels/900/100/2"


def test_stops_at_last_published_timestamp(
    mocker, reconciler, discord_api, processor, repository, settings
):
    row = repository.create(
        original_message_id="0",
        original_channel_id="100",
        original_content="https://example.com/zero",
        recommender_id="42",
        recommender_name="alice",
        url="https://example.com/zero",
    )
    repository.mark_published(row.id, PublishedPost("p0", "t0", "203"))
    mocker.patch.object(backfill_module, "MAX_MESSAGES_PER_PAGE", 2)
    settings.backfill_max_messages = 10
    ahead = -timedelta(hours=1)
    discord_api.get_messages.side_effect = [
        [
            _message("14", "https://example.com/14", age=ahead),
            _message("13", "https://example.com/13", age=ahead),
        ],
        [
            _message("12", "https://example.com/12", age=ahead),
            _message("11", "old https://x.io", age=timedelta(days=1)),
        ],
    ]

    result = reconciler.run()

    assert _processed_ids(processor) == ["12", "13", "14"]
    assert result.checked == 3
    befores = [call.kwargs["before"] for call in discord_api.get_messages.call_args_list]
    assert befores == [None, "13"]


def test_message_cap_sets_limit_reached(reconciler, discord_api, processor, settings):
    settings.backfill_max_messages = 2
    discord_api.get_messages.return_value = [
        _message("3", "https://example.com/3"),
        _message("2", "https://example.com/2"),
    ]

    result = reconciler.run()

    assert result.limit_reached is True
    assert discord_api.get_messages.call_args.kwargs["limit"] == 2
    assert _processed_ids(processor) == ["2", "3"]


def test_processing_errors_are_counted(reconciler, discord_api, processor):
    discord_api.get_messages.return_value = [
        _message("3", "https://example.com/3"),
        _message("2", "https://example.com/2"),
        _message("1", "https://example.com/1"),
    ]
    processor.process.side_effect = [
        RuntimeError("boom"),
        ProcessingOutcome(ProcessingStatus.FAILED, 2, error="synthesize: no JSON"),
        ProcessingOutcome(ProcessingStatus.PUBLISHED, 3),
    ]

    result = reconciler.run()

    assert result.errors == 2
    assert result.processed == 1


def test_discord_error_ends_fetch(reconciler, discord_api, processor):
    discord_api.get_messages.side_effect = DiscordApiError(403, "Missing Access")

    result = reconciler.run()

    assert result.checked == 0
    processor.process.assert_not_called()


def _stored(repository, message_id: str, url: str, *, failures: int = 0):
    row = repository.create(
        original_message_id=message_id,
        original_channel_id="100",
        original_content=f"look {url}",
        recommender_id="42",
        recommender_name="alice",
        url=url,
    )
    for _ in range(failures):
        repository.record_error(row.id, "synthesize: timeout")
    return row


def test_failed_rows_with_attempts_left_are_retried(reconciler, discord_api, processor, repository):
    _stored(repository, "bulk-0123456789abcdef", "https://example.com/imported", failures=1)
    _stored(repository, "77", "https://example.com/flaky", failures=2)
    _stored(repository, "78", "https://example.com/hopeless", failures=3)
    discord_api.get_messages.return_value = []

    result = reconciler.run()

    assert _processed_ids(processor) == ["bulk-0123456789abcdef", "77"]
    assert result.retried == 2
    assert result.processed == 2
    imported, flaky = [call.args[0] for call in processor.process.call_args_list]
    assert imported.url == "https://example.com/imported"
    assert imported.message_link is None
    assert flaky.url == "https://example.com/flaky"
    assert flaky.raw_text == "look https://example.com/flaky"
    assert flaky.message_link == "https://discord.com/channels/900/100/77"


def test_retry_failure_counts_as_error(reconciler, discord_api, processor, repository):
    _stored(repository, "77", "https://example.com/flaky", failures=1)
    discord_api.get_messages.return_value = []
    processor.process.return_value = ProcessingOutcome(ProcessingStatus.FAILED, 1, error="publish: 502")

    result = reconciler.run()

    assert result.retried == 0
    assert result.errors == 1


def test_message_processed_this_run_is_not_retried_twice(
    reconciler, discord_api, processor, repository
):
    discord_api.get_messages.return_value = [_message("9", "https://example.com/9")]

    def fail_and_store(submission):
        row = _stored(repository, submission.source_message_id, "https://example.com/9", failures=1)
        return ProcessingOutcome(ProcessingStatus.FAILED, row.id, error="synthesize: timeout")

    processor.process.side_effect = fail_and_store

    result = reconciler.run()

    assert _processed_ids(processor) == ["9"]
    assert result.errors == 1
