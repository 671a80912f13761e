import json

import pytest

from curator.models.content import ContentEnvelope
from curator.models.contracts import ContentCategory
from curator.models.forum import PublishedPost
from curator.pipeline.submission_processor import Submission, SubmissionProcessor
from curator.services.metadata_synthesizer import MetadataSynthesizer

GOOD_COMPLETION = json.dumps(
    {
        "title": "Atomic Habits",
        "description": "Tiny changes, remarkable results.",
        "contentType": "book",
        "topics": ["productivity", "self-improvement"],
        "qualityScore": 8,
        "sentiment": "positive",
        "summary": "How small habits compound.",
        "libraryType": "growth",
        "primaryTag": "Productivity",
        "secondaryTags": ["Book", "Beginner"],
        "keyTakeaways": ["Make it obvious"],
        "mainIdeas": ["Identity-based habits"],
        "tldr": "Systems beat goals.",
    }
)


class StubCoordinator:
    def __init__(self, envelope=None, error=None):
        self.envelope = envelope
        self.error = error
        self.calls = []

    def extract(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.envelope


@pytest.fixture
def good_completion() -> str:
    return GOOD_COMPLETION


@pytest.fixture
def article_envelope() -> ContentEnvelope:
    return ContentEnvelope(
        category=ContentCategory.ARTICLE,
        url="https://example.com/atomic-habits",
        title="Atomic Habits review",
        content="A review of Atomic Habits by James Clear.",
    )


@pytest.fixture
def publisher(mocker):
    publisher = mocker.Mock()
    publisher.publish.return_value = PublishedPost(
        post_id="556", thread_id="555", forum_channel_id="203"
    )
    return publisher


@pytest.fixture
def make_processor(repository, publisher):
    def factory(llm, coordinator) -> SubmissionProcessor:
        synthesizer = MetadataSynthesizer(llm, 50_000)
        return SubmissionProcessor(repository, coordinator, synthesizer, publisher)

    return factory


@pytest.fixture
def submission() -> Submission:
    return Submission(
        source_message_id="1001",
        channel_id="100",
        raw_text="You have to read this https://example.com/atomic-habits?utm_source=tw",
        submitter_id="42",
        submitter_name="alice",
        message_link="https://discord.com/channels/900/100/1001",
    )


@pytest.fixture
def stub_coordinator() -> type[StubCoordinator]:
    return StubCoordinator
