"""
End-to-end processing of one shared URL: extract, classify, store, publish.
"""

from __future__ import annotations

from dataclasses import dataclass

from curator.core.logging import get_logger
from curator.errors import (
    DuplicateRecommendationError,
    ExtractionError,
    PublicationError,
    RecommendationAlreadyPublishedError,
    SynthesisError,
)
from curator.extractors.coordinator import ExtractionCoordinator
from curator.models.content import ContentEnvelope
from curator.models.contracts import LogStatus, ProcessingStatus, ProcessingStep
from curator.models.schema import Recommendation
from curator.repositories.recommendation_repository import RecommendationRepository
from curator.services.forum_publisher import ForumPublisher
from curator.services.metadata_synthesizer import MetadataSynthesizer
from curator.utils.error_logger import log_processing_error
from curator.utils.url_utils import extract_first_url, normalize_url

logger = get_logger(__name__)


@dataclass
class Submission:
    """A URL shared by someone, from chat, backfill or bulk import."""

    source_message_id: str
    channel_id: str
    raw_text: str
    submitter_id: str
    submitter_name: str
    url: str | None = None
    message_link: str | None = None


@dataclass
class ProcessingOutcome:
    status: ProcessingStatus
    recommendation_id: int | None = None
    url: str | None = None
    thread_id: str | None = None
    forum_channel_id: str | None = None
    library_type: str | None = None
    error: str | None = None


class SubmissionProcessor:
    def __init__(
        self,
        repository: RecommendationRepository,
        coordinator: ExtractionCoordinator,
        synthesizer: MetadataSynthesizer,
        publisher: ForumPublisher,
    ):
        self.repository = repository
        self.coordinator = coordinator
        self.synthesizer = synthesizer
        self.publisher = publisher

    def process(self, submission: Submission) -> ProcessingOutcome:
        raw_url = submission.url or extract_first_url(submission.raw_text)
        if not raw_url:
            logger.debug(f"No URL in message {submission.source_message_id}")
            return ProcessingOutcome(ProcessingStatus.SKIPPED, error="No URL found")
        url = normalize_url(raw_url)

        recommendation = self._claim(submission, url)
        if isinstance(recommendation, ProcessingOutcome):
            return recommendation

        logger.info(
            f"Processing recommendation {recommendation.id}: {url}",
            extra={
                "component": "submission_processor",
                "operation": "process",
                "item_id": recommendation.id,
                "context_data": {
                    "source_message_id": submission.source_message_id,
                    "submitter": submission.submitter_name,
                    "attempt": recommendation.processing_attempts + 1,
                },
            },
        )

        envelope = self._extract(recommendation.id, url)

        try:
            if envelope is not None:
                metadata = self.synthesizer.analyze_content(
                    envelope, submission.raw_text, submission.submitter_name
                )
            else:
                metadata = self.synthesizer.analyze_url(url, submission.raw_text, submission.submitter_name)
        except SynthesisError as e:
            return self._fail(recommendation.id, url, ProcessingStep.SYNTHESIZE, e)
        except Exception as e:
            # Any failure after the claim must still be recorded as an attempt
            return self._fail(recommendation.id, url, ProcessingStep.SYNTHESIZE, e)

        self.repository.log_event(
            recommendation.id,
            ProcessingStep.SYNTHESIZE,
            LogStatus.SUCCESS,
            metadata={
                "library_type": metadata.library_type.value,
                "primary_tag": metadata.primary_tag,
                "secondary_tags": metadata.secondary_tags,
                "content_rich": envelope is not None,
            },
        )

        try:
            recommendation = self.repository.update_metadata(recommendation.id, metadata)
        except RecommendationAlreadyPublishedError:
            return ProcessingOutcome(ProcessingStatus.SKIPPED, recommendation.id, url, error="Already published")

        try:
            post = self.publisher.publish(recommendation, submission.message_link)
        except PublicationError as e:
            return self._fail(recommendation.id, url, ProcessingStep.PUBLISH, e)
        except Exception as e:
            return self._fail(recommendation.id, url, ProcessingStep.PUBLISH, e)

        try:
            self.repository.mark_published(recommendation.id, post)
        except RecommendationAlreadyPublishedError:
            logger.warning(f"Recommendation {recommendation.id} was published concurrently")
            return ProcessingOutcome(ProcessingStatus.SKIPPED, recommendation.id, url, error="Already published")

        self.repository.log_event(
            recommendation.id,
            ProcessingStep.PUBLISH,
            LogStatus.SUCCESS,
            metadata={"thread_id": post.thread_id, "forum_channel_id": post.forum_channel_id},
        )
        logger.info(f"Published recommendation {recommendation.id} to thread {post.thread_id}")
        return ProcessingOutcome(
            ProcessingStatus.PUBLISHED,
            recommendation_id=recommendation.id,
            url=url,
            thread_id=post.thread_id,
            forum_channel_id=post.forum_channel_id,
            library_type=metadata.library_type.value,
        )

    def _claim(self, submission: Submission, url: str) -> Recommendation | ProcessingOutcome:
        """Existing retryable row or a freshly created one; otherwise the outcome to return."""
        existing = self.repository.find_by_identity(submission.source_message_id)
        if existing is not None:
            if existing.processed:
                return ProcessingOutcome(
                    ProcessingStatus.SKIPPED,
                    existing.id,
                    existing.url,
                    thread_id=existing.forum_thread_id,
                    library_type=existing.library_type,
                    error="Already published",
                )
            if existing.processing_attempts >= self.repository.max_attempts:
                logger.warning(
                    f"Recommendation {existing.id} needs attention after "
                    f"{existing.processing_attempts} attempts: {existing.processing_error}"
                )
                return ProcessingOutcome(
                    ProcessingStatus.NEEDS_ATTENTION,
                    existing.id,
                    existing.url,
                    error=existing.processing_error,
                )
            return existing

        try:
            return self.repository.create(
                original_message_id=submission.source_message_id,
                original_channel_id=submission.channel_id,
                original_content=submission.raw_text,
                recommender_id=submission.submitter_id,
                recommender_name=submission.submitter_name,
                url=url,
            )
        except DuplicateRecommendationError:
            return ProcessingOutcome(ProcessingStatus.SKIPPED, url=url, error="Duplicate identity")

    def _extract(self, recommendation_id: int, url: str) -> ContentEnvelope | None:
        try:
            envelope = self.coordinator.extract(url)
        except ExtractionError as e:
            logger.info(f"Extraction failed for {url}, using URL-only analysis: {e.cause}")
            self.repository.log_event(
                recommendation_id,
                ProcessingStep.EXTRACT,
                LogStatus.FALLBACK,
                message=str(e),
            )
            return None

        self.repository.log_event(
            recommendation_id,
            ProcessingStep.EXTRACT,
            LogStatus.SUCCESS,
            metadata={
                "category": envelope.category.value,
                "transcribed": envelope.transcribed,
                "content_length": len(envelope.content),
            },
        )
        return envelope

    def _fail(
        self, recommendation_id: int, url: str, step: ProcessingStep, error: Exception
    ) -> ProcessingOutcome:
        log_processing_error("submission_processor", recommendation_id, error, operation=step.value)
        self.repository.record_error(recommendation_id, f"{step.value}: {error}")
        self.repository.log_event(recommendation_id, step, LogStatus.FAILURE, message=str(error))
        return ProcessingOutcome(ProcessingStatus.FAILED, recommendation_id, url, error=str(error))
