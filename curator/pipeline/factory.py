"""
Wire the pipeline components from settings.
"""

from __future__ import annotations

from dataclasses import dataclass

from curator.core.db import get_session_factory
from curator.core.settings import Settings, get_settings
from curator.extractors.coordinator import build_extraction_coordinator
from curator.http_client.robust_http_client import RobustHttpClient
from curator.pipeline.backfill import BackfillReconciler
from curator.pipeline.bulk_import import BulkImporter
from curator.pipeline.submission_processor import SubmissionProcessor
from curator.repositories.recommendation_repository import RecommendationRepository
from curator.services.discord_api import DiscordApiClient
from curator.services.forum_publisher import ForumPublisher
from curator.services.llm_client import get_llm_client
from curator.services.metadata_synthesizer import MetadataSynthesizer


@dataclass
class Pipeline:
    settings: Settings
    http_client: RobustHttpClient
    discord_api: DiscordApiClient
    repository: RecommendationRepository
    publisher: ForumPublisher
    processor: SubmissionProcessor

    def backfill(self) -> BackfillReconciler:
        return BackfillReconciler(self.discord_api, self.repository, self.processor, self.settings)

    def bulk_importer(self) -> BulkImporter:
        return BulkImporter(self.repository, self.processor, self.settings)

    def close(self) -> None:
        self.http_client.close()
        self.discord_api.close()


def build_pipeline(settings: Settings | None = None) -> Pipeline:
    """Build every collaborator; ``init_db`` must have run first."""
    settings = settings or get_settings()

    http_client = RobustHttpClient(
        timeout=settings.http_timeout_seconds, max_retries=settings.http_max_retries
    )
    discord_api = DiscordApiClient.from_settings(settings)
    repository = RecommendationRepository(
        get_session_factory(), max_attempts=settings.max_processing_attempts
    )
    publisher = ForumPublisher(discord_api, settings)
    processor = SubmissionProcessor(
        repository,
        build_extraction_coordinator(http_client),
        MetadataSynthesizer(get_llm_client(), max_content_chars=settings.max_content_chars),
        publisher,
    )
    return Pipeline(
        settings=settings,
        http_client=http_client,
        discord_api=discord_api,
        repository=repository,
        publisher=publisher,
        processor=processor,
    )
