"""
Route a URL to its extractor, with the generic extractor as fallback.
"""

from collections.abc import Mapping

from curator.core.logging import get_logger
from curator.errors import ExtractionError
from curator.extractors.article_extractor import ArticleExtractor
from curator.extractors.audio_episode_extractor import AudioEpisodeExtractor
from curator.extractors.audiobook_extractor import AudiobookExtractor
from curator.extractors.base_extractor import Extractor
from curator.extractors.generic_extractor import GenericExtractor
from curator.extractors.url_classifier import classify_url
from curator.extractors.video_extractor import VideoExtractor
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope
from curator.models.contracts import ContentCategory
from curator.utils.error_logger import log_error
from curator.utils.url_utils import normalize_url

logger = get_logger(__name__)


class ExtractionCoordinator:
    """Extracts content for any URL; ``ExtractionError`` is the only error it raises."""

    def __init__(self, extractors: Mapping[ContentCategory, Extractor], fallback: Extractor):
        self.extractors = dict(extractors)
        self.fallback = fallback

    def extract(self, url: str) -> ContentEnvelope:
        normalized = normalize_url(url)
        category = classify_url(normalized)
        extractor = self.extractors.get(category, self.fallback)

        logger.info(
            f"Extracting {category} content from {normalized}",
            extra={
                "component": "extraction_coordinator",
                "operation": "extract",
                "context_data": {"url": normalized, "category": str(category)},
            },
        )
        try:
            return self._run(extractor, normalized)
        except ExtractionError as e:
            if extractor is self.fallback:
                raise
            logger.warning(f"{type(extractor).__name__} failed for {normalized}: {e.cause}; trying generic")

        return self._run(self.fallback, normalized)

    @staticmethod
    def _run(extractor: Extractor, url: str) -> ContentEnvelope:
        try:
            return extractor.extract(url)
        except ExtractionError:
            raise
        except Exception as e:
            log_error(
                "extraction_coordinator",
                e,
                operation="extract",
                context={"url": url, "extractor": type(extractor).__name__},
            )
            raise ExtractionError(url, e) from e


def build_extraction_coordinator(http_client: RobustHttpClient) -> ExtractionCoordinator:
    generic = GenericExtractor(http_client)
    return ExtractionCoordinator(
        {
            ContentCategory.VIDEO: VideoExtractor(http_client),
            ContentCategory.AUDIOBOOK: AudiobookExtractor(http_client),
            ContentCategory.AUDIO_EPISODE: AudioEpisodeExtractor(http_client),
            ContentCategory.ARTICLE: ArticleExtractor(http_client),
            ContentCategory.OTHER: generic,
        },
        fallback=generic,
    )
