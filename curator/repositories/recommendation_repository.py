"""Persistence for recommendations and their processing log."""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from curator.core.logging import get_logger
from curator.core.settings import get_settings
from curator.errors import DuplicateRecommendationError, RecommendationAlreadyPublishedError
from curator.models.forum import PublishedPost
from curator.models.metadata import RecommendationMetadata
from curator.models.schema import ProcessingLog, Recommendation

logger = get_logger(__name__)

# Keeps IN (...) lists under SQLite's bound-parameter limit
_IN_CHUNK_SIZE = 500


def _chunks(values: list[str], size: int = _IN_CHUNK_SIZE) -> Iterable[list[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


class RecommendationRepository:
    """
    Store for recommendations.

    Identity is ``original_message_id``. Published rows are terminal: once
    ``mark_published`` has run, classification and post ids can no longer
    change.
    """

    def __init__(self, session_factory: Callable[[], Session], max_attempts: int | None = None):
        self.session_factory = session_factory
        self.max_attempts = max_attempts or get_settings().max_processing_attempts

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _get_unpublished(self, db: Session, recommendation_id: int) -> Recommendation:
        recommendation = db.get(Recommendation, recommendation_id)
        if recommendation is None:
            raise LookupError(f"Recommendation {recommendation_id} not found")
        if recommendation.processed:
            raise RecommendationAlreadyPublishedError(recommendation_id)
        return recommendation

    def create(
        self,
        *,
        original_message_id: str,
        original_channel_id: str,
        original_content: str,
        recommender_id: str,
        recommender_name: str,
        url: str,
    ) -> Recommendation:
        """Insert an unpublished recommendation.

        Raises:
            DuplicateRecommendationError: the identity is already stored.
        """
        recommendation = Recommendation(
            original_message_id=original_message_id,
            original_channel_id=original_channel_id,
            original_content=original_content,
            recommender_id=recommender_id,
            recommender_name=recommender_name,
            url=url,
            topics=[],
            secondary_tags=[],
            key_takeaways=[],
            main_ideas=[],
            processing_attempts=0,
            processed=False,
        )
        try:
            with self._session() as db:
                db.add(recommendation)
                db.flush()
                db.refresh(recommendation)
        except IntegrityError as e:
            raise DuplicateRecommendationError(original_message_id) from e

        logger.debug(f"Created recommendation {recommendation.id} for {original_message_id}")
        return recommendation

    def find_by_identity(self, original_message_id: str) -> Recommendation | None:
        with self._session() as db:
            return (
                db.query(Recommendation)
                .filter(Recommendation.original_message_id == original_message_id)
                .first()
            )

    def get(self, recommendation_id: int) -> Recommendation | None:
        with self._session() as db:
            return db.get(Recommendation, recommendation_id)

    def update_metadata(self, recommendation_id: int, metadata: RecommendationMetadata) -> Recommendation:
        """Store the synthesized classification on an unpublished row."""
        with self._session() as db:
            recommendation = self._get_unpublished(db, recommendation_id)
            recommendation.title = metadata.title
            recommendation.description = metadata.description
            recommendation.content_type = metadata.content_type.value
            recommendation.topics = list(metadata.topics)
            recommendation.duration = metadata.duration
            recommendation.quality_score = metadata.quality_score
            recommendation.sentiment = metadata.sentiment.value
            recommendation.ai_summary = metadata.summary
            recommendation.tldr = metadata.tldr
            recommendation.key_takeaways = list(metadata.key_takeaways)
            recommendation.main_ideas = list(metadata.main_ideas)
            recommendation.library_type = metadata.library_type.value
            recommendation.primary_tag = metadata.primary_tag
            recommendation.secondary_tags = list(metadata.secondary_tags)
            if metadata.thumbnail:
                recommendation.thumbnail = metadata.thumbnail
            recommendation.processing_error = None
            db.flush()
            db.refresh(recommendation)
            return recommendation

    def record_error(self, recommendation_id: int, error: str) -> Recommendation:
        """Store the last error and count the failed attempt."""
        with self._session() as db:
            recommendation = self._get_unpublished(db, recommendation_id)
            recommendation.processing_error = error[:2000]
            recommendation.processing_attempts = (recommendation.processing_attempts or 0) + 1
            db.flush()
            db.refresh(recommendation)

        logger.warning(
            f"Recorded error for recommendation {recommendation_id} "
            f"(attempt {recommendation.processing_attempts}/{self.max_attempts}): {error}"
        )
        return recommendation

    def mark_published(self, recommendation_id: int, post: PublishedPost) -> Recommendation:
        """Terminal transition; raises ``RecommendationAlreadyPublishedError`` on a second call."""
        with self._session() as db:
            recommendation = self._get_unpublished(db, recommendation_id)
            recommendation.forum_post_id = post.post_id
            recommendation.forum_thread_id = post.thread_id
            recommendation.processed = True
            recommendation.processed_at = datetime.utcnow()
            recommendation.processing_error = None
            db.flush()
            db.refresh(recommendation)
            return recommendation

    def find_existing_identities(self, message_ids: Iterable[str]) -> set[str]:
        ids = list(dict.fromkeys(message_ids))
        if not ids:
            return set()
        existing: set[str] = set()
        with self._session() as db:
            for chunk in _chunks(ids):
                rows = (
                    db.query(Recommendation.original_message_id)
                    .filter(Recommendation.original_message_id.in_(chunk))
                    .all()
                )
                existing.update(row[0] for row in rows)
        return existing

    def find_existing_urls(self, urls: Iterable[str]) -> set[str]:
        """Input URLs that are already stored, compared case-insensitively."""
        by_lower: dict[str, list[str]] = {}
        for url in urls:
            by_lower.setdefault(url.lower(), []).append(url)
        if not by_lower:
            return set()

        found: set[str] = set()
        with self._session() as db:
            for chunk in _chunks(list(by_lower)):
                rows = (
                    db.query(func.lower(Recommendation.url))
                    .filter(func.lower(Recommendation.url).in_(chunk))
                    .all()
                )
                for row in rows:
                    found.update(by_lower.get(row[0], []))
        return found

    def get_last_published_timestamp(self) -> datetime | None:
        with self._session() as db:
            return (
                db.query(func.max(Recommendation.processed_at))
                .filter(Recommendation.processed.is_(True))
                .scalar()
            )

    def search(
        self,
        *,
        library_type: str | None = None,
        tags: list[str] | None = None,
        content_type: str | None = None,
        topics: list[str] | None = None,
        limit: int = 20,
    ) -> list[Recommendation]:
        """Published recommendations, newest first.

        ``tags`` matches the primary or any secondary tag; ``topics`` matches
        any topic. Both compare case-insensitively.
        """
        with self._session() as db:
            query = db.query(Recommendation).filter(Recommendation.processed.is_(True))
            if library_type:
                query = query.filter(Recommendation.library_type == library_type)
            if content_type:
                query = query.filter(Recommendation.content_type == content_type)
            query = query.order_by(Recommendation.created_at.desc(), Recommendation.id.desc())

            if not tags and not topics:
                return query.limit(limit).all()

            # JSON list membership is not portable across SQLite and PostgreSQL
            wanted_tags = {t.lower() for t in tags or []}
            wanted_topics = {t.lower() for t in topics or []}
            results: list[Recommendation] = []
            for recommendation in query.yield_per(200):
                if wanted_tags:
                    row_tags = {(recommendation.primary_tag or "").lower()}
                    row_tags.update(t.lower() for t in recommendation.secondary_tags or [])
                    if not wanted_tags & row_tags:
                        continue
                if wanted_topics and not wanted_topics & {t.lower() for t in recommendation.topics or []}:
                    continue
                results.append(recommendation)
                if len(results) >= limit:
                    break
            return results

    def get_retryable(self, limit: int = 10) -> list[Recommendation]:
        """Unpublished rows with attempts left, oldest first."""
        with self._session() as db:
            return (
                db.query(Recommendation)
                .filter(
                    Recommendation.processed.is_(False),
                    Recommendation.processing_attempts < self.max_attempts,
                )
                .order_by(Recommendation.created_at.asc(), Recommendation.id.asc())
                .limit(limit)
                .all()
            )

    def get_needing_attention(self) -> list[Recommendation]:
        """Unpublished rows whose attempts are exhausted."""
        with self._session() as db:
            return (
                db.query(Recommendation)
                .filter(
                    Recommendation.processed.is_(False),
                    Recommendation.processing_attempts >= self.max_attempts,
                )
                .order_by(Recommendation.created_at.asc(), Recommendation.id.asc())
                .all()
            )

    def log_event(
        self,
        recommendation_id: int,
        operation: str,
        status: str,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ProcessingLog:
        with self._session() as db:
            entry = ProcessingLog(
                recommendation_id=recommendation_id,
                operation=str(operation),
                status=str(status),
                message=message,
                log_metadata=metadata or {},
            )
            db.add(entry)
            db.flush()
            db.refresh(entry)
            return entry

    def get_logs(self, recommendation_id: int) -> list[ProcessingLog]:
        with self._session() as db:
            return (
                db.query(ProcessingLog)
                .filter(ProcessingLog.recommendation_id == recommendation_id)
                .order_by(ProcessingLog.id.asc())
                .all()
            )
