"""
Import a list of URLs that never passed through the chat channel.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from curator.core.logging import get_logger
from curator.core.settings import Settings
from curator.models.contracts import ProcessingStatus
from curator.pipeline.submission_processor import Submission, SubmissionProcessor
from curator.repositories.recommendation_repository import RecommendationRepository
from curator.utils.error_logger import log_processing_error
from curator.utils.url_utils import normalize_url, synthetic_message_id

logger = get_logger(__name__)

BULK_RECOMMENDER_ID = "bulk-import"
BULK_RECOMMENDER_NAME = "Bulk Import"


@dataclass
class BulkImportResult:
    total: int = 0
    processed: int = 0
    skipped_duplicates: int = 0
    failed: int = 0
    failed_urls: list[str] = field(default_factory=list)


def read_url_file(path: Path) -> list[str]:
    """One URL per line; blank lines and ``#`` comments are ignored."""
    urls = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            urls.append(stripped)
    return urls


def write_failed_urls(path: Path, urls: list[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{url}\n" for url in urls), encoding="utf-8")


class BulkImporter:
    def __init__(
        self,
        repository: RecommendationRepository,
        processor: SubmissionProcessor,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.repository = repository
        self.processor = processor
        self.settings = settings
        self.sleep = sleep

    def run(self, urls: Iterable[str], dry_run: bool = False) -> BulkImportResult:
        raw_urls = [url for url in urls if url and url.strip()]
        result = BulkImportResult(total=len(raw_urls))
        if not raw_urls:
            logger.info("Bulk import: nothing to do")
            return result

        # Identity is derived from the normalized URL, so case and whitespace
        # variants of one link collapse onto the same row
        batch: dict[str, str] = {}
        for raw in raw_urls:
            url = normalize_url(raw)
            identity = synthetic_message_id(url)
            if identity in batch:
                logger.info(f"Skipping duplicate within batch: {raw}")
                result.skipped_duplicates += 1
                continue
            batch[identity] = url

        existing_ids = self.repository.find_existing_identities(batch.keys())
        existing_urls = self.repository.find_existing_urls(batch.values())
        to_process = [
            (identity, url)
            for identity, url in batch.items()
            if identity not in existing_ids and url not in existing_urls
        ]
        result.skipped_duplicates += len(batch) - len(to_process)

        logger.info(
            f"Bulk import: {len(to_process)} new of {result.total} URLs",
            extra={
                "component": "bulk_import",
                "operation": "run",
                "context_data": {
                    "total": result.total,
                    "to_process": len(to_process),
                    "skipped_duplicates": result.skipped_duplicates,
                    "dry_run": dry_run,
                },
            },
        )
        if dry_run:
            for identity, url in to_process:
                logger.info(f"[dry-run] would import {url} as {identity}")
            return result

        for index, (identity, url) in enumerate(to_process, start=1):
            if not self._process_one(identity, url):
                result.failed += 1
                result.failed_urls.append(url)
            else:
                result.processed += 1

            if index % 10 == 0:
                logger.info(f"Bulk import progress: {index}/{len(to_process)}")
            if index < len(to_process):
                self.sleep(self.settings.bulk_import_delay_seconds)

        logger.info(
            f"Bulk import finished: processed={result.processed} "
            f"skipped={result.skipped_duplicates} failed={result.failed}"
        )
        return result

    def _process_one(self, identity: str, url: str) -> bool:
        submission = Submission(
            source_message_id=identity,
            channel_id=self.settings.recommendations_channel_id or "bulk-import",
            raw_text=f"Bulk import: {url}",
            submitter_id=BULK_RECOMMENDER_ID,
            submitter_name=BULK_RECOMMENDER_NAME,
            url=url,
        )
        try:
            outcome = self.processor.process(submission)
        except Exception as e:
            log_processing_error("bulk_import", identity, e, operation="import_url", context={"url": url})
            return False
        return outcome.status in (ProcessingStatus.PUBLISHED, ProcessingStatus.SKIPPED)
