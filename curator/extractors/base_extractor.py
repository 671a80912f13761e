from typing import Protocol

from curator.models.content import ContentEnvelope


class Extractor(Protocol):
    """Fetches one URL and returns its content.

    Raises ``ExtractionError`` for recoverable failures: network errors,
    non-2xx responses and pages that cannot be parsed.
    """

    def extract(self, url: str) -> ContentEnvelope: ...
