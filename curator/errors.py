"""Exception taxonomy for the curator pipeline."""


class CuratorError(Exception):
    """Base class for every error raised by the curator pipeline."""


class ExtractionError(CuratorError):
    """Content could not be fetched or parsed for a URL.

    Recoverable: the coordinator retries with the generic extractor and the
    pipeline falls back to URL-only synthesis.
    """

    def __init__(self, url: str, cause: str | BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"Extraction failed for {url}: {cause}")


class SynthesisError(CuratorError):
    """The language model produced no usable classification."""


class PublicationError(CuratorError):
    """The forum post could not be created."""


class DuplicateRecommendationError(CuratorError):
    """A recommendation with the same identity already exists."""

    def __init__(self, original_message_id: str):
        self.original_message_id = original_message_id
        super().__init__(f"Recommendation already exists for message {original_message_id}")


class RecommendationAlreadyPublishedError(CuratorError):
    """A published recommendation was about to be mutated."""

    def __init__(self, recommendation_id: int):
        self.recommendation_id = recommendation_id
        super().__init__(f"Recommendation {recommendation_id} is already published")


class DiscordApiError(CuratorError):
    """The Discord REST API answered with an error status."""

    def __init__(self, status_code: int, detail: str, *, method: str = "", path: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Discord API {method} {path} failed with {status_code}: {detail}")
