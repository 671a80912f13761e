"""
Structured error logging helpers.

Errors logged here reach the JSONL error handler configured in
curator/core/logging.py (``logs/errors/``) with component, operation and
item context attached.

Usage:
    from curator.utils.error_logger import log_error, log_processing_error, log_http_error

    log_error("forum_publisher", error, operation="create_thread", context={"forum": "123"})
    log_processing_error("submission_processor", item_id=42, error=e, operation="synthesize")
    log_http_error("http_client", url="https://...", error=e, response=resp)
"""

from typing import Any

from curator.core.logging import get_logger


def _extract_http_details(response: Any) -> dict[str, Any]:
    """Pull status, headers, URL and a body excerpt off an HTTP response."""
    details: dict[str, Any] = {}

    status_code = getattr(response, "status_code", None)
    if status_code is not None:
        details["status_code"] = status_code

    headers = getattr(response, "headers", None)
    if headers is not None:
        details["headers"] = {
            k: v[:200] if isinstance(v, str) else v for k, v in dict(headers).items()
        }

    url = getattr(response, "url", None)
    if url is not None:
        details["url"] = str(url)

    text = getattr(response, "text", None)
    if isinstance(text, str):
        details["response_body"] = text[:1000]

    return details


def log_error(
    component: str,
    error: Exception,
    *,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
    http_response: Any | None = None,
    item_id: str | int | None = None,
) -> None:
    """Log error with full context to both console and JSONL.

    Args:
        component: Component name for identifying the source of errors.
        error: The exception that occurred.
        operation: Name of the operation that failed.
        context: Additional context data.
        http_response: HTTP response object (if applicable).
        item_id: ID of the item being processed (if applicable).
    """
    logger = get_logger(f"error.{component}")

    http_details = _extract_http_details(http_response) if http_response is not None else None

    operation_str = f" during {operation}" if operation else ""
    item_str = f" (item: {item_id})" if item_id else ""
    message = f"{component} error{operation_str}{item_str}: {error}"

    logger.error(
        message,
        exc_info=error,
        extra={
            "component": component,
            "operation": operation,
            "context_data": context,
            "http_details": http_details,
            "item_id": item_id,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def log_processing_error(
    component: str,
    item_id: str | int,
    error: Exception,
    *,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Log a failure while processing one recommendation."""
    log_error(
        component,
        error,
        operation=operation or "recommendation_processing",
        context=context,
        item_id=item_id,
    )


def log_http_error(
    component: str,
    url: str,
    *,
    response: Any | None = None,
    error: Exception | None = None,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Log HTTP-specific errors with response details.

    Args:
        component: Component name for identifying the source of errors.
        url: The URL that was requested.
        response: HTTP response object (if available).
        error: The exception that occurred (if any).
        operation: Name of the operation that failed.
        context: Additional context data.
    """
    full_context: dict[str, Any] = {"url": url}
    if context:
        full_context.update(context)

    if error is None:
        status_code = getattr(response, "status_code", "unknown")
        error = Exception(f"HTTP error for {url} (status: {status_code})")

    log_error(
        component,
        error,
        operation=operation or "http_request",
        context=full_context,
        http_response=response,
    )
