"""Utility helpers for cleaning and repairing JSON payloads from LLM responses."""

from __future__ import annotations

import json
from typing import Any

from curator.core.logging import get_logger

logger = get_logger(__name__)


def strip_json_wrappers(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    return cleaned.strip()


def _balance_structures(payload: str) -> str:
    """Append closing delimiters to balance objects and arrays."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for char in payload:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            stack.append("}")
        elif char == "[":
            stack.append("]")
        elif char in "}]" and stack and char == stack[-1]:
            stack.pop()

    closing = '"' if in_string else ""
    return payload + closing + "".join(reversed(stack))


def try_repair_truncated_json(json_str: str) -> str | None:
    """Attempt to repair truncated JSON by closing strings and balancing structures."""
    try:
        json.loads(json_str)
        return json_str
    except json.JSONDecodeError:
        pass

    repaired = _balance_structures(json_str.rstrip().rstrip(","))

    try:
        json.loads(repaired)
        logger.info("Repaired truncated JSON by balancing braces and brackets")
        return repaired
    except json.JSONDecodeError:
        pass

    # Cut back to the last complete value and close what is still open
    for index in range(len(json_str) - 1, 0, -1):
        if json_str[index] in {"]", "}", '"'} or json_str[index].isdigit():
            candidate = _balance_structures(json_str[: index + 1].rstrip().rstrip(","))
            try:
                json.loads(candidate)
                logger.info("Repaired JSON by truncating to last complete value")
                return candidate
            except json.JSONDecodeError:
                continue

    return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Pull the first JSON object out of free-form completion text.

    Returns None when no object can be parsed, including after repair.
    """
    if not text:
        return None

    cleaned = strip_json_wrappers(text)
    start = cleaned.find("{")
    if start == -1:
        return None

    end = cleaned.rfind("}")
    candidates = []
    if end > start:
        candidates.append(cleaned[start : end + 1])
    candidates.append(cleaned[start:])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            repaired = try_repair_truncated_json(candidate)
            if repaired is None:
                continue
            parsed = json.loads(repaired)
        if isinstance(parsed, dict):
            return parsed
    return None
