"""
Map free-text tag suggestions onto a forum's configured tags.

Only forum tags whose name belongs to the library vocabulary are eligible.
Each suggestion is matched in three passes, each over every eligible tag
before the next one starts: exact name, then substring containment in
either direction, then containment against the tag's synonyms.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from curator.core.logging import get_logger
from curator.models.contracts import LibraryType
from curator.models.forum import ForumTag
from curator.services.library_tags import LibraryTag, find_library_tag

logger = get_logger(__name__)

DEFAULT_MAX_TAGS = 5


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


def _eligible_tags(
    library: LibraryType | str,
    available_tags: Iterable[ForumTag],
    already_applied: Iterable[str],
) -> list[tuple[ForumTag, LibraryTag]]:
    skip = set(already_applied)
    eligible = []
    for forum_tag in available_tags:
        if forum_tag.id in skip:
            continue
        vocabulary_tag = find_library_tag(forum_tag.name, library)
        if vocabulary_tag is not None:
            eligible.append((forum_tag, vocabulary_tag))
    return eligible


def resolve_tag(
    suggestion: str,
    library: LibraryType | str,
    available_tags: Iterable[ForumTag],
    already_applied: Iterable[str] = (),
) -> ForumTag | None:
    """Return the best forum tag for ``suggestion``, or None when nothing matches."""
    needle = (suggestion or "").strip().lower()
    if not needle:
        return None

    eligible = _eligible_tags(library, available_tags, already_applied)
    passes: list[Callable[[ForumTag, LibraryTag], bool]] = [
        lambda forum_tag, _: forum_tag.name.lower() == needle,
        lambda forum_tag, _: _contains_either_way(needle, forum_tag.name.lower()),
        lambda _, vocab: any(_contains_either_way(needle, syn) for syn in vocab.synonyms),
    ]
    for matches in passes:
        for forum_tag, vocabulary_tag in eligible:
            if matches(forum_tag, vocabulary_tag):
                return forum_tag
    return None


def resolve_tags(
    primary: str,
    secondaries: Iterable[str],
    library: LibraryType | str,
    available_tags: Iterable[ForumTag],
    max_tags: int = DEFAULT_MAX_TAGS,
) -> list[str]:
    """Resolve the primary tag then each secondary into distinct forum tag ids.

    Stops at ``max_tags``. Suggestions without a match are dropped.
    """
    available = list(available_tags)
    applied: list[str] = []
    for suggestion in [primary, *secondaries]:
        if len(applied) >= max_tags:
            break
        match = resolve_tag(suggestion, library, available, applied)
        if match is None:
            logger.debug(
                "No forum tag for suggestion",
                extra={
                    "component": "tag_resolver",
                    "operation": "resolve_tags",
                    "context_data": {"suggestion": suggestion, "library": str(library)},
                },
            )
            continue
        applied.append(match.id)
    return applied
