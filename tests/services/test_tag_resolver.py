import pytest

from curator.models.contracts import LibraryType
from curator.models.forum import ForumTag
from curator.services.library_tags import (
    LIBRARIES,
    find_library_tag,
    get_library,
    get_library_tag_names,
    get_tag_emoji,
)
from curator.services.tag_resolver import resolve_tag, resolve_tags

GROWTH_FORUM_TAGS = [
    ForumTag("t1", "Tech & Code"),
    ForumTag("t2", "Productivity"),
    ForumTag("t3", "Finance"),
    ForumTag("t4", "Beginner"),
    ForumTag("t5", "Advanced"),
    ForumTag("t6", "Quick Tip"),
    ForumTag("t7", "Announcements"),
]


@pytest.mark.parametrize("library", list(LibraryType))
def test_each_library_has_twenty_unique_tags(library):
    names = get_library_tag_names(library)

    assert len(names) == 20
    assert len({name.lower() for name in names}) == 20


def test_library_lookups():
    assert get_library("growth").display_name == "Growth Lab"
    assert find_library_tag("tech & code", LibraryType.GROWTH).name == "Tech & Code"
    assert find_library_tag("Fantasy", LibraryType.GROWTH) is None
    assert get_tag_emoji("Finance", LibraryType.GROWTH) == "💰"
    assert set(LIBRARIES) == set(LibraryType)

    with pytest.raises(ValueError):
        get_library("cookbooks")


def test_resolve_tag_exact_match():
    assert resolve_tag("productivity", LibraryType.GROWTH, GROWTH_FORUM_TAGS).id == "t2"


def test_resolve_tag_name_containment():
    assert resolve_tag("Tech", LibraryType.GROWTH, GROWTH_FORUM_TAGS).id == "t1"


def test_resolve_tag_synonym_containment():
    assert resolve_tag("Python programming", LibraryType.GROWTH, GROWTH_FORUM_TAGS).id == "t1"
    assert resolve_tag("personal finance tips", LibraryType.GROWTH, GROWTH_FORUM_TAGS).id == "t3"


def test_resolve_tag_exact_match_wins_over_earlier_partial_match():
    tags = [ForumTag("a", "Art History"), ForumTag("b", "History")]

    assert resolve_tag("History", LibraryType.ATHENAEUM, tags).id == "b"


def test_resolve_tag_ignores_tags_outside_the_vocabulary():
    assert resolve_tag("Announcements", LibraryType.GROWTH, GROWTH_FORUM_TAGS) is None


def test_resolve_tag_skips_already_applied():
    assert resolve_tag("coding", LibraryType.GROWTH, GROWTH_FORUM_TAGS, already_applied=["t1"]) is None


def test_resolve_tag_empty_suggestion():
    assert resolve_tag("  ", LibraryType.GROWTH, GROWTH_FORUM_TAGS) is None


def test_resolve_tags_never_duplicates():
    ids = resolve_tags("Tech & Code", ["coding", "programming", "Beginner"], LibraryType.GROWTH, GROWTH_FORUM_TAGS)

    assert ids == ["t1", "t4"]


def test_resolve_tags_respects_ceiling():
    ids = resolve_tags(
        "Tech & Code",
        ["Productivity", "Finance", "Beginner", "Advanced", "Quick Tip"],
        LibraryType.GROWTH,
        GROWTH_FORUM_TAGS,
        max_tags=5,
    )

    assert ids == ["t1", "t2", "t3", "t4", "t5"]


def test_resolve_tags_uses_only_the_given_library():
    fantasy_forum = [ForumTag("f1", "Fantasy"), ForumTag("f2", "Sci-Fi")]

    assert resolve_tags("Fantasy", ["Sci-Fi"], LibraryType.GROWTH, fantasy_forum) == []
