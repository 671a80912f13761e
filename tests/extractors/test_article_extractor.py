import pytest

from curator.errors import ExtractionError
from curator.extractors.article_extractor import ArticleExtractor
from curator.extractors.generic_extractor import GenericExtractor
from curator.models.contracts import ContentCategory

ARTICLE_URL = "https://blog.example.com/posts/great-work"

ARTICLE_HTML = """
<html>
<head>
  <title>How to Do Great Work | Example Blog</title>
  <meta property="og:title" content="How to Do Great Work">
  <meta property="og:description" content="An essay on curiosity and ambition.">
  <meta property="og:image" content="/images/cover.png">
  <meta property="og:site_name" content="Example Blog">
  <meta name="article:published_time" content="2024-03-01T10:00:00Z">
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
      {"@type": "Article", "author": {"@type": "Person", "name": "Jane Writer"}}
    ]}
  </script>
</head>
<body>
  <nav>Home | About</nav>
  <article>
    <p>Curiosity is the engine of great work.</p>
    <p>Pick a field you are excited about and work on it relentlessly.</p>
  </article>
</body>
</html>
"""


def test_article_extraction_collects_metadata(html_client, mocker):
    mocker.patch(
        "curator.extractors.article_extractor.trafilatura.extract",
        return_value="Curiosity is the engine of great work.",
    )

    envelope = ArticleExtractor(html_client({ARTICLE_URL: ARTICLE_HTML})).extract(ARTICLE_URL)

    assert envelope.category == ContentCategory.ARTICLE
    assert envelope.title == "How to Do Great Work"
    assert envelope.content == "Curiosity is the engine of great work."
    assert envelope.metadata.author == "Jane Writer"
    assert envelope.metadata.published_time == "2024-03-01T10:00:00Z"
    assert envelope.metadata.publisher == "Example Blog"
    assert envelope.metadata.thumbnail == "https://blog.example.com/images/cover.png"


def test_article_falls_back_to_paragraphs_when_readability_finds_nothing(html_client, mocker):
    mocker.patch("curator.extractors.article_extractor.trafilatura.extract", return_value=None)

    envelope = ArticleExtractor(html_client({ARTICLE_URL: ARTICLE_HTML})).extract(ARTICLE_URL)

    assert "Curiosity is the engine of great work." in envelope.content
    assert "work on it relentlessly" in envelope.content


def test_article_http_404_raises_extraction_error(html_client):
    with pytest.raises(ExtractionError, match="HTTP 404"):
        ArticleExtractor(html_client({})).extract(ARTICLE_URL)


def test_article_without_title_or_text_raises(html_client, mocker):
    mocker.patch("curator.extractors.article_extractor.trafilatura.extract", return_value=None)

    with pytest.raises(ExtractionError):
        ArticleExtractor(html_client({ARTICLE_URL: "<html><body></body></html>"})).extract(ARTICLE_URL)


def test_generic_extractor_uses_visible_text(html_client):
    envelope = GenericExtractor(html_client({ARTICLE_URL: ARTICLE_HTML})).extract(ARTICLE_URL)

    assert envelope.category == ContentCategory.OTHER
    assert envelope.title == "How to Do Great Work"
    assert "Curiosity is the engine of great work." in envelope.content
    # navigation chrome is dropped
    assert "Home | About" not in envelope.content
    assert envelope.metadata.description == "An essay on curiosity and ambition."
