import pytest

from deckflow.core.config import Config
from deckflow.core.types import LayoutPattern, Sentiment
from deckflow.pipeline.content_analyzer import (
    SUGGEST_BULLETS,
    SUGGEST_CHARTS,
    SUGGEST_H1,
    SUGGEST_H2,
    SUGGEST_IMAGES,
    SUGGEST_LISTS,
    SUGGEST_SPLIT,
    ContentAnalyzer,
)
from deckflow.pipeline.segmenter import Segmenter
from deckflow.pipeline.tree import DocumentNode, parse_html


def _analyze(html: str):
    return ContentAnalyzer(Config()).analyze(parse_html(html))


def _long_text(n: int) -> str:
    return " ".join(f"term{i % 50}" for i in range(n))


def test_structure_counts():
    report = _analyze(
        "<body><h1>Title</h1><h2>A</h2><h2>B</h2><h3>C</h3><h4>D</h4>"
        "<p>One <a href='#'>link</a></p><p>Two</p><ul><li>x</li></ul><ol><li>y</li></ol>"
        "<table><tr><td>1</td></tr></table><img src='a.png'></body>"
    )
    s = report.structure
    assert s.headings == {"h1": 1, "h2": 2, "h3": 1, "total": 4}
    assert (s.paragraphs, s.lists, s.tables, s.images, s.links) == (2, 2, 1, 1, 1)
    assert [o.title for o in s.sections] == ["Title", "A", "B", "C"]


def test_empty_document_defaults():
    report = ContentAnalyzer().analyze(DocumentNode(tag="#document"))
    assert report.complexity == 0.0
    assert report.topics == []
    assert report.sentiment == Sentiment.NEUTRAL
    assert report.key_points == []
    assert report.suggestions == [SUGGEST_IMAGES, SUGGEST_H1]
    assert report.pattern == LayoutPattern.DOCUMENT
    assert report.pattern_confidence == 0.5


def test_suggestion_scenarios():
    no_images = _analyze("<body><h1>T</h1><p>short text</p></body>")
    assert SUGGEST_IMAGES in no_images.suggestions

    with_table = _analyze("<body><h1>T</h1><table><tr><td>a</td></tr></table></body>")
    assert SUGGEST_CHARTS in with_table.suggestions

    long_doc = _analyze(f"<body><p>{_long_text(1200)}</p></body>")
    assert SUGGEST_SPLIT in long_doc.suggestions
    assert SUGGEST_BULLETS in long_doc.suggestions
    assert SUGGEST_LISTS in long_doc.suggestions
    assert SUGGEST_H2 in long_doc.suggestions


def test_suggestions_keep_emission_order():
    report = _analyze(f"<body><p>{_long_text(1200)}</p><table><tr><td>1</td></tr></table></body>")
    assert report.suggestions == [
        SUGGEST_SPLIT, SUGGEST_BULLETS, SUGGEST_CHARTS, SUGGEST_LISTS,
        SUGGEST_IMAGES, SUGGEST_H1, SUGGEST_H2,
    ]


def test_no_image_suggestion_when_images_present():
    report = _analyze("<body><h1>T</h1><h2>S</h2><img src='a.png' alt='x'></body>")
    assert report.suggestions == []


def test_sentiment():
    positive = (
        "This excellent product is great and the team did good work. "
        "Users love the wonderful design, the best support and a perfect finish."
    )
    assert ContentAnalyzer.sentiment(positive) == Sentiment.POSITIVE
    assert ContentAnalyzer.sentiment("The plan is good but the rollout had a problem.") == Sentiment.NEUTRAL
    negative = "bad worst terrible poor wrong ugly fail problem"
    assert ContentAnalyzer.sentiment(negative) == Sentiment.NEGATIVE
    # whole words only
    assert ContentAnalyzer.sentiment("goodness " * 10) == Sentiment.NEUTRAL


def test_sentiment_net_seven_is_positive():
    # 8 positive, 1 negative
    text = "good great excellent best love perfect happy amazing but one problem"
    assert ContentAnalyzer.sentiment(text) == Sentiment.POSITIVE


def test_topics_by_frequency():
    report = _analyze(
        "<body><p>Revenue growth beat targets. Revenue rose again. "
        "Revenue and growth in the market.</p></body>"
    )
    assert report.topics[:2] == ["revenue", "growth"]
    assert "the" not in report.topics
    assert all(len(t) > 3 for t in report.topics)


def test_key_points():
    report = _analyze(
        "<body><h1>Annual Report</h1><h2>Highlights</h2>"
        "<p>Our revenue doubled this year. Costs fell.</p>"
        "<p><strong>Record customer retention</strong> across regions.</p>"
        "<p>Short.</p><h2>Highlights</h2></body>"
    )
    assert report.key_points == [
        "Annual Report",
        "Highlights",
        "Record customer retention",
        "Our revenue doubled this year",
        "Record customer retention across regions",
    ]


def test_complexity_bounds():
    for html in (
        "<body><p>Hi.</p></body>",
        f"<body><p>{_long_text(400)}</p>" + "<table><tr><td>1</td></tr></table>" * 6 + "</body>",
    ):
        report = _analyze(html)
        assert 0.0 <= report.complexity <= 1.0


def test_pattern_presentation():
    report = _analyze("<body><h1>Deck</h1><h2>First</h2><p>words</p><h2>Second</h2></body>")
    assert report.pattern == LayoutPattern.PRESENTATION
    assert report.pattern_confidence == pytest.approx(0.9)


def test_pattern_dashboard():
    report = _analyze(
        "<body><table><tr><td>1</td></tr></table><table><tr><td>2</td></tr></table></body>"
    )
    assert report.pattern == LayoutPattern.DASHBOARD
    assert report.pattern_confidence == pytest.approx(0.7)


def test_pattern_article():
    report = _analyze(f"<body><p>{_long_text(150)}</p><p>{_long_text(150)}</p></body>")
    assert report.pattern == LayoutPattern.ARTICLE


def test_analyze_section():
    root = parse_html(
        "<body><h2>Data</h2><p>Numbers follow.</p>"
        "<table><tr><th>Item</th><th>Value</th></tr><tr><td>a</td><td>1</td></tr></table>"
        "<h2>Wrap up</h2><p>Done.</p></body>"
    )
    sections = Segmenter().initial_sections(root)
    report = ContentAnalyzer().analyze_section(sections[0])
    assert report.structure.headings["h2"] == 1
    assert report.structure.tables == 1
    assert SUGGEST_CHARTS in report.suggestions
    assert "Data" in report.key_points
