"""
Content analyzer: structural statistics and heuristic content insights

Produces a ContentAnalysis for a whole document or a single Section:
- structure counts and the section outline
- complexity from sentence length, lexical diversity and structural density
- topics (term frequency), lexicon sentiment, key points
- improvement suggestions
- layout pattern (presentation, dashboard, report, ...) with a confidence score
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

from ..core.config import Config
from ..core.types import (
    BlockType,
    ContentAnalysis,
    ContentBlock,
    DocumentStructure,
    LayoutPattern,
    Section,
    Sentiment,
)
from ..core.utils import clamp01, count_words, extract_keywords, first_sentence, split_sentences, tokenize
from .block_builder import BlockBuilder, is_callout, iter_content_nodes
from .segmenter import Segmenter
from .tree import DocumentNode, element

logger = logging.getLogger(__name__)

POSITIVE_WORDS = frozenset({
    "excellent", "good", "nice", "wonderful", "best", "great", "love", "perfect",
    "happy", "beautiful", "amazing", "successful", "positive", "fortunate",
    "correct", "superior", "benefit", "advantage",
})
NEGATIVE_WORDS = frozenset({
    "bad", "worst", "terrible", "poor", "negative", "wrong", "hate", "ugly",
    "fail", "unfortunate", "incorrect", "inferior", "disadvantage", "problem",
    "issue", "difficult", "hard", "complex",
})
SENTIMENT_MARGIN = 5

SUGGEST_SPLIT = "Consider breaking content into multiple slides for better engagement"
SUGGEST_BULLETS = "Break long paragraphs into bullet points for better readability"
SUGGEST_CHARTS = "Consider converting tables to charts or infographics for visual impact"
SUGGEST_LISTS = "Add bullet points to structure information better"
SUGGEST_IMAGES = "Add relevant images to make content more engaging"
SUGGEST_H1 = "Add a clear main heading (H1) to establish hierarchy"
SUGGEST_H2 = "Add subheadings (H2) to organize content into sections"

EMPHASIS_TAGS = ("strong", "em", "b", "i")
TOC_HINTS = ("toc", "table-of-contents")


class ContentAnalyzer:
    """
    Heuristic content analysis over a DocumentNode tree.

    Example:
        >>> analyzer = ContentAnalyzer(Config())
        >>> report = analyzer.analyze(parse_html(html))
        >>> report.suggestions
    """

    def __init__(self, config: Optional[Config] = None, segmenter: Optional[Segmenter] = None):
        self.config = config or Config()
        self.segmenter = segmenter or Segmenter(self.config)
        self.builder = self.segmenter.builder

    def analyze(self, root: DocumentNode) -> ContentAnalysis:
        structure = self.analyze_structure(root)
        text = root.text
        words = count_words(text)
        pattern, confidence = self.detect_pattern(root)

        analysis = ContentAnalysis(
            structure=structure,
            complexity=self.complexity(root, text, structure),
            topics=extract_keywords(text, max_keywords=self.config.max_topics, min_length=4),
            sentiment=self.sentiment(text),
            key_points=self.key_points(root),
            suggestions=self.suggestions(root, structure, words),
            pattern=pattern,
            pattern_confidence=confidence,
        )
        logger.debug(
            f"Analyzed {words} words: complexity={analysis.complexity:.2f}, "
            f"sentiment={analysis.sentiment.value}, pattern={pattern.value}"
        )
        return analysis

    def analyze_section(self, section: Section) -> ContentAnalysis:
        """Analyze one Section by re-rooting its blocks' source nodes."""
        return self.analyze(section_root(section))

    # ---------------------------
    # Structure
    # ---------------------------
    def analyze_structure(self, root: DocumentNode) -> DocumentStructure:
        tags: Dict[str, int] = {}
        for node in root.iter():
            tags[node.tag] = tags.get(node.tag, 0) + 1

        headings = {
            "h1": tags.get("h1", 0),
            "h2": tags.get("h2", 0),
            "h3": tags.get("h3", 0),
            "total": tags.get("h1", 0) + tags.get("h2", 0) + tags.get("h3", 0),
        }
        return DocumentStructure(
            headings=headings,
            paragraphs=tags.get("p", 0),
            lists=tags.get("ul", 0) + tags.get("ol", 0),
            tables=tags.get("table", 0),
            images=tags.get("img", 0),
            links=tags.get("a", 0),
            sections=self.segmenter.outline_sections(root),
        )

    # ---------------------------
    # Scores
    # ---------------------------
    def complexity(self, root: DocumentNode, text: str, structure: DocumentStructure) -> float:
        """
        0.3 * sentence length + 0.3 * (1 - lexical diversity) + 0.4 * structural
        density, clamped to [0, 1].
        """
        words = text.split()
        sentences = split_sentences(text)
        avg_sentence_length = len(words) / len(sentences) if sentences else 0.0

        tokens = [w.lower() for w in words]
        lexical_diversity = len(set(tokens)) / len(tokens) if tokens else 1.0

        quotes = len(root.find_all("blockquote"))
        structural_density = (structure.tables * 2 + structure.lists + quotes) / 10

        return clamp01(
            (avg_sentence_length / 30) * 0.3
            + (1 - lexical_diversity) * 0.3
            + structural_density * 0.4
        )

    @staticmethod
    def sentiment(text: str) -> Sentiment:
        positive = negative = 0
        for token in tokenize(text):
            if token in POSITIVE_WORDS:
                positive += 1
            elif token in NEGATIVE_WORDS:
                negative += 1
        net = positive - negative
        if net > SENTIMENT_MARGIN:
            return Sentiment.POSITIVE
        if net < -SENTIMENT_MARGIN:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    def key_points(self, root: DocumentNode) -> List[str]:
        """Headings, emphasized spans and paragraph lead sentences, deduplicated."""
        candidates = [h.text for h in root.find_all("h1", "h2", "h3")]
        candidates += [e.text for e in root.find_all(*EMPHASIS_TAGS) if 10 < len(e.text) < 100]
        for p in root.find_all("p"):
            lead = first_sentence(p.text)
            if 20 < len(lead) < 150:
                candidates.append(lead)

        points: List[str] = []
        for c in candidates:
            if c and c not in points:
                points.append(c)
        return points[:self.config.max_key_points]

    def suggestions(self, root: DocumentNode, structure: DocumentStructure, words: int) -> List[str]:
        out = []
        if words > 1000:
            out.append(SUGGEST_SPLIT)
        if any(len(p.text) > 300 for p in root.find_all("p")):
            out.append(SUGGEST_BULLETS)
        if structure.tables > 0:
            out.append(SUGGEST_CHARTS)
        if structure.lists == 0 and words > 200:
            out.append(SUGGEST_LISTS)
        if structure.images == 0:
            out.append(SUGGEST_IMAGES)
        if structure.headings["h1"] == 0:
            out.append(SUGGEST_H1)
        if structure.headings["h2"] == 0 and words > 300:
            out.append(SUGGEST_H2)
        return out

    # ---------------------------
    # Layout pattern
    # ---------------------------
    def pattern_features(self, root: DocumentNode) -> Dict[str, float]:
        blocks: List[ContentBlock] = []
        for position, node in enumerate(iter_content_nodes(root)):
            block = self.builder.build(node, position)
            if block is not None:
                blocks.append(block)
        n = len(blocks)
        if n == 0:
            return {}

        def sources(pred) -> List[ContentBlock]:
            return [b for b in blocks if pred(b)]

        headings = sources(lambda b: b.level is not None)
        toc = any(
            "table of contents" in b.text.lower()
            or (b.source is not None and not b.source.is_text
                and any(h in " ".join(b.source.classes) for h in TOC_HINTS))
            for b in blocks
        ) or root.find("nav") is not None
        charts = sources(lambda b: b.source is not None and not b.source.is_text and (
            b.source.tag in ("canvas", "svg") or any("chart" in c for c in b.source.classes)
        ))
        hero = any(
            b.source is not None and not b.source.is_text and "hero" in " ".join(b.source.classes)
            for b in blocks
        ) or any(b.importance >= 1.0 for b in blocks[:2])

        return {
            "has_title": float(any(b.level == 1 for b in blocks)),
            "has_toc": float(toc),
            "has_hero": float(hero),
            "heading_ratio": len(headings) / n,
            "table_count": float(len(sources(lambda b: b.type == BlockType.TABLE))),
            "chart_count": float(len(charts)),
            "list_ratio": len(sources(lambda b: b.type == BlockType.LIST)) / n,
            "code_count": float(len(sources(lambda b: b.source_tag == "pre"))),
            "callout_count": float(len(sources(lambda b: b.source is not None and is_callout(b.source)))),
            "avg_words": sum(b.word_count for b in blocks) / n,
            "block_count": float(n),
        }

    def detect_pattern(self, root: DocumentNode) -> Tuple[LayoutPattern, float]:
        f = self.pattern_features(root)
        if not f:
            return LayoutPattern.DOCUMENT, 0.5

        if f["has_title"] and f["heading_ratio"] > 0.3:
            pattern = LayoutPattern.PRESENTATION
        elif f["table_count"] > f["block_count"] * 0.4 or f["chart_count"] > 0:
            pattern = LayoutPattern.DASHBOARD
        elif f["has_toc"]:
            pattern = LayoutPattern.REPORT
        elif f["list_ratio"] > 0.4 and f["code_count"] > 0:
            pattern = LayoutPattern.TUTORIAL
        elif f["has_hero"] and f["callout_count"] > 2:
            pattern = LayoutPattern.LANDING_PAGE
        elif f["avg_words"] > 100:
            pattern = LayoutPattern.ARTICLE
        else:
            pattern = LayoutPattern.DOCUMENT

        confidence = 0.5
        if pattern == LayoutPattern.PRESENTATION:
            confidence += 0.2 * bool(f["has_title"]) + 0.2 * (f["heading_ratio"] > 0.3)
        elif pattern == LayoutPattern.DASHBOARD:
            confidence += 0.2 * (f["table_count"] > 0) + 0.3 * (f["chart_count"] > 0)
        elif pattern == LayoutPattern.REPORT:
            confidence += 0.4
        elif pattern == LayoutPattern.TUTORIAL:
            confidence += 0.2 * (f["list_ratio"] > 0.3) + 0.3 * (f["code_count"] > 0)
        return pattern, min(1.0, confidence)


def section_root(section: Section) -> DocumentNode:
    """
    Rebuild a document tree for a Section: its title as a heading followed
    by each block's source node (or a paragraph of its text).
    """
    children = []
    if section.level:
        children.append(element(f"h{min(section.level, 6)}", section.title))
    for b in section.blocks:
        if b.source is not None:
            children.append(b.source)
        elif b.text:
            children.append(element("p", b.text))
    return DocumentNode(tag="#document", children=children)
