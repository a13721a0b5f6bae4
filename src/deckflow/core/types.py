"""
Core types for deck layout processing.

This module defines the values that flow through the pipeline:
- Content blocks (tagged by BlockType) with their type-specific payloads
- Sections produced by the segmenter
- Chart specifications produced by chart inference
- Layout analysis reports produced by the layout optimizer
- Content analysis reports and the final Deck handed to a renderer

Blocks and positions are frozen; every pipeline stage returns new values
(`dataclasses.replace`) instead of mutating its input.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from .utils import clamp01, count_words


# ---------------------------
# Enumerations
# ---------------------------
class BlockType(Enum):
    """Content block types"""
    TEXT = "text"
    IMAGE = "image"
    CHART = "chart"
    TABLE = "table"
    LIST = "list"
    QUOTE = "quote"


class SectionType(Enum):
    """Section type derived from its dominant content"""
    TITLE = "title"
    GALLERY = "gallery"
    DATA = "data"
    QUOTE = "quote"
    LIST = "list"
    CONTENT = "content"


class ChartType(Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    AREA = "area"
    SCATTER = "scatter"
    BUBBLE = "bubble"
    RADAR = "radar"


class Sentiment(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class LayoutPattern(Enum):
    """Overall document layout pattern"""
    DOCUMENT = "document"
    PRESENTATION = "presentation"
    REPORT = "report"
    ARTICLE = "article"
    TUTORIAL = "tutorial"
    DASHBOARD = "dashboard"
    LANDING_PAGE = "landing-page"


class RecommendationType(Enum):
    SPLIT = "split"
    MERGE = "merge"
    REORDER = "reorder"
    RESIZE = "resize"
    EMPHASIZE = "emphasize"
    SIMPLIFY = "simplify"


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------
# Geometry
# ---------------------------
@dataclass(frozen=True)
class CanvasSize:
    """Slide/page canvas in canvas units"""
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple:
        return (self.width / 2, self.height / 2)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Position:
    """Block rectangle: top-left corner (x, y) plus width and height"""
    x: float
    y: float
    w: float
    h: float

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def center(self) -> tuple:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @classmethod
    def centered_on(cls, cx: float, cy: float, w: float, h: float) -> Position:
        return cls(x=cx - w / 2, y=cy - h / 2, w=w, h=h)

    def scaled(self, factor: float) -> Position:
        """Scale width and height around the rectangle center."""
        cx, cy = self.center
        return Position.centered_on(cx, cy, self.w * factor, self.h * factor)

    def inset(self, margin: float) -> Position:
        """Shrink by `margin` (fraction of each side) on every edge."""
        return Position(
            x=self.x + self.w * margin,
            y=self.y + self.h * margin,
            w=self.w * (1 - 2 * margin),
            h=self.h * (1 - 2 * margin),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> Position:
        return Position(x=float(d["x"]), y=float(d["y"]), w=float(d["w"]), h=float(d["h"]))


# ---------------------------
# Block payloads
# ---------------------------
@dataclass
class TableData:
    """Tabular payload: ordered headers and equal-length rows of cell values"""
    headers: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max([len(self.headers)] + [len(r) for r in self.rows])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> TableData:
        return TableData(
            headers=[str(h) for h in d.get("headers") or []],
            rows=[list(r) for r in d.get("rows") or []],
        )


@dataclass
class ImageData:
    src: Optional[str] = None
    alt: str = ""
    count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChartSeries:
    name: str
    values: List[float] = field(default_factory=list)
    color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChartOptions:
    show_legend: bool = False
    show_title: bool = True
    show_values: bool = False
    grid_lines: bool = True
    theme: str = "colorful"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChartSpec:
    """
    Chart rendering specification.

    Fields:
    - type: ChartType chosen by chart inference
    - title: Chart title built from the table headers
    - categories: Ordered category labels (x-axis / slices)
    - series: One ChartSeries per numeric column; each has len(categories) values
    - options: Rendering hints for the chart-drawing collaborator
    """
    type: ChartType
    title: str
    categories: List[str] = field(default_factory=list)
    series: List[ChartSeries] = field(default_factory=list)
    options: ChartOptions = field(default_factory=ChartOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "categories": list(self.categories),
            "series": [s.to_dict() for s in self.series],
            "options": self.options.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> ChartSpec:
        return ChartSpec(
            type=ChartType(d.get("type", "bar")),
            title=d.get("title") or "",
            categories=list(d.get("categories") or []),
            series=[ChartSeries(**s) for s in d.get("series") or []],
            options=ChartOptions(**(d.get("options") or {})),
        )


# ---------------------------
# Content block
# ---------------------------
def _table_text(table: TableData) -> str:
    cells = list(table.headers) + [str(c) for row in table.rows for c in row]
    return " ".join(c for c in cells if c)


_TEXT_OF = {
    BlockType.TEXT: lambda c: c or "",
    BlockType.QUOTE: lambda c: c or "",
    BlockType.LIST: lambda c: "\n".join(c or []),
    BlockType.TABLE: lambda c: _table_text(c) if c else "",
    BlockType.IMAGE: lambda c: c.alt if c else "",
    BlockType.CHART: lambda c: c.title if c else "",
}

_PAYLOAD_FROM_DICT = {
    BlockType.TEXT: lambda c: c or "",
    BlockType.QUOTE: lambda c: c or "",
    BlockType.LIST: lambda c: list(c or []),
    BlockType.TABLE: lambda c: TableData.from_dict(c or {}),
    BlockType.IMAGE: lambda c: ImageData(**(c or {})),
    BlockType.CHART: lambda c: ChartSpec.from_dict(c or {}),
}


@dataclass(frozen=True)
class ContentBlock:
    """
    Leaf unit of content carried through the pipeline.

    `content` holds the payload matching `type`:
    - TEXT / QUOTE: str
    - LIST: List[str]
    - TABLE: TableData
    - IMAGE: ImageData
    - CHART: ChartSpec

    `visual_weight` and `importance` are clamped to [0, 1] on construction.
    `source` keeps the originating tree node for per-section analysis; it is
    not compared and not serialized.
    """
    id: str
    type: BlockType
    content: Any = ""
    visual_weight: float = 0.5
    importance: float = 0.5
    position: Optional[Position] = None
    level: Optional[int] = None
    source_tag: Optional[str] = None
    source: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "visual_weight", clamp01(self.visual_weight))
        object.__setattr__(self, "importance", clamp01(self.importance))

    @property
    def text(self) -> str:
        """Plain text of the payload, whatever the block type."""
        return _TEXT_OF[self.type](self.content)

    @property
    def word_count(self) -> int:
        return count_words(self.text)

    def to_dict(self) -> Dict[str, Any]:
        content = self.content
        if hasattr(content, "to_dict"):
            content = content.to_dict()
        elif isinstance(content, list):
            content = list(content)
        return {
            "id": self.id,
            "type": self.type.value,
            "content": content,
            "visual_weight": self.visual_weight,
            "importance": self.importance,
            "position": self.position.to_dict() if self.position else None,
            "level": self.level,
            "source_tag": self.source_tag,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> ContentBlock:
        block_type = BlockType(d.get("type", "text"))
        pos = d.get("position")
        return ContentBlock(
            id=d.get("id"),
            type=block_type,
            content=_PAYLOAD_FROM_DICT[block_type](d.get("content")),
            visual_weight=float(d.get("visual_weight", 0.5)),
            importance=float(d.get("importance", 0.5)),
            position=Position.from_dict(pos) if pos else None,
            level=d.get("level"),
            source_tag=d.get("source_tag"),
        )


# ---------------------------
# Section
# ---------------------------
_LAYOUT_HINTS = {
    SectionType.TITLE: "title-slide",
    SectionType.GALLERY: "image-focus",
    SectionType.DATA: "data-viz",
    SectionType.QUOTE: "content",
    SectionType.LIST: "content",
    SectionType.CONTENT: "content",
}


@dataclass
class Section:
    """
    Ordered group of blocks destined for one slide/page.

    Fields:
    - id: Section identifier ('sec_0', 'sec_1', ...)
    - title: Heading text or a positional placeholder
    - blocks: Content blocks (the opening heading is not a block)
    - complexity: Structural complexity in [0, 1]
    - type: SectionType derived from the dominant content
    - level: Heading level that opened the section (0 if none)
    """
    id: str
    title: str
    blocks: List[ContentBlock] = field(default_factory=list)
    complexity: float = 0.0
    type: SectionType = SectionType.CONTENT
    level: int = 0

    @property
    def word_count(self) -> int:
        return sum(b.word_count for b in self.blocks)

    @property
    def layout_hint(self) -> str:
        return _LAYOUT_HINTS[self.type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "level": self.level,
            "complexity": self.complexity,
            "word_count": self.word_count,
            "layout_hint": self.layout_hint,
            "blocks": [b.to_dict() for b in self.blocks],
        }


# ---------------------------
# Layout analysis
# ---------------------------
@dataclass
class Recommendation:
    type: RecommendationType
    priority: Priority
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "priority": self.priority.value, "description": self.description}


@dataclass
class LayoutAnalysis:
    """
    Layout quality report for a block set on a canvas.

    All scores are in [0, 1]; `white_space` is always exactly
    `1 - content_density`.
    """
    content_density: float
    visual_balance: float
    readability: float
    hierarchy: float
    recommendations: List[Recommendation] = field(default_factory=list)
    white_space: float = field(init=False)

    def __post_init__(self) -> None:
        self.white_space = 1 - self.content_density

    @property
    def is_acceptable(self) -> bool:
        return not self.recommendations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content_density": self.content_density,
            "visual_balance": self.visual_balance,
            "readability": self.readability,
            "white_space": self.white_space,
            "hierarchy": self.hierarchy,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class LayoutResult:
    """Optimizer output: repositioned blocks, the analysis that drove the
    corrections, and the analysis of the corrected layout."""
    blocks: List[ContentBlock]
    analysis: LayoutAnalysis
    final_analysis: LayoutAnalysis
    applied_passes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "analysis": self.analysis.to_dict(),
            "final_analysis": self.final_analysis.to_dict(),
            "applied_passes": list(self.applied_passes),
        }


# ---------------------------
# Content analysis
# ---------------------------
@dataclass
class SectionOutline:
    title: str
    level: int
    elements: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DocumentStructure:
    headings: Dict[str, int] = field(default_factory=lambda: {"h1": 0, "h2": 0, "h3": 0, "total": 0})
    paragraphs: int = 0
    lists: int = 0
    tables: int = 0
    images: int = 0
    links: int = 0
    sections: List[SectionOutline] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ContentAnalysis:
    """
    Whole-document (or per-section) content report.

    Fields:
    - structure: Structural counts and the section outline
    - complexity: Readability/structure complexity in [0, 1]
    - topics: Top terms by frequency (max 10)
    - sentiment: Lexicon-based sentiment
    - key_points: Headings, emphasized spans, paragraph lead sentences (max 15)
    - suggestions: Content improvement suggestions in emission order
    - pattern / pattern_confidence: Detected layout pattern
    """
    structure: DocumentStructure
    complexity: float
    topics: List[str] = field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    key_points: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    pattern: LayoutPattern = LayoutPattern.DOCUMENT
    pattern_confidence: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "structure": self.structure.to_dict(),
            "complexity": self.complexity,
            "topics": list(self.topics),
            "sentiment": self.sentiment.value,
            "key_points": list(self.key_points),
            "suggestions": list(self.suggestions),
            "pattern": self.pattern.value,
            "pattern_confidence": self.pattern_confidence,
        }


# ---------------------------
# Final deck
# ---------------------------
@dataclass
class SlideLayout:
    """One section laid out on one canvas"""
    section: Section
    blocks: List[ContentBlock]
    layout: LayoutAnalysis
    final_layout: LayoutAnalysis
    content: Optional[ContentAnalysis] = None
    charts: List[ChartSpec] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "section": {k: v for k, v in self.section.to_dict().items() if k != "blocks"},
            "blocks": [b.to_dict() for b in self.blocks],
            "layout": self.layout.to_dict(),
            "final_layout": self.final_layout.to_dict(),
            "content": self.content.to_dict() if self.content else None,
            "charts": [c.to_dict() for c in self.charts],
        }


@dataclass
class Deck:
    """
    Pipeline output consumed by an external renderer.

    Fields:
    - version: Output schema version
    - canvas: Canvas every slide was laid out on
    - analysis: Whole-document content analysis
    - slides: One SlideLayout per section, in document order
    """
    version: str
    canvas: CanvasSize
    analysis: ContentAnalysis
    slides: List[SlideLayout] = field(default_factory=list)

    @property
    def sections(self) -> List[Section]:
        return [s.section for s in self.slides]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "canvas": self.canvas.to_dict(),
            "analysis": self.analysis.to_dict(),
            "slides": [s.to_dict() for s in self.slides],
        }
