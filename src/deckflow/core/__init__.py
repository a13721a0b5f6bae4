"""
deckflow core module

Types, configuration and utilities shared by the pipeline stages.
"""

from .types import (
    # Enumerations
    BlockType,
    SectionType,
    ChartType,
    Sentiment,
    LayoutPattern,
    RecommendationType,
    Priority,

    # Geometry
    CanvasSize,
    Position,

    # Block payloads
    TableData,
    ImageData,
    ChartSeries,
    ChartOptions,
    ChartSpec,

    # Content Block / Section
    ContentBlock,
    Section,

    # Analysis Results
    Recommendation,
    LayoutAnalysis,
    LayoutResult,
    SectionOutline,
    DocumentStructure,
    ContentAnalysis,

    # Output
    SlideLayout,
    Deck,
)

from .config import Config, load_config
from .utils import (
    count_words,
    split_sentences,
    extract_keywords,
    parse_number,
    pearson_correlation,
)

__all__ = [
    # Types
    "BlockType",
    "SectionType",
    "ChartType",
    "Sentiment",
    "LayoutPattern",
    "RecommendationType",
    "Priority",
    "CanvasSize",
    "Position",
    "TableData",
    "ImageData",
    "ChartSeries",
    "ChartOptions",
    "ChartSpec",
    "ContentBlock",
    "Section",
    "Recommendation",
    "LayoutAnalysis",
    "LayoutResult",
    "SectionOutline",
    "DocumentStructure",
    "ContentAnalysis",
    "SlideLayout",
    "Deck",

    # Config
    "Config",
    "load_config",

    # Utils
    "count_words",
    "split_sentences",
    "extract_keywords",
    "parse_number",
    "pearson_correlation",
]
