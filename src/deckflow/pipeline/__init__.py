"""deckflow pipeline module."""

from .tree import DocumentNode, NodeKind, element, parse_html
from .block_builder import BlockBuilder
from .segmenter import Segmenter
from .content_analyzer import ContentAnalyzer
from .chart_inference import ChartInference
from .layout_optimizer import LayoutOptimizer, summarize_text
from .deck_builder import DeckBuilder

__all__ = [
    "DocumentNode",
    "NodeKind",
    "element",
    "parse_html",
    "BlockBuilder",
    "Segmenter",
    "ContentAnalyzer",
    "ChartInference",
    "LayoutOptimizer",
    "summarize_text",
    "DeckBuilder",
]
