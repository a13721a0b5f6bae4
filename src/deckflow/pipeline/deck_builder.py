"""
Deck builder: document tree -> laid-out Deck

Pipeline:
1. Segment the tree into Sections
2. Analyze the whole document and each Section
3. Convert table blocks to chart blocks where a chart is inferred
4. Optimize each Section's blocks as one slide on the canvas
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Optional

from ..core.config import Config
from ..core.types import BlockType, CanvasSize, Deck, SlideLayout
from .chart_inference import ChartInference
from .content_analyzer import ContentAnalyzer
from .layout_optimizer import LayoutOptimizer
from .segmenter import Segmenter
from .tree import DocumentNode, parse_html

logger = logging.getLogger(__name__)


class DeckBuilder:
    """
    End-to-end deck layout pipeline.

    Example:
        >>> builder = DeckBuilder(load_config(preset="slide_16_9"))
        >>> deck = builder.build_from_html(html, slide_hint=12)
        >>> payload = deck.to_dict()
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.segmenter = Segmenter(self.config)
        self.analyzer = ContentAnalyzer(self.config, segmenter=self.segmenter)
        self.charts = ChartInference(self.config)
        self.optimizer = LayoutOptimizer(self.config)

    def build(self, root: DocumentNode, slide_hint: Optional[int] = None,
              canvas: Optional[CanvasSize] = None) -> Deck:
        canvas = canvas or self.config.canvas
        sections = self.segmenter.segment(root, slide_hint=slide_hint)
        analysis = self.analyzer.analyze(root)

        slides = []
        for section in sections:
            content = self.analyzer.analyze_section(section)
            blocks = [self.charts.to_chart_block(b) for b in section.blocks]
            charts = [b.content for b in blocks if b.type == BlockType.CHART]
            result = self.optimizer.optimize(blocks, canvas)
            slides.append(SlideLayout(
                section=replace(section, blocks=result.blocks),
                blocks=result.blocks,
                layout=result.analysis,
                final_layout=result.final_analysis,
                content=content,
                charts=charts,
            ))

        logger.info(
            f"✅ Deck built: {len(slides)} slides, {sum(len(s.charts) for s in slides)} charts, "
            f"pattern={analysis.pattern.value}"
        )
        return Deck(version=self.config.version, canvas=canvas, analysis=analysis, slides=slides)

    def build_from_html(self, html: str, slide_hint: Optional[int] = None,
                        canvas: Optional[CanvasSize] = None) -> Deck:
        return self.build(parse_html(html), slide_hint=slide_hint, canvas=canvas)
