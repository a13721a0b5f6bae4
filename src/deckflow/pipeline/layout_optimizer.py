"""
Layout optimizer: score a block layout on a canvas and correct it

Scores (all in [0, 1]):
- content_density: total block area / canvas area
- visual_balance: 1 - distance(weighted centroid, canvas center) / max distance
- readability: text length and characters-per-sentence steps, averaged over text blocks
- white_space: 1 - content_density
- hierarchy: distinct importance values / block count

Correction passes run in a fixed order, each only when the initial analysis
trips its threshold:
1. reduce_density      (density > max_density)
2. improve_balance     (balance < min_balance)
3. enhance_readability (readability < min_readability)
4. increase_white_space (white_space < min_white_space)
5. establish_hierarchy (hierarchy < min_hierarchy, and an earlier pass ran)
Anchoring onto rule-of-thirds / golden-ratio points always runs last.
"""

from __future__ import annotations
import logging
import math
import re
from collections import Counter
from dataclasses import replace
from typing import List, Optional, Sequence

from ..core.config import Config
from ..core.types import (
    BlockType,
    CanvasSize,
    ContentBlock,
    LayoutAnalysis,
    LayoutResult,
    Position,
    Priority,
    Recommendation,
    RecommendationType,
)
from ..core.utils import SENTENCE_SPLIT_RE, clamp01, split_sentences

logger = logging.getLogger(__name__)

DEFAULT_AREAS = {
    BlockType.IMAGE: 4.0,
    BlockType.CHART: 6.0,
    BlockType.TABLE: 6.0,
}
DEFAULT_AREA = 2.0
TEXT_AREA_PER_CHAR = 0.01
TERMINATOR_RE = re.compile(r"([.!?]+)")


def estimated_area(block: ContentBlock) -> float:
    """Block area, or a type-based estimate when the block has no position."""
    if block.position is not None:
        return block.position.area
    if block.type == BlockType.TEXT:
        return len(block.text) * TEXT_AREA_PER_CHAR
    return DEFAULT_AREAS.get(block.type, DEFAULT_AREA)


def _length_score(chars: int) -> float:
    if chars < 50:
        return 1.0
    if chars < 100:
        return 0.8
    if chars < 200:
        return 0.6
    if chars < 400:
        return 0.4
    return 0.2


def _sentence_score(chars_per_sentence: float) -> float:
    if chars_per_sentence < 15:
        return 1.0
    if chars_per_sentence < 25:
        return 0.8
    if chars_per_sentence < 35:
        return 0.6
    return 0.4


def summarize_text(text: str, max_sentences: int = 3) -> str:
    """
    Extractive summary: keep the `max_sentences` best-scoring sentences in
    their original order.

    A sentence scores the summed corpus frequency of its words longer than
    4 characters, divided by its word count. Texts with no more sentences
    than requested are returned unchanged.
    """
    sentences = split_sentences(text)
    if len(sentences) <= max_sentences:
        return text

    freq = Counter(w for w in text.lower().split() if len(w) > 4)

    scored = []
    for i, sentence in enumerate(sentences):
        words = sentence.lower().split()
        score = sum(freq[w] for w in words) / len(words) if words else 0.0
        scored.append((score, i))

    # Highest score first, earlier sentence on ties
    top = sorted(scored, key=lambda t: (-t[0], t[1]))[:max_sentences]
    keep = sorted(i for _, i in top)
    return ". ".join(sentences[i] for i in keep) + "."


class LayoutOptimizer:
    """
    Analyze and improve block layouts on a fixed canvas.

    Example:
        >>> optimizer = LayoutOptimizer(Config())
        >>> result = optimizer.optimize(blocks, CanvasSize(10, 5.625))
        >>> result.final_analysis.recommendations
        []
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    # ---------------------------
    # Analysis
    # ---------------------------
    def analyze(self, blocks: Sequence[ContentBlock], canvas: CanvasSize) -> LayoutAnalysis:
        density = self.content_density(blocks, canvas)
        analysis = LayoutAnalysis(
            content_density=density,
            visual_balance=self.visual_balance(blocks, canvas),
            readability=self.readability(blocks),
            hierarchy=self.hierarchy(blocks),
        )
        analysis.recommendations = self.recommendations(analysis)
        return analysis

    def content_density(self, blocks: Sequence[ContentBlock], canvas: CanvasSize) -> float:
        if canvas.area <= 0:
            logger.warning(f"Zero-area canvas {canvas.width}x{canvas.height}, density forced to 1")
            return 1.0
        return clamp01(sum(estimated_area(b) for b in blocks) / canvas.area)

    def visual_balance(self, blocks: Sequence[ContentBlock], canvas: CanvasSize) -> float:
        if not blocks or canvas.area <= 0:
            return 1.0

        cx, cy = canvas.center
        total = sum_x = sum_y = 0.0
        for b in blocks:
            weight = b.visual_weight or 0.5
            bx, by = b.position.center if b.position is not None else (cx, cy)
            sum_x += bx * weight
            sum_y += by * weight
            total += weight

        distance = math.hypot(sum_x / total - cx, sum_y / total - cy)
        max_distance = math.hypot(cx, cy)
        return clamp01(1 - distance / max_distance)

    def readability(self, blocks: Sequence[ContentBlock]) -> float:
        texts = [b.text for b in blocks if b.type == BlockType.TEXT]
        if not texts:
            return 0.8

        total = 0.0
        for text in texts:
            pieces = max(len(SENTENCE_SPLIT_RE.split(text)), 1)
            total += (_length_score(len(text)) + _sentence_score(len(text) / pieces)) / 2
        return total / len(texts)

    @staticmethod
    def hierarchy(blocks: Sequence[ContentBlock]) -> float:
        if len(blocks) < 2:
            return 1.0
        return min(len({b.importance for b in blocks}) / len(blocks), 1.0)

    def recommendations(self, analysis: LayoutAnalysis) -> List[Recommendation]:
        c = self.config
        recs = []
        if analysis.content_density > c.max_density:
            recs.append(Recommendation(
                RecommendationType.SPLIT, Priority.HIGH,
                "Content is too dense. Consider splitting into multiple slides.",
            ))
        if analysis.visual_balance < c.min_balance:
            recs.append(Recommendation(
                RecommendationType.REORDER, Priority.MEDIUM,
                "Layout is unbalanced. Redistribute content for better visual flow.",
            ))
        if analysis.readability < c.min_readability:
            recs.append(Recommendation(
                RecommendationType.SIMPLIFY, Priority.HIGH,
                "Text is too complex. Simplify and use bullet points.",
            ))
        if analysis.white_space < c.min_white_space:
            recs.append(Recommendation(
                RecommendationType.RESIZE, Priority.MEDIUM,
                "Insufficient white space. Reduce content size or increase margins.",
            ))
        return recs

    # ---------------------------
    # Optimization
    # ---------------------------
    def optimize(self, blocks: Sequence[ContentBlock], canvas: CanvasSize) -> LayoutResult:
        c = self.config
        analysis = self.analyze(blocks, canvas)
        current = list(blocks)
        applied = []

        if analysis.content_density > c.max_density:
            current = self.reduce_density(current)
            applied.append("reduce_density")
        if analysis.visual_balance < c.min_balance:
            current = self.improve_balance(current, canvas)
            applied.append("improve_balance")
        if analysis.readability < c.min_readability:
            current = self.enhance_readability(current)
            applied.append("enhance_readability")
        if analysis.white_space < c.min_white_space:
            current = self.increase_white_space(current)
            applied.append("increase_white_space")
        # only on top of another pass, so an acceptable layout is left as is
        if applied and analysis.hierarchy < c.min_hierarchy:
            current = self.establish_hierarchy(current)
            applied.append("establish_hierarchy")

        current = self.apply_anchors(current, canvas)
        final = self.analyze(current, canvas)

        if applied:
            logger.info(f"Layout passes applied: {', '.join(applied)}")
        if not final.is_acceptable:
            logger.debug(f"Layout still has {len(final.recommendations)} open recommendations")
        logger.debug(
            f"Layout {len(current)} blocks: density {analysis.content_density:.2f} -> "
            f"{final.content_density:.2f}, balance {analysis.visual_balance:.2f} -> {final.visual_balance:.2f}"
        )
        return LayoutResult(blocks=current, analysis=analysis, final_analysis=final, applied_passes=applied)

    def reduce_density(self, blocks: List[ContentBlock]) -> List[ContentBlock]:
        c = self.config
        out = []
        for b in blocks:
            if b.type == BlockType.TEXT and len(b.text) > c.summary_min_chars:
                b = replace(b, content=summarize_text(b.content, c.summary_sentences))
            if b.position is not None:
                b = replace(b, position=b.position.scaled(c.density_shrink))
            out.append(b)
        return out

    def improve_balance(self, blocks: List[ContentBlock], canvas: CanvasSize) -> List[ContentBlock]:
        """
        Re-place blocks by descending visual weight: symmetric left/right pairs
        for an even count, golden-ratio columns for an odd count.
        """
        ordered = sorted(blocks, key=lambda b: -(b.visual_weight or 0.5))
        n = len(ordered)
        if n == 0:
            return ordered
        W, H = canvas.width, canvas.height

        out = []
        if n % 2 == 0:
            pairs = n // 2
            for i, b in enumerate(ordered):
                row = i // 2
                cx = W * (0.25 if i % 2 == 0 else 0.75)
                cy = (row + 1) * H / (pairs + 1)
                out.append(replace(b, position=Position.centered_on(cx, cy, W * 0.2, H * 0.2)))
            return out

        phi = self.config.golden_ratio
        left_w = W / phi
        right_w = W - left_w
        rows = math.ceil(n / 2)
        row_h = H / (rows + 1)
        for i, b in enumerate(ordered):
            row = i // 2
            if i % 2 == 0:
                cx, col_w = left_w / 2, left_w
            else:
                cx, col_w = left_w + right_w / 2, right_w
            cy = (row + 1) * row_h
            out.append(replace(b, position=Position.centered_on(cx, cy, col_w * 0.8, row_h * 0.8)))
        return out

    def enhance_readability(self, blocks: List[ContentBlock]) -> List[ContentBlock]:
        out = []
        for b in blocks:
            if b.type != BlockType.TEXT:
                out.append(b)
                continue
            sentences = split_sentences(b.content)
            if len(sentences) > 3:
                items = sentences[:self.config.bullet_max_items]
                out.append(replace(b, type=BlockType.LIST, content=items))
            else:
                out.append(replace(b, content=self._break_long_sentences(b.content)))
        return out

    def _break_long_sentences(self, text: str) -> str:
        """Break sentences over the word limit at their midpoint; terminators and spacing are kept."""
        limit = self.config.long_sentence_words
        parts = TERMINATOR_RE.split(text)
        if not any(len(p.split()) > limit for p in parts):
            return text

        out = []
        for part in parts:
            words = part.split()
            if len(words) > limit:
                lead = part[:len(part) - len(part.lstrip())]
                mid = len(words) // 2
                part = lead + " ".join(words[:mid]) + ".\n" + " ".join(words[mid:])
            out.append(part)
        return "".join(out)

    def increase_white_space(self, blocks: List[ContentBlock]) -> List[ContentBlock]:
        margin = self.config.white_space_margin
        return [replace(b, position=b.position.inset(margin)) if b.position is not None else b for b in blocks]

    def establish_hierarchy(self, blocks: List[ContentBlock]) -> List[ContentBlock]:
        """Scale blocks down by importance rank; the most important keeps its size."""
        c = self.config
        ordered = sorted(blocks, key=lambda b: -b.importance)
        out = []
        for rank, b in enumerate(ordered):
            if b.position is not None:
                scale = max(1 - c.hierarchy_step * rank, c.min_hierarchy_scale)
                b = replace(b, position=b.position.scaled(scale))
            out.append(b)
        return out

    def apply_anchors(self, blocks: List[ContentBlock], canvas: CanvasSize) -> List[ContentBlock]:
        """
        Center the five most important blocks on the rule-of-thirds
        intersections and the golden-ratio point (W/2, H/phi).
        """
        W, H = canvas.width, canvas.height
        anchors = [
            (W / 3, H / 3),
            (2 * W / 3, H / 3),
            (W / 3, 2 * H / 3),
            (2 * W / 3, 2 * H / 3),
            (W / 2, H / self.config.golden_ratio),
        ]
        fraction = self.config.anchor_default_fraction

        ordered = sorted(blocks, key=lambda b: -b.importance)
        out = []
        for i, b in enumerate(ordered):
            if i < len(anchors):
                ax, ay = anchors[i]
                if b.position is not None:
                    w, h = b.position.w, b.position.h
                else:
                    w, h = W * fraction, H * fraction
                b = replace(b, position=Position.centered_on(ax, ay, w, h))
            out.append(b)
        return out
