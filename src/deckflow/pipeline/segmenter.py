"""
Segmenter: document tree -> ordered Sections reconciled to a slide target

Overview
- Semantic mode: each outermost <section>/<article> becomes one Section
- Heading mode: every h1-h3 opens a new Section; content in between accumulates
- The section count is then split or merged toward a target slide count

Word count is conserved: splitting and merging only move blocks between
Sections, never drop or duplicate them.
"""

from __future__ import annotations
import logging
import math
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from ..core.config import Config
from ..core.types import BlockType, ContentBlock, Section, SectionOutline, SectionType
from .block_builder import BlockBuilder, iter_content_nodes
from .tree import DocumentNode, NodeKind

logger = logging.getLogger(__name__)

MAX_LEAD_TITLE_CHARS = 100


# ---------------------------
# Section scoring
# ---------------------------
def section_complexity(blocks: Iterable[ContentBlock]) -> float:
    """
    Structural complexity: tables 0.3, lists 0.1, images 0.2, code 0.4 each,
    capped at 1.
    """
    score = 0.0
    for b in blocks:
        if b.type in (BlockType.TABLE, BlockType.CHART):
            score += 0.3
        elif b.type == BlockType.LIST:
            score += 0.1
        elif b.type == BlockType.IMAGE:
            score += 0.2 * (b.content.count if b.content else 1)
        elif b.source_tag == "pre":
            score += 0.4
    return min(score, 1.0)


def section_type(blocks: List[ContentBlock], level: int = 0) -> SectionType:
    """Derive the section type from its dominant content."""
    if level == 1 and not any(b.type == BlockType.TEXT for b in blocks):
        return SectionType.TITLE
    images = sum(b.content.count if b.content else 1 for b in blocks if b.type == BlockType.IMAGE)
    if images > 2:
        return SectionType.GALLERY
    if any(b.type in (BlockType.TABLE, BlockType.CHART) for b in blocks):
        return SectionType.DATA
    if any(b.type == BlockType.QUOTE for b in blocks):
        return SectionType.QUOTE
    items = sum(len(b.content) for b in blocks if b.type == BlockType.LIST)
    if items > 5:
        return SectionType.LIST
    return SectionType.CONTENT


def _lead_title(blocks: List[ContentBlock]) -> str:
    for b in blocks:
        line = b.text.strip().split("\n", 1)[0].strip()
        if line:
            return line if len(line) < MAX_LEAD_TITLE_CHARS else "Slide"
    return "Slide"


def outermost_sections(node: DocumentNode) -> List[DocumentNode]:
    """Sectioning nodes that are not nested in another sectioning node."""
    found = []
    for child in node.elements:
        if child.kind == NodeKind.SECTIONING:
            found.append(child)
        else:
            found.extend(outermost_sections(child))
    return found


def _is_section_heading(node: DocumentNode) -> bool:
    level = node.heading_level
    return level is not None and level <= 3


# ---------------------------
# Segmenter
# ---------------------------
class Segmenter:
    """
    Split a DocumentNode tree into Sections.

    Example:
        >>> segmenter = Segmenter(Config())
        >>> sections = segmenter.segment(parse_html(html), slide_hint=10)
    """

    def __init__(self, config: Optional[Config] = None, builder: Optional[BlockBuilder] = None):
        self.config = config or Config()
        self.builder = builder or BlockBuilder(self.config)

    def segment(self, root: DocumentNode, slide_hint: Optional[int] = None) -> List[Section]:
        sections = self.initial_sections(root)
        if not sections:
            logger.info("No content sections found")
            return []

        target = self.target_slide_count(sections, slide_hint)
        result = self.reconcile(sections, target)
        logger.info(f"Segmented {len(sections)} sections into {len(result)} (target {target})")
        return result

    # ---------------------------
    # Extraction
    # ---------------------------
    def initial_sections(self, root: DocumentNode) -> List[Section]:
        """Sections before reconciliation, in document order."""
        semantic = outermost_sections(root)
        if semantic:
            logger.debug(f"Semantic mode: {len(semantic)} sectioning nodes")
            sections = []
            position = 0
            for n, node in enumerate(semantic, start=1):
                heading = node.first_heading()
                blocks, position = self._build_blocks(iter_content_nodes(node), position, skip=heading)
                level = heading.heading_level if heading is not None else 0
                title = heading.text if heading is not None and heading.text else f"Section {n}"
                sections.append(self._make_section(len(sections), title, blocks, level))
            return sections

        return self._heading_sections(root)

    def _heading_sections(self, root: DocumentNode) -> List[Section]:
        groups: List[Tuple[Optional[DocumentNode], List[DocumentNode]]] = []
        heading: Optional[DocumentNode] = None
        members: List[DocumentNode] = []
        for node in iter_content_nodes(root):
            if _is_section_heading(node):
                if heading is not None or members:
                    groups.append((heading, members))
                heading, members = node, []
            else:
                members.append(node)
        if heading is not None or members:
            groups.append((heading, members))

        sections = []
        position = 0
        for heading, members in groups:
            if heading is not None:
                position += 1
            blocks, position = self._build_blocks(members, position)
            if heading is not None:
                title, level = heading.text or "Slide", heading.heading_level
            else:
                title, level = _lead_title(blocks), 0
            if not blocks and heading is None:
                continue
            sections.append(self._make_section(len(sections), title, blocks, level))
        logger.debug(f"Heading mode: {len(sections)} sections")
        return sections

    def _build_blocks(self, nodes: Iterable[DocumentNode], position: int,
                      skip: Optional[DocumentNode] = None) -> Tuple[List[ContentBlock], int]:
        blocks = []
        for node in nodes:
            if node is skip:
                continue
            block = self.builder.build(node, position)
            position += 1
            if block is not None:
                blocks.append(block)
        return blocks, position

    def _make_section(self, index: int, title: str, blocks: List[ContentBlock], level: int) -> Section:
        return Section(
            id=f"sec_{index}",
            title=title,
            blocks=blocks,
            complexity=section_complexity(blocks),
            type=section_type(blocks, level),
            level=level,
        )

    # ---------------------------
    # Reconciliation
    # ---------------------------
    def target_slide_count(self, sections: List[Section], hint: Optional[int] = None) -> int:
        """
        Target slide count from total words and average complexity.

        words_per_slide = max(base - avg_complexity * discount, min_words_per_slide);
        the target is at least ceil(n / 2), at most the hint, clamped to
        [min_slides, max_slides].
        """
        if not sections:
            return self.config.min_slides
        total_words = sum(s.word_count for s in sections)
        avg_complexity = sum(s.complexity for s in sections) / len(sections)
        words_per_slide = max(
            self.config.base_words_per_slide - avg_complexity * self.config.complexity_words_discount,
            self.config.min_words_per_slide,
        )
        target = math.ceil(total_words / words_per_slide)
        target = max(target, math.ceil(len(sections) / 2))
        if hint is not None and hint > 0:
            target = min(target, hint)
        return max(self.config.min_slides, min(self.config.max_slides, target))

    def reconcile(self, sections: List[Section], target: int) -> List[Section]:
        if not sections:
            return []
        if len(sections) < target:
            result = self._split(sections, target - len(sections))
        elif len(sections) > target:
            result = self._merge(sections, target)
        else:
            result = list(sections)
        return [self._renumber(s, i) for i, s in enumerate(result)]

    def _split(self, sections: List[Section], shortfall: int) -> List[Section]:
        splittable = [i for i, s in enumerate(sections) if len(s.blocks) >= 2]
        # Largest first; sorted() is stable so ties keep document order
        chosen = set(sorted(splittable, key=lambda i: -sections[i].word_count)[:shortfall])
        if len(chosen) < shortfall:
            logger.debug(f"Only {len(chosen)} of {shortfall} requested splits possible")

        result = []
        for i, s in enumerate(sections):
            if i not in chosen:
                result.append(s)
                continue
            mid = math.ceil(len(s.blocks) / 2)
            first, second = s.blocks[:mid], s.blocks[mid:]
            result.append(self._make_section(0, s.title, first, s.level))
            result.append(self._make_section(0, f"{s.title} (cont.)", second, s.level))
        return result

    def _merge(self, sections: List[Section], target: int) -> List[Section]:
        size = math.ceil(len(sections) / target)
        result = []
        for start in range(0, len(sections), size):
            bundle = sections[start:start + size]
            head = bundle[0]
            blocks = [b for s in bundle for b in s.blocks]
            result.append(Section(
                id=head.id,
                title=head.title,
                blocks=blocks,
                complexity=sum(s.complexity for s in bundle) / len(bundle),
                type=section_type(blocks, head.level),
                level=head.level,
            ))
        return result

    @staticmethod
    def _renumber(section: Section, index: int) -> Section:
        return replace(section, id=f"sec_{index}")

    # ---------------------------
    # Outline
    # ---------------------------
    def outline_sections(self, root: DocumentNode) -> List[SectionOutline]:
        """Title, level and content-node count of each initial section."""
        semantic = outermost_sections(root)
        if semantic:
            outline = []
            for n, node in enumerate(semantic, start=1):
                heading = node.first_heading()
                count = sum(1 for c in iter_content_nodes(node) if c is not heading)
                outline.append(SectionOutline(
                    title=heading.text if heading is not None and heading.text else f"Section {n}",
                    level=heading.heading_level if heading is not None else 0,
                    elements=count,
                ))
            return outline

        outline: List[SectionOutline] = []
        for node in iter_content_nodes(root):
            if _is_section_heading(node):
                outline.append(SectionOutline(title=node.text, level=node.heading_level))
            elif outline:
                outline[-1].elements += 1
            else:
                outline.append(SectionOutline(title=node.text[:MAX_LEAD_TITLE_CHARS], level=0, elements=1))
        return outline
