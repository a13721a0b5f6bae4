"""
Block builder: tree nodes -> annotated ContentBlocks

Overview
- `iter_content_nodes` flattens generic containers (div, main, header, ...)
  into the content nodes they hold, in document order.
- `BlockBuilder.build` classifies a content node into a BlockType, extracts the
  type-specific payload, and scores importance and visual weight.

Importance scoring (1-5 scale, normalized to [0, 1])
- Base 3; level-1 heading 5, other headings/tables/callouts 4
- Position bias: first 3 blocks +1, blocks after the 20th -1
- More than 100 words +1; paragraphs under 10 words -1
- Important keywords +1, emphasis +0.5, class/id hints +1
"""

from __future__ import annotations
import logging
import math
from dataclasses import replace
from typing import Iterator, List, Optional

from ..core.config import Config
from ..core.types import BlockType, ContentBlock, ImageData, TableData
from .tree import DocumentNode, NodeKind

logger = logging.getLogger(__name__)

IMPORTANT_KEYWORDS = (
    "important", "critical", "key", "essential", "must", "required",
    "summary", "conclusion", "overview", "introduction",
    "warning", "caution", "note", "attention",
)
IMPORTANCE_HINTS = ("important", "primary", "key", "main", "hero", "featured")
CALLOUT_HINTS = ("callout", "alert", "note", "tip", "warning")
EMPHASIS_TAGS = ("strong", "b", "em", "mark")

def is_callout(node: DocumentNode) -> bool:
    if node.is_text:
        return False
    hints = " ".join(node.classes) + " " + (node.attrs.get("id") or "").lower()
    return any(h in hints for h in CALLOUT_HINTS)


def _is_leaf_container(node: DocumentNode) -> bool:
    """A container whose children are all inline/text acts like a paragraph."""
    return all(c.kind in (NodeKind.TEXT, NodeKind.INLINE) for c in node.children)


def iter_content_nodes(node: DocumentNode) -> Iterator[DocumentNode]:
    """
    Yield the content nodes under `node` in document order.

    Containers are walked through unless they hold only inline content or are
    callouts; whitespace-only text is dropped.
    """
    for child in node.children:
        if child.is_text:
            if child.data.strip():
                yield child
            continue
        kind = child.kind
        if kind in (NodeKind.CONTAINER, NodeKind.SECTIONING):
            if is_callout(child) or _is_leaf_container(child):
                yield child
            else:
                yield from iter_content_nodes(child)
        else:
            yield child


def _table_from_node(node: DocumentNode) -> TableData:
    rows = node.find_all("tr")
    if not rows:
        return TableData()

    def cells(tr: DocumentNode) -> List[DocumentNode]:
        return [c for c in tr.elements if c.tag in ("td", "th")]

    first = rows[0]
    in_thead = any(tr is first for head in node.find_all("thead") for tr in head.find_all("tr"))
    has_header = in_thead or any(c.tag == "th" for c in cells(first))
    headers = [c.text for c in cells(first)] if has_header else []
    body = rows[1:] if has_header else rows
    return TableData(headers=headers, rows=[[c.text for c in cells(tr)] for tr in body])


def _list_items(node: DocumentNode) -> List[str]:
    items = [c.text for c in node.elements if c.tag in ("li", "dt", "dd")]
    if not items:
        items = [li.text for li in node.find_all("li")]
    return [i for i in items if i]


def _image_from_node(node: DocumentNode) -> ImageData:
    img = node if node.tag == "img" else node.find("img")
    alt = ""
    src = None
    if img is not None:
        alt = img.attrs.get("alt", "")
        src = img.attrs.get("src")
    if not alt:
        caption = node.find("figcaption")
        alt = caption.text if caption is not None else ""
    count = 1 if node.tag == "img" else max(len(node.find_all("img")), 1)
    return ImageData(src=src, alt=alt, count=count)


class BlockBuilder:
    """Classify content nodes and score them."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def classify(self, node: DocumentNode) -> BlockType:
        kind = node.kind
        if is_callout(node) or kind == NodeKind.QUOTE:
            return BlockType.QUOTE
        if kind == NodeKind.LIST:
            return BlockType.LIST
        if kind == NodeKind.TABLE:
            return BlockType.TABLE
        if kind == NodeKind.IMAGE:
            return BlockType.IMAGE
        return BlockType.TEXT

    def build(self, node: DocumentNode, position: int, block_id: Optional[str] = None) -> Optional[ContentBlock]:
        """
        Build an annotated ContentBlock from a content node.

        Returns None for nodes without usable content (empty text, empty list,
        table without rows).
        """
        block_type = self.classify(node)
        if block_type == BlockType.TABLE:
            content = _table_from_node(node)
            if not content.rows and not content.headers:
                logger.debug(f"Skipping empty table at position {position}")
                return None
        elif block_type == BlockType.LIST:
            content = _list_items(node)
            if not content:
                return None
        elif block_type == BlockType.IMAGE:
            content = _image_from_node(node)
        else:
            content = node.text
            if not content:
                return None

        block = ContentBlock(
            id=block_id or f"block-{position}",
            type=block_type,
            content=content,
            level=node.heading_level,
            source_tag=node.tag,
            source=node,
        )
        words = block.word_count
        return replace(
            block,
            visual_weight=self._visual_weight(block_type, words),
            importance=self._importance(node, block_type, block.text, words, position),
        )

    def _visual_weight(self, block_type: BlockType, words: int) -> float:
        base = self.config.block_weights.get(block_type.value, 0.5)
        return base + min(words / 400, 0.2)

    def _importance(self, node: DocumentNode, block_type: BlockType, text: str,
                    words: int, position: int) -> float:
        score = 3.0
        level = node.heading_level
        if level == 1:
            score = 5
        elif level is not None:
            score = 4
        elif block_type == BlockType.TABLE or is_callout(node):
            score = 4

        if position < 3:
            score += 1
        if position > 20:
            score -= 1

        if words > 100:
            score += 1
        if words < 10 and block_type == BlockType.TEXT and level is None:
            score -= 1

        lower = text.lower()
        if any(k in lower for k in IMPORTANT_KEYWORDS):
            score += 1
        if not node.is_text and node.find(*EMPHASIS_TAGS) is not None:
            score += 0.5
        if not node.is_text:
            hints = " ".join(node.classes) + " " + (node.attrs.get("id") or "").lower()
            if any(h in hints for h in IMPORTANCE_HINTS):
                score += 1

        level_score = max(1, min(5, math.floor(score + 0.5)))
        return level_score / 5
