"""
Document tree traversal interface.

The pipeline never touches a markup parser's objects directly. A parser
collaborator hands over a `DocumentNode` tree (tag, attributes, children,
text); `parse_html` adapts BeautifulSoup output into that shape.

Node kinds
- HEADING: h1-h6
- SECTIONING: section, article
- PARAGRAPH / LIST / LIST_ITEM / TABLE / IMAGE / QUOTE / CODE: content nodes
- CONTAINER: generic block wrappers walked through (div, main, header, ...)
- INLINE: spans, emphasis, links
- TEXT: character data
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from ..core.utils import collapse_spaces

logger = logging.getLogger(__name__)

TEXT_TAG = "#text"

HEADING_RE = re.compile(r"^h([1-6])$")

SKIP_TAGS = {"script", "style", "meta", "link", "noscript", "template", "head", "title"}

BLOCK_TAGS = {
    "html", "body", "main", "div", "section", "article", "header", "footer", "aside", "nav",
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "li", "dl", "dt", "dd",
    "table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption",
    "blockquote", "pre", "figure", "figcaption", "br", "hr",
}


class NodeKind(Enum):
    HEADING = "heading"
    SECTIONING = "sectioning"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    IMAGE = "image"
    QUOTE = "quote"
    CODE = "code"
    CONTAINER = "container"
    INLINE = "inline"
    TEXT = "text"


_KIND_BY_TAG = {
    "section": NodeKind.SECTIONING,
    "article": NodeKind.SECTIONING,
    "p": NodeKind.PARAGRAPH,
    "ul": NodeKind.LIST,
    "ol": NodeKind.LIST,
    "dl": NodeKind.LIST,
    "li": NodeKind.LIST_ITEM,
    "table": NodeKind.TABLE,
    "img": NodeKind.IMAGE,
    "figure": NodeKind.IMAGE,
    "svg": NodeKind.IMAGE,
    "canvas": NodeKind.IMAGE,
    "video": NodeKind.IMAGE,
    "blockquote": NodeKind.QUOTE,
    "pre": NodeKind.CODE,
}

_CONTAINER_TAGS = {"html", "body", "main", "div", "header", "footer", "aside", "nav", "#document"}


@dataclass
class DocumentNode:
    """
    Minimal markup node.

    - tag: lower-case element name, or '#text' for character data
    - children: ordered child nodes (elements and text)
    - attrs: element attributes (multi-valued attributes joined by spaces)
    - data: character data for text nodes
    """
    tag: str
    children: List[DocumentNode] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)
    data: str = ""

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_TAG

    @property
    def kind(self) -> NodeKind:
        if self.is_text:
            return NodeKind.TEXT
        if HEADING_RE.match(self.tag):
            return NodeKind.HEADING
        if self.tag in _KIND_BY_TAG:
            return _KIND_BY_TAG[self.tag]
        if self.tag in _CONTAINER_TAGS:
            return NodeKind.CONTAINER
        if self.tag == "code":
            return NodeKind.INLINE
        return NodeKind.CONTAINER if self.tag in BLOCK_TAGS else NodeKind.INLINE

    @property
    def heading_level(self) -> Optional[int]:
        m = HEADING_RE.match(self.tag)
        return int(m.group(1)) if m else None

    @property
    def classes(self) -> List[str]:
        return (self.attrs.get("class") or "").lower().split()

    @property
    def text(self) -> str:
        """Text content of the subtree with whitespace collapsed."""
        return collapse_spaces(self._raw_text())

    def _raw_text(self) -> str:
        if self.is_text:
            return self.data
        parts = []
        for child in self.children:
            if not child.is_text and child.tag in BLOCK_TAGS:
                parts.append(" " + child._raw_text() + " ")
            else:
                parts.append(child._raw_text())
        return "".join(parts)

    @property
    def elements(self) -> List[DocumentNode]:
        """Child element nodes (text nodes excluded)."""
        return [c for c in self.children if not c.is_text]

    def iter(self) -> Iterator[DocumentNode]:
        """Descendant elements in document order (pre-order, self excluded)."""
        for child in self.elements:
            yield child
            yield from child.iter()

    def find_all(self, *tags: str) -> List[DocumentNode]:
        wanted = set(tags)
        return [n for n in self.iter() if n.tag in wanted]

    def find(self, *tags: str) -> Optional[DocumentNode]:
        wanted = set(tags)
        for n in self.iter():
            if n.tag in wanted:
                return n
        return None

    def first_heading(self) -> Optional[DocumentNode]:
        for n in self.iter():
            if n.kind == NodeKind.HEADING:
                return n
        return None

    def __repr__(self) -> str:
        if self.is_text:
            return f"DocumentNode(#text {self.data[:20]!r})"
        return f"DocumentNode(<{self.tag}> children={len(self.children)})"


def element(tag: str, *children: Union[DocumentNode, str], **attrs: str) -> DocumentNode:
    """
    Build an element node; string children become text nodes.

    A trailing underscore in an attribute name is dropped (class_ -> class).

    Examples:
        >>> element("p", "Hello ", element("strong", "world")).text
        'Hello world'
    """
    kids = [c if isinstance(c, DocumentNode) else text_node(c) for c in children]
    return DocumentNode(tag=tag.lower(), children=kids, attrs={k.rstrip("_"): v for k, v in attrs.items()})


def text_node(data: str) -> DocumentNode:
    return DocumentNode(tag=TEXT_TAG, data=data)


# ---------------------------
# BeautifulSoup adapter
# ---------------------------
_IGNORED_STRINGS = (Comment, Doctype, Declaration, ProcessingInstruction, CData)


def _convert(tag: Tag) -> DocumentNode:
    attrs = {
        k: " ".join(v) if isinstance(v, (list, tuple)) else str(v)
        for k, v in (tag.attrs or {}).items()
    }
    node = DocumentNode(tag=(tag.name or "").lower(), attrs=attrs)
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name and child.name.lower() in SKIP_TAGS:
                continue
            node.children.append(_convert(child))
        elif isinstance(child, NavigableString) and not isinstance(child, _IGNORED_STRINGS):
            node.children.append(text_node(str(child)))
    return node


def parse_html(html: str) -> DocumentNode:
    """
    Parse HTML into a DocumentNode tree rooted at <body>.

    Empty or whitespace-only input yields an empty '#document' node.
    """
    if not html or not html.strip():
        return DocumentNode(tag="#document")

    soup = BeautifulSoup(html, "lxml")
    body = soup.body
    if body is None:
        logger.debug("No <body> in markup, converting the whole document")
        root = _convert(soup)
        root.tag = "#document"
        return root
    return _convert(body)
