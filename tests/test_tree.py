import pytest

from deckflow.pipeline.tree import DocumentNode, NodeKind, element, parse_html, text_node


def test_parse_html_roots_at_body_and_drops_scripts():
    """parse_html roots the tree at <body> and drops script/style."""
    root = parse_html(
        "<html><head><title>T</title></head>"
        "<body><h1>Title</h1><p>Hello <b>world</b></p><script>var x = 1;</script></body></html>"
    )
    assert root.tag == "body"
    assert root.find("h1").text == "Title"
    assert root.find("p").text == "Hello world"
    assert root.find("script") is None
    assert "var x" not in root.text


def test_parse_html_empty_input():
    root = parse_html("   ")
    assert root.tag == "#document"
    assert root.children == []
    assert root.text == ""


def test_parse_html_skips_comments():
    root = parse_html("<body><!-- hidden --><p>visible</p></body>")
    assert root.text == "visible"


def test_element_helper_and_kinds():
    node = element("div", element("p", "a"), element("p", "b"), class_="Hero Main")
    assert node.attrs["class"] == "Hero Main"
    assert node.classes == ["hero", "main"]
    # block children are separated by whitespace
    assert node.text == "a b"
    assert node.kind == NodeKind.CONTAINER
    assert element("h2", "x").kind == NodeKind.HEADING
    assert element("h2", "x").heading_level == 2
    assert element("section").kind == NodeKind.SECTIONING
    assert element("span", "x").kind == NodeKind.INLINE
    assert text_node("x").kind == NodeKind.TEXT


def test_iter_is_preorder_document_order():
    root = element("body", element("h1", "A"), element("div", element("p", "B"), element("h2", "C")))
    assert [n.tag for n in root.iter()] == ["h1", "div", "p", "h2"]
    assert root.first_heading().text == "A"
    assert [n.text for n in root.find_all("h1", "h2")] == ["A", "C"]


@pytest.mark.parametrize("tag,kind", [
    ("ul", NodeKind.LIST),
    ("table", NodeKind.TABLE),
    ("img", NodeKind.IMAGE),
    ("blockquote", NodeKind.QUOTE),
    ("pre", NodeKind.CODE),
])
def test_content_kinds(tag, kind):
    assert DocumentNode(tag=tag).kind == kind
