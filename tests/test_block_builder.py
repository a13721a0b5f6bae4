from deckflow.core.config import Config
from deckflow.core.types import BlockType, ImageData, TableData
from deckflow.pipeline.block_builder import BlockBuilder, iter_content_nodes
from deckflow.pipeline.tree import element, parse_html


def test_iter_content_nodes_flattens_containers():
    root = element(
        "body",
        element("div", element("h2", "Heading"), element("div", element("p", "Para"))),
        element("div", "Inline only ", element("span", "text")),
    )
    nodes = list(iter_content_nodes(root))
    assert [n.tag for n in nodes] == ["h2", "p", "div"]
    assert nodes[2].text == "Inline only text"


def test_heading_importance_and_level():
    builder = BlockBuilder(Config())
    block = builder.build(element("h1", "Quarterly Results"), position=0)
    assert block.type == BlockType.TEXT
    assert block.level == 1
    assert block.importance == 1.0
    assert block.id == "block-0"


def test_short_paragraph_importance_drops():
    builder = BlockBuilder(Config())
    block = builder.build(element("p", "Plain words here"), position=10)
    # base 3, short paragraph -1
    assert block.importance == 0.4


def test_table_payload_with_header_row():
    root = parse_html(
        "<table><tr><th>Name</th><th>Score</th></tr>"
        "<tr><td>a</td><td>1</td></tr><tr><td>b</td><td>2</td></tr></table>"
    )
    block = BlockBuilder().build(root.find("table"), position=5)
    assert block.type == BlockType.TABLE
    assert block.content == TableData(headers=["Name", "Score"], rows=[["a", "1"], ["b", "2"]])
    assert block.importance == 0.8


def test_table_without_header_row():
    table = element("table", element("tr", element("td", "x"), element("td", "1")))
    block = BlockBuilder().build(table, position=5)
    assert block.content.headers == []
    assert block.content.rows == [["x", "1"]]


def test_list_image_and_callout():
    builder = BlockBuilder()
    lst = builder.build(element("ul", element("li", "one"), element("li", "two")), position=4)
    assert lst.type == BlockType.LIST
    assert lst.content == ["one", "two"]

    img = builder.build(element("img", src="chart.png", alt="Sales chart"), position=4)
    assert img.type == BlockType.IMAGE
    assert img.content == ImageData(src="chart.png", alt="Sales chart", count=1)

    callout = builder.build(element("div", "Remember to save", class_="callout"), position=4)
    assert callout.type == BlockType.QUOTE


def test_empty_nodes_produce_no_block():
    builder = BlockBuilder()
    assert builder.build(element("p", "   "), position=0) is None
    assert builder.build(element("ul"), position=0) is None
    assert builder.build(element("table"), position=0) is None


def test_visual_weight_from_config():
    config = Config()
    config.block_weights["image"] = 0.6
    block = BlockBuilder(config).build(element("img", alt=""), position=3)
    assert block.visual_weight == 0.6
