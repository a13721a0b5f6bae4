import pytest

from deckflow.core.config import Config
from deckflow.core.types import BlockType, ContentBlock, ImageData, Section, SectionType, TableData
from deckflow.pipeline.segmenter import Segmenter, section_complexity, section_type
from deckflow.pipeline.tree import DocumentNode, parse_html


def _words(n: int, word: str = "lorem") -> str:
    return " ".join([word] * n)


def _text_block(i: int, words: int) -> ContentBlock:
    return ContentBlock(id=f"block-{i}", type=BlockType.TEXT, content=_words(words))


def _section(i: int, word_counts, complexity: float = 0.0) -> Section:
    blocks = [_text_block(i * 10 + j, w) for j, w in enumerate(word_counts)]
    return Section(id=f"sec_{i}", title=f"S{i}", blocks=blocks, complexity=complexity)


def test_heading_mode_sections():
    root = parse_html(
        "<body><h1>Intro</h1><p>one two three</p>"
        "<h2>Alpha</h2><p>four five</p><h4>Minor</h4><p>six</p>"
        "<h2>Beta</h2><p>seven</p></body>"
    )
    sections = Segmenter(Config()).initial_sections(root)
    assert [s.title for s in sections] == ["Intro", "Alpha", "Beta"]
    assert [s.level for s in sections] == [1, 2, 2]
    # h4 stays inside the current section as a text block
    assert [b.text for b in sections[1].blocks] == ["four five", "Minor", "six"]
    assert sections[1].blocks[1].level == 4


def test_leading_content_section_title():
    root = parse_html("<body><p>Welcome deck</p><h2>Next</h2><p>body text</p></body>")
    sections = Segmenter().initial_sections(root)
    assert [s.title for s in sections] == ["Welcome deck", "Next"]
    assert sections[0].level == 0


def test_leading_content_long_first_line_falls_back_to_slide():
    root = parse_html(f"<body><p>{_words(40, 'verbose')}</p><h2>Next</h2><p>x</p></body>")
    sections = Segmenter().initial_sections(root)
    assert sections[0].title == "Slide"


def test_semantic_mode_uses_outermost_sections():
    root = parse_html(
        "<body><section><h2>One</h2><p>a b</p>"
        "<section><h3>Inner</h3><p>c</p></section></section>"
        "<article><p>no heading here</p></article></body>"
    )
    sections = Segmenter().initial_sections(root)
    assert [s.title for s in sections] == ["One", "Section 2"]
    # the opening heading is the title, not a block
    assert [b.text for b in sections[0].blocks] == ["a b", "Inner", "c"]
    assert sections[1].level == 0


def test_empty_document_yields_no_sections():
    assert Segmenter().segment(DocumentNode(tag="#document")) == []


def test_target_slide_count():
    seg = Segmenter(Config())
    sections = [_section(i, [250]) for i in range(3)]
    assert seg.target_slide_count(sections) == 8
    assert seg.target_slide_count(sections, hint=5) == 5

    complex_sections = [_section(i, [250], complexity=1.0) for i in range(3)]
    assert seg.target_slide_count(complex_sections) == 15

    assert seg.target_slide_count([_section(0, [10000])]) == 50
    assert seg.target_slide_count([_section(0, [1])]) == 1


def test_target_lower_bound_is_half_the_sections():
    seg = Segmenter()
    sections = [_section(i, [1]) for i in range(9)]
    assert seg.target_slide_count(sections) == 5


def test_split_largest_sections():
    seg = Segmenter()
    big = _section(0, [100, 100, 50, 50])
    small = _section(1, [10])
    result = seg.reconcile([big, small], target=4)
    assert [s.title for s in result] == ["S0", "S0 (cont.)", "S1"]
    assert [len(s.blocks) for s in result] == [2, 2, 1]
    assert [s.id for s in result] == ["sec_0", "sec_1", "sec_2"]
    assert sum(s.word_count for s in result) == 310


def test_merge_bundles():
    seg = Segmenter()
    sections = [_section(i, [5], complexity=i / 10) for i in range(6)]
    result = seg.reconcile(sections, target=2)
    assert [s.title for s in result] == ["S0", "S3"]
    assert [len(s.blocks) for s in result] == [3, 3]
    assert result[0].complexity == pytest.approx(0.1)
    assert sum(s.word_count for s in result) == 30


def test_equal_and_lone_section_unchanged():
    seg = Segmenter()
    lone = _section(0, [500, 500])
    assert len(seg.reconcile([lone], target=1)) == 1
    sections = [_section(i, [5]) for i in range(3)]
    assert [s.title for s in seg.reconcile(sections, target=3)] == ["S0", "S1", "S2"]


def test_reconcile_does_not_mutate_input():
    seg = Segmenter()
    sections = [_section(i, [5]) for i in range(4)]
    sections[2].id = "custom"
    seg.reconcile(sections, target=4)
    assert sections[2].id == "custom"


@pytest.mark.parametrize("html,hint", [
    ("<h1>A</h1>" + "".join(f"<p>{_words(80)}</p>" for _ in range(6)), None),
    ("".join(f"<h2>T{i}</h2><p>{_words(3)}</p>" for i in range(12)), None),
    ("".join(f"<section><h2>T{i}</h2><p>{_words(30 * i + 1)}</p><p>{_words(7)}</p></section>"
             for i in range(5)), 3),
])
def test_word_count_conserved(html, hint):
    seg = Segmenter()
    root = parse_html(f"<body>{html}</body>")
    before = sum(s.word_count for s in seg.initial_sections(root))
    after = seg.segment(root, slide_hint=hint)
    assert sum(s.word_count for s in after) == before
    assert 1 <= len(after) <= 50


def test_section_type_and_complexity():
    table = ContentBlock(id="t", type=BlockType.TABLE, content=TableData(["a"], [["1"]]))
    image = ContentBlock(id="i", type=BlockType.IMAGE, content=ImageData(alt="pic"))
    lst = ContentBlock(id="l", type=BlockType.LIST, content=[str(i) for i in range(6)])
    quote = ContentBlock(id="q", type=BlockType.QUOTE, content="said")

    assert section_type([], level=1) == SectionType.TITLE
    assert section_type([image, image, image]) == SectionType.GALLERY
    assert section_type([table, lst]) == SectionType.DATA
    assert section_type([quote]) == SectionType.QUOTE
    assert section_type([lst]) == SectionType.LIST
    assert section_type([_text_block(0, 3)]) == SectionType.CONTENT

    assert section_complexity([table, lst, image]) == pytest.approx(0.6)
    assert section_complexity([table] * 5) == 1.0
