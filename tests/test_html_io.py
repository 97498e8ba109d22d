import pytest

from inkwell.docs import Document, Paragraph, Segment, Style, UnsupportedInputType
from inkwell.docs.html_io import HTML, get_styles

B, I, S = Style.BOLD, Style.ITALIC, Style.STRIKETHROUGH


def test_inline_siblings_merge_into_one_paragraph():
    doc = HTML.loads("<span>Hello </span><span>world</span>")
    assert len(doc.paragraphs) == 1
    assert doc.paragraphs[0].segments == [Segment("Hello world")]
    assert doc.paragraphs[0].heading is None


def test_headings_and_tag_styles():
    doc = HTML.loads("<h2>Title</h2><p>Some <b>bold</b> and <em>italic</em> text</p>")
    assert [p.heading for p in doc.paragraphs] == [2, None]
    assert doc.paragraphs[0].text == "Title"
    assert doc.paragraphs[1].segments == [
        Segment("Some "),
        Segment("bold", {B}),
        Segment(" and "),
        Segment("italic", {I}),
        Segment(" text"),
    ]


def test_inline_css_styles():
    doc = HTML.loads(
        '<p><span style="font-weight: 700">heavy</span>'
        '<span style="font-style:italic; ">slanted</span>'
        '<span style="text-decoration: line-through">struck</span>'
        '<span style="font-weight:400">normal</span></p>'
    )
    assert doc.paragraphs[0].segments == [
        Segment("heavy", {B}),
        Segment("slanted", {I}),
        Segment("struck", {S}),
        Segment("normal"),
    ]


def test_styles_are_inherited_by_children():
    doc = HTML.loads("<p><strong>bold <em>both</em></strong> <del>gone</del></p>")
    assert doc.paragraphs[0].segments == [
        Segment("bold ", {B}),
        Segment("both", {B, I}),
        Segment(" "),
        Segment("gone", {S}),
    ]


def test_text_order_is_preserved_around_children():
    doc = HTML.loads("<p>before <i>middle</i> after</p>")
    assert doc.paragraphs[0].text == "before middle after"


def test_get_styles_skips_entries_without_colon():
    from bs4 import BeautifulSoup

    tag = BeautifulSoup('<span style="color; font-weight : bold ;;">x</span>', "html.parser").span
    assert get_styles(tag) == {"font-weight": "bold"}


def test_round_trip():
    doc = Document(paragraphs=[
        Paragraph(segments=[Segment("Head")], heading=1),
        Paragraph(segments=[Segment("a < b & "), Segment("c", {B, I}), Segment(" d", {S})]),
    ])
    text = HTML.dumps(doc)
    assert text == "<h1>Head</h1><p>a &lt; b &amp; <em><strong>c</strong></em><s> d</s></p>"
    assert HTML.loads(text) == doc


def test_empty_input_gives_empty_document():
    assert HTML.loads("") == Document()
    assert HTML.loads("<p></p>") == Document()


def test_body_fallback_without_selected_tags():
    doc = HTML.loads("<div>Just text</div>")
    assert len(doc.paragraphs) == 1
    assert doc.paragraphs[0].text == "Just text"


def test_full_document_fallback_uses_body():
    doc = HTML.loads("<html><head><title>t</title></head><body><div>Body text</div></body></html>")
    assert [p.text for p in doc.paragraphs] == ["Body text"]


def test_newlines_are_not_significant():
    doc = HTML.loads("<p>a\r\nb</p>\n<p>c</p>")
    assert [p.text for p in doc.paragraphs] == ["ab", "c"]


def test_lone_inline_element_is_its_own_paragraph():
    doc = HTML.loads("<div><p>Para</p><b>loose</b></div>")
    assert [p.segments for p in doc.paragraphs] == [[Segment("Para")], [Segment("loose", {B})]]


def test_comments_are_ignored():
    doc = HTML.loads("<p>a<!-- hidden -->b</p>")
    assert doc.paragraphs[0].text == "ab"


def test_unsupported_input_type():
    with pytest.raises(UnsupportedInputType):
        HTML.loads(123)


@pytest.mark.parametrize(
    "css, styles",
    [
        ("font-weight: bold", {B}),
        ("font-weight: BOLDER", {B}),
        ("font-weight: 401", {B}),
        ("font-weight: normal", set()),
        ("font-style: oblique 10deg", {I}),
        ("font-style: normal", set()),
        ("text-decoration-line: underline line-through", {S}),
        ("text-decoration: underline", set()),
    ],
)
def test_css_literal_values(css, styles):
    doc = HTML.loads(f'<p><span style="{css}">x</span></p>')
    assert doc.paragraphs[0].segments == [Segment("x", styles)]
