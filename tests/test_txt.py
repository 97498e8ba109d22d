import io

from inkwell.docs import Document, Paragraph, Segment, Style
from inkwell.docs.txt import PLAIN_TEXT, read_txt, write_txt


def test_blank_lines_split_paragraphs():
    doc = PLAIN_TEXT.loads("first line\nsecond line\n\n  \nnext\n")
    assert [p.text for p in doc.paragraphs] == ["first line\nsecond line", "next"]
    assert all(p.heading is None for p in doc.paragraphs)


def test_dumps_drops_styles_and_headings():
    doc = Document(paragraphs=[
        Paragraph(segments=[Segment("Title")], heading=1),
        Paragraph(segments=[Segment("a "), Segment("b", {Style.BOLD})]),
    ])
    assert PLAIN_TEXT.dumps(doc) == "Title\n\na b"


def test_decode_from_stream():
    doc = PLAIN_TEXT.loads(io.StringIO("only"))
    assert doc.paragraphs == [Paragraph(segments=[Segment("only")])]


def test_read_and_write_files(tmp_path):
    src = tmp_path / "notes.txt"
    src.write_text("one\n\ntwo", encoding="utf-8")
    doc = read_txt(str(src))
    assert [p.text for p in doc.paragraphs] == ["one", "two"]

    out = write_txt(doc, str(tmp_path / "copy.txt"))
    assert out == str(tmp_path / "copy.txt")
    assert (tmp_path / "copy.txt").read_text(encoding="utf-8") == "one\n\ntwo"
