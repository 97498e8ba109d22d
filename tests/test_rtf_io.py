import io
import logging
import warnings

import pytest

from inkwell.docs import Document, MalformedToken, Paragraph, Segment, Style, UnsupportedInputType
from inkwell.docs.rtf_io import RTF, RtfCodecGroup, clean_rtf, strip_brace_groups

B, I, S = Style.BOLD, Style.ITALIC, Style.STRIKETHROUGH


def test_repeated_style_word_toggles_off():
    doc = RTF.loads(r"{\rtf1 \b\b text}")
    assert doc.paragraphs[0].segments == [Segment("text")]


def test_single_style_word_applies_until_break():
    doc = RTF.loads(r"{\rtf1 \b bold\par}")
    assert doc.paragraphs == [Paragraph(segments=[Segment("bold", {B})])]


def test_complement_form_turns_style_off():
    doc = RTF.loads(r"{\rtf1 \b Hi\b0  there}")
    assert doc.paragraphs[0].segments == [Segment("Hi", {B}), Segment(" there")]


def test_metadata_groups_are_removed_and_paragraphs_split():
    doc = RTF.loads(r"{\rtf1\ansi{\fonttbl{\f0 Arial;}}\pard First\par Second \i italic\i0\par}")
    assert doc.paragraphs == [
        Paragraph(segments=[Segment("First")]),
        Paragraph(segments=[Segment("Second "), Segment("italic", {I})]),
    ]


def test_typical_clipboard_rtf():
    raw = (
        "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times;}}\n"
        "{\\colortbl;\\red0\\green0\\blue0;}\n"
        "\\pard\\b Hello\\b0  world\\par\n"
        "\\strike old\\strike0  new\\par\n"
        "}"
    )
    doc = RTF.loads(raw)
    assert doc.paragraphs == [
        Paragraph(segments=[Segment("Hello", {B}), Segment(" world")]),
        Paragraph(segments=[Segment("old", {S}), Segment(" new")]),
    ]


def test_tab_indicator_prepends_tab():
    doc = RTF.loads(r"{\rtf1 \tab Indented}")
    assert doc.paragraphs[0].text == "\tIndented"


def test_unknown_control_words_are_discarded():
    doc = RTF.loads(r"{\rtf1 \fs24 Big \ul under\ulnone}")
    assert doc.paragraphs[0].segments == [Segment("Big under")]


def test_escaped_braces_and_hex_characters_are_text():
    assert RTF.loads(r"{\rtf1 a \{b\} c}").paragraphs[0].text == "a {b} c"
    assert RTF.loads(r"{\rtf1 caf\'e9}").paragraphs[0].text == "café"
    assert RTF.loads(r"{\rtf1 C:\\temp}").paragraphs[0].text == "C:\\temp"


def test_brace_wrapped_text_is_lost():
    # Greedy group stripping cannot tell text groups from metadata groups.
    doc = RTF.loads(r"{\rtf1 {\b hidden} shown}")
    assert doc.paragraphs[0].text == " shown"


def test_strip_brace_groups_keeps_outermost_content():
    assert strip_brace_groups("{a{b}c}") == "c}"
    assert clean_rtf("{a{b}c}") == "c"
    assert strip_brace_groups("no braces") == "no braces"


def test_custom_control_word_table():
    group = RtfCodecGroup({"strikedl": Style.STRIKETHROUGH, "par": RTF.control_words["par"]})
    doc = group.loads(r"\strikedl gone\strikedl0 kept\b  plain")
    assert doc.paragraphs[0].segments == [Segment("gone", {S}), Segment("kept plain")]


def test_empty_input():
    assert RTF.loads("") == Document()
    assert RTF.loads(r"{\rtf1}") == Document()


def test_encode_is_not_supported():
    doc = Document(paragraphs=[Paragraph(segments=[Segment("x")])])
    with pytest.raises(NotImplementedError):
        RTF.dumps(doc)
    with pytest.raises(NotImplementedError):
        RTF.document.encode(io.StringIO(), doc)
    with pytest.raises(NotImplementedError):
        RTF.paragraph.encode(io.StringIO(), doc.paragraphs[0])
    with pytest.raises(NotImplementedError):
        RTF.segment.encode(io.StringIO(), doc.paragraphs[0].segments)


def test_unsupported_input_type():
    with pytest.raises(UnsupportedInputType):
        RTF.loads(b"{\\rtf1 x}")


def test_line_word_ends_paragraph():
    doc = RTF.loads(r"{\rtf1 one\line two}")
    assert doc.paragraphs == [
        Paragraph(segments=[Segment("one")]),
        Paragraph(segments=[Segment("two")]),
    ]


def test_missing_closing_brace_is_recovered(caplog):
    with caplog.at_level(logging.DEBUG, logger="inkwell.docs.rtf_io"):
        with pytest.warns(MalformedToken):
            doc = RTF.loads(r"{\rtf1 \b text")
    assert doc.paragraphs[0].segments == [Segment("text", {B})]
    assert "1 opening vs 0 closing" in caplog.text


def test_extra_closing_brace_is_recovered(caplog):
    with caplog.at_level(logging.DEBUG, logger="inkwell.docs.rtf_io"):
        with pytest.warns(MalformedToken):
            doc = RTF.loads(r"{\rtf1 a} b}")
    assert doc.paragraphs[0].text == " b"
    assert "1 opening vs 2 closing" in caplog.text


def test_balanced_braces_issue_no_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error", MalformedToken)
        assert RTF.loads(r"{\rtf1 {\fonttbl x} y}").paragraphs[0].text == " y"
