from __future__ import annotations

from typing import List, TextIO

from .codec import CodecGroup, DocumentCodec, Format, ParagraphCodec, SegmentCodec, read_text_source, split_lines
from .model import Document, Paragraph, Segment


def _split_paragraphs(text: str) -> List[str]:
    parts: List[str] = []
    buf: List[str] = []
    for line in split_lines(text or ""):
        if line.strip() == "":
            if buf:
                parts.append("\n".join(buf).strip())
                buf = []
        else:
            buf.append(line)
    if buf:
        parts.append("\n".join(buf).strip())
    return parts


class PlainTextSegmentCodec(SegmentCodec[str]):
    """Styles are dropped on encode; decoded text is a single unstyled run."""

    def encode(self, target: TextIO, value: List[Segment]) -> None:
        target.write("".join(seg.text for seg in value))

    def decode(self, source: str) -> List[Segment]:
        return [Segment(source)]


class PlainTextParagraphCodec(ParagraphCodec[str]):
    def __init__(self, segment_codec: PlainTextSegmentCodec) -> None:
        self.segment_codec = segment_codec

    def encode(self, target: TextIO, value: Paragraph) -> None:
        self.segment_codec.encode(target, value.segments)

    def decode(self, source: str) -> Paragraph:
        return Paragraph(segments=self.segment_codec.decode(source))


class PlainTextDocumentCodec(DocumentCodec):
    data_format = "text/plain"

    def __init__(self, paragraph_codec: PlainTextParagraphCodec) -> None:
        self.paragraph_codec = paragraph_codec

    def encode(self, target: TextIO, value: Document) -> None:
        for index, paragraph in enumerate(value.paragraphs):
            if index:
                target.write("\n\n")
            self.paragraph_codec.encode(target, paragraph)

    def decode(self, source) -> Document:
        text = read_text_source(source, "A plain text codec")
        return Document(paragraphs=[self.paragraph_codec.decode(p) for p in _split_paragraphs(text)])


class PlainTextCodecGroup(CodecGroup):
    format = Format.PLAIN_TEXT

    def __init__(self) -> None:
        self.segment = PlainTextSegmentCodec()
        self.paragraph = PlainTextParagraphCodec(self.segment)
        self.document = PlainTextDocumentCodec(self.paragraph)


PLAIN_TEXT = PlainTextCodecGroup()


def read_txt(path: str) -> Document:
    with open(path, "r", encoding="utf-8") as f:
        return PLAIN_TEXT.document.decode(f)


def write_txt(doc: Document, out_path: str) -> str:
    with open(out_path, "w", encoding="utf-8") as f:
        PLAIN_TEXT.document.encode(f, doc)
    return out_path
