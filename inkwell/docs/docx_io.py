from __future__ import annotations

import io
import os
import re
from typing import Any, List, Optional

from docx import Document as DocxDocument
from docx.document import Document as DocxDocumentType
from docx.text.paragraph import Paragraph as DocxParagraph

from .codec import CodecGroup, DocumentCodec, Format, ParagraphCodec, SegmentCodec, UnsupportedInputType
from .model import Document, Paragraph, Segment, Style, merge_segments

_HEADING_STYLE = re.compile(r"^Heading ([1-6])$")


def _heading_level(para: DocxParagraph) -> Optional[int]:
    style = para.style
    m = _HEADING_STYLE.match(style.name if style is not None else "")
    return int(m.group(1)) if m else None


class DocxSegmentCodec(SegmentCodec[DocxParagraph]):
    def encode(self, target: DocxParagraph, value: List[Segment]) -> None:
        for seg in value:
            run = target.add_run(seg.text)
            if Style.BOLD in seg.styles:
                run.bold = True
            if Style.ITALIC in seg.styles:
                run.italic = True
            if Style.STRIKETHROUGH in seg.styles:
                run.font.strike = True

    def decode(self, source: DocxParagraph) -> List[Segment]:
        segments: List[Segment] = []
        for run in source.runs:
            styles = set()
            if run.bold:
                styles.add(Style.BOLD)
            if run.italic:
                styles.add(Style.ITALIC)
            if run.font.strike:
                styles.add(Style.STRIKETHROUGH)
            segments.append(Segment(run.text, styles))
        return merge_segments(segments)


class DocxParagraphCodec(ParagraphCodec[DocxParagraph]):
    def __init__(self, segment_codec: DocxSegmentCodec) -> None:
        self.segment_codec = segment_codec

    def encode(self, target: DocxDocumentType, value: Paragraph) -> None:
        if value.heading:
            p = target.add_heading("", level=value.heading)
        else:
            p = target.add_paragraph()
        self.segment_codec.encode(p, value.segments)

    def decode(self, source: DocxParagraph) -> Paragraph:
        return Paragraph(segments=self.segment_codec.decode(source), heading=_heading_level(source))


class DocxDocumentCodec(DocumentCodec):
    data_format = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    def __init__(self, paragraph_codec: DocxParagraphCodec) -> None:
        self.paragraph_codec = paragraph_codec

    def encode(self, target: Any, value: Document) -> None:
        """Write `value` to `target`, a file path or a writable binary stream."""
        d = DocxDocument()
        for paragraph in value.paragraphs:
            self.paragraph_codec.encode(d, paragraph)
        d.save(target)

    def decode(self, source: Any) -> Document:
        """Read a DOCX from a path, raw bytes or a readable binary stream."""
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        elif isinstance(source, (str, os.PathLike)):
            if not os.path.isfile(source):
                raise UnsupportedInputType("A DOCX codec", "path, bytes or binary stream", source)
            source = os.fspath(source)
        elif not callable(getattr(source, "read", None)) or isinstance(source, io.TextIOBase):
            raise UnsupportedInputType("A DOCX codec", "path, bytes or binary stream", source)
        docx = DocxDocument(source)
        return Document(paragraphs=[self.paragraph_codec.decode(p) for p in docx.paragraphs])


class DocxCodecGroup(CodecGroup):
    format = Format.DOCX

    def __init__(self) -> None:
        self.segment = DocxSegmentCodec()
        self.paragraph = DocxParagraphCodec(self.segment)
        self.document = DocxDocumentCodec(self.paragraph)

    def dumps(self, document: Document) -> bytes:
        buf = io.BytesIO()
        self.document.encode(buf, document)
        return buf.getvalue()


DOCX = DocxCodecGroup()


def read_docx(path: str) -> Document:
    return DOCX.document.decode(path)


def write_docx(doc: Document, out_path: str) -> str:
    DOCX.document.encode(out_path, doc)
    return out_path
