"""Markdown codecs for a small dialect: headings, bold, italic, strikethrough.

Inline styling is driven by a delimiter table (delimiter string -> Style)
given to `MarkdownCodecGroup`. When two delimiters start at the same
position the one listed first wins, so longer delimiters must precede
their prefixes (``**`` before ``*``). The encoder uses the first delimiter
listed for each style.
"""

from __future__ import annotations

import io
import logging
from typing import Dict, List, Mapping, Optional, TextIO, Tuple

from .codec import (
    ESCAPE_CHARACTER,
    CodecGroup,
    DocumentCodec,
    Format,
    ParagraphCodec,
    SegmentCodec,
    is_escaped,
    read_text_source,
    report_malformed,
    split_lines,
)
from .model import Document, Paragraph, Segment, Style, merge_segments, ordered_styles

logger = logging.getLogger(__name__)

HEADING_MARKER = "#"
MAX_HEADING_LEVEL = 6

DEFAULT_DELIMITERS: Dict[str, Style] = {
    "**": Style.BOLD,
    "*": Style.ITALIC,
    "_": Style.ITALIC,
    "~~": Style.STRIKETHROUGH,
}


def unescape(text: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == ESCAPE_CHARACTER and i + 1 < len(text):
            out.append(text[i + 1])
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


class MarkdownSegmentCodec(SegmentCodec[str]):
    def __init__(self, delimiters: Mapping[str, Style] = DEFAULT_DELIMITERS) -> None:
        if not delimiters:
            raise ValueError("Delimiter table must not be empty.")
        table: Dict[str, Style] = {}
        for token, style in delimiters.items():
            if not token or ESCAPE_CHARACTER in token:
                raise ValueError(f"Invalid Markdown delimiter: {token!r}")
            table[token] = Style(style)
        self.delimiters = table
        self._style_delimiters: Dict[Style, str] = {}
        for token, style in table.items():
            self._style_delimiters.setdefault(style, token)
        self._reserved = {ESCAPE_CHARACTER} | set("".join(table))

    def escape(self, text: str) -> str:
        return "".join(ESCAPE_CHARACTER + ch if ch in self._reserved else ch for ch in text)

    def encode(self, target: TextIO, value: List[Segment]) -> None:
        for seg in value:
            if not seg.text:
                continue
            text = self.escape(seg.text)
            for style in ordered_styles(seg.styles):
                token = self._style_delimiters.get(style)
                if token:
                    text = f"{token}{text}{token}"
            target.write(text)

    def _find_unescaped(self, text: str, token: str, start: int) -> int:
        idx = text.find(token, start)
        while idx != -1 and is_escaped(text, idx):
            idx = text.find(token, idx + 1)
        return idx

    def decode(self, source: str) -> List[Segment]:
        text = source
        # raw (still escaped) text and the delimiter stack it was emitted under
        runs: List[List] = []
        stack: List[Tuple[str, int]] = []
        next_at: Dict[str, int] = {}
        pos = 0

        while True:
            best_idx, best = -1, None
            innermost = stack[-1][0] if stack else None
            for token in self.delimiters:
                idx = next_at.get(token, -2)
                if idx != -1 and idx < pos:
                    idx = self._find_unescaped(text, token, pos)
                    next_at[token] = idx
                if idx == -1:
                    continue
                if best_idx == -1 or idx < best_idx:
                    best_idx, best = idx, token
                elif idx == best_idx and token == innermost:
                    best = token
            if best is None:
                break

            if best_idx > pos:
                runs.append([text[pos:best_idx], tuple(t for t, _ in stack)])
            if stack and best == innermost:
                stack.pop()
            else:
                stack.append((best, len(runs)))
            pos = best_idx + len(best)

        if pos < len(text):
            runs.append([text[pos:], tuple(t for t, _ in stack)])

        # Unterminated scopes: put the delimiter back as literal text where
        # the scope opened and drop its style from everything after it.
        for depth in range(len(stack) - 1, -1, -1):
            token, start = stack[depth]
            report_malformed(logger, "Unterminated delimiter %r at run %d", token, start)
            if start < len(runs):
                runs[start][0] = token + runs[start][0]
            else:
                runs.append([token, tuple(t for t, _ in stack[:depth + 1])])
            for run in runs[start:]:
                run[1] = run[1][:depth] + run[1][depth + 1:]

        segments = merge_segments(
            Segment(unescape(raw), frozenset(self.delimiters[t] for t in tokens))
            for raw, tokens in runs
        )
        return segments or [Segment("")]


class MarkdownParagraphCodec(ParagraphCodec[str]):
    def __init__(self, segment_codec: MarkdownSegmentCodec) -> None:
        self.segment_codec = segment_codec

    def encode(self, target: TextIO, value: Paragraph) -> None:
        if value.heading:
            target.write(HEADING_MARKER * value.heading + " ")
        buf = io.StringIO()
        self.segment_codec.encode(buf, value.segments)
        body = buf.getvalue()
        if body.startswith(HEADING_MARKER):
            body = ESCAPE_CHARACTER + body
        target.write(body)

    def decode(self, source: str) -> Paragraph:
        text = source
        hashes = len(text) - len(text.lstrip(HEADING_MARKER))
        heading: Optional[int] = None
        if 1 <= hashes <= MAX_HEADING_LEVEL:
            heading = hashes
            text = text[hashes:]
            if text.startswith(" "):
                text = text[1:]
        return Paragraph(segments=self.segment_codec.decode(text), heading=heading)


def _split_paragraphs(text: str) -> List[str]:
    parts: List[str] = []
    buf: List[str] = []
    for line in split_lines(text):
        if line.strip(" \t") == "":
            if buf:
                parts.append(" ".join(buf))
                buf = []
        else:
            buf.append(line)
    if buf:
        parts.append(" ".join(buf))
    return parts


class MarkdownDocumentCodec(DocumentCodec):
    data_format = "text/markdown"

    def __init__(self, paragraph_codec: MarkdownParagraphCodec) -> None:
        self.paragraph_codec = paragraph_codec

    def encode(self, target: TextIO, value: Document) -> None:
        for index, paragraph in enumerate(value.paragraphs):
            if index:
                target.write("\n\n")
            self.paragraph_codec.encode(target, paragraph)

    def decode(self, source) -> Document:
        text = read_text_source(source, "A Markdown codec")
        return Document(paragraphs=[self.paragraph_codec.decode(p) for p in _split_paragraphs(text)])


class MarkdownCodecGroup(CodecGroup):
    format = Format.MARKDOWN

    def __init__(self, delimiters: Mapping[str, Style] = DEFAULT_DELIMITERS) -> None:
        self.segment = MarkdownSegmentCodec(delimiters)
        self.paragraph = MarkdownParagraphCodec(self.segment)
        self.document = MarkdownDocumentCodec(self.paragraph)


MARKDOWN = MarkdownCodecGroup()
