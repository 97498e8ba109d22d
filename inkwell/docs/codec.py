"""Codec group contract shared by every document format.

Each format exposes three codecs working at different levels of the model:

- DocumentCodec: whole `Document` <-> external representation
- ParagraphCodec: one `Paragraph` <-> format-specific paragraph value
- SegmentCodec: list of `Segment` <-> format-specific inline value

`encode(target, value)` writes to `target` (a text stream for text formats)
and returns nothing; `decode(source)` returns a new model value. Codec groups
are selected with an explicit `Format` value via `get_codec_group`.
"""

from __future__ import annotations

import io
import logging
import re
import warnings
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, List, TextIO, TypeVar

from .model import Document, Paragraph, Segment

T = TypeVar("T")

ESCAPE_CHARACTER = "\\"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class UnsupportedInputType(TypeError):
    """Raised when a codec is handed a value of the wrong representation."""

    def __init__(self, codec: str, expected: str, value: Any) -> None:
        super().__init__(
            f"{codec} can only handle an input of type {expected}, "
            f"but input was of type {type(value).__name__}"
        )
        self.codec = codec
        self.value_type = type(value)


class MalformedToken(UserWarning):
    """Category for recoverable input defects (unterminated delimiter, stray brace).

    Decoders recover from these locally: the defect is logged at DEBUG and
    issued as a warning of this category, never raised.
    """


def report_malformed(log: logging.Logger, message: str, *args: Any) -> None:
    log.debug(message, *args)
    warnings.warn(message % args, MalformedToken, stacklevel=3)


class Format(str, Enum):
    MARKDOWN = "md"
    HTML = "html"
    RTF = "rtf"
    PLAIN_TEXT = "txt"
    DOCX = "docx"


def read_text_source(source: Any, codec: str) -> str:
    """Return the text behind `source` (a str or a readable text stream)."""
    if isinstance(source, str):
        return source
    read = getattr(source, "read", None)
    if callable(read):
        data = read()
        if isinstance(data, str):
            return data
        raise UnsupportedInputType(codec, "str", data)
    raise UnsupportedInputType(codec, "str", source)


def is_escaped(text: str, index: int) -> bool:
    """True if the character at `index` follows an odd number of backslashes."""
    count = 0
    i = index - 1
    while i >= 0 and text[i] == ESCAPE_CHARACTER:
        count += 1
        i -= 1
    return count % 2 == 1


def split_lines(text: str) -> List[str]:
    """Split on "\\n", "\\r" and "\\r\\n" only; other Unicode breaks stay in the line."""
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


class DocumentCodec(ABC):
    #: MIME-like marker of the representation this codec claims.
    data_format: str = ""

    @abstractmethod
    def encode(self, target: TextIO, value: Document) -> None: ...

    @abstractmethod
    def decode(self, source: Any) -> Document: ...


class ParagraphCodec(ABC, Generic[T]):
    @abstractmethod
    def encode(self, target: TextIO, value: Paragraph) -> None: ...

    @abstractmethod
    def decode(self, source: T) -> Paragraph: ...


class SegmentCodec(ABC, Generic[T]):
    @abstractmethod
    def encode(self, target: TextIO, value: List[Segment]) -> None: ...

    @abstractmethod
    def decode(self, source: T) -> List[Segment]: ...


class CodecGroup:
    """The three codecs of one format, plus string-level helpers."""

    format: Format
    document: DocumentCodec
    paragraph: ParagraphCodec
    segment: SegmentCodec

    def dumps(self, document: Document) -> str:
        buf = io.StringIO()
        self.document.encode(buf, document)
        return buf.getvalue()

    def loads(self, source: Any) -> Document:
        return self.document.decode(source)


def get_codec_group(fmt: Format | str) -> CodecGroup:
    """Return the default codec group for `fmt`."""
    fmt = Format(fmt)
    if fmt is Format.MARKDOWN:
        from .markdown_io import MARKDOWN
        return MARKDOWN
    if fmt is Format.HTML:
        from .html_io import HTML
        return HTML
    if fmt is Format.RTF:
        from .rtf_io import RTF
        return RTF
    if fmt is Format.PLAIN_TEXT:
        from .txt import PLAIN_TEXT
        return PLAIN_TEXT
    from .docx_io import DOCX
    return DOCX
