"""Styled document model and its codecs (Markdown, HTML, RTF, plain text, DOCX).

Exposes:
- Data model: Document, Paragraph, Segment, Style
- Codec contract: CodecGroup, Format, get_codec_group and the error types
- Default codec groups: MARKDOWN, HTML, RTF, PLAIN_TEXT, DOCX
- File helpers live in `inkwell.docs.pipeline`
"""

from .model import Document, Paragraph, Segment, Style, merge_segments
from .codec import CodecGroup, Format, MalformedToken, UnsupportedInputType, get_codec_group
from .markdown_io import MARKDOWN, MarkdownCodecGroup
from .html_io import HTML
from .rtf_io import RTF, RtfCodecGroup
from .txt import PLAIN_TEXT
from .docx_io import DOCX

__all__ = [
    "Document",
    "Paragraph",
    "Segment",
    "Style",
    "merge_segments",
    "CodecGroup",
    "Format",
    "MalformedToken",
    "UnsupportedInputType",
    "get_codec_group",
    "MARKDOWN",
    "MarkdownCodecGroup",
    "HTML",
    "RTF",
    "RtfCodecGroup",
    "PLAIN_TEXT",
    "DOCX",
]
