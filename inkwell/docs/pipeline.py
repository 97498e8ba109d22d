from __future__ import annotations

import logging
import os
from typing import Dict, List, Mapping, Optional

from inkwell.wordcount import Section, WordCountBehaviour, WordCountEngine

from .codec import CodecGroup, Format, get_codec_group
from .docx_io import read_docx, write_docx
from .model import Document
from .txt import read_txt, write_txt

logger = logging.getLogger(__name__)

_EXTENSIONS: Dict[str, Format] = {
    ".md": Format.MARKDOWN,
    ".markdown": Format.MARKDOWN,
    ".html": Format.HTML,
    ".htm": Format.HTML,
    ".rtf": Format.RTF,
    ".txt": Format.PLAIN_TEXT,
    ".docx": Format.DOCX,
}

CodecOverrides = Optional[Mapping[Format, CodecGroup]]


def detect_format(path: str) -> Format:
    ext = os.path.splitext(path)[1].lower()
    if ext not in _EXTENSIONS:
        raise ValueError(f"Unsupported file type: {path}")
    return _EXTENSIONS[ext]


def _group(fmt: Format, codecs: CodecOverrides) -> CodecGroup:
    if codecs and fmt in codecs:
        return codecs[fmt]
    return get_codec_group(fmt)


def read_document(path: str, codecs: CodecOverrides = None) -> Document:
    """Decode the file at `path` with the codec group matching its extension.

    `codecs` optionally replaces the default group of some formats (e.g. a
    Markdown group built with a custom delimiter table).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    fmt = detect_format(path)
    logger.info("Reading %s as %s", path, fmt.name)
    if fmt is Format.DOCX:
        return read_docx(path)
    if fmt is Format.PLAIN_TEXT and not (codecs and fmt in codecs):
        return read_txt(path)
    with open(path, "r", encoding="utf-8") as f:
        return _group(fmt, codecs).document.decode(f)


def write_document(
    doc: Document,
    out_path: str,
    fmt: Format | str | None = None,
    codecs: CodecOverrides = None,
) -> str:
    fmt = Format(fmt) if fmt is not None else detect_format(out_path)
    logger.info("Writing %d paragraphs to %s as %s", len(doc.paragraphs), out_path, fmt.name)
    if fmt is Format.DOCX:
        return write_docx(doc, out_path)
    if fmt is Format.PLAIN_TEXT and not (codecs and fmt in codecs):
        return write_txt(doc, out_path)
    # Encode before opening so an unsupported encoder leaves no empty file behind.
    text = _group(fmt, codecs).dumps(doc)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return out_path


def convert_document(
    file_path: str,
    out_format: Format | str = Format.MARKDOWN,
    codecs: CodecOverrides = None,
) -> Dict[str, str]:
    """Read a document and write it beside the input as `<name>.converted.<ext>`.

    Returns a dict mapping the output format value to the written path.
    """
    out_format = Format(out_format)
    doc = read_document(file_path, codecs)

    base_dir = os.path.dirname(file_path)
    base_name = os.path.splitext(os.path.basename(file_path))[0]
    out_path = os.path.join(base_dir, f"{base_name}.converted.{out_format.value}")
    return {out_format.value: write_document(doc, out_path, out_format, codecs)}


def count_document(
    file_path: str,
    behaviour: WordCountBehaviour | None = None,
    codecs: CodecOverrides = None,
) -> List[Section]:
    return WordCountEngine(behaviour).count(read_document(file_path, codecs))
