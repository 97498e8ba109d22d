"""RTF decoding by control-word scanning.

Only a handful of control words are understood (see `DEFAULT_CONTROL_WORDS`):
style toggles, tab indicators and line terminators. Every other control word
and every brace group carrying no plain text is discarded. Encoding to RTF
is not supported.

Known limitation: brace groups are removed greedily before scanning, so
document text that is itself wrapped in nested braces is removed together
with the metadata groups around it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, TextIO, Tuple, Union

from .codec import (
    CodecGroup,
    DocumentCodec,
    Format,
    ParagraphCodec,
    SegmentCodec,
    is_escaped,
    read_text_source,
    report_malformed,
)
from .model import Document, Paragraph, Segment, Style, merge_segments

logger = logging.getLogger(__name__)


class ControlAction(str, Enum):
    TAB = "tab"
    LINE_BREAK = "line_break"


ControlWordMeaning = Union[Style, ControlAction]

DEFAULT_CONTROL_WORDS: Dict[str, ControlWordMeaning] = {
    "b": Style.BOLD,
    "i": Style.ITALIC,
    "strike": Style.STRIKETHROUGH,
    "tab": ControlAction.TAB,
    "par": ControlAction.LINE_BREAK,
    "line": ControlAction.LINE_BREAK,
}

_STRIPPED_CHARACTERS = ("{", "}", "\n", "\r", "\t")


@dataclass(frozen=True)
class CommandRun:
    """A run of text with the style set active at emission and the markers before it."""

    text: str
    styles: FrozenSet[Style] = frozenset()
    tabs: int = 0
    breaks: int = 0


def _index_of_unescaped(text: str, char: str, start: int = 0) -> int:
    idx = text.find(char, start)
    while idx != -1 and is_escaped(text, idx):
        idx = text.find(char, idx + 1)
    return idx


def strip_brace_groups(text: str) -> str:
    """Greedily remove brace groups that are not the outermost one."""
    start = _index_of_unescaped(text, "{")
    end = _index_of_unescaped(text, "}")
    last = text.rfind("}")
    if start > end:
        start = -1
    while end != -1 and end != last:
        text = text[:max(start, 0)] + text[end + 1:]
        new_start = _index_of_unescaped(text, "{")
        end = _index_of_unescaped(text, "}")
        last = text.rfind("}")
        if new_start != -1 and new_start <= end:
            start = new_start
        elif start > end:
            start = -1
    return text


def remove_unescaped(text: str, *chars: str) -> str:
    """Drop unescaped occurrences of `chars`; escaped ones lose their backslash."""
    for char in chars:
        out: List[str] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == char:
                if is_escaped(text, i):
                    out.pop()
                    out.append(ch)
            else:
                out.append(ch)
            i += 1
        text = "".join(out)
    return text


def _count_unescaped(text: str, char: str) -> int:
    count = 0
    idx = _index_of_unescaped(text, char)
    while idx != -1:
        count += 1
        idx = _index_of_unescaped(text, char, idx + 1)
    return count


def clean_rtf(text: str) -> str:
    """Strip metadata groups, then braces and whitespace control characters."""
    opening, closing = _count_unescaped(text, "{"), _count_unescaped(text, "}")
    if opening != closing:
        report_malformed(logger, "Unbalanced braces: %d opening vs %d closing", opening, closing)
    return remove_unescaped(strip_brace_groups(text), *_STRIPPED_CHARACTERS)


def _unescape_text(text: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt == "\\":
                out.append("\\")
                i += 2
                continue
            if nxt == "'" and _is_hex(text[i + 2:i + 4]):
                out.append(bytes([int(text[i + 2:i + 4], 16)]).decode("cp1252", errors="replace"))
                i += 4
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def _is_hex(value: str) -> bool:
    return len(value) == 2 and all(c in "0123456789abcdefABCDEF" for c in value)


def _find_next_control_word(text: str, start: int) -> Optional[Tuple[int, int, int]]:
    """Return (begin, word_end, resume) of the next control word at or after `start`.

    The word spans text[begin + 1:word_end]; scanning resumes at `resume`,
    which skips a terminating space.
    """
    idx = text.find("\\", start)
    while idx != -1:
        if idx + 1 < len(text) and text[idx + 1].isalpha() and not is_escaped(text, idx):
            break
        idx = text.find("\\", idx + 1)
    if idx == -1:
        return None

    space = text.find(" ", idx + 1)
    backslash = text.find("\\", idx + 1)
    ends = [e for e in (space, backslash) if e != -1]
    if not ends:
        return idx, len(text), len(text)
    end = min(ends)
    return idx, end, end + 1 if end == space else end


def scan_control_words(text: str, control_words: Mapping[str, ControlWordMeaning]) -> List[CommandRun]:
    """Split cleaned RTF text into runs tagged with the control words before them."""
    runs: List[CommandRun] = []
    active: List[Style] = []
    tabs = 0
    breaks = 0
    pos = 0

    while True:
        found = _find_next_control_word(text, pos)
        if found is None:
            break
        begin, word_end, resume = found

        if begin > pos:
            runs.append(CommandRun(_unescape_text(text[pos:begin]), frozenset(active), tabs, breaks))
            tabs = breaks = 0

        word = text[begin + 1:word_end]
        # "\b0" is the complement of "\b"; both toggle.
        if word.endswith("0"):
            word = word[:-1]
        meaning = control_words.get(word)
        if isinstance(meaning, Style):
            if meaning in active:
                active.remove(meaning)
            else:
                active.append(meaning)
        elif meaning is ControlAction.TAB:
            tabs += 1
        elif meaning is ControlAction.LINE_BREAK:
            breaks += 1

        pos = resume

    if pos < len(text):
        runs.append(CommandRun(_unescape_text(text[pos:]), frozenset(active), tabs, breaks))
    return runs


class RtfSegmentCodec(SegmentCodec[Iterable[CommandRun]]):
    def encode(self, target: TextIO, value: List[Segment]) -> None:
        raise NotImplementedError("Encoding segments to RTF is not supported.")

    def decode(self, source: Iterable[CommandRun]) -> List[Segment]:
        return merge_segments(
            Segment("\t" * run.tabs + run.text, run.styles) for run in source
        )


class RtfParagraphCodec(ParagraphCodec[Iterable[CommandRun]]):
    def __init__(self, segment_codec: RtfSegmentCodec) -> None:
        self.segment_codec = segment_codec

    def encode(self, target: TextIO, value: Paragraph) -> None:
        raise NotImplementedError("Encoding paragraphs to RTF is not supported.")

    def decode(self, source: Iterable[CommandRun]) -> Paragraph:
        # RTF paragraph styles are not read; every paragraph is plain.
        return Paragraph(segments=self.segment_codec.decode(source))


class RtfDocumentCodec(DocumentCodec):
    data_format = "text/rtf"

    def __init__(self, paragraph_codec: RtfParagraphCodec, control_words: Mapping[str, ControlWordMeaning]) -> None:
        self.paragraph_codec = paragraph_codec
        self.control_words = control_words

    def encode(self, target: TextIO, value: Document) -> None:
        raise NotImplementedError("Encoding documents to RTF is not supported.")

    def decode(self, source) -> Document:
        text = read_text_source(source, "An RTF codec")
        runs = scan_control_words(clean_rtf(text), self.control_words)

        paragraphs: List[Paragraph] = []
        current: List[CommandRun] = []
        for run in runs:
            for _ in range(run.breaks):
                paragraphs.append(self.paragraph_codec.decode(current))
                current = []
            current.append(run)
        if current:
            paragraphs.append(self.paragraph_codec.decode(current))
        return Document(paragraphs=paragraphs)


class RtfCodecGroup(CodecGroup):
    format = Format.RTF

    def __init__(self, control_words: Mapping[str, ControlWordMeaning] = DEFAULT_CONTROL_WORDS) -> None:
        self.control_words = dict(control_words)
        self.segment = RtfSegmentCodec()
        self.paragraph = RtfParagraphCodec(self.segment)
        self.document = RtfDocumentCodec(self.paragraph, self.control_words)

    def dumps(self, document: Document) -> str:
        raise NotImplementedError("Encoding documents to RTF is not supported.")


RTF = RtfCodecGroup()
