"""Word counting over documents and plain strings.

Documents are counted section by section: every heading paragraph opens a
new `Section` holding the tally of the words that follow it, up to the next
heading. Text before the first heading forms the lead section (empty heading).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Collection, Dict, Iterable, List, Union, overload

from inkwell.docs.model import Document, Paragraph, Style

DEFAULT_WORD_SEPARATORS = (" ", "--", "---", "–", "—", ",", ".", "\n")


@dataclass
class WordCountBehaviour:
    """Tokenisation rules of a `WordCountEngine`.

    - excluded_styles: segments carrying any of these styles are not counted.
    - case_sensitive: if False, words are lower-cased before aggregation.
    - count_numbers: if True, digits are word characters, so "7" is a word.
    - word_separators: tokens ending a word. Hyphens are not among them,
      so "well-known" counts as one word.
    """

    excluded_styles: Collection[Style] = field(default_factory=list)
    case_sensitive: bool = False
    count_numbers: bool = False
    word_separators: Collection[str] = DEFAULT_WORD_SEPARATORS


@dataclass(frozen=True)
class Word:
    text: str
    count: int


@dataclass(frozen=True)
class Section:
    heading: str
    level: int
    words: List[Word] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(w.count for w in self.words)


class WordCountEngine:
    def __init__(self, behaviour: WordCountBehaviour | None = None) -> None:
        self.behaviour = behaviour or WordCountBehaviour()

    @overload
    def count(self, source: Document) -> List[Section]: ...

    @overload
    def count(self, source: str) -> List[Word]: ...

    def count(self, source):
        if isinstance(source, Document):
            return self._count_document(source)
        if isinstance(source, str):
            tally: Dict[str, int] = {}
            self._for_each_word(source, lambda w: _add(tally, w))
            return _to_words(tally)
        raise TypeError(f"Cannot count words in a value of type {type(source).__name__}")

    def _count_document(self, document: Document) -> List[Section]:
        sections: List[Section] = []
        heading = ""
        level = 1
        tally: Dict[str, int] = {}

        for index, paragraph in enumerate(document.paragraphs):
            if paragraph.heading:
                if index != 0:
                    sections.append(Section(heading, level, _to_words(tally)))
                heading = paragraph.text
                level = paragraph.heading
                tally = {}
                continue
            self._for_each_word(self._included_text(paragraph), lambda w: _add(tally, w))

        sections.append(Section(heading, level, _to_words(tally)))
        return sections

    def _included_text(self, paragraph: Paragraph) -> str:
        excluded = {Style(s) for s in self.behaviour.excluded_styles}
        if not excluded:
            return paragraph.text
        return "".join(seg.text for seg in paragraph.segments if not (seg.styles & excluded))

    def _for_each_word(self, text: str, callback: Callable[[str], None]) -> None:
        behaviour = self.behaviour
        if behaviour.count_numbers:
            is_word_char = lambda ch: ch.isalpha() or ch.isdigit()
        else:
            is_word_char = str.isalpha
        normalize = (lambda s: s) if behaviour.case_sensitive else str.lower
        separators = tuple(behaviour.word_separators)

        buf: List[str] = []
        for index, ch in enumerate(text):
            if is_word_char(ch):
                buf.append(ch)
            elif buf and any(text.startswith(sep, index) for sep in separators):
                callback(normalize("".join(buf)))
                buf = []
        if buf:
            callback(normalize("".join(buf)))


def _add(tally: Dict[str, int], word: str) -> None:
    tally[word] = tally.get(word, 0) + 1


def _to_words(tally: Dict[str, int]) -> List[Word]:
    return [Word(text, n) for text, n in tally.items()]


def count(
    source: Union[Document, str], behaviour: WordCountBehaviour | None = None
) -> Union[List[Section], List[Word]]:
    """Count words in a Document (list of Section) or a string (list of Word)."""
    return WordCountEngine(behaviour).count(source)


def total(items: Iterable[Union[Word, Section]]) -> int:
    """Sum of occurrences over words or sections."""
    n = 0
    for item in items:
        n += item.total if isinstance(item, Section) else item.count
    return n
