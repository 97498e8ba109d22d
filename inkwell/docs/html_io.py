"""HTML codecs backed by BeautifulSoup.

Only a whitelist of tags is honoured (see `SELECTED_TAGS`); everything else
contributes its text to the enclosing selected element or is ignored.
"""

from __future__ import annotations

import html
import logging
from typing import Dict, FrozenSet, List, TextIO, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .codec import CodecGroup, DocumentCodec, Format, ParagraphCodec, SegmentCodec, read_text_source
from .model import NO_STYLE, Document, Paragraph, Segment, Style, merge_segments

logger = logging.getLogger(__name__)

_HEADING_LEVEL: Dict[str, int] = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_BLOCK_TAGS = {"p"} | set(_HEADING_LEVEL)
SELECTED_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "span", "b", "strong", "i", "em", "s", "del"]

_BOLD_TAGS = {"b", "strong"}
_ITALIC_TAGS = {"i", "em"}
_STRIKETHROUGH_TAGS = {"s", "del"}

# Tags whose text is never document content
_NOISE_TAGS = {"script", "style", "noscript"}

# Encoding order: the first tag ends up innermost.
_STYLE_TAGS = ((Style.BOLD, "strong"), (Style.ITALIC, "em"), (Style.STRIKETHROUGH, "s"))

HtmlNode = Union[Tag, BeautifulSoup]


def get_styles(element: Tag) -> Dict[str, str]:
    """Parse the inline `style` attribute into a dict, skipping entries without a colon."""
    styles: Dict[str, str] = {}
    for entry in (element.get("style") or "").split(";"):
        if ":" not in entry:
            continue
        key, _, value = entry.partition(":")
        styles[key.strip().lower()] = value.strip()
    return styles


def _is_bold(element: Tag, css: Dict[str, str]) -> bool:
    if element.name in _BOLD_TAGS:
        return True
    weight = css.get("font-weight", "").lower()
    if weight in ("bold", "bolder"):
        return True
    return weight.isdigit() and int(weight) > 400


def _is_italic(element: Tag, css: Dict[str, str]) -> bool:
    if element.name in _ITALIC_TAGS:
        return True
    style = css.get("font-style", "").lower().split()
    return bool(style) and style[0] in ("italic", "oblique")


def _is_strikethrough(element: Tag, css: Dict[str, str]) -> bool:
    if element.name in _STRIKETHROUGH_TAGS:
        return True
    decoration = css.get("text-decoration", "") + " " + css.get("text-decoration-line", "")
    return "line-through" in decoration.lower()


def element_styles(element: Tag) -> FrozenSet[Style]:
    css = get_styles(element)
    styles = set()
    if _is_bold(element, css):
        styles.add(Style.BOLD)
    if _is_italic(element, css):
        styles.add(Style.ITALIC)
    if _is_strikethrough(element, css):
        styles.add(Style.STRIKETHROUGH)
    return frozenset(styles)


class HtmlSegmentCodec(SegmentCodec[HtmlNode]):
    def encode(self, target: TextIO, value: List[Segment]) -> None:
        for seg in value:
            text = html.escape(seg.text, quote=False)
            for style, tag in _STYLE_TAGS:
                if style in seg.styles:
                    text = f"<{tag}>{text}</{tag}>"
            target.write(text)

    def _walk(self, element: HtmlNode, inherited: FrozenSet[Style]) -> List[Segment]:
        styles = inherited | element_styles(element)
        out: List[Segment] = []
        for child in element.children:
            if isinstance(child, Tag):
                if child.name not in _NOISE_TAGS:
                    out.extend(self._walk(child, styles))
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                out.append(Segment(str(child), styles))
        return out

    def decode(self, source: HtmlNode) -> List[Segment]:
        return merge_segments(self._walk(source, NO_STYLE))


class HtmlParagraphCodec(ParagraphCodec[HtmlNode]):
    def __init__(self, segment_codec: HtmlSegmentCodec) -> None:
        self.segment_codec = segment_codec

    def encode(self, target: TextIO, value: Paragraph) -> None:
        tag = f"h{value.heading}" if value.heading else "p"
        target.write(f"<{tag}>")
        self.segment_codec.encode(target, value.segments)
        target.write(f"</{tag}>")

    def decode(self, source: HtmlNode) -> Paragraph:
        return Paragraph(
            segments=self.segment_codec.decode(source),
            heading=_HEADING_LEVEL.get(source.name),
        )


class HtmlDocumentCodec(DocumentCodec):
    data_format = "text/html"

    def __init__(self, paragraph_codec: HtmlParagraphCodec) -> None:
        self.paragraph_codec = paragraph_codec

    def encode(self, target: TextIO, value: Document) -> None:
        for paragraph in value.paragraphs:
            self.paragraph_codec.encode(target, paragraph)

    def _paragraph_elements(self, soup: BeautifulSoup) -> List[HtmlNode]:
        selected = soup.find_all(SELECTED_TAGS)
        selected_ids = {id(el) for el in selected}
        outermost = [el for el in selected if not any(id(p) in selected_ids for p in el.parents)]

        # Inline elements sharing a parent are combined into one synthetic <p>.
        parent_of = {id(el): id(el.parent) for el in outermost}
        inline_groups: Dict[int, List[Tag]] = {}
        for el in outermost:
            if el.name not in _BLOCK_TAGS:
                inline_groups.setdefault(parent_of[id(el)], []).append(el)

        blocks: List[HtmlNode] = []
        merged = set()
        for el in outermost:
            if el.name in _BLOCK_TAGS:
                blocks.append(el)
                continue
            key = parent_of[id(el)]
            group = inline_groups[key]
            if len(group) <= 1:
                blocks.append(el)
            elif key not in merged:
                merged.add(key)
                wrapper = soup.new_tag("p")
                for member in group:
                    wrapper.append(member)
                blocks.append(wrapper)
        return blocks

    def decode(self, source) -> Document:
        text = read_text_source(source, "An HTML codec").replace("\r", "").replace("\n", "")
        soup = BeautifulSoup(text, "html.parser")
        if not soup.get_text():
            return Document()

        blocks = self._paragraph_elements(soup)
        if not blocks:
            logger.debug("No paragraph-level tags found, decoding the whole body as one paragraph")
            blocks = [soup.body or soup]
        return Document(paragraphs=[self.paragraph_codec.decode(b) for b in blocks])


class HtmlCodecGroup(CodecGroup):
    format = Format.HTML

    def __init__(self) -> None:
        self.segment = HtmlSegmentCodec()
        self.paragraph = HtmlParagraphCodec(self.segment)
        self.document = HtmlDocumentCodec(self.paragraph)


HTML = HtmlCodecGroup()
