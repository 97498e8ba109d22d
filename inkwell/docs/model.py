from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional


class Style(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"


# Canonical iteration order for style sets (frozensets have none of their own).
STYLE_ORDER = (Style.BOLD, Style.ITALIC, Style.STRIKETHROUGH)

NO_STYLE: FrozenSet[Style] = frozenset()


def ordered_styles(styles: Iterable[Style]) -> List[Style]:
    present = set(styles)
    return [s for s in STYLE_ORDER if s in present]


@dataclass(frozen=True)
class Segment:
    text: str
    styles: FrozenSet[Style] = NO_STYLE

    def __post_init__(self) -> None:
        # Accept any iterable of styles (or their names) but store a frozenset.
        object.__setattr__(self, "styles", frozenset(Style(s) for s in self.styles))


@dataclass
class Paragraph:
    segments: List[Segment] = field(default_factory=list)
    heading: Optional[int] = None

    def __post_init__(self) -> None:
        if self.heading is not None and not (1 <= self.heading <= 6):
            raise ValueError(f"Heading level must be between 1 and 6, got {self.heading}")

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)


@dataclass
class Document:
    paragraphs: List[Paragraph] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.paragraphs)


def merge_segments(segments: Iterable[Segment]) -> List[Segment]:
    """Join adjacent segments sharing a style set and drop empty ones."""
    out: List[Segment] = []
    for seg in segments:
        if not seg.text:
            continue
        if out and out[-1].styles == seg.styles:
            out[-1] = Segment(out[-1].text + seg.text, seg.styles)
        else:
            out.append(seg)
    return out
