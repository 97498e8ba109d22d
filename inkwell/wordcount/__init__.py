"""Word counting over the document model."""

from .engine import (
    DEFAULT_WORD_SEPARATORS,
    Section,
    Word,
    WordCountBehaviour,
    WordCountEngine,
    count,
    total,
)

__all__ = [
    "DEFAULT_WORD_SEPARATORS",
    "Section",
    "Word",
    "WordCountBehaviour",
    "WordCountEngine",
    "count",
    "total",
]
