"""
Entry point for converting styled documents and counting their words.

Packages:
- inkwell.docs: document model and codec groups (md, html, rtf, txt, docx)
- inkwell.docs.pipeline: file-level read/convert/count helpers
- inkwell.wordcount: sectioned word counting
"""

from __future__ import annotations

import logging

from inkwell.config import load_settings
from inkwell.docs import Format, MarkdownCodecGroup, Style
from inkwell.docs.pipeline import convert_document, count_document
from inkwell.wordcount import total

__all__ = [
    "convert_document",
    "count_document",
]


def _cli() -> None:
    """CLI for document conversion and word counting.

    --file / -f: Path to input document (md|html|rtf|txt|docx)
    --out-format: Convert to this format (md|html|txt|docx); rtf output is unsupported
    --count: Print a per-section word count
    --case-sensitive: Count words with different casing separately
    --count-numbers: Count free-standing numbers as words
    --exclude: Style to leave out of the count (repeatable)
    --config: Path to a settings JSON (default: config/settings.json)
    --verbose / -v: Debug logging
    """
    import argparse

    parser = argparse.ArgumentParser(description="Convert styled documents between formats and count their words.")
    parser.add_argument("--file", "-f", type=str, required=True, help="Path to input document (md|html|rtf|txt|docx)")
    parser.add_argument("--out-format", type=str, choices=[f.value for f in Format], help="Output format for conversion")
    parser.add_argument("--count", action="store_true", help="Print word counts per section")
    parser.add_argument("--case-sensitive", action="store_true", help="Treat words with different casing as different words")
    parser.add_argument("--count-numbers", action="store_true", help="Count free-standing numbers as words")
    parser.add_argument("--exclude", action="append", default=[], choices=[s.value for s in Style], help="Style excluded from the count (repeatable)")
    parser.add_argument("--config", type=str, default=None, help="Path to settings JSON (default: config/settings.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    settings = load_settings(args.config)
    behaviour = settings.word_count
    if args.case_sensitive:
        behaviour.case_sensitive = True
    if args.count_numbers:
        behaviour.count_numbers = True
    if args.exclude:
        behaviour.excluded_styles = [Style(s) for s in args.exclude]

    if not args.out_format and not args.count:
        print("Please provide --out-format and/or --count.")
        print("Examples:\n  python main.py --file notes.rtf --out-format md\n  python main.py --file chapter.md --count")
        raise SystemExit(2)

    try:
        codecs = {Format.MARKDOWN: MarkdownCodecGroup(settings.markdown_delimiters)}
        if args.out_format:
            result = convert_document(args.file, args.out_format, codecs)
            for k, v in result.items():
                print(f"{k}: {v}")
        if args.count:
            sections = count_document(args.file, behaviour, codecs)
            for section in sections:
                title = section.heading or "(lead)"
                print(f"{'#' * section.level} {title}: {section.total} words")
            print(f"Total: {total(sections)} words")
    except (FileNotFoundError, ValueError, NotImplementedError) as e:
        print(str(e))
        raise SystemExit(2)


if __name__ == "__main__":
    _cli()
