import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from inkwell.docs.markdown_io import DEFAULT_DELIMITERS
from inkwell.docs.model import Style
from inkwell.wordcount import WordCountBehaviour

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SETTINGS_PATH = os.path.join(PROJECT_ROOT, "config", "settings.json")


@dataclass
class Settings:
    word_count: WordCountBehaviour = field(default_factory=WordCountBehaviour)
    markdown_delimiters: Dict[str, Style] = field(default_factory=lambda: dict(DEFAULT_DELIMITERS))


def _parse_styles(names: Any, where: str) -> List[Style]:
    styles: List[Style] = []
    for name in names or []:
        try:
            styles.append(Style(str(name).strip().lower()))
        except ValueError:
            print(f"Warning: Unknown style '{name}' in {where}, ignoring it")
    return styles


def _word_count_from(data: Dict[str, Any]) -> WordCountBehaviour:
    behaviour = WordCountBehaviour()
    if "excluded_styles" in data:
        behaviour.excluded_styles = _parse_styles(data["excluded_styles"], "word_count.excluded_styles")
    if "case_sensitive" in data:
        behaviour.case_sensitive = bool(data["case_sensitive"])
    if "count_numbers" in data:
        behaviour.count_numbers = bool(data["count_numbers"])
    separators = data.get("word_separators")
    if separators:
        behaviour.word_separators = [str(s) for s in separators if s]
    return behaviour


def _delimiters_from(data: Dict[str, Any]) -> Dict[str, Style]:
    table: Dict[str, Style] = {}
    for token, name in data.items():
        styles = _parse_styles([name], "markdown_delimiters")
        if token and styles:
            table[token] = styles[0]
    return table or dict(DEFAULT_DELIMITERS)


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from config/settings.json, falling back to defaults.

    Recognised keys:
    - word_count: {excluded_styles, case_sensitive, count_numbers, word_separators}
    - markdown_delimiters: {delimiter: style name}, in matching priority order
    """
    settings_path = path or SETTINGS_PATH
    settings = Settings()

    if not os.path.exists(settings_path):
        if path is not None:
            print(f"Warning: settings file not found at {settings_path}")
        return settings

    try:
        with open(settings_path, "r", encoding="utf-8") as settings_file:
            data = json.load(settings_file) or {}
    except Exception as exc:
        print(f"Warning: Could not load settings from {settings_path}: {exc}")
        return settings

    if not isinstance(data, dict):
        print(f"Warning: settings in {settings_path} must be a JSON object")
        return settings

    word_count = data.get("word_count")
    if isinstance(word_count, dict):
        settings.word_count = _word_count_from(word_count)
    delimiters = data.get("markdown_delimiters")
    if isinstance(delimiters, dict):
        settings.markdown_delimiters = _delimiters_from(delimiters)
    return settings
