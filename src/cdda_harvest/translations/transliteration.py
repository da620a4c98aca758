"""
Pinyin index for Chinese translations of display names.

Lets the guide search Chinese item and monster names by pronunciation.
"""

import logging
from typing import Any, Dict, Iterable, List, Sequence

from pypinyin import Style, pinyin

from ..game_data.models import GameDataObject
from .catalog import HEADER_KEY, TranslationTable

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = ("zh_",)

# Name record fields: singular, explicit-count and plural forms
NAME_FORMS = ("str", "str_sp", "str_pl")


def needs_transliteration(
    locale: str, prefixes: Sequence[str] = DEFAULT_PREFIXES
) -> bool:
    """Return True if the locale gets a phonetic index."""
    return any(locale.startswith(prefix) for prefix in prefixes)


def candidate_names(entries: Iterable[GameDataObject]) -> List[str]:
    """Collect display-name strings from game objects, first occurrence first."""
    names: Dict[str, None] = {}
    for entry in entries:
        name = entry.get("name")
        if not name:
            continue
        if isinstance(name, str):
            names.setdefault(name)
        elif isinstance(name, dict):
            for form in NAME_FORMS:
                value = name.get(form)
                if value and isinstance(value, str):
                    names.setdefault(value)
    return list(names)


def romanize(text: str) -> str:
    """Render text as space-separated, tone-less pinyin."""
    syllables = pinyin(text, style=Style.NORMAL)
    return " ".join(" ".join(group) for group in syllables)


def _romanize_value(value: Any) -> Any:
    if isinstance(value, list):
        return [romanize(item) for item in value]
    return romanize(value)


def build_transliteration(
    entries: Iterable[GameDataObject], table: TranslationTable
) -> TranslationTable:
    """Build the pinyin table for the translated display names in ``entries``.

    Args:
        entries: Game objects whose ``name`` fields are indexed
        table: Compiled translation table for a Chinese locale

    Returns:
        Table mapping each source name to its romanized translation, with the
        translation table's ``""`` metadata copied as is
    """
    result: TranslationTable = {HEADER_KEY: table.get(HEADER_KEY)}
    for name in candidate_names(entries):
        translation = table.get(name)
        if translation:
            result[name] = _romanize_value(translation)
    logger.debug(f"Transliterated {len(result) - 1} names")
    return result
