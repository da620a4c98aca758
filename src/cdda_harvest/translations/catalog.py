"""
Compilation of parsed gettext catalogs into flat translation tables.

A parsed catalog maps each message key to ``[source, translation, ...]``
slots, plus a reserved ``""`` entry holding the catalog headers. The compiled
table maps each key straight to its translation (or plural-form list).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, TypeAlias, Union

from ..errors import CatalogHeaderMissing

logger = logging.getLogger(__name__)

ParsedCatalog: TypeAlias = Mapping[str, Any]
"""Message key -> slot list, plus the ``""`` header mapping."""

Translation: TypeAlias = Union[str, List[str]]

TranslationTable: TypeAlias = Dict[str, Any]
"""Message key -> translation, plus the ``""`` metadata entry."""

HEADER_KEY = ""
HEADER_FIELDS = ("language", "plural-forms")


def catalog_header(catalog: ParsedCatalog) -> Dict[str, Optional[str]]:
    """Return the catalog header trimmed to language and plural rules.

    Raises:
        CatalogHeaderMissing: if the catalog has no ``""`` entry
    """
    header = catalog.get(HEADER_KEY)
    if not isinstance(header, Mapping):
        raise CatalogHeaderMissing("catalog has no header entry")
    return {name: header.get(name) for name in HEADER_FIELDS}


def compile_entry(slots: Sequence[str]) -> Optional[Translation]:
    """Compile one message's slots; ``None`` means untranslated."""
    if len(slots) < 2 or not slots[1]:
        return None
    if len(slots) == 2:
        return slots[1]
    return list(slots[1:])


def compile_catalog(catalog: ParsedCatalog) -> TranslationTable:
    """Flatten a parsed catalog into a translation lookup table.

    Untranslated entries (empty first translation slot) are left out, since
    an empty entry cannot be told apart from one not yet translated.

    Args:
        catalog: Parsed catalog as produced by ``translations.reader``

    Returns:
        Translation table with the trimmed header under ``""``
    """
    try:
        header = catalog_header(catalog)
    except CatalogHeaderMissing:
        logger.warning("Catalog header missing, using an empty one")
        header = {name: None for name in HEADER_FIELDS}

    table: TranslationTable = {HEADER_KEY: header}
    dropped = 0
    for key, slots in catalog.items():
        if key == HEADER_KEY:
            continue
        translation = compile_entry(slots)
        if translation is None:
            dropped += 1
            continue
        table[key] = translation

    logger.debug(
        f"Compiled catalog '{header['language']}': "
        f"{len(table) - 1} translated, {dropped} untranslated"
    )
    return table
