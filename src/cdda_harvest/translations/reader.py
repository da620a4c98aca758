"""
Readers turning gettext ``.po``/``.mo`` catalogs into parsed-catalog mappings.

The parsed shape is the one ``catalog.compile_catalog`` consumes: every
message key maps to ``[source, translation, ...]`` and the ``""`` key holds
the catalog headers with lower-cased names.
"""

import logging
import os
import tempfile
from pathlib import PurePosixPath
from typing import Any, Dict, List, Union

import polib

from .catalog import HEADER_KEY

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\x04"

PO_CATALOG_PATTERN = "lang/po/*.po"
MO_CATALOG_PATTERN = "lang/mo/**/*.mo"


def _message_key(entry: Union[polib.POEntry, polib.MOEntry]) -> str:
    if entry.msgctxt:
        return f"{entry.msgctxt}{CONTEXT_SEPARATOR}{entry.msgid}"
    return entry.msgid


def _entry_slots(
    entry: Union[polib.POEntry, polib.MOEntry], translated: bool
) -> List[str]:
    if entry.msgid_plural:
        forms = [
            entry.msgstr_plural[index] if translated else ""
            for index in sorted(entry.msgstr_plural)
        ]
        return [entry.msgid_plural, *forms]
    return [entry.msgid, entry.msgstr if translated else ""]


def _to_catalog(
    catalog_file: Union[polib.POFile, polib.MOFile], include_fuzzy: bool
) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {
        HEADER_KEY: {
            name.lower(): value for name, value in catalog_file.metadata.items()
        }
    }
    for entry in catalog_file:
        if entry.obsolete:
            continue
        translated = include_fuzzy or not entry.fuzzy
        parsed[_message_key(entry)] = _entry_slots(entry, translated)
    return parsed


def parse_po(text: str, include_fuzzy: bool = False) -> Dict[str, Any]:
    """Parse ``.po`` source text into a parsed catalog.

    Args:
        text: Catalog source
        include_fuzzy: Keep fuzzy translations instead of treating them as untranslated

    Returns:
        Parsed catalog mapping
    """
    return _to_catalog(polib.pofile(text), include_fuzzy)


def parse_mo(data: bytes) -> Dict[str, Any]:
    """Parse a compiled ``.mo`` catalog into a parsed catalog."""
    # polib reads .mo catalogs from disk
    fd, temp_path = tempfile.mkstemp(suffix=".mo")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        return _to_catalog(polib.mofile(temp_path), include_fuzzy=True)
    finally:
        os.unlink(temp_path)


def locale_from_path(path: str) -> str:
    """Return the locale of a catalog path.

    ``lang/po/zh_CN.po`` and ``lang/mo/zh_CN/LC_MESSAGES/cataclysm-dda.mo``
    both give ``zh_CN``.
    """
    parts = PurePosixPath(path.replace("\\", "/"))
    if parts.suffix == ".mo" and "mo" in parts.parts:
        index = parts.parts.index("mo")
        if index + 1 < len(parts.parts) - 1:
            return parts.parts[index + 1]
    return parts.stem
