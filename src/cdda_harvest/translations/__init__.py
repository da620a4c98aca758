"""
Translation catalogs: reading gettext files, compiling them into lookup
tables and building pinyin indexes for Chinese locales.
"""

from .catalog import (
    HEADER_KEY,
    ParsedCatalog,
    TranslationTable,
    catalog_header,
    compile_catalog,
    compile_entry,
)
from .reader import (
    MO_CATALOG_PATTERN,
    PO_CATALOG_PATTERN,
    locale_from_path,
    parse_mo,
    parse_po,
)
from .transliteration import (
    build_transliteration,
    candidate_names,
    needs_transliteration,
    romanize,
)

__all__ = [
    "HEADER_KEY",
    "ParsedCatalog",
    "TranslationTable",
    "catalog_header",
    "compile_catalog",
    "compile_entry",
    "MO_CATALOG_PATTERN",
    "PO_CATALOG_PATTERN",
    "locale_from_path",
    "parse_mo",
    "parse_po",
    "build_transliteration",
    "candidate_names",
    "needs_transliteration",
    "romanize",
]
