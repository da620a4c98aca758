"""
Per-release processing: aggregate game data and compile translation
catalogs from one game tree.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..game_data import (
    BASE_DATA_PATTERN,
    MOD_DATA_PATTERN,
    Dataset,
    GameDataAggregator,
    GameDataCollection,
)
from ..snapshots.store import LANG_DIR, PINYIN_SUFFIX
from ..snapshots.tree import SnapshotTreeBuilder
from ..sources.files import FileSource
from ..translations import (
    MO_CATALOG_PATTERN,
    PO_CATALOG_PATTERN,
    TranslationTable,
    build_transliteration,
    compile_catalog,
    locale_from_path,
    needs_transliteration,
    parse_mo,
    parse_po,
)
from ..translations.transliteration import DEFAULT_PREFIXES


def catalog_path(prefix: str, locale: str, pinyin: bool = False) -> str:
    """Return the tree path of a locale's translation (or pinyin) document."""
    name = f"{locale}{PINYIN_SUFFIX}.json" if pinyin else f"{locale}.json"
    return "/".join(part for part in (prefix, LANG_DIR, name) if part)


@dataclass
class LocaleTables:
    """Compiled documents for one locale."""

    translation: TranslationTable
    transliteration: Optional[TranslationTable] = None


@dataclass
class ReleaseBuild:
    """Everything harvested from one game tree."""

    dataset: Dataset
    langs: Dict[str, LocaleTables] = field(default_factory=dict)

    @property
    def locales(self) -> List[str]:
        return sorted(self.langs)

    def add_catalogs(self, builder: SnapshotTreeBuilder, prefix: str = "") -> None:
        """Append every locale's translation and pinyin documents to a tree."""
        for locale in self.locales:
            tables = self.langs[locale]
            builder.add_document(catalog_path(prefix, locale), tables.translation)
            if tables.transliteration is not None:
                builder.add_document(
                    catalog_path(prefix, locale, pinyin=True), tables.transliteration
                )


class ReleaseProcessor:
    """Builds a ``ReleaseBuild`` from a file source.

    Catalogs are compiled concurrently, one task per locale, once the dataset
    has been fully aggregated.
    """

    def __init__(
        self,
        aggregator: Optional[GameDataAggregator] = None,
        max_workers: int = 8,
        transliterate_prefixes: Sequence[str] = DEFAULT_PREFIXES,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.aggregator = aggregator or GameDataAggregator()
        self.max_workers = max_workers
        self.transliterate_prefixes = tuple(transliterate_prefixes)

    def build(self, source: FileSource) -> ReleaseBuild:
        """Aggregate game data and compile catalogs from ``source``.

        Raises:
            MalformedObjectError: if any game data file cannot be scanned
        """
        self.logger.info("Collating JSON...")
        dataset = self.aggregator.aggregate(
            source.read_texts(BASE_DATA_PATTERN), source.read_texts(MOD_DATA_PATTERN)
        )

        self.logger.info("Compiling lang JSON...")
        langs = self.compile_catalogs(source, dataset.all_entries())
        self.logger.info(f"Found {len(langs)} languages")
        return ReleaseBuild(dataset=dataset, langs=langs)

    def _catalog_loaders(
        self, source: FileSource
    ) -> List[Tuple[str, Callable[[], Dict[str, Any]]]]:
        """Return ``(locale, parse)`` pairs, preferring ``.po`` over ``.mo``."""
        loaders: List[Tuple[str, Callable[[], Dict[str, Any]]]] = []
        for po_file in source.list_files(PO_CATALOG_PATTERN):
            text = po_file.read_text()
            loaders.append((locale_from_path(po_file.name), partial(parse_po, text)))
        if loaders:
            return loaders

        for mo_file in source.list_files(MO_CATALOG_PATTERN):
            data = mo_file.read_bytes()
            loaders.append((locale_from_path(mo_file.name), partial(parse_mo, data)))
        return loaders

    def _compile_locale(
        self,
        locale: str,
        parse: Callable[[], Dict[str, Any]],
        entries: GameDataCollection,
    ) -> LocaleTables:
        table = compile_catalog(parse())
        transliteration = None
        if needs_transliteration(locale, self.transliterate_prefixes):
            transliteration = build_transliteration(entries, table)
        return LocaleTables(translation=table, transliteration=transliteration)

    def compile_catalogs(
        self, source: FileSource, entries: GameDataCollection
    ) -> Dict[str, LocaleTables]:
        """Compile every catalog in ``source`` in parallel."""
        loaders = self._catalog_loaders(source)
        if not loaders:
            self.logger.warning("No translation catalogs found")
            return {}

        langs: Dict[str, LocaleTables] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_locale = {
                executor.submit(self._compile_locale, locale, parse, entries): locale
                for locale, parse in loaders
            }
            for future in as_completed(future_to_locale):
                locale = future_to_locale[future]
                langs[locale] = future.result()
                self.logger.debug(f"Compiled catalog {locale}")

        return dict(sorted(langs.items()))
