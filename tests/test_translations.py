"""Tests for catalog reading, compilation and pinyin indexing."""

import logging

import polib
import pytest

from cdda_harvest.errors import CatalogHeaderMissing
from cdda_harvest.translations import (
    HEADER_KEY,
    build_transliteration,
    candidate_names,
    catalog_header,
    compile_catalog,
    compile_entry,
    locale_from_path,
    needs_transliteration,
    parse_mo,
    parse_po,
    romanize,
)
from cdda_harvest.translations.reader import CONTEXT_SEPARATOR

from samples import FR_PO, ZH_CN_PO

ZH_HEADER = {"language": "zh_CN", "plural-forms": "nplurals=1; plural=0;"}


class TestCompileCatalog:
    """Test flattening parsed catalogs into translation tables."""

    def test_single_translation(self) -> None:
        """A two-slot entry compiles to its translation string."""
        catalog = {"": ZH_HEADER, "Hello": ["Hello", "你好"]}

        assert compile_catalog(catalog) == {"": ZH_HEADER, "Hello": "你好"}

    def test_header_is_trimmed(self) -> None:
        """Only language and plural rules survive from the header."""
        catalog = {"": {**ZH_HEADER, "content-type": "text/plain; charset=UTF-8"}}

        assert compile_catalog(catalog)[HEADER_KEY] == ZH_HEADER

    def test_untranslated_entries_are_dropped(self) -> None:
        catalog = {"": ZH_HEADER, "a": ["a", ""], "b": ["b", "乙"], "c": ["c"]}

        assert set(compile_catalog(catalog)) == {"", "b"}

    def test_plural_forms_become_lists(self) -> None:
        catalog = {"": ZH_HEADER, "rifle": ["rifles", "fusil", "fusils"]}

        assert compile_catalog(catalog)["rifle"] == ["fusil", "fusils"]

    def test_missing_header_is_synthesized(self, caplog: pytest.LogCaptureFixture) -> None:
        """A catalog without header still compiles, with an empty header."""
        with caplog.at_level(logging.WARNING):
            table = compile_catalog({"Hello": ["Hello", "Hallo"]})

        assert table == {"": {"language": None, "plural-forms": None}, "Hello": "Hallo"}
        assert "header missing" in caplog.text

    def test_catalog_header_raises(self) -> None:
        with pytest.raises(CatalogHeaderMissing):
            catalog_header({"Hello": ["Hello", "Hallo"]})

    def test_compile_entry(self) -> None:
        assert compile_entry(["x", "y"]) == "y"
        assert compile_entry(["x", "", "z"]) is None
        assert compile_entry(["x", "y", ""]) == ["y", ""]


class TestReaders:
    """Test reading gettext catalogs with polib."""

    def test_parse_po(self) -> None:
        """Entries, contexts and plurals map to slot lists."""
        catalog = parse_po(ZH_CN_PO)

        assert catalog[""]["language"] == "zh_CN"
        assert catalog["Hello"] == ["Hello", "你好"]
        assert catalog["rifle"] == ["rifles", "步枪"]
        assert catalog[f"verb{CONTEXT_SEPARATOR}open"] == ["open", "打开"]
        assert catalog["untranslated"] == ["untranslated", ""]

    def test_fuzzy_entries_count_as_untranslated(self) -> None:
        assert parse_po(ZH_CN_PO)["guess"] == ["guess", ""]
        assert parse_po(ZH_CN_PO, include_fuzzy=True)["guess"] == ["guess", "猜测"]

    def test_parse_and_compile_po(self) -> None:
        table = compile_catalog(parse_po(FR_PO))

        assert table == {
            "": {"language": "fr", "plural-forms": "nplurals=2; plural=(n > 1);"},
            "Hello": "Bonjour",
            "rifle": ["fusil", "fusils"],
        }

    def test_parse_mo(self, tmp_path) -> None:
        """Compiled catalogs read back to the same slots."""
        po = polib.pofile(FR_PO)
        mo_path = tmp_path / "fr.mo"
        po.save_as_mofile(str(mo_path))

        catalog = parse_mo(mo_path.read_bytes())

        assert catalog[""]["language"] == "fr"
        assert catalog["Hello"] == ["Hello", "Bonjour"]
        assert catalog["rifle"] == ["rifles", "fusil", "fusils"]

    def test_locale_from_path(self) -> None:
        assert locale_from_path("lang/po/zh_CN.po") == "zh_CN"
        assert locale_from_path("lang/mo/ru/LC_MESSAGES/cataclysm-dda.mo") == "ru"


class TestTransliteration:
    """Test the pinyin index for Chinese locales."""

    def test_needs_transliteration(self) -> None:
        assert needs_transliteration("zh_CN")
        assert needs_transliteration("zh_TW")
        assert not needs_transliteration("fr")
        assert needs_transliteration("ja", prefixes=("ja",))

    def test_romanize(self) -> None:
        assert romanize("你好") == "ni hao"
        assert romanize("步枪") == "bu qiang"

    def test_candidate_names(self) -> None:
        """Plain and structured names are collected once, in order."""
        entries = [
            {"id": "a", "name": "Hello"},
            {"id": "b", "name": {"str": "rifle", "str_pl": "rifles"}},
            {"id": "c", "name": "Hello"},
            {"id": "d"},
            {"id": "e", "name": {"ctxt": "verb", "str_sp": "ammo"}},
        ]

        assert candidate_names(entries) == ["Hello", "rifle", "rifles", "ammo"]

    def test_build_transliteration(self) -> None:
        """Only translated display names are indexed."""
        entries = [
            {"id": "greeting", "name": "Hello"},
            {"id": "rifle", "name": {"str": "rifle"}},
            {"id": "unknown", "name": "Nothing"},
        ]
        table = {"": ZH_HEADER, "Hello": "你好", "rifle": ["步枪"], "Bye": "再见"}

        result = build_transliteration(entries, table)

        assert result == {"": ZH_HEADER, "Hello": "ni hao", "rifle": ["bu qiang"]}
