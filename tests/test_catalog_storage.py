"""Catalog storage tests: json, minimal and PO files on disk."""

import json
from pathlib import Path

import pytest

from icuflow.catalog import CatalogEntry, CatalogStore
from icuflow.diagnostics import CatalogFormatError, DiagnosticCode
from icuflow.enums import CatalogFormat

CATALOG = {
    "Hello {name}": CatalogEntry(translation="Ahoj {name}", origin=(("app.py", 3), ("b.py", 9))),
    "greet": CatalogEntry(translation="Nazdar", defaults="Hi there", origin=(("app.py", 5),)),
    "Untranslated": CatalogEntry(origin=(("app.py", 7),)),
    "Gone": CatalogEntry(translation="Pryč", defaults="Old text", obsolete=True),
}


class TestPaths:
    def test_catalog_path_per_format(self, tmp_path: Path) -> None:
        assert CatalogStore(tmp_path).catalog_path("cs") == tmp_path / "cs" / "messages.json"
        assert CatalogStore(tmp_path, "minimal").catalog_path("cs") == (
            tmp_path / "cs" / "messages.json"
        )
        assert CatalogStore(tmp_path, "po").catalog_path("cs") == tmp_path / "cs" / "messages.po"

    def test_string_arguments_normalized(self, tmp_path: Path) -> None:
        store = CatalogStore(str(tmp_path), "po", "json")  # type: ignore[arg-type]

        assert store.locale_dir == tmp_path
        assert store.format is CatalogFormat.PO
        assert store.prev_format is CatalogFormat.JSON

    def test_unknown_format(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogFormatError) as exc_info:
            CatalogStore(tmp_path, "yaml")  # type: ignore[arg-type]

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CATALOG_UNKNOWN_FORMAT

    @pytest.mark.parametrize("locale", ["", "../etc", "cs/LC_MESSAGES", "a\\b"])
    def test_invalid_locale_rejected(self, tmp_path: Path, locale: str) -> None:
        with pytest.raises(ValueError, match="locale|Locale"):
            CatalogStore(tmp_path).catalog_path(locale)

    def test_get_locales(self, locale_dir: Path) -> None:
        (locale_dir / "_build").mkdir()
        (locale_dir / "README.md").write_text("notes", encoding="utf-8")

        assert CatalogStore(locale_dir).get_locales() == ("cs", "en")

    def test_get_locales_without_directory(self, tmp_path: Path) -> None:
        assert CatalogStore(tmp_path / "missing").get_locales() == ()


class TestJson:
    def test_round_trip(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir)

        store.write("cs", CATALOG)

        assert store.read("cs") == CATALOG

    def test_record_layout(self, locale_dir: Path) -> None:
        path = CatalogStore(locale_dir).write("cs", CATALOG)
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["greet"] == {
            "defaults": "Hi there",
            "translation": "Nazdar",
            "origin": [["app.py", 5]],
        }
        assert data["Gone"]["obsolete"] is True
        assert "obsolete" not in data["greet"]

    def test_missing_catalog(self, locale_dir: Path) -> None:
        assert CatalogStore(locale_dir).read("cs") is None

    def test_read_all(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir)
        store.write("cs", CATALOG)

        assert store.read_all() == {"cs": CATALOG, "en": None}

    def test_write_all_creates_locale_directories(self, tmp_path: Path) -> None:
        store = CatalogStore(tmp_path / "locale")

        paths = store.write_all({"de": {}, "fr": {}})

        assert [path.parent.name for path in paths] == ["de", "fr"]
        assert store.get_locales() == ("de", "fr")


class TestMinimal:
    def test_translations_only(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir, "minimal")
        path = store.write("cs", CATALOG)

        assert json.loads(path.read_text(encoding="utf-8"))["greet"] == "Nazdar"
        assert store.read("cs") == {
            message_id: CatalogEntry(translation=entry.translation)
            for message_id, entry in CATALOG.items()
        }

    def test_reads_full_records(self, locale_dir: Path) -> None:
        CatalogStore(locale_dir).write("cs", CATALOG)

        assert CatalogStore(locale_dir, "minimal").read("cs") == CATALOG


class TestPo:
    def test_round_trip(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir, "po")

        store.write("cs", CATALOG)
        catalog = store.read("cs")

        assert catalog is not None
        assert {key: entry for key, entry in catalog.items() if not entry.obsolete} == {
            key: entry for key, entry in CATALOG.items() if not entry.obsolete
        }

    def test_obsolete_entry(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir, "po")
        store.write("cs", CATALOG)
        catalog = store.read("cs")

        assert catalog is not None
        assert catalog["Gone"] == CatalogEntry(
            translation="Pryč", defaults="Old text", obsolete=True
        )

    def test_file_layout(self, locale_dir: Path) -> None:
        path = CatalogStore(locale_dir, "po").write("cs", CATALOG)
        text = path.read_text(encoding="utf-8")

        assert "#: app.py:5" in text
        assert "#. defaults: Hi there" in text
        assert 'msgid "greet"' in text
        assert '#~ msgid "Gone"' in text

    def test_location_without_line(self, locale_dir: Path) -> None:
        store = CatalogStore(locale_dir, "po")
        store.write("cs", {"Hi": CatalogEntry(translation="Ahoj", origin=(("page.html", 0),))})

        assert store.read("cs") == {
            "Hi": CatalogEntry(translation="Ahoj", origin=(("page.html", 0),))
        }


class TestPrevFormat:
    def test_reads_previous_format(self, locale_dir: Path) -> None:
        CatalogStore(locale_dir, "json").write("cs", CATALOG)

        store = CatalogStore(locale_dir, "po", prev_format="json")  # type: ignore[arg-type]

        assert store.read("cs") == CATALOG

    def test_current_format_preferred(self, locale_dir: Path) -> None:
        CatalogStore(locale_dir, "json").write("cs", {"a": CatalogEntry("old")})
        CatalogStore(locale_dir, "po").write("cs", {"a": CatalogEntry("new")})

        store = CatalogStore(locale_dir, "po", prev_format="json")  # type: ignore[arg-type]

        assert store.read("cs") == {"a": CatalogEntry("new")}

    def test_without_prev_format(self, locale_dir: Path) -> None:
        CatalogStore(locale_dir, "json").write("cs", CATALOG)

        assert CatalogStore(locale_dir, "po").read("cs") is None


class TestCorruptFiles:
    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2]", '{"a": 5}', '{"a": {"origin": [["x.py"]]}}'],
    )
    def test_json(self, locale_dir: Path, content: str) -> None:
        (locale_dir / "cs" / "messages.json").write_text(content, encoding="utf-8")

        with pytest.raises(CatalogFormatError) as exc_info:
            CatalogStore(locale_dir).read("cs")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CATALOG_UNREADABLE

    def test_po(self, locale_dir: Path) -> None:
        (locale_dir / "cs" / "messages.po").write_text(
            'msgid "a"\nmsgstr "b"\nmsgid\n', encoding="utf-8"
        )

        with pytest.raises(CatalogFormatError):
            CatalogStore(locale_dir, "po").read("cs")
