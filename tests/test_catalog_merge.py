"""Catalog merger tests: seeding, preservation, obsolete entries."""

from hypothesis import given
from hypothesis import strategies as st

from icuflow.catalog import (
    Catalog,
    CatalogEntry,
    CatalogMerger,
    CatalogStats,
    ExtractedCatalog,
    ExtractedEntry,
    catalog_stats,
    merge_catalogs,
)

APP = (("app.py", 3),)


class TestSourceLocale:
    """The source locale is seeded from the extracted text."""

    def test_new_message_seeded_with_id(self) -> None:
        result = merge_catalogs({"en": None}, {"Hello": ExtractedEntry(origin=APP)}, "en")

        assert result["en"]["Hello"] == CatalogEntry(translation="Hello", origin=APP)

    def test_new_message_seeded_with_defaults(self) -> None:
        extracted = {"greet": ExtractedEntry(defaults="Hello {name}", origin=APP)}

        result = merge_catalogs({"en": None}, extracted, "en")

        assert result["en"]["greet"].translation == "Hello {name}"
        assert result["en"]["greet"].defaults == "Hello {name}"

    def test_empty_defaults_seed_empty_translation(self) -> None:
        extracted = {"spacer": ExtractedEntry(defaults="", origin=APP)}

        result = merge_catalogs({"en": None}, extracted, "en")

        assert result["en"]["spacer"].translation == ""
        assert result["en"]["spacer"].defaults == ""

    def test_existing_translation_kept(self) -> None:
        prev = {"en": {"Hello": CatalogEntry(translation="Hi there")}}

        result = merge_catalogs(prev, {"Hello": ExtractedEntry()}, "en")

        assert result["en"]["Hello"].translation == "Hi there"

    def test_empty_translation_reseeded(self) -> None:
        prev = {"en": {"Hello": CatalogEntry(translation="")}}

        result = merge_catalogs(prev, {"Hello": ExtractedEntry()}, "en")

        assert result["en"]["Hello"].translation == "Hello"

    def test_overwrite_replaces_source_translation(self) -> None:
        prev = {"en": {"greet": CatalogEntry(translation="Hi", defaults="Hi")}}
        extracted = {"greet": ExtractedEntry(defaults="Hello")}

        result = merge_catalogs(prev, extracted, "en", overwrite=True)

        assert result["en"]["greet"].translation == "Hello"

    def test_overwrite_per_call(self) -> None:
        merger = CatalogMerger("en")
        prev = {"en": {"greet": CatalogEntry(translation="Hi")}}
        extracted = {"greet": ExtractedEntry(defaults="Hello")}

        assert merger.merge(prev, extracted)["en"]["greet"].translation == "Hi"
        assert merger.merge(prev, extracted, overwrite=True)["en"]["greet"].translation == "Hello"


class TestOtherLocales:
    def test_new_message_untranslated(self) -> None:
        result = merge_catalogs({"en": None, "cs": None}, {"Hello": ExtractedEntry()}, "en")

        assert result["cs"]["Hello"].translation == ""

    def test_translation_preserved(self) -> None:
        prev = {"cs": {"Hello": CatalogEntry(translation="Ahoj", origin=(("old.py", 1),))}}

        result = merge_catalogs(prev, {"Hello": ExtractedEntry(origin=APP)}, "en")

        assert result["cs"]["Hello"] == CatalogEntry(translation="Ahoj", origin=APP)

    def test_overwrite_never_touches_other_locales(self) -> None:
        prev = {"cs": {"Hello": CatalogEntry(translation="Ahoj")}}

        result = merge_catalogs(prev, {"Hello": ExtractedEntry()}, "en", overwrite=True)

        assert result["cs"]["Hello"].translation == "Ahoj"

    def test_locales_come_from_prev_catalogs(self) -> None:
        result = merge_catalogs({"cs": None}, {"Hello": ExtractedEntry()}, "en")

        assert list(result) == ["cs"]


class TestObsolete:
    def test_missing_message_marked_obsolete(self) -> None:
        prev = {"cs": {"Gone": CatalogEntry(translation="Pryč", origin=APP)}}

        result = merge_catalogs(prev, {}, "en")

        assert result["cs"]["Gone"] == CatalogEntry(translation="Pryč", origin=APP, obsolete=True)

    def test_reappearing_message_revived(self) -> None:
        prev = {"cs": {"Back": CatalogEntry(translation="Zpět", obsolete=True)}}

        result = merge_catalogs(prev, {"Back": ExtractedEntry(origin=APP)}, "en")

        assert result["cs"]["Back"] == CatalogEntry(translation="Zpět", origin=APP)

    def test_inputs_not_modified(self) -> None:
        entry = CatalogEntry(translation="Pryč")
        prev = {"cs": {"Gone": entry}}

        merge_catalogs(prev, {}, "en")

        assert prev == {"cs": {"Gone": entry}}
        assert not entry.obsolete


class TestChangedDefaults:
    def test_reported_once_per_id(self) -> None:
        merger = CatalogMerger("en")
        prev = {
            "en": {"greet": CatalogEntry(translation="Hi", defaults="Hi")},
            "cs": {"greet": CatalogEntry(translation="Ahoj", defaults="Hi")},
        }

        merger.merge(prev, {"greet": ExtractedEntry(defaults="Hello")})

        assert merger.changed_defaults() == ("greet",)

    def test_unchanged_and_new_ids_not_reported(self) -> None:
        merger = CatalogMerger("en")
        prev = {"en": {"greet": CatalogEntry(translation="Hi", defaults="Hi")}}

        merger.merge(
            prev,
            {"greet": ExtractedEntry(defaults="Hi"), "bye": ExtractedEntry(defaults="Bye")},
        )

        assert merger.changed_defaults() == ()


class TestCatalogStats:
    def test_obsolete_excluded(self) -> None:
        catalog = {
            "a": CatalogEntry("A"),
            "b": CatalogEntry(""),
            "c": CatalogEntry("", obsolete=True),
        }

        assert catalog_stats(catalog) == CatalogStats(total=2, missing=1)


# ============================================================================
# PROPERTIES
# ============================================================================

message_ids = st.text(alphabet="abc {}", min_size=1, max_size=6)
extracted_catalogs = st.dictionaries(
    message_ids,
    st.builds(
        ExtractedEntry,
        defaults=st.none() | st.text(alphabet="xyz", min_size=1, max_size=4),
        origin=st.lists(st.tuples(st.sampled_from(["a.py", "b.html"]), st.integers(1, 99)))
        .map(tuple),
    ),
    max_size=6,
)
stored_catalogs = st.dictionaries(
    message_ids,
    st.builds(
        CatalogEntry,
        translation=st.text(alphabet="tr", max_size=3),
        obsolete=st.booleans(),
    ),
    max_size=6,
)


class TestMergeProperties:
    @given(extracted_catalogs, stored_catalogs, stored_catalogs)
    def test_idempotent(
        self, extracted: ExtractedCatalog, en: Catalog, cs: Catalog
    ) -> None:
        once = merge_catalogs({"en": en, "cs": cs}, extracted, "en")
        twice = merge_catalogs(once, extracted, "en")

        assert twice == once

    @given(extracted_catalogs, stored_catalogs)
    def test_keys_are_union(self, extracted: ExtractedCatalog, prev: Catalog) -> None:
        result = merge_catalogs({"cs": prev}, extracted, "en")["cs"]

        assert set(result) == set(extracted) | set(prev)
        assert all(result[key].obsolete == (key not in extracted) for key in result)

    @given(extracted_catalogs)
    def test_source_locale_fully_translated(self, extracted: ExtractedCatalog) -> None:
        result = merge_catalogs({"en": None}, extracted, "en")["en"]

        assert catalog_stats(result).missing == 0
