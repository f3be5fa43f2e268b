import pytest

from coursereg.catalog import Catalog
from coursereg.errors import UnknownCourseCode
from coursereg.models import CourseRecord


def _small() -> Catalog:
    return Catalog(
        [
            CourseRecord("CS101", "Programming I", 3, "Core"),
            CourseRecord("AI501", "Intro to AI", 3, "AI"),
            CourseRecord("CS201", "Graphics", 2, "HCI"),
            CourseRecord("AI502", "Machine Learning", 4, "AI"),
        ]
    )


def test_lookup_and_require() -> None:
    catalog = _small()
    record = catalog.lookup("AI501")
    assert record is not None
    assert record.credits == 3
    assert catalog.lookup("nope") is None
    assert catalog.lookup("") is None
    assert catalog.require("CS101").title == "Programming I"
    with pytest.raises(UnknownCourseCode) as excinfo:
        catalog.require("ZZ999")
    assert excinfo.value.code == "ZZ999"
    assert "ZZ999" in str(excinfo.value)


def test_lookup_is_exact_match() -> None:
    assert _small().lookup("cs101") is None


def test_filter_by_domain_keeps_catalog_order() -> None:
    assert [record.code for record in _small().filter("AI", "")] == ["AI501", "AI502"]


def test_filter_search_matches_code_or_title_case_insensitively() -> None:
    catalog = _small()
    assert [record.code for record in catalog.filter("All", "cs")] == ["CS101", "CS201"]
    assert [record.code for record in catalog.filter("All", "MACHINE")] == ["AI502"]
    assert [record.code for record in catalog.filter("AI", "intro")] == ["AI501"]
    assert catalog.filter("HCI", "machine") == []


def test_filter_defaults_return_everything() -> None:
    catalog = _small()
    assert catalog.filter() == list(catalog)


def test_filter_unknown_domain_is_empty() -> None:
    assert _small().filter("Nope", "") == []


def test_domain_list_starts_with_all_in_first_seen_order() -> None:
    assert _small().domain_list() == ["All", "Core", "AI", "HCI"]


def test_bundled_ai_filter(catalog: Catalog) -> None:
    ai = catalog.filter("AI", "")
    assert [record.code for record in ai] == ["AI501", "AI502", "AI503"]
    assert all(record.domain == "AI" for record in ai)


def test_bundled_search_cs10(catalog: Catalog) -> None:
    matches = catalog.filter("All", "cs10")
    expected = [
        record.code
        for record in catalog
        if "cs10" in record.code.lower() or "cs10" in record.title.lower()
    ]
    assert [record.code for record in matches] == expected
    assert expected == ["CS101", "CS102", "CS103", "CS104", "CS105", "CS106", "CS107", "CS108"]


def test_bundled_domain_list(catalog: Catalog) -> None:
    assert catalog.domain_list() == [
        "All",
        "Core",
        "SE",
        "Theory",
        "Systems",
        "Security",
        "AI",
        "Data",
        "HCI",
        "Interdisciplinary",
    ]


def test_duplicate_and_invalid_records_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate course code"):
        Catalog([CourseRecord("A", "a", 1, "X"), CourseRecord("A", "b", 2, "X")])
    with pytest.raises(ValueError, match="positive credits"):
        Catalog([CourseRecord("A", "a", -1, "X")])


def test_contains_and_iteration() -> None:
    catalog = _small()
    assert "AI502" in catalog
    assert "AI999" not in catalog
    assert len(catalog) == 4


def test_record_to_dict() -> None:
    assert CourseRecord("CS101", "Programming I", 3, "Core").to_dict() == {
        "code": "CS101",
        "title": "Programming I",
        "credits": 3,
        "domain": "Core",
    }
