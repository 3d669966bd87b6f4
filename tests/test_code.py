import pytest

from fdup.code import Extractor, PatternError, format_code, normalize

from conftest import DEFAULT_PATTERNS


@pytest.mark.parametrize(
    "raw, expected",
    [("prj-001", "PRJ001"), ("PRJ001", "PRJ001"), ("a-b-c", "ABC"), ("", "")],
)
def test_normalize(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", ["prj-001", "Doc-12-x", "abc", "--", "x1-y2"])
def test_normalize_is_idempotent(raw):
    assert normalize(normalize(raw)) == normalize(raw)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("PRJ001", "PRJ-001"),
        ("DOC123", "DOC-123"),
        ("AB12CD34", "AB-12CD34"),
        ("ABC", "ABC"),
        ("123", "123"),
        ("", ""),
    ],
)
def test_format_code(code, expected):
    assert format_code(code) == expected


@pytest.mark.parametrize("raw", ["prj-001", "abc-12345", "Xy9"])
def test_format_inserts_single_hyphen_before_first_digit(raw):
    formatted = format_code(normalize(raw))
    assert formatted.count("-") == 1
    pos = formatted.index("-")
    assert formatted[pos + 1].isdigit()
    assert not any(ch.isdigit() for ch in formatted[:pos])


def test_extract_default_patterns():
    ex = Extractor(DEFAULT_PATTERNS)
    assert ex.extract("PRJ-001_final.zip") == ("PRJ001", True)
    assert ex.extract("PRJ001_copy.zip") == ("PRJ001", True)
    assert ex.extract("doc123.pdf") == ("DOC123", True)
    assert ex.extract("random_file.txt") == ("", False)


def test_extract_is_case_insensitive():
    ex = Extractor([r"([A-Z]{3})-(\d{2})"])
    assert ex.extract("abc-12.txt") == ("ABC12", True)


def test_first_pattern_in_order_wins():
    name = "ABC-123 XYZ999.txt"
    assert Extractor([r"(XYZ\d+)", r"(ABC-\d+)"]).extract(name) == ("XYZ999", True)
    assert Extractor([r"(ABC-\d+)", r"(XYZ\d+)"]).extract(name) == ("ABC123", True)


def test_extract_is_deterministic():
    ex = Extractor(DEFAULT_PATTERNS)
    results = {ex.extract("report_QA-0042_v2.docx") for _ in range(5)}
    assert results == {("QA0042", True)}


def test_pattern_without_groups_is_skipped():
    ex = Extractor([r"[A-Z]+\d+", r"([A-Z]+)(\d+)"])
    assert ex.extract("ab12") == ("AB12", True)


def test_empty_optional_groups_fall_through():
    ex = Extractor([r"(zzz)?", r"(doc)(\d+)"])
    assert ex.extract("doc7.pdf") == ("DOC7", True)


def test_optional_group_that_did_not_participate_is_empty():
    ex = Extractor([r"([a-z]+)(-x)?(\d+)"])
    assert ex.extract("abc12") == ("ABC12", True)


def test_invalid_pattern_raises_pattern_error():
    with pytest.raises(PatternError) as info:
        Extractor([r"(ok)", r"([unclosed"])
    assert info.value.pattern == "([unclosed"
    assert isinstance(info.value, ValueError)
