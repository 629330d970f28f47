"""Unit tests for RIS parsing and field resolution."""

import pytest

from citeparse.errors import CitationFormat, Field, MissingValue, ParseError, SyntaxReason
from citeparse.models import Citation, Date
from citeparse.parse.ris import RisParser, parse_raw_ris, parse_ris_line, split_authors


def _parse_one(text: str) -> Citation:
    citations = RisParser().parse(text)
    assert len(citations) == 1
    return citations[0]


# ---------------------------------------------------------------------------
# Full records
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_full_record_fields(ris_text: str) -> None:
    """Test every mapped tag of a complete journal record."""
    first, second = RisParser().parse(ris_text)

    assert first.citation_type == ["Journal Article"]
    assert first.title == "Machine learning for citation screening"
    assert [a.name for a in first.authors] == ["Smith", "Doe"]
    assert first.authors[0].given_name == "John"
    assert first.authors[0].middle_name == "Adam"
    assert first.journal == "Journal of Evidence Synthesis"
    assert first.journal_abbr == "J Evid Synth"
    assert first.date == Date(year=2023, month=6, day=15)
    assert first.volume == "12"
    assert first.issue == "3"
    assert first.pages == "1234-1245"
    assert first.doi == "10.1000/jes.2023.001"
    assert first.keywords == ["screening", "automation"]
    assert first.extra_fields == {}

    assert second.citation_type == ["Book"]
    assert second.title == "Systematic reviews in practice"
    assert second.date == Date(year=2021)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("JOUR", "Journal Article"),
        ("BOOK", "Book"),
        ("CHAP", "Book Section"),
        ("CONF", "Conference Proceedings"),
        ("XYZ", "XYZ"),
    ],
)
def test_type_code_display_name(code: str, expected: str) -> None:
    """Test TY codes map to type names and unknown codes pass through."""
    citation = _parse_one(f"TY  - {code}\nTI  - X\nER  -")

    assert citation.citation_type == [expected]


@pytest.mark.unit
def test_missing_end_tag_still_emits_record() -> None:
    """Test a trailing record without ER is kept."""
    citation = _parse_one("TY  - JOUR\nTI  - Unclosed\n")

    assert citation.title == "Unclosed"


@pytest.mark.unit
def test_new_type_tag_starts_new_record() -> None:
    """Test TY without a preceding ER closes the current record."""
    citations = RisParser().parse("TY  - JOUR\nTI  - First\nTY  - JOUR\nTI  - Second\nER  - \n")

    assert [c.title for c in citations] == ["First", "Second"]


@pytest.mark.unit
def test_crlf_line_endings() -> None:
    """Test CRLF input parses like LF input."""
    citation = _parse_one("TY  - JOUR\r\nTI  - Windows\r\nPY  - 2020\r\nER  - \r\n")

    assert citation.title == "Windows"
    assert citation.date == Date(year=2020)


@pytest.mark.unit
def test_metadata_lines_are_skipped() -> None:
    """Test export banner lines do not end up anywhere."""
    text = "Provider: Example DB\nDatabase: Test\n\nTY  - JOUR\nTI  - Real\nER  - \n"

    raw = parse_raw_ris(text)[0]

    assert raw.ignored_lines == []
    assert raw.start_line == 4


@pytest.mark.unit
def test_invalid_lines_are_ignored_with_line_numbers() -> None:
    """Test lines that are not tag pairs are collected on the record."""
    raw = parse_raw_ris("TY  - JOUR\nthis is not ris\nTI  - Title\nER  - \n")[0]

    assert raw.ignored_lines == [(2, "this is not ris")]


# ---------------------------------------------------------------------------
# Field resolution rules
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_t1_used_when_ti_blank() -> None:
    """Test T1 is the title fallback when TI is blank."""
    citation = _parse_one("TY  - JOUR\nTI  - \nT1  - Fallback\nER  - \n")

    assert citation.title == "Fallback"


@pytest.mark.unit
def test_missing_title_error_position() -> None:
    """Test a record without TI or T1 fails at its start line with a span."""
    text = "\nTY  - JOUR\nAU  - Smith, J\nER  - \n"

    with pytest.raises(ParseError) as exc_info:
        RisParser().parse(text)

    error = exc_info.value
    assert error.format is CitationFormat.RIS
    assert error.line == 2
    assert error.reason == MissingValue(Field.TITLE, "TI")
    assert error.span is not None
    span_bytes = text.encode()[error.span.start : error.span.end]
    assert span_bytes == b"TY  - JOUR\nAU  - Smith, J\nER  - \n"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("tags", "journal"),
    [
        ("JO  - Abbrev Source\nT2  - Secondary\nJF  - Full Name\n", "Full Name"),
        ("JO  - Abbrev Source\nT2  - Secondary\n", "Secondary"),
        ("JO  - Abbrev Source\n", "Abbrev Source"),
        ("JF  - \nT2  - Secondary\n", "Secondary"),
    ],
)
def test_journal_priority(tags: str, journal: str) -> None:
    """Test JF beats T2 beats JO, and blank values are skipped."""
    citation = _parse_one(f"TY  - JOUR\nTI  - T\n{tags}ER  - \n")

    assert citation.journal == journal


@pytest.mark.unit
def test_journal_abbreviation_priority() -> None:
    """Test JA beats J2."""
    citation = _parse_one("TY  - JOUR\nTI  - T\nJ2  - Alt\nJA  - Main\nER  - \n")

    assert citation.journal_abbr == "Main"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("tags", "date"),
    [
        ("PY  - 2019\nY1  - 2018/01/02\n", Date(2019)),
        ("Y1  - 2018/01/02\nDA  - 2017\n", Date(2018, 1, 2)),
        ("DA  - 2017/13/40\n", Date(2017)),
        ("PY  - unknown\n", None),
    ],
)
def test_date_resolution(tags: str, date: Date | None) -> None:
    """Test PY wins over Y1 and DA, with out-of-range parts dropped."""
    citation = _parse_one(f"TY  - JOUR\nTI  - T\n{tags}ER  - \n")

    assert citation.date == date


@pytest.mark.unit
def test_access_date_not_kept() -> None:
    """Test Y2 is neither a date source nor an extra field."""
    citation = _parse_one("TY  - JOUR\nTI  - T\nY2  - 2024/01/01\nER  - \n")

    assert citation.date is None
    assert "Y2" not in citation.extra_fields


@pytest.mark.unit
def test_pages_from_start_and_end() -> None:
    """Test SP/EP combination and single start page."""
    assert _parse_one("TY  - JOUR\nTI  - T\nSP  - R575\nEP  - 82\nER  - \n").pages == "R575-R582"
    assert _parse_one("TY  - JOUR\nTI  - T\nSP  - 10\nER  - \n").pages == "10"
    assert _parse_one("TY  - JOUR\nTI  - T\nEP  - 20\nER  - \n").pages == "20"


@pytest.mark.unit
def test_doi_from_link_when_do_missing() -> None:
    """Test a doi.org link fills the DOI and stays in urls."""
    citation = _parse_one(
        "TY  - JOUR\nTI  - T\nUR  - https://example.org/a\n"
        "L2  - https://doi.org/10.1234/ABC\nER  - \n"
    )

    assert citation.doi == "10.1234/abc"
    assert citation.urls == ["https://doi.org/10.1234/ABC", "https://example.org/a"]


@pytest.mark.unit
def test_do_tag_wins_over_link() -> None:
    """Test DO is preferred to a DOI link."""
    citation = _parse_one(
        "TY  - JOUR\nTI  - T\nDO  - 10.1/first\nUR  - https://doi.org/10.2/second\nER  - \n"
    )

    assert citation.doi == "10.1/first"


@pytest.mark.unit
def test_identifiers_and_abstract() -> None:
    """Test PM, C2, N2 fallback, SN, LA and PB mapping."""
    citation = _parse_one(
        "TY  - JOUR\nTI  - T\nPM  - 123456\nC2  - PMC998877\nN2  - Notes abstract\n"
        "SN  - 1234-5678\nSN  - 1234-5678\nLA  - English\nPB  - Elsevier\nER  - \n"
    )

    assert citation.pmid == "123456"
    assert citation.pmc_id == "PMC998877"
    assert citation.abstract == "Notes abstract"
    assert citation.issn == ["1234-5678"]
    assert citation.language == "English"
    assert citation.publisher == "Elsevier"


@pytest.mark.unit
def test_c2_without_pmc_is_dropped() -> None:
    """Test C2 values that are not PMC ids are not kept."""
    citation = _parse_one("TY  - JOUR\nTI  - T\nC2  - some custom note\nER  - \n")

    assert citation.pmc_id is None
    assert "C2" not in citation.extra_fields


@pytest.mark.unit
def test_unmapped_tags_become_extra_fields() -> None:
    """Test unknown tags keep all their values in order."""
    citation = _parse_one("TY  - JOUR\nTI  - T\nN1  - one\nN1  - two\nCY  - Paris\nER  - \n")

    assert citation.extra_fields == {"N1": ["one", "two"], "CY": ["Paris"]}


# ---------------------------------------------------------------------------
# Line and author helpers
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("TI  - Title", ("TI", "Title")),
        ("TI  -Title", ("TI", "Title")),
        ("TI- Title", ("TI", "Title")),
        ("TI-Title", ("TI", "Title")),
        ("TI Title", ("TI", "Title")),
        ("ER  -", ("ER", "")),
        ("A1  - Smith", ("A1", "Smith")),
    ],
)
def test_parse_ris_line_separators(line: str, expected: tuple[str, str]) -> None:
    """Test accepted tag separators."""
    assert parse_ris_line(line, 1) == expected


@pytest.mark.unit
@pytest.mark.parametrize("line", ["T", "T!  - x", "TIxx"])
def test_parse_ris_line_rejects_malformed(line: str) -> None:
    """Test short lines, bad tags and missing separators raise syntax errors."""
    with pytest.raises(ParseError) as exc_info:
        parse_ris_line(line, 7)

    assert exc_info.value.line == 7
    assert isinstance(exc_info.value.reason, SyntaxReason)


@pytest.mark.unit
def test_split_authors_on_separators() -> None:
    """Test semicolons, ampersands and 'and' split authors; commas do not."""
    authors = split_authors("Smith, John; Doe, Jane & Brown, A and Green, B")

    assert [a.name for a in authors] == ["Smith", "Doe", "Brown", "Green"]
    assert authors[0].given_name == "John"


@pytest.mark.unit
def test_all_author_tags_collected() -> None:
    """Test AU and A1-A4 all contribute authors in order."""
    citation = _parse_one(
        "TY  - JOUR\nTI  - T\nA1  - One, A\nAU  - Two, B\nA4  - Three, C\nER  - \n"
    )

    assert [a.name for a in citation.authors] == ["One", "Two", "Three"]
