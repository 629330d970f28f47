"""Unit tests for CSV configuration and parsing."""

import pytest

from citeparse.errors import CitationFormat, ParseError, SyntaxReason
from citeparse.models import Date
from citeparse.parse.csv_config import CsvConfig, CsvConfigError
from citeparse.parse.csv_parser import (
    CsvParser,
    detect_csv_delimiter,
    detect_csv_headers,
    parse_raw_csv,
)

# ---------------------------------------------------------------------------
# CsvConfig
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_config_defaults() -> None:
    """Test default dialect options and header lookup."""
    config = CsvConfig()

    assert config.delimiter == ","
    assert config.has_header is True
    assert config.quote == '"'
    assert config.trim is True
    assert config.flexible is False
    assert config.store_original_record is False
    assert config.get_field_for_header("Article Title") == "title"
    assert config.get_field_for_header("AUTHORS") == "authors"
    assert config.get_field_for_header("Unknown") is None


@pytest.mark.unit
def test_config_custom_mappings_chain() -> None:
    """Test replacing and extending aliases."""
    config = (
        CsvConfig()
        .set_header_mapping("title", ["Headline"])
        .add_header_aliases("pmid", ["PubMed ID"])
    )

    assert config.get_field_for_header("headline") == "title"
    assert config.get_field_for_header("title") is None
    assert config.get_field_for_header("pubmed id") == "pmid"
    assert config.get_field_mappings()["title"] == ["Headline"]


@pytest.mark.unit
def test_default_configs_do_not_share_mappings() -> None:
    """Test mutating one config leaves fresh configs untouched."""
    CsvConfig().add_header_aliases("title", ["Name"])

    assert CsvConfig().get_field_for_header("Name") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("config", "message"),
    [
        (CsvConfig(header_map={}), "No header mappings defined"),
        (CsvConfig(header_map={"": ["x"]}), "Empty field name found in mappings"),
        (CsvConfig(header_map={"title": []}), "Field 'title' has no aliases defined"),
        (CsvConfig(header_map={"title": [""]}), "Empty alias found for field 'title'"),
        (CsvConfig(delimiter="\n"), "Delimiter cannot be a newline character"),
        (CsvConfig(delimiter=";;"), "Delimiter and quote must be single characters"),
        (
            CsvConfig(header_map={"title": ["Name"], "journal": ["name"]}),
            "Alias 'name' is mapped to both 'title' and 'journal'",
        ),
    ],
)
def test_config_validation(config: CsvConfig, message: str) -> None:
    """Test each invalid configuration is rejected with its message."""
    with pytest.raises(CsvConfigError, match=message):
        config.validate()


@pytest.mark.unit
def test_invalid_config_is_parse_error() -> None:
    """Test parsing with an invalid config fails without a position."""
    parser = CsvParser.with_config(CsvConfig(header_map={}))

    with pytest.raises(ParseError) as exc_info:
        parser.parse("Title\nA\n")

    error = exc_info.value
    assert error.format is CitationFormat.CSV
    assert error.line is None
    assert "Invalid CSV configuration: No header mappings defined" in error.message


# ---------------------------------------------------------------------------
# CsvParser
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_full_rows(csv_text: str) -> None:
    """Test header mapping, normalization and extra columns."""
    first, second = CsvParser().parse(csv_text)

    assert first.title == "Deep learning for reviews"
    assert [(a.name, a.given_name) for a in first.authors] == [("Smith", "John"), ("Doe", "Jane")]
    assert first.journal == "Nature"
    assert first.date == Date(year=2023)
    assert first.volume == "5"
    assert first.pages == "123-145"
    assert first.doi == "10.1038/s41586"
    assert first.keywords == ["ml", "review"]
    assert first.citation_type == ["Journal Article"]
    assert first.extra_fields == {"Notes": ["first"]}

    assert second.authors[0].name == "Brown"
    assert second.date == Date(year=2021)
    assert second.doi is None
    assert second.extra_fields == {}


@pytest.mark.unit
def test_custom_delimiter_and_quote() -> None:
    """Test semicolon-delimited input with a custom quote character."""
    config = CsvConfig(delimiter=";", quote="'")

    citation = CsvParser.with_config(config).parse("Title;Year\n'A; B';2020\n")[0]

    assert citation.title == "A; B"


@pytest.mark.unit
def test_quoted_multiline_value_keeps_row_line() -> None:
    """Test rows after a multi-line quoted value report the right line."""
    text = 'Title,Abstract\n"First","line one\nline two"\n,orphan abstract\n'

    with pytest.raises(ParseError) as exc_info:
        CsvParser().parse(text)

    assert exc_info.value.line == 4


@pytest.mark.unit
def test_no_header_mode_uses_column_names() -> None:
    """Test headerless input maps Column1..N and keeps the first row."""
    config = CsvConfig(has_header=False).add_header_aliases("title", ["Column1"])

    citations = CsvParser.with_config(config).parse("First,x\nSecond,y\n")

    assert [c.title for c in citations] == ["First", "Second"]
    assert citations[0].extra_fields == {"Column2": ["x"]}


@pytest.mark.unit
def test_column_count_mismatch_strict() -> None:
    """Test rows with too many or too few fields fail in strict mode."""
    with pytest.raises(ParseError) as exc_info:
        CsvParser().parse("Title,Year\nA,2020,extra\n")
    assert exc_info.value.line == 2
    assert exc_info.value.reason == SyntaxReason("Record has more fields (3) than headers (2)")

    with pytest.raises(ParseError) as exc_info:
        CsvParser().parse("Title,Year,DOI\nA,2020\n")
    assert exc_info.value.reason == SyntaxReason("Record has fewer fields (2) than headers (3)")


@pytest.mark.unit
def test_column_count_mismatch_flexible() -> None:
    """Test flexible mode pairs the available columns."""
    citations = CsvParser.with_config(CsvConfig(flexible=True)).parse(
        "Title,Year\nA,2020,extra\nB\n"
    )

    assert [c.title for c in citations] == ["A", "B"]
    assert citations[1].date is None


@pytest.mark.unit
def test_empty_row_strict_and_flexible() -> None:
    """Test a row of empty cells fails unless flexible."""
    text = "Title,Year\nA,2020\n,\nB,2021\n"

    with pytest.raises(ParseError) as exc_info:
        CsvParser().parse(text)
    assert exc_info.value.line == 3
    assert exc_info.value.reason == SyntaxReason("Record contains no meaningful content")

    citations = CsvParser.with_config(CsvConfig(flexible=True)).parse(text)
    assert [c.title for c in citations] == ["A", "B"]


@pytest.mark.unit
def test_blank_lines_between_rows_are_skipped() -> None:
    """Test physical blank lines are not records."""
    citations = CsvParser().parse("Title\nA\n\nB\n")

    assert [c.title for c in citations] == ["A", "B"]


@pytest.mark.unit
def test_trim_disabled_keeps_whitespace() -> None:
    """Test values keep surrounding spaces when trim is off."""
    citation = CsvParser.with_config(CsvConfig(trim=False)).parse("Title\n  Spaced  \n")[0]

    assert citation.title == "  Spaced  "


@pytest.mark.unit
def test_store_original_record() -> None:
    """Test the raw row is kept when requested."""
    config = CsvConfig(store_original_record=True)

    citation = CsvParser.with_config(config).parse("Title,Year\n A ,2020\n")[0]

    assert citation.title == "A"
    assert citation.extra_fields["original_record"] == [" A ", "2020"]


@pytest.mark.unit
def test_non_standard_mapped_fields_are_extra() -> None:
    """Test mapped fields outside the citation model go to extra fields."""
    citation = CsvParser().parse("Title,Label\nA,include\n")[0]

    assert citation.extra_fields == {"label": ["include"]}


@pytest.mark.unit
def test_issn_and_url_columns() -> None:
    """Test ISSN extraction and URL collection."""
    text = 'Title,ISSN,URL\nA,"1234-5678 (Print) 8765-432X",http://x.org\n'

    citation = CsvParser().parse(text)[0]

    assert citation.issn == ["1234-5678 (Print)", "8765-432X"]
    assert citation.urls == ["http://x.org"]


@pytest.mark.unit
def test_malformed_quotes_raise_syntax_error() -> None:
    """Test a bare carriage return inside a field is a positioned syntax error."""
    config = CsvConfig()
    with pytest.raises(ParseError) as exc_info:
        parse_raw_csv("Title\nA\rB\n", config)

    error = exc_info.value
    assert isinstance(error.reason, SyntaxReason)
    assert "CSV parsing error" in error.message
    assert error.line == 2


@pytest.mark.unit
def test_header_only_input() -> None:
    """Test a header row without data gives no citations."""
    assert CsvParser().parse("Title,Year\n") == []


# ---------------------------------------------------------------------------
# Auto-detection
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "delimiter"),
    [
        ("Title,Year\nA,2020\n", ","),
        ("Title;Year;DOI\nA;2020;x\n", ";"),
        ("Title\tYear\nA\t2020\n", "\t"),
        ("Title|Year\nA|2020\n", "|"),
        ("a,b;c;d;e\nf,g;h\ni,j;k;l;m;n;o\np,q\nr,s;t\n", ","),
    ],
)
def test_detect_delimiter(content: str, delimiter: str) -> None:
    """Test delimiter sniffing picks the consistent, widest split."""
    assert detect_csv_delimiter(content) == delimiter


@pytest.mark.unit
def test_detect_delimiter_ties_keep_comma() -> None:
    """Test single-column input, where every candidate ties, keeps a comma."""
    assert detect_csv_delimiter("alpha\nbeta\n") == ","
    assert detect_csv_delimiter("") == ","


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("Title,Year\nA,2020\n", True),
        ("Name,Place\nAlpha,12\n", True),
        ("Alpha beta,Gamma delta\nEpsilon zeta,Eta theta\n", False),
        ("only one line", True),
    ],
)
def test_detect_headers(content: str, expected: bool) -> None:
    """Test header sniffing heuristics."""
    assert detect_csv_headers(content, ",") is expected


@pytest.mark.unit
def test_auto_detection_parser() -> None:
    """Test auto-detection overrides the configured delimiter."""
    parser = CsvParser.with_auto_detection()

    citation = parser.parse("Title;Year\nA;2020\n")[0]

    assert parser.auto_detect is True
    assert citation.title == "A"
    assert citation.date == Date(year=2020)
    assert parser.config.delimiter == ","


@pytest.mark.unit
def test_parser_setters() -> None:
    """Test config and auto_detect can be replaced after construction."""
    parser = CsvParser()
    parser.config = CsvConfig(delimiter="|")
    parser.auto_detect = True

    assert parser.config.delimiter == "|"
    assert parser.effective_config("Title;Year\nA;1\n").delimiter == ";"
