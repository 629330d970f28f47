"""CSV format parser.

Rows are read with :mod:`csv` and mapped to citation fields through the
header aliases of a :class:`~citeparse.parse.csv_config.CsvConfig`.  Each
row keeps its physical start line and byte span so errors can point at it,
including rows whose quoted values span several lines.
"""

import csv
import io
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from itertools import islice

from citeparse.errors import (
    CitationFormat,
    Field,
    MissingValue,
    ParseError,
    SourceSpan,
    SyntaxReason,
)
from citeparse.models import Author, Citation
from citeparse.normalize import (
    build_author,
    format_doi,
    format_page_numbers,
    parse_year_only,
    split_issns,
)
from citeparse.parse.base import byte_len, iter_source_lines
from citeparse.parse.csv_config import CsvConfig, CsvConfigError

__all__ = [
    "CsvParser",
    "RawCsvRecord",
    "csv_to_citation",
    "detect_csv_delimiter",
    "detect_csv_headers",
    "parse_raw_csv",
]

STANDARD_FIELDS = frozenset(
    {
        "title",
        "authors",
        "journal",
        "journal_abbr",
        "year",
        "volume",
        "issue",
        "pages",
        "doi",
        "pmid",
        "pmc_id",
        "abstract",
        "keywords",
        "issn",
        "language",
        "publisher",
        "type",
        "url",
    }
)

DEFAULT_CITATION_TYPE = "Journal Article"
ORIGINAL_RECORD_KEY = "original_record"

DELIMITER_CANDIDATES = (",", ";", "\t", "|")
SNIFF_LINES = 5

# Substrings that mark a first row as a header row
HEADER_KEYWORDS = (
    "title",
    "author",
    "year",
    "journal",
    "doi",
    "volume",
    "issue",
    "page",
    "abstract",
    "keyword",
)


@dataclass
class RawCsvRecord:
    """Field values of one CSV row before citation conversion.

    Attributes
    ----------
    fields : dict[str, str]
        Mapped field name (or header text for unmapped columns) to value.
        Empty values are not stored.
    authors : list[Author]
        Authors split from the author column on ``;``.
    keywords : list[str]
        Keywords split on ``;``.
    urls : list[str]
        Values of URL columns.
    issn : list[str]
        ISSNs extracted from ISSN columns.
    line_number : int
        1-based physical line where the row starts.
    span : SourceSpan
        Byte range covering the whole row.
    original_record : list[str] | None
        Raw row values, when the config asks for them.
    """

    line_number: int
    span: SourceSpan
    fields: dict[str, str] = field(default_factory=dict)
    authors: list[Author] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    issn: list[str] = field(default_factory=list)
    original_record: list[str] | None = None

    def has_content(self) -> bool:
        return bool(self.fields or self.authors or self.keywords or self.urls or self.issn)

    def add_value(self, header: str, value: str, config: CsvConfig) -> None:
        """Route one non-empty cell to its field."""
        field_name = config.get_field_for_header(header)
        if field_name is None:
            self.fields[header] = value
        elif field_name == "authors":
            names = (name.strip() for name in value.split(";"))
            self.authors.extend(build_author(name) for name in names if name)
        elif field_name == "keywords":
            self.keywords.extend(kw.strip() for kw in value.split(";") if kw.strip())
        elif field_name == "url":
            self.urls.append(value)
        elif field_name == "issn":
            self.issn.extend(split_issns(value))
        else:
            self.fields[field_name] = value


class CsvParser:
    """Parser for CSV exports with configurable header mapping.

    Parameters
    ----------
    config : CsvConfig | None
        Header mapping and dialect; defaults to :class:`CsvConfig()`.
    auto_detect : bool
        Sniff the delimiter and header presence from the input before
        parsing, overriding those two config options.

    Examples
    --------
    >>> parser = CsvParser()
    >>> parser.parse("Title,Author,Year\\nTest Paper,Smith J,2023")[0].title
    'Test Paper'
    """

    format = CitationFormat.CSV

    def __init__(self, config: CsvConfig | None = None, auto_detect: bool = False) -> None:
        self._config = config if config is not None else CsvConfig()
        self._auto_detect = auto_detect

    @classmethod
    def with_config(cls, config: CsvConfig) -> "CsvParser":
        return cls(config=config)

    @classmethod
    def with_auto_detection(cls) -> "CsvParser":
        return cls(auto_detect=True)

    @property
    def config(self) -> CsvConfig:
        return self._config

    @config.setter
    def config(self, config: CsvConfig) -> None:
        self._config = config

    @property
    def auto_detect(self) -> bool:
        return self._auto_detect

    @auto_detect.setter
    def auto_detect(self, enabled: bool) -> None:
        self._auto_detect = enabled

    def effective_config(self, text: str) -> CsvConfig:
        """Config used for ``text``, with sniffed options when auto-detecting."""
        if not self._auto_detect:
            return self._config
        delimiter = detect_csv_delimiter(text)
        return replace(
            self._config,
            delimiter=delimiter,
            has_header=detect_csv_headers(text, delimiter),
        )

    def parse(self, text: str) -> list[Citation]:
        """Parse CSV text into citations.

        Parameters
        ----------
        text : str
            CSV content.

        Returns
        -------
        list[Citation]
            One citation per data row; empty for blank input.

        Raises
        ------
        ParseError
            For an invalid config, malformed CSV, a column count mismatch
            outside flexible mode, a row with no content, or a row without
            a title.
        """
        if not text.strip():
            return []

        config = self.effective_config(text)
        try:
            config.validate()
        except CsvConfigError as exc:
            raise ParseError.without_position(
                CitationFormat.CSV,
                SyntaxReason(f"Invalid CSV configuration: {exc}"),
            ) from exc

        return [csv_to_citation(raw, config) for raw in parse_raw_csv(text, config)]


def _read_rows(text: str, config: CsvConfig) -> Iterator[tuple[int, int, list[str]]]:
    """Yield ``(first_line, last_line, row)`` for every non-blank row."""
    reader = csv.reader(
        io.StringIO(text, newline="\n"),
        delimiter=config.delimiter,
        quotechar=config.quote,
    )
    consumed = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raise ParseError.at_line(
                consumed + 1,
                CitationFormat.CSV,
                SyntaxReason(f"CSV parsing error: {exc}"),
            ) from exc

        first_line, consumed = consumed + 1, reader.line_num
        if row:
            yield first_line, consumed, row


def parse_raw_csv(text: str, config: CsvConfig) -> list[RawCsvRecord]:
    """Read CSV rows into raw records.

    Parameters
    ----------
    text : str
        CSV content.
    config : CsvConfig
        Validated configuration.

    Returns
    -------
    list[RawCsvRecord]
        Records with content, in row order.

    Raises
    ------
    ParseError
        Positioned syntax error for malformed CSV, a column count mismatch
        (unless flexible) or a row with no content (unless flexible).
    """
    if not text.strip():
        return []

    bounds = [(line.start, line.end) for line in iter_source_lines(text)]
    rows = _read_rows(text, config)

    first = next(rows, None)
    if first is None:
        return []

    if config.has_header:
        headers = [h.strip() if config.trim else h for h in first[2]]
    else:
        headers = [f"Column{i}" for i in range(1, len(first[2]) + 1)]
        rows = _chain_first(first, rows)

    if not headers:
        raise ParseError.without_position(
            CitationFormat.CSV, SyntaxReason("No headers found in CSV")
        )

    records: list[RawCsvRecord] = []
    for first_line, last_line, row in rows:
        span = SourceSpan(bounds[first_line - 1][0], bounds[min(last_line, len(bounds)) - 1][1])
        raw = _build_record(headers, row, config, first_line, span)
        if raw.has_content():
            records.append(raw)
        elif not config.flexible:
            raise ParseError.at_line(
                first_line,
                CitationFormat.CSV,
                SyntaxReason("Record contains no meaningful content"),
            ).with_span(span)
    return records


def _chain_first(
    first: tuple[int, int, list[str]],
    rest: Iterator[tuple[int, int, list[str]]],
) -> Iterator[tuple[int, int, list[str]]]:
    yield first
    yield from rest


def _build_record(
    headers: list[str],
    row: list[str],
    config: CsvConfig,
    line_number: int,
    span: SourceSpan,
) -> RawCsvRecord:
    if len(row) != len(headers) and not config.flexible:
        relation = "more" if len(row) > len(headers) else "fewer"
        raise ParseError.at_line(
            line_number,
            CitationFormat.CSV,
            SyntaxReason(
                f"Record has {relation} fields ({len(row)}) than headers ({len(headers)})"
            ),
        ).with_span(span)

    raw = RawCsvRecord(line_number=line_number, span=span)
    if config.store_original_record:
        raw.original_record = list(row)

    for header, value in zip(headers, row):
        if config.trim:
            value = value.strip()
        if value:
            raw.add_value(header, value, config)
    return raw


def csv_to_citation(raw: RawCsvRecord, config: CsvConfig) -> Citation:
    """Convert a raw CSV row into a :class:`Citation`.

    Parameters
    ----------
    raw : RawCsvRecord
        Row from :func:`parse_raw_csv`.
    config : CsvConfig
        Configuration the row was read with; decides which fields are extra.

    Returns
    -------
    Citation
        Converted citation. Unmapped columns and non-standard mapped
        fields go to ``extra_fields``.

    Raises
    ------
    ParseError
        Missing-value error at the row's line if it has no title.
    """
    fields = raw.fields
    title = fields.get("title")
    if title is None:
        raise ParseError.at_line(
            raw.line_number,
            CitationFormat.CSV,
            MissingValue(Field.TITLE, "title"),
        ).with_span(raw.span)

    year = fields.get("year")
    pages = fields.get("pages")
    doi = fields.get("doi")
    citation_type = fields.get("type")

    extra_fields = {
        name: [value]
        for name, value in fields.items()
        if config.get_field_for_header(name) not in STANDARD_FIELDS
    }
    if raw.original_record is not None:
        extra_fields[ORIGINAL_RECORD_KEY] = raw.original_record

    return Citation(
        citation_type=[citation_type] if citation_type else [DEFAULT_CITATION_TYPE],
        title=title,
        authors=raw.authors,
        journal=fields.get("journal"),
        journal_abbr=fields.get("journal_abbr"),
        date=parse_year_only(year) if year is not None else None,
        volume=fields.get("volume"),
        issue=fields.get("issue"),
        pages=format_page_numbers(pages) if pages is not None else None,
        issn=raw.issn,
        doi=format_doi(doi) if doi is not None else None,
        pmid=fields.get("pmid"),
        pmc_id=fields.get("pmc_id"),
        abstract=fields.get("abstract"),
        keywords=raw.keywords,
        urls=raw.urls,
        language=fields.get("language"),
        publisher=fields.get("publisher"),
        extra_fields=extra_fields,
    )


def _sample_lines(content: str, count: int) -> list[str]:
    return [line.text for line in islice(iter_source_lines(content), count)]


def detect_csv_delimiter(content: str) -> str:
    """Guess the delimiter from the first five lines.

    A candidate (``,``, ``;``, tab, ``|``) qualifies only when it splits
    every sample line into the same number of fields. Among qualifying
    candidates the one with the most fields wins; ties keep the earlier
    candidate.

    Parameters
    ----------
    content : str
        CSV text.

    Returns
    -------
    str
        Detected delimiter, ``","`` when nothing qualifies.
    """
    lines = _sample_lines(content, SNIFF_LINES)
    best, best_score = ",", 0

    for delimiter in DELIMITER_CANDIDATES:
        counts = [len(line.split(delimiter)) for line in lines]
        if not counts or len(set(counts)) != 1:
            continue
        score = sum(counts)
        if score > best_score:
            best, best_score = delimiter, score

    return best


def _is_number(value: str) -> bool:
    if value != value.strip() or "_" in value:
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def detect_csv_headers(content: str, delimiter: str) -> bool:
    """Guess whether the first line is a header row.

    Parameters
    ----------
    content : str
        CSV text.
    delimiter : str
        Delimiter used to split the sample lines.

    Returns
    -------
    bool
        True when fewer than two lines are available, when a first-line
        field mentions a bibliographic keyword, or when the first line is
        mostly text while the second line is partly numeric or short.
    """
    lines = _sample_lines(content, 3)
    if len(lines) < 2:
        return True

    first_fields = lines[0].split(delimiter)
    second_fields = lines[1].split(delimiter)

    for value in first_fields:
        lowered = value.lower()
        if any(keyword in lowered for keyword in HEADER_KEYWORDS):
            return True

    text_count = sum(
        1 for f in first_fields if f.strip() and not _is_number(f) and byte_len(f) > 3
    )
    numeric_count = sum(
        1 for f in second_fields if f.strip() and (_is_number(f) or byte_len(f) <= 3)
    )
    text_ratio = text_count / max(len(first_fields), 1)
    numeric_ratio = numeric_count / max(len(second_fields), 1)
    return text_ratio > 0.5 and numeric_ratio > 0.3
