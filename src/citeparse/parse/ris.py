"""RIS format parser.

RIS specification: two-letter tags, "TY  - " starts a record, "ER  - " ends it.
Reference: https://refdb.sourceforge.net/manual-0.9.6/sect1-ris-format.html

Parsing runs in two steps. :func:`parse_raw_ris` walks the lines and
collects tag values per citation into :class:`RawRisRecord` objects, keeping
the start line and byte span of each. :func:`ris_to_citation` then applies
the field resolution rules (title fallback, journal priority, DOI from
links...) and raises a positioned :class:`ParseError` for unusable records.
"""

from dataclasses import dataclass, field

from citeparse.errors import (
    CitationFormat,
    Field,
    MissingValue,
    ParseError,
    SourceSpan,
    SyntaxReason,
)
from citeparse.models import Author, Citation
from citeparse.normalize import build_author, format_doi, format_page_numbers, parse_ris_date
from citeparse.parse.base import iter_source_lines

__all__ = [
    "RisParser",
    "RawRisRecord",
    "parse_raw_ris",
    "parse_ris_line",
    "ris_to_citation",
    "split_authors",
]

TYPE_TAG = "TY"
END_TAG = "ER"
AUTHOR_TAGS = frozenset({"AU", "A1", "A2", "A3", "A4"})
TITLE_TAG = "TI"
TITLE_ALT_TAG = "T1"
DOI_TAG = "DO"
YEAR_TAG = "PY"
DATE_TAGS = ("Y1", "DA")
ACCESS_DATE_TAG = "Y2"
PMID_TAG = "PM"
PMC_TAG = "C2"
ABSTRACT_TAGS = ("AB", "N2")

# Link tags scanned (in this order) for a DOI URL
LINK_TAGS = ("L1", "L2", "L3", "L4", "UR", "LK")

# Lower number wins
JOURNAL_PRIORITY: dict[str, int] = {"JF": 1, "T2": 2, "JO": 3}
JOURNAL_ABBR_PRIORITY: dict[str, int] = {"JA": 1, "J2": 2}

# Display names for TY codes; unknown codes are kept as written
TYPE_NAMES: dict[str, str] = {
    "ABST": "Abstract",
    "BILL": "Bill",
    "BLOG": "Blog",
    "BOOK": "Book",
    "CASE": "Case",
    "CHAP": "Book Section",
    "CONF": "Conference Proceedings",
    "CPAPER": "Conference Paper",
    "DATA": "Dataset",
    "EBOOK": "Electronic Book",
    "ECHAP": "Electronic Book Section",
    "EDBOOK": "Edited Book",
    "EJOUR": "Electronic Article",
    "ELEC": "Web Page",
    "GEN": "Generic",
    "GOVDOC": "Government Document",
    "JFULL": "Journal",
    "JOUR": "Journal Article",
    "MGZN": "Magazine Article",
    "NEWS": "Newspaper Article",
    "PAT": "Patent",
    "RPRT": "Report",
    "SER": "Serial",
    "STAT": "Statute",
    "THES": "Thesis",
    "UNPB": "Unpublished Work",
}

METADATA_PREFIXES =("Record #", "Provider:", "Content:", "Database:")

# Separators tried in order after the two-character tag
_SEPARATORS = ("  - ", "  -", "- ", "-")


@dataclass
class RawRisRecord:
    """Tag values of one RIS citation before field resolution.

    Attributes
    ----------
    data : dict[str, list[str]]
        Values per tag, duplicates preserved in arrival order.
    authors : list[Author]
        Authors from every author tag, in order.
    ignored_lines : list[tuple[int, str]]
        ``(line_number, text)`` of lines that were not valid RIS.
    start_line : int | None
        1-based line of the first tag (normally ``TY``).
    start : int
        Byte offset where the citation begins.
    end : int
        Byte offset just past the citation's last line.
    """

    data: dict[str, list[str]] = field(default_factory=dict)
    authors: list[Author] = field(default_factory=list)
    ignored_lines: list[tuple[int, str]] = field(default_factory=list)
    start_line: int | None = None
    start: int = 0
    end: int = 0

    def add(self, tag: str, value: str) -> None:
        self.data.setdefault(tag, []).append(value)

    def first(self, tag: str) -> str | None:
        values = self.data.get(tag)
        return values[0] if values else None

    def pop_first(self, tag: str) -> str | None:
        values = self.data.pop(tag, None)
        return values[0] if values else None

    def has_content(self) -> bool:
        return bool(self.data) or bool(self.authors)

    def best_by_priority(self, priorities: dict[str, int]) -> str | None:
        """Pick the first non-blank value of the lowest-priority tag present.

        Parameters
        ----------
        priorities : dict[str, int]
            Tag to priority; lower wins.

        Returns
        -------
        str | None
            Winning value, or None if no listed tag has a non-blank value.
        """
        best_value: str | None = None
        best_priority: int | None = None
        for tag, values in self.data.items():
            priority = priorities.get(tag)
            if priority is None or not values or not values[0].strip():
                continue
            if best_priority is None or priority < best_priority:
                best_priority = priority
                best_value = values[0]
        return best_value

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(self.start, self.end)


class RisParser:
    """Parser for RIS formatted citations.

    Examples
    --------
    >>> citations = RisParser().parse("TY  - JOUR\\nTI  - Example\\nER  -")
    >>> citations[0].title
    'Example'
    """

    format = CitationFormat.RIS

    def parse(self, text: str) -> list[Citation]:
        """Parse RIS text into citations.

        Parameters
        ----------
        text : str
            RIS content, one or more citations.

        Returns
        -------
        list[Citation]
            Citations in source order; empty for blank input.

        Raises
        ------
        ParseError
            If any citation lacks a title.
        """
        return [ris_to_citation(raw) for raw in parse_raw_ris(text)]


def parse_raw_ris(text: str) -> list[RawRisRecord]:
    """Split RIS text into raw per-citation records.

    Blank lines and export metadata lines (``Record #``, ``Provider:``...)
    are skipped. Lines that are not valid ``TAG  - value`` pairs are kept
    as ignored lines on the current record and parsing continues.

    Parameters
    ----------
    text : str
        RIS content.

    Returns
    -------
    list[RawRisRecord]
        Records that carry at least one tag value or author.
    """
    if not text.strip():
        return []

    records: list[RawRisRecord] = []
    current = RawRisRecord()

    for source_line in iter_source_lines(text):
        line = source_line.text.strip()
        if not line or line.startswith(METADATA_PREFIXES):
            continue

        try:
            tag, value = parse_ris_line(line, source_line.number)
        except ParseError:
            current.ignored_lines.append((source_line.number, line))
            continue

        if tag == TYPE_TAG and current.has_content():
            records.append(current)
            current = RawRisRecord()

        if current.start_line is None:
            current.start_line = source_line.number
            current.start = source_line.start
        current.end = source_line.end

        if tag == TYPE_TAG:
            current.add(tag, value)
        elif tag == END_TAG:
            if current.has_content():
                records.append(current)
            current = RawRisRecord()
        elif tag in AUTHOR_TAGS:
            current.authors.extend(split_authors(value))
        else:
            current.add(tag, value)

    if current.has_content():
        records.append(current)

    return records


def parse_ris_line(line: str, line_number: int) -> tuple[str, str]:
    """Split one RIS line into tag and value.

    Accepted separators after the two-character tag, tried in order:
    ``"  - "``, ``"  -"``, ``"- "``, ``"-"``, then a bare space or dash.

    Parameters
    ----------
    line : str
        Stripped source line.
    line_number : int
        1-based line number used in the error.

    Returns
    -------
    tuple[str, str]
        ``(tag, value)`` with the value stripped.

    Raises
    ------
    ParseError
        If the tag is not two ASCII alphanumerics or no separator follows.
    """
    if len(line) < 2:
        raise ParseError.at_line(
            line_number,
            CitationFormat.RIS,
            SyntaxReason(f"Line too short for RIS format (minimum 2 chars): '{line}'"),
        )

    tag = line[:2]
    if not (tag.isascii() and tag.isalnum()):
        raise ParseError.at_line(
            line_number,
            CitationFormat.RIS,
            SyntaxReason(f"Invalid RIS tag format: '{tag}'"),
        )

    rest = line[2:]
    for separator in _SEPARATORS:
        if rest.startswith(separator):
            return tag, rest[len(separator) :].strip()

    if rest[:1] in (" ", "-"):
        return tag, rest.strip()

    raise ParseError.at_line(
        line_number,
        CitationFormat.RIS,
        SyntaxReason(f"RIS line missing proper separator (space or dash) after tag: '{line}'"),
    )


def split_authors(value: str) -> list[Author]:
    """Split an author tag value that may hold several people.

    Splits on ``;`` first, then on ``" & "`` and ``" and "``. Bare commas
    never split, since ``"Last, First"`` uses one.

    Parameters
    ----------
    value : str
        Raw author tag value.

    Returns
    -------
    list[Author]
        Parsed authors; empty for a blank value.
    """
    authors: list[Author] = []
    for segment in value.split(";"):
        for part in segment.split(" & "):
            for name in part.split(" and "):
                name = name.strip()
                if name:
                    authors.append(build_author(name))
    return authors


def ris_to_citation(raw: RawRisRecord) -> Citation:
    """Resolve a raw RIS record into a :class:`Citation`.

    Parameters
    ----------
    raw : RawRisRecord
        Record from :func:`parse_raw_ris`. Consumed: tags are popped as
        they are mapped, and whatever is left becomes extra fields.

    Returns
    -------
    Citation
        Resolved citation.

    Raises
    ------
    ParseError
        Missing-value error at the record's start line if neither ``TI`` nor
        ``T1`` has a non-blank value.
    """
    citation = Citation(
        citation_type=[TYPE_NAMES.get(code, code) for code in raw.data.pop(TYPE_TAG, [])],
        authors=raw.authors,
    )

    title = _first_non_blank(raw, TITLE_TAG) or _first_non_blank(raw, TITLE_ALT_TAG)
    if title is None:
        reason = MissingValue(Field.TITLE, TITLE_TAG)
        if raw.start_line is None:
            raise ParseError.without_position(CitationFormat.RIS, reason)
        raise ParseError.at_line(raw.start_line, CitationFormat.RIS, reason).with_span(raw.span)
    citation.title = title
    raw.data.pop(TITLE_TAG, None)
    raw.data.pop(TITLE_ALT_TAG, None)

    citation.journal = raw.best_by_priority(JOURNAL_PRIORITY)
    citation.journal_abbr = raw.best_by_priority(JOURNAL_ABBR_PRIORITY)
    for tag in (*JOURNAL_PRIORITY, *JOURNAL_ABBR_PRIORITY):
        raw.data.pop(tag, None)

    date_value = raw.first(YEAR_TAG)
    for tag in DATE_TAGS:
        if date_value is None:
            date_value = raw.first(tag)
    citation.date = parse_ris_date(date_value) if date_value is not None else None
    for tag in (YEAR_TAG, *DATE_TAGS, ACCESS_DATE_TAG):
        raw.data.pop(tag, None)

    citation.volume = raw.pop_first("VL")
    citation.issue = raw.pop_first("IS")
    citation.pages = _resolve_pages(raw.pop_first("SP"), raw.pop_first("EP"))

    doi_value = raw.pop_first(DOI_TAG)
    citation.doi = format_doi(doi_value) if doi_value is not None else None
    for tag in LINK_TAGS:
        urls = raw.data.pop(tag, [])
        if citation.doi is None:
            for url in urls:
                if "doi.org" in url:
                    citation.doi = format_doi(url)
                    if citation.doi is not None:
                        break
        citation.urls.extend(urls)

    citation.pmid = raw.pop_first(PMID_TAG)
    pmc_id = raw.pop_first(PMC_TAG)
    citation.pmc_id = pmc_id if pmc_id is not None and "PMC" in pmc_id else None

    citation.abstract = raw.first(ABSTRACT_TAGS[0]) or raw.first(ABSTRACT_TAGS[1])
    for tag in ABSTRACT_TAGS:
        raw.data.pop(tag, None)

    citation.keywords = raw.data.pop("KW", [])
    citation.issn = list(dict.fromkeys(raw.data.pop("SN", [])))
    citation.language = raw.pop_first("LA")
    citation.publisher = raw.pop_first("PB")

    raw.data.pop(END_TAG, None)
    citation.extra_fields = dict(raw.data)
    return citation


def _first_non_blank(raw: RawRisRecord, tag: str) -> str | None:
    value = raw.first(tag)
    if value is None or not value.strip():
        return None
    return value


def _resolve_pages(start: str | None, end: str | None) -> str | None:
    if start is not None and end is not None:
        return format_page_numbers(f"{start}-{end}")
    if start is not None:
        return format_page_numbers(start)
    return end
