"""PubMed/MEDLINE format parser.

PubMed fields begin with 2-4 char tags, continuation lines are indented.
Record boundaries: blank line or new PMID field.
Reference: https://www.nlm.nih.gov/bsd/mms/medlineelements.html

Each record (chunk) keeps its 1-based start line and byte span so that
conversion errors in the second or later citation of a file point at the
right place.
"""

from dataclasses import dataclass, field

from citeparse.errors import (
    BadValue,
    CitationFormat,
    Field,
    MissingValue,
    ParseError,
    SourceSpan,
)
from citeparse.models import Citation
from citeparse.normalize import parse_pubmed_date
from citeparse.parse.base import SourceLine, iter_source_lines
from citeparse.parse.pubmed_authors import ConsecutiveTag, PubmedAuthor, resolve_authors

__all__ = [
    "PUBMED_TAGS",
    "PubMedParser",
    "RawPubmedRecord",
    "join_values",
    "parse_raw_pubmed",
    "pubmed_to_citation",
    "split_on_dash",
]

# MEDLINE element tags
PUBMED_TAGS = frozenset(
    {
        "AB", "AD", "AID", "AU", "AUID", "BTI", "CI", "CIN", "CN", "COI", "COIS",
        "CON", "CP", "CRDT", "CRF", "CRI", "CTDT", "CTI", "DA", "DCOM", "DDIN",
        "DEP", "DP", "DRIN", "ECF", "ECI", "EDAT", "EFR", "EIN", "ED", "EN",
        "FAU", "FED", "FIR", "FPS", "GN", "GR", "GS", "IP", "IR", "IRAD", "IS",
        "ISBN", "JID", "JT", "LA", "LID", "LR", "MH", "MHDA", "MID", "NM", "OAB",
        "OABL", "OCI", "OID", "ORI", "OT", "OTO", "OWN", "PB", "PG", "PHST", "PL",
        "PMC", "PMCR", "PMID", "PS", "PST", "PT", "RF", "RIN", "RN", "ROF", "RPF",
        "RPI", "RRF", "RRI", "SB", "SFM", "SI", "SO", "SPIN", "STAT", "TA", "TI",
        "TT", "UIN", "UOF", "VI", "VTI",
    }
)

RECORD_START_TAG = "PMID"
DOI_MARKER = " [doi]"

# Single-valued fields; repeated occurrences are joined with this separator
MULTI_VALUE_SEPARATOR = " AND "


@dataclass
class RawPubmedRecord:
    """Tag values of one PubMed citation before field resolution.

    Attributes
    ----------
    data : dict[str, list[str]]
        Values of stateless tags, duplicates preserved in arrival order.
    authors : list[PubmedAuthor]
        Authors resolved from ``FAU``/``AU``/``AD`` lines.
    ignored_lines : list[str]
        Lines that were not recognised, plus affiliations that preceded
        every author (re-prefixed ``AD - ``).
    start_line : int
        1-based line where the chunk begins.
    span : SourceSpan
        Byte range of the whole chunk.
    """

    data: dict[str, list[str]] = field(default_factory=dict)
    authors: list[PubmedAuthor] = field(default_factory=list)
    ignored_lines: list[str] = field(default_factory=list)
    start_line: int = 1
    span: SourceSpan = field(default_factory=lambda: SourceSpan(0, 0))

    def pop_joined(self, tag: str) -> str | None:
        return join_values(self.data.pop(tag, []))


class PubMedParser:
    """Parser for PubMed/MEDLINE (``.nbib``) formatted citations."""

    format = CitationFormat.PUBMED

    def parse(self, text: str) -> list[Citation]:
        """Parse PubMed text into citations.

        Parameters
        ----------
        text : str
            MEDLINE content, one or more citations.

        Returns
        -------
        list[Citation]
            Citations in source order; empty for blank input.

        Raises
        ------
        ParseError
            On the first citation without a title or with a bad ``DP``.
        """
        if not text.strip():
            return []
        return [pubmed_to_citation(raw) for raw in parse_raw_pubmed(text)]


def split_on_dash(line: str) -> tuple[str, str] | None:
    """Split ``"TAG  - value"`` on the first dash.

    Whitespace before the dash is removed from the key and whitespace after
    it from the value. Returns None when the line has no dash.
    """
    key, sep, value = line.partition("-")
    if not sep:
        return None
    return key.rstrip(), value.lstrip()


def parse_raw_pubmed(text: str) -> list[RawPubmedRecord]:
    """Split MEDLINE text into raw per-citation records.

    Parameters
    ----------
    text : str
        MEDLINE content.

    Returns
    -------
    list[RawPubmedRecord]
        One record per chunk, in source order.
    """
    return [_parse_chunk(chunk) for chunk in _split_chunks(text)]


def _tag_of(line: str) -> str | None:
    parts = split_on_dash(line)
    if parts is None or parts[0] not in PUBMED_TAGS:
        return None
    return parts[0]


def _split_chunks(text: str) -> list[list[SourceLine]]:
    """Group source lines into citations on blank lines and ``PMID`` tags."""
    chunks: list[list[SourceLine]] = []
    current: list[SourceLine] = []

    for source_line in iter_source_lines(text):
        if not source_line.text.strip():
            if current:
                chunks.append(current)
                current = []
            continue
        if current and _tag_of(source_line.text) == RECORD_START_TAG:
            chunks.append(current)
            current = []
        current.append(source_line)

    if current:
        chunks.append(current)
    return chunks


def _join_continuations(lines: list[SourceLine]) -> list[str]:
    """Rebuild logical lines by appending indented non-tag lines to their predecessor."""
    logical: list[str] = []
    for source_line in lines:
        line = source_line.text
        is_continuation = line[:1].isspace() and _tag_of(line.strip()) is None
        if is_continuation and logical:
            logical[-1] = f"{logical[-1].rstrip()} {line.strip()}"
        else:
            logical.append(line)
    return logical


def _parse_chunk(lines: list[SourceLine]) -> RawPubmedRecord:
    record = RawPubmedRecord(
        start_line=lines[0].number,
        span=SourceSpan(lines[0].start, lines[-1].end),
    )
    consecutive: list[tuple[ConsecutiveTag, str]] = []

    for line in _join_continuations(lines):
        parts = split_on_dash(line)
        if parts is None or parts[0] not in PUBMED_TAGS:
            record.ignored_lines.append(line)
            continue

        tag, value = parts
        consecutive_tag = ConsecutiveTag.from_tag(tag)
        if consecutive_tag is not None:
            consecutive.append((consecutive_tag, value))
        else:
            record.data.setdefault(tag, []).append(value)

    record.authors, leading_affiliations = resolve_authors(consecutive)
    record.ignored_lines.extend(f"AD - {value}" for value in leading_affiliations)
    return record


def join_values(values: list[str]) -> str | None:
    """Join repeated values of a single-valued field, or None if there are none."""
    if not values:
        return None
    return MULTI_VALUE_SEPARATOR.join(values)


def pubmed_to_citation(raw: RawPubmedRecord) -> Citation:
    """Resolve a raw PubMed record into a :class:`Citation`.

    Parameters
    ----------
    raw : RawPubmedRecord
        Record from :func:`parse_raw_pubmed`. Consumed: tags are popped as
        they are mapped, and whatever is left becomes extra fields.

    Returns
    -------
    Citation
        Resolved citation.

    Raises
    ------
    ParseError
        Missing ``TI``, or a ``DP`` that is not ``YYYY[ Mon[ D]]``. Both
        are reported at the chunk start line with the chunk span.
    """
    citation = Citation(citation_type=raw.data.pop("PT", []))

    date_values = raw.data.pop("DP", [])
    if date_values:
        citation.date = parse_pubmed_date(date_values[0])
        if citation.date is None:
            reason = BadValue(
                Field.DATE,
                "DP",
                date_values[0],
                "not a valid date in YYYY MMM D format",
            )
            raise ParseError.at_line(raw.start_line, CitationFormat.PUBMED, reason).with_span(
                raw.span
            )

    title = raw.pop_joined("TI")
    if title is None or not title.strip():
        reason = MissingValue(Field.TITLE, "TI")
        raise ParseError.at_line(raw.start_line, CitationFormat.PUBMED, reason).with_span(raw.span)
    citation.title = title

    citation.authors = [author.to_author() for author in raw.authors]
    citation.journal = raw.pop_joined("JT")
    citation.journal_abbr = raw.pop_joined("TA")
    citation.volume = raw.pop_joined("VI")
    citation.issue = raw.pop_joined("IP")
    citation.pages = raw.pop_joined("PG")
    citation.issn = raw.data.pop("IS", [])

    citation.doi = _doi_from_ids(raw.data.pop("LID", []))
    if citation.doi is None:
        citation.doi = _doi_from_ids(raw.data.pop("AID", []))

    citation.pmid = raw.pop_joined("PMID")
    citation.pmc_id = raw.pop_joined("PMC")
    citation.abstract = raw.pop_joined("AB")
    citation.language = raw.pop_joined("LA")
    citation.mesh_terms = raw.data.pop("MH", [])
    citation.publisher = raw.pop_joined("PB")

    citation.extra_fields = dict(raw.data)
    return citation


def _doi_from_ids(values: list[str]) -> str | None:
    for value in values:
        if value.endswith(DOI_MARKER):
            return value.removesuffix(DOI_MARKER)
    return None
