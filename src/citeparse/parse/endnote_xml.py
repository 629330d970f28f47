"""EndNote XML format parser.

EndNote exports wrap each citation in a ``<record>`` element, usually under
``<xml><records>``. Records are streamed with :func:`lxml.etree.iterparse`
and released once converted, so large libraries are not held in memory.
Element text is gathered with ``itertext`` because EndNote often wraps it in
``<style>`` elements.

Field elements are applied in document order, which matters for the title
chain: ``secondary-title`` is the title when no ``title`` came first, and
``alt-title`` fills title, then journal, then journal abbreviation.
"""

import io
import re

from lxml import etree

from citeparse.errors import (
    CitationFormat,
    Field,
    MissingValue,
    ParseError,
    SourceSpan,
    SyntaxReason,
)
from citeparse.models import Citation, Date
from citeparse.normalize import (
    build_author,
    format_doi,
    format_page_numbers,
    parse_endnote_date,
    split_issns,
)
from citeparse.normalize._helpers import parse_int

__all__ = ["EndNoteXmlParser", "parse_endnote_xml"]

RECORD_TAG = "record"
RECORD_OPEN_RE = re.compile(rb"<record[\s/>]")
RECORD_CLOSE = b"</" + RECORD_TAG.encode() + b">"


class EndNoteXmlParser:
    """Parser for EndNote XML exports."""

    format = CitationFormat.ENDNOTE_XML

    def parse(self, text: str) -> list[Citation]:
        """Parse EndNote XML text into citations.

        Raises
        ------
        ParseError
            For malformed XML, or a record with neither title nor author.
        """
        return parse_endnote_xml(text)


def parse_endnote_xml(text: str) -> list[Citation]:
    """Parse EndNote XML into citations, one per ``<record>``.

    Leading whitespace before the document is skipped; reported lines and
    spans still refer to the original text.

    Parameters
    ----------
    text : str
        EndNote XML document.

    Returns
    -------
    list[Citation]
        Citations in document order; empty for blank input or a document
        without records.

    Raises
    ------
    ParseError
        Syntax error with line and column for malformed XML; missing-value
        error at the record's start line for a record without title and
        authors.
    """
    if not text.strip():
        return []

    source = text.encode("utf-8")
    body = source.lstrip()
    skipped = len(source) - len(body)
    line_offset = source.count(b"\n", 0, skipped)
    line_starts = _line_starts(body)

    citations: list[Citation] = []
    events = etree.iterparse(
        io.BytesIO(body),
        events=("end",),
        tag=RECORD_TAG,
        encoding="utf-8",
        resolve_entities=False,
    )
    try:
        for _, record in events:
            span = _record_span(body, line_starts, record.sourceline, skipped)
            citations.append(_record_to_citation(record, record.sourceline + line_offset, span))
            _release(record)
    except etree.XMLSyntaxError as exc:
        raise _translate_syntax_error(exc, line_offset, line_starts, skipped) from exc

    return citations


def _line_starts(data: bytes) -> list[int]:
    starts = [0]
    position = data.find(b"\n")
    while position != -1:
        starts.append(position + 1)
        position = data.find(b"\n", position + 1)
    return starts


def _line_end(data: bytes, line_starts: list[int], line: int) -> int:
    if line < len(line_starts):
        return line_starts[line]
    return len(data)


def _record_span(data: bytes, line_starts: list[int], line: int, shift: int) -> SourceSpan:
    line_start = line_starts[min(line, len(line_starts)) - 1]
    match = RECORD_OPEN_RE.search(data, line_start)
    start = match.start() if match else line_start
    end = data.find(RECORD_CLOSE, start)
    end = end + len(RECORD_CLOSE) if end != -1 else _line_end(data, line_starts, line)
    return SourceSpan(start + shift, end + shift)


def _release(record: etree._Element) -> None:
    record.clear()
    parent = record.getparent()
    while parent is not None and record.getprevious() is not None:
        del parent[0]


def _translate_syntax_error(
    exc: etree.XMLSyntaxError,
    line_offset: int,
    line_starts: list[int],
    shift: int,
) -> ParseError:
    line, column = exc.position if exc.position else (0, 0)
    reason = SyntaxReason(f"XML parsing error: {exc.msg}")
    if not line or line < 1:
        return ParseError.without_position(CitationFormat.ENDNOTE_XML, reason)

    index = min(line, len(line_starts)) - 1
    span = SourceSpan(
        line_starts[index] + shift,
        (line_starts[index + 1] if index + 1 < len(line_starts) else line_starts[index]) + shift,
    )
    if column and column > 0:
        error = ParseError.at_position(
            line + line_offset, column, CitationFormat.ENDNOTE_XML, reason
        )
    else:
        error = ParseError.at_line(line + line_offset, CitationFormat.ENDNOTE_XML, reason)
    return error.with_span(span) if len(span) else error


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def _year_date(element: etree._Element) -> Date | None:
    year = parse_int(element.get("year", ""))
    month = parse_int(element.get("month", ""))
    day = parse_int(element.get("day", ""))
    if month is not None and not 1 <= month <= 12:
        month = None
    if day is not None and not 1 <= day <= 31:
        day = None
    if year is None:
        year = parse_int(_text(element))
    return parse_endnote_date(year, month, day)


def _apply_element(citation: Citation, element: etree._Element) -> None:
    tag = element.tag

    if tag == "ref-type":
        name = element.get("name")
        if name is not None:
            citation.citation_type.append(name)
    elif tag == "title":
        citation.title = _text(element)
    elif tag == "secondary-title":
        value = _text(element)
        if not citation.title:
            citation.title = value
        else:
            citation.journal = value
    elif tag == "alt-title":
        value = _text(element)
        if not citation.title and citation.journal is None:
            citation.title = value
        elif citation.journal is None:
            citation.journal = value
        else:
            citation.journal_abbr = value
    elif tag == "author":
        citation.authors.append(build_author(_text(element)))
    elif tag == "custom2":
        value = _text(element)
        if "pmc" in value.lower():
            citation.pmc_id = value
    elif tag == "volume":
        citation.volume = _text(element)
    elif tag == "number":
        citation.issue = _text(element)
    elif tag == "pages":
        citation.pages = format_page_numbers(_text(element))
    elif tag == "electronic-resource-num":
        citation.doi = format_doi(_text(element))
    elif tag == "url":
        url = _text(element)
        if citation.doi is None and "doi.org" in url:
            citation.doi = format_doi(url)
        citation.urls.append(url)
    elif tag == "year":
        citation.date = _year_date(element)
    elif tag == "abstract":
        citation.abstract = _text(element)
    elif tag == "keyword":
        citation.keywords.append(_text(element))
    elif tag == "language":
        citation.language = _text(element)
    elif tag == "publisher":
        citation.publisher = _text(element)
    elif tag == "isbn":
        citation.issn.extend(split_issns(_text(element)))


def _record_to_citation(record: etree._Element, line: int, span: SourceSpan) -> Citation:
    citation = Citation()
    for element in record.iterdescendants():
        # comments and processing instructions have non-string tags
        if isinstance(element.tag, str):
            _apply_element(citation, element)

    if not citation.title and not citation.authors:
        raise ParseError.at_line(
            line,
            CitationFormat.ENDNOTE_XML,
            MissingValue(Field.TITLE_OR_AUTHOR, "title/author"),
        ).with_span(span)
    return citation
