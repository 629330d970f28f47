"""Positional error model shared by every citation parser.

A parse failure is raised as a single :class:`ParseError` carrying the
originating format, an optional 1-based line and column, an optional
half-open UTF-8 byte span and a structured reason.  Reasons are small
frozen dataclasses so callers can dispatch on them with ``isinstance`` or
``match``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "CitationFormat",
    "Field",
    "SourceSpan",
    "SyntaxReason",
    "MissingValue",
    "BadValue",
    "MultipleValues",
    "Reason",
    "ParseError",
    "UnknownFormatError",
]


class CitationFormat(StrEnum):
    """Citation formats understood by the engine.

    Attributes
    ----------
    RIS : str
        Research Information Systems tagged format.
    PUBMED : str
        PubMed/MEDLINE flat-file (``.nbib``) format.
    ENDNOTE_XML : str
        EndNote XML export.
    CSV : str
        Delimited tabular export with a header row.
    UNKNOWN : str
        Content that matched no format.
    """

    RIS = "ris"
    PUBMED = "pubmed"
    ENDNOTE_XML = "endnote_xml"
    CSV = "csv"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        """Human-readable name used in error messages."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[CitationFormat, str] = {
    CitationFormat.RIS: "RIS",
    CitationFormat.PUBMED: "PubMed",
    CitationFormat.ENDNOTE_XML: "EndNote XML",
    CitationFormat.CSV: "CSV",
    CitationFormat.UNKNOWN: "Unknown",
}


class Field(StrEnum):
    """Citation field names reported in error reasons."""

    TITLE = "title"
    AUTHOR = "author"
    TITLE_OR_AUTHOR = "title or author"
    DATE = "date"
    YEAR = "year"
    JOURNAL = "journal"
    JOURNAL_ABBR = "journal_abbr"
    DOI = "doi"
    VOLUME = "volume"
    ISSUE = "issue"
    PAGES = "pages"
    ABSTRACT = "abstract"
    KEYWORDS = "keywords"
    PMID = "pmid"
    PMC_ID = "pmc_id"
    ISSN = "issn"
    LANGUAGE = "language"
    PUBLISHER = "publisher"
    URLS = "urls"
    MESH_TERMS = "mesh_terms"
    CITATION_TYPE = "citation_type"


@dataclass(frozen=True)
class SourceSpan:
    """Half-open byte range ``[start, end)`` into the UTF-8 encoded source.

    Attributes
    ----------
    start : int
        Byte offset of the first byte.
    end : int
        Byte offset one past the last byte.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class SyntaxReason:
    """Malformed token, bad tag shape or a translated lexer failure."""

    message: str

    def __str__(self) -> str:
        return f"Bad syntax: {self.message}"


@dataclass(frozen=True)
class MissingValue:
    """A field the format requires is absent."""

    field: str
    key: str

    def __str__(self) -> str:
        return f"Missing value for {self.key}"


@dataclass(frozen=True)
class BadValue:
    """A present field failed semantic validation."""

    field: str
    key: str
    value: str
    reason: str

    def __str__(self) -> str:
        return f'Bad value for {self.key}: "{self.value}" ({self.reason})'


@dataclass(frozen=True)
class MultipleValues:
    """A single-valued field occurred more than once.

    No parser raises this yet; it is part of the taxonomy so consumers can
    handle it exhaustively.
    """

    field: str
    key: str
    second_line: int | None = None
    second_column: int | None = None

    def __str__(self) -> str:
        text = f"Second value found for {self.key} but only one value is allowed"
        if self.second_line is not None:
            text += f" at line {self.second_line}"
            if self.second_column is not None:
                text += f" column {self.second_column}"
        return text


Reason = SyntaxReason | MissingValue | BadValue | MultipleValues


class ParseError(Exception):
    """Raised when citation text cannot be converted.

    Attributes
    ----------
    format : CitationFormat
        Format whose parser detected the problem.
    reason : Reason
        Structured cause of the failure.
    line : int | None
        1-based line number, when known.
    column : int | None
        1-based column number, when known.
    span : SourceSpan | None
        Byte range of the offending region, when known.
    """

    def __init__(
        self,
        format: CitationFormat,
        reason: Reason,
        line: int | None = None,
        column: int | None = None,
        span: SourceSpan | None = None,
    ) -> None:
        self.format = format
        self.reason = reason
        self.line = line
        self.column = column
        self.span = span
        super().__init__(self.message)

    def __reduce__(self) -> tuple[type[ParseError], tuple[object, ...]]:
        return type(self), (self.format, self.reason, self.line, self.column, self.span)

    @classmethod
    def at_line(cls, line: int, format: CitationFormat, reason: Reason) -> ParseError:
        """Create an error located on a line."""
        return cls(format, reason, line=line)

    @classmethod
    def at_position(
        cls,
        line: int,
        column: int,
        format: CitationFormat,
        reason: Reason,
    ) -> ParseError:
        """Create an error located on a line and column."""
        return cls(format, reason, line=line, column=column)

    @classmethod
    def without_position(cls, format: CitationFormat, reason: Reason) -> ParseError:
        """Create an error with no source location."""
        return cls(format, reason)

    def with_span(self, span: SourceSpan) -> ParseError:
        """Return a copy of this error carrying ``span``.

        Parameters
        ----------
        span : SourceSpan
            Byte range to attach.

        Returns
        -------
        ParseError
            New error with identical position, format and reason.
        """
        return type(self)(self.format, self.reason, self.line, self.column, span)

    @property
    def message(self) -> str:
        """One-line description including format and position."""
        location = ""
        if self.line is not None:
            location = f" at line {self.line}"
            if self.column is not None:
                location += f" column {self.column}"
        return f"Error in {self.format.display_name} format{location}: {self.reason}"

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"ParseError(format={self.format!r}, reason={self.reason!r}, "
            f"line={self.line!r}, column={self.column!r}, span={self.span!r})"
        )

    def to_dict(self) -> dict[str, object]:
        """Convert error to a JSON-ready dictionary."""
        return {
            "format": self.format.display_name,
            "line": self.line,
            "column": self.column,
            "span": [self.span.start, self.span.end] if self.span else None,
            "reason": type(self.reason).__name__,
            "message": self.message,
        }


class UnknownFormatError(ValueError):
    """Raised when content matches no supported citation format."""

    def __init__(self, message: str = "Unable to detect citation format") -> None:
        super().__init__(message)
