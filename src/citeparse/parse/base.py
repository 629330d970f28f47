"""Base types and utilities for citation parsers."""

from collections.abc import Iterator
from typing import NamedTuple, Protocol

from citeparse.errors import CitationFormat
from citeparse.models import Citation

SUPPORTED_EXTENSIONS: dict[str, CitationFormat] = {
    ".ris": CitationFormat.RIS,
    ".nbib": CitationFormat.PUBMED,
    ".txt": CitationFormat.PUBMED,
    ".csv": CitationFormat.CSV,
    ".tsv": CitationFormat.CSV,
    ".xml": CitationFormat.ENDNOTE_XML,
}


class CitationParser(Protocol):
    """Capability shared by every format parser.

    Implementations are stateless between calls: ``parse`` is a pure
    function of its input (and, for CSV, the parser configuration), so one
    instance may serve several threads.
    """

    format: CitationFormat

    def parse(self, text: str) -> list[Citation]:
        """Parse ``text`` into citations.

        Raises
        ------
        ParseError
            On the first citation-level failure.
        """
        ...


class SourceLine(NamedTuple):
    """One physical line of source text.

    Attributes
    ----------
    number : int
        1-based line number.
    start : int
        UTF-8 byte offset of the first character.
    end : int
        UTF-8 byte offset just past the line terminator.
    text : str
        Line content without ``\\n`` or a trailing ``\\r``.
    """

    number: int
    start: int
    end: int
    text: str


def byte_len(text: str) -> int:
    """Length of ``text`` in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def iter_source_lines(text: str) -> Iterator[SourceLine]:
    """Yield lines with their 1-based number and byte offsets.

    Lines break on ``\\n`` only; a ``\\r`` immediately before it is dropped
    from the text but counted in the byte offsets.

    Parameters
    ----------
    text : str
        Complete source text.

    Yields
    ------
    SourceLine
        Each physical line in order. A trailing newline does not produce an
        extra empty line.
    """
    total = byte_len(text)
    offset = 0
    pieces = text.split("\n")
    if pieces and pieces[-1] == "":
        pieces.pop()

    for number, piece in enumerate(pieces, start=1):
        size = byte_len(piece) + 1
        yield SourceLine(number, offset, min(offset + size, total), piece.removesuffix("\r"))
        offset += size


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes using deterministic strategy.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content as bytes.

    Returns
    -------
    str
        ``utf-8-sig`` for a UTF-8 BOM, ``utf-8`` when the bytes decode,
        ``latin-1`` otherwise.
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"
