"""Format detection, parser dispatch and single-file ingestion."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from citeparse.errors import CitationFormat, UnknownFormatError
from citeparse.models import Citation
from citeparse.parse.base import SUPPORTED_EXTENSIONS, CitationParser, detect_encoding
from citeparse.parse.csv_config import CsvConfig
from citeparse.parse.csv_parser import CsvParser
from citeparse.parse.endnote_xml import EndNoteXmlParser
from citeparse.parse.pubmed import PubMedParser
from citeparse.parse.ris import RisParser
from citeparse.utils import calculate_file_digest

__all__ = [
    "FileIngestionResult",
    "detect_and_parse",
    "detect_format",
    "get_parser_for_format",
    "ingest_file",
]

XML_MARKERS = ("<?xml", "<xml>")
RIS_MARKER = "TY  -"
PUBMED_MARKER = "PMID-"

ParserFactory = Callable[[], CitationParser]


@dataclass(frozen=True)
class FileIngestionResult:
    """Immutable result of ingesting a single file.

    Attributes
    ----------
    filename : str
        Name of the file (basename).
    filepath : str
        Full path to the file.
    file_size : int
        Size of file in bytes.
    format_detected : CitationFormat
        Format the file was parsed as.
    source_ext : str
        Lower-cased file extension.
    encoding_used : str
        Encoding used to decode file.
    citations_parsed : int
        Number of citations produced.
    file_digest : str
        SHA-256 digest of file bytes.
    """

    filename: str
    filepath: str
    file_size: int
    format_detected: CitationFormat
    source_ext: str
    encoding_used: str
    citations_parsed: int
    file_digest: str = ""


_PARSER_MAP: dict[CitationFormat, ParserFactory] = {
    CitationFormat.RIS: RisParser,
    CitationFormat.PUBMED: PubMedParser,
    CitationFormat.ENDNOTE_XML: EndNoteXmlParser,
    CitationFormat.CSV: CsvParser,
}


def get_parser_for_format(
    citation_format: CitationFormat,
    csv_config: CsvConfig | None = None,
    csv_auto_detect: bool = False,
) -> CitationParser | None:
    """Get a parser instance for a format.

    Parameters
    ----------
    citation_format : CitationFormat
        Format to parse.
    csv_config : CsvConfig | None, optional
        Configuration for the CSV parser; ignored for other formats.
    csv_auto_detect : bool, optional
        Sniff the CSV delimiter and header row from the input.

    Returns
    -------
    CitationParser | None
        Parser, or None if the format has no parser.
    """
    if citation_format is CitationFormat.CSV:
        return CsvParser(config=csv_config, auto_detect=csv_auto_detect)
    factory = _PARSER_MAP.get(citation_format)
    return factory() if factory is not None else None


def detect_format(text: str) -> CitationFormat:
    """Detect the citation format from leading content.

    Checks, in order: an XML declaration or ``<xml>`` root (EndNote XML),
    a leading or line-initial ``TY  -`` (RIS), a leading or line-initial
    ``PMID-`` (PubMed). CSV has no reliable marker and is never detected.

    Parameters
    ----------
    text : str
        Citation text.

    Returns
    -------
    CitationFormat
        Detected format, ``UNKNOWN`` when nothing matches.
    """
    content = text.strip()
    if not content:
        return CitationFormat.UNKNOWN
    if content.startswith(XML_MARKERS):
        return CitationFormat.ENDNOTE_XML
    if content.startswith(RIS_MARKER) or f"\n{RIS_MARKER}" in content:
        return CitationFormat.RIS
    if content.startswith(PUBMED_MARKER) or f"\n{PUBMED_MARKER}" in content:
        return CitationFormat.PUBMED
    return CitationFormat.UNKNOWN


def detect_and_parse(text: str) -> tuple[list[Citation], CitationFormat]:
    """Detect the format of ``text`` and parse it.

    Parameters
    ----------
    text : str
        Citation text.

    Returns
    -------
    tuple[list[Citation], CitationFormat]
        Citations and the detected format. Blank input gives
        ``([], CitationFormat.UNKNOWN)``.

    Raises
    ------
    UnknownFormatError
        If no format matches or no parser handles the detected format.
    ParseError
        If the detected parser rejects the input.
    """
    if not text.strip():
        return [], CitationFormat.UNKNOWN

    citation_format = detect_format(text)
    parser = get_parser_for_format(citation_format)
    if parser is None:
        raise UnknownFormatError()
    return parser.parse(text), citation_format


def _resolve_format(
    content: str,
    extension: str,
    citation_format: CitationFormat | None,
) -> CitationFormat:
    if citation_format is not None:
        return citation_format
    detected = detect_format(content)
    if detected is not CitationFormat.UNKNOWN:
        return detected
    return SUPPORTED_EXTENSIONS.get(extension, CitationFormat.UNKNOWN)


def read_text(file_path: Path) -> tuple[str, str, bytes]:
    """Read and decode a file.

    Returns
    -------
    tuple[str, str, bytes]
        Decoded text, the encoding used, and the raw bytes.
    """
    file_bytes = file_path.read_bytes()
    encoding = detect_encoding(file_bytes)
    return file_bytes.decode(encoding), encoding, file_bytes


def ingest_file(
    file_path: Path,
    citation_format: CitationFormat | None = None,
    csv_config: CsvConfig | None = None,
    csv_auto_detect: bool = False,
) -> tuple[list[Citation], FileIngestionResult]:
    """Ingest a single file.

    The format is, in order of preference: ``citation_format``, the format
    detected from content, the format registered for the file extension.

    Parameters
    ----------
    file_path : Path
        Path to file to ingest.
    citation_format : CitationFormat | None, optional
        Force a format instead of detecting it.
    csv_config : CsvConfig | None, optional
        Configuration used when the file is parsed as CSV.
    csv_auto_detect : bool, optional
        Sniff the CSV delimiter and header row from the input.

    Returns
    -------
    tuple[list[Citation], FileIngestionResult]
        - List of parsed citations
        - File ingestion result with metadata and stats

    Raises
    ------
    OSError
        If the file cannot be read.
    UnknownFormatError
        If no format can be determined.
    ParseError
        If the file content is rejected by its parser.
    """
    content, encoding, file_bytes = read_text(file_path)
    extension = file_path.suffix.lower()

    resolved = _resolve_format(content, extension, citation_format)
    parser = get_parser_for_format(resolved, csv_config, csv_auto_detect)
    if parser is None:
        raise UnknownFormatError(f"Unable to detect citation format of {file_path.name}")

    citations = parser.parse(content)

    result = FileIngestionResult(
        filename=file_path.name,
        filepath=str(file_path),
        file_size=len(file_bytes),
        format_detected=resolved,
        source_ext=extension,
        encoding_used=encoding,
        citations_parsed=len(citations),
        file_digest=calculate_file_digest(file_bytes),
    )
    return citations, result
