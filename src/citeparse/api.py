"""Public API for parsing citation files and text.

This module provides the main public API for citeparse, enabling:
- Parsing files (format from content or extension) into Citation objects
- Parsing in-memory text with a given or detected format
- Exporting citations to JSONL format
"""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path

from citeparse.errors import CitationFormat, UnknownFormatError
from citeparse.models import Citation
from citeparse.parse.csv_config import CsvConfig
from citeparse.parse.ingestion import detect_and_parse, get_parser_for_format, ingest_file

__all__ = [
    "iter_jsonl",
    "parse_file",
    "parse_text",
    "write_jsonl",
]


def parse_file(
    path: str | Path,
    *,
    citation_format: CitationFormat | None = None,
    csv_config: CsvConfig | None = None,
) -> list[Citation]:
    """Parse a single citation file.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.
    citation_format : CitationFormat | None, optional
        Force a format. By default it is detected from content, then from
        the file extension.
    csv_config : CsvConfig | None, optional
        Configuration used when the file is parsed as CSV.

    Returns
    -------
    list[Citation]
        Parsed citations.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    UnknownFormatError
        If the format cannot be determined.
    ParseError
        If the content is rejected by its parser.

    Examples
    --------
    Parse a RIS file:

        >>> from citeparse import parse_file
        >>> citations = parse_file("references.ris")
        >>> for citation in citations:
        ...     print(citation.title)
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    citations, _ = ingest_file(file_path, citation_format, csv_config)
    return citations


def parse_text(
    text: str,
    *,
    citation_format: CitationFormat | None = None,
    csv_config: CsvConfig | None = None,
) -> list[Citation]:
    """Parse citation text already in memory.

    Parameters
    ----------
    text : str
        Citation text.
    citation_format : CitationFormat | None, optional
        Format of ``text``; detected from content when omitted.
    csv_config : CsvConfig | None, optional
        Configuration used when ``citation_format`` is CSV.

    Returns
    -------
    list[Citation]
        Parsed citations.

    Raises
    ------
    UnknownFormatError
        If the format is omitted and cannot be detected, or has no parser.
    ParseError
        If the text is rejected by its parser.
    """
    if citation_format is None:
        citations, _ = detect_and_parse(text)
        return citations

    parser = get_parser_for_format(citation_format, csv_config)
    if parser is None:
        raise UnknownFormatError(f"No parser available for format: {citation_format}")
    return parser.parse(text)


def iter_jsonl(citations: Iterable[Citation], *, sort_keys: bool = True) -> Iterator[str]:
    """Yield one JSON line (without newline) per citation."""
    for citation in citations:
        yield json.dumps(citation.to_dict(), ensure_ascii=False, sort_keys=sort_keys)


def write_jsonl(
    citations: list[Citation],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write citations to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    citations : list[Citation]
        Citations to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.

    Examples
    --------
    Export parsed citations to JSONL:

        >>> from citeparse import parse_file, write_jsonl
        >>> write_jsonl(parse_file("references.nbib"), "output.jsonl")
    """
    file_path = Path(path)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for line in iter_jsonl(citations, sort_keys=sort_keys):
            f.write(line + "\n")
