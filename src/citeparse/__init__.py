"""Multi-format parsing of bibliographic citations.

This package provides:
- Data models (citeparse.models) - Citation, Author, Date
- Errors (citeparse.errors) - positional ParseError and its reasons
- Parsing (citeparse.parse) - RIS, PubMed, CSV and EndNote XML parsers
- Normalization (citeparse.normalize) - pages, DOI, ISSN, names, dates
- Diagnostics (citeparse.diagnostics) - source-context error reports
- Audit (citeparse.audit) - JSONL run event logging
- CLI (citeparse.cli) - command-line interface
- Public API (citeparse.api) - high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from citeparse.api import iter_jsonl, parse_file, parse_text, write_jsonl
from citeparse.diagnostics import render_diagnostic
from citeparse.errors import CitationFormat, ParseError, UnknownFormatError
from citeparse.models import Author, Citation, Date
from citeparse.parse import (
    CsvConfig,
    CsvParser,
    EndNoteXmlParser,
    PubMedParser,
    RisParser,
    detect_and_parse,
    detect_format,
)

__all__ = [
    "__version__",
    "__license__",
    "Author",
    "Citation",
    "CitationFormat",
    "CsvConfig",
    "CsvParser",
    "Date",
    "EndNoteXmlParser",
    "ParseError",
    "PubMedParser",
    "RisParser",
    "UnknownFormatError",
    "detect_and_parse",
    "detect_format",
    "iter_jsonl",
    "parse_file",
    "parse_text",
    "render_diagnostic",
    "write_jsonl",
]
