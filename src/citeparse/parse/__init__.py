"""Multi-format bibliographic citation parsing.

Supported formats:
- RIS (.ris) - Research Information Systems tagged format
- PubMed/MEDLINE (.nbib, .txt) - NLM tagged format
- CSV (.csv, .tsv) - delimited exports with a configurable header map
- EndNote XML (.xml) - EndNote library export

Main entry points:
- detect_format / detect_and_parse: content sniffing
- get_parser_for_format: parser instance for a format
- ingest_file: read, decode, detect and parse a single file
"""

from citeparse.parse.base import SUPPORTED_EXTENSIONS, CitationParser
from citeparse.parse.csv_config import CsvConfig, CsvConfigError
from citeparse.parse.csv_parser import CsvParser
from citeparse.parse.endnote_xml import EndNoteXmlParser
from citeparse.parse.ingestion import (
    FileIngestionResult,
    detect_and_parse,
    detect_format,
    get_parser_for_format,
    ingest_file,
)
from citeparse.parse.pubmed import PubMedParser
from citeparse.parse.ris import RisParser

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "CitationParser",
    "CsvConfig",
    "CsvConfigError",
    "CsvParser",
    "EndNoteXmlParser",
    "FileIngestionResult",
    "PubMedParser",
    "RisParser",
    "detect_and_parse",
    "detect_format",
    "get_parser_for_format",
    "ingest_file",
]
