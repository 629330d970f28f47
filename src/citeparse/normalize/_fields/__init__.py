"""Field normalization functions.

Pure, format-independent functions mapping raw substrings to domain
values. Every parser calls into these.
"""

from .dates import parse_endnote_date, parse_pubmed_date, parse_ris_date, parse_year_only
from .doi import format_doi
from .issn import split_issns
from .names import parse_author_name, split_given_and_middle
from .pages import format_page_numbers

__all__ = [
    "format_doi",
    "format_page_numbers",
    "parse_author_name",
    "parse_endnote_date",
    "parse_pubmed_date",
    "parse_ris_date",
    "parse_year_only",
    "split_given_and_middle",
    "split_issns",
]
