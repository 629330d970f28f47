"""Field normalization for parsed citations.

Main entry points:
- format_page_numbers: complete abbreviated page ranges
- format_doi: canonical lower-case DOI from labels, URLs and ``[doi]`` tails
- split_issns: extract ISSNs with qualifiers
- parse_author_name / split_given_and_middle: person-name splitting
- parse_ris_date / parse_pubmed_date / parse_endnote_date / parse_year_only
- build_author: Author from a raw name string
"""

from citeparse.models import Author

from ._fields import (
    format_doi,
    format_page_numbers,
    parse_author_name,
    parse_endnote_date,
    parse_pubmed_date,
    parse_ris_date,
    parse_year_only,
    split_given_and_middle,
    split_issns,
)


def build_author(raw_name: str) -> Author:
    """Build an :class:`Author` from a raw ``"Family, Given Middle"`` string.

    Parameters
    ----------
    raw_name : str
        Author string in any supported layout.

    Returns
    -------
    Author
        Author with family, given and middle names split out.
    """
    family, given = parse_author_name(raw_name)
    given_name, middle_name = split_given_and_middle(given)
    return Author(name=family, given_name=given_name, middle_name=middle_name)


__all__ = [
    "build_author",
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
