"""ISSN extraction."""

from .._helpers import ESCAPED_NEWLINES, ISSN_RE


def split_issns(value: str) -> list[str]:
    """Extract every ISSN from a free-text field.

    Qualifiers in parentheses directly after an ISSN are kept, so
    ``"1234-5678 (Print) 5678-1234"`` yields
    ``["1234-5678 (Print)", "5678-1234"]``.

    Parameters
    ----------
    value : str
        Raw ISSN field, possibly holding several ISSNs on separate lines or
        separated by escaped newline sequences.

    Returns
    -------
    list[str]
        ISSNs in order of appearance.
    """
    for escaped in ESCAPED_NEWLINES:
        value = value.replace(escaped, "\n")

    issns: list[str] = []
    for line in value.split("\n"):
        if not line.strip():
            continue
        issns.extend(match.strip() for match in ISSN_RE.findall(line))
    return issns
