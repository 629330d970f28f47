"""DOI normalization."""

from .._helpers import DOI_SUFFIX_RE, WHITESPACE_RE


def format_doi(doi: str) -> str | None:
    """Normalize a DOI string.

    Strips a trailing ``[doi]`` marker, removes all whitespace, lowercases,
    and drops anything before the first ``10.``, which removes labels and
    ``doi.org`` URL prefixes.

    Parameters
    ----------
    doi : str
        Raw DOI, DOI URL or labelled DOI (``"DOI: 10.1000/x"``).

    Returns
    -------
    str | None
        Normalized DOI, or None when no ``10.`` prefix is present.

    Examples
    --------
    >>> format_doi("https://doi.org/10.1000/test [doi]")
    '10.1000/test'
    >>> format_doi("invalid") is None
    True
    """
    if not doi:
        return None

    cleaned = DOI_SUFFIX_RE.sub("", doi.strip()).strip()
    cleaned = WHITESPACE_RE.sub("", cleaned).lower()

    start = cleaned.find("10.")
    if start == -1:
        return None
    return cleaned[start:]
