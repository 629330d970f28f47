"""Page range normalization."""

from .._helpers import first_digit_index


def format_page_numbers(page_range: str) -> str:
    """Normalize a page range, completing abbreviated end pages.

    ``"1234-45"`` becomes ``"1234-1245"`` and ``"R575-82"`` becomes
    ``"R575-R582"``.  Ranges whose endpoints resolve to the same page
    collapse to that page.  Anything that is not a two-part
    ``prefix+digits`` range, or whose endpoints carry different non-empty
    prefixes, is returned unchanged.

    Parameters
    ----------
    page_range : str
        Raw page string.

    Returns
    -------
    str
        Normalized page string.
    """
    if "-" not in page_range:
        return page_range

    parts = page_range.split("-")
    if len(parts) != 2:
        return page_range

    from_prefix, from_num = _split_prefix(parts[0])
    to_prefix, to_num = _split_prefix(parts[1])

    if from_prefix and to_prefix and from_prefix != to_prefix:
        return page_range
    if not from_num or not to_num:
        return page_range

    if len(to_num) < len(from_num):
        completed = from_num[: len(from_num) - len(to_num)] + to_num
    else:
        completed = to_num

    if from_num == completed:
        return f"{from_prefix}{from_num}"
    return f"{from_prefix}{from_num}-{from_prefix}{completed}"


def _split_prefix(value: str) -> tuple[str, str]:
    idx = first_digit_index(value)
    return value[:idx], value[idx:]
