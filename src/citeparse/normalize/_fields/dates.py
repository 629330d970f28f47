"""Format-specific date parsing."""

from citeparse.models import Date

from .._helpers import parse_int

MONTHS: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}


def parse_ris_date(value: str) -> Date | None:
    """Parse a slash-delimited RIS date, ``YYYY[/MM[/DD[/other]]]``.

    Out-of-range months and days are dropped independently of each other.

    Parameters
    ----------
    value : str
        Raw ``PY``/``Y1``/``DA`` value.

    Returns
    -------
    Date | None
        Parsed date, or None when the year is missing or not an integer.
    """
    parts = value.strip().split("/")
    year = parse_int(parts[0].strip())
    if year is None:
        return None

    month = _in_range(parts[1], 12) if len(parts) > 1 else None
    day = _in_range(parts[2], 31) if len(parts) > 2 else None
    return Date(year=year, month=month, day=day)


def parse_pubmed_date(value: str) -> Date | None:
    """Parse a MEDLINE ``DP`` date, ``YYYY[ Mon[ D]]``.

    Month names are matched case-insensitively in short or long form.
    Unknown month names and out-of-range days are dropped.

    Parameters
    ----------
    value : str
        Raw ``DP`` value, e.g. ``"2023 Jun 15"``.

    Returns
    -------
    Date | None
        Parsed date, or None when the year is missing or not an integer.
    """
    parts = value.split()
    if not parts:
        return None

    year = parse_int(parts[0])
    if year is None:
        return None

    month = MONTHS.get(parts[1].lower()) if len(parts) > 1 else None
    day = _in_range(parts[2], 31) if len(parts) > 2 else None
    return Date(year=year, month=month, day=day)


def parse_endnote_date(
    year: int | None,
    month: int | None = None,
    day: int | None = None,
) -> Date | None:
    """Build a date from EndNote ``year`` element attributes."""
    if year is None:
        return None
    return Date(year=year, month=month, day=day)


def parse_year_only(value: str) -> Date | None:
    """Parse a bare year, ignoring anything after the first ``/``.

    Parameters
    ----------
    value : str
        Raw year such as ``"2023"`` or ``"2023/05"``.

    Returns
    -------
    Date | None
        Year-only date, or None when no integer year is found.
    """
    head = value.strip().split("/", 1)[0].strip()
    year = parse_int(head)
    if year is None:
        return None
    return Date(year=year)


def _in_range(value: str, upper: int) -> int | None:
    number = parse_int(value.strip())
    if number is None or not 1 <= number <= upper:
        return None
    return number
