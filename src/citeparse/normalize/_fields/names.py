"""Person-name splitting."""


def parse_author_name(name: str) -> tuple[str, str]:
    """Split an author string into family and given parts.

    With a comma the first part is the family name and the remaining
    comma-separated parts are joined with spaces (``"Smith, John, Jr."``
    gives ``"John Jr."``); otherwise the first whitespace-separated token
    is taken as the family name (``"Smith John"``).

    Parameters
    ----------
    name : str
        Raw author string.

    Returns
    -------
    tuple[str, str]
        ``(family, given)``; ``given`` is empty when absent.
    """
    if "," in name:
        family, *rest = name.split(",")
        return family.strip(), " ".join(part.strip() for part in rest if part.strip())

    tokens = name.split()
    if not tokens:
        return "", ""
    return tokens[0], " ".join(tokens[1:])


def split_given_and_middle(given: str) -> tuple[str | None, str | None]:
    """Split a given-name string into first given name and middle names.

    Parameters
    ----------
    given : str
        Given names, e.g. ``"John Adam Paul"``.

    Returns
    -------
    tuple[str | None, str | None]
        ``(given, middle)``; ``middle`` joins the remaining tokens with a
        single space.  Both are None for blank input.
    """
    tokens = given.split()
    if not tokens:
        return None, None
    middle = " ".join(tokens[1:]) or None
    return tokens[0], middle
