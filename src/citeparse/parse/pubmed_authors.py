"""Order-dependent author resolution for PubMed/MEDLINE records.

MEDLINE lists each author as an optional ``FAU`` (full name), an ``AU``
(short name, family name plus initials) and any number of ``AD``
(affiliation) lines.  Which author an ``AD`` belongs to, and whether an
``AU`` repeats the preceding ``FAU``, depends on the surrounding lines, so
these tags are resolved in one forward pass by :func:`resolve_authors`.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from citeparse.models import Author
from citeparse.normalize import split_given_and_middle

__all__ = [
    "AuthorName",
    "ConsecutiveTag",
    "PubmedAuthor",
    "resolve_authors",
]


class ConsecutiveTag(StrEnum):
    """PubMed tags whose meaning depends on neighbouring lines."""

    AUTHOR = "AU"
    FULL_AUTHOR_NAME = "FAU"
    AFFILIATION = "AD"

    @classmethod
    def from_tag(cls, tag: str) -> "ConsecutiveTag | None":
        """Return the member for ``tag``, or None for stateless tags."""
        try:
            return cls(tag)
        except ValueError:
            return None


@dataclass(frozen=True)
class AuthorName:
    """Value of an ``AU`` or ``FAU`` line.

    Attributes
    ----------
    name : str
        Name exactly as found in the record.
    full : bool
        True for ``FAU`` (``"Family, Given Names"``), False for ``AU``
        (``"Family INITIALS"``).
    """

    name: str
    full: bool = False

    @classmethod
    def au(cls, name: str) -> "AuthorName":
        return cls(name, full=False)

    @classmethod
    def fau(cls, name: str) -> "AuthorName":
        return cls(name, full=True)

    @property
    def last_name(self) -> str:
        """Family name; the whole value when it cannot be split."""
        if self.full:
            head, sep, _ = self.name.partition(", ")
        else:
            head, sep, _ = self.name.rpartition(" ")
        return head if sep else self.name

    @property
    def initials(self) -> str:
        """Initials of the given names (``"JD"`` for ``"Watson, James Dewey"``)."""
        if not self.full:
            _, sep, tail = self.name.rpartition(" ")
            return tail if sep else ""

        _, sep, given = self.name.partition(", ")
        if not sep:
            return ""
        letters = []
        for token in given.split(" "):
            if not token:
                break
            letters.append(token[0])
        return "".join(letters)

    @property
    def given_name(self) -> str | None:
        """Given names for ``FAU``, initials for ``AU``, None if absent."""
        if self.full:
            _, sep, tail = self.name.partition(", ")
        else:
            _, sep, tail = self.name.rpartition(" ")
        return tail if sep else None

    def as_au(self) -> str:
        """Render in ``AU`` form (``"Family INITIALS"``)."""
        if not self.full:
            return self.name
        initials = self.initials
        return f"{self.last_name} {initials}" if initials else self.last_name

    def au_equals(self, au: str) -> bool:
        """Check whether an ``AU`` value names the same person.

        ``AU`` may drop middle initials, so ``"Crick FH"`` and ``"Crick FHC"``
        both match ``"Crick, Francis Harry Compton"``.
        """
        last_name, sep, initials = au.rpartition(" ")
        if not sep:
            last_name, initials = au, ""
        return self.last_name == last_name and self.initials.startswith(initials)

    def __str__(self) -> str:
        return f"{'FAU' if self.full else 'AU'}({self.name})"


@dataclass
class PubmedAuthor:
    """Author resolved from consecutive ``FAU``/``AU``/``AD`` lines."""

    name: AuthorName
    affiliations: list[str] = field(default_factory=list)

    def to_author(self) -> Author:
        """Convert to the canonical :class:`Author`."""
        given = self.name.given_name
        given_name, middle_name = split_given_and_middle(given) if given else (None, None)
        return Author(
            name=self.name.last_name,
            given_name=given_name,
            middle_name=middle_name,
            affiliations=list(self.affiliations),
        )


def resolve_authors(
    entries: Iterable[tuple[ConsecutiveTag, str]],
) -> tuple[list[PubmedAuthor], list[str]]:
    """Fold author-related entries into authors with affiliations.

    Rules, applied in order of appearance:

    - ``FAU`` always starts a new author.
    - ``AU`` starts a new author unless the previous author came from an
      ``FAU`` that :meth:`AuthorName.au_equals` this value.
    - ``AD`` attaches to the most recent author.

    Parameters
    ----------
    entries : Iterable[tuple[ConsecutiveTag, str]]
        Tag and value pairs in source order.

    Returns
    -------
    tuple[list[PubmedAuthor], list[str]]
        Resolved authors, and affiliations that appeared before any author.
    """
    authors: list[PubmedAuthor] = []
    leading_affiliations: list[str] = []

    for tag, value in entries:
        if tag is ConsecutiveTag.FULL_AUTHOR_NAME:
            authors.append(PubmedAuthor(AuthorName.fau(value)))
        elif tag is ConsecutiveTag.AUTHOR:
            previous = authors[-1].name if authors else None
            if previous is None or not (previous.full and previous.au_equals(value)):
                authors.append(PubmedAuthor(AuthorName.au(value)))
        elif authors:
            authors[-1].affiliations.append(value)
        else:
            leading_affiliations.append(value)

    return authors, leading_affiliations
