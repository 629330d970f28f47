"""Canonical citation data model.

Every parser converges on :class:`Citation`. Records are plain mutable
dataclasses filled in by the per-format converters; ``to_dict`` and
``from_dict`` give the JSON interchange shape described by
``schemas/citation.schema.json``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

__all__ = ["Author", "Citation", "Date"]


@dataclass(frozen=True)
class Date:
    """Publication date with a required year.

    No calendar cross-validation is done: ``Date(2023, 2, 30)`` is valid.

    Attributes
    ----------
    year : int
        Publication year (may be negative).
    month : int | None
        Month, 1-12.
    day : int | None
        Day of month, 1-31.
    """

    year: int
    month: int | None = None
    day: int | None = None

    def __post_init__(self) -> None:
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if self.day is not None and not 1 <= self.day <= 31:
            raise ValueError(f"Day out of range: {self.day}")


@dataclass
class Author:
    """Author of a citation.

    Attributes
    ----------
    name : str
        Family name, or the full name for mononyms.
    given_name : str | None
        First given name.
    middle_name : str | None
        Remaining given names, space-joined.
    affiliations : list[str]
        Affiliation strings in source order.
    """

    name: str
    given_name: str | None = None
    middle_name: str | None = None
    affiliations: list[str] = field(default_factory=list)


@dataclass
class Citation:
    """Canonical bibliographic record produced by every parser.

    Attributes
    ----------
    citation_type : list[str]
        Type tags as found in the source (``JOUR``, ``Journal Article``...).
    title : str
        Title of the work.
    authors : list[Author]
        Authors in source order.
    journal : str | None
        Full journal name.
    journal_abbr : str | None
        Abbreviated journal name.
    date : Date | None
        Publication date.
    volume : str | None
        Volume.
    issue : str | None
        Issue number.
    pages : str | None
        Normalized page range.
    issn : list[str]
        ISSNs, with qualifiers such as ``(Print)`` preserved.
    doi : str | None
        Normalized DOI.
    pmid : str | None
        PubMed identifier.
    pmc_id : str | None
        PubMed Central identifier.
    abstract : str | None
        Abstract text.
    keywords : list[str]
        Keywords.
    urls : list[str]
        URLs, including any a DOI was taken from.
    language : str | None
        Publication language.
    mesh_terms : list[str]
        MeSH headings.
    publisher : str | None
        Publisher.
    extra_fields : dict[str, list[str]]
        Unmapped source fields keyed by tag or header text.
    """

    citation_type: list[str] = field(default_factory=list)
    title: str = ""
    authors: list[Author] = field(default_factory=list)
    journal: str | None = None
    journal_abbr: str | None = None
    date: Date | None = None
    volume: str | None = None
    issue: str | None = None
    pages: str | None = None
    issn: list[str] = field(default_factory=list)
    doi: str | None = None
    pmid: str | None = None
    pmc_id: str | None = None
    abstract: str | None = None
    keywords: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    language: str | None = None
    mesh_terms: list[str] = field(default_factory=list)
    publisher: str | None = None
    extra_fields: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert citation to a JSON-ready dictionary.

        Returns
        -------
        dict[str, Any]
            Nested dictionary of all fields.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Citation":
        """Rebuild a citation from :meth:`to_dict` output.

        Parameters
        ----------
        data : dict[str, Any]
            Dictionary (e.g. from JSON) with citation fields.

        Returns
        -------
        Citation
            Reconstructed citation.
        """
        date_data = data.get("date")
        return cls(
            citation_type=list(data.get("citation_type", [])),
            title=data.get("title", ""),
            authors=[
                Author(
                    name=a.get("name", ""),
                    given_name=a.get("given_name"),
                    middle_name=a.get("middle_name"),
                    affiliations=list(a.get("affiliations", [])),
                )
                for a in data.get("authors", [])
            ],
            journal=data.get("journal"),
            journal_abbr=data.get("journal_abbr"),
            date=(
                Date(
                    year=date_data["year"],
                    month=date_data.get("month"),
                    day=date_data.get("day"),
                )
                if date_data
                else None
            ),
            volume=data.get("volume"),
            issue=data.get("issue"),
            pages=data.get("pages"),
            issn=list(data.get("issn", [])),
            doi=data.get("doi"),
            pmid=data.get("pmid"),
            pmc_id=data.get("pmc_id"),
            abstract=data.get("abstract"),
            keywords=list(data.get("keywords", [])),
            urls=list(data.get("urls", [])),
            language=data.get("language"),
            mesh_terms=list(data.get("mesh_terms", [])),
            publisher=data.get("publisher"),
            extra_fields={k: list(v) for k, v in data.get("extra_fields", {}).items()},
        )
