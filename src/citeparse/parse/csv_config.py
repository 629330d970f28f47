"""Configuration for the CSV citation parser.

A :class:`CsvConfig` maps citation fields to the header texts that may
carry them (many aliases per field, matched case-insensitively) and holds
the dialect options used to read the file.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = ["DEFAULT_HEADERS", "CsvConfig", "CsvConfigError"]

DEFAULT_HEADERS: dict[str, tuple[str, ...]] = {
    "title": ("title", "article title", "publication title"),
    "authors": ("author", "authors", "creator", "creators"),
    "journal": ("journal", "journal title", "source title", "publication"),
    "year": ("year", "publication year", "pub year"),
    "volume": ("volume", "vol"),
    "issue": ("issue", "number", "no"),
    "pages": ("pages", "page numbers", "page range"),
    "doi": ("doi", "digital object identifier"),
    "abstract": ("abstract", "summary"),
    "keywords": ("keywords", "tags"),
    "issn": ("issn",),
    "language": ("language", "lang"),
    "publisher": ("publisher",),
    "url": ("url", "link", "web link"),
    "label": ("label",),
    "duplicate_id": ("duplicateid", "duplicate_id"),
}


class CsvConfigError(ValueError):
    """Raised by :meth:`CsvConfig.validate` for an unusable configuration."""


def _default_header_map() -> dict[str, list[str]]:
    return {name: list(aliases) for name, aliases in DEFAULT_HEADERS.items()}


@dataclass
class CsvConfig:
    """Header mapping and dialect options for CSV parsing.

    Attributes
    ----------
    header_map : dict[str, list[str]]
        Citation field name to header aliases.
    delimiter : str
        Single-character field separator.
    has_header : bool
        Whether the first row holds column names.
    quote : str
        Quote character.
    trim : bool
        Strip whitespace around headers and values.
    flexible : bool
        Tolerate rows whose column count differs from the header count.
    store_original_record : bool
        Keep the raw row values in ``extra_fields["original_record"]``.
    """

    header_map: dict[str, list[str]] = field(default_factory=_default_header_map)
    delimiter: str = ","
    has_header: bool = True
    quote: str = '"'
    trim: bool = True
    flexible: bool = False
    store_original_record: bool = False
    _reverse_map: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._rebuild_reverse_map()

    def _rebuild_reverse_map(self) -> None:
        self._reverse_map = {
            alias.lower(): name for name, aliases in self.header_map.items() for alias in aliases
        }

    def set_header_mapping(self, field_name: str, aliases: list[str]) -> "CsvConfig":
        """Replace the aliases of ``field_name``.

        Returns
        -------
        CsvConfig
            This config, for chaining.
        """
        self.header_map[field_name] = list(aliases)
        self._rebuild_reverse_map()
        return self

    def add_header_aliases(self, field_name: str, aliases: list[str]) -> "CsvConfig":
        """Append aliases to ``field_name``, creating the field if needed.

        Returns
        -------
        CsvConfig
            This config, for chaining.
        """
        self.header_map.setdefault(field_name, []).extend(aliases)
        self._rebuild_reverse_map()
        return self

    def get_field_for_header(self, header: str) -> str | None:
        """Field mapped to ``header`` (case-insensitive), or None."""
        return self._reverse_map.get(header.lower())

    def get_field_mappings(self) -> dict[str, list[str]]:
        """Return the field to aliases mapping."""
        return self.header_map

    def validate(self) -> None:
        """Check the configuration is usable.

        Raises
        ------
        CsvConfigError
            If the mapping is empty, a field name or alias is empty, a field
            has no aliases, one alias maps to two fields, or the delimiter
            is a newline character or not a single character.
        """
        if not self.header_map:
            raise CsvConfigError("No header mappings defined")

        for name, aliases in self.header_map.items():
            if not name:
                raise CsvConfigError("Empty field name found in mappings")
            if not aliases:
                raise CsvConfigError(f"Field '{name}' has no aliases defined")
            if any(not alias for alias in aliases):
                raise CsvConfigError(f"Empty alias found for field '{name}'")

        if self.delimiter in ("\n", "\r"):
            raise CsvConfigError("Delimiter cannot be a newline character")
        if len(self.delimiter) != 1 or len(self.quote) != 1:
            raise CsvConfigError("Delimiter and quote must be single characters")

        seen: dict[str, str] = {}
        for name, aliases in self.header_map.items():
            for alias in aliases:
                existing = seen.setdefault(alias.lower(), name)
                if existing != name:
                    raise CsvConfigError(
                        f"Alias '{alias}' is mapped to both '{existing}' and '{name}'"
                    )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a JSON-ready dictionary."""
        return {
            "header_map": {name: list(aliases) for name, aliases in self.header_map.items()},
            "delimiter": self.delimiter,
            "has_header": self.has_header,
            "quote": self.quote,
            "trim": self.trim,
            "flexible": self.flexible,
            "store_original_record": self.store_original_record,
        }
