"""Data models for citeparse."""

from citeparse.models.citation import Author, Citation, Date

__all__ = ["Author", "Citation", "Date"]
