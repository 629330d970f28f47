"""Shared helpers for file digests and timestamps."""

from citeparse.utils.hashing import calculate_file_digest
from citeparse.utils.timestamps import generate_run_id, get_iso_timestamp

__all__ = [
    "calculate_file_digest",
    "generate_run_id",
    "get_iso_timestamp",
]
