"""UTC timestamps and run identifiers."""

import secrets
from datetime import UTC, datetime

__all__ = ["generate_run_id", "get_iso_timestamp"]


def get_iso_timestamp() -> str:
    """Current UTC time as ISO8601 with microseconds and a ``Z`` suffix.

    Returns
    -------
    str
        Timestamp such as ``"2026-02-03T12:34:56.123456Z"``.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def generate_run_id() -> str:
    """Unique run identifier, ``<timestamp>__<8 hex chars>``."""
    return f"{get_iso_timestamp()}__{secrets.token_hex(4)}"
