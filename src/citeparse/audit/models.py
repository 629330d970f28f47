"""Data model for audit log events."""

from dataclasses import dataclass
from typing import Any

__all__ = ["LogEvent"]


@dataclass
class LogEvent:
    """Structured log event.

    Serialized as one JSON object per line; see
    ``schemas/log_event.schema.json``.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Unique run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type (``run_started``, ``file_parsed``, ``parse_failed``,
        ``run_finished``).
    data : dict[str, Any]
        Event-specific data payload.
    stage : str | None
        Command that emitted the event (``parse``, ``detect``).
    file : str | None
        Input file name if the event concerns one file.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    file: str | None = None
