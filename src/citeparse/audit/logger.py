"""Structured audit logger for JSONL event logging.

Events are appended to a JSONL file through a handle kept open for the
whole run and flushed after every write.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from citeparse.audit.models import LogEvent
from citeparse.errors import ParseError
from citeparse.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Command name attached to events that do not give one.
    """

    def __init__(self, run_id: str, log_path: Path, stage: str | None = None) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage = stage

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        file: str | None = None,
    ) -> None:
        """Write one structured event.

        Parameters
        ----------
        event_type : str
            Event type identifier.
        data : dict[str, Any] | None, optional
            Event-specific payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        file : str | None, optional
            Input file name the event concerns.
        """
        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data if data is not None else {},
            stage=self.current_stage,
            file=file,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started with the command line and effective options."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def file_parsed(self, file: str, citation_format: str, citations: int, sha256: str) -> None:
        """Log file_parsed after a file was converted successfully.

        Parameters
        ----------
        file : str
            Input file name.
        citation_format : str
            Format the file was parsed as.
        citations : int
            Number of citations produced.
        sha256 : str
            Digest of the input bytes.
        """
        self.event(
            "file_parsed",
            data={"format": citation_format, "citations": citations, "sha256": sha256},
            file=file,
        )

    def parse_failed(self, file: str, error: ParseError) -> None:
        """Log parse_failed with the error's format, position and message."""
        self.event("parse_failed", data=error.to_dict(), level="ERROR", file=file)

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        citations: int | None = None,
    ) -> None:
        """Log run_finished.

        Parameters
        ----------
        status : str
            Run status ("success", "failed").
        duration_seconds : float
            Total execution time in seconds.
        citations : int | None, optional
            Total citations written.
        """
        data: dict[str, Any] = {"status": status, "duration_seconds": duration_seconds}
        if citations is not None:
            data["citations"] = citations
        self.event("run_finished", data=data, level="INFO" if status == "success" else "ERROR")
