"""Structured JSONL audit log for parse runs.

Main Components
---------------
- AuditLogger: append-only JSONL event writer
- LogEvent: one event line
"""

from citeparse.audit.logger import AuditLogger
from citeparse.audit.models import LogEvent

__all__ = ["AuditLogger", "LogEvent"]
