"""Append-only audit sinks for validation failures and generation anomalies."""

import os
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from dataclasses import dataclass, field


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class AuditEvent:
    header: str
    error: str
    context: Any = None
    timestamp: str = field(default_factory=_utc_now)

    def format(self) -> str:
        context = json.dumps(self.context, indent=2, default=str)
        return f"[{self.timestamp}] {self.header}\nError: {self.error}\nContext:\n{context}\n{'=' * 80}\n"


class AuditSink:
    """Receives audit events. Subclasses implement ``record``."""

    def record(self, event: AuditEvent) -> None:
        raise NotImplementedError

    def append(self, header: str, error: str, context: Any = None) -> AuditEvent:
        event = AuditEvent(header=header, error=error, context=context)
        self.record(event)
        return event


class LoggingAuditSink(AuditSink):
    """Writes events to a logger at ERROR level."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('timetable.audit')

    def record(self, event: AuditEvent) -> None:
        self.logger.error(event.format())


class FileAuditSink(AuditSink):
    """Appends events to a text file, creating its directory on first write."""

    def __init__(self, path: str):
        self.path = path

    def record(self, event: AuditEvent) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(event.format())
