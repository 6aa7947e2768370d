# core/results.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from adstool.core.ads import StreamRecord
from adstool.core.errors import AdsError


class Outcome(str, Enum):
    EXTRACTED = "extracted"
    ALREADY_EXTRACTED = "already_extracted"
    ADDED = "added"
    ALREADY_EXISTS = "already_exists"
    REMOVED = "removed"
    NOT_EXISTS = "not_exists"
    FAILED = "failed"


@dataclass
class StreamOutcome:
    stream_name: str
    outcome: Outcome
    message: str = ""
    target: Optional[str] = None
    error: Optional[AdsError] = None

    def to_dict(self):
        return {
            "stream": self.stream_name,
            "outcome": self.outcome.value,
            "message": self.message,
            "target": self.target,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class OperationReport:
    """Result of one operation on one host file. `error` is set only for fatal failures."""
    operation: str
    host_file: str
    outcomes: List[StreamOutcome] = field(default_factory=list)
    error: Optional[AdsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failures(self) -> List[StreamOutcome]:
        return [o for o in self.outcomes if o.outcome is Outcome.FAILED]

    def count(self, outcome: Outcome) -> int:
        return sum(1 for o in self.outcomes if o.outcome is outcome)

    def to_dict(self):
        return {
            "operation": self.operation,
            "hostFile": self.host_file,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class FileReport:
    path: str
    streams: List[StreamRecord] = field(default_factory=list)
    operation: Optional[OperationReport] = None
    skipped: bool = False
    error: Optional[AdsError] = None

    @property
    def ok(self) -> bool:
        if self.error is not None:
            return False
        if self.operation is not None:
            return self.operation.ok and not self.operation.failures
        return True

    def to_dict(self):
        return {
            "path": self.path,
            "skipped": self.skipped,
            "streams": [s.to_dict() for s in self.streams],
            "operation": self.operation.to_dict() if self.operation else None,
            "error": self.error.to_dict() if self.error else None,
        }
