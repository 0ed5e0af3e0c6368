"""
Results - Per-step outcomes and the per-run tally.

Each pipeline step returns a StepResult instead of raising, and the
orchestrator decides what to do from its status. Fatal conditions are still
exceptions (see exceptions.py) because they end the run, not just the record.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

OK = "ok"
SKIP = "skip"

# Skip reasons
NOT_PUBLISHED = "not_published"
NOT_TARGETED = "not_targeted"
EXISTS_IN_DESTINATION = "exists_in_destination"
IDENTIFIER_FAILED = "identifier_failed"
LOOKUP_FAILED = "lookup_failed"
FETCH_FAILED = "fetch_failed"
CONVERT_FAILED = "convert_failed"
DELETE_FAILED = "delete_failed"
IMPORT_FAILED = "import_failed"
UNEXPECTED_ERROR = "unexpected_error"

# Skip reasons that are expected filtering rather than errors
FILTERED_REASONS = frozenset({NOT_PUBLISHED, NOT_TARGETED, EXISTS_IN_DESTINATION})


@dataclass
class StepResult:
    status: str = OK
    value: Any = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: Any = None) -> "StepResult":
        return cls(OK, value)

    @classmethod
    def skip(cls, reason: str) -> "StepResult":
        return cls(SKIP, None, reason)

    @property
    def is_ok(self) -> bool:
        return self.status == OK


@dataclass
class RunSummary:
    """Counts for a single run.

    `success` only reports whether the run finished without a fatal error.
    Per-record failures are counted in `failed` and broken down by reason in
    `reasons`, so callers can tell a clean run from a partial one.
    """

    considered: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    reasons: Counter = field(default_factory=Counter)
    success: bool = True

    def record_migrated(self) -> None:
        self.migrated += 1

    def record_skip(self, reason: str) -> None:
        self.reasons[reason] += 1
        if reason in FILTERED_REASONS:
            self.skipped += 1
        else:
            self.failed += 1

    @property
    def partial(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "considered": self.considered,
            "migrated": self.migrated,
            "skipped": self.skipped,
            "failed": self.failed,
            "reasons": dict(self.reasons),
        }
