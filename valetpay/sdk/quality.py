"""Data-quality tracking for locally recovered conditions.

The engine recovers from known bad historical data instead of failing:
negative derived cash-car counts are clamped, shifts without hours allocate
nothing, unparseable dates fall back to today for filtering. Each recovery
is recorded here so data drift stays visible.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

CLAMPED_CASH_CARS = "clamped_cash_cars"
ZERO_JOB_HOURS = "zero_job_hours"
BAD_DATE = "bad_date"
RATE_ERROR = "rate_error"


@dataclass
class DataQualityIssue:
    """A single recovered (or configuration) condition."""

    kind: str
    shift_id: Optional[str]
    message: str


@dataclass
class DataQualityReport:
    """Issues collected over one computation."""

    issues: List[DataQualityIssue] = field(default_factory=list)

    def record(self, kind: str, shift_id: Optional[str], message: str) -> None:
        """Add an issue and log it."""
        self.issues.append(DataQualityIssue(kind=kind, shift_id=shift_id, message=message))
        logger.warning(f"shift {shift_id}: {message}")

    @property
    def counts(self) -> Dict[str, int]:
        return dict(Counter(issue.kind for issue in self.issues))

    @property
    def has_issues(self) -> bool:
        return len(self.issues) > 0

    def to_errors_warnings(self) -> Tuple[List[str], List[str]]:
        """Split into (errors, warnings) message lists.

        Rate errors abort a shift's computation and are errors; everything
        else was recovered locally and is a warning.
        """
        errors = []
        warnings = []
        for issue in self.issues:
            text = f"shift {issue.shift_id}: {issue.message}"
            if issue.kind == RATE_ERROR:
                errors.append(text)
            else:
                warnings.append(text)
        return errors, warnings
