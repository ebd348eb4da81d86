"""CI gate: compare the final score against an optional threshold."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

EXIT_OK = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_ERROR = 2


@dataclass(frozen=True)
class ThresholdResult:
    threshold: Optional[float]
    score: float

    @property
    def passed(self) -> bool:
        return self.threshold is None or self.score >= self.threshold

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.passed else EXIT_BELOW_THRESHOLD


def check_threshold(score: float, threshold: Optional[float]) -> ThresholdResult:
    """Fail iff a threshold is configured and ``score < threshold``."""
    return ThresholdResult(threshold=threshold, score=score)
