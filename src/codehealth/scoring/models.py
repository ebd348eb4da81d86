"""Score data model: component breakdown, metric set and the final grade."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NotComputed:
    """Marker for an analysis the caller opted out of.

    Distinguishes "not computed" from a computed zero in every output.
    """

    reason: str

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class ComponentScores:
    """The four weighted components, each in [0, 100], higher = healthier."""

    churn: float
    complexity: float
    debt: float
    freshness: float

    def as_dict(self) -> dict[str, float]:
        return {
            "churn": self.churn,
            "complexity": self.complexity,
            "debt": self.debt,
            "freshness": self.freshness,
        }


@dataclass(frozen=True)
class HealthMetrics:
    total_files: int = 0
    total_loc: int = 0
    recently_changed_files: int = 0
    todo_count: int = 0
    fixme_count: int = 0
    hack_count: int = 0
    xxx_count: int = 0
    dusty_files: int = 0
    danger_zones: int = 0
    skipped_files: int = 0

    @property
    def marker_count(self) -> int:
        return self.todo_count + self.fixme_count + self.hack_count + self.xxx_count


@dataclass(frozen=True)
class HealthScore:
    score: float  # [0, 100]
    grade: str  # A-F
    components: ComponentScores
    metrics: HealthMetrics = field(default_factory=HealthMetrics)
    timestamp: str = ""  # ISO-8601, UTC
