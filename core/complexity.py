"""Heuristic complexity scoring for tasks."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .task import Task

COMPLEXITY_KEYWORDS = (
    "integration",
    "migration",
    "refactor",
    "complex",
    "algorithm",
    "performance",
    "security",
    "optimization",
    "scalability",
    "concurrent",
    "distributed",
    "realtime",
)


class ComplexityLevel(Enum):
    LOW = ("low", "Low", "status.done")
    MEDIUM = ("medium", "Medium", "status.active")
    HIGH = ("high", "High", "status.deferred")
    VERY_HIGH = ("veryhigh", "Very High", "status.blocked")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @property
    def style(self) -> str:
        return self.value[2]

    @classmethod
    def from_code(cls, code: str) -> "ComplexityLevel":
        for level in cls:
            if level.code == code:
                return level
        raise ValueError(f"Unknown complexity level: {code!r}")


@dataclass(frozen=True)
class ScoringWeights:
    description_chars: int = 80  # one point per this many characters
    per_subtask: int = 2
    per_dependency: int = 3
    per_keyword: int = 2


@dataclass(frozen=True)
class LevelThresholds:
    low: int = 3
    medium: int = 7
    high: int = 12

    def level_for(self, score: int) -> ComplexityLevel:
        if score <= self.low:
            return ComplexityLevel.LOW
        if score <= self.medium:
            return ComplexityLevel.MEDIUM
        if score <= self.high:
            return ComplexityLevel.HIGH
        return ComplexityLevel.VERY_HIGH


DEFAULT_WEIGHTS = ScoringWeights()
DEFAULT_THRESHOLDS = LevelThresholds()


@dataclass
class TaskComplexity:
    task_id: str
    title: str
    score: int
    level: ComplexityLevel
    analyzed_at: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"Task {self.task_id}: {self.level.code} (Score: {self.score})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "title": self.title,
            "score": self.score,
            "level": self.level.code,
            "analyzedAt": self.analyzed_at.isoformat(timespec="seconds"),
        }


@dataclass
class ComplexityProgress:
    analyzed: int
    total: int
    current_task_id: str = ""

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return max(0.0, min(1.0, self.analyzed / self.total))


@dataclass
class ComplexityReport:
    tasks: List[TaskComplexity]
    scope: str = "all"
    tags: List[str] = field(default_factory=list)
    analyzed_at: datetime = field(default_factory=datetime.now)

    def counts(self) -> Dict[ComplexityLevel, int]:
        counts = {level: 0 for level in ComplexityLevel}
        for item in self.tasks:
            counts[item.level] += 1
        return counts

    def summary(self) -> str:
        counts = self.counts()
        return (
            f"Analyzed {len(self.tasks)} tasks: "
            f"{counts[ComplexityLevel.LOW]} Low, "
            f"{counts[ComplexityLevel.MEDIUM]} Medium, "
            f"{counts[ComplexityLevel.HIGH]} High, "
            f"{counts[ComplexityLevel.VERY_HIGH]} Very High"
        )

    def filter_by_level(self, levels: Iterable[ComplexityLevel]) -> "ComplexityReport":
        wanted = set(levels)
        if not wanted:
            return self
        return ComplexityReport(
            tasks=[item for item in self.tasks if item.level in wanted],
            scope=self.scope,
            tags=list(self.tags),
            analyzed_at=self.analyzed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analyzedAt": self.analyzed_at.isoformat(timespec="seconds"),
            "scope": self.scope,
            "filteredTags": list(self.tags),
            "summary": self.summary(),
            "tasks": [item.to_dict() for item in self.tasks],
        }


def calculate_score(task: Task, weights: ScoringWeights = DEFAULT_WEIGHTS) -> int:
    score = len(task.description) // weights.description_chars
    score += len(task.subtasks) * weights.per_subtask
    score += len(task.dependencies) * weights.per_dependency
    text = f"{task.description} {task.details}".lower()
    score += sum(weights.per_keyword for keyword in COMPLEXITY_KEYWORDS if keyword in text)
    return score


def score_task(
    task: Task,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    thresholds: LevelThresholds = DEFAULT_THRESHOLDS,
) -> TaskComplexity:
    score = calculate_score(task, weights)
    return TaskComplexity(task_id=task.id, title=task.title, score=score, level=thresholds.level_for(score))


def analyze_complexity(tasks: Sequence[Task], thresholds: Optional[LevelThresholds] = None) -> List[TaskComplexity]:
    thresholds = thresholds or DEFAULT_THRESHOLDS
    return [score_task(task, thresholds=thresholds) for task in tasks]


def recalculate_thresholds(items: Sequence[TaskComplexity]) -> LevelThresholds:
    """Quartile-based thresholds; falls back to defaults below four samples."""
    if len(items) < 4:
        return DEFAULT_THRESHOLDS
    scores = sorted(item.score for item in items)
    n = len(scores)
    return LevelThresholds(low=scores[n // 4], medium=scores[n // 2], high=scores[(3 * n) // 4])


def sort_by_score(items: List[TaskComplexity]) -> List[TaskComplexity]:
    return sorted(items, key=lambda item: (-item.score, item.task_id))


__all__ = [
    "COMPLEXITY_KEYWORDS",
    "ComplexityLevel",
    "ScoringWeights",
    "LevelThresholds",
    "TaskComplexity",
    "ComplexityProgress",
    "ComplexityReport",
    "calculate_score",
    "score_task",
    "analyze_complexity",
    "recalculate_thresholds",
    "sort_by_score",
]
