"""Aggregate statistics over a run's finalized results."""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from parallel_runner.models.result import TaskResult


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Counts per status and the summed duration of all results."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total_duration: float = 0.0

    @classmethod
    def from_results(cls, results: Iterable[TaskResult]) -> "RunSummary":
        """Fold finalized results into a summary."""
        total = passed = failed = skipped = 0
        total_duration = 0.0
        for result in results:
            total += 1
            total_duration += result.duration
            match result.status:
                case "passed":
                    passed += 1
                case "failed":
                    failed += 1
                case "skipped":
                    skipped += 1

        return cls(
            total=total,
            passed=passed,
            failed=failed,
            skipped=skipped,
            total_duration=total_duration,
        )

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
