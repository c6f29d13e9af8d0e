"""Configuration for the scheduler."""

import os

from pydantic import Field

from parallel_runner.models.base import Model

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 1


def default_max_workers() -> int:
    """Return the number of available CPUs minus one, at least 1."""
    return max(1, (os.cpu_count() or 1) - 1)


class RunnerConfig(Model):
    """Configuration for a scheduler run."""

    max_workers: int = Field(
        default_factory=default_max_workers,
        ge=1,
        description="Maximum number of tasks executing concurrently",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Per-attempt deadline in seconds",
    )
    fail_fast: bool = Field(
        default=False,
        description="Stop admitting tasks after the first finalized failure",
    )
    retry_failed_tests: bool = Field(
        default=True, description="Requeue failed tasks until retries run out"
    )
    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES,
        ge=0,
        description="Retries allowed per task (0 disables retries)",
    )
