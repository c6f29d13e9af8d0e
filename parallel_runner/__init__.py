"""Bounded-concurrency asyncio task scheduler."""

from parallel_runner.config import RunnerConfig
from parallel_runner.events import EventSink
from parallel_runner.executor import SkipTask, TaskExecutor, TaskTimeoutError
from parallel_runner.models.result import Attachment, TaskResult, TaskStatus
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task
from parallel_runner.scheduler import (
    Scheduler,
    SchedulerBusyError,
    SchedulerError,
    SchedulerStatus,
)

__all__ = [
    "Attachment",
    "EventSink",
    "RunSummary",
    "RunnerConfig",
    "Scheduler",
    "SchedulerBusyError",
    "SchedulerError",
    "SchedulerStatus",
    "SkipTask",
    "Task",
    "TaskExecutor",
    "TaskResult",
    "TaskStatus",
    "TaskTimeoutError",
]
