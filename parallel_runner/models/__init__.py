"""Task, result and summary models."""

from parallel_runner.models.base import Model
from parallel_runner.models.result import Attachment, TaskResult, TaskStatus
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task, Work, generate_task_id

__all__ = [
    "Attachment",
    "Model",
    "RunSummary",
    "Task",
    "TaskResult",
    "TaskStatus",
    "Work",
    "generate_task_id",
]
