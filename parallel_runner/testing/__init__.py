"""Test factories for result models."""

from parallel_runner.testing.factories import AttachmentFactory, TaskResultFactory

__all__ = ["AttachmentFactory", "TaskResultFactory"]
