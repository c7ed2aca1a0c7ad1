"""Pydantic data models for the task list."""

from todo_tracker.models.task import Task

__all__ = ["Task"]
