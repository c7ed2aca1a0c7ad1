"""Task model -- one entry of the persisted task list.

A Task is created by ``todo add``, has its ``done`` flag flipped by
``todo done`` and is dropped by ``todo rm``.  Nothing else about it ever
changes after creation.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Task(BaseModel):
    """A single to-do item.

    The creation time is stored on disk under the ``when`` key; in Python it
    is exposed as :attr:`created_at`.  Both names are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(
        ...,
        gt=0,
        description="Positive identifier, unique within the store.",
    )
    text: str = Field(
        ...,
        min_length=1,
        description="Human-readable task text.",
    )
    done: bool = Field(
        default=False,
        description="Whether the task has been completed.",
    )
    created_at: datetime = Field(
        ...,
        alias="when",
        description="When the task was added (UTC).",
    )

    @classmethod
    def new(cls, task_id: int, text: str) -> "Task":
        """Build a fresh, not-yet-done task stamped with the current time."""
        return cls(
            id=task_id,
            text=text,
            done=False,
            created_at=datetime.now(timezone.utc),
        )

    def to_json_dict(self) -> dict:
        """Serialize to the on-disk record shape (``id``, ``text``, ``done``, ``when``)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json_dict(cls, data: dict) -> "Task":
        """Validate one on-disk record.  Raises ``pydantic.ValidationError``."""
        return cls.model_validate(data)

    @classmethod
    def list_from_json(cls, raw: bytes) -> "list[Task]":
        """Validate a whole JSON array of records in strict mode.

        Strict JSON mode rejects quoted ids, non-boolean ``done`` values and
        numeric timestamps, but still parses ISO-8601 strings for ``when``.
        Raises ``pydantic.ValidationError``.
        """
        return _TASK_LIST.validate_json(raw, strict=True)


_TASK_LIST = TypeAdapter(list[Task])
