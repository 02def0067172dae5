from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED})


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TaskRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: str
    status: TaskStatus
    created_at: str
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    failed_at: Optional[str] = None
    progress: int = 0
    result: Optional[dict[str, Any]] = None  # only when completed
    error: Optional[str] = None  # only when failed

    def to_store(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_store(cls, data: dict) -> "TaskRecord":
        return cls.model_validate(data)


class KeyLayout:
    def __init__(self, prefix: str = "task"):
        self.prefix = prefix

    def record(self, task_id: str) -> str:
        return f"{self.prefix}:{task_id}"

    def progress(self, task_id: str) -> str:
        return f"{self.prefix}:{task_id}:progress"
