from typing import Optional

from pydantic import BaseModel

from ..storage.schema import TaskRecord, TaskStatus
from .registry import TaskRegistry


class Snapshot(BaseModel):
    task_id: str
    status: TaskStatus
    progress: int
    data: TaskRecord


class StatusPoller:
    def __init__(self, registry: TaskRegistry):
        self.registry = registry

    def check_status(self, task_id: str) -> Optional[Snapshot]:
        # checkpoint first: it is written after the record, so it can only lag what we read next
        checkpoint = self.registry.get_checkpoint(task_id)
        rec = self.registry.get(task_id)
        if rec is None:
            return None
        progress = rec.progress
        if rec.status == TaskStatus.PROCESSING and checkpoint is not None and checkpoint > progress:
            progress = min(checkpoint, 100)
        return Snapshot(task_id=task_id, status=rec.status, progress=progress, data=rec)
