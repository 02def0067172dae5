import logging
import time
import uuid
from typing import Optional

from pydantic import ValidationError

from ..storage.schema import KeyLayout, TaskRecord, TaskStatus, utc_now
from ..storage.store import RecordStore

logger = logging.getLogger(__name__)


def new_task_id() -> str:
    # millisecond clock plus a random suffix keeps ids unique within the same ms
    return f"task-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class TaskRegistry:
    def __init__(self, store: RecordStore, keys: KeyLayout | None = None):
        self.store = store
        self.keys = keys or KeyLayout()

    def submit(self) -> str:
        task_id = new_task_id()
        rec = TaskRecord(task_id=task_id, status=TaskStatus.QUEUED, created_at=utc_now(), progress=0)
        self.store.set(self.keys.record(task_id), rec.to_store())
        logger.info("Task %s registered", task_id)
        return task_id

    def get(self, task_id: str) -> Optional[TaskRecord]:
        data = self.store.get(self.keys.record(task_id))
        if not data:
            return None
        try:
            return TaskRecord.from_store(data)
        except ValidationError:
            logger.warning("Task %s has an unreadable record, treating as missing", task_id)
            return None

    def save(self, rec: TaskRecord) -> None:
        self.store.set(self.keys.record(rec.task_id), rec.to_store())

    def get_checkpoint(self, task_id: str) -> Optional[int]:
        value = self.store.get(self.keys.progress(task_id))
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def set_checkpoint(self, task_id: str, progress: int) -> None:
        self.store.set(self.keys.progress(task_id), progress)


def submit_task(registry: TaskRegistry, queue) -> str:
    """Register a task and hand it to the queue.

    The record write returns before ``enqueue`` is called, so a consumer can
    never receive an id that has no record yet.
    """
    task_id = registry.submit()
    queue.enqueue(task_id)
    logger.info("Task %s added to queue", task_id)
    return task_id
