import logging
from typing import Iterator, Protocol

import redis

from ..config import settings

logger = logging.getLogger(__name__)


class WorkQueue(Protocol):
    def enqueue(self, task_id: str) -> None: ...

    def consume(self) -> Iterator[str]: ...


class RedisWorkQueue:
    """Reliable list queue.

    Ids are moved atomically from the queue list into an in-flight list while
    they are being processed and removed once the consumer is done with them.
    Anything left in flight by a dead consumer goes back to the queue on
    ``recover()``, so delivery is at-least-once.
    """

    def __init__(self, client: redis.Redis | None = None, name: str | None = None,
                 block_timeout: int | None = None):
        self.r = client or redis.from_url(settings.redis_url, decode_responses=True)
        self.name = name or settings.queue_name
        self.inflight = f"{self.name}:inflight"
        self.block_timeout = settings.queue_block_timeout_seconds if block_timeout is None else block_timeout

    def enqueue(self, task_id: str) -> None:
        self.r.lpush(self.name, task_id)

    def consume(self) -> Iterator[str]:
        while True:
            task_id = self.r.blmove(self.name, self.inflight, self.block_timeout, "RIGHT", "LEFT")
            if task_id is None:
                continue
            if isinstance(task_id, bytes):
                task_id = task_id.decode()
            yield task_id
            self.r.lrem(self.inflight, 1, task_id)

    def recover(self) -> int:
        moved = 0
        while self.r.lmove(self.inflight, self.name, "LEFT", "RIGHT") is not None:
            moved += 1
        if moved:
            logger.warning("Requeued %s in-flight task(s) from %s", moved, self.inflight)
        return moved


class CeleryWorkQueue:
    """Hands task ids to the Celery consumer entry point."""

    def __init__(self, task=None):
        if task is None:
            from worker.celery_app import process_task
            task = process_task
        self.task = task

    def enqueue(self, task_id: str) -> None:
        self.task.delay(task_id)

    def consume(self) -> Iterator[str]:
        raise NotImplementedError("Celery workers receive task ids through process_task")


def build_queue(backend: str | None = None) -> WorkQueue:
    backend = (backend or settings.queue_backend).lower()
    if backend == "redis":
        return RedisWorkQueue()
    if backend == "celery":
        return CeleryWorkQueue()
    raise ValueError(f"Unsupported queue backend: {backend}")
