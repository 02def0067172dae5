"""Standalone consumer loop over the Redis list queue."""

import asyncio
import logging

from longtask.config import settings
from longtask.logging_setup import configure_logging
from longtask.services.executor import TaskExecutor
from longtask.services.queue import RedisWorkQueue
from longtask.services.registry import TaskRegistry
from longtask.storage.schema import KeyLayout
from longtask.storage.store import RedisStore

logger = logging.getLogger(__name__)


async def run(queue: RedisWorkQueue, executor: TaskExecutor) -> None:
    queue.recover()
    logger.info("Consuming task ids from %s", queue.name)
    await executor.run_forever(queue.consume())


def main() -> None:
    configure_logging()
    executor = TaskExecutor(TaskRegistry(RedisStore(), KeyLayout(settings.key_prefix)))
    try:
        asyncio.run(run(RedisWorkQueue(), executor))
    except KeyboardInterrupt:
        logger.info("Worker stopped")
