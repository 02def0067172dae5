import asyncio
import logging

from celery import Celery
from celery.signals import setup_logging

from longtask.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "longtask",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_default_queue=settings.queue_name,
    worker_prefetch_multiplier=1,
    # ack after the task body returns so a lost worker means redelivery
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    from longtask.logging_setup import configure_logging
    configure_logging()


def build_executor():
    from longtask.services.executor import TaskExecutor
    from longtask.services.registry import TaskRegistry
    from longtask.storage.schema import KeyLayout
    from longtask.storage.store import RedisStore
    return TaskExecutor(TaskRegistry(RedisStore(), KeyLayout(settings.key_prefix)))


@celery_app.task(name="longtask.process_task")
def process_task(task_id: str) -> None:
    asyncio.run(build_executor().process(task_id))
