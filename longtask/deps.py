"""
FastAPI dependency providers.

Each provider builds its collaborator from the one below it, so tests can
swap any layer through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from .config import settings
from .services.queue import WorkQueue, build_queue
from .services.registry import TaskRegistry
from .services.status import StatusPoller
from .storage.schema import KeyLayout
from .storage.store import RecordStore, RedisStore


@lru_cache
def get_store() -> RecordStore:
    return RedisStore()


@lru_cache
def get_queue() -> WorkQueue:
    return build_queue()


def get_registry(store: RecordStore = Depends(get_store)) -> TaskRegistry:
    return TaskRegistry(store, KeyLayout(settings.key_prefix))


def get_poller(registry: TaskRegistry = Depends(get_registry)) -> StatusPoller:
    return StatusPoller(registry)
