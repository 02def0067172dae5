from pathlib import Path
import asyncio
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from longtask.services.registry import TaskRegistry
from longtask.storage.schema import KeyLayout

from .fakes import MemoryQueue, MemoryStore


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def keys():
    return KeyLayout("task")


@pytest.fixture()
def registry(store, keys):
    return TaskRegistry(store, keys)


@pytest.fixture()
def queue():
    return MemoryQueue()


class Gate:
    """Sleep replacement that only returns when the test opens it."""

    def __init__(self):
        self.steps = asyncio.Queue()
        self.waits: list[float] = []

    async def sleep(self, seconds):
        self.waits.append(seconds)
        await self.steps.get()

    def open(self):
        self.steps.put_nowait(None)


async def settle(rounds: int = 10):
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture()
def gate():
    return Gate()


async def wait_until(condition, timeout: float = 2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)
