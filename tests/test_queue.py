import pytest

from longtask.services.queue import CeleryWorkQueue, RedisWorkQueue, build_queue
from longtask.storage.store import RedisStore

from .fakes import FakeRedis


def test_redis_queue_is_fifo():
    r = FakeRedis()
    q = RedisWorkQueue(client=r, name="jobs", block_timeout=1)
    q.enqueue("task-1-a")
    q.enqueue("task-2-b")

    stream = q.consume()
    assert next(stream) == "task-1-a"
    assert next(stream) == "task-2-b"


def test_redis_queue_acks_after_consumer_returns():
    r = FakeRedis()
    q = RedisWorkQueue(client=r, name="jobs", block_timeout=1)
    q.enqueue("task-1-a")
    q.enqueue("task-2-b")

    stream = q.consume()
    next(stream)
    assert r.lists["jobs:inflight"] == ["task-1-a"]
    next(stream)
    assert r.lists["jobs:inflight"] == ["task-2-b"]


def test_recover_redelivers_inflight_ids():
    r = FakeRedis()
    q = RedisWorkQueue(client=r, name="jobs", block_timeout=1)
    q.enqueue("task-1-a")
    q.enqueue("task-2-b")
    next(q.consume())  # consumer dies holding task-1-a

    assert q.recover() == 1
    assert r.lists["jobs:inflight"] == []
    assert next(q.consume()) == "task-1-a"


def test_celery_queue_sends_task_id_only():
    sent = []

    class FakeTask:
        def delay(self, *args):
            sent.append(args)

    q = CeleryWorkQueue(task=FakeTask())
    q.enqueue("task-1-a")

    assert sent == [("task-1-a",)]
    with pytest.raises(NotImplementedError):
        q.consume()


def test_build_queue_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_queue("kafka")


def test_redis_store_keeps_json_documents():
    r = FakeRedis()
    store = RedisStore(client=r)

    store.set("task:x", {"status": "queued", "progress": 0})
    store.set("task:x:progress", 40)

    assert r.values["task:x"] == b'{"status":"queued","progress":0}'
    assert store.get("task:x") == {"status": "queued", "progress": 0}
    assert store.get("task:x:progress") == 40
    assert store.get("task:missing") is None

    store.delete("task:x")
    assert store.get("task:x") is None
