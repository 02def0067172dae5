"""
Polling client for the task API.

The client submits a task, then reads its status on a fixed interval until
the task reaches a terminal status. A transport failure also ends the poll
loop, but it is reported separately: it says nothing about the task itself.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

import httpx

from .config import settings

logger = logging.getLogger(__name__)

DEFAULT_TERMINAL_STATUSES = frozenset({"completed", "failed"})


class TaskClientError(Exception):
    pass


@dataclass
class PollOutcome:
    task_id: str
    snapshot: Optional[dict[str, Any]] = None
    polls: int = 0
    not_found: bool = False
    transport_error: Optional[str] = None

    @property
    def status(self) -> Optional[str]:
        return self.snapshot.get("status") if self.snapshot else None


class TaskClient:
    def __init__(
        self,
        base_url: str,
        *,
        poll_interval: float | None = None,
        terminal_statuses: Iterable[str] = DEFAULT_TERMINAL_STATUSES,
        http: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=30)
        self.poll_interval = settings.poll_interval_seconds if poll_interval is None else poll_interval
        self.terminal_statuses = frozenset(terminal_statuses)
        self.sleep = sleep

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def submit(self) -> str:
        r = self.http.post("/tasks")
        r.raise_for_status()
        body = r.json()
        if not body.get("success"):
            raise TaskClientError(body.get("message") or "Task submission failed")
        return body["taskId"]

    def check_status(self, task_id: str) -> dict[str, Any]:
        r = self.http.get(f"/tasks/{task_id}")
        r.raise_for_status()
        return r.json()

    def poll(
        self,
        task_id: str,
        on_update: Callable[[dict[str, Any]], None] | None = None,
        max_polls: int | None = None,
    ) -> PollOutcome:
        outcome = PollOutcome(task_id=task_id)
        while max_polls is None or outcome.polls < max_polls:
            if outcome.polls:
                self.sleep(self.poll_interval)
            outcome.polls += 1
            try:
                body = self.check_status(task_id)
            except httpx.HTTPError as exc:
                logger.warning("Polling %s stopped on transport error: %s", task_id, exc)
                outcome.transport_error = str(exc) or type(exc).__name__
                return outcome

            if not body.get("success"):
                outcome.not_found = True
                return outcome

            outcome.snapshot = body
            if on_update is not None:
                on_update(body)
            if body.get("status") in self.terminal_statuses:
                return outcome
        return outcome
