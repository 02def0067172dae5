import logging

from fastapi import APIRouter, Depends

from ..deps import get_poller, get_queue, get_registry
from ..models import ErrorResponse, StatusRequest, StatusResponse, TaskResponse
from ..services.queue import WorkQueue
from ..services.registry import TaskRegistry, submit_task
from ..services.status import StatusPoller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.post("", response_model=TaskResponse)
def start_task(registry: TaskRegistry = Depends(get_registry), queue: WorkQueue = Depends(get_queue)):
    task_id = submit_task(registry, queue)
    return TaskResponse(task_id=task_id)

def _status(task_id: str, poller: StatusPoller):
    snap = poller.check_status(task_id)
    if snap is None:
        return ErrorResponse(message="Task not found")
    return StatusResponse(task_id=snap.task_id, status=snap.status, progress=snap.progress, data=snap.data)

@router.post("/status", response_model=StatusResponse | ErrorResponse)
def check_task_status(payload: StatusRequest, poller: StatusPoller = Depends(get_poller)):
    return _status(payload.task_id, poller)

@router.get("/{task_id}", response_model=StatusResponse | ErrorResponse)
def get_task_status(task_id: str, poller: StatusPoller = Depends(get_poller)):
    return _status(task_id, poller)
