from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from .storage.schema import TaskRecord, TaskStatus

class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class StatusRequest(ApiModel):
    task_id: str

class TaskResponse(ApiModel):
    success: bool = True
    task_id: str
    message: str = "Task queued for processing"

class StatusResponse(ApiModel):
    success: bool = True
    task_id: str
    status: TaskStatus
    progress: int
    data: TaskRecord

class ErrorResponse(ApiModel):
    success: bool = False
    message: str

class HealthResponse(ApiModel):
    status: str = "ok"
    queue_backend: Optional[str] = None
