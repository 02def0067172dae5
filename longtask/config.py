from pydantic import BaseModel
import os

class Settings(BaseModel):
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    key_prefix: str = os.getenv("LONGTASK_KEY_PREFIX", "task")
    queue_backend: str = os.getenv("LONGTASK_QUEUE_BACKEND", "redis")  # redis | celery
    queue_name: str = os.getenv("LONGTASK_QUEUE_NAME", "long-task-queue")
    queue_block_timeout_seconds: int = int(os.getenv("LONGTASK_QUEUE_BLOCK_TIMEOUT_SECONDS", 5))
    task_duration_seconds: float = float(os.getenv("LONGTASK_TASK_DURATION_SECONDS", 220))
    task_phases: int = int(os.getenv("LONGTASK_TASK_PHASES", 10))
    poll_interval_seconds: float = float(os.getenv("LONGTASK_POLL_INTERVAL_SECONDS", 5))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
