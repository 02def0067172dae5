import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .logging_setup import configure_logging
from .models import ErrorResponse, HealthResponse
from .routers import tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Long Task API", version="1.0.0", lifespan=lifespan)
app.include_router(tasks.router)


@app.exception_handler(redis.RedisError)
async def store_failure_handler(request: Request, exc: redis.RedisError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    body = ErrorResponse(message=f"Store unavailable: {exc}")
    return JSONResponse(status_code=503, content=body.model_dump(by_alias=True))


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(queue_backend=settings.queue_backend)
