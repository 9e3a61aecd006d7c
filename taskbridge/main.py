from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from taskbridge.config import get_settings
from taskbridge.exceptions import TaskbridgeError
from taskbridge.logging_setup import setup_logging
from taskbridge.models.common import ErrorResponse
from taskbridge.routers.tasks import router as tasks_router
from taskbridge.services.local_store import LocalStore, LocalTaskStore
from taskbridge.services.remote_client import RemoteTaskClient
from taskbridge.services.synchronizer import TaskSynchronizer


def build_synchronizer() -> TaskSynchronizer:
    settings = get_settings()
    sync = TaskSynchronizer(
        remote=RemoteTaskClient(settings.remote_api_url, settings.request_timeout),
        local=LocalTaskStore(LocalStore(settings.storage_file)),
    )
    sync.initialize()
    return sync


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content=ErrorResponse(error_code="forbidden", message="Localhost access only").model_dump(),
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="Taskbridge", version="0.1.0")
api.include_router(tasks_router)


# --- Exception handlers ---

@api.exception_handler(TaskbridgeError)
async def taskbridge_error_handler(request: Request, exc: TaskbridgeError):
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error_code="taskbridge_error", message=str(exc)).model_dump(),
    )


# --- Starlette root app ---

@asynccontextmanager
async def lifespan(app: Starlette):
    api.state.synchronizer = build_synchronizer()
    yield


app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[Mount("/", app=api)],
    lifespan=lifespan,
)


def run():
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    uvicorn.run(
        "taskbridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
