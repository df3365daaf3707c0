import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.api_key import get_api_key
from src.common.exceptions import (
    InvalidRequestException,
    ResourceNotFoundException,
    StoreException,
    http_exception_handler,
    internal_error_response,
    invalid_request_handler,
    resource_not_found_handler,
    store_exception_handler,
    unexpected_exception_handler,
    validation_exception_handler,
)
from src.common.opentelemetry import instrument_engine, setup_opentelemetry
from src.config import get_settings
from src.healthcheck.router import router as health_router
from src.tasks.router import router as tasks_router
from src.tasks.store.backend import get_task_store_backend
from src.tasks.store.sql.store import SqlTaskStore

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.task_store = get_task_store_backend(settings)
    if settings.OTEL_ENABLED and isinstance(app.state.task_store, SqlTaskStore):
        instrument_engine(app.state.task_store.engine)
    yield
    app.state.task_store.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    dependencies=[Depends(get_api_key)],
    lifespan=lifespan,
    responses={
        **internal_error_response,
    },
    version=settings.TASKS_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(InvalidRequestException)(invalid_request_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(StoreException)(store_exception_handler)
app.exception_handler(StarletteHTTPException)(http_exception_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
def root() -> str:
    return settings.API_BANNER


app.include_router(health_router)
app.include_router(tasks_router)
