import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskflow import __version__
from taskflow.core.config import Settings, settings
from taskflow.core.database import STORAGE_ERRORS, Database
from taskflow.core.errors import ErrorKind, TaskflowError, Unavailable, InternalError
from taskflow.core.log_config import configure_logging
from taskflow.routers import auth, health, tasks
from taskflow.services.session_service import purge_expired

logger = logging.getLogger(__name__)

# the only place error kinds become HTTP statuses
ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAVAILABLE: 500,
    ErrorKind.INTERNAL: 500,
}


def error_response(error: TaskflowError) -> JSONResponse:
    return JSONResponse(status_code=ERROR_STATUS[error.kind], content={"error": error.message})


def describe_validation_errors(errors) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskflowError)
    async def taskflow_error_handler(request: Request, exc: TaskflowError):
        if exc.kind in (ErrorKind.UNAVAILABLE, ErrorKind.INTERNAL):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.kind.value)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=ERROR_STATUS[ErrorKind.VALIDATION],
            content={"error": describe_validation_errors(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    async def storage_error_handler(request: Request, exc: Exception):
        # kind only: driver messages may carry the connection string
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, type(exc).__name__)
        return error_response(Unavailable())

    for error_class in STORAGE_ERRORS:
        app.add_exception_handler(error_class, storage_error_handler)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(InternalError())


def create_app(app_settings: Settings = settings, database: Database = None) -> FastAPI:
    configure_logging(app_settings.LOG_LEVEL)

    if database is None:
        database = Database(app_settings.DATABASE_URL, timeout=app_settings.DB_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.connect()
        db = database.session()
        try:
            purge_expired(db)
        finally:
            db.close()
        yield
        database.dispose()

    app = FastAPI(
        title="TaskFlow API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database

    if app_settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    register_error_handlers(app)

    @app.get("/api", tags=["meta"])
    def api_root():
        return {
            "message": "TaskFlow API is running",
            "endpoints": {"auth": "/api/auth/*", "tasks": "/api/tasks"},
        }

    # Routes
    app.include_router(health.router, prefix="/health")
    app.include_router(auth.router)
    app.include_router(tasks.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
