"""
Readiness Monitor API Server

Stateless computation API: scores check-ins, classifies score changes,
aggregates team-days and builds team health reports. Check-ins, history and
rosters arrive in the request body; nothing is persisted here.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from datetime import datetime
import time

from app import config
from app.api.routes import readiness, monitoring, teams

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
SERVICE_NAME = "readiness-monitor-api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the active change-detection settings on startup"""
    logger.info(f"Starting {SERVICE_NAME} {VERSION}")
    logger.info(
        f"Sudden change config: min drop {config.SUDDEN_CHANGE_MIN_DROP}, "
        f"bands {config.SEVERITY_CRITICAL_DROP}/{config.SEVERITY_SIGNIFICANT_DROP}/"
        f"{config.SEVERITY_NOTABLE_DROP}, window {config.TRAILING_WINDOW_DAYS} days, "
        f"min history {config.MIN_HISTORY_CHECKINS} check-ins"
    )

    yield

    logger.info(f"Stopping {SERVICE_NAME}")


app = FastAPI(
    title="Readiness Monitor API",
    description="Workplace wellness readiness scoring and team monitoring",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of each request"""
    start_time = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration_ms:.2f}ms"
    )

    return response


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    """Build the {"error": {...}} envelope shared by all error handlers"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details}}
    )


def jsonable_errors(exc: RequestValidationError):
    """Validation errors with non-serializable context (e.g. exceptions) stringified"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Uncaught errors become INTERNAL_ERROR; details only in debug mode"""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal server error occurred",
        str(exc) if app.debug else None
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Out-of-range metrics, wrong types and inconsistent counts"""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        jsonable_errors(exc)
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness check"""
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "version": VERSION,
        "service": SERVICE_NAME
    }


app.include_router(readiness.router)
app.include_router(monitoring.router)
app.include_router(teams.router)


@app.get("/", tags=["Root"])
async def root():
    """Service name and entry points"""
    return {
        "name": "Readiness Monitor API",
        "version": VERSION,
        "description": "Workplace wellness readiness scoring and team monitoring",
        "endpoints": [
            "/api/v1/readiness",
            "/api/v1/monitoring",
            "/api/v1/teams"
        ],
        "docs": "/api/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower()
    )
