"""Main FastAPI application."""
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coaching_api.api.client_goals_routes import router as client_goals_router
from coaching_api.api.exercises_routes import router as exercises_router
from coaching_api.api.external_exercises_routes import router as external_exercises_router
from coaching_api.api.routes import router
from coaching_api.api.workout_exercises_routes import router as workout_exercises_router
from coaching_api.api.workout_sessions_routes import router as workout_sessions_router
from coaching_api.config import settings
from coaching_api.errors import CoachingAPIError
from coaching_api.middleware import SessionCookieMiddleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_logging_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger (idempotent)."""
    global _logging_configured
    if _logging_configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _logging_configured = True


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Coaching API")

# Configure CORS to allow requests from the UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SessionCookieMiddleware)


@app.exception_handler(CoachingAPIError)
async def coaching_api_error_handler(request: Request, exc: CoachingAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid {location}: {message}" if location else f"Invalid request body: {message}"


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are 400s with a readable message, like handler-side checks."""
    return JSONResponse({"error": _describe_validation_error(exc)}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


app.include_router(router)
app.include_router(workout_sessions_router)
app.include_router(client_goals_router)
app.include_router(exercises_router)
app.include_router(workout_exercises_router)
app.include_router(external_exercises_router)
