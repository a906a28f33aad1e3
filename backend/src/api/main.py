"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import folders, health, resources
from core.config import get_settings
from schemas.errors import ErrorResponse
from services.exceptions import (
    ConflictError,
    FolderNotEmptyError,
    InvalidOperationError,
    NotFoundError,
    ResourceValidationError,
    ServiceError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins
SERVICE_ERROR_STATUS: list[tuple[type[ServiceError], int]] = [
    (ResourceValidationError, 422),
    (NotFoundError, 404),
    (FolderNotEmptyError, 409),
    (ConflictError, 409),
    (InvalidOperationError, 400),
]


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _format_validation_error(error: dict) -> str:
    """Render one Pydantic error as 'field.path: message'."""
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


app_settings = get_settings()

app = FastAPI(
    title="Stash API",
    description="Personal knowledge store: folders, bookmarks, prompts, snippets, "
    "documents and notes with tagging and search.",
    version="0.1.0",
)


@app.exception_handler(ServiceError)
async def service_exception_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    """Render domain errors with their stable error code."""
    status_code = next(
        (code for error_type, code in SERVICE_ERROR_STATUS if isinstance(exc, error_type)),
        400,
    )
    errors = exc.errors if isinstance(exc, ResourceValidationError) else []
    return _error_response(
        status_code,
        ErrorResponse(error=exc.error_code, message=exc.message, errors=errors),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation failures in the same shape as domain errors."""
    return _error_response(
        422,
        ErrorResponse(
            error=ResourceValidationError.error_code,
            message="Validation failed",
            errors=[_format_validation_error(error) for error in exc.errors()],
        ),
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(folders.router)
app.include_router(resources.router)
