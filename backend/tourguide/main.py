"""Virtual Tour Guide FastAPI Application.

Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tourguide.api import router
from tourguide.api.routes import ENDPOINT_ERROR_CODES, shutdown_services
from tourguide.config import get_settings
from tourguide.models import AppError, ErrorCode, ErrorResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    yield
    # Shutdown
    await shutdown_services()


app = FastAPI(
    title="Virtual Tour Guide API",
    description="City walking tours, research briefings and audio guides",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "GET", "OPTIONS", "PUT", "DELETE", "PATCH"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=86400,
)


def _error(code: ErrorCode, message: str) -> JSONResponse:
    body = ErrorResponse(error=AppError(code=code, message=message))
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# Global exception handlers
@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed query parameters with the endpoint's error code."""
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    code = ENDPOINT_ERROR_CODES.get(request.url.path, ErrorCode.INVALID_REQUEST)
    return _error(code, "Invalid request format")


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    return _error(ErrorCode.INVALID_REQUEST, str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return _error(ErrorCode.INTERNAL_ERROR, str(exc))


# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
