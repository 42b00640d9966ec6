"""
Error responses for the FinChat API.

All failures are reported as ``{"error": message}`` bodies.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again later."
CHATBOT_REQUIRED = "Chatbot type is required."


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the cause and hide it from the client."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures in the same shape as every other error."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {problems}")
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Invalid request. " + "; ".join(problems),
    )
