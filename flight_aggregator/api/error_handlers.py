from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from flight_aggregator.core.exceptions import (
    APIException,
    IntegrationException,
    ValidationException,
    redact,
)
from flight_aggregator.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra={"data": {"status_code": exc.status_code, "error_code": exc.code}}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_validation_exception(request: Request, exc: ValidationException) -> JSONResponse:
    """
    Handle search validation errors.

    Args:
        request: FastAPI request object
        exc: ValidationException instance

    Returns:
        JSONResponse: Formatted validation error response
    """
    logger.warning(
        f"Validation error: {exc.detail}",
        extra={"data": {"field": exc.context.get("field") if exc.context else None}}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_integration_exception(request: Request, exc: IntegrationException) -> JSONResponse:
    """
    Handle vendor integration errors.

    Args:
        request: FastAPI request object
        exc: IntegrationException instance

    Returns:
        JSONResponse: Formatted integration error response
    """
    logger.error(
        f"Integration error: {exc.detail}",
        extra={"data": {
            "error_code": exc.code,
            "original_error": exc.context.get("original_error") if exc.context else None,
        }}
    )

    # Remove sensitive information from the response
    # but keep it in the logs for debugging
    safe_context = redact(exc.context or {})

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": safe_context
            }
        }
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors raised by FastAPI."""
    errors = [
        {"loc": error["loc"], "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "validation_error",
                "message": "Request validation error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "context": {"errors": errors}
            }
        }
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
            }
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Handlers are matched on the most specific exception class.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ValidationException, handle_validation_exception)
    app.add_exception_handler(IntegrationException, handle_integration_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)
