"""
Error handling middleware.
Provides centralized exception handling and standardized problem bodies.
"""

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..utils.logging import setup_logging


def _validation_details(errors: Any) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


class ServiceErrorHandler:
    """
    Centralized error handling for a service.

    Every error leaves the service as::

        {"error": {"type", "message", "correlation_id", "timestamp",
                   "path", "method", "details"?}}

    Request validation failures are reported as 400, not FastAPI's 422.
    Anything raised inside the service, ValueError included, is a 500.
    """

    def __init__(self, service_name: str, log_level: str = "INFO") -> None:
        self.service_name = service_name
        self.logger = setup_logging(f"{service_name}.errors", log_level=log_level)

    def setup_error_handlers(self, app: FastAPI) -> None:
        """
        Register all error handlers on the FastAPI application.
        """

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            """Handle HTTP exceptions from Starlette/FastAPI."""
            details = None
            message = exc.detail
            if isinstance(exc.detail, dict):
                message = exc.detail.get("message", "Request failed")
                details = {k: v for k, v in exc.detail.items() if k != "message"}
            return self._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(message),
                details=details,
                headers=getattr(exc, "headers", None),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Handle request body / path validation errors."""
            return self._create_error_response(
                request=request,
                status_code=400,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": _validation_details(exc.errors())},
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            """Log and hide anything nobody else handled."""
            self.logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": self._correlation_id(request),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                    "event_type": "unhandled_exception",
                },
                exc_info=exc,
            )

            return self._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
                details={"exception_type": type(exc).__name__},
            )

    @staticmethod
    def _correlation_id(request: Request) -> str:
        return (
            request.headers.get("X-Correlation-ID")
            or getattr(request.state, "correlation_id", None)
            or "unknown"
        )

    def _create_error_response(
        self,
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """
        Create a standardized error response.

        Args:
            request: The FastAPI request object
            status_code: HTTP status code
            error_type: Type of error for categorization
            message: Human-readable error message
            details: Additional error details

        Returns:
            JSONResponse with standardized error format
        """
        correlation_id = self._correlation_id(request)

        error_response: Dict[str, Any] = {
            "error": {
                "type": error_type,
                "message": message,
                "correlation_id": correlation_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
            }
        }

        if details:
            error_response["error"]["details"] = details

        # 5xx errors are already logged with a traceback
        if status_code < 500:
            self.logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(
            status_code=status_code, content=error_response, headers=headers
        )


def setup_error_handling(
    app: FastAPI, service_name: str, log_level: str = "INFO"
) -> ServiceErrorHandler:
    """
    Convenience function to set up error handling for a service.

    Args:
        app: FastAPI application instance
        service_name: Logger namespace, e.g. ``shop_service``
    """
    error_handler = ServiceErrorHandler(service_name, log_level=log_level)
    error_handler.setup_error_handlers(app)

    error_handler.logger.info(
        "Error handling configured",
        extra={"event_type": "error_handler_setup"},
    )
    return error_handler
