from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from llm_driver.core.errors import GatewayError, TransformError, UpstreamError
from llm_driver.core.settings import GatewaySettings


def get_settings(request: Request) -> GatewaySettings:
    return request.app.state.settings


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TransformError)
    async def handle_transform_error(
        _request: Request,
        exc: TransformError,
    ) -> JSONResponse:
        error_type = "invalid_request_error" if exc.status_code < 500 else "api_error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _error_body(exc.message, error_type, exc.code)},
        )

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(
        _request: Request,
        exc: GatewayError,
    ) -> JSONResponse:
        if exc.status_code == 429:
            error_type = "rate_limit_error"
        elif exc.status_code >= 500:
            error_type = "api_error"
        else:
            error_type = "invalid_request_error"

        message = exc.detail() if isinstance(exc, UpstreamError) else exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _error_body(message, error_type, exc.code)},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        first_error = exc.errors()[0]["msg"] if exc.errors() else "Invalid request"
        return JSONResponse(
            status_code=400,
            content={
                "error": _error_body(first_error, "invalid_request_error", "invalid_request")
            },
        )


def _error_body(message: str, error_type: str, code: str | None) -> dict[str, Any]:
    return {
        "message": message,
        "type": error_type,
        "code": code,
    }
