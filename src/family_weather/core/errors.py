# src/family_weather/core/errors.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class WeatherAppError(Exception):
    """Base error; ``status_code`` and ``error`` become the JSON envelope."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, error: Optional[str] = None, detail: Optional[str] = None) -> None:
        self.error = error or self.error
        self.detail = detail
        super().__init__(self.error if detail is None else f"{self.error}: {detail}")

    def envelope(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.detail:
            body["detail"] = self.detail
        return body


class InputError(WeatherAppError):
    status_code = 400
    error = "Missing or invalid request field(s)"


class UpstreamError(WeatherAppError):
    """Provider or model unreachable. Safe to retry."""

    status_code = 502
    error = "Upstream service error"
    retryable = True


class AIOutputError(WeatherAppError):
    """The model answered, but the answer failed parsing or validation."""

    status_code = 502
    error = "AI output parse/validation error"
    retryable = False

    def __init__(self, error: Optional[str] = None, detail: Optional[str] = None, ai_output: Any = None) -> None:
        super().__init__(error, detail)
        self.ai_output = ai_output

    def envelope(self) -> Dict[str, Any]:
        body = super().envelope()
        if self.ai_output is not None:
            body["ai_output"] = self.ai_output
        return body


class ConfigError(WeatherAppError):
    status_code = 500
    error = "Server misconfigured"


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc or 'body'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(WeatherAppError)
    async def _app_error(request: Request, exc: WeatherAppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("❌ %s %s → %s", request.method, request.url.path, exc)
        else:
            logger.info("⚠️ %s %s → %s", request.method, request.url.path, exc)
        return JSONResponse(exc.envelope(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        detail = _format_validation_errors(exc)
        logger.info("⚠️ %s %s → invalid input: %s", request.method, request.url.path, detail)
        return JSONResponse({"error": InputError.error, "detail": detail}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)
