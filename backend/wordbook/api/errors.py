import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.llm_provider import LLMConfigurationError, LLMTransportError
from ..core.suggestions import SuggestionFormatError

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as a JSON body with an `error` field."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(LLMConfigurationError)
    async def llm_configuration_error(request: Request, exc: LLMConfigurationError):
        logger.error("suggestion service not configured: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc), "kind": "configuration"},
        )

    @app.exception_handler(LLMTransportError)
    async def llm_transport_error(request: Request, exc: LLMTransportError):
        logger.warning("suggestion service unreachable: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc), "kind": "upstream"},
        )

    @app.exception_handler(SuggestionFormatError)
    async def suggestion_format_error(request: Request, exc: SuggestionFormatError):
        logger.warning("unreadable suggestion reply %r: %s", exc.raw, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"could not parse suggestion: {exc}", "kind": "format", "detail": exc.raw},
        )
